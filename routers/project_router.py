from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from core.database import get_db
from core.auth import get_current_actor
from core.lifecycle import Actor, ProjectStatus
from crud import project_crud, rating_crud
from schemas.project_schema import ProjectCreate, ProjectResponse, ProjectUpdate
from schemas.rating_schema import RatingCreate, RatingResponse


router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("/", response_model=list[ProjectResponse])
def list_mine(
    status: ProjectStatus | None = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return project_crud.list_projects_for(db, actor, status=status, skip=skip, limit=limit)


@router.get("/available", response_model=list[ProjectResponse])
def list_available(skip: int = 0, limit: int = 100, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return project_crud.list_available_projects(db, actor, skip=skip, limit=limit)


@router.get("/{project_id}", response_model=ProjectResponse)
def read_one(project_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return project_crud.get_project_for(db, project_id, actor)


@router.post("/", response_model=ProjectResponse, status_code=201)
def create(payload: ProjectCreate, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return project_crud.create_project(db, actor, payload)


@router.patch("/{project_id}", response_model=ProjectResponse)
def update(project_id: str, payload: ProjectUpdate, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return project_crud.update_project(db, project_id, actor, payload)


@router.delete("/{project_id}", status_code=204)
def delete(project_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    project_crud.delete_project(db, project_id, actor)
    return None


@router.post("/{project_id}/submit", response_model=ProjectResponse)
def submit(project_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return project_crud.submit_project(db, project_id, actor)


@router.post("/{project_id}/claim", response_model=ProjectResponse)
def claim(project_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return project_crud.claim_project(db, project_id, actor)


@router.post("/{project_id}/approve", response_model=ProjectResponse)
def approve(project_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return project_crud.approve_project(db, project_id, actor)


@router.post("/{project_id}/cancel", response_model=ProjectResponse)
def cancel(project_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return project_crud.cancel_project(db, project_id, actor)


@router.post("/{project_id}/rating", response_model=RatingResponse, status_code=201)
def rate(project_id: str, payload: RatingCreate, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return rating_crud.rate_editor(db, project_id, actor, payload)


@router.get("/{project_id}/rating", response_model=RatingResponse)
def read_rating(project_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return rating_crud.get_rating(db, project_id, actor)
