from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from core.database import get_db
from core.auth import get_current_actor
from core.errors import Unauthorized
from core.lifecycle import Actor
from crud import project_crud
from schemas.project_schema import CreatorDashboard, EditorDashboard, EditorStats, ProjectResponse

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def _rows(projects):
    return [ProjectResponse.model_validate(p) for p in projects]


@router.get("/creator", response_model=CreatorDashboard)
def creator_dashboard(db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    if not actor.is_creator:
        raise Unauthorized("Creator dashboard is for creators")
    return CreatorDashboard(
        projects=_rows(project_crud.list_projects_for(db, actor)),
        counts=project_crud.count_by_status(db, actor.id),
    )


@router.get("/editor", response_model=EditorDashboard)
def editor_dashboard(db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    if not actor.is_editor:
        raise Unauthorized("Editor dashboard is for editors")
    return EditorDashboard(
        assigned=_rows(project_crud.list_projects_for(db, actor)),
        available=_rows(project_crud.list_available_projects(db, actor)),
        stats=EditorStats(**project_crud.editor_stats(db, actor.id)),
    )
