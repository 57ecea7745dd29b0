from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from core.database import get_db
from core.auth import get_current_actor
from core.lifecycle import Actor
from crud.version_crud import append_version, list_versions
from schemas.version_schema import VersionCreate, VersionResponse

router = APIRouter(prefix="/projects/{project_id}/versions", tags=["Versions"])


@router.get("/", response_model=list[VersionResponse])
def list_all(project_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return list_versions(db, project_id, actor)


@router.post("/", response_model=VersionResponse, status_code=201)
def create(project_id: str, payload: VersionCreate, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    # version_number is assigned server-side
    return append_version(db, project_id, actor, str(payload.video_url), payload.editor_notes)
