from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from core.database import get_db
from core.auth import get_current_actor
from core.lifecycle import Actor
from crud.comment_crud import append_comment, list_comments
from schemas.comment_schema import CommentCreate, CommentResponse

router = APIRouter(prefix="/projects/{project_id}/comments", tags=["Comments"])


@router.get("/", response_model=list[CommentResponse])
def list_all(project_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return list_comments(db, project_id, actor)


@router.post("/", response_model=CommentResponse, status_code=201)
def create(project_id: str, payload: CommentCreate, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return append_comment(db, project_id, actor, payload.content, payload.timestamp)
