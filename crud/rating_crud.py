from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from models.rating import EditorRating
from schemas.rating_schema import RatingCreate
from crud import project_crud
from core import lifecycle
from core.errors import Conflict, NotFound, Unauthorized
from core.lifecycle import Action, Actor


def get_rating(db: Session, project_id: str, actor: Actor):
    proj = project_crud.require_project(db, project_id)
    if not lifecycle.is_participant(proj, actor):
        raise Unauthorized("Not allowed to view this rating")
    rating = db.query(EditorRating).filter(EditorRating.project_id == project_id).first()
    if not rating:
        raise NotFound("Project has not been rated")
    return rating


def rate_editor(db: Session, project_id: str, actor: Actor, payload: RatingCreate):
    proj = project_crud.require_project(db, project_id)
    lifecycle.authorize(proj, actor, Action.RATE)
    rating = EditorRating(
        project_id=project_id,
        editor_id=proj.editor_id,
        rating=payload.rating,
        review=payload.review,
    )
    db.add(rating)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Project has already been rated")
    db.refresh(rating)
    return rating


def editor_average(db: Session, editor_id: str) -> float | None:
    rows = db.query(EditorRating.rating).filter(EditorRating.editor_id == editor_id).all()
    if not rows:
        return None
    return round(sum(r for (r,) in rows) / len(rows), 2)
