import logging
from sqlalchemy.orm import Session
from models.comment import Comment
from crud import project_crud
from core import lifecycle
from core.errors import Unauthorized, ValidationError
from core.lifecycle import Action, Actor

logger = logging.getLogger(__name__)


def list_comments(db: Session, project_id: str, actor: Actor):
    proj = project_crud.require_project(db, project_id)
    if not lifecycle.is_participant(proj, actor):
        raise Unauthorized("Not allowed to view comments on this project")
    return (
        db.query(Comment)
        .filter(Comment.project_id == project_id)
        .order_by(Comment.created_at, Comment.id)
        .all()
    )


def append_comment(db: Session, project_id: str, actor: Actor, content: str, timestamp: float | None = None):
    """Append to the thread while the project is still open.

    The insert commits together with a status-conditioned touch of the
    project row, so a comment racing an approve or cancel is rejected.
    """
    proj = project_crud.require_project(db, project_id)
    lifecycle.authorize(proj, actor, Action.COMMENT)
    text = (content or "").strip()
    if not text:
        raise ValidationError("Comment content must not be empty")
    if timestamp is not None and timestamp < 0:
        raise ValidationError("timestamp must be zero or positive")

    # The owner may comment across a concurrent claim; the editor must still be assigned
    swapped = project_crud.compare_and_swap(
        db,
        proj,
        expected_statuses=lifecycle.NON_TERMINAL_STATUSES,
        match_editor=not lifecycle.is_owner(proj, actor),
    )
    if not swapped:
        project_crud.raise_lost_race(db, project_id, actor, Action.COMMENT)

    comment = Comment(project_id=project_id, user_id=actor.id, content=text, timestamp=timestamp)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.debug("Comment %s added to project %s by %s", comment.id, project_id, actor.id)
    return comment
