import logging
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from models.project_version import ProjectVersion
from crud import project_crud
from core import lifecycle
from core.config import settings
from core.errors import Conflict, Unauthorized
from core.lifecycle import Action, Actor

logger = logging.getLogger(__name__)


def _next_version_number(db: Session, project_id: str) -> int:
    current = (
        db.query(func.max(ProjectVersion.version_number))
        .filter(ProjectVersion.project_id == project_id)
        .scalar()
    )
    return (current or 0) + 1


def list_versions(db: Session, project_id: str, actor: Actor):
    proj = project_crud.require_project(db, project_id)
    if not lifecycle.is_participant(proj, actor):
        raise Unauthorized("Not allowed to view versions of this project")
    return (
        db.query(ProjectVersion)
        .filter(ProjectVersion.project_id == project_id)
        .order_by(ProjectVersion.version_number)
        .all()
    )


def append_version(db: Session, project_id: str, actor: Actor, video_url: str, editor_notes: str | None = None):
    """Append the next version and move the project status in one transaction.

    The status compare-and-swap and the version insert commit together, so a
    project approved or cancelled in the meantime never gains a version. A
    number collision on (project_id, version_number) retries from a fresh read.
    """
    for attempt in range(1, settings.VERSION_NUMBER_RETRIES + 1):
        proj = project_crud.require_project(db, project_id)
        lifecycle.authorize(proj, actor, Action.SUBMIT_VERSION)
        number = _next_version_number(db, project_id)
        target = lifecycle.version_target(
            lifecycle.current_status(proj), number, settings.FIRST_VERSION_ENTERS_REVISION
        )
        swapped = project_crud.compare_and_swap(
            db, proj, expected_statuses=lifecycle.ACTIVE_STATUSES, status=target
        )
        if not swapped:
            project_crud.raise_lost_race(db, project_id, actor, Action.SUBMIT_VERSION)

        version = ProjectVersion(
            project_id=project_id,
            version_number=number,
            video_url=str(video_url),
            editor_notes=editor_notes,
        )
        db.add(version)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(
                "Version number %s already taken on project %s (attempt %s)",
                number, project_id, attempt,
            )
            continue
        db.refresh(version)
        logger.info("Project %s version %s submitted by %s", project_id, number, actor.id)
        return version
    raise Conflict("Could not assign a version number; refetch and retry")
