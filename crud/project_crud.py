import logging
from sqlalchemy import desc, func, update
from sqlalchemy.orm import Session
from models.project import Project
from models.base import utcnow
from schemas.project_schema import ProjectCreate, ProjectUpdate
from core import lifecycle
from core.errors import AlreadyClaimed, Conflict, MarketplaceError, NotFound, Unauthorized
from core.lifecycle import Action, Actor, ProjectStatus, PricingTier

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "title",
    "description",
    "raw_footage_url",
    "editing_instructions",
    "reel_type",
    "pricing_tier",
    "custom_price",
    "ai_brief",
)


def get_project(db: Session, project_id: str):
    return db.query(Project).filter(Project.id == project_id).first()


def require_project(db: Session, project_id: str):
    proj = get_project(db, project_id)
    if not proj:
        raise NotFound("Project not found")
    return proj


def compare_and_swap(db: Session, snapshot, expected_statuses=None, match_editor: bool = True, **values) -> bool:
    """Apply ``values`` only if the row still matches what ``snapshot`` saw.

    Matches on status (or any of ``expected_statuses``) and, unless
    ``match_editor`` is off, on the editor reference, so two writers that
    read the same row cannot both win. Leaves the transaction open; the
    caller commits.
    """
    statuses = expected_statuses or (lifecycle.current_status(snapshot),)
    stmt = update(Project).where(Project.id == snapshot.id, Project.status.in_(list(statuses)))
    if match_editor:
        if snapshot.editor_id is None:
            stmt = stmt.where(Project.editor_id.is_(None))
        else:
            stmt = stmt.where(Project.editor_id == snapshot.editor_id)
    values.setdefault("updated_at", utcnow())
    result = db.execute(stmt.values(**values).execution_options(synchronize_session=False))
    return result.rowcount == 1


def raise_lost_race(db: Session, project_id: str, actor: Actor, action: Action):
    """A conditional write matched nothing: explain why against fresh state."""
    db.rollback()
    fresh = require_project(db, project_id)
    logger.warning(
        "Lost race on project %s: %s by %s (now %s)",
        project_id, action.value, actor.id, lifecycle.current_status(fresh).value,
    )
    lifecycle.authorize(fresh, actor, action)
    raise Conflict()


def _apply(db: Session, proj, actor: Actor, action: Action, **values):
    project_id = proj.id
    rule = lifecycle.authorize(proj, actor, action)
    before = lifecycle.current_status(proj)
    if not compare_and_swap(db, proj, status=rule.target, **values):
        raise_lost_race(db, project_id, actor, action)
    db.commit()
    logger.info(
        "Project %s %s -> %s (%s by %s)",
        project_id, before.value, rule.target.value, action.value, actor.id,
    )
    return require_project(db, project_id)


def _transition(db: Session, project_id: str, actor: Actor, action: Action):
    return _apply(db, require_project(db, project_id), actor, action)


def list_projects_for(db: Session, actor: Actor, status: ProjectStatus | None = None, skip: int = 0, limit: int = 100):
    q = db.query(Project)
    if actor.is_creator:
        q = q.filter(Project.creator_id == actor.id)
    else:
        q = q.filter(Project.editor_id == actor.id)
    if status is not None:
        q = q.filter(Project.status == status)
    return q.order_by(desc(Project.updated_at)).offset(skip).limit(limit).all()


def list_available_projects(db: Session, actor: Actor, skip: int = 0, limit: int = 100):
    if not actor.is_editor:
        raise Unauthorized("Only editors can browse available projects")
    return (
        db.query(Project)
        .filter(Project.status == ProjectStatus.SUBMITTED, Project.editor_id.is_(None))
        .order_by(desc(Project.created_at))
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_project_for(db: Session, project_id: str, actor: Actor):
    proj = require_project(db, project_id)
    if not lifecycle.can_view(proj, actor):
        raise Unauthorized("Not allowed to view this project")
    return proj


def count_by_status(db: Session, creator_id: str) -> dict[str, int]:
    rows = (
        db.query(Project.status, func.count(Project.id))
        .filter(Project.creator_id == creator_id)
        .group_by(Project.status)
        .all()
    )
    counts = {status.value: 0 for status in ProjectStatus}
    for status, n in rows:
        counts[ProjectStatus(status).value] = n
    return counts


def editor_stats(db: Session, editor_id: str) -> dict[str, int]:
    rows = (
        db.query(Project.status, func.count(Project.id))
        .filter(Project.editor_id == editor_id)
        .group_by(Project.status)
        .all()
    )
    by_status = {ProjectStatus(status): n for status, n in rows}
    return {
        "assigned": sum(by_status.values()),
        "in_progress": sum(by_status.get(s, 0) for s in lifecycle.ACTIVE_STATUSES),
        "completed": by_status.get(ProjectStatus.COMPLETED, 0),
    }


def create_project(db: Session, actor: Actor, payload: ProjectCreate):
    if not actor.is_creator:
        raise Unauthorized("Only creators can create projects")
    lifecycle.check_custom_price(payload.pricing_tier, payload.custom_price)
    proj = Project(
        creator_id=actor.id,
        title=payload.title,
        description=payload.description,
        raw_footage_url=str(payload.raw_footage_url) if payload.raw_footage_url else None,
        editing_instructions=payload.editing_instructions,
        reel_type=payload.reel_type,
        pricing_tier=payload.pricing_tier,
        custom_price=payload.custom_price,
        ai_brief=payload.ai_brief,
        status=ProjectStatus.DRAFT,
    )
    db.add(proj)
    db.commit()
    db.refresh(proj)
    logger.info("Project %s created by %s", proj.id, actor.id)
    return proj


def update_project(db: Session, project_id: str, actor: Actor, payload: ProjectUpdate):
    proj = require_project(db, project_id)
    lifecycle.authorize(proj, actor, Action.EDIT)

    changes = {}
    for field in EDITABLE_FIELDS:
        value = getattr(payload, field)
        if value is not None:
            changes[field] = str(value) if field == "raw_footage_url" else value

    tier = PricingTier(changes.get("pricing_tier", proj.pricing_tier))
    if tier != PricingTier.CUSTOM and "custom_price" not in changes:
        # Leaving the custom tier drops the stale price
        changes["custom_price"] = None
    price = changes.get("custom_price", proj.custom_price)
    lifecycle.check_custom_price(tier, price)

    if not compare_and_swap(db, proj, **changes):
        raise_lost_race(db, project_id, actor, Action.EDIT)
    db.commit()
    return require_project(db, project_id)


def submit_project(db: Session, project_id: str, actor: Actor):
    return _transition(db, project_id, actor, Action.SUBMIT)


def claim_project(db: Session, project_id: str, actor: Actor):
    proj = require_project(db, project_id)
    if lifecycle.is_assigned_editor(proj, actor):
        # Retried claim that already went through
        return proj
    try:
        return _apply(db, proj, actor, Action.CLAIM, editor_id=actor.id)
    except AlreadyClaimed:
        # Our own earlier claim can win the race against this retry
        fresh = require_project(db, project_id)
        if lifecycle.is_assigned_editor(fresh, actor):
            return fresh
        raise


def approve_project(db: Session, project_id: str, actor: Actor):
    return _transition(db, project_id, actor, Action.APPROVE)


def cancel_project(db: Session, project_id: str, actor: Actor):
    return _transition(db, project_id, actor, Action.CANCEL)


def delete_project(db: Session, project_id: str, actor: Actor) -> None:
    proj = db.query(Project).filter(Project.id == project_id).with_for_update().first()
    if not proj:
        raise NotFound("Project not found")
    try:
        lifecycle.authorize(proj, actor, Action.DELETE)
    except MarketplaceError:
        db.rollback()
        raise
    db.delete(proj)
    db.commit()
    logger.info("Project %s deleted by %s", project_id, actor.id)
