"""Project lifecycle rules.

Owns the status enum, the transition table and the one authorization check
that every project mutation goes through. Nothing here touches the database:
callers pass in the current project snapshot and an explicit ``Actor``, and
the crud layer applies the returned decision with a conditional update.
"""
import enum
from dataclasses import dataclass
from typing import Optional

from core.errors import AlreadyClaimed, InvalidState, Unauthorized, ValidationError


class Role(str, enum.Enum):
    CREATOR = "creator"
    EDITOR = "editor"


class ProjectStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    IN_PROGRESS = "in_progress"
    IN_REVISION = "in_revision"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ReelType(str, enum.Enum):
    INSTAGRAM = "instagram"
    YOUTUBE_SHORTS = "youtube_shorts"
    TIKTOK = "tiktok"


class PricingTier(str, enum.Enum):
    BASIC = "basic"
    PRO = "pro"
    PREMIUM = "premium"
    CUSTOM = "custom"


class Action(str, enum.Enum):
    SUBMIT = "submit"
    CLAIM = "claim"
    SUBMIT_VERSION = "submit_version"
    APPROVE = "approve"
    CANCEL = "cancel"
    DELETE = "delete"
    EDIT = "edit_fields"
    COMMENT = "comment"
    RATE = "rate"


TERMINAL_STATUSES = frozenset({ProjectStatus.COMPLETED, ProjectStatus.CANCELLED})
ACTIVE_STATUSES = frozenset({ProjectStatus.IN_PROGRESS, ProjectStatus.IN_REVISION})
NON_TERMINAL_STATUSES = frozenset(set(ProjectStatus) - TERMINAL_STATUSES)

# Must be non-empty before a draft can be submitted
REQUIRED_FOR_SUBMIT = ("title", "description", "raw_footage_url", "editing_instructions")

# Who may request an action
OWNER = "owner"
ANY_EDITOR = "any_editor"
ASSIGNED_EDITOR = "assigned_editor"
PARTICIPANT = "participant"


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, passed explicitly into every operation."""

    id: str
    role: Role

    @property
    def is_creator(self) -> bool:
        return self.role == Role.CREATOR

    @property
    def is_editor(self) -> bool:
        return self.role == Role.EDITOR


@dataclass(frozen=True)
class Rule:
    actor: str
    sources: frozenset
    # None means the status does not change (or the row goes away, for delete)
    target: Optional[ProjectStatus]


RULES = {
    Action.SUBMIT: Rule(OWNER, frozenset({ProjectStatus.DRAFT}), ProjectStatus.SUBMITTED),
    Action.CLAIM: Rule(ANY_EDITOR, frozenset({ProjectStatus.SUBMITTED}), ProjectStatus.IN_PROGRESS),
    Action.SUBMIT_VERSION: Rule(ASSIGNED_EDITOR, ACTIVE_STATUSES, ProjectStatus.IN_REVISION),
    Action.APPROVE: Rule(OWNER, frozenset({ProjectStatus.IN_REVISION}), ProjectStatus.COMPLETED),
    Action.CANCEL: Rule(
        OWNER,
        frozenset({ProjectStatus.SUBMITTED, ProjectStatus.IN_PROGRESS, ProjectStatus.IN_REVISION}),
        ProjectStatus.CANCELLED,
    ),
    Action.DELETE: Rule(OWNER, frozenset({ProjectStatus.DRAFT, ProjectStatus.CANCELLED}), None),
    Action.EDIT: Rule(OWNER, frozenset({ProjectStatus.DRAFT, ProjectStatus.SUBMITTED}), None),
    Action.COMMENT: Rule(PARTICIPANT, NON_TERMINAL_STATUSES, None),
    Action.RATE: Rule(OWNER, frozenset({ProjectStatus.COMPLETED}), None),
}


def current_status(project) -> ProjectStatus:
    return ProjectStatus(project.status)


def is_owner(project, actor: Actor) -> bool:
    return project.creator_id == actor.id


def is_assigned_editor(project, actor: Actor) -> bool:
    return project.editor_id is not None and project.editor_id == actor.id


def is_participant(project, actor: Actor) -> bool:
    return is_owner(project, actor) or is_assigned_editor(project, actor)


def _actor_allowed(rule: Rule, project, actor: Actor) -> bool:
    if rule.actor == OWNER:
        return actor.is_creator and is_owner(project, actor)
    if rule.actor == ANY_EDITOR:
        return actor.is_editor and not is_owner(project, actor)
    if rule.actor == ASSIGNED_EDITOR:
        return actor.is_editor and is_assigned_editor(project, actor)
    if rule.actor == PARTICIPANT:
        return is_participant(project, actor)
    return False


def missing_submission_fields(project) -> list[str]:
    missing = []
    for field in REQUIRED_FOR_SUBMIT:
        value = getattr(project, field, None)
        if value is None or not str(value).strip():
            missing.append(field)
    return missing


def authorize(project, actor: Actor, action: Action) -> Rule:
    """Check ``action`` against the transition table and return its rule.

    Actor is checked before state, so an outsider always gets
    ``Unauthorized`` whatever the project status is.
    """
    rule = RULES[action]
    if not _actor_allowed(rule, project, actor):
        raise Unauthorized(f"Not allowed to {action.value} this project")

    if action == Action.CLAIM and project.editor_id is not None:
        raise AlreadyClaimed()

    status = current_status(project)
    if status not in rule.sources:
        raise InvalidState(f"Cannot {action.value} a project that is {status.value}")

    if action == Action.SUBMIT:
        missing = missing_submission_fields(project)
        if missing:
            raise ValidationError("Missing required fields: " + ", ".join(missing))
    return rule


def version_target(status: ProjectStatus, version_number: int, first_enters_revision: bool = True) -> ProjectStatus:
    """Status a project moves to when version ``version_number`` is appended."""
    if status == ProjectStatus.IN_REVISION or version_number > 1 or first_enters_revision:
        return ProjectStatus.IN_REVISION
    return ProjectStatus.IN_PROGRESS


def can_view(project, actor: Actor) -> bool:
    if is_participant(project, actor):
        return True
    # Editors browse the marketplace of open projects
    return (
        actor.is_editor
        and project.editor_id is None
        and current_status(project) == ProjectStatus.SUBMITTED
    )


def check_custom_price(pricing_tier, custom_price) -> None:
    tier = PricingTier(pricing_tier)
    if tier == PricingTier.CUSTOM and custom_price is None:
        raise ValidationError("custom_price is required when pricing_tier is custom")
    if tier != PricingTier.CUSTOM and custom_price is not None:
        raise ValidationError("custom_price is only allowed when pricing_tier is custom")
