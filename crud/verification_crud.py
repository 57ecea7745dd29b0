import uuid
from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session
from models.verification import Verification

OAUTH_STATE = "oauth_state"
OAUTH_STATE_TTL = timedelta(minutes=10)


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def purge_expired(db: Session) -> int:
    return (
        db.query(Verification)
        .filter(Verification.expires_at < datetime.now(timezone.utc))
        .delete(synchronize_session=False)
    )


def issue_oauth_state(db: Session, ttl: timedelta = OAUTH_STATE_TTL) -> str:
    purge_expired(db)
    state = uuid.uuid4().hex
    db.add(Verification(identifier=OAUTH_STATE, value=state, expires_at=datetime.now(timezone.utc) + ttl))
    db.commit()
    return state


def get_by_identifier_value(db: Session, identifier: str, value: str):
    return (
        db.query(Verification)
        .filter(Verification.identifier == identifier, Verification.value == value)
        .first()
    )


def consume_oauth_state(db: Session, state: str) -> bool:
    """Delete the state row and report whether it existed and was still fresh."""
    ver = get_by_identifier_value(db, OAUTH_STATE, state)
    if not ver:
        return False
    fresh = _aware(ver.expires_at) >= datetime.now(timezone.utc)
    # One-time use, even when expired
    db.delete(ver)
    db.commit()
    return fresh
