import uuid
from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session
from models.session import Session as SessionModel
from core.config import settings


def get_session_by_token(db: Session, token: str):
    return db.query(SessionModel).filter(SessionModel.token == token).first()


def issue_session(db: Session, user_id: str, ip_address: str | None = None, user_agent: str | None = None):
    s = SessionModel(
        user_id=user_id,
        token=uuid.uuid4().hex,
        expires_at=datetime.now(timezone.utc) + timedelta(days=settings.SESSION_TTL_DAYS),
        ip_address=ip_address,
        user_agent=user_agent,
    )
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


def delete_session_by_token(db: Session, token: str) -> bool:
    s = get_session_by_token(db, token)
    if not s:
        return False
    db.delete(s)
    db.commit()
    return True


def purge_expired_sessions(db: Session, user_id: str) -> int:
    now = datetime.now(timezone.utc)
    count = (
        db.query(SessionModel)
        .filter(SessionModel.user_id == user_id, SessionModel.expires_at < now)
        .delete(synchronize_session=False)
    )
    db.commit()
    return count
