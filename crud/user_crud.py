from sqlalchemy.orm import Session
from models.base import utcnow
from models.user import User
from schemas.user_schema import UserCreate


def get_user(db: Session, user_id: str):
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, payload: UserCreate, email_verified: bool = False):
    user = User(email=payload.email, name=payload.name, image=payload.image, email_verified=email_verified)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def upsert_user(db: Session, payload: UserCreate, email_verified: bool = False):
    """Return the user for ``payload.email``, creating it on first login.

    Name and picture follow the provider; a verified email stays verified.
    """
    user = get_user_by_email(db, payload.email)
    if not user:
        user = create_user(db, payload, email_verified=email_verified)
    if payload.name:
        user.name = payload.name
    if payload.image:
        user.image = payload.image
    if email_verified:
        user.email_verified = True
    user.last_login_at = utcnow()
    db.commit()
    db.refresh(user)
    return user
