import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from models.profile import Profile
from schemas.profile_schema import ProfileCreate, ProfileUpdate
from core.errors import Conflict, NotFound

logger = logging.getLogger(__name__)


def get_profile(db: Session, user_id: str):
    return db.query(Profile).filter(Profile.id == user_id).first()


def create_profile(db: Session, user_id: str, payload: ProfileCreate):
    if get_profile(db, user_id):
        raise Conflict("Profile already exists; role cannot be changed")
    profile = Profile(
        id=user_id,
        role=payload.role,
        bio=payload.bio,
        skillset=payload.skillset,
        portfolio_urls=payload.portfolio_urls,
    )
    db.add(profile)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Profile already exists; role cannot be changed")
    db.refresh(profile)
    logger.info("Profile %s created with role %s", user_id, payload.role.value)
    return profile


def update_profile(db: Session, user_id: str, payload: ProfileUpdate):
    profile = get_profile(db, user_id)
    if not profile:
        raise NotFound("Profile not found")
    if payload.bio is not None:
        profile.bio = payload.bio
    if payload.skillset is not None:
        profile.skillset = payload.skillset
    if payload.portfolio_urls is not None:
        profile.portfolio_urls = payload.portfolio_urls
    if payload.preferences is not None:
        profile.preferences = payload.preferences
    db.commit()
    db.refresh(profile)
    return profile
