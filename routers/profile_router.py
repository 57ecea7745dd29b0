from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from core.auth import get_current_user
from core.database import get_db
from core.lifecycle import Role
from crud.profile_crud import create_profile, get_profile, update_profile
from crud.rating_crud import editor_average
from schemas.profile_schema import ProfileCreate, ProfileResponse, ProfileUpdate

router = APIRouter(prefix="/profiles", tags=["Profiles"])


def _with_rating(db: Session, profile) -> ProfileResponse:
    resp = ProfileResponse.model_validate(profile)
    if profile.role == Role.EDITOR:
        resp.average_rating = editor_average(db, profile.id)
    return resp


@router.post("/", response_model=ProfileResponse, status_code=201)
def create_mine(payload: ProfileCreate, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return create_profile(db, current_user.id, payload)


@router.get("/me", response_model=ProfileResponse)
def read_mine(db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    profile = get_profile(db, current_user.id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return _with_rating(db, profile)


@router.patch("/me", response_model=ProfileResponse)
def update_mine(payload: ProfileUpdate, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return _with_rating(db, update_profile(db, current_user.id, payload))


@router.get("/{user_id}", response_model=ProfileResponse)
def read_one(user_id: str, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    profile = get_profile(db, user_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return _with_rating(db, profile)
