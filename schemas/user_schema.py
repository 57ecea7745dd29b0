from pydantic import BaseModel
from core.lifecycle import Role


class UserBase(BaseModel):
    email: str
    name: str | None = None
    image: str | None = None


class UserCreate(UserBase):
    pass


class UserResponse(UserBase):
    id: str
    email_verified: bool

    model_config = {
        "from_attributes": True,
    }


class MeResponse(UserResponse):
    role: Role | None = None
