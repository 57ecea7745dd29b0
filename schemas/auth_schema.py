from datetime import datetime
from pydantic import BaseModel
from schemas.user_schema import MeResponse


class GoogleLoginRequest(BaseModel):
    token: str


class AuthTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: MeResponse


class LoginUrlResponse(BaseModel):
    url: str
