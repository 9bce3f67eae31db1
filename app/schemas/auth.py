from pydantic import BaseModel, EmailStr
from typing import Optional


# --- Identity (auth.users) ---
class Identity(BaseModel):
    id: str  # auth.users.id
    email: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    user: Identity
    redirect: str


class SessionCheck(BaseModel):
    authenticated: bool
    redirect: Optional[str] = None
    user: Optional[Identity] = None
