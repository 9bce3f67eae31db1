from pydantic import BaseModel
from typing import List, Literal, Optional
from datetime import datetime

from app.schemas.common import PageState

PROFILE_REQUIRED_FIELDS = ("name", "status", "bio")

Role = Literal["owner", "member"]


# --- Profiles (about section) ---
class Profile(BaseModel):
    id: Optional[str] = None
    name: str
    status: str
    bio: str
    current_project: Optional[str] = ""
    email: Optional[str] = ""
    phone: Optional[str] = ""
    location: Optional[str] = ""
    github: Optional[str] = ""
    linkedin: Optional[str] = ""
    profile_image: Optional[str] = ""
    skills: List[str] = []
    education: Optional[str] = ""
    experience: Optional[str] = ""
    role: Role = "member"
    is_active: bool = True
    user_id: Optional[str] = None  # auth.users.id of the owning user
    created_at: Optional[datetime] = None


class ProfileCard(Profile):
    badge: Optional[str] = None


# Skills are edited as comma separated text. role, is_active and user_id are
# only honoured for the super-admin.
class ProfileForm(BaseModel):
    name: str = ""
    status: str = ""
    bio: str = ""
    current_project: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    github: str = ""
    linkedin: str = ""
    profile_image: str = ""
    skills: str = ""
    education: str = ""
    experience: str = ""
    role: Optional[Role] = None
    is_active: Optional[bool] = None
    user_id: Optional[str] = None


class AboutPage(BaseModel):
    state: PageState
    profiles: List[ProfileCard]
    empty: bool


DEFAULT_PROFILE = ProfileCard(
    name="Your Name",
    status="Student",
    bio="Add your bio in the admin panel.",
    current_project="Your current project",
    email="your.email@example.com",
    location="Your location",
    skills=["Python", "React", "Machine Learning"],
    education="Your education details",
    experience="Your experience details",
)


class ManagedProfile(ProfileCard):
    can_edit: bool = False
