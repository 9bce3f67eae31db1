from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from app.schemas.common import PageState

PROJECT_REQUIRED_FIELDS = ("title", "description", "details", "category")


# --- Projects ---
class Project(BaseModel):
    id: Optional[str] = None
    title: str
    description: str
    details: str
    category: str
    tags: List[str] = []
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None


class ProjectDetail(Project):
    state: PageState = "loaded"
    paragraphs: List[str] = []


# Tags are edited as comma separated text
class ProjectForm(BaseModel):
    title: str = ""
    description: str = ""
    details: str = ""
    category: str = ""
    tags: str = ""
    image_url: str = ""


class PortfolioPage(BaseModel):
    state: PageState
    categories: List[str]
    selected: str
    projects: List[Project]
    empty: bool
    empty_message: Optional[str] = None
