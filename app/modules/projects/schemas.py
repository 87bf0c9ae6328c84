from pydantic import field_validator
from typing import Optional, List, Literal
from datetime import datetime

from app.modules.profiles.schemas import CamelModel

ProjectStatus = Literal["planning", "in-progress", "completed", "looking-for-members"]


class ProjectCreate(CamelModel):
    # title and user_id are checked by the service so that both report one message
    title: Optional[str] = None
    description: Optional[str] = None
    user_id: Optional[str] = None
    status: Optional[ProjectStatus] = None
    tags: Optional[List[str]] = None
    max_members: Optional[int] = None
    current_members: Optional[int] = None
    repository_url: Optional[str] = None
    contact_info: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def empty_status_is_unset(cls, value):
        return value or None


class ProjectCreatedResponse(CamelModel):
    success: bool = True
    message: str


class ProjectResponse(CamelModel):
    id: str
    title: str
    description: str = ""
    author: str
    tags: List[str] = []
    created_at: datetime
    status: str = "planning"
    max_members: Optional[int] = None
    current_members: int = 1
    repository_url: Optional[str] = None
    contact_info: str = ""
