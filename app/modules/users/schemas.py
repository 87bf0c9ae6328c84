from typing import Optional, List

from app.modules.profiles.schemas import CamelModel


class UserSearchResult(CamelModel):
    id: str
    user_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    avatar: Optional[str] = None
    skills: List[str] = []
