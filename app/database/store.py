"""
Storage port shared by every backend adapter.

Backend rows and documents are validated into the record types below at this
seam, so services never see raw payloads. Field names are accepted in either
snake_case (Postgres columns) or camelCase (Firestore documents).
"""

import functools
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.core.exceptions import AppError, ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


def coerce_timestamp(value: Any) -> datetime:
    """Best-effort conversion of a stored timestamp; falls back to now (UTC)."""
    now = datetime.now(timezone.utc)
    try:
        if hasattr(value, "to_datetime"):
            value = value.to_datetime()
        if isinstance(value, datetime):
            result = value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            # JavaScript clients store milliseconds
            seconds = value / 1000 if value > 1e11 else value
            result = datetime.fromtimestamp(seconds, tz=timezone.utc)
        elif isinstance(value, str) and value.strip():
            result = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        else:
            return now
    except (TypeError, ValueError, OverflowError, OSError):
        return now
    if result.tzinfo is None:
        result = result.replace(tzinfo=timezone.utc)
    return result


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Identity(_Record):
    id: str
    email: str


class Credential(_Record):
    email: str
    password_hash: str
    user_id: str

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "Credential":
        # Older documents keep the hash under "password"
        if "passwordHash" not in data and "password_hash" not in data and "password" in data:
            data = {**data, "password_hash": data["password"]}
        return cls.model_validate(data)


class ProfileRecord(_Record):
    id: str
    user_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    github: Optional[str] = None
    linkedin: Optional[str] = None
    skills: List[str] = []
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("skills", mode="before")
    @classmethod
    def _skills_list(cls, value):
        if not isinstance(value, list):
            return []
        return [str(s) for s in value]

    @field_validator("created_at", mode="before")
    @classmethod
    def _created_at(cls, value):
        return coerce_timestamp(value)


class ProjectRecord(_Record):
    id: str
    owner_profile_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("owner_profile_id", "ownerProfileId", "ownerId"),
    )
    title: str = ""
    description: str = ""
    tags: List[str] = []
    status: Optional[str] = None
    max_members: Optional[int] = None
    current_members: Optional[int] = None
    repository_url: Optional[str] = None
    contact_info: Optional[str] = None
    created_at: datetime = Field(default=None, validate_default=True)

    @field_validator("title", "description", mode="before")
    @classmethod
    def _text(cls, value):
        return "" if value is None else str(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_list(cls, value):
        if not isinstance(value, list):
            return []
        return [str(t) for t in value]

    @field_validator("max_members", "current_members", mode="before")
    @classmethod
    def _count(cls, value):
        try:
            return int(value) if value is not None else None
        except (TypeError, ValueError):
            return None

    @field_validator("created_at", mode="before")
    @classmethod
    def _created_at(cls, value):
        return coerce_timestamp(value)


class StoragePort(Protocol):
    """Operations every backend adapter provides."""

    def get_identity_by_email(self, email: str) -> Optional[Identity]:
        ...

    def create_identity(self, email: str, password: str) -> Identity:
        """Create the auth identity; ConflictError when the email is taken."""
        ...

    def delete_identity(self, user_id: str) -> None:
        """Remove the identity together with the credential and profile keyed to it."""
        ...

    def get_credential(self, user_id: str) -> Optional[Credential]:
        ...

    def create_credential(self, credential: Credential) -> None:
        """ConflictError when a credential for the email or user already exists."""
        ...

    def get_profile(self, user_id: str) -> Optional[ProfileRecord]:
        ...

    def get_profile_by_id(self, profile_id: str) -> Optional[ProfileRecord]:
        ...

    def create_profile(self, user_id: str, data: Dict[str, Any]) -> str:
        """Store a profile and return its id; ConflictError when the user already has one."""
        ...

    def update_profile(self, profile_id: str, data: Dict[str, Any]) -> None:
        ...

    def list_profiles(self, limit: int) -> List[ProfileRecord]:
        ...

    def create_project(self, data: Dict[str, Any]) -> str:
        ...

    def list_projects(self) -> List[ProjectRecord]:
        """All projects, newest first."""
        ...

    def get_project(self, project_id: str) -> Optional[ProjectRecord]:
        ...

    def issue_token(self, identity: Identity) -> str:
        ...

    def close(self) -> None:
        ...


def upstream_errors(func):
    """Let AppError through and wrap anything else the backend raises as UpstreamError."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except AppError:
            raise
        except Exception as e:
            logger.error(f"Backend call {func.__name__} failed: {e}")
            raise UpstreamError(str(e)) from e
    return wrapper


def create_store(settings) -> StoragePort:
    """Build the adapter selected by STORAGE_BACKEND. SDK clients are created on first use."""
    backend = (settings.storage_backend or "").strip().lower()
    if backend == "supabase":
        from app.database.supabase_store import SupabaseStore
        return SupabaseStore(settings)
    if backend == "firestore":
        from app.database.firestore_store import FirestoreStore
        return FirestoreStore(settings)
    if backend == "memory":
        from app.database.memory_store import InMemoryStore
        return InMemoryStore(settings)
    raise ConfigurationError(f"Unknown STORAGE_BACKEND: {settings.storage_backend!r}")
