import itertools
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.core.exceptions import ConflictError
from app.core.security import create_access_token
from app.database.store import Credential, Identity, ProfileRecord, ProjectRecord


class InMemoryStore:
    """Simple in-memory backend for development and tests.

    Every read and write holds ``_lock``; routes run in a threadpool.
    """

    def __init__(self, settings):
        self.settings = settings
        self._lock = threading.Lock()
        self._sequence = itertools.count()
        self.reset()

    def reset(self) -> None:
        self.identities: Dict[str, Identity] = {}
        self.credentials: Dict[str, Credential] = {}
        self.profiles: Dict[str, Dict[str, Any]] = {}
        self.projects: Dict[str, Dict[str, Any]] = {}

    def close(self) -> None:
        pass

    def get_identity_by_email(self, email: str) -> Optional[Identity]:
        with self._lock:
            return self._identity_for(email)

    def _identity_for(self, email: str) -> Optional[Identity]:
        # Caller holds the lock
        wanted = email.lower()
        for identity in self.identities.values():
            if identity.email.lower() == wanted:
                return identity
        return None

    def create_identity(self, email: str, password: str) -> Identity:
        with self._lock:
            if self._identity_for(email):
                raise ConflictError("User with this email already exists")
            identity = Identity(id=str(uuid.uuid4()), email=email)
            self.identities[identity.id] = identity
            return identity

    def delete_identity(self, user_id: str) -> None:
        with self._lock:
            self.identities.pop(user_id, None)
            self.credentials.pop(user_id, None)
            for profile_id in [pid for pid, row in self.profiles.items() if row["user_id"] == user_id]:
                del self.profiles[profile_id]

    def get_credential(self, user_id: str) -> Optional[Credential]:
        with self._lock:
            return self.credentials.get(user_id)

    def create_credential(self, credential: Credential) -> None:
        with self._lock:
            taken = any(c.email.lower() == credential.email.lower() for c in self.credentials.values())
            if credential.user_id in self.credentials or taken:
                raise ConflictError("User with this email already exists")
            self.credentials[credential.user_id] = credential

    def get_profile(self, user_id: str) -> Optional[ProfileRecord]:
        with self._lock:
            row = next((dict(r) for r in self.profiles.values() if r["user_id"] == user_id), None)
        return ProfileRecord.model_validate(row) if row else None

    def get_profile_by_id(self, profile_id: str) -> Optional[ProfileRecord]:
        with self._lock:
            row = self.profiles.get(profile_id)
            row = dict(row) if row else None
        return ProfileRecord.model_validate(row) if row else None

    def create_profile(self, user_id: str, data: Dict[str, Any]) -> str:
        with self._lock:
            if any(row["user_id"] == user_id for row in self.profiles.values()):
                raise ConflictError("Profile already exists")
            profile_id = str(uuid.uuid4())
            self.profiles[profile_id] = {
                **data,
                "id": profile_id,
                "user_id": user_id,
                "created_at": datetime.now(timezone.utc),
            }
            return profile_id

    def update_profile(self, profile_id: str, data: Dict[str, Any]) -> None:
        with self._lock:
            if profile_id in self.profiles:
                self.profiles[profile_id].update(data)

    def list_profiles(self, limit: int) -> List[ProfileRecord]:
        with self._lock:
            rows = [dict(row) for row in self.profiles.values()][:limit]
        return [ProfileRecord.model_validate(row) for row in rows]

    def create_project(self, data: Dict[str, Any]) -> str:
        with self._lock:
            project_id = str(uuid.uuid4())
            self.projects[project_id] = {
                **data,
                "id": project_id,
                "created_at": data.get("created_at") or datetime.now(timezone.utc),
                "_seq": next(self._sequence),
            }
            return project_id

    def list_projects(self) -> List[ProjectRecord]:
        with self._lock:
            rows = [dict(row) for row in self.projects.values()]
        records = [(row["_seq"], ProjectRecord.model_validate(row)) for row in rows]
        records.sort(key=lambda pair: (pair[1].created_at, pair[0]), reverse=True)
        return [record for _, record in records]

    def get_project(self, project_id: str) -> Optional[ProjectRecord]:
        with self._lock:
            row = self.projects.get(project_id)
            row = dict(row) if row else None
        return ProjectRecord.model_validate(row) if row else None

    def issue_token(self, identity: Identity) -> str:
        return create_access_token(
            identity.id,
            self.settings.jwt_secret,
            algorithm=self.settings.jwt_algorithm,
            expires_in=self.settings.jwt_expires_in,
            extra_claims={"email": identity.email},
        )
