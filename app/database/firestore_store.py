"""
Firebase adapter: identities in Firebase Auth, records in Firestore.

Collections:
- credentials/{userId}: {email, passwordHash, userId}
- profiles/{userId}: {userId, firstName, lastName, ..., createdAt}
- projects/{autoId}: {ownerProfileId, title, ..., createdAt}

Keying credentials and profiles by user id makes ``create()`` the uniqueness
check: a second create for the same user fails with AlreadyExists.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

import firebase_admin
from firebase_admin import auth, credentials, firestore
from google.api_core.exceptions import AlreadyExists
from pydantic.alias_generators import to_camel

from app.core.exceptions import ConflictError
from app.database.store import (
    Credential, Identity, ProfileRecord, ProjectRecord, upstream_errors
)

logger = logging.getLogger(__name__)

CREDENTIALS_COLLECTION = "credentials"
PROFILES_COLLECTION = "profiles"
PROJECTS_COLLECTION = "projects"


def _to_document(data: Dict[str, Any]) -> Dict[str, Any]:
    return {to_camel(key): value for key, value in data.items()}


class FirestoreStore:
    def __init__(self, settings):
        self.settings = settings
        self._app = None
        self._db = None

    @property
    def app(self):
        if self._app is None:
            self.settings.require("firebase_project_id", "firebase_client_email", "firebase_private_key")
            cert = credentials.Certificate({
                "type": "service_account",
                "project_id": self.settings.firebase_project_id,
                "client_email": self.settings.firebase_client_email,
                "private_key": self.settings.get_firebase_private_key(),
                "token_uri": "https://oauth2.googleapis.com/token",
            })
            # Named app so several stores (e.g. in tests) never share the default app
            self._app = firebase_admin.initialize_app(
                cert, name=f"{self.settings.app_name}-{uuid.uuid4().hex[:8]}"
            )
            logger.info("Firebase admin initialized for project %s", self.settings.firebase_project_id)
        return self._app

    @property
    def db(self):
        if self._db is None:
            self._db = firestore.client(app=self.app)
        return self._db

    def close(self) -> None:
        if self._app is not None:
            firebase_admin.delete_app(self._app)
        self._app = None
        self._db = None

    @upstream_errors
    def get_identity_by_email(self, email: str) -> Optional[Identity]:
        try:
            user = auth.get_user_by_email(email, app=self.app)
        except auth.UserNotFoundError:
            return None
        return Identity(id=user.uid, email=user.email or email)

    @upstream_errors
    def create_identity(self, email: str, password: str) -> Identity:
        try:
            user = auth.create_user(email=email, password=password, app=self.app)
        except auth.EmailAlreadyExistsError:
            raise ConflictError("User with this email already exists")
        return Identity(id=user.uid, email=user.email or email)

    @upstream_errors
    def delete_identity(self, user_id: str) -> None:
        self.db.collection(PROFILES_COLLECTION).document(user_id).delete()
        self.db.collection(CREDENTIALS_COLLECTION).document(user_id).delete()
        auth.delete_user(user_id, app=self.app)

    @upstream_errors
    def get_credential(self, user_id: str) -> Optional[Credential]:
        snapshot = self.db.collection(CREDENTIALS_COLLECTION).document(user_id).get()
        if not snapshot.exists:
            return None
        return Credential.from_document(snapshot.to_dict())

    @upstream_errors
    def create_credential(self, credential: Credential) -> None:
        try:
            self.db.collection(CREDENTIALS_COLLECTION).document(credential.user_id).create(
                credential.model_dump(by_alias=True)
            )
        except AlreadyExists:
            raise ConflictError("User with this email already exists")

    @upstream_errors
    def get_profile(self, user_id: str) -> Optional[ProfileRecord]:
        return self.get_profile_by_id(user_id)

    @upstream_errors
    def get_profile_by_id(self, profile_id: str) -> Optional[ProfileRecord]:
        snapshot = self.db.collection(PROFILES_COLLECTION).document(profile_id).get()
        if not snapshot.exists:
            return None
        return ProfileRecord.model_validate({**snapshot.to_dict(), "id": snapshot.id})

    @upstream_errors
    def create_profile(self, user_id: str, data: Dict[str, Any]) -> str:
        document = _to_document({**data, "user_id": user_id})
        document["createdAt"] = firestore.SERVER_TIMESTAMP
        try:
            self.db.collection(PROFILES_COLLECTION).document(user_id).create(document)
        except AlreadyExists:
            raise ConflictError("Profile already exists")
        return user_id

    @upstream_errors
    def update_profile(self, profile_id: str, data: Dict[str, Any]) -> None:
        self.db.collection(PROFILES_COLLECTION).document(profile_id).update(_to_document(data))

    @upstream_errors
    def list_profiles(self, limit: int) -> List[ProfileRecord]:
        docs = self.db.collection(PROFILES_COLLECTION).limit(limit).stream()
        return [ProfileRecord.model_validate({**d.to_dict(), "id": d.id}) for d in docs]

    @upstream_errors
    def create_project(self, data: Dict[str, Any]) -> str:
        document = _to_document(data)
        document["createdAt"] = firestore.SERVER_TIMESTAMP
        _, ref = self.db.collection(PROJECTS_COLLECTION).add(document)
        return ref.id

    @upstream_errors
    def list_projects(self) -> List[ProjectRecord]:
        docs = self.db.collection(PROJECTS_COLLECTION)\
            .order_by("createdAt", direction=firestore.Query.DESCENDING)\
            .stream()
        return [ProjectRecord.model_validate({**d.to_dict(), "id": d.id}) for d in docs]

    @upstream_errors
    def get_project(self, project_id: str) -> Optional[ProjectRecord]:
        snapshot = self.db.collection(PROJECTS_COLLECTION).document(project_id).get()
        if not snapshot.exists:
            return None
        return ProjectRecord.model_validate({**snapshot.to_dict(), "id": snapshot.id})

    @upstream_errors
    def issue_token(self, identity: Identity) -> str:
        token = auth.create_custom_token(identity.id, app=self.app)
        return token.decode("utf-8") if isinstance(token, bytes) else token
