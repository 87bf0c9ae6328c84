"""
Supabase adapter.

Identities live in Supabase Auth (auth.users); credentials, profiles and
projects live in Postgres tables reached through PostgREST:

credentials:
- user_id: uuid (primary key, references auth.users.id)
- email: text (unique, not null)
- password_hash: text (not null)

profiles:
- id: uuid (primary key, default gen_random_uuid())
- user_id: uuid (unique, references auth.users.id)
- first_name, last_name: text (not null)
- email, bio, location, website, github, linkedin, avatar: text (nullable)
- skills: text[] (nullable)
- created_at: timestamptz (default now())

projects:
- id: uuid (primary key, default gen_random_uuid())
- owner_profile_id: uuid (references profiles.id)
- title: text (not null), description: text
- tags: text[], status: text, max_members: int, current_members: int (default 1)
- repository_url, contact_info: text
- created_at: timestamptz (default now())
"""
import logging
from typing import Any, Dict, List, Optional

from postgrest.exceptions import APIError
from supabase import Client, create_client

from app.core.exceptions import ConflictError
from app.core.security import create_access_token
from app.database.store import (
    Credential, Identity, ProfileRecord, ProjectRecord, upstream_errors
)

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
INVALID_TEXT_REPRESENTATION = "22P02"  # e.g. a malformed uuid in a filter
USERS_PAGE_SIZE = 1000


class SupabaseStore:
    def __init__(self, settings):
        self.settings = settings
        self._client: Optional[Client] = None

    @property
    def client(self) -> Client:
        """Client with service_role key; bypasses RLS."""
        if self._client is None:
            # Tokens are signed with the JWT secret; a missing one must fail before any write
            self.settings.require("supabase_url", "supabase_service_role_key", "supabase_jwt_secret")
            self._client = create_client(
                self.settings.supabase_url, self.settings.supabase_service_role_key
            )
        return self._client

    def close(self) -> None:
        self._client = None

    @upstream_errors
    def get_identity_by_email(self, email: str) -> Optional[Identity]:
        wanted = email.lower()
        page = 1
        while True:
            users = self.client.auth.admin.list_users(page=page, per_page=USERS_PAGE_SIZE)
            for user in users:
                if (user.email or "").lower() == wanted:
                    return Identity(id=user.id, email=user.email)
            if len(users) < USERS_PAGE_SIZE:
                return None
            page += 1

    @upstream_errors
    def create_identity(self, email: str, password: str) -> Identity:
        try:
            response = self.client.auth.admin.create_user({
                "email": email,
                "password": password,
                "email_confirm": True,
            })
        except Exception as e:
            error_message = str(e).lower()
            if "already" in error_message or "email_exists" in error_message:
                raise ConflictError("User with this email already exists")
            raise
        return Identity(id=response.user.id, email=response.user.email or email)

    @upstream_errors
    def delete_identity(self, user_id: str) -> None:
        self.client.table("profiles").delete().eq("user_id", user_id).execute()
        self.client.table("credentials").delete().eq("user_id", user_id).execute()
        self.client.auth.admin.delete_user(user_id)

    @upstream_errors
    def get_credential(self, user_id: str) -> Optional[Credential]:
        result = self.client.table("credentials")\
            .select("*")\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        if not result.data:
            return None
        return Credential.from_document(result.data[0])

    @upstream_errors
    def create_credential(self, credential: Credential) -> None:
        try:
            self.client.table("credentials").insert({
                "user_id": credential.user_id,
                "email": credential.email,
                "password_hash": credential.password_hash,
            }).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise ConflictError("User with this email already exists")
            raise

    @upstream_errors
    def get_profile(self, user_id: str) -> Optional[ProfileRecord]:
        return self._first("profiles", "user_id", user_id, ProfileRecord)

    @upstream_errors
    def get_profile_by_id(self, profile_id: str) -> Optional[ProfileRecord]:
        return self._first("profiles", "id", profile_id, ProfileRecord)

    @upstream_errors
    def create_profile(self, user_id: str, data: Dict[str, Any]) -> str:
        try:
            result = self.client.table("profiles").insert({**data, "user_id": user_id}).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise ConflictError("Profile already exists")
            raise
        return str(result.data[0]["id"])

    @upstream_errors
    def update_profile(self, profile_id: str, data: Dict[str, Any]) -> None:
        self.client.table("profiles")\
            .update(data)\
            .eq("id", profile_id)\
            .execute()

    @upstream_errors
    def list_profiles(self, limit: int) -> List[ProfileRecord]:
        result = self.client.table("profiles")\
            .select("*")\
            .limit(limit)\
            .execute()
        return [ProfileRecord.model_validate(row) for row in result.data or []]

    @upstream_errors
    def create_project(self, data: Dict[str, Any]) -> str:
        result = self.client.table("projects").insert(data).execute()
        return str(result.data[0]["id"])

    @upstream_errors
    def list_projects(self) -> List[ProjectRecord]:
        result = self.client.table("projects")\
            .select("*")\
            .order("created_at", desc=True)\
            .execute()
        return [ProjectRecord.model_validate(row) for row in result.data or []]

    @upstream_errors
    def get_project(self, project_id: str) -> Optional[ProjectRecord]:
        return self._first("projects", "id", project_id, ProjectRecord)

    def issue_token(self, identity: Identity) -> str:
        """JWT signed with the project's secret, accepted by Supabase as an authenticated session."""
        self.settings.require("supabase_jwt_secret")
        return create_access_token(
            identity.id,
            self.settings.supabase_jwt_secret,
            algorithm="HS256",
            expires_in=self.settings.jwt_expires_in,
            extra_claims={"aud": "authenticated", "role": "authenticated", "email": identity.email},
        )

    def _first(self, table: str, column: str, value: str, record_type):
        try:
            result = self.client.table(table)\
                .select("*")\
                .eq(column, value)\
                .limit(1)\
                .execute()
        except APIError as e:
            if e.code == INVALID_TEXT_REPRESENTATION:
                return None
            raise
        if not result.data:
            return None
        return record_type.model_validate(result.data[0])
