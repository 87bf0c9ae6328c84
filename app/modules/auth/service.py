import logging
from typing import Optional

from app.config.settings import Settings
from app.core.exceptions import AppError, AuthError, ConflictError, ValidationError
from app.core.security import hash_password, validate_password, verify_password
from app.database.store import Credential, Identity, StoragePort
from app.modules.auth.schemas import SignedInUser, SigninResponse, SignupResponse
from app.modules.profiles.service import default_profile_fields

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    def __init__(self, store: StoragePort, settings: Settings):
        self.store = store
        self.settings = settings

    def signup(self, email: Optional[str], password: Optional[str]) -> SignupResponse:
        """Create identity, credential and default profile, then issue a session token"""
        if not email or not password:
            raise ValidationError("Email and password are required")

        errors = validate_password(password)
        if errors:
            raise ValidationError(", ".join(errors))

        # Racy pre-check; the backend's unique constraint has the final word
        if self.store.get_identity_by_email(email):
            raise ConflictError("User with this email already exists")

        password_hash = hash_password(password, self.settings.bcrypt_rounds)
        identity = self.store.create_identity(email, password)
        try:
            self.store.create_credential(Credential(
                email=email,
                password_hash=password_hash,
                user_id=identity.id,
            ))
            self.ensure_profile(identity)
            token = self.store.issue_token(identity)
        except Exception:
            # Identity, credential and profile exist together or not at all
            self._discard_identity(identity)
            raise

        logger.info(f"User signed up: {identity.id}")
        return SignupResponse(message="Account created successfully!", token=token)

    def signin(self, email: Optional[str], password: Optional[str]) -> SigninResponse:
        """Verify the stored credential and issue a session token"""
        if not email or not password:
            raise ValidationError("Email and password are required")

        identity = self.store.get_identity_by_email(email)
        credential = self.store.get_credential(identity.id) if identity else None

        # Always runs bcrypt, even when identity or credential is missing
        password_hash = credential.password_hash if credential else None
        if not verify_password(password, password_hash, self.settings.bcrypt_rounds):
            raise AuthError(INVALID_CREDENTIALS)

        self.ensure_profile(identity)

        token = self.store.issue_token(identity)
        logger.info(f"User signed in: {identity.id}")
        return SigninResponse(
            message="Sign in successful!",
            token=token,
            user=SignedInUser(id=identity.id, email=identity.email),
        )

    def ensure_profile(self, identity: Identity) -> None:
        """Create the default profile for an identity that has none"""
        if self.store.get_profile(identity.id):
            return
        try:
            self.store.create_profile(identity.id, default_profile_fields(identity.email))
        except ConflictError:
            # Another request created it first
            logger.info(f"Default profile already exists for {identity.id}")

    def _discard_identity(self, identity: Identity) -> None:
        try:
            self.store.delete_identity(identity.id)
        except AppError as e:
            logger.error(f"Could not roll back signup for {identity.id}: {e.message}")
        else:
            logger.warning(f"Signup rolled back for {identity.id}")
