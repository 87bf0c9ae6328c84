import logging
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import (
    ConflictError, NotFoundError, ValidationError, describe_validation_errors
)
from app.database.store import ProfileRecord, StoragePort
from app.modules.profiles.schemas import ProfileCreate, ProfileUpdate

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def default_profile_fields(email: str) -> Dict[str, Any]:
    """Profile created for a new identity: local part of the email as first name"""
    return {
        "first_name": email.split("@")[0],
        "last_name": "",
        "email": email,
    }


def parse_payload(model: Type[ModelT], payload: Dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_errors(e.errors()))


class ProfileService:
    def __init__(self, store: StoragePort):
        self.store = store

    def create_profile(self, user_id: str, payload: Dict[str, Any]) -> str:
        """Create the caller's profile; one per user"""
        if self.store.get_profile(user_id):
            raise ConflictError("Profile already exists")

        profile_data = parse_payload(ProfileCreate, payload)
        profile_id = self.store.create_profile(user_id, profile_data.model_dump(exclude_none=True))
        logger.info(f"Profile {profile_id} created for user {user_id}")
        return profile_id

    def update_profile(self, user_id: str, payload: Dict[str, Any]) -> None:
        """Sparse update: fields that are missing, null or "" keep their stored value"""
        profile_data = parse_payload(ProfileUpdate, payload)

        profile = self.store.get_profile(user_id)
        if not profile:
            raise NotFoundError("Profile not found")

        update_data = {
            key: value
            for key, value in profile_data.model_dump().items()
            if value is not None and value != ""
        }
        if update_data:
            self.store.update_profile(profile.id, update_data)

    def get_profile(self, profile_id: str) -> ProfileRecord:
        profile = self.store.get_profile_by_id(profile_id)
        if not profile:
            raise NotFoundError("Profile not found")
        return profile
