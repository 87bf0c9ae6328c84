from fastapi import APIRouter, Body, Depends
from app.core.dependencies import get_store
from app.core.exceptions import AuthError
from app.database.store import StoragePort
from app.modules.profiles.schemas import ProfileCreatedResponse, ProfileResponse
from app.modules.profiles.service import ProfileService
from typing import Any, Dict

router = APIRouter(prefix="/profile", tags=["profile"])


def get_profile_service(store: StoragePort = Depends(get_store)) -> ProfileService:
    return ProfileService(store)


def _require_user_id(payload: Dict[str, Any]) -> str:
    user_id = payload.get("userId")
    if not user_id:
        raise AuthError("User ID required")
    return str(user_id)


@router.post("", response_model=ProfileCreatedResponse)
def create_profile(
    payload: Dict[str, Any] = Body(...),
    service: ProfileService = Depends(get_profile_service)
):
    """Create the profile for payload.userId"""
    profile_id = service.create_profile(_require_user_id(payload), payload)
    return ProfileCreatedResponse(profile_id=profile_id, message="Profile created successfully")


@router.put("")
def update_profile(
    payload: Dict[str, Any] = Body(...),
    service: ProfileService = Depends(get_profile_service)
):
    """Update the profile for payload.userId; empty fields are left unchanged"""
    service.update_profile(_require_user_id(payload), payload)
    return {"success": True}


@router.get("/{profile_id}", response_model=ProfileResponse)
def get_profile(
    profile_id: str,
    service: ProfileService = Depends(get_profile_service)
):
    return ProfileResponse(**service.get_profile(profile_id).model_dump())
