from fastapi import APIRouter, Depends, Request
from app.config.settings import Settings
from app.core.dependencies import get_settings, get_store
from app.modules.users.schemas import UserSearchResult
from app.modules.users.service import SearchService
from typing import List, Optional

router = APIRouter(prefix="/users", tags=["users"])


def get_search_service(
    request: Request,
    settings: Settings = Depends(get_settings)
) -> SearchService:
    return SearchService(
        lambda: get_store(request),
        scan_limit=settings.search_scan_limit,
        result_limit=settings.search_result_limit,
    )


@router.get("/search", response_model=List[UserSearchResult], response_model_exclude_none=True)
def search_users(
    q: Optional[str] = None,
    service: SearchService = Depends(get_search_service)
):
    """Search profiles by name, email, bio, location or skills; queries under 2 characters return []"""
    return service.search(q or "")
