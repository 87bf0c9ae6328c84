import logging
from typing import Dict, List, Optional

from app.core.exceptions import NotFoundError, UpstreamError, ValidationError
from app.database.store import ProfileRecord, ProjectRecord, StoragePort
from app.modules.projects.schemas import ProjectCreate, ProjectResponse

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown Author"


def resolve_author(owner: Optional[ProfileRecord]) -> str:
    """Display name for a project owner: full name, else email, else a placeholder"""
    if owner is None:
        return UNKNOWN_AUTHOR
    if owner.first_name:
        return f"{owner.first_name} {owner.last_name or ''}".strip()
    return owner.email or UNKNOWN_AUTHOR


def to_project_response(project: ProjectRecord, author: str) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        title=project.title,
        description=project.description or "",
        author=author,
        tags=project.tags,
        created_at=project.created_at,
        status=project.status or "planning",
        max_members=project.max_members,
        current_members=project.current_members or 1,
        repository_url=project.repository_url,
        contact_info=project.contact_info or "",
    )


class ProjectService:
    def __init__(self, store: StoragePort):
        self.store = store

    def create_project(self, project_data: ProjectCreate) -> str:
        """Create a project owned by the caller's profile"""
        if not project_data.title or not project_data.user_id:
            raise ValidationError("Title and userId are required")

        profile = self.store.get_profile(project_data.user_id)
        if not profile:
            raise NotFoundError("User profile not found")

        data = {
            "owner_profile_id": profile.id,
            "title": project_data.title,
            "description": project_data.description or "",
            "current_members": 1 if project_data.current_members is None else project_data.current_members,
        }
        if project_data.status:
            data["status"] = project_data.status
        if project_data.tags is not None:
            data["tags"] = project_data.tags
        if project_data.max_members is not None:
            data["max_members"] = project_data.max_members
        if project_data.repository_url:
            data["repository_url"] = project_data.repository_url
        if project_data.contact_info:
            data["contact_info"] = project_data.contact_info

        project_id = self.store.create_project(data)
        logger.info(f"Project {project_id} created by profile {profile.id}")
        return project_id

    def list_projects(self) -> List[ProjectResponse]:
        """All projects, newest first, with the owner's display name"""
        owners: Dict[str, Optional[ProfileRecord]] = {}
        results = []
        for project in self.store.list_projects():
            owner_id = project.owner_profile_id
            if owner_id and owner_id not in owners:
                owners[owner_id] = self._find_owner(owner_id)
            results.append(to_project_response(project, resolve_author(owners.get(owner_id))))
        return results

    def get_project(self, project_id: str) -> ProjectResponse:
        if not project_id or not project_id.strip():
            raise ValidationError("Project ID is required")

        project = self.store.get_project(project_id)
        if not project:
            raise NotFoundError("Project not found")

        owner = self._find_owner(project.owner_profile_id) if project.owner_profile_id else None
        return to_project_response(project, resolve_author(owner))

    def _find_owner(self, profile_id: str) -> Optional[ProfileRecord]:
        # A failed owner lookup degrades to "Unknown Author" instead of failing the listing
        try:
            return self.store.get_profile_by_id(profile_id)
        except UpstreamError as e:
            logger.warning(f"Owner lookup failed for profile {profile_id}: {e}")
            return None
