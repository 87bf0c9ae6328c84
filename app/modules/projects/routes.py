from fastapi import APIRouter, Depends
from app.core.dependencies import get_store
from app.database.store import StoragePort
from app.modules.projects.schemas import ProjectCreate, ProjectCreatedResponse, ProjectResponse
from app.modules.projects.service import ProjectService
from typing import List

router = APIRouter(prefix="/projects", tags=["projects"])


def get_project_service(store: StoragePort = Depends(get_store)) -> ProjectService:
    return ProjectService(store)


@router.get("", response_model=List[ProjectResponse], response_model_exclude_none=True)
def list_projects(service: ProjectService = Depends(get_project_service)):
    """List all projects, newest first"""
    return service.list_projects()


@router.post("", response_model=ProjectCreatedResponse)
def create_project(
    project_data: ProjectCreate,
    service: ProjectService = Depends(get_project_service)
):
    """Create a project owned by project_data.userId's profile"""
    service.create_project(project_data)
    return ProjectCreatedResponse(message="Project created successfully!")


@router.get("/{project_id}", response_model=ProjectResponse, response_model_exclude_none=True)
def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service)
):
    """Get a single project"""
    return service.get_project(project_id)
