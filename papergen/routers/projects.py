"""
Saved project endpoints, scoped to the user in the X-User-Id header.

Route summary
-------------
POST   /api/projects                — save a generated document
GET    /api/projects                — list the user's projects, newest first
GET    /api/projects/{project_id}   — project detail
DELETE /api/projects/{project_id}   — delete a project
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from papergen.dependencies.auth import get_current_user_id
from papergen.dependencies.services import get_project_store
from papergen.models.schemas import (
    ProjectCreate,
    ProjectEnvelope,
    ProjectListResponse,
    ProjectResponse,
)
from papergen.services.project_store import Project, ProjectStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(project: Project) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        user_id=project.user_id,
        title=project.title,
        document_type=project.document_type,
        content=project.content,
        topic=project.topic,
        settings=project.settings,
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


@router.post("", response_model=ProjectEnvelope, status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreate,
    user_id: str = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_project_store),
) -> ProjectEnvelope:
    project = await store.create(
        user_id=user_id,
        title=body.title,
        document_type=body.document_type,
        content=body.content,
        topic=body.topic,
        settings=body.settings,
    )
    return ProjectEnvelope(project=_to_response(project))


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    user_id: str = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_project_store),
) -> ProjectListResponse:
    projects = await store.list_for_user(user_id)
    return ProjectListResponse(projects=[_to_response(p) for p in projects])


@router.get("/{project_id}", response_model=ProjectEnvelope)
async def get_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_project_store),
) -> ProjectEnvelope:
    project = await store.get(user_id, project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found.")
    return ProjectEnvelope(project=_to_response(project))


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_project_store),
) -> dict:
    if not await store.delete(user_id, project_id):
        raise HTTPException(status_code=404, detail="Project not found.")
    return {"success": True}
