"""
Saved-project storage.

Projects hold a CanonicalDocument verbatim, keyed by the owning user's id.
Only the HTTP layer talks to the store; the generation pipeline never does.
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from papergen.models.document import CanonicalDocument, DocumentType

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class Project:
    """A saved document owned by one user."""

    id: str
    user_id: str
    title: str
    document_type: DocumentType
    content: CanonicalDocument
    topic: Optional[str]
    settings: Optional[Dict[str, Any]]
    created_at: datetime
    updated_at: datetime


class ProjectStore(Protocol):
    async def create(
        self,
        user_id: str,
        title: str,
        document_type: DocumentType,
        content: CanonicalDocument,
        topic: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> Project: ...

    async def list_for_user(self, user_id: str) -> List[Project]: ...

    async def get(self, user_id: str, project_id: str) -> Optional[Project]: ...

    async def delete(self, user_id: str, project_id: str) -> bool: ...


class InMemoryProjectStore:
    """Process-local ProjectStore; contents are lost on restart."""

    def __init__(self) -> None:
        self._projects: Dict[str, Project] = {}
        self._lock = asyncio.Lock()

    async def create(
        self,
        user_id: str,
        title: str,
        document_type: DocumentType,
        content: CanonicalDocument,
        topic: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> Project:
        now = datetime.now(timezone.utc)
        project = Project(
            id=uuid.uuid4().hex,
            user_id=user_id,
            title=title,
            document_type=document_type,
            content=content,
            topic=topic,
            settings=settings,
            created_at=now,
            updated_at=now,
        )
        async with self._lock:
            self._projects[project.id] = project
        logger.info("Project %s created for user %s", project.id, user_id)
        return project

    async def list_for_user(self, user_id: str) -> List[Project]:
        """Projects owned by *user_id*, newest first."""
        async with self._lock:
            owned = [p for p in self._projects.values() if p.user_id == user_id]
        return sorted(owned, key=lambda p: p.created_at, reverse=True)

    async def get(self, user_id: str, project_id: str) -> Optional[Project]:
        async with self._lock:
            project = self._projects.get(project_id)
        if project is None or project.user_id != user_id:
            return None
        return project

    async def delete(self, user_id: str, project_id: str) -> bool:
        async with self._lock:
            project = self._projects.get(project_id)
            if project is None or project.user_id != user_id:
                return False
            del self._projects[project_id]
        logger.info("Project %s deleted by user %s", project_id, user_id)
        return True
