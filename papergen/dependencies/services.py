"""
Service dependencies.

Every collaborator is built once in the application lifespan and stored on
``app.state``; these functions hand them to route handlers. Tests replace
them through ``app.dependency_overrides``.
"""
from fastapi import Request

from papergen.services.chat_service import ChatService
from papergen.services.file_extractor import FileExtractor
from papergen.services.gemini_client import GeminiService
from papergen.services.generation import DocumentPipeline
from papergen.services.image_search import PixabayImageService
from papergen.services.project_store import ProjectStore


def get_gemini(request: Request) -> GeminiService:
    return request.app.state.gemini


def get_image_service(request: Request) -> PixabayImageService:
    return request.app.state.images


def get_pipeline(request: Request) -> DocumentPipeline:
    return request.app.state.pipeline


def get_extractor(request: Request) -> FileExtractor:
    return request.app.state.extractor


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat


def get_project_store(request: Request) -> ProjectStore:
    return request.app.state.projects
