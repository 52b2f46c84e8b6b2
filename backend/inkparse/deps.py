"""FastAPI dependencies (service handles built once per process)."""
from __future__ import annotations

from fastapi import Depends, Request

from .config import Settings
from .services.llm import LLMService
from .services.orchestration.document_service import DocumentService


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with (not the ambient cached instance)."""
    return request.app.state.settings


def get_llm_service(request: Request) -> LLMService:
    """The LLMService constructed at app creation. Override in tests."""
    return request.app.state.llm


def get_document_service(llm: LLMService = Depends(get_llm_service)) -> DocumentService:
    return DocumentService(llm)
