"""Document endpoints: handwritten notes analysis and agent documentation.

Thin HTTP layer; domain exceptions raised below are translated to
``{"error": ...}`` responses by the handlers registered in main.py.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ..config import Settings
from ..deps import get_app_settings, get_document_service
from ..models import AnalysisResult, AnalyzeRequest, DocumentResult, GenerateDocRequest
from ..pipeline.request_normalizer import normalize_images
from ..services.orchestration.document_service import DocumentService
from ..utils.network import get_client_ip

router = APIRouter(tags=["documents"])


@router.post("/analyze", response_model=AnalysisResult)
async def analyze(
    body: AnalyzeRequest,
    request: Request,
    settings: Settings = Depends(get_app_settings),
    service: DocumentService = Depends(get_document_service),
) -> AnalysisResult:
    """Read one or more handwritten-note images into Markdown plus a flowchart."""
    parts = normalize_images(
        body,
        max_images=settings.MAX_IMAGES,
        default_mime=settings.DEFAULT_IMAGE_MIME,
    )
    record = await service.analyze_images(parts, client_ip=get_client_ip(request))
    return AnalysisResult.model_validate(record)


@router.post("/generate-doc", response_model=DocumentResult)
async def generate_doc(
    body: GenerateDocRequest,
    request: Request,
    service: DocumentService = Depends(get_document_service),
) -> DocumentResult:
    """Document an AI agent from its call and/or evaluation prompt."""
    record = await service.generate_document(
        body.callPrompt,
        body.evalPrompt,
        client_ip=get_client_ip(request),
    )
    return DocumentResult.model_validate(record)
