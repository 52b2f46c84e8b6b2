"""Pydantic models for API requests and responses."""
from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ImageInput(BaseModel):
    """One image of a multi-image request."""

    imageBase64: Optional[str] = Field(default=None, description="Base64 image payload (no data: prefix)")
    imageMime: Optional[str] = Field(default=None, description="MIME type, defaults to image/jpeg")


class AnalyzeRequest(BaseModel):
    """Body of POST /api/analyze: a single image or a list of images."""

    imageBase64: Optional[str] = None
    imageMime: Optional[str] = None
    images: Optional[List[ImageInput]] = None


class GenerateDocRequest(BaseModel):
    """Body of POST /api/generate-doc. At least one prompt is required."""

    callPrompt: Optional[str] = None
    evalPrompt: Optional[str] = None


class AnalysisResult(BaseModel):
    """Structured notes returned by the image flow."""

    model_config = ConfigDict(extra="ignore")

    title: str
    subject: str
    notes: str = ""
    mermaidCode: str = ""


class DocSection(BaseModel):
    """A single section of generated agent documentation."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str = ""
    heading: str = ""
    icon: str = ""
    content: str = ""
    type: str = "text"


class DocumentResult(BaseModel):
    """Agent documentation returned by the text flow."""

    model_config = ConfigDict(extra="ignore")

    title: str
    subtitle: str = ""
    agentName: Optional[str] = None
    company: Optional[str] = None
    primaryGoal: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    keyHighlights: List[str] = Field(default_factory=list)
    sections: List[DocSection] = Field(default_factory=list)
    callFlowMermaid: str = ""


class HealthResponse(BaseModel):
    status: str
    model: str
    uptimeSeconds: float
    time: str


class ClientConfig(BaseModel):
    """Runtime limits exposed to the frontend."""

    model: str
    maxImages: int = Field(..., description="Maximum images per analyze request")
    maxBodyMb: int = Field(..., description="Maximum request body size in MB")
    defaultImageMime: str


class ErrorResponse(BaseModel):
    error: str
