from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

from ...exceptions import UnparsableUpstreamResponseError, UpstreamError
from ...pipeline.request_normalizer import ImagePart
from ...pipeline.sanitizer import DOCUMENT_POLICY, NOTES_POLICY, SanitizePolicy, sanitize_response
from ..llm import LLMService
from ..prompts import build_document_messages, build_vision_messages, get_prompts

logger = logging.getLogger(__name__)


class DocumentService:
    """Runs one flow end to end: messages -> model -> sanitized record.

    Stateless apart from the injected LLMService; safe to share across
    concurrent requests.
    """

    def __init__(self, llm: LLMService) -> None:
        self.llm = llm
        self.settings = llm.settings
        self.prompts = get_prompts(self.settings.LLM_PROMPT_VERSION)

    async def analyze_images(self, parts: List[ImagePart], *, client_ip: str = "") -> Dict[str, Any]:
        messages = build_vision_messages(
            parts,
            instructions=self.prompts["notes"],
            detail=self.settings.LLM_IMAGE_DETAIL,
        )
        logger.info("[notes][%s] analyzing %d image(s)", client_ip, len(parts))
        return await self._run(messages, NOTES_POLICY, client_ip)

    async def generate_document(
        self, call_prompt: Optional[str], eval_prompt: Optional[str], *, client_ip: str = ""
    ) -> Dict[str, Any]:
        messages = build_document_messages(call_prompt, eval_prompt, instructions=self.prompts["document"])
        logger.info(
            "[document][%s] generating docs (call=%s, eval=%s)",
            client_ip,
            bool((call_prompt or "").strip()),
            bool((eval_prompt or "").strip()),
        )
        return await self._run(messages, DOCUMENT_POLICY, client_ip)

    async def _run(self, messages: List[Dict[str, Any]], policy: SanitizePolicy, client_ip: str) -> Dict[str, Any]:
        started = time.monotonic()
        try:
            raw = await self.llm.complete(messages)
            record = sanitize_response(raw, policy)
        except UnparsableUpstreamResponseError as exc:
            logger.error("[%s][%s] unparsable model output: %s | raw=%r", policy.name, client_ip, exc, exc.raw_preview)
            raise
        except UpstreamError as exc:
            logger.error("[%s][%s] upstream error %s: %s", policy.name, client_ip, type(exc).__name__, exc)
            raise
        logger.info(
            "[%s][%s] done in %.1fs (title=%r)",
            policy.name,
            client_ip,
            time.monotonic() - started,
            record.get("title"),
        )
        return record
