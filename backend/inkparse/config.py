"""Application settings and configuration helpers."""
from __future__ import annotations

import os
from functools import lru_cache
from typing import List
from dotenv import load_dotenv, find_dotenv


class Settings:
    """Runtime configuration loaded from environment variables.

    Defaults are suitable for local development. Production should set
    explicit values via environment variables (at minimum OPENAI_API_KEY
    and CORS_ORIGINS).
    """

    APP_NAME: str = "Inkparse API"
    API_PREFIX: str = "/api"

    # Server
    PORT: int
    LOG_LEVEL: str

    # CORS
    CORS_ORIGINS: List[str]
    CORS_ORIGIN_REGEX: str

    # Limits
    MAX_IMAGES: int
    MAX_BODY_MB: int
    DEFAULT_IMAGE_MIME: str

    # LLM
    OPENAI_API_KEY: str
    OPENAI_MODEL: str
    OPENAI_BASE_URL: str
    LLM_MAX_OUTPUT_TOKENS: int
    LLM_TEMPERATURE: float
    LLM_TIMEOUT_SECONDS: float
    LLM_IMAGE_DETAIL: str
    LLM_PROMPT_VERSION: str

    # Keep-alive
    KEEPALIVE_ENABLE: bool
    KEEPALIVE_URL: str
    KEEPALIVE_INTERVAL_MIN: int

    def __init__(self) -> None:
        # Load .env once (supports parent directories)
        load_dotenv(find_dotenv(), override=False)
        self.PORT = int(os.getenv("PORT", "3001"))
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        self.CORS_ORIGINS = self._get_list(
            "CORS_ORIGINS",
            default="http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173",
        )
        # Preview deployments get a generated subdomain per branch
        self.CORS_ORIGIN_REGEX = os.getenv("CORS_ORIGIN_REGEX", r"https://.*\.vercel\.app")

        self.MAX_IMAGES = int(os.getenv("MAX_IMAGES", "10"))
        self.MAX_BODY_MB = int(os.getenv("MAX_BODY_MB", "50"))
        self.DEFAULT_IMAGE_MIME = os.getenv("DEFAULT_IMAGE_MIME", "image/jpeg")

        # LLM
        self.OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
        self.OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")
        self.OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/")
        self.LLM_MAX_OUTPUT_TOKENS = int(os.getenv("LLM_MAX_OUTPUT_TOKENS", "4000"))
        self.LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.2"))
        self.LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "120"))
        self.LLM_IMAGE_DETAIL = os.getenv("LLM_IMAGE_DETAIL", "high")
        self.LLM_PROMPT_VERSION = os.getenv("LLM_PROMPT_VERSION", "v1")

        # Keep-alive (hosts that suspend idle processes)
        self.KEEPALIVE_ENABLE = os.getenv("KEEPALIVE_ENABLE", "false").lower() == "true"
        self.KEEPALIVE_URL = os.getenv("KEEPALIVE_URL", "")
        self.KEEPALIVE_INTERVAL_MIN = int(os.getenv("KEEPALIVE_INTERVAL_MIN", "10"))

    @property
    def max_body_bytes(self) -> int:
        return self.MAX_BODY_MB * 1024 * 1024

    @staticmethod
    def _get_list(name: str, default: str = "") -> List[str]:
        raw = os.getenv(name, default)
        return [item.strip() for item in raw.split(",") if item.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
