"""Configuration management for the ChefAI suggestion service.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults

The module-level ``config`` instance is built once at import time and is
never mutated afterwards; the engine receives it as a constructor argument.
"""

import os
from typing import Optional

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()

DEFAULT_GEMINI_API_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:generateContent"
)

# Values shipped in sample config files that mean "no key yet"
PLACEHOLDER_API_KEYS = ("SUA_CHAVE", "YOUR_API_KEY")
MIN_API_KEY_LENGTH = 20


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Gemini credential. Empty, placeholder or too-short keys route every request to the fallback catalog
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "").strip()
        # generateContent endpoint; the key is appended as ?key=<GEMINI_API_KEY>
        self.GEMINI_API_URL: str = os.getenv("GEMINI_API_URL", DEFAULT_GEMINI_API_URL)
        # Sampling temperature sent in generationConfig
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))
        # Output token cap sent in generationConfig
        self.MAX_OUTPUT_TOKENS: int = int(os.getenv("MAX_OUTPUT_TOKENS", "2000"))
        # Total timeout (connect + read) for one generateContent call, in seconds
        self.REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15"))
        # Attempts per request. Default 1: a failed call goes straight to the fallback catalog
        self.MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "1"))
        # Longest preparation time (minutes) a suggestion may have
        self.MAX_PREP_MINUTES: int = int(os.getenv("MAX_PREP_MINUTES", "30"))
        # Maximum number of suggestions returned per request
        self.MAX_RECIPES: int = int(os.getenv("MAX_RECIPES", "3"))
        # Minimum compatibility percentage. Unset: each strategy uses its own default (fast=50, balanced=60)
        min_compat = os.getenv("MIN_COMPATIBILITY")
        self.MIN_COMPATIBILITY: Optional[int] = int(min_compat) if min_compat else None
        # Suggestion strategy: "fast" (quickest first) or "balanced" (best match first)
        self.SUGGESTION_STRATEGY: str = os.getenv("SUGGESTION_STRATEGY", "fast").lower()

    @property
    def is_configured(self) -> bool:
        """True when a usable Gemini key and endpoint are present."""
        key = self.GEMINI_API_KEY
        if not key or len(key) < MIN_API_KEY_LENGTH:
            return False
        if any(placeholder in key for placeholder in PLACEHOLDER_API_KEYS):
            return False
        return bool(self.GEMINI_API_URL)

    def validate(self) -> None:
        """Validate configuration values.

        A missing API key is not an error: the engine falls back to the local catalog.

        Raises:
            ValueError: If a value is out of range or not one of the allowed options.
        """
        if not self.GEMINI_API_URL.startswith(("http://", "https://")):
            raise ValueError(f"GEMINI_API_URL must be an http(s) URL, got: {self.GEMINI_API_URL}")
        if not (0.0 <= self.TEMPERATURE <= 2.0):
            raise ValueError(f"TEMPERATURE must be between 0.0 and 2.0, got: {self.TEMPERATURE}")
        if self.MAX_OUTPUT_TOKENS < 256:
            raise ValueError(f"MAX_OUTPUT_TOKENS must be at least 256, got: {self.MAX_OUTPUT_TOKENS}")
        if self.REQUEST_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"REQUEST_TIMEOUT_SECONDS must be positive, got: {self.REQUEST_TIMEOUT_SECONDS}"
            )
        if self.MAX_RETRIES < 1:
            raise ValueError(f"MAX_RETRIES must be at least 1, got: {self.MAX_RETRIES}")
        if self.MAX_PREP_MINUTES < 0:
            raise ValueError(f"MAX_PREP_MINUTES must not be negative, got: {self.MAX_PREP_MINUTES}")
        if self.MAX_RECIPES < 1:
            raise ValueError(f"MAX_RECIPES must be at least 1, got: {self.MAX_RECIPES}")
        if self.MIN_COMPATIBILITY is not None and not (0 <= self.MIN_COMPATIBILITY <= 100):
            raise ValueError(
                f"MIN_COMPATIBILITY must be between 0 and 100, got: {self.MIN_COMPATIBILITY}"
            )
        if self.SUGGESTION_STRATEGY not in ("fast", "balanced"):
            raise ValueError(
                f"SUGGESTION_STRATEGY must be 'fast' or 'balanced', got: {self.SUGGESTION_STRATEGY}"
            )


# Create module-level config instance and validate immediately
config = Config()
config.validate()
