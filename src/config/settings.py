# src/config/settings.py - v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for deployment-specific settings: where documents and
tables live, which generative model answers fallback queries, ranking
thresholds, cache bounds and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === SOURCES ===
    documents_path: Path = Path("./documents")
    document_extensions: str = "pdf,pptx,docx,txt,md"
    database_path: str = ""
    table_row_limit: int = 100

    # === LLM ===
    llm_provider: str = "ollama"
    llm_model: str = "llama3"
    ollama_base_url: str = "http://localhost:11434"
    llm_default_temperature: float = 0.7
    llm_max_tokens: int = 2000
    llm_timeout_s: float = 300.0

    # === Ranking / direct answer ===
    ranking_top_k: int = 5
    ranking_min_score: float = 0.1
    direct_answer_threshold: float = 0.7
    direct_answer_min_paragraph_chars: int = 50

    # === Caches ===
    response_cache_backend: Literal["memory", "sqlite", "redis"] = "memory"
    response_cache_max_entries: int = 1024
    response_cache_ttl_s: int = 0
    response_cache_path: Path = Path("~/.ragcache/responses.db")
    response_cache_redis_url: str = ""
    response_single_flight: bool = False
    content_cache_max_entries: int = 256
    preload_on_startup: bool = False

    # === Request ===
    request_budget_s: float = 0.0

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("table_row_limit", "ranking_top_k", "llm_max_tokens")
    @classmethod
    def validate_positive(cls, v: int, info) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @field_validator(
        "response_cache_max_entries",
        "content_cache_max_entries",
        "response_cache_ttl_s",
    )
    @classmethod
    def validate_non_negative(cls, v: int, info) -> int:  # noqa: N805
        """Zero disables the bound."""
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        for name in ("ranking_min_score", "direct_answer_threshold"):
            value = getattr(self, name)
            if value < 0.0:
                errors.append(f"{name.upper()} must be >= 0")

        if self.response_cache_backend == "redis" and not self.response_cache_redis_url:
            errors.append(
                "RESPONSE_CACHE_BACKEND=redis requires RESPONSE_CACHE_REDIS_URL"
            )

        if self.llm_timeout_s <= 0:
            errors.append("LLM_TIMEOUT_S must be > 0")

        if self.request_budget_s < 0:
            errors.append("REQUEST_BUDGET_S must be >= 0")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def document_extensions_list(self) -> list[str]:
        """Parse comma-separated extensions into dotted lowercase suffixes."""
        exts = [e.strip().lower() for e in self.document_extensions.split(",") if e.strip()]
        return [e if e.startswith(".") else f".{e}" for e in exts]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-request config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
