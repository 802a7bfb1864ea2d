"""
Engine configuration using Pydantic Settings.
All environment-specific values are centralized here.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "Requirements Precision Engine"
    debug: bool = False

    # ── Result cache ─────────────────────────────────────
    cache_enabled: bool = True
    cache_ttl_ms: int = Field(default=300_000, ge=0)  # 5 minutes
    cache_max_entries: int = Field(default=1000, ge=1)

    # ── Concurrency limits ───────────────────────────────
    max_concurrent_validations: int = Field(default=10, ge=1)  # engine-wide
    max_concurrent_checks: int = Field(default=3, ge=1)  # per document

    # ── Rules / workspace ────────────────────────────────
    rules_file: str = ""  # optional JSON override for the rule catalog
    corpus_path: str = ""  # default workspace for CLI + /workspace route

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
