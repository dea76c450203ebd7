"""
WordBank Backend — Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the routes and the GitHub store.
When:  Loaded once at module import time.

Required values:
    REPO_OWNER, REPO_NAME and GITHUB_TOKEN have no usable default. The app
    still starts without them (so /health can report the problem), but every
    write request fails with ConfigMissingError until they are set.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from wordbank.exceptions import ConfigMissingError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern for readability.
    """

    # ── GitHub Repository ─────────────────────────────────────────────────
    # What: Account and repository holding the answers document and images
    repo_owner: str = Field(default="", description="GitHub account or organization")
    repo_name: str = Field(default="", description="GitHub repository name")

    # What: Token sent as `Authorization: Bearer <token>`
    # Needs `contents: write` on the repository
    github_token: str = Field(default="", description="GitHub access token")

    github_api_url: str = Field(default="https://api.github.com")

    # What: Branch to read from and commit to
    # None → the repository's default branch
    github_branch: Optional[str] = Field(default=None)

    # What: httpx client timeout in seconds for every GitHub call
    github_timeout: float = Field(default=30.0, gt=0, le=300)

    # ── Answers Document ──────────────────────────────────────────────────
    document_path: str = Field(default="correctAnswers.json")
    image_dir: str = Field(default="imgs")

    # What: Maximum accepted image size in bytes
    # Default: 10MB. The contents API caps single files at 100MB.
    max_file_size: int = Field(default=10_485_760, ge=1_024, le=52_428_800)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated origins, or "*"
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("document_path", "image_dir")
    @classmethod
    def strip_slashes(cls, v: str) -> str:
        """Repository paths are relative to the repo root."""
        cleaned = v.strip().strip("/")
        if not cleaned:
            raise ValueError("Repository path must not be empty")
        return cleaned

    # ── Retry Configuration ───────────────────────────────────────────────
    # What: Tenacity settings for GitHub *reads* on transport failures only.
    # Writes and HTTP error statuses are never retried.
    retry_max_attempts: int = Field(default=3, ge=1, le=10)
    retry_min_wait: int = Field(default=1, ge=0, le=30)
    retry_max_wait: int = Field(default=5, ge=1, le=120)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def missing_remote_settings(self) -> List[str]:
        """Names of the required GitHub settings that are unset."""
        required = {
            "REPO_OWNER": self.repo_owner,
            "REPO_NAME": self.repo_name,
            "GITHUB_TOKEN": self.github_token,
        }
        return [name for name, value in required.items() if not value.strip()]

    def validate_remote(self) -> None:
        """
        Raise ConfigMissingError if the repository coordinates are incomplete.

        When:  Called before the first remote call of every request, and once
               during startup (where the error is only logged).
        """
        missing = self.missing_remote_settings()
        if missing:
            raise ConfigMissingError(missing=missing)


# Singleton instance, imported throughout the application
settings = Settings()
