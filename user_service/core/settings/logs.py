"""Logging settings (``LOG_`` prefix).

Example: LOG_LEVEL=DEBUG LOG_JSON=false LOG_FILE_ENABLED=true
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Inputs for ``configure_logging``; see ``to_logging_kwargs``."""

    service_name: str = Field(default="user-service", description="``service`` field of JSON records")
    level: LogLevel = "INFO"
    json_logs: bool = Field(default=True, alias="LOG_JSON", description="JSON Lines instead of text")

    console_enabled: bool = True
    console_level: LogLevel | None = Field(default=None, description="Defaults to ``level``")

    file_enabled: bool = False
    file_path: Path | None = Path("logs/user-service.log.jsonl")
    file_level: LogLevel | None = Field(default=None, description="Defaults to ``level``")
    file_max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024, le=1024**3)
    file_backup_count: int = Field(default=5, ge=0, le=100)

    include_context: bool = Field(default=True, description="Copy request_id/user_id onto records")
    capture_warnings: bool = True
    include_uvicorn: bool = Field(default=True, description="Send uvicorn logs through our handlers")

    @field_validator("level", "console_level", "file_level", mode="before")
    @classmethod
    def _upper(cls, v: str | None) -> str | None:
        return v.upper() if isinstance(v, str) else v

    @computed_field
    @property
    def effective_file_path(self) -> Path | None:
        return self.file_path if self.file_enabled else None

    @computed_field
    @property
    def effective_console_level(self) -> LogLevel:
        return self.console_level or self.level

    @computed_field
    @property
    def effective_file_level(self) -> LogLevel:
        return self.file_level or self.level

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``configure_logging``."""
        path = self.effective_file_path
        return {
            "service_name": self.service_name,
            "log_level": self.level,
            "json_logs": self.json_logs,
            "console_enabled": self.console_enabled,
            "console_level": self.effective_console_level,
            "file_path": str(path) if path else None,
            "file_level": self.effective_file_level,
            "file_max_bytes": self.file_max_bytes,
            "file_backup_count": self.file_backup_count,
            "include_context": self.include_context,
            "capture_warnings": self.capture_warnings,
            "include_uvicorn": self.include_uvicorn,
        }

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        env_ignore_empty=True,
    )
