"""Logging and presentation configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from moviefetch.shared.constants import UIConfig


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Logging level")
    file: str | None = Field(default=None, description="Optional JSON log file path")


class UISettings(BaseModel):
    """Settings for how errors are presented."""

    error_message_duration: float = Field(
        default=UIConfig.ERROR_MESSAGE_DURATION,
        gt=0,
        description="Seconds an error message stays visible",
    )


__all__ = ["LoggingSettings", "UISettings"]
