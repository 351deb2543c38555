"""MovieFetch Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from moviefetch.config.models.api_settings import OMDbSettings
from moviefetch.config.models.app_settings import LoggingSettings, UISettings
from moviefetch.config.models.cache_settings import CacheSettings
from moviefetch.config.models.paging_settings import PagingSettings, QueueSettings
from moviefetch.shared.errors import ErrorCode, create_config_error


class Settings(BaseSettings):
    """Settings facade providing unified configuration access.

    Values can be overridden from the environment, e.g.
    ``MOVIEFETCH_OMDB__API_KEY`` or ``MOVIEFETCH_PAGING__MAX_PAGES``.
    """

    model_config = SettingsConfigDict(
        env_prefix="MOVIEFETCH_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    omdb: OMDbSettings = Field(default_factory=OMDbSettings)
    paging: PagingSettings = Field(default_factory=PagingSettings)
    queues: QueueSettings = Field(default_factory=QueueSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    ui: UISettings = Field(default_factory=UISettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from a TOML file.

        Values in the file take precedence over environment variables.

        Raises:
            ApplicationError: If the file is missing or is not valid TOML
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise create_config_error(
                f"Configuration file not found: {file_path}",
                config_key=str(file_path),
                operation="load_settings",
                code=ErrorCode.CONFIG_MISSING,
            )

        try:
            raw_config = toml.load(file_path)
        except toml.TomlDecodeError as e:
            raise create_config_error(
                f"Invalid TOML in configuration file: {file_path}",
                config_key=str(file_path),
                operation="load_settings",
                original_error=e,
            ) from e

        return cls(**raw_config)
