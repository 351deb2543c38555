"""API configuration models (OMDb).

This module contains the configuration model for the OMDb service:
credentials, hosts and request timeout.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from moviefetch.shared.constants import NetworkConfig, OMDbDefaults


class OMDbSettings(BaseModel):
    """OMDb API configuration.

    Security: api_key is masked in __repr__ to prevent accidental exposure
    in logs.
    """

    api_key: str = Field(
        default="",
        repr=False,
        description="OMDb API key (required for API access)",
    )
    data_url: str = Field(
        default=OMDbDefaults.DATA_URL,
        description="Host serving title searches and detail lookups",
    )
    poster_url: str = Field(
        default=OMDbDefaults.POSTER_URL,
        description="Host serving poster images",
    )
    timeout: float = Field(
        default=NetworkConfig.DEFAULT_TIMEOUT,
        gt=0,
        description="Per-request timeout in seconds",
    )

    def __repr__(self) -> str:
        masked_key = "****" if self.api_key else "[empty]"
        return (
            f"OMDbSettings("
            f"api_key={masked_key}, "
            f"data_url={self.data_url!r}, "
            f"poster_url={self.poster_url!r}, "
            f"timeout={self.timeout})"
        )


__all__ = ["OMDbSettings"]
