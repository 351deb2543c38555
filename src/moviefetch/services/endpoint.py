"""OMDb endpoint construction.

This module maps a logical request (title search, detail lookup or poster
fetch) to a fully-qualified URL with correctly encoded query parameters.
URL construction failures are reported as NetworkError instances with a
build-time kind and never reach the network.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union
from urllib.parse import quote, urlsplit

from moviefetch.config.models.api_settings import OMDbSettings
from moviefetch.shared.constants import OMDbParams
from moviefetch.shared.errors import (
    create_bad_resource_path_error,
    create_invalid_parameter_error,
)

logger = logging.getLogger(__name__)

_ALLOWED_POSTER_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class TitleSearch:
    """Search for movies whose title matches the given words."""

    title: str
    page: int = 1


@dataclass(frozen=True)
class GetDetail:
    """Full-plot detail lookup for one external id."""

    external_id: str


@dataclass(frozen=True)
class GetPoster:
    """Poster fetch, either from a direct path or by external id.

    When ``path`` is given it is used as the poster URL; otherwise an
    id-based lookup on the poster host is built.
    """

    external_id: str | None = None
    path: str | None = None


Endpoint = Union[TitleSearch, GetDetail, GetPoster]


def build_url(request: Endpoint, settings: OMDbSettings) -> str:
    """Build the URL for a request.

    Args:
        request: The logical request
        settings: OMDb settings providing the API key and hosts

    Returns:
        Fully-qualified URL

    Raises:
        NetworkError: INVALID_PARAMETER if a required value is missing or
            cannot be encoded, BAD_RESOURCE_PATH for a malformed poster path
    """
    if isinstance(request, TitleSearch):
        return _build_title_search(request, settings)
    if isinstance(request, GetDetail):
        return _build_get_detail(request, settings)
    if isinstance(request, GetPoster):
        return _build_get_poster(request, settings)

    raise create_invalid_parameter_error(
        f"Unsupported request type: {type(request).__name__}",
        operation="build_url",
    )


def search_token(title: str) -> str:
    """Turn a title into the service's wildcard search token.

    Words are split on whitespace, rejoined with the wildcard and followed
    by a trailing wildcard, e.g. ``"the dark knight"`` becomes
    ``"the*dark*knight*"``. Returns an empty string for a blank title.
    """
    words = title.split()
    if not words:
        return ""
    return OMDbParams.WILDCARD.join(words) + OMDbParams.WILDCARD


def _build_title_search(request: TitleSearch, settings: OMDbSettings) -> str:
    token = search_token(request.title)
    if not token:
        raise create_invalid_parameter_error(
            "Search title is empty",
            field=OMDbParams.TITLE_SEARCH,
            operation="build_title_search",
        )
    if request.page < 1:
        raise create_invalid_parameter_error(
            f"Page must be positive, got: {request.page}",
            field=OMDbParams.PAGE,
            operation="build_title_search",
        )

    return _compose(
        settings.data_url,
        [
            (OMDbParams.API_KEY, settings.api_key),
            (OMDbParams.PAGE, str(request.page)),
            (OMDbParams.TITLE_SEARCH, token),
        ],
        operation="build_title_search",
    )


def _build_get_detail(request: GetDetail, settings: OMDbSettings) -> str:
    if not request.external_id:
        raise create_invalid_parameter_error(
            "External id is required for a detail lookup",
            field=OMDbParams.EXTERNAL_ID,
            operation="build_get_detail",
        )

    return _compose(
        settings.data_url,
        [
            (OMDbParams.API_KEY, settings.api_key),
            (OMDbParams.EXTERNAL_ID, request.external_id),
            (OMDbParams.PLOT, OMDbParams.FULL_PLOT),
        ],
        operation="build_get_detail",
    )


def _build_get_poster(request: GetPoster, settings: OMDbSettings) -> str:
    if request.path is not None:
        return _validate_poster_path(request.path)

    if not request.external_id:
        raise create_invalid_parameter_error(
            "Poster request needs a path or an external id",
            field=OMDbParams.EXTERNAL_ID,
            operation="build_get_poster",
        )

    return _compose(
        settings.poster_url,
        [
            (OMDbParams.API_KEY, settings.api_key),
            (OMDbParams.EXTERNAL_ID, request.external_id),
        ],
        operation="build_get_poster",
    )


def _validate_poster_path(path: str) -> str:
    try:
        parts = urlsplit(path)
    except ValueError as e:
        logger.debug("Could not parse poster path %r: %s", path, e)
        raise create_bad_resource_path_error(path, operation="build_get_poster") from e

    if parts.scheme.lower() not in _ALLOWED_POSTER_SCHEMES or not parts.netloc:
        raise create_bad_resource_path_error(path, operation="build_get_poster")

    return path


def _compose(base_url: str, items: list[tuple[str, str]], operation: str) -> str:
    """Join a base URL with percent-encoded query items."""
    try:
        query = "&".join(
            f"{quote(name, safe='')}={quote(value, safe=OMDbParams.WILDCARD)}"
            for name, value in items
        )
    except UnicodeEncodeError as e:
        raise create_invalid_parameter_error(
            "Query value cannot be percent-encoded",
            operation=operation,
            original_error=e,
        ) from e

    return f"{base_url}?{query}"
