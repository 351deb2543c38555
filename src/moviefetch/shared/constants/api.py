"""
OMDb API Constants

This module contains the query parameter names, default hosts and HTTP
settings used when talking to the OMDb service.
"""

from .system import BASE_SECOND


class OMDbParams:
    """Query parameter names understood by the OMDb API."""

    API_KEY = "apikey"
    TITLE_SEARCH = "s"
    PAGE = "page"
    EXTERNAL_ID = "i"
    PLOT = "plot"
    FULL_PLOT = "full"

    # Separator between title words, also appended as a trailing wildcard
    WILDCARD = "*"


class OMDbDefaults:
    """Default hosts for the two OMDb endpoints."""

    DATA_URL = "http://www.omdbapi.com/"
    POSTER_URL = "http://img.omdbapi.com/"

    # Placeholder used for absent values in OMDb payloads
    NOT_AVAILABLE = "N/A"
    RESPONSE_TRUE = "True"


class NetworkConfig:
    """HTTP client configuration constants."""

    DEFAULT_TIMEOUT = 10 * BASE_SECOND
    USER_AGENT = "MovieFetch/0.1.0"
    ACCEPT_ANY = "*/*"

    # Connections kept per host by the shared session
    POOL_SIZE = 8

    SUCCESS_STATUS_MIN = 200
    SUCCESS_STATUS_MAX = 299
