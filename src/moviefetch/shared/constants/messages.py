"""
User-facing message constants.
"""

from .system import BASE_SECOND


class UserMessages:
    """Messages shown for failed searches."""

    CHECK_TITLE = "Please check the title!"
    CHECK_NETWORK = "Please check your network connection."
    TRY_AGAIN_LATER = "Please try again later!"
    GENERIC = "Something went wrong."


class UIConfig:
    """Presentation timing constants."""

    # How long an error message stays visible before it is dismissed
    ERROR_MESSAGE_DURATION = 6.0 * BASE_SECOND
