"""
CLI Constants
"""


class CLIDefaults:
    """Default values for the command line interface."""

    APP_NAME = "moviefetch"

    # Seconds added to the paging backoff schedule for request latency
    SEARCH_WAIT_MARGIN = 15.0
    DETAIL_WAIT = 10.0


class CLIHelp:
    """Help texts for the command line interface."""

    APP_DESCRIPTION = "Search the OMDb movie database from the terminal."
    SEARCH_HELP = "Search movies by title and list the results."
    DETAIL_HELP = "Show full details for one movie by its IMDb id."
    TITLE_ARG_HELP = "Movie title to search for"
    EXTERNAL_ID_ARG_HELP = "IMDb identifier, e.g. tt0372784"
    WAIT_HELP = "Maximum seconds to wait for results"
    SEARCH_WAIT_HELP = "Maximum seconds to wait for results (default: full paging schedule)"
    CONFIG_HELP = "Path to a TOML configuration file"
    LOG_LEVEL_HELP = "Logging level (DEBUG, INFO, WARNING, ERROR)"
    VERSION_TEXT = "MovieFetch v{version}"
