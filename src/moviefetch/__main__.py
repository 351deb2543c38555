"""Allow running MovieFetch with ``python -m moviefetch``."""

from moviefetch.cli import app

app()
