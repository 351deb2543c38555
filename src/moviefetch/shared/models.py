"""OMDb API Response Models.

This module defines the models exchanged with the OMDb service. They accept
the service's field names as aliases and are validated at the API boundary.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from moviefetch.shared.constants import OMDbDefaults


class OMDbModel(BaseModel):
    """Base model for OMDb payloads.

    Unknown fields are ignored and models can be populated either by the
    OMDb alias (``imdbID``) or by the Python field name (``external_id``).
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


def _absent_to_none(value: Any) -> Any:
    if isinstance(value, str) and (not value.strip() or value == OMDbDefaults.NOT_AVAILABLE):
        return None
    return value


class Summary(OMDbModel):
    """A movie summary as listed in search results."""

    title: str = Field(alias="Title")
    year: str | None = Field(default=None, alias="Year")
    external_id: str | None = Field(default=None, alias="imdbID")
    type: str | None = Field(default=None, alias="Type")
    poster: str | None = Field(default=None, alias="Poster")

    @property
    def has_poster(self) -> bool:
        """True if the summary carries a usable poster reference."""
        return bool(self.poster) and self.poster != OMDbDefaults.NOT_AVAILABLE


class SearchPage(OMDbModel):
    """One page of title search results."""

    response: str = Field(default="False", alias="Response")
    items: list[Summary] = Field(default_factory=list, alias="Search")
    total_results_raw: str | None = Field(default=None, alias="totalResults")
    error_message: str | None = Field(default=None, alias="Error")

    @field_validator("items", mode="before")
    @classmethod
    def _none_items_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def succeeded(self) -> bool:
        """True if the service reported a successful search."""
        return self.response == OMDbDefaults.RESPONSE_TRUE

    @property
    def total_available(self) -> int | None:
        """Total number of results available on the service, if reported."""
        if self.total_results_raw is None:
            return None
        try:
            return int(self.total_results_raw)
        except ValueError:
            return None


class DetailRecord(OMDbModel):
    """Full attribute set for one movie.

    ``"N/A"`` and empty values are treated as absent.
    """

    title: str = Field(alias="Title")
    year: str | None = Field(default=None, alias="Year")
    rated: str | None = Field(default=None, alias="Rated")
    released: str | None = Field(default=None, alias="Released")
    runtime: str | None = Field(default=None, alias="Runtime")
    genre: str | None = Field(default=None, alias="Genre")
    director: str | None = Field(default=None, alias="Director")
    writer: str | None = Field(default=None, alias="Writer")
    actors: str | None = Field(default=None, alias="Actors")
    plot: str | None = Field(default=None, alias="Plot")
    language: str | None = Field(default=None, alias="Language")
    country: str | None = Field(default=None, alias="Country")
    awards: str | None = Field(default=None, alias="Awards")
    metascore: str | None = Field(default=None, alias="Metascore")
    imdb_rating: str | None = Field(default=None, alias="imdbRating")
    dvd: str | None = Field(default=None, alias="DVD")
    box_office: str | None = Field(default=None, alias="BoxOffice")
    production: str | None = Field(default=None, alias="Production")

    @field_validator(
        "year",
        "rated",
        "released",
        "runtime",
        "genre",
        "director",
        "writer",
        "actors",
        "plot",
        "language",
        "country",
        "awards",
        "metascore",
        "imdb_rating",
        "dvd",
        "box_office",
        "production",
        mode="before",
    )
    @classmethod
    def _not_available_to_none(cls, value: Any) -> Any:
        return _absent_to_none(value)


class PosterAsset(OMDbModel):
    """Raw poster image bytes for one movie."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        frozen=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    external_id: str
    image_bytes: bytes


__all__ = [
    "DetailRecord",
    "OMDbModel",
    "PosterAsset",
    "SearchPage",
    "Summary",
]
