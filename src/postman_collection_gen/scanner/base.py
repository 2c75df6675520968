"""Data models for discovered HTTP call sites.

The scanner turns every recognised ``axios.<method>(...)`` call into a
``RequestRecord``; the collection builder only ever sees these records.
"""

from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HttpMethod(StrEnum):
    """HTTP methods that map to an axios shorthand call."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def from_name(cls, name: str) -> "HttpMethod | None":
        """Map a client method name (any casing) to an HttpMethod, or None."""
        try:
            return cls(name.upper())
        except ValueError:
            return None


# Methods whose second argument is the request payload.
BODY_METHODS = frozenset({HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH})

# Anything json.dumps accepts: str, int, float, bool, None, dict, list.
JsonValue = Any


class RequestRecord(BaseModel):
    """A single request discovered at a call site."""

    model_config = ConfigDict(frozen=True)

    source_path: Path
    method: HttpMethod
    url_template: str = Field(min_length=1)  # may hold {{NAME}} placeholders
    body: JsonValue = None  # only set for POST / PUT / PATCH

    @property
    def sort_key(self) -> tuple[str, str, str]:
        return (self.url_template, self.method.value, self.source_path.as_posix())
