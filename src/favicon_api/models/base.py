"""Base models and enums."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )


class FetchStatus(str, Enum):
    """Outcome of a single HTTP attempt."""

    OK = "OK"
    FAIL = "FAIL"
