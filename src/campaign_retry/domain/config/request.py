"""Defaults for retry requests built by the CLI."""

from pydantic import BaseModel, Field


class RequestDefaultsConfig(BaseModel):
    """Default request parameters when not given on the command line.

    Attributes:
        max_attempts: Attempts per failed call (1-5)
        delay_ms: Delay between attempts in milliseconds (>= 1000)
    """

    max_attempts: int = Field(3, ge=1, le=5)
    delay_ms: int = Field(1000, ge=1000)
