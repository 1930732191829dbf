"""API connection configuration model."""

from typing import Optional

from pydantic import BaseModel, Field


class ApiConfig(BaseModel):
    """Configuration for the voice campaigns API.

    Attributes:
        base_url: API base URL; the retry endpoint is {base_url}/voice-campaigns/retry
        timeout: Request timeout in seconds
    """

    base_url: Optional[str] = None
    timeout: float = Field(10.0, gt=0.0, le=300.0)
