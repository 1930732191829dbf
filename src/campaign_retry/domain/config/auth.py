"""Authentication configuration model."""

from typing import Optional

from pydantic import BaseModel


class AuthConfig(BaseModel):
    """Where the bearer token is read from.

    The session file takes precedence over the environment variable when set.

    Attributes:
        token_env: Environment variable holding the token
        session_file: Path to a file holding the current session token
    """

    token_env: str = "CAMPAIGN_RETRY_TOKEN"
    session_file: Optional[str] = None
