"""Bearer token sources.

The retry client never stores a token: it asks its source on every call, so
a token refreshed between calls is picked up by the next one.
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union

from campaign_retry.domain.errors import AuthenticationError

logger = logging.getLogger(__name__)


class CredentialSource(ABC):
    """Abstract read-only source of the current bearer token"""

    @abstractmethod
    def get_token(self) -> Optional[str]:
        """Return the current token, or None if no session is available"""
        pass


class StaticTokenSource(CredentialSource):
    """Token fixed at construction (CLI --token, tests)"""

    def __init__(self, token: Optional[str]):
        self.token = token

    def get_token(self) -> Optional[str]:
        return self.token or None


class EnvTokenSource(CredentialSource):
    """Token read from an environment variable at call time"""

    def __init__(self, variable: str = "CAMPAIGN_RETRY_TOKEN"):
        self.variable = variable

    def get_token(self) -> Optional[str]:
        return os.getenv(self.variable) or None


class FileTokenSource(CredentialSource):
    """Token read from a session file at call time

    A missing or empty file means there is no active session. An unreadable
    file raises AuthenticationError.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def get_token(self) -> Optional[str]:
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            logger.debug(f"Session file not found: {self.path}")
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise AuthenticationError(f"Cannot read session file {self.path}: {e}") from e
        return token or None


class CredentialSourceFactory:
    """Factory for creating credential sources"""

    SOURCES = {
        "static": StaticTokenSource,
        "env": EnvTokenSource,
        "file": FileTokenSource,
    }

    @classmethod
    def create(cls, source_type: str, config: Dict[str, Any] = None) -> CredentialSource:
        """Create credential source instance

        Args:
            source_type: Type of source (static, env, file)
            config: Keyword arguments for the source constructor

        Returns:
            CredentialSource instance

        Raises:
            ValueError: If source type is not supported
        """
        if config is None:
            config = {}

        source_type_lower = source_type.lower()
        if source_type_lower not in cls.SOURCES:
            available = ", ".join(cls.SOURCES.keys())
            raise ValueError(
                f"Unknown credential source: {source_type}. "
                f"Available sources: {available}"
            )

        logger.debug(f"Creating {source_type_lower} credential source")
        return cls.SOURCES[source_type_lower](**config)

    @classmethod
    def from_settings(
        cls,
        token: Optional[str] = None,
        token_env: str = "CAMPAIGN_RETRY_TOKEN",
        session_file: Optional[str] = None,
    ) -> CredentialSource:
        """Pick a source: explicit token, then session file, then environment"""
        if token:
            return cls.create("static", {"token": token})
        if session_file:
            return cls.create("file", {"path": session_file})
        return cls.create("env", {"variable": token_env})
