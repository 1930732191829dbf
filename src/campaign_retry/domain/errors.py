"""Error taxonomy for campaign retry operations.

Every failure surfaced by the validator or the retry client is one of the
types below, all rooted at CampaignRetryError so callers can catch the
whole family at once.
"""

import builtins
from dataclasses import dataclass
from typing import Any, List, Optional

RETRY_FAILED_MESSAGE = "Retry operation failed"


class CampaignRetryError(Exception):
    """Base class for campaign retry errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class FieldIssue:
    """Single validation failure for one field of a retry request"""

    field: str  # Wire name, e.g. "maxAttempts"
    reason: str  # Machine-checkable code, e.g. "above_maximum"
    message: str
    index: Optional[int] = None  # Position inside campaignIds, if relevant


class ValidationError(CampaignRetryError, ValueError):
    """Retry request rejected before any network call"""

    def __init__(self, issues: List[FieldIssue]):
        self.issues = list(issues)
        super().__init__("; ".join(issue.message for issue in self.issues) or "Invalid retry request")

    @property
    def fields(self) -> List[str]:
        """Names of the fields that failed validation, in order"""
        seen: List[str] = []
        for issue in self.issues:
            if issue.field not in seen:
                seen.append(issue.field)
        return seen


class AuthenticationError(CampaignRetryError):
    """No bearer token available from the credential source"""


class TransportError(CampaignRetryError):
    """Network-level failure: unreachable host, DNS, TLS, broken connection"""


class TimeoutError(TransportError, builtins.TimeoutError):
    """Request exceeded the configured timeout"""


class ServerError(CampaignRetryError):
    """Remote service answered with a 5xx status"""

    def __init__(self, message: str, status_code: int, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class ApplicationError(CampaignRetryError):
    """Remote service reported success: false"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def is_transient(exception: BaseException) -> bool:
    """Check if a caller may reasonably re-invoke after this error"""
    return isinstance(exception, (TransportError, ServerError))
