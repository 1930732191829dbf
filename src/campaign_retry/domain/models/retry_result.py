"""RetryResult model - outcome of a retry operation"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class RetryResult:
    """Result of a retry operation"""

    success: bool
    retried: int = 0  # Calls successfully resubmitted
    error: Optional[str] = None  # Set on failure or degraded outcome
    failures: Optional[int] = None  # Only present when the server reports it

    @property
    def is_degraded(self) -> bool:
        """Check if the operation succeeded but reported problems"""
        return self.success and (self.error is not None or bool(self.failures))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success, "retried": self.retried}
        if self.error is not None:
            data["error"] = self.error
        if self.failures is not None:
            data["failures"] = self.failures
        return data
