"""Voice campaigns API client"""

import logging
from typing import Any, Dict, Optional

import requests

from campaign_retry.domain.errors import (
    RETRY_FAILED_MESSAGE,
    ApplicationError,
    AuthenticationError,
    ServerError,
)
from campaign_retry.domain.models.retry_request import RetryRequest
from campaign_retry.domain.models.retry_result import RetryResult
from campaign_retry.infrastructure.credentials import CredentialSource
from campaign_retry.infrastructure.http_client import DEFAULT_TIMEOUT, json_body, post_json

logger = logging.getLogger(__name__)

SERVER_ERROR_THRESHOLD = 500


class VoiceCampaignClient:
    """Client for the voice campaigns retry endpoint

    Each call re-reads the token from the credential source and issues
    exactly one request; re-invoking on failure is up to the caller.
    """

    RETRY_PATH = "/voice-campaigns/retry"

    def __init__(
        self,
        base_url: str,
        credentials: CredentialSource,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """Initialize voice campaigns client

        Args:
            base_url: API base URL (without the /voice-campaigns suffix)
            credentials: Source of the bearer token, read on every call
            timeout: Request timeout in seconds (default: 10)
            session: Optional requests session for connection reuse

        Raises:
            ValueError: If base_url is empty or timeout is not positive
        """
        if not base_url:
            raise ValueError(
                "API base URL is required. "
                "Set CAMPAIGN_RETRY_API_BASE environment variable or provide in config."
            )
        if timeout is None or timeout <= 0:
            raise ValueError(f"Timeout must be a positive number of seconds, got {timeout}")
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials
        self.timeout = timeout
        self.session = session

    @property
    def retry_url(self) -> str:
        return f"{self.base_url}{self.RETRY_PATH}"

    def _headers(self) -> Dict[str, str]:
        token = self.credentials.get_token()
        if not token:
            raise AuthenticationError("No authentication token available")
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }

    def retry_failed_calls(self, request: RetryRequest) -> RetryResult:
        """Resubmit failed calls for the campaigns in a validated request

        Args:
            request: Validated retry request

        Returns:
            RetryResult with success=True and the number of retried calls

        Raises:
            AuthenticationError: If the credential source has no token
            TimeoutError: If the request timed out
            TransportError: On network failure
            ServerError: If the service answered with status >= 500
            ApplicationError: If the service reported success: false
        """
        headers = self._headers()
        logger.debug(f"Retrying failed calls for {len(request.campaign_ids)} campaign(s)")
        resp = post_json(
            self.retry_url,
            payload=request.to_payload(),
            headers=headers,
            timeout=self.timeout,
            session=self.session,
        )
        return self._interpret(resp)

    def _interpret(self, resp: requests.Response) -> RetryResult:
        """Map a response to a RetryResult or raise the matching error"""
        body = json_body(resp)

        if resp.status_code >= SERVER_ERROR_THRESHOLD:
            message = _string_field(body, "message") or RETRY_FAILED_MESSAGE
            details = body.get("error") if body else resp.text or None
            raise ServerError(message, status_code=resp.status_code, details=details)

        if not body or body.get("success") is not True:
            message = _string_field(body, "error") or RETRY_FAILED_MESSAGE
            raise ApplicationError(message, status_code=resp.status_code)

        return RetryResult(
            success=True,
            retried=_int_field(body, "retried") or 0,
            error=_string_field(body, "error"),
            failures=_int_field(body, "failures"),
        )


def _string_field(body: Optional[Dict[str, Any]], key: str) -> Optional[str]:
    value = body.get(key) if body else None
    return value if isinstance(value, str) and value else None


def _int_field(body: Optional[Dict[str, Any]], key: str) -> Optional[int]:
    value = body.get(key) if body else None
    # bool is an int subclass but never a count
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value
