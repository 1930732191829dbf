"""Campaign retry service - caller-facing entry point for retry operations"""

import logging
from typing import Any, Optional

from tenacity import RetryCallState

from campaign_retry.domain.config.retry import RetryConfig
from campaign_retry.domain.models.retry_request import RetryRequest
from campaign_retry.domain.models.retry_result import RetryResult
from campaign_retry.domain.validators.retry_request_validator import validate_retry_request
from campaign_retry.infrastructure.retry import create_retry_decorator
from campaign_retry.infrastructure.voice_campaigns.client import VoiceCampaignClient

logger = logging.getLogger(__name__)


class CampaignRetryService:
    """Validates retry requests and submits them to the voice campaigns API

    Validation failures are raised before the client is touched. When the
    retry config allows more than one attempt, transient failures (network,
    timeout, 5xx) re-invoke the client with exponential backoff; application
    errors are raised immediately.
    """

    def __init__(
        self,
        client: VoiceCampaignClient,
        retry_config: Optional[RetryConfig] = None,
    ):
        """Initialize retry service

        Args:
            client: Voice campaigns API client
            retry_config: Caller-side re-invocation config (default: single attempt)
        """
        self.client = client
        self.retry_config = retry_config or RetryConfig()

    def validate(self, raw: Any) -> RetryRequest:
        """Validate loose input without sending anything"""
        return validate_retry_request(raw)

    def retry_failed_calls(self, raw: Any) -> RetryResult:
        """Validate input and resubmit failed calls

        Args:
            raw: Mapping with campaignIds, maxAttempts and delayMs, or a RetryRequest

        Returns:
            RetryResult from the API

        Raises:
            ValidationError: If input is invalid (no request is sent)
            CampaignRetryError: Any error from the client, after the final attempt
        """
        request = self.validate(raw)
        logger.info(
            f"Retrying failed calls for {len(request.campaign_ids)} campaign(s) "
            f"(max_attempts={request.max_attempts}, delay_ms={request.delay_ms})"
        )

        if self.retry_config.max_attempts <= 1:
            return self.client.retry_failed_calls(request)

        decorator = create_retry_decorator(self.retry_config, before_sleep=self._before_sleep_log)
        return decorator(self.client.retry_failed_calls)(request)

    def _before_sleep_log(self, retry_state: RetryCallState) -> None:
        if retry_state.outcome is None:
            return
        exception = retry_state.outcome.exception()
        attempt = retry_state.attempt_number
        logger.warning(
            f"Retry endpoint error (attempt {attempt}/{self.retry_config.max_attempts}): "
            f"{exception}. Retrying..."
        )
