"""Tests for CampaignRetryService"""

from __future__ import annotations

import json
import logging

import pytest
import requests

from campaign_retry.application.retry_service import CampaignRetryService
from campaign_retry.domain.config.retry import RetryConfig
from campaign_retry.domain.errors import (
    ApplicationError,
    AuthenticationError,
    ServerError,
    TimeoutError,
    TransportError,
    ValidationError,
)
from campaign_retry.domain.models.retry_request import RetryRequest
from campaign_retry.domain.models.retry_result import RetryResult
from campaign_retry.infrastructure.credentials import StaticTokenSource
from campaign_retry.infrastructure.voice_campaigns.client import VoiceCampaignClient

CAMPAIGN_ID = "7f14b5e4-69ea-4803-9c62-a5946bc2cc9c"
VALID_CONFIG = {"campaignIds": [CAMPAIGN_ID], "maxAttempts": 3, "delayMs": 1000}


class FakeClient:
    """Client double returning or raising queued outcomes"""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def retry_failed_calls(self, request: RetryRequest) -> RetryResult:
        self.requests.append(request)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _make_response(status_code: int, payload: dict) -> requests.Response:
    r = requests.Response()
    r.status_code = status_code
    r.url = "http://api.example.test/voice-campaigns/retry"
    r._content = json.dumps(payload).encode("utf-8")  # type: ignore[attr-defined]
    r.headers["Content-Type"] = "application/json"
    return r


@pytest.fixture
def no_sleep(monkeypatch):
    sleeps = []
    monkeypatch.setattr("time.sleep", lambda delay: sleeps.append(delay))
    return sleeps


class TestValidation:
    """Tests for pre-flight validation"""

    def test_invalid_input_never_reaches_client(self):
        """Test validation errors are raised before the client is called"""
        client = FakeClient(RetryResult(success=True, retried=1))
        service = CampaignRetryService(client)

        with pytest.raises(ValidationError):
            service.retry_failed_calls({**VALID_CONFIG, "campaignIds": ["invalid-id"]})

        assert client.requests == []

    def test_validated_request_passed_to_client(self):
        """Test the client receives a RetryRequest"""
        client = FakeClient(RetryResult(success=True, retried=5))
        service = CampaignRetryService(client)

        result = service.retry_failed_calls(VALID_CONFIG)

        assert result == RetryResult(success=True, retried=5)
        assert isinstance(client.requests[0], RetryRequest)
        assert client.requests[0].campaign_ids == (CAMPAIGN_ID,)

    def test_validate_only(self):
        client = FakeClient(RetryResult(success=True))
        request = CampaignRetryService(client).validate(VALID_CONFIG)
        assert request.delay_ms == 1000
        assert client.requests == []


class TestSingleAttempt:
    """Tests for the default single-call behavior"""

    @pytest.mark.parametrize(
        "error",
        [
            ServerError("Retry operation failed", status_code=500),
            TransportError("connection refused"),
            ApplicationError("Partial failure", status_code=200),
        ],
    )
    def test_errors_propagate_after_one_call(self, error):
        client = FakeClient(error)
        service = CampaignRetryService(client)

        with pytest.raises(type(error)):
            service.retry_failed_calls(VALID_CONFIG)

        assert len(client.requests) == 1


class TestCallerSideRetries:
    """Tests for re-invoking the client on transient errors"""

    def _service(self, client, max_attempts=3):
        config = RetryConfig(max_attempts=max_attempts, initial_delay=0, backoff_multiplier=2, jitter=0)
        return CampaignRetryService(client, retry_config=config)

    def test_transient_errors_reinvoked(self, no_sleep):
        """Test server and transport errors are retried until success"""
        client = FakeClient(
            ServerError("Retry operation failed", status_code=503),
            TimeoutError("Request timed out"),
            RetryResult(success=True, retried=2),
        )

        result = self._service(client).retry_failed_calls(VALID_CONFIG)

        assert result.retried == 2
        assert len(client.requests) == 3

    def test_application_error_not_reinvoked(self, no_sleep):
        """Test success: false is raised immediately"""
        client = FakeClient(ApplicationError("Campaign already completed", status_code=409))

        with pytest.raises(ApplicationError, match="Campaign already completed"):
            self._service(client).retry_failed_calls(VALID_CONFIG)

        assert len(client.requests) == 1

    def test_authentication_error_not_reinvoked(self, no_sleep):
        client = FakeClient(AuthenticationError("No authentication token available"))

        with pytest.raises(AuthenticationError):
            self._service(client).retry_failed_calls(VALID_CONFIG)

        assert len(client.requests) == 1

    def test_last_error_reraised(self, no_sleep):
        """Test the final transient error surfaces unchanged"""
        client = FakeClient(ServerError("Retry operation failed", status_code=500))

        with pytest.raises(ServerError, match="^Retry operation failed$"):
            self._service(client, max_attempts=2).retry_failed_calls(VALID_CONFIG)

        assert len(client.requests) == 2

    def test_backoff_delays(self, monkeypatch):
        """Test delays grow by the backoff multiplier"""
        sleeps = []
        monkeypatch.setattr("time.sleep", lambda delay: sleeps.append(delay))
        client = FakeClient(TransportError("down"), TransportError("down"), RetryResult(success=True))
        config = RetryConfig(max_attempts=3, initial_delay=1.0, backoff_multiplier=3, jitter=0)

        CampaignRetryService(client, retry_config=config).retry_failed_calls(VALID_CONFIG)

        assert sleeps[0] == pytest.approx(1.0, rel=0.1)
        assert sleeps[1] == pytest.approx(3.0, rel=0.1)

    def test_backoff_delays_with_jitter(self, monkeypatch):
        """Test jitter keeps each delay within +-jitter * initial_delay"""
        sleeps = []
        monkeypatch.setattr("time.sleep", lambda delay: sleeps.append(delay))
        client = FakeClient(TransportError("down"), TransportError("down"), RetryResult(success=True))
        config = RetryConfig(max_attempts=3, initial_delay=1.0, backoff_multiplier=2, jitter=0.1)

        result = CampaignRetryService(client, retry_config=config).retry_failed_calls(VALID_CONFIG)

        assert result.success is True
        assert len(client.requests) == 3
        assert 0.9 <= sleeps[0] <= 1.1
        assert 1.9 <= sleeps[1] <= 2.1

    def test_warning_logged(self, no_sleep, caplog):
        client = FakeClient(TransportError("connection reset"), RetryResult(success=True))

        with caplog.at_level(logging.WARNING, logger="campaign_retry.application.retry_service"):
            self._service(client).retry_failed_calls(VALID_CONFIG)

        assert "attempt 1/3" in caplog.text
        assert "connection reset" in caplog.text


class TestEndToEnd:
    """Tests with the real client and a patched transport"""

    @pytest.fixture
    def service(self):
        client = VoiceCampaignClient(
            "http://api.example.test", credentials=StaticTokenSource("test-token")
        )
        return CampaignRetryService(client)

    def test_success(self, monkeypatch, service):
        monkeypatch.setattr(
            requests, "post", lambda *a, **kw: _make_response(200, {"success": True, "retried": 5})
        )
        result = service.retry_failed_calls(VALID_CONFIG)
        assert (result.success, result.retried) == (True, 5)

    def test_server_error(self, monkeypatch, service):
        monkeypatch.setattr(
            requests, "post", lambda *a, **kw: _make_response(500, {"error": "Internal server error"})
        )
        with pytest.raises(ServerError, match="^Retry operation failed$"):
            service.retry_failed_calls(VALID_CONFIG)

    def test_partial_failure(self, monkeypatch, service):
        monkeypatch.setattr(
            requests,
            "post",
            lambda *a, **kw: _make_response(200, {"success": False, "error": "Partial failure"}),
        )
        with pytest.raises(ApplicationError, match="^Partial failure$"):
            service.retry_failed_calls(VALID_CONFIG)

    def test_invalid_input_sends_nothing(self, monkeypatch, service):
        calls = []
        monkeypatch.setattr(requests, "post", lambda *a, **kw: calls.append(kw))

        with pytest.raises(ValidationError, match="maxAttempts exceeds maximum of 5"):
            service.retry_failed_calls({**VALID_CONFIG, "maxAttempts": 6})
        with pytest.raises(ValidationError, match="delayMs below minimum of 1000"):
            service.retry_failed_calls({**VALID_CONFIG, "delayMs": 999})

        assert calls == []
