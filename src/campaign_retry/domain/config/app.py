"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from campaign_retry.domain.config.api import ApiConfig
from campaign_retry.domain.config.auth import AuthConfig
from campaign_retry.domain.config.request import RequestDefaultsConfig
from campaign_retry.domain.config.retry import RetryConfig


class AppConfig(BaseModel):
    """Main application configuration.

    Root model aggregating all configuration sections. Validation happens at
    load time so a bad config file fails before any request is built.

    Attributes:
        api: Voice campaigns API configuration
        auth: Bearer token source configuration
        request: Default retry request parameters
        retry: Caller-side re-invocation configuration
    """

    api: ApiConfig = Field(default_factory=ApiConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    request: RequestDefaultsConfig = Field(default_factory=RequestDefaultsConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "api": {
                    "base_url": "https://api.example.com",
                    "timeout": 10.0,
                },
                "auth": {
                    "token_env": "CAMPAIGN_RETRY_TOKEN",
                    "session_file": None,
                },
                "request": {
                    "max_attempts": 3,
                    "delay_ms": 1000,
                },
                "retry": {
                    "max_attempts": 1,
                    "initial_delay": 1.0,
                    "backoff_multiplier": 2.0,
                    "jitter": 0.1,
                },
            }
        },
    )
