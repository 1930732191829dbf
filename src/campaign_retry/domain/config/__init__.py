"""Configuration models with Pydantic validation."""

from campaign_retry.domain.config.api import ApiConfig
from campaign_retry.domain.config.app import AppConfig
from campaign_retry.domain.config.auth import AuthConfig
from campaign_retry.domain.config.request import RequestDefaultsConfig
from campaign_retry.domain.config.retry import RetryConfig

__all__ = [
    "AppConfig",
    "ApiConfig",
    "AuthConfig",
    "RequestDefaultsConfig",
    "RetryConfig",
]
