"""Caller-side re-invocation utilities using tenacity.

The retry client itself never repeats a call. Callers that want to
re-invoke it after transient failures build a decorator here.
"""

from __future__ import annotations

import logging
from typing import Callable

from tenacity import (
    RetryCallState,
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_combine,
    wait_exponential,
    wait_random,
)

from campaign_retry.domain.config.retry import RetryConfig
from campaign_retry.domain.errors import is_transient

logger = logging.getLogger(__name__)

MAX_WAIT_SECONDS = 60.0


def create_retry_decorator(
    retry_config: RetryConfig,
    retry_condition: Callable[[BaseException], bool] = is_transient,
    before_sleep: Callable[[RetryCallState], None] | None = None,
) -> Callable[[Callable], Callable]:
    """Create a retry decorator with tenacity.

    Args:
        retry_config: Retry configuration
        retry_condition: Returns True if the exception should be retried
            (default: transport and server errors)
        before_sleep: Optional callback before sleep (defaults to logging)

    Returns:
        Retry decorator; the last exception is re-raised unchanged
    """
    # Exponential backoff: initial_delay * (backoff_multiplier ^ attempt)
    wait = wait_exponential(
        multiplier=retry_config.initial_delay,
        exp_base=retry_config.backoff_multiplier,
        min=retry_config.initial_delay,
        max=MAX_WAIT_SECONDS,
    )

    if retry_config.jitter > 0:
        jitter_amount = retry_config.initial_delay * retry_config.jitter
        wait = wait_combine(wait, wait_random(-jitter_amount, jitter_amount))

    if before_sleep is None:
        before_sleep = before_sleep_log(logger, logging.WARNING)

    def decorator(func: Callable) -> Callable:
        return retry(
            stop=stop_after_attempt(retry_config.max_attempts),
            wait=wait,
            retry=retry_if_exception(retry_condition),
            reraise=True,
            before_sleep=before_sleep,
        )(func)

    return decorator
