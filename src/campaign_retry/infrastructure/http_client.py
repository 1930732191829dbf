"""Shared HTTP client utilities (requests).

Transport failures are mapped to the package's error types here so the
callers above only deal with responses or CampaignRetryError subclasses.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from campaign_retry.domain.errors import TimeoutError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def post_json(
    url: str,
    *,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    timeout: float = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> requests.Response:
    """POST JSON once and return the response whatever its status.

    Raises:
        ValueError: If ``timeout`` is not positive
        TimeoutError: If the request exceeded ``timeout``
        TransportError: On any other network-level failure
    """
    if timeout is None or timeout <= 0:
        raise ValueError(f"Timeout must be a positive number of seconds, got {timeout}")
    post = session.post if session is not None else requests.post
    logger.debug(f"HTTP POST {url}")
    try:
        resp = post(url, json=payload, headers=headers, timeout=timeout)
    except requests.exceptions.Timeout as e:
        raise TimeoutError(f"Request timed out after {timeout}s: {e}") from e
    except requests.exceptions.RequestException as e:
        raise TransportError(str(e)) from e
    logger.debug(f"HTTP POST {url} -> {resp.status_code}")
    return resp


def json_body(resp: requests.Response) -> Optional[Dict[str, Any]]:
    """Decode a JSON object body, or None if the body is not one"""
    try:
        data = resp.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None
