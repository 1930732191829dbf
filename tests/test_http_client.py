from __future__ import annotations

import json

import pytest
import requests

from campaign_retry.domain.errors import TimeoutError, TransportError
from campaign_retry.infrastructure.http_client import json_body, post_json


def _make_response(status_code: int, content: bytes) -> requests.Response:
    r = requests.Response()
    r.status_code = status_code
    r.url = "http://example.test"
    r._content = content  # type: ignore[attr-defined]
    r.encoding = "utf-8"
    return r


def test_post_json_returns_4xx_response(monkeypatch):
    calls = {"n": 0}

    def fake_post(*args, **kwargs):
        calls["n"] += 1
        return _make_response(404, b'{"error": "not found"}')

    monkeypatch.setattr(requests, "post", fake_post)

    resp = post_json("http://example.test", payload={"x": 1}, headers={}, timeout=1)
    assert resp.status_code == 404
    assert calls["n"] == 1


def test_post_json_does_not_retry_5xx(monkeypatch):
    calls = {"n": 0}

    def fake_post(*args, **kwargs):
        calls["n"] += 1
        return _make_response(500, b"{}")

    monkeypatch.setattr(requests, "post", fake_post)

    resp = post_json("http://example.test", payload={"x": 1}, headers={}, timeout=1)
    assert resp.status_code == 500
    assert calls["n"] == 1


def test_post_json_maps_timeout(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.exceptions.ConnectTimeout("connect timed out")

    monkeypatch.setattr(requests, "post", fake_post)

    with pytest.raises(TimeoutError, match="timed out after 3s"):
        post_json("http://example.test", payload={}, headers={}, timeout=3)


def test_post_json_maps_ssl_error(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.exceptions.SSLError("certificate verify failed")

    monkeypatch.setattr(requests, "post", fake_post)

    with pytest.raises(TransportError, match="certificate verify failed"):
        post_json("http://example.test", payload={}, headers={}, timeout=1)


@pytest.mark.parametrize("timeout", [0, -2.5])
def test_post_json_rejects_non_positive_timeout(monkeypatch, timeout):
    calls = {"n": 0}

    def fake_post(*args, **kwargs):
        calls["n"] += 1
        return _make_response(200, b"{}")

    monkeypatch.setattr(requests, "post", fake_post)

    with pytest.raises(ValueError, match="Timeout must be a positive"):
        post_json("http://example.test", payload={}, headers={}, timeout=timeout)
    assert calls["n"] == 0


@pytest.mark.parametrize(
    "content, expected",
    [
        (json.dumps({"success": True}).encode("utf-8"), {"success": True}),
        (b"[1, 2]", None),
        (b"not json", None),
        (b"", None),
    ],
)
def test_json_body(content, expected):
    assert json_body(_make_response(200, content)) == expected
