"""Tests for the API health check script."""

import json
import os
import sys
import urllib.error
from unittest.mock import MagicMock, patch

import pytest

# Add scripts directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "..", "scripts"))

from check_api_health import (
    check_root,
    check_submissions_format,
    check_validation_rules,
    main,
)

BASE_URL = "http://localhost:5000"

SAMPLE_SUBMISSION = {
    "id": "lq2x8k0",
    "name": "Al",
    "email": "a@b.co",
    "phone": None,
    "deviceModel": "Pixel 7",
    "problemDescription": "Screen cracked badly",
    "priority": "High",
    "image": None,
    "createdAt": "2026-01-20T08:00:00.000+00:00",
}

RULES = {
    "name": {},
    "email": {},
    "phone": {},
    "deviceModel": {},
    "problemDescription": {},
    "priority": {},
}


def _responses(mapping: dict):
    """Build a urlopen replacement serving JSON bodies keyed by URL."""

    def fake_urlopen(req, timeout=10):
        body = mapping[req.full_url]
        if isinstance(body, Exception):
            raise body
        response = MagicMock()
        response.read.return_value = json.dumps(body).encode()
        response.__enter__.return_value = response
        return response

    return fake_urlopen


class TestChecks:
    """Tests for the individual endpoint checks."""

    def test_root_ok(self):
        urls = {f"{BASE_URL}/": {"ok": True, "msg": "running"}}
        with patch("check_api_health.urllib.request.urlopen", _responses(urls)):
            ok, msg = check_root(BASE_URL)

        assert ok
        assert "running" in msg

    def test_root_unreachable(self):
        urls = {f"{BASE_URL}/": urllib.error.URLError("refused")}
        with patch("check_api_health.urllib.request.urlopen", _responses(urls)):
            ok, msg = check_root(BASE_URL)

        assert not ok
        assert "Request failed" in msg

    def test_submissions_must_be_array(self):
        urls = {f"{BASE_URL}/submissions": {"submissions": []}}
        with patch("check_api_health.urllib.request.urlopen", _responses(urls)):
            ok, msg = check_submissions_format(BASE_URL)

        assert not ok
        assert "JSON array" in msg

    def test_submissions_empty(self):
        urls = {f"{BASE_URL}/submissions": []}
        with patch("check_api_health.urllib.request.urlopen", _responses(urls)):
            ok, _ = check_submissions_format(BASE_URL)

        assert ok

    def test_submission_missing_fields(self):
        urls = {f"{BASE_URL}/submissions": [{"id": "x"}]}
        with patch("check_api_health.urllib.request.urlopen", _responses(urls)):
            ok, msg = check_submissions_format(BASE_URL)

        assert not ok
        assert "createdAt" in msg

    def test_validation_rules_missing(self):
        urls = {f"{BASE_URL}/validation-rules": {"name": {}}}
        with patch("check_api_health.urllib.request.urlopen", _responses(urls)):
            ok, msg = check_validation_rules(BASE_URL)

        assert not ok
        assert "email" in msg


class TestMain:
    """Tests for the script entry point."""

    @pytest.fixture
    def healthy(self):
        return {
            f"{BASE_URL}/": {"ok": True, "msg": "running"},
            f"{BASE_URL}/submissions": [SAMPLE_SUBMISSION],
            f"{BASE_URL}/validation-rules": RULES,
        }

    def test_all_passed(self, healthy, capsys):
        with patch("check_api_health.urllib.request.urlopen", _responses(healthy)):
            assert main([BASE_URL + "/"]) == 0

        assert "All checks passed" in capsys.readouterr().out

    def test_failure_exit_code(self, healthy):
        healthy[f"{BASE_URL}/submissions"] = {"error": "Failed to read submissions"}
        with patch("check_api_health.urllib.request.urlopen", _responses(healthy)):
            assert main([BASE_URL]) == 1
