#!/usr/bin/env python3
"""
API Health Check Script - Verifies a running intake backend responds as expected.

Usage: python3 scripts/check_api_health.py [BASE_URL]
       (defaults to $API_BASE_URL or http://localhost:5000)
"""

import json
import os
import sys
import urllib.error
import urllib.request
from typing import Any

DEFAULT_BASE_URL = "http://localhost:5000"

REQUIRED_RULE_FIELDS = ["name", "email", "deviceModel", "problemDescription"]
RECORD_FIELDS = [
    "id",
    "name",
    "email",
    "deviceModel",
    "problemDescription",
    "priority",
    "image",
    "createdAt",
]


def fetch_json(url: str, timeout: int = 10) -> Any:
    """Fetch JSON from URL."""
    req = urllib.request.Request(
        url, headers={"User-Agent": "RepairIntake-HealthCheck/1.0"}
    )
    with urllib.request.urlopen(req, timeout=timeout) as response:
        return json.loads(response.read().decode())


def check_root(base_url: str) -> tuple[bool, str]:
    """Check the root endpoint reports the backend as running."""
    try:
        data = fetch_json(f"{base_url}/")
        if data.get("ok") is not True:
            return False, f"ERROR: unexpected body {data}"
        return True, f"OK - {data.get('msg', '')}"
    except urllib.error.URLError as e:
        return False, f"Request failed: {e}"
    except json.JSONDecodeError as e:
        return False, f"Invalid JSON: {e}"


def check_submissions_format(base_url: str) -> tuple[bool, str]:
    """Check the list endpoint returns a raw array of records."""
    try:
        data = fetch_json(f"{base_url}/submissions")

        if not isinstance(data, list):
            return False, "ERROR: Expected a JSON array of submissions"
        if not data:
            return True, "OK - 0 submissions (empty)"

        missing = [f for f in RECORD_FIELDS if f not in data[-1]]
        if missing:
            return False, f"ERROR: Latest submission missing fields: {missing}"

        return True, f"OK - {len(data)} submissions, latest id: {data[-1]['id']}"
    except Exception as e:
        return False, f"FAILED: {e}"


def check_validation_rules(base_url: str) -> tuple[bool, str]:
    """Check the shared validation rules cover every required form field."""
    try:
        data = fetch_json(f"{base_url}/validation-rules")
        missing = [f for f in REQUIRED_RULE_FIELDS if f not in data]
        if missing:
            return False, f"Missing rules: {missing}"
        return True, f"OK ({len(data)} fields)"
    except Exception as e:
        return False, f"FAILED: {e}"


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    base_url = (argv[0] if argv else os.environ.get("API_BASE_URL", DEFAULT_BASE_URL))
    base_url = base_url.rstrip("/")

    print("=" * 60)
    print("Repair Intake API Health Check")
    print("=" * 60)
    print(f"\n{base_url}")
    print("-" * 40)

    all_passed = True
    for label, check in [
        ("Health", check_root),
        ("Submissions", check_submissions_format),
        ("Validation rules", check_validation_rules),
    ]:
        ok, msg = check(base_url)
        status = "✓" if ok else "✗"
        print(f"  {status} {label}: {msg}")
        all_passed = all_passed and ok

    print("\n" + "=" * 60)
    if all_passed:
        print("✓ All checks passed - the repair form should work correctly")
        return 0
    else:
        print("✗ Some checks failed - the repair form may have issues")
        return 1


if __name__ == "__main__":
    sys.exit(main())
