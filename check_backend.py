#!/usr/bin/env python3
"""Smoke-check a running checklist API over HTTP."""

import json
import sys
from urllib.parse import urljoin

import requests

DEFAULT_URL = "http://localhost:8000"


def check_endpoint(base_url, path, description):
    url = urljoin(base_url, path)
    print(f"\n{'='*60}")
    print(f"Checking: {description}")
    print(f"URL: {url}")
    print(f"{'='*60}")

    try:
        response = requests.get(url, timeout=10)
    except requests.exceptions.Timeout:
        print("❌ TIMEOUT: Request took longer than 10 seconds")
        return False, None
    except requests.exceptions.ConnectionError as e:
        print(f"❌ CONNECTION ERROR: {e}")
        return False, None

    print(f"Status Code: {response.status_code}")
    try:
        print(json.dumps(response.json(), indent=2, ensure_ascii=False))
    except ValueError:
        print(response.text[:500])
    return response.ok, response.status_code


def main(base_url):
    print("🔍 Checklist Backend Check")
    print(f"Target URL: {base_url}")

    checks = [
        ("/", "Root Endpoint"),
        ("/api/health", "Health Endpoint"),
        ("/api/health/database", "Storage Backend"),
        ("/docs", "API Documentation"),
    ]
    results = [(path, *check_endpoint(base_url, path, description)) for path, description in checks]

    print(f"\n{'='*60}")
    print("SUMMARY")
    print(f"{'='*60}")
    for path, ok, status in results:
        print(f"{path:<24} {'✅' if ok else '❌'} - Status: {status}")

    if not any(ok for _, ok, _ in results):
        print("\n❌ Backend is not accessible")
        return 1
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_URL))
    except KeyboardInterrupt:
        print("\n\n⚠️  Check interrupted by user")
        sys.exit(1)
