#!/usr/bin/env python3
"""Send a signed GitHub sponsorship webhook to a running sponsorship-notify.

The body is signed with the same HMAC-SHA256 scheme GitHub uses, so the
delivery passes verification when --secret matches the server's
SPONSORSHIP_WEBHOOK_SECRET.

Usage:
    python scripts/send_test_webhook.py --action cancelled
    python scripts/send_test_webhook.py --action created --url http://localhost:5000/

Note: --action created publishes a real post on the configured account.
"""

import argparse
import hashlib
import hmac
import json
import os
import sys

import requests


def build_payload(action: str, sponsor: str, tier: str) -> bytes:
    payload = {
        "action": action,
        "sponsorship": {
            "sponsor": {"login": sponsor},
            "tier": {"name": tier},
        },
        "sender": {"login": sponsor},
    }
    return json.dumps(payload).encode("utf-8")


def sign(body: bytes, secret: str) -> str:
    return "sha256=" + hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--url", default="http://localhost:5000/")
    parser.add_argument("--action", default="cancelled")
    parser.add_argument("--sponsor", default="octocat")
    parser.add_argument("--tier", default="$5 a month")
    parser.add_argument(
        "--secret",
        default=os.environ.get("SPONSORSHIP_WEBHOOK_SECRET"),
        help="webhook secret (default: $SPONSORSHIP_WEBHOOK_SECRET)",
    )
    parser.add_argument("--bad-signature", action="store_true", help="send a wrong signature")
    args = parser.parse_args()

    if not args.secret:
        print("No secret given: pass --secret or set SPONSORSHIP_WEBHOOK_SECRET", file=sys.stderr)
        return 2

    body = build_payload(args.action, args.sponsor, args.tier)
    signature = sign(body, args.secret)
    if args.bad_signature:
        signature = sign(body, args.secret + "-wrong")

    try:
        response = requests.post(
            args.url,
            data=body,
            headers={
                "Content-Type": "application/json",
                "X-GitHub-Event": "sponsorship",
                "X-Hub-Signature-256": signature,
            },
            timeout=90,
        )
    except requests.exceptions.RequestException as exc:
        print(f"Request failed: {exc}", file=sys.stderr)
        return 1

    print(f"HTTP {response.status_code}: {response.text.strip()}")
    return 0 if response.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
