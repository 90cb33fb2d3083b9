import importlib.util
import json
import os
import subprocess
import sys
from pathlib import Path

from webhook.signature import verify_signature

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "send_test_webhook.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("send_test_webhook", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_script_signature_verifies_with_server_check():
    script = _load_script()
    body = script.build_payload("created", "octocat", "$5 a month")

    assert verify_signature(body, script.sign(body, "s3cret"), "s3cret") is True
    assert json.loads(body)["sponsorship"]["sponsor"]["login"] == "octocat"


def test_script_requires_secret():
    env = {k: v for k, v in os.environ.items() if k != "SPONSORSHIP_WEBHOOK_SECRET"}

    result = subprocess.run(
        [sys.executable, str(SCRIPT)],
        capture_output=True,
        text=True,
        env=env,
    )

    assert result.returncode == 2
    assert "SPONSORSHIP_WEBHOOK_SECRET" in result.stderr


def test_script_reports_unreachable_server():
    result = subprocess.run(
        [sys.executable, str(SCRIPT), "--secret", "s3cret", "--url", "http://127.0.0.1:9/"],
        capture_output=True,
        text=True,
        timeout=120,
    )

    assert result.returncode == 1
    assert "Request failed" in result.stderr
