"""
Unit Tests for GitHub Webhook Signature Verification.

Test Coverage:
    - Round trip: a body signed with the secret verifies
    - Any single-bit change to the signature string is rejected
    - Wrong secret, altered body, empty and malformed headers are rejected
    - Known-answer vector from GitHub's documentation

Running Tests:
    $ pytest tests/test_signature.py -v
"""
import hashlib
import hmac

import pytest

from webhook.signature import compute_signature, verify_signature

SECRET = "It's a Secret to Everybody"

BODIES = [
    b"",
    b"Hello, World!",
    b'{"action":"created"}',
    "{\"action\": \"created\", \"note\": \"ありがとう\"}".encode("utf-8"),
    bytes(range(256)),
]


@pytest.mark.parametrize("body", BODIES)
def test_valid_signature_verifies(body):
    """A signature computed with the shared secret is accepted."""
    assert verify_signature(body, compute_signature(body, SECRET), SECRET) is True


@pytest.mark.parametrize("body", BODIES)
def test_single_bit_mutation_is_rejected(body):
    """Flipping any one bit of any character of the header fails verification."""
    signature = compute_signature(body, SECRET)

    for position, char in enumerate(signature):
        for bit in range(7):
            mutated_char = chr(ord(char) ^ (1 << bit))
            mutated = signature[:position] + mutated_char + signature[position + 1:]
            assert verify_signature(body, mutated, SECRET) is False, (
                f"mutation at position {position}, bit {bit} was accepted"
            )


def test_github_documented_vector():
    """Matches the example from GitHub's webhook validation docs."""
    expected = "sha256=757107ea0eb2509fc211221cce984b8a37570b6d7586c22c46f4379c8b043e17"
    assert compute_signature(b"Hello, World!", SECRET) == expected
    assert verify_signature(b"Hello, World!", expected, SECRET) is True


def test_signature_format():
    """Header value is the sha256= prefix plus a lowercase hex digest."""
    body = b'{"action":"created"}'
    digest = hmac.new(SECRET.encode(), body, hashlib.sha256).hexdigest()

    signature = compute_signature(body, SECRET)

    assert signature == f"sha256={digest}"
    assert signature[len("sha256="):] == signature[len("sha256="):].lower()


def test_wrong_secret_is_rejected():
    body = b'{"action":"created"}'
    assert verify_signature(body, compute_signature(body, "other-secret"), SECRET) is False


def test_altered_body_is_rejected():
    signature = compute_signature(b'{"action":"cancelled"}', SECRET)
    assert verify_signature(b'{"action":"created"}', signature, SECRET) is False


@pytest.mark.parametrize("header", [
    "",
    None,
    "sha256=",
    "sha1=757107ea0eb2509fc211221cce984b8a37570b6d",
    "757107ea0eb2509fc211221cce984b8a37570b6d7586c22c46f4379c8b043e17",
    "SHA256=757107EA0EB2509FC211221CCE984B8A37570B6D7586C22C46F4379C8B043E17",
    "sha256=ありがとう",
])
def test_empty_or_malformed_header_is_rejected(header):
    """Malformed headers return False instead of raising."""
    assert verify_signature(b"Hello, World!", header, SECRET) is False
