"""
GitHub webhook signature verification.

GitHub signs every delivery with HMAC-SHA256 over the raw request body using
the webhook secret, and sends the result in the ``X-Hub-Signature-256``
header as ``sha256=<lowercase hex digest>``.

See https://docs.github.com/en/webhooks/using-webhooks/validating-webhook-deliveries
"""
import hashlib
import hmac

SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="


def compute_signature(raw_body: bytes, secret: str) -> str:
    """Return the ``X-Hub-Signature-256`` header value for a body.

    Example:
        >>> compute_signature(b"{}", "secret")
        'sha256=...'
    """
    mac = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256)
    return SIGNATURE_PREFIX + mac.hexdigest()


def verify_signature(raw_body: bytes, signature_header: str, secret: str) -> bool:
    """Check a delivery's signature against the shared secret.

    The comparison is constant time. An empty, malformed or mismatched
    header returns False; nothing is raised for a bad signature.

    Args:
        raw_body: Request body exactly as received
        signature_header: Value of the X-Hub-Signature-256 header
        secret: Shared webhook secret

    Returns:
        True only if the header matches the expected signature exactly
    """
    if not signature_header or not isinstance(signature_header, str):
        return False

    expected = compute_signature(raw_body, secret)
    # compare_digest on str rejects non-ASCII input with TypeError, so compare bytes
    return hmac.compare_digest(signature_header.encode("utf-8"), expected.encode("utf-8"))
