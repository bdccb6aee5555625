"""GitHub webhook signature verification.

GitHub signs each delivery with HMAC-SHA256 over the exact request body,
keyed with the webhook secret, and sends the result in the
``X-Hub-Signature-256`` header as ``sha256=<hex digest>``.
"""

import hashlib
import hmac

SIGNATURE_HEADER = "x-hub-signature-256"
SIGNATURE_PREFIX = "sha256="


def compute_signature(secret: str, body: bytes) -> str:
    """Compute the GitHub-style signature for a request body.

    Args:
        secret: The shared webhook secret.
        body: The raw request body bytes, exactly as received.

    Returns:
        The signature in ``sha256=<hex digest>`` form.
    """
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return SIGNATURE_PREFIX + digest


def verify_signature(secret: str, body: bytes, signature: str) -> bool:
    """Check a received signature against the body in constant time.

    Both sides are compared as bytes with ``hmac.compare_digest``, so the
    comparison does not stop at the first differing byte and a signature of
    a different length (or with non-ASCII characters) is simply rejected.

    Args:
        secret: The shared webhook secret.
        body: The raw request body bytes.
        signature: The value of the signature header.

    Returns:
        True if the signature matches, False otherwise.
    """
    expected = compute_signature(secret, body)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
