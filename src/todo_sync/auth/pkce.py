"""PKCE (RFC 7636) verifier and challenge generation."""

from __future__ import annotations

import hashlib
import time
import uuid
from dataclasses import dataclass

from authlib.common.encoding import to_unicode, urlsafe_b64encode
from authlib.oauth2.rfc7636 import create_s256_code_challenge

# RFC 7636 section 4.1
MAX_VERIFIER_LENGTH = 128


@dataclass
class PkceCodes:
    """PKCE codes for one authorization request.

    Attributes:
        code_verifier: Secret kept by the client until the code exchange.
        code_challenge: S256 digest of the verifier, sent in the authorization URL.
    """

    code_verifier: str
    code_challenge: str


def generate_verifier() -> str:
    """Generate a fresh code verifier.

    A random UUID and a nanosecond timestamp are hashed with SHA-256 and
    encoded as unpadded base64url, giving a 43-character verifier.
    """
    seed = f"{uuid.uuid4()}{time.time_ns()}"
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return to_unicode(urlsafe_b64encode(digest))[:MAX_VERIFIER_LENGTH]


def generate_challenge(verifier: str) -> str:
    """Derive the S256 code challenge for a verifier."""
    return create_s256_code_challenge(verifier)


def generate_pkce_pair() -> PkceCodes:
    """Generate a verifier and its matching challenge."""
    verifier = generate_verifier()
    return PkceCodes(code_verifier=verifier, code_challenge=generate_challenge(verifier))
