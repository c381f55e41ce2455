"""Tests for PKCE verifier and challenge generation."""

import base64
import hashlib
import re

from todo_sync.auth.pkce import generate_challenge, generate_pkce_pair, generate_verifier

BASE64URL = re.compile(r"^[A-Za-z0-9_-]+$")


class TestVerifier:
    def test_length_within_rfc_bounds(self):
        """Verifier should be 43 characters of unpadded base64url."""
        verifier = generate_verifier()
        assert len(verifier) == 43
        assert BASE64URL.match(verifier)

    def test_fresh_each_call(self):
        """Should never repeat a verifier."""
        verifiers = {generate_verifier() for _ in range(50)}
        assert len(verifiers) == 50


class TestChallenge:
    def test_rfc7636_appendix_b(self):
        """Should match the RFC 7636 S256 example."""
        verifier = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"
        assert generate_challenge(verifier) == "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"

    def test_challenge_of_generated_verifier(self):
        """Should be 43 unpadded base64url characters."""
        challenge = generate_challenge(generate_verifier())
        assert len(challenge) == 43
        assert "=" not in challenge
        assert BASE64URL.match(challenge)

    def test_deterministic(self):
        """Same verifier should always give the same challenge."""
        verifier = generate_verifier()
        assert generate_challenge(verifier) == generate_challenge(verifier)

    def test_is_sha256_of_verifier(self):
        """Challenge should be the base64url SHA-256 digest of the verifier."""
        verifier = generate_verifier()
        digest = hashlib.sha256(verifier.encode("ascii")).digest()
        expected = base64.urlsafe_b64encode(digest).rstrip(b"=").decode()
        assert generate_challenge(verifier) == expected

    def test_pair_matches(self):
        """Pair should carry the challenge of its own verifier."""
        codes = generate_pkce_pair()
        assert codes.code_challenge == generate_challenge(codes.code_verifier)
