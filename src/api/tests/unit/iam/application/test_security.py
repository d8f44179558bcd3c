"""Unit tests for invitation token and password utilities.

Note: Test strings in this file are synthetic test data, not real secrets.
"""

import pytest

from iam.application.security import (
    BCRYPT_MAX_PASSWORD_BYTES,
    generate_invitation_token,
    hash_password,
    verify_password,
)
from shared_kernel.exceptions import ValidationFailedError


class TestInvitationTokenGeneration:
    """Tests for generate_invitation_token function."""

    def test_generates_url_safe_token(self):
        """Token should only contain URL-safe characters."""
        token = generate_invitation_token()

        allowed_chars = set(
            "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
        )
        assert all(c in allowed_chars for c in token)

    def test_generates_unique_tokens(self):
        tokens = [generate_invitation_token() for _ in range(100)]

        assert len(tokens) == len(set(tokens))

    def test_has_256_bits_of_entropy(self):
        # token_urlsafe(32) produces 43 characters
        assert len(generate_invitation_token()) >= 43


class TestPasswordHashing:
    """Tests for hash_password and verify_password."""

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("password")

        assert hashed != "password"
        assert hashed.startswith("$2")

    def test_hashes_are_salted(self):
        assert hash_password("password") != hash_password("password")

    def test_verify_correct_password(self):
        hashed = hash_password("password")

        assert verify_password("password", hashed) is True

    def test_verify_wrong_password(self):
        hashed = hash_password("password")

        assert verify_password("passw0rd", hashed) is False

    def test_verify_malformed_hash(self):
        assert verify_password("password", "not-a-bcrypt-hash") is False

    def test_rejects_overlong_password(self):
        with pytest.raises(ValidationFailedError):
            hash_password("x" * (BCRYPT_MAX_PASSWORD_BYTES + 1))

    def test_overlong_password_never_verifies(self):
        hashed = hash_password("x" * BCRYPT_MAX_PASSWORD_BYTES)

        assert verify_password("x" * (BCRYPT_MAX_PASSWORD_BYTES + 1), hashed) is False
