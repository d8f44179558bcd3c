"""Security utilities for invitation tokens and user passwords.

Uses cryptographically secure random generation for tokens and bcrypt
for password hashing.
"""

import secrets

import bcrypt

from shared_kernel.exceptions import ValidationFailedError

INVITATION_TOKEN_BYTES = 32

# bcrypt silently ignores (or rejects, depending on version) input past 72 bytes
BCRYPT_MAX_PASSWORD_BYTES = 72


def generate_invitation_token() -> str:
    """Generate an unguessable, URL-safe invitation token.

    32 bytes of randomness gives 256 bits of entropy, encoded as
    URL-safe base64 (43 characters).

    Returns:
        The token string
    """
    return secrets.token_urlsafe(INVITATION_TOKEN_BYTES)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt with a fresh salt.

    Args:
        password: The plaintext password

    Returns:
        The bcrypt hash as a string

    Raises:
        ValidationFailedError: If the password exceeds bcrypt's input limit
    """
    encoded = password.encode()
    if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValidationFailedError(
            f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes"
        )
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash using constant-time comparison.

    Args:
        password: The plaintext password to verify
        password_hash: The bcrypt hash to verify against

    Returns:
        True if the password matches the hash, False otherwise
    """
    encoded = password.encode()
    if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, password_hash.encode())
    except ValueError:
        # Malformed stored hash
        return False
