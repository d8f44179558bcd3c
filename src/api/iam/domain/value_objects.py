"""Value objects for IAM domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from email_validator import EmailNotValidError, validate_email
from ulid import ULID

from iam.domain.exceptions import InvalidEmailError, InvalidSlugError

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def _validate_ulid(value: str, kind: str) -> None:
    try:
        ULID.from_str(value)
    except ValueError as e:
        raise ValueError(f"Invalid {kind}: {value}") from e


@dataclass(frozen=True)
class TenantId:
    """Identifier for a Tenant aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TenantId:
        """Generate a new TenantId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> TenantId:
        """Create TenantId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        _validate_ulid(value, "TenantId")
        return cls(value=value)


@dataclass(frozen=True)
class UserId:
    """Identifier for a User aggregate."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> UserId:
        """Generate a new UserId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> UserId:
        """Create UserId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        _validate_ulid(value, "UserId")
        return cls(value=value)


@dataclass(frozen=True)
class InvitationId:
    """Identifier for an Invitation aggregate."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> InvitationId:
        """Generate a new InvitationId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> InvitationId:
        """Create InvitationId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        _validate_ulid(value, "InvitationId")
        return cls(value=value)


class TenantRole(StrEnum):
    """A user's role within the single tenant they belong to."""

    ADMIN = "admin"
    MEMBER = "member"


class InvitationStatus(StrEnum):
    """Persisted invitation states.

    A pending invitation past its expiry is logically expired even while
    its stored status still reads ``pending``.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"


@dataclass(frozen=True)
class EmailAddress:
    """A normalized (trimmed, lowercased) email address."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def parse(cls, raw: str) -> EmailAddress:
        """Normalize and validate an email address.

        Raises:
            InvalidEmailError: If the trimmed value is not an email address
        """
        try:
            validated = validate_email(
                raw.strip(), check_deliverability=False, test_environment=True
            )
        except EmailNotValidError as e:
            raise InvalidEmailError(f"Invalid email address: {raw!r}") from e
        return cls(value=validated.normalized.lower())


def normalize_slug(raw: str) -> str:
    """Trim and lowercase a tenant slug, rejecting anything but a-z, 0-9 and '-'.

    Raises:
        InvalidSlugError: If the slug is empty or contains other characters
    """
    slug = raw.strip().lower()
    if not _SLUG_PATTERN.match(slug):
        raise InvalidSlugError(f"Invalid tenant slug: {raw!r}")
    return slug
