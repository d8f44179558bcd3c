"""Ports (interfaces) for IAM bounded context.

Ports define the contracts for repositories and collaborators without
specifying implementation details. This allows for dependency inversion
and makes the domain layer independent of infrastructure.
"""

from iam.ports.authentication import ISessionTokenIssuer
from iam.ports.repositories import (
    IInvitationRepository,
    ITenantRepository,
    IUserRepository,
)

__all__ = [
    "IInvitationRepository",
    "ISessionTokenIssuer",
    "ITenantRepository",
    "IUserRepository",
]
