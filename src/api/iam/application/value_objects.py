"""Application-layer value objects for IAM bounded context.

Read-only results returned by application services to the presentation
layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from iam.domain.aggregates import Invitation, Tenant, User
from iam.domain.value_objects import TenantRole


@dataclass(frozen=True)
class SessionGrant:
    """A signed session token together with the principal it was issued for.

    Returned by password login and by invitation acceptance.
    """

    session_token: str
    user: User
    tenant: Tenant


@dataclass(frozen=True)
class InvitationView:
    """An invitation with the tenant and inviter details listings display.

    Attributes:
        invitation: The invitation aggregate (includes the token)
        tenant: The inviting tenant, if it still exists
        invited_by_email: Email of the inviting admin, if they still exist
    """

    invitation: Invitation
    tenant: Tenant | None
    invited_by_email: str | None


@dataclass(frozen=True)
class InvitationSummary:
    """Public view of a live invitation, returned to unauthenticated callers."""

    email: str
    role: TenantRole
    tenant_name: str
    tenant_slug: str
    invited_by_email: str | None
    expires_at: datetime
