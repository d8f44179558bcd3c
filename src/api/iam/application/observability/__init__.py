"""Domain-Oriented Observability for IAM application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from iam.application.observability.authentication_probe import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from iam.application.observability.invitation_service_probe import (
    DefaultInvitationServiceProbe,
    InvitationServiceProbe,
)
from iam.application.observability.tenant_service_probe import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)

__all__ = [
    "AuthenticationProbe",
    "DefaultAuthenticationProbe",
    "InvitationServiceProbe",
    "DefaultInvitationServiceProbe",
    "TenantServiceProbe",
    "DefaultTenantServiceProbe",
]
