"""Shared request-context primitives.

The tenant context produced by the IAM authentication dependency is the
only way services learn who is calling and which tenant they act within.
"""

from shared_kernel.middleware.tenant_context import TenantContext

__all__ = ["TenantContext"]
