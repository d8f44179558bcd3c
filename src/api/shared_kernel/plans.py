"""Subscription plans shared by the IAM and Notes contexts."""

from __future__ import annotations

from enum import StrEnum


class TenantPlan(StrEnum):
    """Tenant subscription tier."""

    FREE = "free"
    PRO = "pro"
