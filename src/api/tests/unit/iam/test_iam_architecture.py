"""Architecture tests for the IAM bounded context.

These tests enforce DDD layer boundaries inside IAM and keep it
decoupled from the Notes context. IAM may only import from
shared_kernel, infrastructure (cross-cutting), and its own sub-packages.
"""

from pytest_archon import archrule


class TestIAMBoundedContextIsolation:
    """Tests that IAM does not import from other bounded contexts."""

    def test_iam_does_not_import_notes(self):
        """IAM owns tenants and users; notes are none of its business."""
        (
            archrule("iam_no_notes")
            .match("iam*")
            .should_not_import("notes*")
            .check("iam")
        )


class TestIAMLayerBoundaries:
    """Tests for layering inside IAM."""

    def test_domain_is_pure(self):
        """Domain layer should not depend on infrastructure or frameworks."""
        (
            archrule("iam_domain_pure")
            .match("iam.domain*")
            .should_not_import(
                "iam.application*",
                "iam.infrastructure*",
                "infrastructure*",
                "fastapi*",
                "sqlalchemy*",
            )
            .check("iam")
        )

    def test_ports_do_not_import_implementations(self):
        (
            archrule("iam_ports_no_infrastructure")
            .match("iam.ports*")
            .should_not_import("iam.infrastructure*", "iam.application*")
            .check("iam")
        )

    def test_application_does_not_import_infrastructure(self):
        """Application services depend on repository ports only."""
        (
            archrule("iam_application_no_infrastructure")
            .match("iam.application*")
            .should_not_import("iam.infrastructure*", "iam.presentation*", "fastapi*")
            .check("iam")
        )

    def test_infrastructure_does_not_import_application(self):
        """Infrastructure is used BY the application layer, not vice versa."""
        (
            archrule("iam_infrastructure_no_application")
            .match("iam.infrastructure*")
            .should_not_import("iam.application*", "iam.presentation*")
            .check("iam")
        )
