"""The ordered list of the portal's own migrations and the migrator built from them."""

from __future__ import annotations

from collections.abc import Iterable

from gethacked.catalog_engagements import (
    engagement_offers_migration,
    engagements_migration,
    pentester_assignments_migration,
    scan_jobs_migration,
)
from gethacked.catalog_offerings import (
    pricing_tiers_migration,
    scan_targets_migration,
    services_migration,
    subscriptions_migration,
)
from gethacked.catalog_results import (
    findings_migration,
    invoices_migration,
    reports_migration,
    seed_admin_org_migration,
)
from gethacked.migration import Migration, Migrator


def app_migrations() -> list[Migration]:
    """The portal's migrations in the order they must run."""
    return [
        services_migration(),
        pricing_tiers_migration(),
        subscriptions_migration(),
        scan_targets_migration(),
        engagements_migration(),
        engagement_offers_migration(),
        pentester_assignments_migration(),
        scan_jobs_migration(),
        findings_migration(),
        reports_migration(),
        invoices_migration(),
        seed_admin_org_migration(),
    ]


def build_migrator(core: Iterable[Migration] = ()) -> Migrator:
    """A migrator running the ``core`` migrations first, then the portal's own."""
    return Migrator([*core, *app_migrations()])