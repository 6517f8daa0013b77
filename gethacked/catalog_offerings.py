"""Migrations for services, pricing tiers, subscriptions and scan targets."""

from __future__ import annotations

from gethacked.migration import Migration


def services_migration() -> Migration:
    """Create the ``services`` table with unique pid and slug indexes."""
    return Migration(
        name="m20260310_000001_create_services",
        up_sql=(
            'CREATE TABLE IF NOT EXISTS "services" ('
            '"id" INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT, '
            '"pid" TEXT NOT NULL, '
            '"name" TEXT NOT NULL, '
            '"slug" TEXT NOT NULL, '
            '"category" TEXT NOT NULL, '
            '"description" TEXT NOT NULL, '
            '"is_automated" BOOLEAN NOT NULL DEFAULT 0, '
            '"is_active" BOOLEAN NOT NULL DEFAULT 1, '
            '"sort_order" INTEGER NOT NULL DEFAULT 0, '
            '"created_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            '"updated_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP)',
            'CREATE UNIQUE INDEX "idx-services-pid" ON "services" ("pid")',
            'CREATE UNIQUE INDEX "idx-services-slug" ON "services" ("slug")',
        ),
        down_sql=('DROP TABLE "services"',),
    )


def pricing_tiers_migration() -> Migration:
    """Create the ``pricing_tiers`` table, restricted on service deletion."""
    return Migration(
        name="m20260310_000002_create_pricing_tiers",
        up_sql=(
            'CREATE TABLE IF NOT EXISTS "pricing_tiers" ('
            '"id" INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT, '
            '"pid" TEXT NOT NULL, '
            '"service_id" INTEGER NOT NULL, '
            '"name" TEXT NOT NULL, '
            '"slug" TEXT NOT NULL, '
            '"price_cents" INTEGER NOT NULL DEFAULT 0, '
            "\"billing_period\" TEXT NOT NULL DEFAULT 'monthly', "
            '"max_targets" INTEGER NOT NULL DEFAULT 0, '
            '"max_scans_per_month" INTEGER NOT NULL DEFAULT 0, '
            '"features" TEXT NOT NULL, '
            '"is_active" BOOLEAN NOT NULL DEFAULT 1, '
            '"sort_order" INTEGER NOT NULL DEFAULT 0, '
            '"created_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            '"updated_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            'CONSTRAINT "fk-pricing_tiers-service_id" FOREIGN KEY ("service_id") '
            'REFERENCES "services" ("id") ON DELETE RESTRICT)',
            'CREATE UNIQUE INDEX "idx-pricing_tiers-pid" ON "pricing_tiers" ("pid")',
        ),
        down_sql=('DROP TABLE "pricing_tiers"',),
    )


def subscriptions_migration() -> Migration:
    """Create the ``subscriptions`` table linking organizations to tiers."""
    return Migration(
        name="m20260310_000003_create_subscriptions",
        up_sql=(
            'CREATE TABLE IF NOT EXISTS "subscriptions" ('
            '"id" INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT, '
            '"pid" TEXT NOT NULL, '
            '"org_id" INTEGER NOT NULL, '
            '"tier_id" INTEGER NOT NULL, '
            "\"status\" TEXT NOT NULL DEFAULT 'active', "
            '"starts_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            '"expires_at" TEXT NULL, '
            '"cancelled_at" TEXT NULL, '
            '"stripe_subscription_id" TEXT NULL, '
            '"stripe_customer_id" TEXT NULL, '
            '"created_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            '"updated_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            'CONSTRAINT "fk-subscriptions-org_id" FOREIGN KEY ("org_id") '
            'REFERENCES "organizations" ("id") ON DELETE CASCADE, '
            'CONSTRAINT "fk-subscriptions-tier_id" FOREIGN KEY ("tier_id") '
            'REFERENCES "pricing_tiers" ("id") ON DELETE CASCADE)',
            'CREATE UNIQUE INDEX "idx-subscriptions-pid" ON "subscriptions" ("pid")',
            'CREATE INDEX "idx-subscriptions-org_id-status" '
            'ON "subscriptions" ("org_id", "status")',
        ),
        down_sql=('DROP TABLE "subscriptions"',),
    )


def scan_targets_migration() -> Migration:
    """Create the ``scan_targets`` table owned by an organization."""
    return Migration(
        name="m20260310_000004_create_scan_targets",
        up_sql=(
            'CREATE TABLE IF NOT EXISTS "scan_targets" ('
            '"id" INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT, '
            '"pid" TEXT NOT NULL, '
            '"org_id" INTEGER NOT NULL, '
            '"hostname" TEXT NULL, '
            '"ip_address" TEXT NULL, '
            "\"target_type\" TEXT NOT NULL DEFAULT 'domain', "
            '"verified_at" TEXT NULL, '
            '"verification_method" TEXT NULL, '
            '"verification_token" TEXT NULL, '
            '"label" TEXT NULL, '
            '"created_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            '"updated_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            'CONSTRAINT "fk-scan_targets-org_id" FOREIGN KEY ("org_id") '
            'REFERENCES "organizations" ("id") ON DELETE CASCADE)',
            'CREATE UNIQUE INDEX "idx-scan_targets-pid" ON "scan_targets" ("pid")',
            'CREATE INDEX "idx-scan_targets-org_id-hostname" '
            'ON "scan_targets" ("org_id", "hostname")',
        ),
        down_sql=('DROP TABLE "scan_targets"',),
    )