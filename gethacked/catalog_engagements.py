"""Migrations for engagements, offers, pentester assignments and scan jobs."""

from __future__ import annotations

from gethacked.migration import Migration


def engagements_migration() -> Migration:
    """Create the ``engagements`` table holding scope and workflow state."""
    return Migration(
        name="m20260310_000005_create_engagements",
        up_sql=(
            'CREATE TABLE IF NOT EXISTS "engagements" ('
            '"id" INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT, '
            '"pid" TEXT NOT NULL, '
            '"org_id" INTEGER NOT NULL, '
            '"service_id" INTEGER NOT NULL, '
            '"title" TEXT NOT NULL, '
            "\"status\" TEXT NOT NULL DEFAULT 'requested', "
            '"target_systems" TEXT NOT NULL, '
            '"ip_ranges" TEXT NULL, '
            '"domains" TEXT NULL, '
            '"exclusions" TEXT NULL, '
            '"test_window_start" TEXT NULL, '
            '"test_window_end" TEXT NULL, '
            '"contact_name" TEXT NOT NULL, '
            '"contact_email" TEXT NOT NULL, '
            '"contact_phone" TEXT NULL, '
            '"rules_of_engagement" TEXT NULL, '
            '"requested_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            '"starts_at" TEXT NULL, '
            '"completed_at" TEXT NULL, '
            '"price_cents" INTEGER NULL, '
            '"currency" TEXT NULL, '
            '"admin_notes" TEXT NULL, '
            '"created_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            '"updated_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            'CONSTRAINT "fk-engagements-org_id" FOREIGN KEY ("org_id") '
            'REFERENCES "organizations" ("id") ON DELETE CASCADE, '
            'CONSTRAINT "fk-engagements-service_id" FOREIGN KEY ("service_id") '
            'REFERENCES "services" ("id") ON DELETE RESTRICT)',
            'CREATE UNIQUE INDEX "idx-engagements-pid" ON "engagements" ("pid")',
            'CREATE INDEX "idx-engagements-org_id-status" '
            'ON "engagements" ("org_id", "status")',
        ),
        down_sql=('DROP TABLE "engagements"',),
    )


def engagement_offers_migration() -> Migration:
    """Create the ``engagement_offers`` table of priced offers per engagement."""
    return Migration(
        name="m20260310_000006_create_engagement_offers",
        up_sql=(
            'CREATE TABLE IF NOT EXISTS "engagement_offers" ('
            '"id" INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT, '
            '"pid" TEXT NOT NULL, '
            '"engagement_id" INTEGER NOT NULL, '
            '"created_by_user_id" INTEGER NULL, '
            '"amount_cents" INTEGER NOT NULL, '
            "\"currency\" TEXT NOT NULL DEFAULT 'EUR', "
            '"timeline_days" INTEGER NOT NULL, '
            '"deliverables" TEXT NOT NULL, '
            '"terms" TEXT NULL, '
            '"valid_until" TEXT NOT NULL, '
            "\"status\" TEXT NOT NULL DEFAULT 'pending', "
            '"client_response" TEXT NULL, '
            '"created_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            '"updated_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            'CONSTRAINT "fk-engagement_offers-engagement_id" '
            'FOREIGN KEY ("engagement_id") '
            'REFERENCES "engagements" ("id") ON DELETE CASCADE, '
            'CONSTRAINT "fk-engagement_offers-created_by_user_id" '
            'FOREIGN KEY ("created_by_user_id") '
            'REFERENCES "users" ("id") ON DELETE SET NULL)',
            'CREATE UNIQUE INDEX "idx-engagement_offers-pid" '
            'ON "engagement_offers" ("pid")',
            'CREATE INDEX "idx-engagement_offers-engagement_id-status" '
            'ON "engagement_offers" ("engagement_id", "status")',
        ),
        down_sql=('DROP TABLE "engagement_offers"',),
    )


def pentester_assignments_migration() -> Migration:
    """Create ``pentester_assignments``: at most one row per pentester and engagement."""
    return Migration(
        name="m20260310_000007_create_pentester_assignments",
        up_sql=(
            'CREATE TABLE IF NOT EXISTS "pentester_assignments" ('
            '"id" INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT, '
            '"engagement_id" INTEGER NOT NULL, '
            '"user_id" INTEGER NOT NULL, '
            '"assigned_by_user_id" INTEGER NULL, '
            "\"role\" TEXT NOT NULL DEFAULT 'member', "
            '"created_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            '"updated_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            'CONSTRAINT "fk-pentester_assignments-engagement_id" '
            'FOREIGN KEY ("engagement_id") '
            'REFERENCES "engagements" ("id") ON DELETE CASCADE, '
            'CONSTRAINT "fk-pentester_assignments-user_id" '
            'FOREIGN KEY ("user_id") '
            'REFERENCES "users" ("id") ON DELETE CASCADE, '
            'CONSTRAINT "fk-pentester_assignments-assigned_by_user_id" '
            'FOREIGN KEY ("assigned_by_user_id") '
            'REFERENCES "users" ("id") ON DELETE SET NULL)',
            'CREATE UNIQUE INDEX "idx-pentester_assignments-engagement_id-user_id" '
            'ON "pentester_assignments" ("engagement_id", "user_id")',
            'CREATE INDEX "idx-pentester_assignments-user_id" '
            'ON "pentester_assignments" ("user_id")',
        ),
        down_sql=('DROP TABLE "pentester_assignments"',),
    )


def scan_jobs_migration() -> Migration:
    """Create the ``scan_jobs`` table tracking automated scans of a target."""
    return Migration(
        name="m20260310_000008_create_scan_jobs",
        up_sql=(
            'CREATE TABLE IF NOT EXISTS "scan_jobs" ('
            '"id" INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT, '
            '"pid" TEXT NOT NULL, '
            '"org_id" INTEGER NOT NULL, '
            '"target_id" INTEGER NOT NULL, '
            '"service_id" INTEGER NOT NULL, '
            "\"status\" TEXT NOT NULL DEFAULT 'queued', "
            '"scheduled_at" TEXT NULL, '
            '"started_at" TEXT NULL, '
            '"completed_at" TEXT NULL, '
            '"result_summary" TEXT NULL, '
            '"finding_count" INTEGER NOT NULL DEFAULT 0, '
            '"error_message" TEXT NULL, '
            '"created_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            '"updated_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            'CONSTRAINT "fk-scan_jobs-org_id" FOREIGN KEY ("org_id") '
            'REFERENCES "organizations" ("id") ON DELETE CASCADE, '
            'CONSTRAINT "fk-scan_jobs-target_id" FOREIGN KEY ("target_id") '
            'REFERENCES "scan_targets" ("id") ON DELETE CASCADE, '
            'CONSTRAINT "fk-scan_jobs-service_id" FOREIGN KEY ("service_id") '
            'REFERENCES "services" ("id") ON DELETE RESTRICT)',
            'CREATE UNIQUE INDEX "idx-scan_jobs-pid" ON "scan_jobs" ("pid")',
            'CREATE INDEX "idx-scan_jobs-org_id-status" '
            'ON "scan_jobs" ("org_id", "status")',
            'CREATE INDEX "idx-scan_jobs-target_id" ON "scan_jobs" ("target_id")',
        ),
        down_sql=('DROP TABLE "scan_jobs"',),
    )