"""Migrations for findings, reports, invoices and the platform admin organization."""

from __future__ import annotations

from gethacked.migration import Migration

ADMIN_ORG_PID = "00000000-0000-0000-0000-000000000001"
ADMIN_ORG_NAME = "GetHacked Platform"
ADMIN_ORG_SLUG = "gethacked-admin"


def findings_migration() -> Migration:
    """Create the ``findings`` table of issues raised by scans or engagements."""
    return Migration(
        name="m20260310_000009_create_findings",
        up_sql=(
            'CREATE TABLE IF NOT EXISTS "findings" ('
            '"id" INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT, '
            '"pid" TEXT NOT NULL, '
            '"org_id" INTEGER NOT NULL, '
            '"engagement_id" INTEGER NULL, '
            '"job_id" INTEGER NULL, '
            '"created_by_user_id" INTEGER NULL, '
            '"title" TEXT NOT NULL, '
            '"description" TEXT NOT NULL, '
            '"technical_description" TEXT NULL, '
            '"impact" TEXT NULL, '
            '"recommendation" TEXT NULL, '
            "\"severity\" TEXT NOT NULL DEFAULT 'low', "
            '"cve_id" TEXT NULL, '
            "\"category\" TEXT NOT NULL DEFAULT 'other', "
            '"evidence" TEXT NULL, '
            '"affected_asset" TEXT NULL, '
            "\"status\" TEXT NOT NULL DEFAULT 'open', "
            '"created_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            '"updated_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            'CONSTRAINT "fk-findings-org_id" FOREIGN KEY ("org_id") '
            'REFERENCES "organizations" ("id") ON DELETE CASCADE, '
            'CONSTRAINT "fk-findings-engagement_id" FOREIGN KEY ("engagement_id") '
            'REFERENCES "engagements" ("id") ON DELETE SET NULL, '
            'CONSTRAINT "fk-findings-job_id" FOREIGN KEY ("job_id") '
            'REFERENCES "scan_jobs" ("id") ON DELETE SET NULL, '
            'CONSTRAINT "fk-findings-created_by_user_id" '
            'FOREIGN KEY ("created_by_user_id") '
            'REFERENCES "users" ("id") ON DELETE SET NULL)',
            'CREATE UNIQUE INDEX "idx-findings-pid" ON "findings" ("pid")',
            'CREATE INDEX "idx-findings-org_id-severity" '
            'ON "findings" ("org_id", "severity")',
            'CREATE INDEX "idx-findings-engagement_id" ON "findings" ("engagement_id")',
            'CREATE INDEX "idx-findings-job_id" ON "findings" ("job_id")',
        ),
        down_sql=('DROP TABLE "findings"',),
    )


def reports_migration() -> Migration:
    """Create the ``reports`` table of generated documents."""
    return Migration(
        name="m20260310_000010_create_reports",
        up_sql=(
            'CREATE TABLE IF NOT EXISTS "reports" ('
            '"id" INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT, '
            '"pid" TEXT NOT NULL, '
            '"org_id" INTEGER NOT NULL, '
            '"engagement_id" INTEGER NULL, '
            '"job_id" INTEGER NULL, '
            '"title" TEXT NOT NULL, '
            "\"report_type\" TEXT NOT NULL DEFAULT 'scan_summary', "
            "\"format\" TEXT NOT NULL DEFAULT 'pdf', "
            '"storage_path" TEXT NULL, '
            '"generated_at" TEXT NULL, '
            '"created_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            '"updated_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            'CONSTRAINT "fk-reports-org_id" FOREIGN KEY ("org_id") '
            'REFERENCES "organizations" ("id") ON DELETE CASCADE, '
            'CONSTRAINT "fk-reports-engagement_id" FOREIGN KEY ("engagement_id") '
            'REFERENCES "engagements" ("id") ON DELETE SET NULL, '
            'CONSTRAINT "fk-reports-job_id" FOREIGN KEY ("job_id") '
            'REFERENCES "scan_jobs" ("id") ON DELETE SET NULL)',
            'CREATE UNIQUE INDEX "idx-reports-pid" ON "reports" ("pid")',
        ),
        down_sql=('DROP TABLE "reports"',),
    )


def invoices_migration() -> Migration:
    """Create the ``invoices`` table billed to an organization."""
    return Migration(
        name="m20260310_000011_create_invoices",
        up_sql=(
            'CREATE TABLE IF NOT EXISTS "invoices" ('
            '"id" INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT, '
            '"pid" TEXT NOT NULL, '
            '"org_id" INTEGER NOT NULL, '
            '"subscription_id" INTEGER NULL, '
            '"engagement_id" INTEGER NULL, '
            '"amount_cents" INTEGER NOT NULL DEFAULT 0, '
            "\"currency\" TEXT NOT NULL DEFAULT 'EUR', "
            "\"status\" TEXT NOT NULL DEFAULT 'draft', "
            '"issued_at" TEXT NULL, '
            '"due_at" TEXT NULL, '
            '"paid_at" TEXT NULL, '
            '"stripe_invoice_id" TEXT NULL, '
            '"pdf_path" TEXT NULL, '
            '"line_items" TEXT NULL, '
            '"created_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            '"updated_at" TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP, '
            'CONSTRAINT "fk-invoices-org_id" FOREIGN KEY ("org_id") '
            'REFERENCES "organizations" ("id") ON DELETE CASCADE, '
            'CONSTRAINT "fk-invoices-subscription_id" FOREIGN KEY ("subscription_id") '
            'REFERENCES "subscriptions" ("id") ON DELETE SET NULL, '
            'CONSTRAINT "fk-invoices-engagement_id" FOREIGN KEY ("engagement_id") '
            'REFERENCES "engagements" ("id") ON DELETE SET NULL)',
            'CREATE UNIQUE INDEX "idx-invoices-pid" ON "invoices" ("pid")',
        ),
        down_sql=('DROP TABLE "invoices"',),
    )


def seed_admin_org_migration() -> Migration:
    """Insert the platform admin organization unless its slug is already taken.

    The unique slug then keeps any user from creating an organization with it.
    """
    return Migration(
        name="m20260310_000012_seed_admin_org",
        up_sql=(
            "INSERT INTO organizations "
            "(pid, name, slug, is_personal, created_at, updated_at) "
            f"SELECT '{ADMIN_ORG_PID}', '{ADMIN_ORG_NAME}', '{ADMIN_ORG_SLUG}', 0, "
            "CURRENT_TIMESTAMP, CURRENT_TIMESTAMP "
            "WHERE NOT EXISTS "
            f"(SELECT 1 FROM organizations WHERE slug = '{ADMIN_ORG_SLUG}')",
        ),
        down_sql=(f"DELETE FROM organizations WHERE slug = '{ADMIN_ORG_SLUG}'",),
    )