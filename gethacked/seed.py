"""Development seed data for the service catalog, and table truncation."""

from __future__ import annotations

import logging
import sqlite3
import uuid
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TierSeed:
    """A pricing tier inserted under a seeded service."""

    name: str
    slug: str
    price_cents: int
    billing_period: str
    max_targets: int
    max_scans_per_month: int
    features: str
    sort_order: int


@dataclass(frozen=True)
class ServiceSeed:
    """A catalog service inserted by :func:`seed`, with its pricing tiers."""

    name: str
    slug: str
    category: str
    description: str
    is_automated: bool
    sort_order: int
    tiers: tuple[TierSeed, ...] = ()


SEED_SERVICES: tuple[ServiceSeed, ...] = (
    ServiceSeed(
        "Penetration Testing",
        "pentesting",
        "pentest",
        "Professional penetration testing for web applications, APIs, mobile apps, "
        "and infrastructure. Our pentesters simulate real-world attacks to find "
        "vulnerabilities before malicious actors do.",
        False,
        1,
        (
            TierSeed(
                "Recon", "recon", 349_900, "one_time", 3, 0,
                "Up to 3 applications/APIs,Full methodology pentest,Detailed technical "
                "report,60-day remediation support,Retest included",
                1,
            ),
            TierSeed(
                "Strike", "strike", 749_900, "one_time", 10, 0,
                "Full infrastructure scope,Advanced persistent threat simulation,"
                "Board-ready report,90-day remediation support,Two retests included,"
                "Dedicated team lead",
                2,
            ),
        ),
    ),
    ServiceSeed(
        "Vulnerability Scanning",
        "scanning",
        "scanning",
        "Automated vulnerability scanning for your digital assets. Continuous "
        "monitoring detects new vulnerabilities as they emerge, with prioritized "
        "reporting and remediation guidance.",
        True,
        2,
        (
            TierSeed(
                "Basic Scan", "basic-scan", 2_900, "monthly", 5, 1,
                "Up to 5 targets,Monthly scans,Basic vulnerability detection,Email alerts",
                1,
            ),
            TierSeed(
                "Pro Scan", "pro-scan", 9_900, "monthly", 25, 4,
                "Up to 25 targets,Weekly scans,Advanced detection engine,"
                "Slack/webhook integration,Priority support",
                2,
            ),
            TierSeed(
                "Enterprise Scan", "enterprise-scan", 29_900, "monthly", 0, 0,
                "Unlimited targets,Daily scans,Custom scan profiles,API access,"
                "Dedicated support,SLA guarantee",
                3,
            ),
        ),
    ),
    ServiceSeed(
        "Red Team Operations",
        "red-team",
        "offensive",
        "Full-scope adversary simulation testing your people, processes, and "
        "technology. Our red team uses real-world TTPs to evaluate your detection "
        "and response capabilities.",
        False,
        3,
    ),
    ServiceSeed(
        "Attack Surface Mapping",
        "attack-surface-mapping",
        "scanning",
        "Continuous discovery and monitoring of your external attack surface. "
        "Enumerate subdomains, exposed services, open ports, certificates, and "
        "shadow IT. Know what attackers see before they act.",
        True,
        4,
        (
            TierSeed(
                "Free Scan", "free-scan", 0, "one_time", 1, 1,
                "Single domain scan,Subdomain enumeration,Open port discovery,"
                "Certificate transparency check,Basic summary report",
                1,
            ),
            TierSeed(
                "Continuous", "continuous", 4_990, "monthly", 10, 0,
                "Up to 10 domains,Continuous monitoring,Change alerts,"
                "Shadow IT detection,Weekly digest,API access",
                2,
            ),
            TierSeed(
                "Enterprise ASM", "enterprise-asm", 0, "monthly", 0, 0,
                "Unlimited domains,Real-time alerting,Dark web monitoring,"
                "Custom integrations,Dedicated support",
                3,
            ),
        ),
    ),
)

# Children first, in reverse foreign-key dependency order.
TRUNCATE_ORDER: tuple[str, ...] = (
    "findings",
    "reports",
    "pentester_assignments",
    "engagement_offers",
    "scan_jobs",
    "invoices",
    "engagements",
    "subscriptions",
    "scan_targets",
    "pricing_tiers",
    "services",
    "org_invites",
    "org_members",
    "organizations",
    "users",
)


def seed(conn: sqlite3.Connection) -> bool:
    """Insert the catalog services and tiers if ``services`` is empty.

    Returns True when data was inserted, False when the table already held rows.
    """
    (count,) = conn.execute('SELECT COUNT(*) FROM "services"').fetchone()
    if count > 0:
        return False

    with conn:
        for service in SEED_SERVICES:
            cursor = conn.execute(
                'INSERT INTO "services" ("pid", "name", "slug", "category", '
                '"description", "is_automated", "is_active", "sort_order") '
                "VALUES (?, ?, ?, ?, ?, ?, 1, ?)",
                (
                    str(uuid.uuid4()),
                    service.name,
                    service.slug,
                    service.category,
                    service.description,
                    int(service.is_automated),
                    service.sort_order,
                ),
            )
            service_id = cursor.lastrowid
            conn.executemany(
                'INSERT INTO "pricing_tiers" ("pid", "service_id", "name", "slug", '
                '"price_cents", "billing_period", "max_targets", '
                '"max_scans_per_month", "features", "is_active", "sort_order") '
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 1, ?)",
                [
                    (
                        str(uuid.uuid4()),
                        service_id,
                        tier.name,
                        tier.slug,
                        tier.price_cents,
                        tier.billing_period,
                        tier.max_targets,
                        tier.max_scans_per_month,
                        tier.features,
                        tier.sort_order,
                    )
                    for tier in service.tiers
                ],
            )

    logger.info("seed data inserted: 4 services with pricing tiers")
    return True


def _table_exists(conn: sqlite3.Connection, table: str) -> bool:
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (table,)
    ).fetchone()
    return row is not None


def truncate(conn: sqlite3.Connection) -> list[str]:
    """Delete every row of the portal's tables, children first.

    Tables that do not exist are skipped. Returns the names of tables emptied.
    """
    emptied = []
    with conn:
        for table in TRUNCATE_ORDER:
            if _table_exists(conn, table):
                conn.execute(f'DELETE FROM "{table}"')
                emptied.append(table)
    return emptied