import sqlite3

import pytest

from gethacked.catalog_offerings import (
    pricing_tiers_migration,
    scan_targets_migration,
    services_migration,
    subscriptions_migration,
)
from gethacked.migration import Migrator


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    connection.execute("PRAGMA foreign_keys = ON")
    connection.execute('CREATE TABLE "organizations" ("id" INTEGER PRIMARY KEY)')
    Migrator(
        [
            services_migration(),
            pricing_tiers_migration(),
            subscriptions_migration(),
            scan_targets_migration(),
        ]
    ).up(connection)
    yield connection
    connection.close()


def _columns(conn, table):
    return [row[1] for row in conn.execute(f'PRAGMA table_info("{table}")')]


def _indexes(conn):
    rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'index'")
    return {row[0] for row in rows}


def _add_service(conn, pid="svc-1", slug="pentesting"):
    cur = conn.execute(
        "INSERT INTO services (pid, name, slug, category, description) VALUES (?, ?, ?, ?, ?)",
        (pid, "Penetration Testing", slug, "pentest", "desc"),
    )
    return cur.lastrowid


def _add_tier(conn, service_id, pid="tier-1"):
    cur = conn.execute(
        "INSERT INTO pricing_tiers (pid, service_id, name, slug, features) VALUES (?, ?, ?, ?, ?)",
        (pid, service_id, "Recon", "recon", "a,b"),
    )
    return cur.lastrowid


def test_migration_names_keep_order():
    names = [
        services_migration().name,
        pricing_tiers_migration().name,
        subscriptions_migration().name,
        scan_targets_migration().name,
    ]
    assert names == sorted(names)
    assert names[0] == "m20260310_000001_create_services"


def test_services_columns(conn):
    assert _columns(conn, "services") == [
        "id", "pid", "name", "slug", "category", "description",
        "is_automated", "is_active", "sort_order", "created_at", "updated_at",
    ]


def test_service_defaults(conn):
    sid = _add_service(conn)
    row = conn.execute(
        "SELECT is_automated, is_active, sort_order, created_at FROM services WHERE id = ?",
        (sid,),
    ).fetchone()
    assert row[:3] == (0, 1, 0)
    assert row[3]


def test_service_slug_unique(conn):
    _add_service(conn, pid="a", slug="scanning")
    with pytest.raises(sqlite3.IntegrityError):
        _add_service(conn, pid="b", slug="scanning")


def test_service_pid_unique(conn):
    _add_service(conn, pid="same", slug="one")
    with pytest.raises(sqlite3.IntegrityError):
        _add_service(conn, pid="same", slug="two")


def test_pricing_tier_defaults(conn):
    tid = _add_tier(conn, _add_service(conn))
    row = conn.execute(
        "SELECT price_cents, billing_period, max_targets, max_scans_per_month, is_active "
        "FROM pricing_tiers WHERE id = ?",
        (tid,),
    ).fetchone()
    assert row == (0, "monthly", 0, 0, 1)


def test_service_delete_restricted_by_tier(conn):
    sid = _add_service(conn)
    _add_tier(conn, sid)
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute("DELETE FROM services WHERE id = ?", (sid,))


def test_subscription_defaults_and_cascade(conn):
    conn.execute("INSERT INTO organizations (id) VALUES (7)")
    tid = _add_tier(conn, _add_service(conn))
    conn.execute(
        "INSERT INTO subscriptions (pid, org_id, tier_id) VALUES (?, ?, ?)",
        ("sub-1", 7, tid),
    )
    status, expires = conn.execute(
        "SELECT status, expires_at FROM subscriptions"
    ).fetchone()
    assert status == "active"
    assert expires is None
    conn.execute("DELETE FROM organizations WHERE id = 7")
    assert conn.execute("SELECT COUNT(*) FROM subscriptions").fetchone()[0] == 0


def test_scan_target_defaults_and_cascade(conn):
    conn.execute("INSERT INTO organizations (id) VALUES (3)")
    conn.execute(
        "INSERT INTO scan_targets (pid, org_id, hostname) VALUES (?, ?, ?)",
        ("tgt-1", 3, "example.com"),
    )
    assert conn.execute("SELECT target_type FROM scan_targets").fetchone()[0] == "domain"
    conn.execute("DELETE FROM organizations WHERE id = 3")
    assert conn.execute("SELECT COUNT(*) FROM scan_targets").fetchone()[0] == 0


def test_scan_target_requires_existing_org(conn):
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(
            "INSERT INTO scan_targets (pid, org_id) VALUES (?, ?)", ("tgt-x", 999)
        )


def test_indexes_created(conn):
    assert {
        "idx-services-pid",
        "idx-services-slug",
        "idx-pricing_tiers-pid",
        "idx-subscriptions-pid",
        "idx-subscriptions-org_id-status",
        "idx-scan_targets-pid",
        "idx-scan_targets-org_id-hostname",
    } <= _indexes(conn)


def test_revert_drops_tables(conn):
    migrator = Migrator(
        [
            services_migration(),
            pricing_tiers_migration(),
            subscriptions_migration(),
            scan_targets_migration(),
        ]
    )
    assert migrator.down(conn, 4) == [
        "m20260310_000004_create_scan_targets",
        "m20260310_000003_create_subscriptions",
        "m20260310_000002_create_pricing_tiers",
        "m20260310_000001_create_services",
    ]
    tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert not {"services", "pricing_tiers", "subscriptions", "scan_targets"} & tables