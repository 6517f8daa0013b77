import sqlite3

import pytest

from gethacked.catalog_engagements import (
    engagement_offers_migration,
    engagements_migration,
    pentester_assignments_migration,
    scan_jobs_migration,
)
from gethacked.catalog_offerings import scan_targets_migration, services_migration
from gethacked.migration import Migration, Migrator

_CORE = Migration(
    name="core_tables",
    up_sql=(
        'CREATE TABLE "organizations" ("id" INTEGER PRIMARY KEY AUTOINCREMENT, '
        '"pid" TEXT NOT NULL, "name" TEXT NOT NULL, "slug" TEXT NOT NULL)',
        'CREATE TABLE "users" ("id" INTEGER PRIMARY KEY AUTOINCREMENT, '
        '"pid" TEXT NOT NULL, "email" TEXT NOT NULL)',
    ),
    down_sql=('DROP TABLE "users"', 'DROP TABLE "organizations"'),
)

_GROUP = [
    engagements_migration(),
    engagement_offers_migration(),
    pentester_assignments_migration(),
    scan_jobs_migration(),
]


def _migrator():
    return Migrator([_CORE, services_migration(), scan_targets_migration(), *_GROUP])


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    connection.execute("PRAGMA foreign_keys = ON")
    _migrator().up(connection)
    yield connection
    connection.close()


def _seed_base(conn):
    with conn:
        org = conn.execute(
            "INSERT INTO organizations (pid, name, slug) VALUES ('o1', 'Org', 'org')"
        ).lastrowid
        user = conn.execute(
            "INSERT INTO users (pid, email) VALUES ('u1', 'tester@example.com')"
        ).lastrowid
        service = conn.execute(
            "INSERT INTO services (pid, name, slug, category, description) "
            "VALUES ('s1', 'Penetration Testing', 'pentesting', 'pentest', 'desc')"
        ).lastrowid
        engagement = conn.execute(
            "INSERT INTO engagements (pid, org_id, service_id, title, target_systems, "
            "contact_name, contact_email) VALUES ('e1', ?, ?, 'Web test', 'app', "
            "'Alice', 'alice@example.com')",
            (org, service),
        ).lastrowid
    return org, user, service, engagement


def _tables(conn):
    rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
    return {row[0] for row in rows}


def _indexes(conn, table):
    return {row[1]: row[2] for row in conn.execute(f'PRAGMA index_list("{table}")')}


def test_migration_names_are_ordered():
    names = [m.name for m in _GROUP]
    assert names == [
        "m20260310_000005_create_engagements",
        "m20260310_000006_create_engagement_offers",
        "m20260310_000007_create_pentester_assignments",
        "m20260310_000008_create_scan_jobs",
    ]
    assert names == sorted(names)


def test_all_tables_created(conn):
    assert {
        "engagements",
        "engagement_offers",
        "pentester_assignments",
        "scan_jobs",
    } <= _tables(conn)


def test_engagement_defaults(conn):
    _, _, _, engagement = _seed_base(conn)
    status, requested_at, price = conn.execute(
        "SELECT status, requested_at, price_cents FROM engagements WHERE id = ?",
        (engagement,),
    ).fetchone()
    assert status == "requested"
    assert requested_at
    assert price is None


def test_engagement_indexes(conn):
    indexes = _indexes(conn, "engagements")
    assert indexes["idx-engagements-pid"] == 1
    assert indexes["idx-engagements-org_id-status"] == 0


def test_engagement_pid_unique(conn):
    org, _, service, _ = _seed_base(conn)
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(
            "INSERT INTO engagements (pid, org_id, service_id, title, target_systems, "
            "contact_name, contact_email) VALUES ('e1', ?, ?, 't', 'x', 'B', "
            "'bob@example.com')",
            (org, service),
        )


def test_engagement_requires_target_systems(conn):
    org, _, service, _ = _seed_base(conn)
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(
            "INSERT INTO engagements (pid, org_id, service_id, title, "
            "contact_name, contact_email) VALUES ('e2', ?, ?, 't', 'B', "
            "'bob@example.com')",
            (org, service),
        )


def test_service_delete_restricted_by_engagement(conn):
    _, _, service, _ = _seed_base(conn)
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute("DELETE FROM services WHERE id = ?", (service,))


def test_offer_defaults_and_user_set_null(conn):
    _, user, _, engagement = _seed_base(conn)
    with conn:
        offer = conn.execute(
            "INSERT INTO engagement_offers (pid, engagement_id, created_by_user_id, "
            "amount_cents, timeline_days, deliverables, valid_until) "
            "VALUES ('of1', ?, ?, 100, 5, 'report', '2030-01-01T23:59:59Z')",
            (engagement, user),
        ).lastrowid
    currency, status = conn.execute(
        "SELECT currency, status FROM engagement_offers WHERE id = ?", (offer,)
    ).fetchone()
    assert (currency, status) == ("EUR", "pending")
    with conn:
        conn.execute("DELETE FROM users WHERE id = ?", (user,))
    creator = conn.execute(
        "SELECT created_by_user_id FROM engagement_offers WHERE id = ?", (offer,)
    ).fetchone()[0]
    assert creator is None


def test_offer_cascades_with_engagement(conn):
    _, _, _, engagement = _seed_base(conn)
    with conn:
        conn.execute(
            "INSERT INTO engagement_offers (pid, engagement_id, amount_cents, "
            "timeline_days, deliverables, valid_until) "
            "VALUES ('of1', ?, 100, 5, 'report', '2030-01-01T23:59:59Z')",
            (engagement,),
        )
        conn.execute("DELETE FROM engagements WHERE id = ?", (engagement,))
    count = conn.execute("SELECT COUNT(*) FROM engagement_offers").fetchone()[0]
    assert count == 0
    assert _indexes(conn, "engagement_offers")["idx-engagement_offers-pid"] == 1


def test_assignment_default_role_and_uniqueness(conn):
    _, user, _, engagement = _seed_base(conn)
    with conn:
        conn.execute(
            "INSERT INTO pentester_assignments (engagement_id, user_id) VALUES (?, ?)",
            (engagement, user),
        )
    role = conn.execute("SELECT role FROM pentester_assignments").fetchone()[0]
    assert role == "member"
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(
            "INSERT INTO pentester_assignments (engagement_id, user_id) VALUES (?, ?)",
            (engagement, user),
        )


def test_assignment_indexes(conn):
    indexes = _indexes(conn, "pentester_assignments")
    assert indexes["idx-pentester_assignments-engagement_id-user_id"] == 1
    assert indexes["idx-pentester_assignments-user_id"] == 0


def test_assigner_set_null_and_user_cascade(conn):
    _, user, _, engagement = _seed_base(conn)
    with conn:
        admin = conn.execute(
            "INSERT INTO users (pid, email) VALUES ('u2', 'admin@example.com')"
        ).lastrowid
        conn.execute(
            "INSERT INTO pentester_assignments (engagement_id, user_id, "
            "assigned_by_user_id) VALUES (?, ?, ?)",
            (engagement, user, admin),
        )
        conn.execute("DELETE FROM users WHERE id = ?", (admin,))
    assigner = conn.execute(
        "SELECT assigned_by_user_id FROM pentester_assignments"
    ).fetchone()[0]
    assert assigner is None
    with conn:
        conn.execute("DELETE FROM users WHERE id = ?", (user,))
    assert conn.execute("SELECT COUNT(*) FROM pentester_assignments").fetchone()[0] == 0


def test_scan_job_defaults_and_cascades(conn):
    org, _, service, _ = _seed_base(conn)
    with conn:
        target = conn.execute(
            "INSERT INTO scan_targets (pid, org_id, hostname) VALUES ('t1', ?, 'a.com')",
            (org,),
        ).lastrowid
        conn.execute(
            "INSERT INTO scan_jobs (pid, org_id, target_id, service_id) "
            "VALUES ('j1', ?, ?, ?)",
            (org, target, service),
        )
    status, finding_count, summary = conn.execute(
        "SELECT status, finding_count, result_summary FROM scan_jobs"
    ).fetchone()
    assert (status, finding_count, summary) == ("queued", 0, None)
    with conn:
        conn.execute("DELETE FROM scan_targets WHERE id = ?", (target,))
    assert conn.execute("SELECT COUNT(*) FROM scan_jobs").fetchone()[0] == 0


def test_scan_job_indexes(conn):
    indexes = _indexes(conn, "scan_jobs")
    assert indexes["idx-scan_jobs-pid"] == 1
    assert indexes["idx-scan_jobs-org_id-status"] == 0
    assert indexes["idx-scan_jobs-target_id"] == 0


def test_down_drops_tables_in_reverse(conn):
    reverted = _migrator().down(conn, 4)
    assert reverted == [m.name for m in reversed(_GROUP)]
    remaining = _tables(conn)
    for table in ("engagements", "engagement_offers", "pentester_assignments", "scan_jobs"):
        assert table not in remaining
    assert "scan_targets" in remaining


def test_up_is_idempotent(conn):
    assert _migrator().up(conn) == []
    assert _migrator().pending(conn) == []