"""Platform administration of engagements: offers, assignments and workflow status."""

from __future__ import annotations

import re
import sqlite3
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any

from gethacked.errors import BadRequestError, NotFoundError

ROUTE_PREFIX = "/admin"
ROUTES: tuple[tuple[str, str], ...] = (
    ("GET", f"{ROUTE_PREFIX}/engagements"),
    ("GET", f"{ROUTE_PREFIX}/engagements/all"),
    ("GET", f"{ROUTE_PREFIX}/engagements/{{pid}}"),
    ("POST", f"{ROUTE_PREFIX}/engagements/{{pid}}/offer"),
    ("POST", f"{ROUTE_PREFIX}/engagements/{{pid}}/assign"),
    ("POST", f"{ROUTE_PREFIX}/engagements/{{pid}}/status"),
)

PENDING_STATUSES = ("requested", "negotiating")
OFFERABLE_STATUSES = ("requested", "negotiating")
ASSIGNABLE_STATUSES = ("accepted", "in_progress")
CANCELLABLE_STATUSES = frozenset(
    {"requested", "offer_sent", "negotiating", "accepted", "in_progress"}
)
_TRANSITIONS = {
    "in_progress": frozenset({"review"}),
    "review": frozenset({"delivered", "in_progress"}),
}

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def is_valid_transition(current: str, target: str) -> bool:
    """True if an engagement may move from ``current`` to ``target``.

    Delivered engagements and those under review cannot be cancelled.
    """
    if target in _TRANSITIONS.get(current, frozenset()):
        return True
    return target == "cancelled" and current in CANCELLABLE_STATUSES


@dataclass(frozen=True)
class OfferParams:
    """An offer drawn up by an administrator; ``valid_until`` is a YYYY-MM-DD date."""

    amount_cents: int
    currency: str
    timeline_days: int
    deliverables: str
    valid_until: str
    terms: str | None = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _end_of_day(value: str) -> datetime:
    if not _DATE_RE.fullmatch(value):
        raise BadRequestError("Invalid date format for valid_until")
    try:
        day = date.fromisoformat(value)
    except ValueError:
        raise BadRequestError("Invalid date format for valid_until") from None
    return datetime.combine(day, time(23, 59, 59), tzinfo=timezone.utc)


def _fetch_all(
    conn: sqlite3.Connection, sql: str, params: tuple[Any, ...] = ()
) -> list[dict[str, Any]]:
    cursor = conn.execute(sql, params)
    names = [column[0] for column in cursor.description]
    return [dict(zip(names, row)) for row in cursor.fetchall()]


def _fetch_one(
    conn: sqlite3.Connection, sql: str, params: tuple[Any, ...] = ()
) -> dict[str, Any] | None:
    rows = _fetch_all(conn, sql, params)
    return rows[0] if rows else None


class AdminEngagements:
    """Engagements across every organization, as managed by platform administrators."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def _engagement(self, pid: str) -> dict[str, Any]:
        item = _fetch_one(self.conn, 'SELECT * FROM "engagements" WHERE "pid" = ?', (pid,))
        if item is None:
            raise NotFoundError()
        return item

    def _offers(self, engagement_id: int) -> list[dict[str, Any]]:
        return _fetch_all(
            self.conn,
            'SELECT * FROM "engagement_offers" WHERE "engagement_id" = ? ORDER BY "id" DESC',
            (engagement_id,),
        )

    def pending(self) -> list[dict[str, Any]]:
        """Engagements awaiting an administrator's offer, newest first."""
        marks = ", ".join("?" for _ in PENDING_STATUSES)
        return _fetch_all(
            self.conn,
            f'SELECT * FROM "engagements" WHERE "status" IN ({marks}) ORDER BY "id" DESC',
            PENDING_STATUSES,
        )

    def all(self) -> list[dict[str, Any]]:
        """Every engagement in every status, newest first."""
        return _fetch_all(self.conn, 'SELECT * FROM "engagements" ORDER BY "id" DESC')

    def show(self, pid: str) -> dict[str, Any]:
        """An engagement with its offers, pentester assignments and findings."""
        item = self._engagement(pid)
        return {
            "engagement": item,
            "offers": self._offers(item["id"]),
            "assignments": _fetch_all(
                self.conn,
                'SELECT * FROM "pentester_assignments" WHERE "engagement_id" = ? '
                'ORDER BY "id"',
                (item["id"],),
            ),
            "findings": _fetch_all(
                self.conn,
                'SELECT * FROM "findings" WHERE "engagement_id" = ? ORDER BY "id"',
                (item["id"],),
            ),
        }

    def create_offer(
        self, pid: str, admin_user_id: int, offer: OfferParams
    ) -> dict[str, Any]:
        """Send a new offer, superseding pending ones; return the created offer."""
        item = self._engagement(pid)
        if item["status"] not in OFFERABLE_STATUSES:
            raise BadRequestError("Cannot create offer in current state")
        valid_until = _end_of_day(offer.valid_until)

        offer_pid = str(uuid.uuid4())
        now = _now()
        with self.conn:
            self.conn.execute(
                'UPDATE "engagement_offers" SET "status" = \'superseded\', "updated_at" = ? '
                'WHERE "engagement_id" = ? AND "status" = \'pending\'',
                (now, item["id"]),
            )
            self.conn.execute(
                'INSERT INTO "engagement_offers" ("pid", "engagement_id", '
                '"created_by_user_id", "amount_cents", "currency", "timeline_days", '
                '"deliverables", "terms", "valid_until", "status", "created_at", '
                '"updated_at") VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, \'pending\', ?, ?)',
                (
                    offer_pid,
                    item["id"],
                    admin_user_id,
                    offer.amount_cents,
                    offer.currency,
                    offer.timeline_days,
                    offer.deliverables,
                    offer.terms,
                    valid_until.isoformat(),
                    now,
                    now,
                ),
            )
            self.conn.execute(
                'UPDATE "engagements" SET "status" = \'offer_sent\', "updated_at" = ? '
                'WHERE "id" = ?',
                (now, item["id"]),
            )
        created = _fetch_one(
            self.conn, 'SELECT * FROM "engagement_offers" WHERE "pid" = ?', (offer_pid,)
        )
        assert created is not None
        return created

    def assign_pentester(
        self, pid: str, admin_user_id: int, user_id: int, role: str | None = None
    ) -> dict[str, Any]:
        """Assign a pentester; an accepted engagement then moves to in progress."""
        item = self._engagement(pid)
        if item["status"] not in ASSIGNABLE_STATUSES:
            raise BadRequestError("Cannot assign pentester in current state")

        user = _fetch_one(self.conn, 'SELECT "id" FROM "users" WHERE "id" = ?', (user_id,))
        if user is None:
            raise BadRequestError("User not found")

        # A client's own member must not gain pentester access to the engagement.
        member = _fetch_one(
            self.conn,
            'SELECT "id" FROM "org_members" WHERE "org_id" = ? AND "user_id" = ?',
            (item["org_id"], user_id),
        )
        if member is not None:
            raise BadRequestError(
                "Cannot assign a client org member as pentester to their own engagement"
            )

        existing = _fetch_one(
            self.conn,
            'SELECT "id" FROM "pentester_assignments" '
            'WHERE "engagement_id" = ? AND "user_id" = ?',
            (item["id"], user_id),
        )
        if existing is not None:
            raise BadRequestError("Pentester already assigned to this engagement")

        now = _now()
        with self.conn:
            cursor = self.conn.execute(
                'INSERT INTO "pentester_assignments" ("engagement_id", "user_id", '
                '"assigned_by_user_id", "role", "created_at", "updated_at") '
                "VALUES (?, ?, ?, ?, ?, ?)",
                (item["id"], user_id, admin_user_id, role or "member", now, now),
            )
            assignment_id = cursor.lastrowid
            if item["status"] == "accepted":
                self.conn.execute(
                    'UPDATE "engagements" SET "status" = \'in_progress\', '
                    '"starts_at" = ?, "updated_at" = ? WHERE "id" = ?',
                    (now, now, item["id"]),
                )
        created = _fetch_one(
            self.conn,
            'SELECT * FROM "pentester_assignments" WHERE "id" = ?',
            (assignment_id,),
        )
        assert created is not None
        return created

    def update_status(
        self, pid: str, status: str, admin_notes: str | None = None
    ) -> dict[str, Any]:
        """Move an engagement along its workflow; return the updated engagement."""
        item = self._engagement(pid)
        if not is_valid_transition(item["status"], status):
            raise BadRequestError(
                f"Invalid transition from '{item['status']}' to '{status}'"
            )
        now = _now()
        assignments = ['"status" = ?', '"updated_at" = ?']
        params: list[Any] = [status, now]
        if admin_notes is not None:
            assignments.append('"admin_notes" = ?')
            params.append(admin_notes)
        if status in ("delivered", "cancelled"):
            assignments.append('"completed_at" = ?')
            params.append(now)
        params.append(item["id"])
        with self.conn:
            self.conn.execute(
                f'UPDATE "engagements" SET {", ".join(assignments)} WHERE "id" = ?',
                tuple(params),
            )
        return self._engagement(pid)