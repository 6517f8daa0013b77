"""Client side of pentest engagements: requesting scope and answering offers."""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any

from gethacked.errors import BadRequestError, NotFoundError, UnauthorizedError


class OrgRole(IntEnum):
    """A member's role in an organization; higher values carry more rights."""

    VIEWER = 1
    MEMBER = 2
    ADMIN = 3
    OWNER = 4


def require_role(role: OrgRole | None, minimum: OrgRole) -> OrgRole:
    """Return ``role`` if it is at least ``minimum``; raise UnauthorizedError otherwise."""
    if role is None or role < minimum:
        raise UnauthorizedError(f"requires the {minimum.name.lower()} role or higher")
    return role


@dataclass(frozen=True)
class EngagementRequest:
    """Scope submitted by a client when requesting a pentest."""

    service_id: int
    title: str
    target_systems: str
    contact_name: str
    contact_email: str
    ip_ranges: str | None = None
    domains: str | None = None
    exclusions: str | None = None
    test_window_start: str | None = None
    test_window_end: str | None = None
    contact_phone: str | None = None
    rules_of_engagement: str | None = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class EngagementStore:
    """Engagements of an organization, as seen by its members."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def _all(self, sql: str, params: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
        cursor = self.conn.execute(sql, params)
        names = [column[0] for column in cursor.description]
        return [dict(zip(names, row)) for row in cursor.fetchall()]

    def _one(self, sql: str, params: tuple[Any, ...] = ()) -> dict[str, Any] | None:
        rows = self._all(sql, params)
        return rows[0] if rows else None

    def request(
        self, org_id: int, role: OrgRole | None, request: EngagementRequest
    ) -> dict[str, Any]:
        """Record a new engagement request for the organization and return it."""
        require_role(role, OrgRole.MEMBER)
        if self._one('SELECT "id" FROM "services" WHERE "id" = ?', (request.service_id,)) is None:
            raise NotFoundError()
        pid = str(uuid.uuid4())
        now = _now()
        with self.conn:
            self.conn.execute(
                'INSERT INTO "engagements" ("pid", "org_id", "service_id", "title", '
                '"status", "target_systems", "ip_ranges", "domains", "exclusions", '
                '"contact_name", "contact_email", "contact_phone", '
                '"rules_of_engagement", "requested_at", "created_at", "updated_at") '
                "VALUES (?, ?, ?, ?, 'requested', ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    pid,
                    org_id,
                    request.service_id,
                    request.title,
                    request.target_systems,
                    request.ip_ranges,
                    request.domains,
                    request.exclusions,
                    request.contact_name,
                    request.contact_email,
                    request.contact_phone,
                    request.rules_of_engagement,
                    now,
                    now,
                    now,
                ),
            )
        created = self._one('SELECT * FROM "engagements" WHERE "pid" = ?', (pid,))
        assert created is not None
        return created

    def list_for_org(self, org_id: int, role: OrgRole | None) -> list[dict[str, Any]]:
        """The organization's engagements, newest first."""
        require_role(role, OrgRole.VIEWER)
        return self._all(
            'SELECT * FROM "engagements" WHERE "org_id" = ? ORDER BY "id" DESC',
            (org_id,),
        )

    def get(self, pid: str, org_id: int, role: OrgRole | None) -> dict[str, Any]:
        """One engagement of the organization by its public id."""
        require_role(role, OrgRole.VIEWER)
        item = self._one(
            'SELECT * FROM "engagements" WHERE "pid" = ? AND "org_id" = ?',
            (pid, org_id),
        )
        if item is None:
            raise NotFoundError()
        return item

    def offers(self, engagement_id: int) -> list[dict[str, Any]]:
        """Offers made for an engagement, latest first."""
        return self._all(
            'SELECT * FROM "engagement_offers" WHERE "engagement_id" = ? ORDER BY "id" DESC',
            (engagement_id,),
        )

    def respond(
        self,
        pid: str,
        org_id: int,
        role: OrgRole | None,
        action: str,
        response_text: str | None = None,
    ) -> dict[str, Any]:
        """Accept or negotiate the latest offer; return the updated engagement.

        Accepting is a financial commitment and needs the admin role or higher.
        """
        require_role(role, OrgRole.ADMIN)
        item = self.get(pid, org_id, role)
        if item["status"] != "offer_sent":
            raise BadRequestError("Cannot respond in current state")
        offers = self.offers(item["id"])
        if not offers:
            raise NotFoundError()
        latest = offers[0]
        now = _now()

        if action == "accept":
            with self.conn:
                self.conn.execute(
                    'UPDATE "engagement_offers" SET "status" = \'accepted\', '
                    '"updated_at" = ? WHERE "id" = ?',
                    (now, latest["id"]),
                )
                self.conn.execute(
                    'UPDATE "engagements" SET "status" = \'accepted\', '
                    '"price_cents" = ?, "currency" = ?, "updated_at" = ? WHERE "id" = ?',
                    (latest["amount_cents"], latest["currency"], now, item["id"]),
                )
        elif action == "negotiate":
            with self.conn:
                self.conn.execute(
                    'UPDATE "engagement_offers" SET "status" = \'rejected\', '
                    '"client_response" = ?, "updated_at" = ? WHERE "id" = ?',
                    (response_text, now, latest["id"]),
                )
                self.conn.execute(
                    'UPDATE "engagements" SET "status" = \'negotiating\', '
                    '"updated_at" = ? WHERE "id" = ?',
                    (now, item["id"]),
                )
        else:
            raise BadRequestError("Invalid action")

        return self.get(pid, org_id, role)