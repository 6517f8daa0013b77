"""The pentester's workspace: assigned engagements and the findings written for them."""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from gethacked.errors import BadRequestError, NotFoundError

ROUTE_PREFIX = "/pentester"
ROUTES: tuple[tuple[str, str], ...] = (
    ("GET", f"{ROUTE_PREFIX}/engagements"),
    ("GET", f"{ROUTE_PREFIX}/engagements/{{pid}}"),
    ("GET", f"{ROUTE_PREFIX}/engagements/{{pid}}/findings/new"),
    ("POST", f"{ROUTE_PREFIX}/engagements/{{pid}}/findings"),
    ("GET", f"{ROUTE_PREFIX}/engagements/{{pid}}/findings/{{finding_pid}}/edit"),
    ("POST", f"{ROUTE_PREFIX}/engagements/{{pid}}/findings/{{finding_pid}}"),
)

VALID_SEVERITIES = ("extreme", "high", "elevated", "moderate", "low")

_EDITABLE_FIELDS = (
    "title",
    "description",
    "technical_description",
    "impact",
    "recommendation",
    "severity",
    "cve_id",
    "category",
    "evidence",
    "affected_asset",
)


def validate_severity(severity: str) -> str:
    """Return ``severity`` if it is an approved level; raise BadRequestError otherwise."""
    if severity not in VALID_SEVERITIES:
        raise BadRequestError("Invalid severity level")
    return severity


@dataclass(frozen=True)
class FindingParams:
    """The fields a pentester fills in for a finding."""

    title: str
    description: str
    severity: str
    category: str
    technical_description: str | None = None
    impact: str | None = None
    recommendation: str | None = None
    cve_id: str | None = None
    evidence: str | None = None
    affected_asset: str | None = None

    def values(self) -> tuple[Any, ...]:
        """The editable fields in storage order."""
        return tuple(getattr(self, name) for name in _EDITABLE_FIELDS)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


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


class PentesterWorkspace:
    """Engagements assigned to one pentester, and their findings."""

    def __init__(self, conn: sqlite3.Connection, user_id: int) -> None:
        self.conn = conn
        self.user_id = user_id

    def _assigned(self, pid: str) -> dict[str, Any]:
        # Missing and unassigned engagements look the same, so nothing leaks.
        item = _fetch_one(
            self.conn,
            'SELECT e.* FROM "engagements" e JOIN "pentester_assignments" a '
            'ON a."engagement_id" = e."id" WHERE e."pid" = ? AND a."user_id" = ?',
            (pid, self.user_id),
        )
        if item is None:
            raise NotFoundError()
        return item

    @staticmethod
    def _require_in_progress(item: dict[str, Any], verb: str) -> None:
        if item["status"] != "in_progress":
            raise BadRequestError(f"Cannot {verb} findings in current state")

    def _finding(self, finding_pid: str, engagement_id: int) -> dict[str, Any]:
        finding = _fetch_one(
            self.conn,
            'SELECT * FROM "findings" WHERE "pid" = ? AND "engagement_id" = ?',
            (finding_pid, engagement_id),
        )
        if finding is None:
            raise NotFoundError()
        return finding

    def engagements(self) -> list[dict[str, Any]]:
        """Engagements this pentester is assigned to, newest first."""
        return _fetch_all(
            self.conn,
            'SELECT e.* FROM "engagements" e JOIN "pentester_assignments" a '
            'ON a."engagement_id" = e."id" WHERE a."user_id" = ? ORDER BY e."id" DESC',
            (self.user_id,),
        )

    def show(self, pid: str) -> dict[str, Any]:
        """An assigned engagement together with its findings."""
        item = self._assigned(pid)
        return {
            "engagement": item,
            "findings": _fetch_all(
                self.conn,
                'SELECT * FROM "findings" WHERE "engagement_id" = ? ORDER BY "id"',
                (item["id"],),
            ),
        }

    def get_finding(self, pid: str, finding_pid: str) -> dict[str, Any]:
        """One finding of an assigned engagement."""
        item = self._assigned(pid)
        return self._finding(finding_pid, item["id"])

    def add_finding(self, pid: str, params: FindingParams) -> dict[str, Any]:
        """Record a draft finding on an engagement in progress; return it."""
        item = self._assigned(pid)
        self._require_in_progress(item, "add")
        validate_severity(params.severity)
        finding_pid = str(uuid.uuid4())
        now = _now()
        columns = ", ".join(f'"{name}"' for name in _EDITABLE_FIELDS)
        marks = ", ".join("?" for _ in _EDITABLE_FIELDS)
        with self.conn:
            self.conn.execute(
                f'INSERT INTO "findings" ("pid", "org_id", "engagement_id", '
                f'"created_by_user_id", {columns}, "status", "created_at", "updated_at") '
                f"VALUES (?, ?, ?, ?, {marks}, 'draft', ?, ?)",
                (
                    finding_pid,
                    item["org_id"],
                    item["id"],
                    self.user_id,
                    *params.values(),
                    now,
                    now,
                ),
            )
        return self._finding(finding_pid, item["id"])

    def update_finding(
        self, pid: str, finding_pid: str, params: FindingParams
    ) -> dict[str, Any]:
        """Rewrite a finding on an engagement in progress; return it."""
        item = self._assigned(pid)
        self._require_in_progress(item, "edit")
        validate_severity(params.severity)
        finding = self._finding(finding_pid, item["id"])
        assignments = ", ".join(f'"{name}" = ?' for name in _EDITABLE_FIELDS)
        with self.conn:
            self.conn.execute(
                f'UPDATE "findings" SET {assignments}, "updated_at" = ? WHERE "id" = ?',
                (*params.values(), _now(), finding["id"]),
            )
        return self._finding(finding_pid, item["id"])