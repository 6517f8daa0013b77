"""Schema migrations applied to a SQLite connection and tracked in a ledger table."""

from __future__ import annotations

import sqlite3
import time
from collections.abc import Iterable
from dataclasses import dataclass

LEDGER_TABLE = "seaql_migrations"


@dataclass(frozen=True)
class Migration:
    """A named schema change with the statements to apply and revert it."""

    name: str
    up_sql: tuple[str, ...]
    down_sql: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "up_sql", tuple(self.up_sql))
        object.__setattr__(self, "down_sql", tuple(self.down_sql))

    def apply(self, conn: sqlite3.Connection) -> None:
        """Run the statements that bring the schema forward."""
        for statement in self.up_sql:
            conn.execute(statement)

    def revert(self, conn: sqlite3.Connection) -> None:
        """Run the statements that undo this migration."""
        for statement in self.down_sql:
            conn.execute(statement)


class Migrator:
    """Applies an ordered list of migrations and records which have run."""

    def __init__(self, migrations: Iterable[Migration]) -> None:
        self.migrations: tuple[Migration, ...] = tuple(migrations)
        self._by_name: dict[str, Migration] = {}
        for migration in self.migrations:
            if migration.name in self._by_name:
                raise ValueError(f"duplicate migration name {migration.name!r}")
            self._by_name[migration.name] = migration

    @staticmethod
    def _ensure_ledger(conn: sqlite3.Connection) -> None:
        with conn:
            conn.execute(
                f'CREATE TABLE IF NOT EXISTS "{LEDGER_TABLE}" ('
                '"version" TEXT NOT NULL PRIMARY KEY, '
                '"applied_at" INTEGER NOT NULL)'
            )

    def applied(self, conn: sqlite3.Connection) -> list[str]:
        """Names of applied migrations, oldest first."""
        self._ensure_ledger(conn)
        rows = conn.execute(
            f'SELECT "version" FROM "{LEDGER_TABLE}" ORDER BY rowid'
        ).fetchall()
        return [row[0] for row in rows]

    def pending(self, conn: sqlite3.Connection) -> list[Migration]:
        """Migrations not yet applied, in the order they will run."""
        done = set(self.applied(conn))
        return [m for m in self.migrations if m.name not in done]

    def up(self, conn: sqlite3.Connection) -> list[str]:
        """Apply every pending migration; return the names applied."""
        applied_now = []
        for migration in self.pending(conn):
            with conn:
                migration.apply(conn)
                conn.execute(
                    f'INSERT INTO "{LEDGER_TABLE}" ("version", "applied_at") VALUES (?, ?)',
                    (migration.name, int(time.time())),
                )
            applied_now.append(migration.name)
        return applied_now

    def down(self, conn: sqlite3.Connection, steps: int = 1) -> list[str]:
        """Revert the most recent ``steps`` migrations; return the names reverted."""
        if steps < 0:
            raise ValueError("steps must not be negative")
        done = self.applied(conn)
        targets = list(reversed(done[len(done) - steps:])) if steps else []
        reverted = []
        for name in targets:
            migration = self._by_name.get(name)
            if migration is None:
                raise LookupError(f"applied migration {name!r} is not known")
            with conn:
                migration.revert(conn)
                conn.execute(
                    f'DELETE FROM "{LEDGER_TABLE}" WHERE "version" = ?', (name,)
                )
            reverted.append(name)
        return reverted