"""RadarStorage — persists users, radars, quadrants, rings and blips to SQLite.

Schema notes:
  - Ids are ``uuid4`` hex strings.
  - Every child table references its radar with ``ON DELETE CASCADE``;
    deleting a radar removes its quadrants, rings and blips.
  - Timestamps are ISO-8601 UTC strings; they sort lexicographically.
  - Ownership is checked in SQL (``radars.user_id = ?``); a foreign record
    looks exactly like a missing one.
"""

from __future__ import annotations

import sqlite3
import uuid
from collections.abc import Iterable
from datetime import datetime, timezone

from tech_radar.radar.csv_import import BlipDraft
from tech_radar.radar.defaults import DEFAULT_QUADRANTS, DEFAULT_RINGS
from tech_radar.radar.models import Blip, Quadrant, Radar, Ring, User

_DDL = """
PRAGMA foreign_keys = ON;

CREATE TABLE IF NOT EXISTS users (
    id            TEXT PRIMARY KEY,
    name          TEXT NOT NULL,
    email         TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS radars (
    id          TEXT PRIMARY KEY,
    user_id     TEXT NOT NULL REFERENCES users (id) ON DELETE CASCADE,
    name        TEXT NOT NULL,
    description TEXT,
    created_at  TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_radars_user ON radars (user_id);

CREATE TABLE IF NOT EXISTS quadrants (
    id       TEXT PRIMARY KEY,
    radar_id TEXT    NOT NULL REFERENCES radars (id) ON DELETE CASCADE,
    name     TEXT    NOT NULL,
    position INTEGER NOT NULL,
    color    TEXT    NOT NULL
);

CREATE TABLE IF NOT EXISTS rings (
    id       TEXT PRIMARY KEY,
    radar_id TEXT    NOT NULL REFERENCES radars (id) ON DELETE CASCADE,
    name     TEXT    NOT NULL,
    position INTEGER NOT NULL,
    opacity  REAL    NOT NULL
);

CREATE TABLE IF NOT EXISTS blips (
    id          TEXT PRIMARY KEY,
    radar_id    TEXT    NOT NULL REFERENCES radars (id) ON DELETE CASCADE,
    quadrant_id TEXT    NOT NULL REFERENCES quadrants (id) ON DELETE CASCADE,
    ring_id     TEXT    NOT NULL REFERENCES rings (id) ON DELETE CASCADE,
    name        TEXT    NOT NULL,
    description TEXT,
    is_new      INTEGER NOT NULL DEFAULT 1,
    offset_x    REAL    NOT NULL DEFAULT 0.5,
    offset_y    REAL    NOT NULL DEFAULT 0.5,
    created_at  TEXT    NOT NULL,
    updated_at  TEXT    NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_blips_radar ON blips (radar_id);
"""

_SELECT_OWNED_RADAR = "SELECT * FROM radars WHERE id = ? AND user_id = ?"

_SELECT_OWNED_QUADRANT = """
SELECT q.*
FROM   quadrants q
JOIN   radars r ON r.id = q.radar_id
WHERE  q.id = ? AND r.user_id = ?
"""

_SELECT_OWNED_RING = """
SELECT g.*
FROM   rings g
JOIN   radars r ON r.id = g.radar_id
WHERE  g.id = ? AND r.user_id = ?
"""

_INSERT_BLIP = """
INSERT INTO blips (
    id, radar_id, quadrant_id, ring_id, name, description,
    is_new, offset_x, offset_y, created_at, updated_at
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _new_id() -> str:
    return uuid.uuid4().hex


def _blip_params(blip: Blip) -> tuple:
    return (
        blip.id, blip.radar_id, blip.quadrant_id, blip.ring_id, blip.name, blip.description,
        int(blip.is_new), blip.offset_x, blip.offset_y, blip.created_at, blip.updated_at,
    )


class RadarStorage:
    """Stores and retrieves radars from a SQLite database.

    Parameters
    ----------
    db_path:
        Path to the SQLite file.  Pass ``":memory:"`` for in-process testing.
    """

    def __init__(self, db_path: str = "radar.db") -> None:
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        for stmt in _DDL.strip().split(";"):
            stmt = stmt.strip()
            if stmt:
                self._conn.execute(stmt)
        self._conn.commit()

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(self, name: str, email: str, password_hash: str) -> User:
        """Insert a user.

        Raises
        ------
        sqlite3.IntegrityError
            If *email* is already registered.
        """
        user = User(id=_new_id(), name=name, email=email, password_hash=password_hash)
        self._conn.execute(
            "INSERT INTO users (id, name, email, password_hash) VALUES (?, ?, ?, ?)",
            (user.id, user.name, user.email, user.password_hash),
        )
        self._conn.commit()
        return user

    def get_user(self, user_id: str) -> User | None:
        row = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return User.from_row(dict(row)) if row else None

    def get_user_by_email(self, email: str) -> User | None:
        row = self._conn.execute(
            "SELECT * FROM users WHERE email = ?", (email,)
        ).fetchone()
        return User.from_row(dict(row)) if row else None

    # ------------------------------------------------------------------
    # Radars
    # ------------------------------------------------------------------

    def create_radar(self, user_id: str, name: str, description: str | None) -> Radar:
        """Insert a radar together with the default quadrants and rings."""
        now = _now()
        radar = Radar(
            id=_new_id(),
            user_id=user_id,
            name=name,
            description=description,
            created_at=now,
            updated_at=now,
        )
        radar.quadrants = [
            Quadrant(id=_new_id(), radar_id=radar.id, **q)
            for q in sorted(DEFAULT_QUADRANTS, key=lambda q: q["position"])
        ]
        radar.rings = [
            Ring(id=_new_id(), radar_id=radar.id, **r)
            for r in sorted(DEFAULT_RINGS, key=lambda r: r["position"])
        ]
        self._conn.execute(
            """
            INSERT INTO radars (id, user_id, name, description, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (radar.id, user_id, name, description, now, now),
        )
        self._conn.executemany(
            "INSERT INTO quadrants (id, radar_id, name, position, color) VALUES (?, ?, ?, ?, ?)",
            [(q.id, radar.id, q.name, q.position, q.color) for q in radar.quadrants],
        )
        self._conn.executemany(
            "INSERT INTO rings (id, radar_id, name, position, opacity) VALUES (?, ?, ?, ?, ?)",
            [(r.id, radar.id, r.name, r.position, r.opacity) for r in radar.rings],
        )
        self._conn.commit()
        return radar

    def list_radars(self, user_id: str) -> list[Radar]:
        """Return the user's radars (without children), most recently updated first."""
        rows = self._conn.execute(
            "SELECT * FROM radars WHERE user_id = ? ORDER BY updated_at DESC, id",
            (user_id,),
        ).fetchall()
        return [Radar.from_row(dict(r)) for r in rows]

    def get_radar(self, radar_id: str, user_id: str) -> Radar | None:
        """Return the radar with quadrants, rings and blips, or None.

        None is also returned when the radar belongs to another user.
        """
        row = self._conn.execute(_SELECT_OWNED_RADAR, (radar_id, user_id)).fetchone()
        if row is None:
            return None
        radar = Radar.from_row(dict(row))
        radar.quadrants = [
            Quadrant.from_row(dict(r))
            for r in self._conn.execute(
                "SELECT * FROM quadrants WHERE radar_id = ? ORDER BY position", (radar_id,)
            )
        ]
        radar.rings = [
            Ring.from_row(dict(r))
            for r in self._conn.execute(
                "SELECT * FROM rings WHERE radar_id = ? ORDER BY position", (radar_id,)
            )
        ]
        radar.blips = self.list_blips(radar_id)
        return radar

    def update_radar(
        self, radar_id: str, user_id: str, name: str, description: str | None
    ) -> bool:
        cursor = self._conn.execute(
            """
            UPDATE radars SET name = ?, description = ?, updated_at = ?
            WHERE  id = ? AND user_id = ?
            """,
            (name, description, _now(), radar_id, user_id),
        )
        self._conn.commit()
        return cursor.rowcount > 0

    def delete_radar(self, radar_id: str, user_id: str) -> bool:
        cursor = self._conn.execute(
            "DELETE FROM radars WHERE id = ? AND user_id = ?", (radar_id, user_id)
        )
        self._conn.commit()
        return cursor.rowcount > 0

    # ------------------------------------------------------------------
    # Quadrants and rings
    # ------------------------------------------------------------------

    def get_quadrant(self, quadrant_id: str, user_id: str) -> Quadrant | None:
        row = self._conn.execute(_SELECT_OWNED_QUADRANT, (quadrant_id, user_id)).fetchone()
        return Quadrant.from_row(dict(row)) if row else None

    def update_quadrant(self, quadrant_id: str, name: str, color: str) -> None:
        self._conn.execute(
            "UPDATE quadrants SET name = ?, color = ? WHERE id = ?",
            (name, color, quadrant_id),
        )
        self._conn.commit()

    def get_ring(self, ring_id: str, user_id: str) -> Ring | None:
        row = self._conn.execute(_SELECT_OWNED_RING, (ring_id, user_id)).fetchone()
        return Ring.from_row(dict(row)) if row else None

    def update_ring(self, ring_id: str, name: str) -> None:
        self._conn.execute("UPDATE rings SET name = ? WHERE id = ?", (name, ring_id))
        self._conn.commit()

    # ------------------------------------------------------------------
    # Blips
    # ------------------------------------------------------------------

    def create_blip(
        self,
        radar_id: str,
        quadrant_id: str,
        ring_id: str,
        name: str,
        description: str | None,
        is_new: bool,
        offset_x: float,
        offset_y: float,
    ) -> Blip:
        now = _now()
        blip = Blip(
            id=_new_id(),
            radar_id=radar_id,
            quadrant_id=quadrant_id,
            ring_id=ring_id,
            name=name,
            description=description,
            is_new=is_new,
            offset_x=offset_x,
            offset_y=offset_y,
            created_at=now,
            updated_at=now,
        )
        self._conn.execute(_INSERT_BLIP, _blip_params(blip))
        self._touch_radar(radar_id, now)
        self._conn.commit()
        return blip

    def create_blips(self, radar_id: str, drafts: Iterable[BlipDraft]) -> list[Blip]:
        """Insert imported blips in a single transaction.

        Either every draft is stored or, if any insert fails, none is.

        Raises
        ------
        sqlite3.IntegrityError
            If a draft references a quadrant or ring that does not exist.
        """
        now = _now()
        blips = [
            Blip(
                id=_new_id(),
                radar_id=radar_id,
                quadrant_id=d.quadrant_id,
                ring_id=d.ring_id,
                name=d.name,
                description=d.description,
                is_new=d.is_new,
                offset_x=d.offset_x,
                offset_y=d.offset_y,
                created_at=now,
                updated_at=now,
            )
            for d in drafts
        ]
        if not blips:
            return []
        try:
            self._conn.executemany(_INSERT_BLIP, [_blip_params(b) for b in blips])
            self._touch_radar(radar_id, now)
            self._conn.commit()
        except sqlite3.Error:
            self._conn.rollback()
            raise
        return blips

    def get_blip(self, radar_id: str, blip_id: str) -> Blip | None:
        row = self._conn.execute(
            "SELECT * FROM blips WHERE id = ? AND radar_id = ?", (blip_id, radar_id)
        ).fetchone()
        return Blip.from_row(dict(row)) if row else None

    def list_blips(self, radar_id: str) -> list[Blip]:
        """Return the radar's blips in creation order."""
        rows = self._conn.execute(
            "SELECT * FROM blips WHERE radar_id = ? ORDER BY created_at, rowid",
            (radar_id,),
        ).fetchall()
        return [Blip.from_row(dict(r)) for r in rows]

    def update_blip(
        self,
        radar_id: str,
        blip_id: str,
        quadrant_id: str,
        ring_id: str,
        name: str,
        description: str | None,
        is_new: bool,
    ) -> bool:
        """Update the editable fields of a blip.  Offsets are never changed."""
        now = _now()
        cursor = self._conn.execute(
            """
            UPDATE blips
            SET    name = ?, description = ?, quadrant_id = ?, ring_id = ?,
                   is_new = ?, updated_at = ?
            WHERE  id = ? AND radar_id = ?
            """,
            (name, description, quadrant_id, ring_id, int(is_new), now, blip_id, radar_id),
        )
        if cursor.rowcount:
            self._touch_radar(radar_id, now)
        self._conn.commit()
        return cursor.rowcount > 0

    def delete_blip(self, radar_id: str, blip_id: str) -> bool:
        cursor = self._conn.execute(
            "DELETE FROM blips WHERE id = ? AND radar_id = ?", (blip_id, radar_id)
        )
        if cursor.rowcount:
            self._touch_radar(radar_id, _now())
        self._conn.commit()
        return cursor.rowcount > 0

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _touch_radar(self, radar_id: str, now: str) -> None:
        self._conn.execute("UPDATE radars SET updated_at = ? WHERE id = ?", (now, radar_id))
