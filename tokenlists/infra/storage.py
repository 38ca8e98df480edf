"""SQLite-backed content cache and last-refresh store."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path
from threading import Lock, RLock
from typing import Dict

from ..errors import ContentNotFoundError
from ..types import Content


class SQLiteManager:
    """Manage SQLite connections with basic schema guarantees."""

    def __init__(self) -> None:
        self._connections: Dict[Path, sqlite3.Connection] = {}
        self._path_locks: Dict[Path, RLock] = {}
        self._lock = Lock()

    def connect(self, path: Path) -> sqlite3.Connection:
        path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            if path not in self._connections:
                conn = sqlite3.connect(path, check_same_thread=False)
                conn.row_factory = sqlite3.Row
                self._connections[path] = conn
                self._ensure_schema(conn)
            return self._connections[path]

    def lock_for(self, path: Path) -> RLock:
        """Lock serialising statements on the connection shared by every store at ``path``."""

        with self._lock:
            return self._path_locks.setdefault(path, RLock())

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS token_list_content (
                list_id TEXT PRIMARY KEY,
                source_url TEXT NOT NULL DEFAULT '',
                etag TEXT NOT NULL DEFAULT '',
                data BLOB,
                fetched TEXT
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS refresh_history (
                name TEXT PRIMARY KEY,
                refreshed_at TEXT NOT NULL
            )
            """
        )
        conn.commit()

    def reset(self, path: Path) -> None:
        with self._lock:
            if path in self._connections:
                self._connections[path].close()
                del self._connections[path]
        if path.exists():
            path.unlink()

    def close_all(self) -> None:
        with self._lock:
            for conn in self._connections.values():
                conn.close()
            self._connections.clear()


def _to_iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _from_iso(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class SQLiteContentStore:
    """ContentStore persisting fetched lists in ``token_list_content``."""

    def __init__(self, manager: SQLiteManager, db_path: Path) -> None:
        self.manager = manager
        self.db_path = db_path
        self._lock = manager.lock_for(db_path)
        self.manager.connect(db_path)

    @property
    def _conn(self) -> sqlite3.Connection:
        return self.manager.connect(self.db_path)

    def get_etag(self, list_id: str) -> str:
        with self._lock:
            row = self._conn.execute(
                "SELECT etag FROM token_list_content WHERE list_id = ?", (list_id,)
            ).fetchone()
        if row is None:
            raise ContentNotFoundError(list_id)
        return row["etag"]

    def get(self, list_id: str) -> Content:
        with self._lock:
            row = self._conn.execute(
                "SELECT source_url, etag, data, fetched FROM token_list_content WHERE list_id = ?",
                (list_id,),
            ).fetchone()
        if row is None:
            raise ContentNotFoundError(list_id)
        return self._row_to_content(row)

    def set(self, list_id: str, content: Content) -> None:
        with self._lock:
            conn = self._conn
            conn.execute(
                "INSERT OR REPLACE INTO token_list_content(list_id, source_url, etag, data, fetched) "
                "VALUES (?, ?, ?, ?, ?)",
                (list_id, content.source_url, content.etag, content.data, _to_iso(content.fetched)),
            )
            conn.commit()

    def get_all(self) -> dict[str, Content]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT list_id, source_url, etag, data, fetched FROM token_list_content"
            ).fetchall()
        return {row["list_id"]: self._row_to_content(row) for row in rows}

    def reset(self) -> None:
        with self._lock:
            self.manager.reset(self.db_path)
            self.manager.connect(self.db_path)

    @staticmethod
    def _row_to_content(row: sqlite3.Row) -> Content:
        return Content(
            source_url=row["source_url"],
            etag=row["etag"],
            data=bytes(row["data"] or b""),
            fetched=_from_iso(row["fetched"]),
        )


class SQLiteLastRefreshTimeStore:
    """LastRefreshTimeStore keeping one named row in ``refresh_history``."""

    def __init__(self, manager: SQLiteManager, db_path: Path, name: str = "token_lists") -> None:
        self.manager = manager
        self.db_path = db_path
        self.name = name
        self._lock = manager.lock_for(db_path)
        self.manager.connect(db_path)

    @property
    def _conn(self) -> sqlite3.Connection:
        return self.manager.connect(self.db_path)

    def get(self) -> datetime | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT refreshed_at FROM refresh_history WHERE name = ?", (self.name,)
            ).fetchone()
        return _from_iso(row["refreshed_at"]) if row else None

    def set(self, value: datetime) -> None:
        with self._lock:
            conn = self._conn
            conn.execute(
                "INSERT OR REPLACE INTO refresh_history(name, refreshed_at) VALUES (?, ?)",
                (self.name, value.isoformat()),
            )
            conn.commit()


__all__ = ["SQLiteContentStore", "SQLiteLastRefreshTimeStore", "SQLiteManager"]
