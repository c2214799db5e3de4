from __future__ import annotations

import sqlite3
from pathlib import Path
from threading import Lock

from .models import PlaylistError


class LibraryStore:
    """SQLite-backed persistence for playlists and play history."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()
        self._conn = sqlite3.connect(self.path, check_same_thread=False)
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS playlists (
                name TEXT PRIMARY KEY,
                created_at TEXT NOT NULL
            )
            """
        )
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS playlist_tracks (
                playlist TEXT NOT NULL REFERENCES playlists(name) ON DELETE CASCADE,
                position INTEGER NOT NULL,
                path TEXT NOT NULL,
                PRIMARY KEY(playlist, position)
            )
            """
        )
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS play_history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                path TEXT NOT NULL,
                played_at TEXT NOT NULL
            )
            """
        )
        self._conn.commit()

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def create_playlist(self, name: str) -> None:
        name = self._clean_name(name)
        with self._lock:
            try:
                self._conn.execute(
                    "INSERT INTO playlists(name, created_at) VALUES(?, CURRENT_TIMESTAMP)",
                    (name,),
                )
            except sqlite3.IntegrityError as exc:
                raise PlaylistError(f"Playlist already exists: {name}") from exc
            self._conn.commit()

    def delete_playlist(self, name: str) -> None:
        with self._lock:
            cursor = self._conn.execute("DELETE FROM playlists WHERE name = ?", (name,))
            if cursor.rowcount == 0:
                raise PlaylistError(f"Unknown playlist: {name}")
            self._conn.execute("DELETE FROM playlist_tracks WHERE playlist = ?", (name,))
            self._conn.commit()

    def list_playlists(self) -> list[tuple[str, int]]:
        with self._lock:
            cursor = self._conn.execute(
                """
                SELECT p.name, COUNT(t.path)
                FROM playlists p LEFT JOIN playlist_tracks t ON t.playlist = p.name
                GROUP BY p.name
                ORDER BY p.name COLLATE NOCASE
                """
            )
            rows = cursor.fetchall()
        return [(row[0], int(row[1])) for row in rows]

    def add_track(self, name: str, path: Path | str) -> int:
        with self._lock:
            self._require(name)
            cursor = self._conn.execute(
                "SELECT COALESCE(MAX(position), -1) + 1 FROM playlist_tracks WHERE playlist = ?",
                (name,),
            )
            position = int(cursor.fetchone()[0])
            self._conn.execute(
                "INSERT INTO playlist_tracks(playlist, position, path) VALUES(?, ?, ?)",
                (name, position, str(path)),
            )
            self._conn.commit()
        return position

    def remove_track(self, name: str, position: int) -> None:
        with self._lock:
            self._require(name)
            cursor = self._conn.execute(
                "DELETE FROM playlist_tracks WHERE playlist = ? AND position = ?",
                (name, int(position)),
            )
            if cursor.rowcount == 0:
                raise PlaylistError(f"Playlist {name} has no track at position {position}")
            rows = self._conn.execute(
                "SELECT path FROM playlist_tracks WHERE playlist = ? ORDER BY position",
                (name,),
            ).fetchall()
            self._conn.execute("DELETE FROM playlist_tracks WHERE playlist = ?", (name,))
            self._conn.executemany(
                "INSERT INTO playlist_tracks(playlist, position, path) VALUES(?, ?, ?)",
                [(name, index, row[0]) for index, row in enumerate(rows)],
            )
            self._conn.commit()

    def playlist_tracks(self, name: str) -> list[Path]:
        with self._lock:
            self._require(name)
            cursor = self._conn.execute(
                "SELECT path FROM playlist_tracks WHERE playlist = ? ORDER BY position",
                (name,),
            )
            rows = cursor.fetchall()
        return [Path(row[0]) for row in rows]

    def record_play(self, path: Path | str) -> None:
        with self._lock:
            self._conn.execute(
                "INSERT INTO play_history(path, played_at) VALUES(?, CURRENT_TIMESTAMP)",
                (str(path),),
            )
            self._conn.commit()

    def recent_plays(self, limit: int = 20) -> list[tuple[str, str]]:
        limit = max(1, min(int(limit), 1000))
        with self._lock:
            cursor = self._conn.execute(
                "SELECT path, played_at FROM play_history ORDER BY id DESC LIMIT ?",
                (limit,),
            )
            rows = cursor.fetchall()
        return [(row[0], row[1]) for row in rows]

    def clear_history(self) -> None:
        with self._lock:
            self._conn.execute("DELETE FROM play_history")
            self._conn.commit()

    def _require(self, name: str) -> None:
        cursor = self._conn.execute("SELECT 1 FROM playlists WHERE name = ?", (name,))
        if cursor.fetchone() is None:
            raise PlaylistError(f"Unknown playlist: {name}")

    @staticmethod
    def _clean_name(name: str) -> str:
        cleaned = name.strip()
        if not cleaned:
            raise PlaylistError("Playlist name must not be empty")
        return cleaned
