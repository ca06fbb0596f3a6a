"""SQLite library store: users, library roots, media items and playlists."""

import sqlite3
import uuid
from pathlib import Path

from m3uexport.config import get_settings
from m3uexport.models import (
    AUDIO_MEDIA_TYPE,
    MUSIC_COLLECTION_TYPE,
    PLAYLIST_MEDIA_TYPE,
    LibraryRoot,
    PlaylistSummary,
    TrackRef,
    User,
)

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY NOT NULL,
    username TEXT UNIQUE NOT NULL
);

CREATE TABLE IF NOT EXISTS library_roots (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL,
    collection_type TEXT DEFAULT 'music'
);

CREATE TABLE IF NOT EXISTS root_locations (
    root_id INTEGER NOT NULL,
    position INTEGER NOT NULL,
    path TEXT NOT NULL,
    PRIMARY KEY (root_id, position),
    FOREIGN KEY (root_id) REFERENCES library_roots(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    media_type TEXT NOT NULL,
    name TEXT DEFAULT '',
    owner_id TEXT,
    file_path TEXT DEFAULT '',
    artist TEXT,
    duration REAL,
    FOREIGN KEY (owner_id) REFERENCES users(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_items_file_path ON items(file_path);

CREATE TABLE IF NOT EXISTS playlist_entries (
    playlist_id INTEGER NOT NULL,
    position INTEGER NOT NULL,
    item_id INTEGER NOT NULL,
    PRIMARY KEY (playlist_id, position),
    FOREIGN KEY (playlist_id) REFERENCES items(id) ON DELETE CASCADE,
    FOREIGN KEY (item_id) REFERENCES items(id) ON DELETE CASCADE
);
"""


def _get_db_path() -> Path:
    settings = get_settings()
    return settings.db_path()


def _ensure_db() -> sqlite3.Connection:
    db_path = _get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    conn.executescript(SCHEMA)
    return conn


def get_connection() -> sqlite3.Connection:
    return _ensure_db()


def _row_to_track(row: sqlite3.Row) -> TrackRef:
    duration = row["duration"]
    return TrackRef(
        id=row["id"],
        file_path=row["file_path"] or "",
        title=row["name"] or "",
        artist=row["artist"] or None,
        duration=int(duration) if duration is not None and duration >= 0 else -1,
        media_type=row["media_type"],
    )


# --- Users ---

def create_user(username: str, user_id: str | None = None) -> User:
    canonical_id = str(uuid.UUID(user_id)) if user_id else str(uuid.uuid4())
    conn = get_connection()
    try:
        conn.execute("INSERT INTO users (id, username) VALUES (?, ?)", (canonical_id, username))
        conn.commit()
        return User(id=canonical_id, username=username)
    finally:
        conn.close()


def get_user_by_id(user_id: str) -> User | None:
    conn = get_connection()
    try:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return User(**dict(row)) if row else None
    finally:
        conn.close()


def get_all_users() -> list[User]:
    conn = get_connection()
    try:
        rows = conn.execute("SELECT * FROM users ORDER BY username").fetchall()
        return [User(**dict(r)) for r in rows]
    finally:
        conn.close()


# --- Library roots ---

def add_library_root(name: str, locations: list[str], collection_type: str = MUSIC_COLLECTION_TYPE) -> LibraryRoot:
    conn = get_connection()
    try:
        cursor = conn.execute(
            "INSERT INTO library_roots (name, collection_type) VALUES (?, ?)",
            (name, collection_type),
        )
        root_id = cursor.lastrowid
        for position, location in enumerate(locations):
            conn.execute(
                "INSERT INTO root_locations (root_id, position, path) VALUES (?, ?, ?)",
                (root_id, position, location),
            )
        conn.commit()
        return LibraryRoot(id=root_id, name=name, collection_type=collection_type, locations=list(locations))
    finally:
        conn.close()


def get_library_roots() -> list[LibraryRoot]:
    """Return configured roots in creation order, each with its ordered locations."""
    conn = get_connection()
    try:
        roots = conn.execute("SELECT * FROM library_roots ORDER BY id").fetchall()
        result = []
        for root in roots:
            locations = conn.execute(
                "SELECT path FROM root_locations WHERE root_id = ? ORDER BY position",
                (root["id"],),
            ).fetchall()
            result.append(LibraryRoot(
                id=root["id"],
                name=root["name"],
                collection_type=root["collection_type"] or "",
                locations=[loc["path"] for loc in locations],
            ))
        return result
    finally:
        conn.close()


# --- Items ---

def upsert_audio_item(
    file_path: str,
    title: str = "",
    artist: str | None = None,
    duration: float | None = None,
) -> TrackRef:
    """Index an audio file, updating the existing item for the same path."""
    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT id FROM items WHERE file_path = ? AND media_type = ?",
            (file_path, AUDIO_MEDIA_TYPE),
        ).fetchone()
        if row:
            item_id = row["id"]
            conn.execute(
                "UPDATE items SET name = ?, artist = ?, duration = ? WHERE id = ?",
                (title, artist, duration, item_id),
            )
        else:
            cursor = conn.execute(
                "INSERT INTO items (media_type, name, file_path, artist, duration) VALUES (?, ?, ?, ?, ?)",
                (AUDIO_MEDIA_TYPE, title, file_path, artist, duration),
            )
            item_id = cursor.lastrowid
        conn.commit()
        row = conn.execute("SELECT * FROM items WHERE id = ?", (item_id,)).fetchone()
        return _row_to_track(row)
    finally:
        conn.close()


def add_item(media_type: str, name: str, file_path: str = "", artist: str | None = None,
             duration: float | None = None) -> TrackRef:
    conn = get_connection()
    try:
        cursor = conn.execute(
            "INSERT INTO items (media_type, name, file_path, artist, duration) VALUES (?, ?, ?, ?, ?)",
            (media_type, name, file_path, artist, duration),
        )
        conn.commit()
        row = conn.execute("SELECT * FROM items WHERE id = ?", (cursor.lastrowid,)).fetchone()
        return _row_to_track(row)
    finally:
        conn.close()


def get_item_by_path(file_path: str) -> TrackRef | None:
    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT * FROM items WHERE file_path = ? AND media_type = ?",
            (file_path, AUDIO_MEDIA_TYPE),
        ).fetchone()
        return _row_to_track(row) if row else None
    finally:
        conn.close()


# --- Playlists ---

def create_playlist(name: str, owner_id: str) -> PlaylistSummary:
    conn = get_connection()
    try:
        cursor = conn.execute(
            "INSERT INTO items (media_type, name, owner_id) VALUES (?, ?, ?)",
            (PLAYLIST_MEDIA_TYPE, name, owner_id),
        )
        conn.commit()
        return PlaylistSummary(id=cursor.lastrowid, name=name, owner_id=owner_id)
    finally:
        conn.close()


def set_playlist_entries(playlist_id: int, item_ids: list[int]) -> None:
    conn = get_connection()
    try:
        conn.execute("DELETE FROM playlist_entries WHERE playlist_id = ?", (playlist_id,))
        for position, item_id in enumerate(item_ids):
            conn.execute(
                "INSERT INTO playlist_entries (playlist_id, position, item_id) VALUES (?, ?, ?)",
                (playlist_id, position, item_id),
            )
        conn.commit()
    finally:
        conn.close()


def get_user_playlists(user_id: str) -> list[PlaylistSummary]:
    """Playlists owned by ``user_id`` in creation order, without their tracks."""
    conn = get_connection()
    try:
        rows = conn.execute(
            "SELECT id, name, owner_id FROM items WHERE media_type = ? AND owner_id = ? ORDER BY id",
            (PLAYLIST_MEDIA_TYPE, user_id),
        ).fetchall()
        return [PlaylistSummary(**dict(r)) for r in rows]
    finally:
        conn.close()


def get_playlist_items(playlist_id: int, media_type: str | None = AUDIO_MEDIA_TYPE) -> list[TrackRef]:
    """Ordered children of a playlist, optionally limited to one media type."""
    conn = get_connection()
    try:
        query = (
            "SELECT items.* FROM playlist_entries "
            "JOIN items ON items.id = playlist_entries.item_id "
            "WHERE playlist_entries.playlist_id = ?"
        )
        params: list = [playlist_id]
        if media_type:
            query += " AND items.media_type = ?"
            params.append(media_type)
        rows = conn.execute(query + " ORDER BY playlist_entries.position", params).fetchall()
        return [_row_to_track(r) for r in rows]
    finally:
        conn.close()


def count_playlist_items(playlist_id: int) -> int:
    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT COUNT(*) AS count FROM playlist_entries WHERE playlist_id = ?",
            (playlist_id,),
        ).fetchone()
        return int(row["count"])
    finally:
        conn.close()
