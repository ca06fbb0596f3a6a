"""Read-only access to the host media library used by the exporter."""

import uuid
from typing import Protocol

from m3uexport import db
from m3uexport.models import LibraryRoot, PlaylistSummary, TrackRef, User


class MediaLibrary(Protocol):
    def get_user(self, user_id: str) -> User | None: ...

    def get_playlists(self, user: User) -> list[PlaylistSummary]: ...

    def get_playlist_tracks(self, playlist: PlaylistSummary, user: User) -> list[TrackRef]: ...

    def get_library_roots(self) -> list[LibraryRoot]: ...


def parse_user_id(user_id: str) -> str:
    """Return the canonical form of a UUID user identifier.

    Raises ValueError for anything that is not a UUID.
    """
    return str(uuid.UUID(str(user_id).strip()))


class SqliteLibrary:
    """MediaLibrary backed by the local SQLite store."""

    def get_user(self, user_id: str) -> User | None:
        return db.get_user_by_id(parse_user_id(user_id))

    def get_playlists(self, user: User) -> list[PlaylistSummary]:
        return db.get_user_playlists(user.id)

    def get_playlist_tracks(self, playlist: PlaylistSummary, user: User) -> list[TrackRef]:
        if playlist.id is None:
            return []
        return db.get_playlist_items(playlist.id)

    def get_library_roots(self) -> list[LibraryRoot]:
        return db.get_library_roots()
