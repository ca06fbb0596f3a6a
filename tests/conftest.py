"""Shared test fixtures for m3u-exporter."""

import uuid

import pytest

from m3uexport.config import get_settings
from m3uexport.models import LibraryRoot, PlaylistSummary, TrackRef, User


def make_track(
    n: int,
    file_path: str | None = None,
    artist: str | None = "Artist",
    duration: int = 200,
    media_type: str | None = "Audio",
) -> TrackRef:
    return TrackRef(
        id=n,
        file_path=f"/music/{n}.mp3" if file_path is None else file_path,
        title=f"Track {n}",
        artist=artist,
        duration=duration,
        media_type=media_type,
    )


def make_user(username: str) -> User:
    return User(id=str(uuid.uuid5(uuid.NAMESPACE_DNS, username)), username=username)


class FakeLibrary:
    """In-memory MediaLibrary."""

    def __init__(self, roots: list[LibraryRoot] | None = None):
        self.users: dict[str, User] = {}
        self.playlists: dict[str, list[PlaylistSummary]] = {}
        self.roots = roots or []
        self.broken_playlists: set[str] = set()
        self.track_requests: list[str] = []

    def add_user(self, username: str, playlists: list[PlaylistSummary] | None = None) -> User:
        user = make_user(username)
        self.users[user.id] = user
        self.playlists[user.id] = playlists or []
        return user

    def get_user(self, user_id: str) -> User | None:
        return self.users.get(str(uuid.UUID(user_id)))

    def get_playlists(self, user: User) -> list[PlaylistSummary]:
        return [p.model_copy(update={"tracks": []}) for p in self.playlists.get(user.id, [])]

    def get_playlist_tracks(self, playlist: PlaylistSummary, user: User) -> list[TrackRef]:
        self.track_requests.append(playlist.name)
        if playlist.name in self.broken_playlists:
            raise RuntimeError(f"cannot enumerate {playlist.name}")
        for stored in self.playlists.get(user.id, []):
            if stored.id == playlist.id:
                return list(stored.tracks)
        return []

    def get_library_roots(self) -> list[LibraryRoot]:
        return self.roots


@pytest.fixture
def music_root(tmp_path):
    root = tmp_path / "music"
    root.mkdir()
    return root


@pytest.fixture
def fake_library(music_root):
    return FakeLibrary(roots=[
        LibraryRoot(name="Movies", collection_type="movies", locations=["/movies"]),
        LibraryRoot(name="Music", collection_type="music", locations=[str(music_root), "/other"]),
    ])


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    """Point the SQLite store at a fresh database under tmp_path."""
    monkeypatch.setenv("M3UEXPORT_DATA_DIR", str(tmp_path / "data"))
    get_settings.cache_clear()
    yield tmp_path / "data" / "library.db"
    get_settings.cache_clear()
