"""Service helpers that connect CLI actions to the library store."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from m3uexport.analysis.metadata import read_duration, read_metadata
from m3uexport.analysis.scanner import find_audio_files
from m3uexport.db import (
    count_playlist_items,
    create_playlist,
    get_item_by_path,
    get_user_by_id,
    get_user_playlists,
    set_playlist_entries,
    upsert_audio_item,
)
from m3uexport.library import parse_user_id
from m3uexport.models import PlaylistSummary, TrackRef

logger = logging.getLogger(__name__)


def index_audio_file(path: Path) -> TrackRef:
    """Read tags from ``path`` and store it as an audio item."""
    meta = read_metadata(path)
    duration = read_duration(path)
    return upsert_audio_item(
        file_path=str(path),
        title=meta.get("title", path.stem),
        artist=meta.get("artist") or None,
        duration=duration if duration > 0 else None,
    )


def scan_directory(directory: str, progress_cb: Callable[[dict], None] | None = None) -> dict:
    """Index all audio files in a directory."""
    dir_path = Path(directory).expanduser().resolve()
    if not dir_path.is_dir():
        raise ValueError(f"Not a directory: {dir_path}")

    files = find_audio_files(dir_path)
    total = len(files)

    indexed = 0
    errors = 0

    for index, audio_file in enumerate(files, start=1):
        if progress_cb:
            progress_cb({"current": index, "total": total, "name": audio_file.name})

        try:
            index_audio_file(audio_file)
            indexed += 1
        except Exception:
            logger.exception("Error indexing %s", audio_file)
            errors += 1

    return {
        "directory": str(dir_path),
        "total": total,
        "indexed": indexed,
        "errors": errors,
    }


def create_playlist_from_files(name: str, user_id: str, files: list[str]) -> PlaylistSummary:
    """Create a playlist for ``user_id`` from audio file paths, indexing unknown files."""
    canonical_id = parse_user_id(user_id)
    user = get_user_by_id(canonical_id)
    if user is None:
        raise ValueError(f"User not found: {user_id}")

    item_ids: list[int] = []
    tracks: list[TrackRef] = []
    for raw_path in files:
        path = Path(raw_path).expanduser().resolve()
        track = get_item_by_path(str(path))
        if track is None:
            if not path.is_file():
                raise FileNotFoundError(f"Track file is missing: {path}")
            track = index_audio_file(path)
        if track.id is not None:
            item_ids.append(track.id)
            tracks.append(track)

    playlist = create_playlist(name, user.id)
    if playlist.id is not None:
        set_playlist_entries(playlist.id, item_ids)
    return playlist.model_copy(update={"tracks": tracks})


def list_playlists(user_id: str) -> list[tuple[PlaylistSummary, int]]:
    """A user's playlists with their entry counts."""
    playlists = get_user_playlists(parse_user_id(user_id))
    return [(p, count_playlist_items(p.id) if p.id is not None else 0) for p in playlists]
