"""Export of a single playlist to an M3U file."""

import logging
import os

from m3uexport.errors import PathResolutionError
from m3uexport.export.m3u import serialize_m3u, write_m3u
from m3uexport.export.naming import sanitize_playlist_name
from m3uexport.export.paths import relativize
from m3uexport.models import ExportedPlaylistFile, PlaylistOutcome, PlaylistSummary, TrackRef

logger = logging.getLogger(__name__)

MAX_TRACKS_PER_PLAYLIST = 40000


def _audio_tracks(playlist: PlaylistSummary) -> list[TrackRef]:
    tracks = []
    for track in playlist.tracks:
        if track.is_audio:
            tracks.append(track)
        else:
            logger.debug(
                "Skipping item %r in playlist %s: media type %r",
                track.title, playlist.name, track.media_type,
            )
    return tracks


def build_playlist_file(
    playlist: PlaylistSummary,
    tracks: list[TrackRef],
    export_dir: str,
    warnings: list[str],
) -> ExportedPlaylistFile:
    """Resolve entries for ``tracks``, skipping the ones without a usable path."""
    stem = sanitize_playlist_name(playlist.name)
    destination = os.path.join(export_dir, f"{stem}.m3u")
    exported = ExportedPlaylistFile(stem=stem, path=destination)

    for track in tracks:
        if not track.file_path:
            message = f"Item {track.title!r} in playlist {playlist.name!r} has no path"
            logger.warning(message)
            warnings.append(message)
            continue
        try:
            relative_path = relativize(export_dir, track.file_path)
        except PathResolutionError as exc:
            message = f"Item {track.title!r} in playlist {playlist.name!r} skipped: {exc}"
            logger.warning(message)
            warnings.append(message)
            continue
        exported.entries.append((track, relative_path))

    return exported


def export_playlist(
    playlist: PlaylistSummary,
    export_dir: str,
    library_root: str,
) -> PlaylistOutcome:
    """Write ``playlist`` as ``<export_dir>/<sanitized name>.m3u``.

    Never raises for problems confined to this playlist: write errors and
    unexpected failures while reading tracks come back as a failed outcome.
    """
    logger.debug("Exporting playlist %s (library root %s)", playlist.name, library_root)
    warnings: list[str] = []

    try:
        tracks = _audio_tracks(playlist)
        if not tracks:
            logger.info("Playlist %s has no audio items", playlist.name)
            return PlaylistOutcome.skipped_empty(playlist.name)

        if len(tracks) > MAX_TRACKS_PER_PLAYLIST:
            message = (
                f"Playlist {playlist.name} has {len(tracks)} tracks, "
                f"but only {MAX_TRACKS_PER_PLAYLIST} will be exported"
            )
            logger.warning(message)
            warnings.append(message)
            tracks = tracks[:MAX_TRACKS_PER_PLAYLIST]

        exported = build_playlist_file(playlist, tracks, export_dir, warnings)
        content = serialize_m3u(exported.entries)
    except Exception as exc:
        logger.exception("Error reading tracks of playlist %s", playlist.name)
        return PlaylistOutcome.failed(playlist.name, f"Unexpected error: {exc}", warnings)

    try:
        write_m3u(exported.path, content)
    except OSError as exc:
        logger.error("Error writing playlist %s to %s: %s", playlist.name, exported.path, exc)
        return PlaylistOutcome.failed(playlist.name, f"Write failed: {exc}", warnings)

    logger.info(
        "Exported playlist %s with %d track(s) to %s",
        playlist.name, len(exported.entries), exported.path,
    )
    return PlaylistOutcome.written(playlist.name, exported.path, len(exported.entries), warnings)
