"""Export runs: every selected user's playlists to M3U files."""

import logging
import os
import threading
from typing import Callable

from m3uexport.errors import ConfigurationError
from m3uexport.export.playlist import export_playlist
from m3uexport.library import MediaLibrary
from m3uexport.models import (
    ExportRequest,
    ExportSummary,
    LibraryRoot,
    OutcomeStatus,
    PlaylistSummary,
    RunStatus,
    User,
    UserContext,
)

logger = logging.getLogger(__name__)

MAX_PLAYLISTS = 1000

ProgressCallback = Callable[[dict], None]


def find_music_root(roots: list[LibraryRoot]) -> str | None:
    """First location of the first music library root, if any."""
    for root in roots:
        if root.is_music:
            return root.locations[0] if root.locations else None
    return None


def validate_request(request: ExportRequest) -> None:
    if not request.export_directory.strip():
        raise ConfigurationError("Export directory not configured")


def _cancelled(cancel_event: threading.Event | None) -> bool:
    return cancel_event is not None and cancel_event.is_set()


def _discover_playlists(library: MediaLibrary, user: User, summary: ExportSummary) -> list[PlaylistSummary]:
    playlists = library.get_playlists(user)
    if len(playlists) > MAX_PLAYLISTS:
        message = (
            f"User {user.username} has {len(playlists)} playlists, "
            f"but only {MAX_PLAYLISTS} will be exported"
        )
        logger.warning(message)
        summary.warnings.append(message)
        playlists = playlists[:MAX_PLAYLISTS]
    return playlists




def resolve_user_context(library: MediaLibrary, user: User) -> UserContext | None:
    """Pair ``user`` with the music library root, or None when there is none."""
    library_root = find_music_root(library.get_library_roots())
    if not library_root:
        return None
    return UserContext(user=user, library_root=library_root)


def export_user_playlists(
    library: MediaLibrary,
    user: User,
    export_directory: str,
    summary: ExportSummary,
    cancel_event: threading.Event | None = None,
) -> bool:
    """Export every playlist of one user into the music root's export directory.

    Returns False when cancellation stopped the user before all of its
    playlists were attempted.
    """
    playlists = _discover_playlists(library, user, summary)
    if not playlists:
        logger.info("No playlists found for user %s", user.username)
        return True

    logger.info("Found %d playlist(s) for user %s", len(playlists), user.username)

    context = resolve_user_context(library, user)
    if context is None:
        message = "No music library found"
        logger.error(message)
        summary.errors.append(message)
        return True

    export_path = os.path.join(context.library_root, export_directory)
    os.makedirs(export_path, exist_ok=True)
    logger.info("Exporting playlists to: %s", export_path)

    for playlist in playlists:
        if _cancelled(cancel_event):
            return False

        try:
            tracks = library.get_playlist_tracks(playlist, context.user)
            outcome = export_playlist(
                playlist.model_copy(update={"tracks": tracks}),
                export_path,
                context.library_root,
            )
        except Exception as exc:
            logger.exception("Error exporting playlist %s", playlist.name)
            summary.playlists_failed += 1
            summary.errors.append(f"{playlist.name}: {exc}")
            continue

        summary.warnings.extend(outcome.warnings)
        if outcome.status == OutcomeStatus.WRITTEN:
            summary.playlists_written += 1
            summary.tracks_written += outcome.track_count
            summary.files.append(outcome.path)
        elif outcome.status == OutcomeStatus.SKIPPED_EMPTY:
            summary.playlists_skipped += 1
        else:
            logger.error("Error exporting playlist %s: %s", outcome.playlist_name, outcome.reason)
            summary.playlists_failed += 1
            summary.errors.append(f"{outcome.playlist_name}: {outcome.reason}")

    return True


def run_export(
    request: ExportRequest,
    library: MediaLibrary,
    progress_cb: ProgressCallback | None = None,
    cancel_event: threading.Event | None = None,
) -> ExportSummary:
    """Export the playlists of every user in ``request``.

    Users and playlists are processed one at a time, in order. Cancellation is
    checked before each user and each playlist. Progress counts resolved users
    only; unknown users are skipped without advancing it. The run never raises:
    problems end up in the log and in the returned summary.
    """
    summary = ExportSummary(users_total=len(request.user_ids))

    if not request.user_ids:
        logger.info("No users selected for playlist export")
        summary.status = RunStatus.NOTHING_TO_DO
        summary.message = "No users selected for playlist export"
        return summary

    try:
        validate_request(request)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        summary.status = RunStatus.CONFIG_ERROR
        summary.message = str(exc)
        summary.errors.append(summary.message)
        return summary

    logger.info("Starting M3U export for %d user(s)", summary.users_total)

    for user_id in request.user_ids:
        if _cancelled(cancel_event):
            summary.status = RunStatus.CANCELLED
            break

        try:
            user = library.get_user(user_id)
        except ValueError:
            user = None
        except Exception as exc:
            logger.exception("Error resolving user %s", user_id)
            summary.errors.append(f"{user_id}: {exc}")
            user = None

        if user is None:
            logger.warning("User with ID %s not found", user_id)
            summary.users_skipped += 1
            continue

        logger.info("Processing playlists for user: %s", user.username)
        finished = True
        try:
            finished = export_user_playlists(library, user, request.export_directory, summary, cancel_event)
        except Exception as exc:
            logger.exception("Error exporting playlists for user %s", user_id)
            summary.errors.append(f"{user.username}: {exc}")

        if not finished:
            summary.status = RunStatus.CANCELLED
            break

        summary.users_processed += 1
        if progress_cb:
            progress_cb({
                "current": summary.users_processed,
                "total": summary.users_total,
                "user": user.username,
                "progress": summary.progress,
            })

    if summary.status == RunStatus.CANCELLED:
        logger.info(
            "M3U export cancelled after %d of %d user(s)",
            summary.users_processed, summary.users_total,
        )
    else:
        logger.info(
            "M3U export completed: %d playlist(s) written, %d skipped, %d failed",
            summary.playlists_written, summary.playlists_skipped, summary.playlists_failed,
        )
    return summary
