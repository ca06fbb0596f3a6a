"""M3U playlist serialization."""

from collections.abc import Iterable
from pathlib import Path

from m3uexport.models import TrackRef

M3U_HEADER = "#EXTM3U"
LINE_TERMINATOR = "\n"


def format_extinf(track: TrackRef) -> str:
    """Build the ``#EXTINF`` line for a track."""
    duration = track.duration if track.duration >= 0 else -1
    if track.artist:
        return f"#EXTINF:{duration},{track.artist} - {track.title}"
    return f"#EXTINF:{duration},{track.title}"


def serialize_m3u(entries: Iterable[tuple[TrackRef, str]]) -> str:
    """Render ``(track, relative_path)`` pairs as extended M3U text."""
    lines = [M3U_HEADER]
    for track, relative_path in entries:
        lines.append(format_extinf(track))
        lines.append(relative_path)
    return LINE_TERMINATOR.join(lines) + LINE_TERMINATOR


def write_m3u(output_path: Path | str, content: str) -> Path:
    """Write playlist text as UTF-8 (no BOM), replacing any existing file.

    Content is staged in a hidden temp file beside the target and moved into
    place; a failed write leaves any previous file untouched.
    """
    output_file = Path(output_path)
    temp_file = output_file.with_name(f".{output_file.name}.tmp")
    try:
        with open(temp_file, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        temp_file.replace(output_file)
    except OSError:
        temp_file.unlink(missing_ok=True)
        raise
    return output_file
