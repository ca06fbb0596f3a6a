"""Tag and duration reading for indexed audio files."""

import logging
import re
from pathlib import Path

import mutagen
from mutagen import MutagenError

logger = logging.getLogger(__name__)


def read_metadata(path: Path) -> dict[str, str]:
    """Read title/artist tags, falling back to the file name."""
    result: dict[str, str] = {"title": "", "artist": ""}

    try:
        easy_meta = mutagen.File(path, easy=True)
        if easy_meta is not None:
            result["title"] = _coerce_tag_value(easy_meta.get("title"))
            result["artist"] = _coerce_tag_value(easy_meta.get("artist"))
    except (MutagenError, OSError) as exc:
        logger.debug("Could not read tags from %s: %s", path, exc)

    if not result["title"]:
        fallback = parse_filename_metadata(path)
        result["title"] = fallback.get("title", "")
        result["artist"] = result["artist"] or fallback.get("artist", "")

    return {k: v for k, v in result.items() if v}


def _coerce_tag_value(value: object) -> str:
    """Convert mutagen tag values into a usable string."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        for item in value:
            text = _coerce_tag_value(item)
            if text:
                return text
        return ""
    text = getattr(value, "text", None)
    if text is not None:
        return _coerce_tag_value(text)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="ignore").strip()
    return str(value).strip()


def parse_filename_metadata(path: Path) -> dict[str, str]:
    """Infer title/artist from filename when tags are missing."""
    stem = re.sub(r"\s+", " ", path.stem).strip()
    if not stem:
        return {}

    match = re.match(r"^(?P<artist>.+?)\s*-\s*(?P<title>.+)$", stem)
    if match:
        artist = match.group("artist").strip()
        title = match.group("title").strip()
        if artist and title:
            return {"artist": artist, "title": title}

    return {"title": stem}


def read_duration(path: Path) -> float:
    """Read duration in seconds from container metadata, 0.0 when unknown."""
    try:
        meta = mutagen.File(path)
        if meta is not None and getattr(meta, "info", None) is not None:
            return max(float(getattr(meta.info, "length", 0.0) or 0.0), 0.0)
    except (MutagenError, OSError) as exc:
        logger.debug("Could not read duration from %s: %s", path, exc)
    return 0.0
