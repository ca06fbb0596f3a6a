"""Filesystem-safe playlist file names."""

import re

FALLBACK_NAME = "Untitled"

# Control characters plus the characters reserved on common filesystems.
_INVALID_FS_CHARS_RE = re.compile(r'[\x00-\x1f/\\:*?"<>|]+')


def sanitize_playlist_name(name: str | None) -> str:
    """Return a file stem for ``name``.

    Runs of illegal characters become a single underscore, empty fragments are
    dropped and trailing periods removed. Never returns an empty string.
    """
    fragments = [part for part in _INVALID_FS_CHARS_RE.split(str(name or "")) if part]
    text = "_".join(fragments).rstrip(".")
    if not text.strip():
        return FALLBACK_NAME
    return text
