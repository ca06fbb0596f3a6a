"""Relative path computation for playlist entries."""

import os

from m3uexport.errors import PathResolutionError


def _absolute(path: str) -> str:
    if not path or not str(path).strip():
        raise PathResolutionError("Empty path")
    if "\x00" in str(path):
        raise PathResolutionError(f"Path contains a NUL byte: {path!r}")
    return os.path.abspath(os.path.normpath(str(path)))


def relativize(base_dir: str | os.PathLike, target: str | os.PathLike) -> str:
    """Return ``target`` relative to ``base_dir`` using the platform separator.

    Both paths are normalized to absolute form first. Targets outside the
    base directory come back with ``..`` segments.
    """
    base = _absolute(os.fspath(base_dir))
    full_target = _absolute(os.fspath(target))
    try:
        return os.path.relpath(full_target, base)
    except ValueError as exc:
        # Windows: paths on different drives have no relative form
        raise PathResolutionError(f"Cannot relate {full_target} to {base}: {exc}") from exc
