"""Exception types raised inside the export pipeline."""


class ExportError(Exception):
    """Base class for m3u-exporter errors."""


class ConfigurationError(ExportError):
    """The export cannot start with the current configuration."""


class PathResolutionError(ExportError, ValueError):
    """A track path cannot be expressed relative to the export directory."""
