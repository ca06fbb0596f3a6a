"""Pydantic models for m3u-exporter domain objects."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

AUDIO_MEDIA_TYPE = "Audio"
PLAYLIST_MEDIA_TYPE = "Playlist"
MUSIC_COLLECTION_TYPE = "music"


class User(BaseModel):
    id: str  # canonical UUID string
    username: str


class LibraryRoot(BaseModel):
    id: int | None = None
    name: str
    collection_type: str = MUSIC_COLLECTION_TYPE
    locations: list[str] = []

    @property
    def is_music(self) -> bool:
        return self.collection_type.strip().lower() == MUSIC_COLLECTION_TYPE


class UserContext(BaseModel):
    """A resolved user plus the music library root used for this run."""
    user: User
    library_root: str


class TrackRef(BaseModel):
    id: int | None = None
    file_path: str = ""
    title: str = ""
    artist: str | None = None
    duration: int = -1  # whole seconds, -1 when unknown
    media_type: str | None = AUDIO_MEDIA_TYPE

    @property
    def display_name(self) -> str:
        if self.artist:
            return f"{self.artist} - {self.title}"
        if self.title:
            return self.title
        return Path(self.file_path).stem if self.file_path else "Unknown"

    @property
    def is_audio(self) -> bool:
        return self.media_type == AUDIO_MEDIA_TYPE


class PlaylistSummary(BaseModel):
    id: int | None = None
    name: str
    owner_id: str | None = None
    tracks: list[TrackRef] = []


class ExportedPlaylistFile(BaseModel):
    """A playlist file while it is being rendered."""
    stem: str
    path: str
    entries: list[tuple[TrackRef, str]] = []


class ExportRequest(BaseModel):
    """Immutable input to a single export run."""

    model_config = ConfigDict(frozen=True)

    user_ids: tuple[str, ...] = ()
    export_directory: str = ""

    @field_validator("user_ids", mode="before")
    @classmethod
    def _dedupe_user_ids(cls, value: object) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        seen: list[str] = []
        for raw in value:
            user_id = str(raw).strip()
            if user_id and user_id not in seen:
                seen.append(user_id)
        return tuple(seen)


class OutcomeStatus(str, Enum):
    WRITTEN = "written"
    SKIPPED_EMPTY = "skipped_empty"
    FAILED = "failed"


class PlaylistOutcome(BaseModel):
    status: OutcomeStatus
    playlist_name: str
    path: str | None = None
    track_count: int = 0
    reason: str = ""
    warnings: list[str] = []

    @classmethod
    def written(cls, name: str, path: str, track_count: int, warnings: list[str] | None = None) -> "PlaylistOutcome":
        return cls(
            status=OutcomeStatus.WRITTEN,
            playlist_name=name,
            path=path,
            track_count=track_count,
            warnings=warnings or [],
        )

    @classmethod
    def skipped_empty(cls, name: str) -> "PlaylistOutcome":
        return cls(status=OutcomeStatus.SKIPPED_EMPTY, playlist_name=name)

    @classmethod
    def failed(cls, name: str, reason: str, warnings: list[str] | None = None) -> "PlaylistOutcome":
        return cls(status=OutcomeStatus.FAILED, playlist_name=name, reason=reason, warnings=warnings or [])


class RunStatus(str, Enum):
    COMPLETED = "completed"
    NOTHING_TO_DO = "nothing_to_do"
    CONFIG_ERROR = "config_error"
    CANCELLED = "cancelled"


class ExportSummary(BaseModel):
    """Aggregated result of one export run."""
    status: RunStatus = RunStatus.COMPLETED
    message: str = ""
    users_total: int = 0
    users_processed: int = 0
    users_skipped: int = 0
    playlists_written: int = 0
    playlists_skipped: int = 0
    playlists_failed: int = 0
    tracks_written: int = 0
    files: list[str] = []
    warnings: list[str] = []
    errors: list[str] = []

    @property
    def progress(self) -> float:
        if self.users_total <= 0:
            return 0.0
        return self.users_processed / self.users_total
