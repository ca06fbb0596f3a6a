"""Settings loaded from the environment and an optional .env file."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from m3uexport.models import ExportRequest


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="M3UEXPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_dir: Path = Path("~/.m3uexport")
    db_name: str = "library.db"
    selected_user_ids: list[str] = []
    export_directory: str = ""  # relative to the music library root
    log_level: str = "INFO"

    def db_path(self) -> Path:
        return self.data_dir.expanduser() / self.db_name

    def export_request(
        self,
        user_ids: list[str] | None = None,
        export_directory: str | None = None,
    ) -> ExportRequest:
        """Build the request for one run, explicit values overriding configured ones."""
        return ExportRequest(
            user_ids=user_ids if user_ids else self.selected_user_ids,
            export_directory=export_directory if export_directory is not None else self.export_directory,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
