from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_path: Path = Path("data")
    # Uploads are streamed to disk and cut off past this size.
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MiB
    allowed_content_type: str = "application/pdf"
    api_prefix: str = ""
    cors_origins: list[str] = ["*"]
    host: str = "0.0.0.0"
    port: int = Field(5001, validation_alias=AliasChoices("PORT", "DOCSTORE_PORT"))
    log_level: str = "INFO"

    @property
    def db_path(self) -> Path:
        return self.data_path / "database.sqlite"

    @property
    def uploads_dir(self) -> Path:
        return self.data_path / "uploads"

    model_config = {"env_prefix": "DOCSTORE_", "populate_by_name": True}


settings = Settings()
