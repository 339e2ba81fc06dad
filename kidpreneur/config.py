import tempfile
from pathlib import Path

from pydantic_settings import BaseSettings

PROJECT_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    # Server
    host: str = "0.0.0.0"
    port: int = 16000

    # Storage
    submissions_dir: Path = (
        Path.home() / "Documents" / "Kidpreneur" / "Submissions"
    )
    public_dir: Path = PROJECT_DIR / "public"

    # File Upload
    upload_tmp_dir: Path = Path(tempfile.gettempdir())
    max_file_size: int = 50 * 1024 * 1024 * 1024  # 50GB
    max_files: int = 100_000
    max_fields: int = 100_000
    max_field_size: int = 1024 * 1024 * 1024  # 1GB per text field

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "KIDPRENEUR_"


settings = Settings()


def get_settings() -> Settings:
    return settings
