from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CATEGORY_KEYS = [
    "Aloha",
    "Premier",
    "PremierLandscape",
    "SpecialBilling",
    "TotalTraffic",
    "Radio",
    "LockboxInsert",
]


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    source_root: Path = Path("/mnt/clearchannel")
    output_root: Path = Path("/mnt/submit/ftp/clear_channel")
    archive_root: Path = Path("/mnt/tempjobs/laser")
    staging_dir: Path = Path("work/input")
    ocr_working_dir: Path = Path("work/ocr")
    error_log_dir: Path = Path("work/error_logs")

    enabled_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CATEGORY_KEYS)
    )

    archive_password: str = ""
    archive_name_prefix: str = "Clear Channel"
    extraction_max_workers: int = 4
    extraction_timeout_seconds: int = 300

    ocr_engine: str = "tesseract"
    ocr_language: str = "eng"
    ocr_dpi: int = 300
    ocr_timeout_seconds: int = 120
    ocr_max_workers: int = 4

    pdf_engine: str = "pdfplumber"

    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    smtp_timeout_seconds: int = 30
    notification_sender: str = ""
    notification_recipient: str = ""

    error_log_retention_days: int = 30
