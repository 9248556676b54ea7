"""Application configuration."""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    data_dir: Path = Path("data")
    template_dir: Path = DEFAULT_TEMPLATE_DIR
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False
    app_title: str = "TinyWiki"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TINYWIKI_",
        env_file=".env",
        env_file_encoding="utf-8",
    )
