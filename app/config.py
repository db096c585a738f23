"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # Service
    service_name: str = "stream-validator"
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    # External validator
    validator_executable: str = "mediastreamvalidator"
    validator_timeout_seconds: int = 30
    validator_kill_grace_seconds: float = 10.0
    validator_temp_dir: Optional[str] = None  # None -> system temp dir

    # URLs with these suffixes are not HLS and are skipped
    skip_suffixes: List[str] = [".mpd"]

    # Job processing
    max_concurrent_validations: int = 4
    max_queue_size: int = 1000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
