"""Runtime settings, read from the environment (``BOOKING_*``) or ``.env``."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expires_hours: int = 24
    bcrypt_rounds: int = 12

    upload_dir: Path = BASE_DIR / "uploads"
    max_picture_bytes: int = 5 * 1024 * 1024
    max_pictures: int = 10

    seed_demo_data: bool = True
    admin_email: str = "admin@example.com"
    admin_password: str = "admin123"

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="BOOKING_",
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )


settings = Settings()
