from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    database_url: str

    # OCR provider: mock | google_vision
    ocr_provider: str = "google_vision"

    # Retry policy for the recognition call
    gcv_max_retries: int = 3
    gcv_retry_delay: int = 1000  # milliseconds between attempts

    # Google Cloud credentials (all optional -> Application Default Credentials)
    google_application_credentials: str | None = None
    firebase_client_email: str | None = None
    firebase_private_key: str | None = None
    google_cloud_project_id: str | None = None


settings = Settings()
