"""Configuration management for the asset store service."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    ENV: str = "local"
    SERVICE_NAME: str = "asset-store"
    SERVICE_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # Storage Configuration
    STORAGE_BACKEND: str = "folder"  # "gcs", "folder" or "memory"

    # GCP Configuration
    GCP_PROJECT_ID: str = ""
    GCS_BUCKET_NAME: str = ""
    GCS_PUBLIC_URL_BASE: str = ""  # Empty = public URLs unsupported

    # Folder Configuration (local disk or mounted network share)
    ASSETS_FOLDER_PATH: str = "data/assets"

    @property
    def gcp_project(self) -> str | None:
        """GCP project ID, or None to let the client auto-detect it."""
        return self.GCP_PROJECT_ID or None

    @property
    def public_url_base(self) -> str | None:
        """Public URL base without trailing slash, or None if unset."""
        if not self.GCS_PUBLIC_URL_BASE:
            return None
        return self.GCS_PUBLIC_URL_BASE.rstrip("/")


# Singleton settings instance
settings = Settings()
