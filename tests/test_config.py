"""Tests for settings loading."""

from assetstore.core.config import Settings


def test_defaults(monkeypatch):
    """Test default settings."""
    for name in ["STORAGE_BACKEND", "GCP_PROJECT_ID", "GCS_PUBLIC_URL_BASE", "ASSETS_FOLDER_PATH"]:
        monkeypatch.delenv(name, raising=False)

    config = Settings(_env_file=None)

    assert config.STORAGE_BACKEND == "folder"
    assert config.ASSETS_FOLDER_PATH == "data/assets"
    assert config.gcp_project is None
    assert config.public_url_base is None


def test_environment_overrides(monkeypatch):
    """Test loading settings from environment variables."""
    monkeypatch.setenv("STORAGE_BACKEND", "gcs")
    monkeypatch.setenv("GCS_BUCKET_NAME", "assets-bucket")
    monkeypatch.setenv("GCP_PROJECT_ID", "my-project")
    monkeypatch.setenv("GCS_PUBLIC_URL_BASE", "https://storage.googleapis.com/")

    config = Settings(_env_file=None)

    assert config.STORAGE_BACKEND == "gcs"
    assert config.GCS_BUCKET_NAME == "assets-bucket"
    assert config.gcp_project == "my-project"
    assert config.public_url_base == "https://storage.googleapis.com"
