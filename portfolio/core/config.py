# portfolio/core/config.py
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - ADMIN_TOKEN (shared secret for the upload endpoint)

    Remote backend (STORAGE_BACKEND=remote) additionally needs:
      - SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, SUPABASE_BUCKET
      - GITHUB_TOKEN, GITHUB_REPO (owner/name)
    """

    PROJECT_NAME: str = "Portfolio Catalog API"

    # Shared-secret admin token; "changeme" only triggers a startup warning
    ADMIN_TOKEN: str = "changeme"

    # "local"  => assets on disk + data.json next to the site
    # "remote" => assets in Supabase Storage + data.json in a GitHub repo
    STORAGE_BACKEND: Literal["local", "remote"] = "local"

    SITE_ROOT: Path = Path(".")
    DATA_FILE: str = "data.json"
    ASSETS_DIR: str = "assets"
    UPLOAD_TMP_DIR: str = "uploads"

    # Snapshot served when the catalog document cannot be read
    BOOT_DATA_FILE: Path | None = None

    # Variant generation
    FULL_MAX_WIDTH: int = 1600
    FULL_QUALITY: int = 80
    THUMB_MAX_WIDTH: int = 600
    THUMB_QUALITY: int = 70

    # Supabase Storage (remote assets)
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    SUPABASE_BUCKET: str = "artworks"

    # GitHub contents API (remote catalog document)
    GITHUB_TOKEN: str | None = None
    GITHUB_REPO: str | None = None
    GITHUB_BRANCH: str = "main"
    GITHUB_DATA_PATH: str = "data.json"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def data_path(self) -> Path:
        return self.SITE_ROOT / self.DATA_FILE

    @property
    def assets_path(self) -> Path:
        return self.SITE_ROOT / self.ASSETS_DIR

    @property
    def upload_tmp_path(self) -> Path:
        return self.SITE_ROOT / self.UPLOAD_TMP_DIR


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
