# tests/conftest.py
import io
import os
import tempfile

import pytest
from PIL import Image

# Settings are read once at import time by portfolio.main
os.environ.setdefault("ADMIN_TOKEN", "test-admin-token")
os.environ.setdefault("SITE_ROOT", tempfile.mkdtemp(prefix="portfolio-site-"))

from fastapi.testclient import TestClient  # noqa: E402

from portfolio.core.config import Settings, get_settings  # noqa: E402
from portfolio.main import app  # noqa: E402
from portfolio.repositories.asset_repo import LocalAssetRepository  # noqa: E402
from portfolio.repositories.catalog_repo import JsonFileCatalogRepository  # noqa: E402
from portfolio.services.catalog_view import CatalogReader  # noqa: E402
from portfolio.services.variant_service import VariantService  # noqa: E402
from portfolio.storage import get_catalog_reader  # noqa: E402

ADMIN_TOKEN = "test-admin-token"


@pytest.fixture
def make_image():
    """Factory: encoded image bytes of the given size/format."""

    def _make(width=800, height=600, fmt="JPEG", mode="RGB", color=(200, 30, 30), exif=None):
        img = Image.new(mode, (width, height), color)
        buf = io.BytesIO()
        kwargs = {}
        if exif is not None:
            kwargs["exif"] = exif
        img.save(buf, fmt, **kwargs)
        return buf.getvalue()

    return _make


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(SITE_ROOT=tmp_path, ADMIN_TOKEN=ADMIN_TOKEN, STORAGE_BACKEND="local")


@pytest.fixture
def catalog_repo(settings) -> JsonFileCatalogRepository:
    return JsonFileCatalogRepository(settings.data_path)


@pytest.fixture
def asset_repo(settings) -> LocalAssetRepository:
    return LocalAssetRepository(settings.assets_path)


@pytest.fixture
def variant_service(asset_repo) -> VariantService:
    return VariantService(asset_repo)


@pytest.fixture
def client(settings):
    reader = CatalogReader(JsonFileCatalogRepository(settings.data_path))
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_catalog_reader] = lambda: reader
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
