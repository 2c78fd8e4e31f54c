# portfolio/storage.py
from functools import lru_cache

from fastapi import Depends

from portfolio.core.config import Settings, get_settings
from portfolio.core.supabase_client import supabase_admin
from portfolio.repositories.asset_repo import (
    AssetRepository,
    LocalAssetRepository,
    SupabaseAssetRepository,
)
from portfolio.repositories.catalog_repo import (
    CatalogRepository,
    GitHubCatalogRepository,
    JsonFileCatalogRepository,
)
from portfolio.services.catalog_view import CatalogReader, CatalogView
from portfolio.services.ingest_service import IngestService
from portfolio.services.variant_service import VariantService

# ---------------------------------------------------------
# Backend selection (STORAGE_BACKEND)
#
# - local : assets under <SITE_ROOT>/assets, catalog in <SITE_ROOT>/data.json
# - remote: assets in a Supabase Storage bucket, catalog in a GitHub repo
#           file updated through the contents API
#
# Both expose the same repositories, so the ingest contract is identical.
# ---------------------------------------------------------

@lru_cache
def _github_repository(repo: str, token: str, branch: str, path: str) -> GitHubCatalogRepository:
    """One repository (and one HTTP session) per GitHub target per process."""
    return GitHubCatalogRepository(repo=repo, token=token, branch=branch, path=path)


def build_catalog_repository(settings: Settings) -> CatalogRepository:
    if settings.STORAGE_BACKEND == "remote":
        if not settings.GITHUB_TOKEN or not settings.GITHUB_REPO:
            raise RuntimeError("Missing GITHUB_TOKEN / GITHUB_REPO in .env")
        return _github_repository(
            settings.GITHUB_REPO,
            settings.GITHUB_TOKEN,
            settings.GITHUB_BRANCH,
            settings.GITHUB_DATA_PATH,
        )
    return JsonFileCatalogRepository(settings.data_path)


def build_asset_repository(settings: Settings) -> AssetRepository:
    if settings.STORAGE_BACKEND == "remote":
        return SupabaseAssetRepository(supabase_admin(), settings.SUPABASE_BUCKET)
    return LocalAssetRepository(settings.assets_path)


def get_catalog_repository(
    settings: Settings = Depends(get_settings),
) -> CatalogRepository:
    """FastAPI dependency for the configured catalog repository."""
    return build_catalog_repository(settings)


def get_asset_repository(
    settings: Settings = Depends(get_settings),
) -> AssetRepository:
    """FastAPI dependency for the configured asset repository."""
    return build_asset_repository(settings)


def get_ingest_service(
    settings: Settings = Depends(get_settings),
    catalog: CatalogRepository = Depends(get_catalog_repository),
    assets: AssetRepository = Depends(get_asset_repository),
) -> IngestService:
    variants = VariantService(
        assets,
        full_max_width=settings.FULL_MAX_WIDTH,
        full_quality=settings.FULL_QUALITY,
        thumb_max_width=settings.THUMB_MAX_WIDTH,
        thumb_quality=settings.THUMB_QUALITY,
    )
    return IngestService(catalog, assets, variants)


@lru_cache
def get_catalog_reader() -> CatalogReader:
    """
    Process-wide reader, so the last good snapshot survives between
    requests.
    """
    settings = get_settings()
    return CatalogReader(
        build_catalog_repository(settings),
        boot_data=settings.BOOT_DATA_FILE,
    )


def get_catalog_view(
    reader: CatalogReader = Depends(get_catalog_reader),
) -> CatalogView:
    """
    FastAPI dependency: one catalog snapshot per request.

    Usage:

        @router.get("/example")
        def example(view: CatalogView = Depends(get_catalog_view)):
            ...
    """
    return reader.view()
