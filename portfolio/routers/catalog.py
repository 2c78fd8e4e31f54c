# portfolio/routers/catalog.py
from fastapi import APIRouter, Depends, Query

from portfolio.core.errors import NotFound

from portfolio.repositories.catalog_repo import CatalogRepository
from portfolio.schemas.catalog import DetailView, GridCard
from portfolio.services.catalog_view import (
    DEFAULT_SORT,
    FILTER_ALL,
    CatalogView,
    filter_from_hash,
)
from portfolio.storage import get_catalog_repository, get_catalog_view

router = APIRouter(tags=["Catalog"])


@router.get("/data.json")
def catalog_document(
    repo: CatalogRepository = Depends(get_catalog_repository),
) -> list:
    """
    The catalog document exactly as stored (newest first).

    - Public endpoint; clients filter and sort locally.
    - 503 if the document cannot be read.
    """
    return repo.raw()


@router.get("/api/catalog/featured", response_model=GridCard, response_model_exclude_none=True)
def featured_work(view: CatalogView = Depends(get_catalog_view)):
    """
    The work shown on the home page: first `featured` item, else the
    newest by year.
    """
    item = view.featured()
    if item is None:
        raise NotFound("Catalog is empty")
    return view.card(item)


@router.get("/api/catalog/items", response_model=list[GridCard], response_model_exclude_none=True)
def list_works(
    q: str | None = None,
    filter_: str | None = Query(default=None, alias="filter"),
    hash_: str | None = Query(default=None, alias="hash"),
    sort: str = DEFAULT_SORT,
    view: CatalogView = Depends(get_catalog_view),
):
    """
    Gallery grid.

    - `q`: case-insensitive match on title, medium and year.
    - `filter`: "all", "available", "painting" or "photography".
    - `hash`: gallery URL fragment (e.g. "paintings"), used when `filter`
      is not given.
    - `sort`: "new" (default), "old", "priceH", "priceL".
    """
    active = filter_ or (filter_from_hash(hash_) if hash_ else FILTER_ALL)
    return view.listing(query=q, filter_=active, sort=sort)


@router.get("/api/catalog/items/{item_id}", response_model=DetailView, response_model_exclude_none=True)
def get_work(
    item_id: str,
    view: CatalogView = Depends(get_catalog_view),
):
    """
    Single work with its full-size image candidates.
    """
    detail = view.detail(item_id)
    if detail is None:
        raise NotFound("Work not found")
    return detail
