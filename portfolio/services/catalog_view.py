# portfolio/services/catalog_view.py
"""
Read-side projections of the catalog.

A `CatalogView` owns one immutable snapshot of the catalog and derives
everything the gallery pages show from it: the featured work, filtered and
sorted listings, single-work details and the image fallback chains.
Nothing here mutates the snapshot, so every projection can be recomputed
at will with the same result.

`CatalogReader` produces snapshots from a repository and degrades to the
last good snapshot, a boot-data file, or an empty catalog when the
repository is unavailable.
"""

import json
import logging
from pathlib import Path
from typing import Callable, Iterable, Sequence

from portfolio.core.errors import StoreUnavailable
from portfolio.core.storage_utils import AssetKind, parse_original_path, public_asset_path
from portfolio.repositories.catalog_repo import CatalogRepository, parse_items
from portfolio.schemas.catalog import CatalogItem, DetailView, GridCard

logger = logging.getLogger(__name__)

FILTER_ALL = "all"
FILTER_AVAILABLE = "available"
DEFAULT_SORT = "new"

# URL fragment (#paintings, #photos, ...) -> listing filter
HASH_FILTERS: dict[str, str] = {
    "paintings": "painting",
    "painting": "painting",
    "photography": "photography",
    "photos": "photography",
    "available": FILTER_AVAILABLE,
    "all": FILTER_ALL,
}

SORT_KEYS: dict[str, tuple[Callable[[CatalogItem], float], bool]] = {
    # sort key -> (value, descending)
    "new": (lambda it: it.year or 0, True),
    "old": (lambda it: it.year or 0, False),
    "priceH": (lambda it: it.price or 0, True),
    "priceL": (lambda it: it.price or 0, False),
}


def format_price(price: int | float | None) -> str:
    """`1200 -> "$1,200"`, absent -> em dash."""
    if price is None:
        return "—"
    if isinstance(price, float) and not price.is_integer():
        return f"${price:,.2f}"
    return f"${int(price):,}"


def filter_from_hash(fragment: str | None) -> str:
    key = (fragment or "").lstrip("#").lower()
    return HASH_FILTERS.get(key, FILTER_ALL)


def _dedupe(candidates: Iterable[str | None]) -> list[str]:
    out: list[str] = []
    for c in candidates:
        if c and c not in out:
            out.append(c)
    return out


def _derived(ref: str, kind: AssetKind) -> str | None:
    """Rebuild an `assets/<category>/<file>` reference as another variant."""
    parsed = parse_original_path(ref)
    if parsed is None:
        return None
    lead = "/" if ref.startswith("/") else ""
    return lead + public_asset_path(parsed[0], parsed[1], kind)


def thumbnail_chain(item: CatalogItem) -> list[str]:
    """
    Grid image candidates, best first:

      1. optimizedThumbnail, else optimized/<cat>/thumbs/<file> derived
         from the raw thumbnail
      2. <cat>/thumbs/<file> derived from the raw thumbnail
      3. the raw thumbnail itself
    """
    raw = item.thumbnail or (item.images[0] if item.images else "")
    return _dedupe(
        [
            item.optimizedThumbnail or _derived(raw, "optimized_thumb"),
            _derived(raw, "thumb"),
            raw,
        ]
    )


def detail_chain(item: CatalogItem) -> list[str]:
    """Full-size candidates: optimized full image, then the raw original."""
    raw = (item.images[0] if item.images else "") or item.thumbnail
    return _dedupe([item.optimizedImage or _derived(raw, "optimized"), raw])


def resolve_image(chain: Sequence[str], loads: Callable[[str], bool]) -> str | None:
    """
    Try each candidate in order and return the first one that loads.

    If none loads, the last candidate is returned (the browser keeps the
    original reference as a last resort); None for an empty chain.
    """
    for candidate in chain:
        if loads(candidate):
            return candidate
    return chain[-1] if chain else None


class CatalogView:
    """Projections over one loaded catalog snapshot (store order kept)."""

    def __init__(self, items: Iterable[CatalogItem]):
        self._items: tuple[CatalogItem, ...] = tuple(items)

    @property
    def items(self) -> tuple[CatalogItem, ...]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def featured(self) -> CatalogItem | None:
        """
        First item flagged `featured`; otherwise the newest by year
        (absent year counts as 0, ties go to the earlier item).
        """
        for item in self._items:
            if item.featured:
                return item
        newest: CatalogItem | None = None
        for item in self._items:
            if newest is None or (item.year or 0) > (newest.year or 0):
                newest = item
        return newest

    @staticmethod
    def _matches(item: CatalogItem, query: str, filter_: str) -> bool:
        if query:
            text = f"{item.title} {item.medium} {item.year or ''}".lower()
            if query not in text:
                return False
        if filter_ == FILTER_ALL:
            return True
        if filter_ == FILTER_AVAILABLE:
            return item.available
        return item.category == filter_

    def select(
        self,
        query: str | None = None,
        filter_: str | None = FILTER_ALL,
        sort: str | None = DEFAULT_SORT,
    ) -> list[CatalogItem]:
        """Filtered + sorted items; unknown sort keys keep store order."""
        q = (query or "").strip().lower()
        f = filter_ or FILTER_ALL
        items = [it for it in self._items if self._matches(it, q, f)]

        rule = SORT_KEYS.get(sort or DEFAULT_SORT)
        if rule is not None:
            value, descending = rule
            items.sort(key=(lambda it: -value(it)) if descending else value)
        return items

    @staticmethod
    def card(item: CatalogItem) -> GridCard:
        chain = thumbnail_chain(item)
        return GridCard(
            item=item,
            src=chain[0] if chain else "",
            fallbacks=chain[1:],
            price_label=format_price(item.price),
        )

    def listing(
        self,
        query: str | None = None,
        filter_: str | None = FILTER_ALL,
        sort: str | None = DEFAULT_SORT,
    ) -> list[GridCard]:
        return [self.card(item) for item in self.select(query, filter_, sort)]

    def get(self, item_id: str | None) -> CatalogItem | None:
        if item_id is None:
            return None
        for item in self._items:
            if str(item.id) == str(item_id):
                return item
        return None

    def detail(self, item_id: str | None) -> DetailView | None:
        item = self.get(item_id)
        if item is None:
            return None
        chain = detail_chain(item)
        return DetailView(
            item=item,
            src=chain[0] if chain else "",
            fallbacks=chain[1:],
            price_label=format_price(item.price),
            availability_label="(Available)" if item.available else "(Sold/Unavailable)",
        )


class CatalogReader:
    """
    Load catalog snapshots, degrading instead of failing.

    On StoreUnavailable the reader serves, in order: the last snapshot it
    loaded successfully, the boot-data file (if configured), an empty view.
    """

    def __init__(self, repo: CatalogRepository, boot_data: Path | None = None):
        self.repo = repo
        self.boot_data = boot_data
        self._last_good: CatalogView | None = None

    def _boot_view(self) -> CatalogView | None:
        if self.boot_data is None:
            return None
        try:
            records = json.loads(Path(self.boot_data).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Boot data %s unusable: %s", self.boot_data, e)
            return None
        if not isinstance(records, list):
            logger.warning("Boot data %s is not a JSON array", self.boot_data)
            return None
        return CatalogView(parse_items(records))

    def view(self) -> CatalogView:
        try:
            snapshot = CatalogView(self.repo.load())
        except StoreUnavailable as e:
            logger.warning("Catalog unavailable, serving fallback: %s", e)
            if self._last_good is not None:
                return self._last_good
            return self._boot_view() or CatalogView([])
        self._last_good = snapshot
        return snapshot
