# portfolio/services/ingest_service.py
import logging
import time
from typing import Callable

from portfolio.core.errors import ValidationError
from portfolio.core.storage_utils import asset_path, sanitize_filename
from portfolio.repositories.asset_repo import AssetRepository
from portfolio.repositories.catalog_repo import CatalogRepository
from portfolio.schemas.catalog import CatalogItem, Category, UploadSubmission
from portfolio.services.variant_service import VariantService

logger = logging.getLogger(__name__)

# Upload category tag -> (asset directory, item category, id prefix)
PHOTOGRAPHY = ("photography", "photography", "ph")
ARTWORKS = ("artworks", "painting", "mz")

PHOTOGRAPHY_TAGS = {"photography", "photos", "photo"}


def epoch_millis() -> int:
    return int(time.time() * 1000)


def resolve_category(tag: str) -> tuple[str, Category, str]:
    """
    Map an upload category tag to (asset dir, item category, id prefix).

    Anything that is not a photography tag is filed as artworks/painting.
    """
    if tag.strip().lower() in PHOTOGRAPHY_TAGS:
        return PHOTOGRAPHY
    return ARTWORKS


def _blank(v: str | None) -> bool:
    return v is None or not v.strip()


def parse_year(raw: str | None) -> int | None:
    if _blank(raw):
        return None
    try:
        return int(raw.strip())
    except ValueError:
        raise ValidationError(f"Year must be a whole number, got {raw!r}")


def parse_price(raw: str | None) -> int | float | None:
    """
    Parse a price in major units. Integral values stay ints ("1200" -> 1200).
    """
    if _blank(raw):
        return None
    value = raw.strip()
    try:
        price: int | float = int(value)
    except ValueError:
        try:
            price = float(value)
        except ValueError:
            raise ValidationError(f"Price must be a number, got {raw!r}")
        if price != price or price in (float("inf"), float("-inf")):
            raise ValidationError(f"Price must be a number, got {raw!r}")
        if price.is_integer():
            price = int(price)
    if price < 0:
        raise ValidationError("Price cannot be negative")
    return price


def is_opted_out(raw: str | None) -> bool:
    """True only for the literal "false" (available is opt-out)."""
    return raw is not None and raw.strip().lower() == "false"


def is_opted_in(raw: str | None) -> bool:
    """True only for the literal "true" (featured is opt-in)."""
    return raw is not None and raw.strip().lower() == "true"


class IngestService:
    """
    Turn one admin upload into a new catalog item.

    Steps (in order):
      1. Validate the submission (image, title, category, numbers).
      2. Store the raw upload at <category>/<file>.
      3. Generate optimized full + thumbnail variants.
      4. Build the CatalogItem.
      5. Prepend it to the catalog document.

    The staged upload file is always removed afterwards, whatever happened.
    Authorization is checked by the router before this service runs.
    """

    def __init__(
        self,
        catalog: CatalogRepository,
        assets: AssetRepository,
        variants: VariantService,
        clock: Callable[[], int] = epoch_millis,
    ):
        self.catalog = catalog
        self.assets = assets
        self.variants = variants
        self.clock = clock

    # ----- Helpers -----

    @staticmethod
    def _validate(submission: UploadSubmission) -> None:
        missing: list[str] = []

        image = submission.image_path
        if image is None or not image.is_file() or image.stat().st_size == 0:
            missing.append("image")
        if _blank(submission.title):
            missing.append("title")
        if _blank(submission.category):
            missing.append("category")

        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    @staticmethod
    def _filename(raw: str | None, now: int) -> str:
        name = sanitize_filename(raw or "")
        if not name.strip(" ."):
            name = f"{now}.jpg"
        return name

    # ----- Public -----

    def ingest(self, submission: UploadSubmission) -> CatalogItem:
        try:
            return self._ingest(submission)
        finally:
            staged = submission.image_path
            if staged is not None and staged.exists():
                staged.unlink()

    def _ingest(self, submission: UploadSubmission) -> CatalogItem:
        self._validate(submission)

        year = parse_year(submission.year)
        price = parse_price(submission.price)
        category_dir, category, prefix = resolve_category(submission.category)

        now = self.clock()
        filename = self._filename(submission.image_filename, now)
        source = submission.image_path.read_bytes()

        # 1) Raw upload
        original = self.assets.put(
            asset_path(category_dir, filename, "original"),
            source,
            submission.image_content_type or "application/octet-stream",
        )

        # 2) Variants (raises VariantGenerationFailure, nothing appended)
        variants = self.variants.generate(source, category_dir, filename)

        # 3) Record
        item = CatalogItem(
            id=f"{prefix}-{now}",
            title=submission.title.strip(),
            year=year,
            date=submission.date or "",
            medium=submission.medium or "",
            dimensions=submission.dimensions or "",
            price=price,
            available=not is_opted_out(submission.available),
            category=category,
            thumbnail=original,
            images=[original],
            optimizedImage=variants.full,
            optimizedThumbnail=variants.thumb,
            description=submission.description or "",
            featured=is_opted_in(submission.featured),
        )

        # 4) Catalog document
        self.catalog.append(item)

        logger.info("Ingested %s (%s): %s", item.id, item.category, item.title)
        return item
