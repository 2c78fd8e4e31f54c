# portfolio/schemas/catalog.py
from pathlib import Path
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

Category = Literal["painting", "photography"]


def _number_or_none(v) -> int | float | None:
    """Best-effort number from a document value; None when it is not one."""
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    try:
        number = float(str(v).strip())
    except ValueError:
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


class CatalogItem(SQLModel):
    """
    One artwork record as stored in the catalog document.

    Field names are the document's JSON keys, so the two optimized paths
    keep their camelCase spelling.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    year: int | None = None
    date: str = ""
    medium: str = ""
    dimensions: str = ""
    price: int | float | None = Field(default=None, description="Major currency units")
    available: bool = True
    category: Category
    thumbnail: str = ""
    images: list[str] = Field(default_factory=list)
    optimizedImage: str | None = None
    optimizedThumbnail: str | None = None
    description: str = ""
    featured: bool = False

    @field_validator("date", "medium", "dimensions", "description", "thumbnail", mode="before")
    @classmethod
    def none_to_empty(cls, v: str | None) -> str:
        # Older records carry null for blank text fields
        return "" if v is None else v

    @field_validator("id", mode="before")
    @classmethod
    def id_to_str(cls, v):
        # Hand-edited records sometimes use bare numbers as ids
        if isinstance(v, bool):
            return v
        if isinstance(v, float) and v.is_integer():
            return str(int(v))
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @field_validator("images", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return [] if v is None else v

    @field_validator("year", mode="before")
    @classmethod
    def lenient_year(cls, v) -> int | None:
        """Unparsable years ("c. 2020") are read as absent."""
        number = _number_or_none(v)
        if number is None or not float(number).is_integer():
            return None
        return int(number)

    @field_validator("price", mode="before")
    @classmethod
    def lenient_price(cls, v) -> int | float | None:
        """Unparsable prices ("POA") are read as absent."""
        number = _number_or_none(v)
        if isinstance(number, float) and number.is_integer():
            return int(number)
        return number

    def to_document(self) -> dict:
        """Serialize for the catalog document; absent values are omitted."""
        return self.model_dump(exclude_none=True)


class UploadSubmission(SQLModel):
    """
    Raw admin upload as received from the multipart form.

    Everything is still a string here; the ingestion service owns the
    coercions (year/price parsing, boolean flags, category mapping).
    The image has already been staged to `image_path` on local disk.
    """

    title: str | None = None
    category: str | None = None
    year: str | None = None
    date: str | None = None
    medium: str | None = None
    dimensions: str | None = None
    price: str | None = None
    description: str | None = None
    featured: str | None = None
    available: str | None = None

    image_path: Path | None = None
    image_filename: str | None = None
    image_content_type: str | None = None


class IngestResponse(SQLModel):
    ok: bool = True
    item: CatalogItem


class ErrorResponse(SQLModel):
    ok: bool = False
    error: str


class GridCard(SQLModel):
    """
    Listing entry: the item plus its thumbnail candidates in load order.

    `src` is the first candidate; `fallbacks` are tried in order when it
    fails to load.
    """

    item: CatalogItem
    src: str
    fallbacks: list[str] = Field(default_factory=list)
    price_label: str


class DetailView(SQLModel):
    """Single-item view with the full-size image candidates."""

    item: CatalogItem
    src: str
    fallbacks: list[str] = Field(default_factory=list)
    price_label: str
    availability_label: str
