# portfolio/core/storage_utils.py
import re
from typing import Literal

# Category directories under the assets root
CATEGORY_DIRS = ("artworks", "photography")

ASSETS_PREFIX = "assets"

AssetKind = Literal["original", "thumb", "optimized", "optimized_thumb"]


def sanitize_filename(name: str) -> str:
    """
    Replace every run of characters outside [word, '-', '.', ' '] with '_'.

    Example:
        "Red Field (v2)!.jpg" -> "Red Field _v2_.jpg"
    """
    return re.sub(r"[^\w\-. ]+", "_", name)


def asset_path(category_dir: str, filename: str, kind: AssetKind) -> str:
    """
    Build the object path (relative to the assets root) of one variant.

    Layout:
        original        -> <category>/<file>
        thumb           -> <category>/thumbs/<file>
        optimized       -> optimized/<category>/<file>
        optimized_thumb -> optimized/<category>/thumbs/<file>
    """
    if kind == "original":
        return f"{category_dir}/{filename}"
    if kind == "thumb":
        return f"{category_dir}/thumbs/{filename}"
    if kind == "optimized":
        return f"optimized/{category_dir}/{filename}"
    if kind == "optimized_thumb":
        return f"optimized/{category_dir}/thumbs/{filename}"
    raise ValueError(f"Unknown asset kind: {kind}")


def public_asset_path(category_dir: str, filename: str, kind: AssetKind) -> str:
    """Same as `asset_path`, prefixed for use as a site-relative reference."""
    return f"{ASSETS_PREFIX}/{asset_path(category_dir, filename, kind)}"


def parse_original_path(ref: str) -> tuple[str, str] | None:
    """
    Split a site-relative original reference into (category_dir, filename).

    Only `assets/<category>/<file>` (optionally with a leading '/') is
    recognised; anything else (thumbs, optimized copies, URLs) returns None.

    Example:
        "assets/artworks/Red_Field.jpg" -> ("artworks", "Red_Field.jpg")
    """
    parts = ref.lstrip("/").split("/")
    if len(parts) != 3 or parts[0] != ASSETS_PREFIX:
        return None
    category_dir, filename = parts[1], parts[2]
    if category_dir not in CATEGORY_DIRS or not filename:
        return None
    return category_dir, filename

