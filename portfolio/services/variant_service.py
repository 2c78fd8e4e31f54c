# portfolio/services/variant_service.py
import io
import logging

from PIL import Image, ImageOps, UnidentifiedImageError
from sqlmodel import SQLModel

from portfolio.core.errors import VariantGenerationFailure
from portfolio.core.storage_utils import asset_path
from portfolio.repositories.asset_repo import AssetRepository

logger = logging.getLogger(__name__)

VARIANT_FORMAT = "JPEG"
VARIANT_CONTENT_TYPE = "image/jpeg"


class VariantSet(SQLModel):
    """References returned by the asset repository for each written variant."""

    full: str
    thumb: str
    legacy_thumb: str | None = None


class VariantService:
    """
    Derive the optimized copies of one uploaded image.

    - full:  width <= full_max_width,  JPEG quality full_quality
    - thumb: width <= thumb_max_width, JPEG quality thumb_quality
    - a legacy `<category>/thumbs/<file>` copy of the thumbnail, written
      only if that path is still free

    Images are never upscaled. All variants are encoded in memory before
    anything is written.
    """

    def __init__(
        self,
        assets: AssetRepository,
        full_max_width: int = 1600,
        full_quality: int = 80,
        thumb_max_width: int = 600,
        thumb_quality: int = 70,
    ):
        self.assets = assets
        self.full_max_width = full_max_width
        self.full_quality = full_quality
        self.thumb_max_width = thumb_max_width
        self.thumb_quality = thumb_quality

    # ----- Helpers -----

    @staticmethod
    def _open(source: bytes) -> Image.Image:
        """Decode and apply EXIF orientation; result is always RGB."""
        img = Image.open(io.BytesIO(source))
        img = ImageOps.exif_transpose(img)

        if img.mode in ("RGBA", "LA", "P"):
            img = img.convert("RGBA")
            bg = Image.new("RGB", img.size, (255, 255, 255))
            bg.paste(img, mask=img.split()[-1])
            img = bg
        elif img.mode != "RGB":
            img = img.convert("RGB")
        return img

    @staticmethod
    def _fit_width(img: Image.Image, max_width: int) -> Image.Image:
        w, h = img.size
        if w <= max_width:
            return img
        new_h = max(1, round(h * max_width / w))
        return img.resize((max_width, new_h), Image.Resampling.LANCZOS)

    @staticmethod
    def _encode(img: Image.Image, quality: int) -> bytes:
        buf = io.BytesIO()
        img.save(buf, VARIANT_FORMAT, quality=quality, optimize=True, progressive=True)
        return buf.getvalue()

    def render(self, source: bytes) -> tuple[bytes, bytes]:
        """
        Encode (full, thumb) variants without touching storage.

        Raises:
            VariantGenerationFailure: if the image cannot be decoded,
            resized or encoded.
        """
        try:
            img = self._open(source)
            full = self._encode(self._fit_width(img, self.full_max_width), self.full_quality)
            thumb = self._encode(self._fit_width(img, self.thumb_max_width), self.thumb_quality)
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
            raise VariantGenerationFailure(f"Image processing failed: {e}") from e
        return full, thumb

    # ----- Public -----

    def generate(self, source: bytes, category_dir: str, filename: str) -> VariantSet:
        """
        Render and store the variants of `source`.

        Paths:
            optimized/<category>/<file>
            optimized/<category>/thumbs/<file>
            <category>/thumbs/<file>           (only if missing)
        """
        full, thumb = self.render(source)

        variants = VariantSet(
            full=self.assets.put(
                asset_path(category_dir, filename, "optimized"), full, VARIANT_CONTENT_TYPE
            ),
            thumb=self.assets.put(
                asset_path(category_dir, filename, "optimized_thumb"), thumb, VARIANT_CONTENT_TYPE
            ),
        )

        legacy_path = asset_path(category_dir, filename, "thumb")
        if not self.assets.exists(legacy_path):
            variants.legacy_thumb = self.assets.put(legacy_path, thumb, VARIANT_CONTENT_TYPE)

        logger.info(
            "Generated variants for %s/%s (full=%d bytes, thumb=%d bytes)",
            category_dir,
            filename,
            len(full),
            len(thumb),
        )
        return variants
