# portfolio/repositories/asset_repo.py
import logging
from pathlib import Path

from portfolio.core.storage_utils import ASSETS_PREFIX

logger = logging.getLogger(__name__)


class AssetRepository:
    """
    Where uploaded originals and generated variants are written.

    `put` returns the reference stored in the catalog (a site-relative
    path or a public URL, depending on the backend).
    """

    def put(self, path: str, data: bytes, content_type: str = "image/jpeg") -> str:
        raise NotImplementedError

    def exists(self, path: str) -> bool:
        raise NotImplementedError


class LocalAssetRepository(AssetRepository):
    """
    Assets on the local filesystem under `<site>/assets/`.

    Object path "artworks/a.jpg" is written to `<root>/artworks/a.jpg`
    and referenced as "assets/artworks/a.jpg".
    """

    def __init__(self, root: Path, public_prefix: str = ASSETS_PREFIX):
        self.root = Path(root)
        self.public_prefix = public_prefix

    def put(self, path: str, data: bytes, content_type: str = "image/jpeg") -> str:
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.debug("Wrote %d bytes to %s", len(data), target)
        return f"{self.public_prefix}/{path}"

    def exists(self, path: str) -> bool:
        return (self.root / path).exists()


class SupabaseAssetRepository(AssetRepository):
    """
    Assets in a Supabase Storage bucket; references are public URLs.

    Existing objects at the same path are overwritten (upsert).
    """

    def __init__(self, client, bucket: str):
        self.client = client
        self.bucket = bucket

    def put(self, path: str, data: bytes, content_type: str = "image/jpeg") -> str:
        storage = self.client.storage.from_(self.bucket)
        storage.upload(path, data, {"content-type": content_type, "upsert": "true"})
        return storage.get_public_url(path)

    def exists(self, path: str) -> bool:
        folder, _, name = path.rpartition("/")
        entries = self.client.storage.from_(self.bucket).list(folder, {"search": name})
        return any(entry.get("name") == name for entry in entries or [])
