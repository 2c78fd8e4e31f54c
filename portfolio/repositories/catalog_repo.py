# portfolio/repositories/catalog_repo.py
import base64
import json
import logging
from pathlib import Path

import requests
from pydantic import ValidationError as ModelValidationError

from portfolio.core.errors import StoreUnavailable, StoreWriteFailure
from portfolio.schemas.catalog import CatalogItem

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"


def parse_items(records: list) -> list[CatalogItem]:
    """
    Validate raw document records into CatalogItem objects.

    Records that do not fit the model (edited out-of-band) are skipped
    with a warning instead of failing the whole catalog.
    """
    items: list[CatalogItem] = []
    for idx, record in enumerate(records):
        try:
            items.append(CatalogItem.model_validate(record))
        except ModelValidationError as e:
            logger.warning("Skipping invalid catalog record #%d: %s", idx, e)
    return items


def dump_document(records: list[dict]) -> str:
    """Pretty-printed JSON array, UTF-8 characters kept as-is."""
    return json.dumps(records, indent=2, ensure_ascii=False)


def _prepend(records: list[dict], item: CatalogItem) -> list[dict]:
    if any(str(r.get("id")) == item.id for r in records if isinstance(r, dict)):
        raise StoreWriteFailure(f"Duplicate catalog id: {item.id}")
    return [item.to_document(), *records]


class CatalogRepository:
    """
    Persistence for the catalog document (a JSON array, newest first).

    - `load` / `raw` are the read side and raise StoreUnavailable.
    - `append` is read-modify-write of the whole document and raises
      StoreWriteFailure. There is no locking: one admin at a time.
    """

    def raw(self) -> list:
        raise NotImplementedError

    def load(self) -> list[CatalogItem]:
        return parse_items(self.raw())

    def append(self, item: CatalogItem) -> CatalogItem:
        raise NotImplementedError


class JsonFileCatalogRepository(CatalogRepository):
    """Catalog document stored as a local file (e.g. `<site>/data.json`)."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> list:
        text = self.path.read_text(encoding="utf-8")
        data = json.loads(text)
        if not isinstance(data, list):
            raise ValueError("catalog document is not a JSON array")
        return data

    def raw(self) -> list:
        try:
            return self._read()
        except (OSError, ValueError) as e:
            raise StoreUnavailable(f"Cannot read catalog: {e}") from e

    def append(self, item: CatalogItem) -> CatalogItem:
        if self.path.exists():
            try:
                records = self._read()
            except (OSError, ValueError) as e:
                raise StoreWriteFailure(f"Cannot read catalog: {e}") from e
        else:
            # First upload bootstraps the document
            records = []

        records = _prepend(records, item)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(dump_document(records), encoding="utf-8")
        except OSError as e:
            raise StoreWriteFailure(f"Cannot write catalog: {e}") from e

        return item


class GitHubCatalogRepository(CatalogRepository):
    """
    Catalog document stored in a GitHub repository (contents API).

    Reads return the file content plus its blob `sha`; writes send that
    `sha` back so GitHub rejects the update if the file changed in between.
    """

    def __init__(
        self,
        repo: str,
        token: str,
        branch: str = "main",
        path: str = "data.json",
        session: requests.Session | None = None,
        timeout: float = 30,
    ):
        self.repo = repo
        self.token = token
        self.branch = branch
        self.path = path
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def _url(self) -> str:
        return f"{GITHUB_API}/repos/{self.repo}/contents/{self.path}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "portfolio-catalog",
        }

    def _fetch(self) -> tuple[list, str]:
        """Return (records, sha). Raises requests/ValueError on failure."""
        resp = self.session.get(
            self._url,
            params={"ref": self.branch},
            headers=self._headers(),
            timeout=self.timeout,
        )
        resp.raise_for_status()
        payload = resp.json()
        content = base64.b64decode(payload["content"]).decode("utf-8")
        data = json.loads(content)
        if not isinstance(data, list):
            raise ValueError("catalog document is not a JSON array")
        return data, payload["sha"]

    def raw(self) -> list:
        try:
            records, _sha = self._fetch()
        except (requests.RequestException, KeyError, ValueError) as e:
            raise StoreUnavailable(f"Cannot fetch catalog from GitHub: {e}") from e
        return records

    def append(self, item: CatalogItem) -> CatalogItem:
        try:
            records, sha = self._fetch()
        except (requests.RequestException, KeyError, ValueError) as e:
            raise StoreWriteFailure(f"Cannot fetch catalog from GitHub: {e}") from e

        records = _prepend(records, item)
        encoded = base64.b64encode(dump_document(records).encode("utf-8")).decode("ascii")

        try:
            resp = self.session.put(
                self._url,
                json={
                    "message": f"Add new artwork: {item.title}",
                    "content": encoded,
                    "sha": sha,
                    "branch": self.branch,
                },
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise StoreWriteFailure(f"Cannot update catalog on GitHub: {e}") from e

        if resp.status_code in (409, 422):
            raise StoreWriteFailure("Catalog changed on GitHub since it was read")
        if not resp.ok:
            raise StoreWriteFailure(
                f"Cannot update catalog on GitHub (HTTP {resp.status_code})"
            )

        logger.info("Committed %s to %s@%s", self.path, self.repo, self.branch)
        return item
