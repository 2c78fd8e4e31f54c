# portfolio/routers/admin.py
import logging
import shutil
import tempfile
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, UploadFile

from portfolio.core.auth import require_admin_token
from portfolio.core.config import Settings, get_settings
from portfolio.core.errors import CatalogError, IngestionFailure
from portfolio.schemas.catalog import ErrorResponse, IngestResponse, UploadSubmission
from portfolio.services.ingest_service import IngestService
from portfolio.storage import get_ingest_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def stage_upload(upload: UploadFile, tmp_dir: Path) -> Path:
    """
    Copy an uploaded file into the upload temp directory.

    The ingest service removes the staged file when it is done with it;
    a copy that fails halfway removes its own partial file.
    """
    tmp_dir.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(dir=tmp_dir, prefix="upload-", delete=False) as out:
        staged = Path(out.name)
        try:
            shutil.copyfileobj(upload.file, out)
        except BaseException:
            out.close()
            staged.unlink(missing_ok=True)
            raise
    return staged


@router.post(
    "/upload",
    response_model=IngestResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin_token)],
    summary="Upload a new artwork image with its catalog metadata",
)
def upload_artwork(
    image: UploadFile | None = File(default=None),
    title: str | None = Form(default=None),
    category: str | None = Form(default=None),
    year: str | None = Form(default=None),
    date: str | None = Form(default=None),
    medium: str | None = Form(default=None),
    dimensions: str | None = Form(default=None),
    price: str | None = Form(default=None),
    description: str | None = Form(default=None),
    featured: str | None = Form(default=None),
    available: str | None = Form(default=None),
    settings: Settings = Depends(get_settings),
    service: IngestService = Depends(get_ingest_service),
):
    """
    Ingest one artwork (admin only).

    - `category`: "artworks" (default for unknown tags) or "photography".
    - `available` is true unless "false"; `featured` is false unless "true".
    - The new item is prepended to the catalog and returned.
    """
    submission = UploadSubmission(
        title=title,
        category=category,
        year=year,
        date=date,
        medium=medium,
        dimensions=dimensions,
        price=price,
        description=description,
        featured=featured,
        available=available,
    )

    try:
        if image is not None and image.filename is not None:
            submission.image_path = stage_upload(image, settings.upload_tmp_path)
            submission.image_filename = image.filename
            submission.image_content_type = image.content_type
        item = service.ingest(submission)
    except CatalogError:
        raise
    except Exception:
        logger.exception("Upload failed")
        raise IngestionFailure("Upload failed")

    return IngestResponse(item=item)
