"""Asset boundary: signed PDF redirects and cached thumbnail files."""

from datetime import timedelta
from pathlib import Path

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, RedirectResponse

from showcase_bot.config import settings
from showcase_bot.dependencies import get_storage_service
from showcase_bot.logging_config import get_logger
from showcase_bot.services.storage_service import StorageService

logger = get_logger("assets_router")

router = APIRouter()

THUMBNAIL_CACHE_CONTROL = "public, max-age=31536000, immutable"
THUMBNAIL_CONTENT_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}


@router.get("/pdfs/{filename}")
async def get_pdf(filename: str, storage: StorageService = Depends(get_storage_service)):
    if not filename:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Filename is required"})

    try:
        signed_url = await run_in_threadpool(
            storage.generate_signed_url,
            filename,
            timedelta(minutes=settings.asset_signed_url_minutes),
        )
    except Exception as e:
        logger.error(f"Error generating signed URL for PDF {filename}: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to generate PDF URL"},
        )

    return RedirectResponse(signed_url, status_code=status.HTTP_302_FOUND)


def resolve_thumbnail_path(directory: Path, filename: str):
    """Path inside `directory`, or None if the name escapes it or does not exist."""
    base = directory.resolve()
    candidate = (base / filename).resolve()
    if candidate.parent != base or not candidate.is_file():
        return None
    return candidate


@router.get("/thumbnails/{filename}")
async def get_thumbnail(filename: str):
    path = resolve_thumbnail_path(Path(settings.thumbnails_dir), filename)
    if path is None:
        return PlainTextResponse("Thumbnail not found", status_code=status.HTTP_404_NOT_FOUND)

    ext = path.suffix.lstrip(".").lower()
    return FileResponse(
        path,
        media_type=THUMBNAIL_CONTENT_TYPES.get(ext, "image/jpeg"),
        headers={"Cache-Control": THUMBNAIL_CACHE_CONTROL},
    )
