"""Public content boundary: published items with fresh access URLs."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from showcase_bot.dependencies import get_storage_service, get_store
from showcase_bot.logging_config import get_logger
from showcase_bot.models.showcase_item import ShowcaseItem
from showcase_bot.schemas.showcase import ShowcaseEntry, ShowcaseListResponse
from showcase_bot.services.showcase_service import list_published
from showcase_bot.services.storage_service import StorageService, normalize_thumbnail_url
from showcase_bot.services.store import DocumentStore

logger = get_logger("showcase_router")

router = APIRouter(prefix="/api")

STATIC_SHOWCASE = [
    {
        "id": 1,
        "title": "Student Work A",
        "author": "Student A",
        "type": "Creative Writing Collection",
        "description": "A creative writing collection showcasing imaginative storytelling and expression.",
        "pdfUrl": "/pdfs/student-a-portfolio.pdf",
        "thumbnailUrl": "/thumbnails/student-a-portfolio.jpg",
        "publishedDate": "August 2024",
    },
    {
        "id": 2,
        "title": "Student Work B",
        "author": "Student B",
        "type": "Poetry Collection",
        "description": "A collection of original poems exploring themes of nature and imagination.",
        "pdfUrl": "/pdfs/student-b-portfolio.pdf",
        "thumbnailUrl": "/thumbnails/student-b-portfolio.jpg",
        "publishedDate": "August 2024",
    },
    {
        "id": 3,
        "title": "Student Work C",
        "author": "Student C",
        "type": "Poetry Collection",
        "description": "An inspiring portfolio showcasing creative expression and developing poetic voice.",
        "pdfUrl": "/pdfs/student-c-portfolio.pdf",
        "thumbnailUrl": "/thumbnails/student-c-portfolio.jpg",
        "publishedDate": "August 2024",
    },
]


def to_entry(item: ShowcaseItem, storage: StorageService) -> ShowcaseEntry:
    pdf_url = item.pdf_url
    if item.pdf_object_name:
        try:
            pdf_url = storage.generate_signed_url(item.pdf_object_name)
        except Exception as e:
            logger.error(f"Error generating signed URL for {item.pdf_object_name}: {e}")

    now = datetime.now(timezone.utc)
    return ShowcaseEntry(
        id=item.id,
        title=item.title,
        author=item.author,
        description=item.description,
        pdfUrl=pdf_url,
        thumbnailUrl=normalize_thumbnail_url(item.thumbnail_url),
        status=item.status.value,
        createdAt=item.created_at or now,
        updatedAt=item.updated_at or now,
    )


def build_listing(store: DocumentStore, storage: StorageService) -> ShowcaseListResponse:
    now = datetime.now(timezone.utc)
    try:
        items = list_published(store)
    except Exception as e:
        logger.error(f"Error fetching showcase data: {e}", exc_info=True)
        fallback = [ShowcaseEntry(**entry, createdAt=now) for entry in STATIC_SHOWCASE]
        return ShowcaseListResponse(collections=fallback, lastUpdated=now, totalItems=len(fallback), fallback=True)

    entries = [to_entry(item, storage) for item in items]
    return ShowcaseListResponse(collections=entries, lastUpdated=now, totalItems=len(entries))


@router.get("/showcase", response_model=ShowcaseListResponse)
async def get_showcase(
    store: DocumentStore = Depends(get_store),
    storage: StorageService = Depends(get_storage_service),
):
    return await run_in_threadpool(build_listing, store, storage)
