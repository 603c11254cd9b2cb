from typing import Optional

from showcase_bot.logging_config import get_logger
from showcase_bot.models.showcase_item import COLLECTION, ShowcaseDraft, ShowcaseItem, ShowcaseStatus
from showcase_bot.services.store import DocumentStore, StoreDocumentError

logger = get_logger("showcase_service")

LIST_LIMIT = 10


def save_showcase_item(store: DocumentStore, draft: ShowcaseDraft) -> str:
    """Commit a published record with the placeholder thumbnail. Returns the record id."""
    showcase_id = store.add(COLLECTION, draft.to_document(store.timestamp()))
    logger.info(
        f"Showcase item saved with ID: {showcase_id}",
        extra={"context": {"pdf_object_name": draft.pdf_object_name}},
    )
    return showcase_id


def update_thumbnail(store: DocumentStore, showcase_id: str, thumbnail_url: str) -> None:
    """Point an existing record at its uploaded thumbnail. Status is left untouched."""
    store.update(
        COLLECTION,
        showcase_id,
        {"thumbnailUrl": thumbnail_url, "updatedAt": store.timestamp()},
    )
    logger.info(f"Thumbnail linked to showcase item {showcase_id}")


def list_published(store: DocumentStore, limit: Optional[int] = None) -> list[ShowcaseItem]:
    """Published records, newest first. Malformed documents are skipped."""
    docs = store.query(
        COLLECTION,
        "status",
        ShowcaseStatus.PUBLISHED.value,
        order_by="createdAt",
        descending=True,
        limit=limit,
    )
    items = []
    for doc_id, data in docs:
        try:
            items.append(ShowcaseItem.from_document(doc_id, data))
        except StoreDocumentError as e:
            logger.warning(f"Skipping showcase item: {e}")
    return items
