"""Lazily built, process-wide collaborators exposed as FastAPI dependencies."""

import threading
from datetime import timedelta
from typing import Optional

from fastapi import HTTPException, status

from showcase_bot.config import settings
from showcase_bot.logging_config import get_logger
from showcase_bot.services.bot_context import BotContext, build_bot_context
from showcase_bot.services.storage_service import StorageService
from showcase_bot.services.store import DocumentStore, build_store

logger = get_logger("dependencies")

_lock = threading.Lock()
_store: Optional[DocumentStore] = None
_storage: Optional[StorageService] = None
_bot_context: Optional[BotContext] = None


def get_store() -> DocumentStore:
    global _store
    with _lock:
        if _store is None:
            _store = build_store(settings)
            logger.info(f"Document store backend: {_store.name}")
        return _store


def get_storage_service() -> StorageService:
    global _storage
    with _lock:
        if _storage is None:
            from google.cloud import storage

            _storage = StorageService(
                storage.Client(project=settings.google_cloud_project),
                pdf_bucket=settings.bucket_pdfs,
                thumbnail_bucket=settings.bucket_thumbnails,
                signed_url_ttl=timedelta(hours=settings.listing_signed_url_hours),
            )
        return _storage


def get_bot_context() -> BotContext:
    global _bot_context
    if _bot_context is not None:
        return _bot_context

    store = get_store()
    storage_service = get_storage_service()
    with _lock:
        if _bot_context is None:
            try:
                _bot_context = build_bot_context(settings, store, storage_service)
            except Exception as e:
                logger.error(f"Error initializing bot: {e}", exc_info=True)
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail="Bot initialization failed",
                ) from e
        return _bot_context
