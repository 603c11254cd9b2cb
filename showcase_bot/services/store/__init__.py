from showcase_bot.config import Settings
from showcase_bot.services.store.base import (
    DocumentNotFoundError,
    DocumentStore,
    StoreDocumentError,
    StoreError,
)
from showcase_bot.services.store.local_store import LocalJsonStore


def build_store(settings: Settings) -> DocumentStore:
    """Select the offline JSON backend or Firestore."""
    if settings.use_local_store:
        return LocalJsonStore(settings.local_store_dir)

    from google.cloud import firestore

    from showcase_bot.services.store.firestore_store import FirestoreStore

    return FirestoreStore(firestore.Client(project=settings.google_cloud_project))


__all__ = [
    "DocumentNotFoundError",
    "DocumentStore",
    "LocalJsonStore",
    "StoreDocumentError",
    "StoreError",
    "build_store",
]
