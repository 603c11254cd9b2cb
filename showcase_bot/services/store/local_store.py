"""Offline JSON-file backend.

One file per collection under the store directory. Every write rewrites the
whole file while holding the instance lock, so read-modify-write is atomic
within a single process only.
"""

import json
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Tuple

from showcase_bot.logging_config import get_logger
from showcase_bot.services.store.base import (
    Document,
    DocumentNotFoundError,
    DocumentStore,
    StoreError,
    TransactionFn,
)

logger = get_logger("store.local")


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class LocalJsonStore(DocumentStore):
    name = "local"

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self._lock = threading.RLock()
        logger.info(f"Using local JSON store at {self.directory}")

    def _path(self, collection: str) -> Path:
        return self.directory / f"{collection}.json"

    def _read(self, collection: str) -> dict:
        path = self._path(collection)
        if not path.exists():
            return {}
        try:
            return json.loads(path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            raise StoreError(f"Cannot read {path}: {e}") from e

    def _write(self, collection: str, docs: dict) -> None:
        path = self._path(collection)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(docs, indent=2, ensure_ascii=False, default=_encode), encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Cannot write {path}: {e}") from e

    def _normalize(self, data: Document) -> Document:
        # Round-trip through JSON so callers see what a later read returns.
        return json.loads(json.dumps(data, default=_encode))

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with self._lock:
            return self._read(collection).get(str(doc_id))

    def set(self, collection: str, doc_id: str, data: Document, merge: bool = False) -> None:
        with self._lock:
            docs = self._read(collection)
            current = docs.get(str(doc_id)) if merge else None
            docs[str(doc_id)] = {**(current or {}), **self._normalize(data)}
            self._write(collection, docs)

    def add(self, collection: str, data: Document) -> str:
        doc_id = uuid.uuid4().hex[:20]
        self.set(collection, doc_id, data)
        return doc_id

    def update(self, collection: str, doc_id: str, data: Document) -> None:
        with self._lock:
            docs = self._read(collection)
            if str(doc_id) not in docs:
                raise DocumentNotFoundError(collection, str(doc_id))
            docs[str(doc_id)].update(self._normalize(data))
            self._write(collection, docs)

    def increment(self, collection: str, doc_id: str, field: str = "count", amount: int = 1) -> None:
        with self._lock:
            docs = self._read(collection)
            doc = docs.setdefault(str(doc_id), {})
            doc[field] = int(doc.get(field) or 0) + amount
            doc["lastUpdated"] = self.timestamp().isoformat()
            self._write(collection, docs)

    def transact(self, collection: str, doc_id: str, fn: TransactionFn) -> Any:
        with self._lock:
            docs = self._read(collection)
            new_data, result = fn(docs.get(str(doc_id)))
            if new_data is not None:
                docs[str(doc_id)] = self._normalize(new_data)
                self._write(collection, docs)
            return result

    def query(
        self,
        collection: str,
        field: str,
        value: Any,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Tuple[str, Document]]:
        with self._lock:
            docs = self._read(collection)
        matches = [(doc_id, doc) for doc_id, doc in docs.items() if doc.get(field) == value]
        if order_by:
            # ISO-8601 strings sort chronologically
            matches.sort(key=lambda item: str(item[1].get(order_by) or ""), reverse=descending)
        if limit:
            matches = matches[:limit]
        return matches

    def list(self, collection: str) -> List[Tuple[str, Document]]:
        with self._lock:
            return list(self._read(collection).items())

    def ping(self) -> None:
        return None

    def timestamp(self) -> datetime:
        return datetime.now(timezone.utc)
