from typing import Any, List, Optional, Tuple

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from showcase_bot.services.store.base import Document, DocumentStore, TransactionFn


class FirestoreStore(DocumentStore):
    """Durable backend on Cloud Firestore."""

    name = "firestore"

    def __init__(self, client: firestore.Client):
        self.client = client

    def _ref(self, collection: str, doc_id: str):
        return self.client.collection(collection).document(str(doc_id))

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        snapshot = self._ref(collection, doc_id).get()
        return snapshot.to_dict() if snapshot.exists else None

    def set(self, collection: str, doc_id: str, data: Document, merge: bool = False) -> None:
        self._ref(collection, doc_id).set(data, merge=merge)

    def add(self, collection: str, data: Document) -> str:
        _, doc_ref = self.client.collection(collection).add(data)
        return doc_ref.id

    def update(self, collection: str, doc_id: str, data: Document) -> None:
        self._ref(collection, doc_id).update(data)

    def increment(self, collection: str, doc_id: str, field: str = "count", amount: int = 1) -> None:
        self._ref(collection, doc_id).set(
            {field: firestore.Increment(amount), "lastUpdated": firestore.SERVER_TIMESTAMP},
            merge=True,
        )

    def transact(self, collection: str, doc_id: str, fn: TransactionFn) -> Any:
        doc_ref = self._ref(collection, doc_id)

        @firestore.transactional
        def _run(transaction):
            snapshot = doc_ref.get(transaction=transaction)
            current = snapshot.to_dict() if snapshot.exists else None
            new_data, result = fn(current)
            if new_data is not None:
                transaction.set(doc_ref, new_data)
            return result

        return _run(self.client.transaction())

    def query(
        self,
        collection: str,
        field: str,
        value: Any,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Tuple[str, Document]]:
        query = self.client.collection(collection).where(filter=FieldFilter(field, "==", value))
        if order_by:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        if limit:
            query = query.limit(limit)
        return [(doc.id, doc.to_dict()) for doc in query.stream()]

    def list(self, collection: str) -> List[Tuple[str, Document]]:
        return [(doc.id, doc.to_dict()) for doc in self.client.collection(collection).stream()]

    def ping(self) -> None:
        self._ref("__health", "ping").set({"ts": firestore.SERVER_TIMESTAMP})

    def timestamp(self) -> Any:
        return firestore.SERVER_TIMESTAMP
