from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Tuple

Document = dict
TransactionFn = Callable[[Optional[Document]], Tuple[Optional[Document], Any]]


class StoreError(Exception):
    """Raised when the document backend cannot serve a request."""


class DocumentNotFoundError(StoreError):
    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"Document not found: {collection}/{doc_id}")


class StoreDocumentError(StoreError):
    """Raised when a stored document does not match its record shape."""


class DocumentStore(ABC):
    """Abstract document backend shared by rate limits, metrics, users and showcase records."""

    name: str = "abstract"

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Return the document or None when it does not exist."""

    @abstractmethod
    def set(self, collection: str, doc_id: str, data: Document, merge: bool = False) -> None:
        """Create or overwrite a document."""

    @abstractmethod
    def add(self, collection: str, data: Document) -> str:
        """Create a document with a generated id and return the id."""

    @abstractmethod
    def update(self, collection: str, doc_id: str, data: Document) -> None:
        """Patch fields of an existing document. Raises if it does not exist."""

    @abstractmethod
    def increment(self, collection: str, doc_id: str, field: str = "count", amount: int = 1) -> None:
        """Add `amount` to `field` and stamp `lastUpdated`."""

    @abstractmethod
    def transact(self, collection: str, doc_id: str, fn: TransactionFn) -> Any:
        """Atomic read-modify-write.

        `fn` receives the current document (or None) and returns a pair
        `(new_document, result)`. When `new_document` is not None it replaces
        the stored document. The call returns `result`. `fn` may be invoked
        more than once if the backend retries the transaction.
        """

    @abstractmethod
    def query(
        self,
        collection: str,
        field: str,
        value: Any,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Tuple[str, Document]]:
        """Equality query returning (id, document) pairs."""

    @abstractmethod
    def list(self, collection: str) -> List[Tuple[str, Document]]:
        """Return every document of a collection."""

    @abstractmethod
    def ping(self) -> None:
        """Raise if the backend is unreachable."""

    @abstractmethod
    def timestamp(self) -> Any:
        """Value to store for server-side timestamps."""
