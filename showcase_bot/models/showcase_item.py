from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from showcase_bot.services.store.base import StoreDocumentError

COLLECTION = "showcase"
PLACEHOLDER_THUMBNAIL = "/thumbnails/test.jpg"


class ShowcaseStatus(str, Enum):
    NEW = "new"
    PUBLISHED = "published"


class ShowcaseDraft(BaseModel):
    """Fields collected by the intake dialog before the record is committed."""

    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    description: str = Field(min_length=1)
    pdf_object_name: str = Field(min_length=1)

    def to_document(self, timestamp: Any) -> dict:
        return {
            "title": self.title,
            "author": self.author,
            "description": self.description,
            "pdfObjectName": self.pdf_object_name,
            "thumbnailUrl": PLACEHOLDER_THUMBNAIL,
            "status": ShowcaseStatus.PUBLISHED.value,
            "createdAt": timestamp,
            "updatedAt": timestamp,
        }


class ShowcaseItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    author: str
    description: str = ""
    pdf_object_name: Optional[str] = Field(default=None, alias="pdfObjectName")
    pdf_url: Optional[str] = Field(default=None, alias="pdfUrl")
    thumbnail_url: Optional[str] = Field(default=None, alias="thumbnailUrl")
    status: ShowcaseStatus
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @classmethod
    def from_document(cls, doc_id: str, data: dict) -> "ShowcaseItem":
        try:
            return cls.model_validate({**data, "id": doc_id})
        except ValidationError as e:
            raise StoreDocumentError(f"Malformed {COLLECTION}/{doc_id}: {e}") from e
