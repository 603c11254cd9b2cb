from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel


class ShowcaseEntry(BaseModel):
    id: Union[str, int]
    title: str
    author: str
    description: str = ""
    type: Optional[str] = None
    pdfUrl: Optional[str] = None
    thumbnailUrl: Optional[str] = None
    publishedDate: Optional[str] = None
    status: str = "published"
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class ShowcaseListResponse(BaseModel):
    collections: list[ShowcaseEntry]
    lastUpdated: datetime
    totalItems: int
    fallback: bool = False


class HealthResponse(BaseModel):
    status: str
    store: str
