from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from showcase_bot.services.store.base import StoreDocumentError

COLLECTION = "metrics"
ERROR_SPIKE_DOC = "error_spike"


class MetricCounter(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    count: int = Field(default=0, ge=0)
    last_updated: Optional[datetime] = Field(default=None, alias="lastUpdated")


class ErrorSpikeRecord(BaseModel):
    timestamps: list[int] = Field(default_factory=list)

    @classmethod
    def from_document(cls, data: Optional[dict]) -> "ErrorSpikeRecord":
        try:
            return cls.model_validate(data or {})
        except ValidationError as e:
            raise StoreDocumentError(f"Malformed {COLLECTION}/{ERROR_SPIKE_DOC}: {e}") from e
