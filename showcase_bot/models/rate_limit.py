from pydantic import BaseModel, ConfigDict, Field, ValidationError

from showcase_bot.services.store.base import StoreDocumentError

COLLECTION = "rate_limits"


def rate_limit_key(subject_id: str | int, purpose: str) -> str:
    return f"{subject_id}_{purpose}"


class RateLimitRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    count: int = Field(ge=0)
    window_start: int = Field(alias="windowStart", ge=0)  # epoch milliseconds

    @classmethod
    def from_document(cls, doc_id: str, data: dict) -> "RateLimitRecord":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise StoreDocumentError(f"Malformed {COLLECTION}/{doc_id}: {e}") from e

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)
