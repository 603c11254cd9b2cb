from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from showcase_bot.models.role import Role
from showcase_bot.services.store.base import StoreDocumentError

COLLECTION = "authorized_users"


class AuthorizedUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    user_id: str = Field(alias="userId", min_length=1)
    role: Role
    added_by: Optional[str] = Field(default=None, alias="addedBy")
    added_at: Optional[datetime] = Field(default=None, alias="addedAt")

    @classmethod
    def from_document(cls, doc_id: str, data: dict) -> "AuthorizedUser":
        try:
            return cls.model_validate({**data, "userId": doc_id})
        except ValidationError as e:
            raise StoreDocumentError(f"Malformed {COLLECTION}/{doc_id}: {e}") from e
