"""Base document model — shared config for MongoDB document shapes."""

from datetime import datetime, timezone
from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Naive UTC timestamp, the form pymongo hands back on reads."""
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


class Document(BaseModel):
    """A MongoDB document. Python attributes are snake_case; stored keys are camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
        use_enum_values=True,
    )

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Address(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


def ref(value: Optional[ObjectId]) -> Optional[str]:
    """Stringify an ObjectId reference for API output."""
    return str(value) if value is not None else None
