from __future__ import annotations
import uuid
from typing import Any
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def temp_id() -> str:
    """Client-side placeholder id; the store assigns the canonical one on create."""
    return str(uuid.uuid4())


class APIModel(BaseModel):
    # snake_case in Python, camelCase in stored documents and JSON
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        from_attributes=True,
    )


class Entity(APIModel):
    """A document-backed entity. `id` is never written to the store."""

    id: str

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})
