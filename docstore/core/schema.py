"""
Record types returned by the document store.
"""

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel

Body = TypeVar("Body")


@dataclass
class Document(Generic[Body]):
    """A stored document: identity, timestamps and JSON body."""

    id: int
    body: Body
    created: datetime
    updated: datetime

    @classmethod
    def from_row(cls, row: Mapping[str, Any], body_type: Optional[Type[Body]] = None) -> "Document[Body]":
        """Build a document from a result row, decoding the body if needed."""
        return cls(
            id=row["id"],
            body=decode_body(row["body"], body_type),
            created=row["created"],
            updated=row["updated"],
        )


@dataclass
class Link:
    """Minimal id/name projection of a document."""

    id: int
    name: Optional[str]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Link":
        return cls(id=row["id"], name=row["name"])


def encode_body(value: Any) -> str:
    """Serialize a body or criteria value to JSON text for a jsonb parameter."""
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    return json.dumps(value)


def encode_criteria(criteria: Any) -> str:
    """Serialize containment criteria; pydantic models contribute only their set fields."""
    if isinstance(criteria, BaseModel):
        return criteria.model_dump_json(exclude_unset=True)
    return json.dumps(criteria)


def criteria_as_dict(criteria: Any) -> Any:
    """Criteria in plain form, used for error reporting."""
    if isinstance(criteria, BaseModel):
        return criteria.model_dump(mode="json", exclude_unset=True)
    return criteria


def decode_body(raw: Any, body_type: Optional[Type[Body]] = None) -> Any:
    """Decode a jsonb column value into the caller's body type.

    asyncpg returns jsonb as text unless a codec is registered on the
    connection, so both text and already-decoded values are accepted.
    """
    value = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
    if body_type is None:
        return value
    if isinstance(body_type, type) and issubclass(body_type, BaseModel):
        return body_type.model_validate(value)
    return body_type(value)
