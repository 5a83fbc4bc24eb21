"""
Statement construction for collection tables.
Every builder is a pure function: collection name and arguments in, query text and bound parameters out.
"""

import hashlib
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

from .schema import encode_body, encode_criteria

DOCUMENT_COLUMNS = "id, body, created, updated"

# PostgreSQL truncates longer identifiers (NAMEDATALEN - 1)
MAX_IDENTIFIER_BYTES = 63


@dataclass(frozen=True)
class Statement:
    """Parameterized query text with its positional ($1, $2, ...) parameters."""

    text: str
    params: Tuple[Any, ...] = ()


def quote_identifier(name: str) -> str:
    """Quote a collection name as a case-sensitive SQL identifier."""
    if not name:
        raise ValueError("collection name must not be empty")
    return '"' + name.replace('"', '""') + '"'


def index_name(collection: str) -> str:
    """Name of a collection's containment index, kept within the identifier limit.

    Long names keep as much of the collection name as fits and end with a
    digest of the full name, so the index never collapses onto the table
    name and long names sharing a prefix stay distinct.
    """
    name = f"{collection}_body_idx"
    if len(name.encode("utf-8")) <= MAX_IDENTIFIER_BYTES:
        return name
    suffix = "_" + hashlib.sha1(collection.encode("utf-8")).hexdigest()[:10] + "_body_idx"
    budget = MAX_IDENTIFIER_BYTES - len(suffix)
    prefix = collection.encode("utf-8")[:budget].decode("utf-8", "ignore")
    return prefix + suffix


def _projection(fields: Optional[Iterable[str]], first_param: int) -> Tuple[str, Tuple[str, ...]]:
    """Select list for a document, re-projecting the body onto the requested keys."""
    if isinstance(fields, str):
        fields = [fields]
    keys = tuple(dict.fromkeys(fields or ()))
    if not keys:
        return DOCUMENT_COLUMNS, ()

    pairs = []
    for offset in range(len(keys)):
        placeholder = f"${first_param + offset}::text"
        pairs.append(f"{placeholder}, body -> {placeholder}")
    body = f"jsonb_build_object({', '.join(pairs)}) as body"
    return f"id, {body}, created, updated", keys


def build_get(collection: str, id: int, fields: Optional[Iterable[str]] = None) -> Statement:
    """Select one document by id, optionally projecting the body onto the given top-level keys."""
    columns, keys = _projection(fields, 2)
    text = f"""
        select {columns}
        from {quote_identifier(collection)}
        where id = $1
        limit 1
    """
    return Statement(text, (id,) + keys)


def build_list(collection: str) -> Statement:
    """Select every document in ascending id order."""
    text = f"""
        select {DOCUMENT_COLUMNS}
        from {quote_identifier(collection)}
        order by id asc
    """
    return Statement(text)


def build_search(collection: str, criteria: Any) -> Statement:
    """Select documents whose body contains the criteria, in ascending id order."""
    text = f"""
        select {DOCUMENT_COLUMNS}
        from {quote_identifier(collection)}
        where body @> $1::jsonb
        order by id asc
    """
    return Statement(text, (encode_criteria(criteria),))


def build_find_one(collection: str, criteria: Any) -> Statement:
    """Select the lowest-id document whose body contains the criteria."""
    text = f"""
        select {DOCUMENT_COLUMNS}
        from {quote_identifier(collection)}
        where body @> $1::jsonb
        order by id asc
        limit 1
    """
    return Statement(text, (encode_criteria(criteria),))


def build_link(collection: str, id: int) -> Statement:
    """Select the id and the body's name key as text."""
    text = f"""
        select id, body ->> 'name' as name
        from {quote_identifier(collection)}
        where id = $1
        limit 1
    """
    return Statement(text, (id,))


def build_insert(collection: str, body: Any) -> Statement:
    """Insert a body; id, created and updated are assigned by the server."""
    text = f"""
        insert into {quote_identifier(collection)} (body)
        values ($1::jsonb)
        returning {DOCUMENT_COLUMNS}
    """
    return Statement(text, (encode_body(body),))


def build_update(collection: str, id: int, body: Any) -> Statement:
    """Replace a document's body and refresh its updated timestamp."""
    text = f"""
        update {quote_identifier(collection)}
        set body = $2::jsonb,
            updated = now()
        where id = $1
        returning {DOCUMENT_COLUMNS}
    """
    return Statement(text, (id, encode_body(body)))


def build_create_collection(collection: str) -> List[Statement]:
    """Create a collection's table and its containment index, in that order."""
    table = quote_identifier(collection)
    index = quote_identifier(index_name(collection))
    return [
        Statement(f"""
            create table if not exists {table} (
                id serial primary key,
                body jsonb not null,
                created timestamptz not null default now(),
                updated timestamptz not null default now()
            )
        """),
        Statement(f"""
            create index if not exists {index}
            on {table}
            using gin (body jsonb_path_ops)
        """),
    ]
