"""
Document store facade.
Reads against a collection that does not exist yet come back empty; the first insert creates it.
"""

from typing import Any, Dict, Iterable, List, Optional, Type

from .classifier import ErrorKind, classify
from .db import Executor, Session, connect
from .errors import MissingRecordError
from .options import ConnectionOptions
from .provisioner import CollectionProvisioner
from .schema import Body, Document, Link, criteria_as_dict
from .statements import (
    Statement,
    build_find_one,
    build_get,
    build_insert,
    build_link,
    build_list,
    build_search,
    build_update,
)
from ..util.logging import logger


class DocumentStore:
    """Schema-less document collections over PostgreSQL jsonb tables.

    The store holds no per-call state, but asyncpg runs one query at a time
    per connection and raises InterfaceError ("another operation is in
    progress") on overlap. A store built by connect() wraps a single
    connection, so it must not be shared by concurrent tasks; pass an
    asyncpg Pool as the executor when it needs to be.
    """

    def __init__(self, executor: Executor, provisioner: Optional[CollectionProvisioner] = None):
        self._executor = executor
        self._provisioner = provisioner or CollectionProvisioner(executor)

    @classmethod
    async def connect(cls, options: Optional[ConnectionOptions] = None) -> "DocumentStore":
        """Open a session and build a store on top of it."""
        session = await connect(options)
        return cls(session)

    @property
    def executor(self) -> Executor:
        return self._executor

    async def close(self) -> None:
        """Close the underlying session or pool."""
        await self._executor.close()

    # Single-document reads

    async def get(self, collection: str, id: int, fields: Optional[Iterable[str]] = None,
                  body_type: Optional[Type[Body]] = None) -> Document[Body]:
        """Get a document by id, raising MissingRecordError when there is none."""
        document = await self.try_get(collection, id, fields, body_type)
        if document is None:
            raise MissingRecordError(collection, {"id": id})
        return document

    async def try_get(self, collection: str, id: int, fields: Optional[Iterable[str]] = None,
                      body_type: Optional[Type[Body]] = None) -> Optional[Document[Body]]:
        """Get a document by id, or None when there is none."""
        rows = await self._query_collection("get", collection, build_get(collection, id, fields))
        return Document.from_row(rows[0], body_type) if rows else None

    async def find_one(self, collection: str, criteria: Any,
                       body_type: Optional[Type[Body]] = None) -> Document[Body]:
        """Get the lowest-id document containing the criteria, raising MissingRecordError when none does."""
        document = await self.try_find_one(collection, criteria, body_type)
        if document is None:
            raise MissingRecordError(collection, criteria_as_dict(criteria))
        return document

    async def try_find_one(self, collection: str, criteria: Any,
                           body_type: Optional[Type[Body]] = None) -> Optional[Document[Body]]:
        """Get the lowest-id document containing the criteria, or None."""
        rows = await self._query_collection("find_one", collection, build_find_one(collection, criteria))
        return Document.from_row(rows[0], body_type) if rows else None

    async def link(self, collection: str, id: int) -> Optional[Link]:
        """Get the id and name of a document, or None."""
        rows = await self._query_collection("link", collection, build_link(collection, id))
        return Link.from_row(rows[0]) if rows else None

    # Multi-document reads

    async def all(self, collection: str, body_type: Optional[Type[Body]] = None) -> List[Document[Body]]:
        """List every document in ascending id order."""
        rows = await self._query_collection("all", collection, build_list(collection))
        return [Document.from_row(row, body_type) for row in rows]

    async def find(self, collection: str, criteria: Any,
                   body_type: Optional[Type[Body]] = None) -> List[Document[Body]]:
        """List documents whose body contains the criteria, in ascending id order."""
        rows = await self._query_collection("find", collection, build_search(collection, criteria))
        return [Document.from_row(row, body_type) for row in rows]

    # Writes

    async def insert(self, collection: str, body: Any, body_type: Optional[Type[Body]] = None) -> Document[Body]:
        """Insert a document, creating the collection if this is its first write."""
        rows = await self._change_collection("insert", collection, build_insert(collection, body))
        document = Document.from_row(rows[0], body_type)
        logger.log_collection_operation("insert", collection, details={"id": document.id})
        return document

    async def update(self, collection: str, id: int, body: Any,
                     body_type: Optional[Type[Body]] = None) -> Optional[Document[Body]]:
        """Replace a document's body.

        Returns None when no document has the id, including when the
        collection does not exist. Unlike get, this is not an error.
        """
        rows = await self._query_collection("update", collection, build_update(collection, id, body))
        if not rows:
            logger.log_collection_operation("update", collection, "empty", {"id": id})
            return None
        logger.log_collection_operation("update", collection, details={"id": id})
        return Document.from_row(rows[0], body_type)

    async def raw(self, query: str, *params: Any) -> List[Dict[str, Any]]:
        """Run an arbitrary statement with no recovery of any kind."""
        rows = await self._execute(Statement(query, params))
        return [dict(row) for row in rows]

    # Recovery policies

    async def _execute(self, statement: Statement) -> List[Any]:
        logger.log_statement(statement.text, statement.params)
        return await self._executor.fetch(statement.text, *statement.params)

    async def _query_collection(self, operation: str, collection: str, statement: Statement) -> List[Any]:
        """Run a statement, answering with no rows if the collection does not exist."""
        try:
            return await self._execute(statement)
        except Exception as e:
            if classify(e) is not ErrorKind.COLLECTION_MISSING:
                raise
        logger.log_read_recovery(operation, collection)
        return []

    async def _change_collection(self, operation: str, collection: str, statement: Statement) -> List[Any]:
        """Run a statement, provisioning the collection and retrying once if it does not exist."""
        try:
            return await self._execute(statement)
        except Exception as e:
            if classify(e) is not ErrorKind.COLLECTION_MISSING:
                raise

        await self._provisioner.ensure(collection)

        try:
            return await self._execute(statement)
        except Exception as e:
            if classify(e) is ErrorKind.COLLECTION_MISSING:
                logger.log_collection_operation(operation, collection, "fatal", {
                    "error": "collection still missing after provisioning",
                })
            raise
