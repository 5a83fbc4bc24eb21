"""
Collection provisioning.
Materializes a collection's table and containment index the first time something is written to it.
"""

from .classifier import ErrorKind, classify
from .statements import build_create_collection
from ..util.logging import logger


class CollectionProvisioner:
    """Creates backing storage for collections on demand."""

    def __init__(self, executor):
        self._executor = executor

    async def ensure(self, collection: str) -> None:
        """Create the collection's table and index, treating a concurrent creation as success."""
        logger.log_provisioning(collection, "started")

        for statement in build_create_collection(collection):
            logger.log_statement(statement.text, statement.params)
            try:
                await self._executor.execute(statement.text, *statement.params)
            except Exception as e:
                if classify(e) is not ErrorKind.COLLECTION_EXISTS:
                    logger.log_provisioning(collection, "failed", {"error": str(e)})
                    raise
                logger.debug(f"Collection '{collection}' was created concurrently: {e}")

        logger.log_provisioning(collection, "success")
