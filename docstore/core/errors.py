"""
Errors raised by the document store.
Driver errors are never wrapped; only conditions the store itself detects live here.
"""

from typing import Any, Dict, List


class DocstoreError(Exception):
    """Base class for errors raised by the document store."""


class MissingRecordError(DocstoreError, LookupError):
    """No document matched a single-document lookup.

    Raised whether the collection is absent or simply holds no match; callers
    see both as "not found".
    """

    def __init__(self, collection: str, criteria: Dict[str, Any]):
        self.collection = collection
        self.criteria = criteria
        super().__init__(f"No record in collection '{collection}' matching {criteria}")

    def __reduce__(self):
        return (self.__class__, (self.collection, self.criteria))


class ConfigurationError(DocstoreError, ValueError):
    """Database configuration is invalid."""

    def __init__(self, issues: List[str]):
        self.issues = list(issues)
        super().__init__("Invalid docstore configuration: " + "; ".join(self.issues))
