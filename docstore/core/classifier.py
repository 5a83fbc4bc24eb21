"""
Classification of execution failures.
Only a missing table is recoverable inside the store; everything else goes back to the caller untouched.
"""

from enum import Enum
from typing import Optional

# PostgreSQL SQLSTATE codes
UNDEFINED_TABLE = "42P01"
DUPLICATE_TABLE = "42P07"
UNIQUE_VIOLATION = "23505"

# Raised instead of DUPLICATE_TABLE when two sessions race through "create ... if not exists"
CATALOG_NAME_CONSTRAINTS = ("pg_type_typname_nsp_index", "pg_class_relname_nsp_index")


class ErrorKind(Enum):
    COLLECTION_MISSING = "collection_missing"
    COLLECTION_EXISTS = "collection_exists"
    OTHER = "other"


def error_code(exc: BaseException) -> Optional[str]:
    """SQLSTATE of a driver error, or None when the error carries none."""
    for attr in ("sqlstate", "pgcode", "code"):
        code = getattr(exc, attr, None)
        if isinstance(code, str) and code:
            return code
    return None


def classify(exc: BaseException) -> ErrorKind:
    """Map an execution failure to the recovery category it belongs to."""
    code = error_code(exc)
    if code == UNDEFINED_TABLE:
        return ErrorKind.COLLECTION_MISSING
    if code == DUPLICATE_TABLE:
        return ErrorKind.COLLECTION_EXISTS
    if code == UNIQUE_VIOLATION and getattr(exc, "constraint_name", None) in CATALOG_NAME_CONSTRAINTS:
        return ErrorKind.COLLECTION_EXISTS
    return ErrorKind.OTHER


def is_collection_missing(exc: BaseException) -> bool:
    """Check if a failure means the target collection does not exist."""
    return classify(exc) is ErrorKind.COLLECTION_MISSING
