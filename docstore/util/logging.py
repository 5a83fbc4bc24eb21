"""
Structured operation logging for the document store.
Collection reads, writes, provisioning and recovery decisions all go through here.
"""

import logging
from typing import Any, Dict, List

from ..core import config


class StructuredLogger:
    """Structured logger for document store operations."""

    def __init__(self, name: str = "docstore"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG if config.debug_enabled() else logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        if status in ("failed", "fatal"):
            self.logger.error(message)
        elif status in ("empty", "missing"):
            self.logger.warning(message)
        else:
            self.logger.info(message)

    def log_collection_operation(self, operation: str, collection: str, status: str = "success", details: Dict[str, Any] = None):
        """Log a collection-level read or write."""
        log_details = {"collection": collection}
        if details:
            log_details.update(sanitize_payload(details))

        self.log_operation(f"collection.{operation}", status, log_details)

    def log_provisioning(self, collection: str, status: str = "success", details: Dict[str, Any] = None):
        """Log creation of a collection's table and index."""
        log_details = {"collection": collection}
        if details:
            log_details.update(details)

        self.log_operation("collection.provision", status, log_details)

    def log_read_recovery(self, operation: str, collection: str):
        """Log a read that was answered with an empty result because the collection does not exist."""
        self.logger.debug(
            f"Operation: collection.{operation}, Status: recovered, "
            f"Details: {{'collection': {collection!r}, 'reason': 'collection does not exist'}}"
        )

    def log_statement(self, text: str, params: List[Any] = None):
        """Log statement text when statement logging is enabled."""
        if not config.statement_logging_enabled():
            return
        compact = " ".join(text.split())
        self.logger.debug(f"Statement: {compact}, Params: {sanitize_payload(list(params or []))}")

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Payload sanitization utility
def sanitize_payload(payload: Any, max_length: int = 100, sensitive_fields: List[str] = None) -> Any:
    """Truncate long strings and redact sensitive keys before a payload is logged."""
    if sensitive_fields is None:
        sensitive_fields = ['password', 'secret', 'token']

    if isinstance(payload, dict):
        sanitized = {}
        for k, v in payload.items():
            if k in sensitive_fields:
                sanitized[k] = "[REDACTED]"
            else:
                sanitized[k] = sanitize_payload(v, max_length, sensitive_fields)
        return sanitized
    elif isinstance(payload, str):
        return payload[:max_length] + "..." if len(payload) > max_length else payload
    elif isinstance(payload, (list, tuple)):
        return [sanitize_payload(item, max_length, sensitive_fields) for item in payload]
    else:
        return payload


# Global logger instance
logger = StructuredLogger()
