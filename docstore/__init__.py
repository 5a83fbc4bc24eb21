"""
docstore - self-provisioning JSON document collections on PostgreSQL.
"""

from .core.classifier import ErrorKind, classify
from .core.config import VERSION as __version__
from .core.db import Executor, Session, connect, health_check
from .core.errors import ConfigurationError, DocstoreError, MissingRecordError
from .core.options import ConnectionOptions
from .core.provisioner import CollectionProvisioner
from .core.schema import Document, Link
from .core.store import DocumentStore

__all__ = [
    'DocumentStore',
    'Document',
    'Link',
    'ConnectionOptions',
    'CollectionProvisioner',
    'Executor',
    'Session',
    'connect',
    'health_check',
    'ErrorKind',
    'classify',
    'DocstoreError',
    'MissingRecordError',
    'ConfigurationError',
]
