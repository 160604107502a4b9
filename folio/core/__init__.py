"""
folio Core
==========

Core utilities shared by the folio modules: configuration, sqlite access,
logging, storage, and the ordered-list editing protocol.
"""

from .config import Config, get_config_value
from .database import Database
from .logging_service import LoggingService, logger
from .ordering import IndexOutOfRange, OrderedCollection, move, new_item_id
from .editor import DocumentDraft, ListEditor, EMBEDDED, EXTERNAL
from .sync import (
    DocumentSynchronizer,
    PartialOrderPersistence,
    PersistenceError,
    RecordNotFound,
    RecordOrderSynchronizer,
)

__all__ = [
    'Config', 'get_config_value', 'Database', 'LoggingService', 'logger',
    'IndexOutOfRange', 'OrderedCollection', 'move', 'new_item_id',
    'DocumentDraft', 'ListEditor', 'EMBEDDED', 'EXTERNAL',
    'DocumentSynchronizer', 'PartialOrderPersistence', 'PersistenceError',
    'RecordNotFound', 'RecordOrderSynchronizer',
]
