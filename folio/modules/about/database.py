"""
About Document Storage
======================

Defaults, list fields and loading for the ``about`` document.
"""

from folio.core.config import get_config_value
from folio.core.content import coerce_document
from folio.core.stores import DocumentStore
from folio.core.sync import DocumentSynchronizer

ABOUT_KEY = 'about'

ABOUT_DEFAULTS = {
    'imageUrl': '/images/dummy/studio.jpg',
    'description': '',
    'experience': [],
    'services': [],
    'clients': [],
    'address': '',
    'contact': '',
    'social': '',
}

LIST_FIELDS = ('experience', 'services', 'clients')

ID_PREFIXES = {
    'experience': 'exp',
    'services': 'service',
    'clients': 'client',
}


def get_about_store():
    return DocumentStore(get_config_value('CONTENT_DB', 'content.db'),
                         get_config_value('CONFIG_TABLE', 'config'))


def get_about_synchronizer():
    return DocumentSynchronizer(get_about_store(), ABOUT_KEY)


def load_about_document(synchronizer=None):
    """Load the About document with defaults filled and legacy lists migrated.

    A missing row gives the defaults; a row that only holds plain text is
    treated as the description.
    """
    synchronizer = synchronizer or get_about_synchronizer()
    return coerce_document(synchronizer.load(), ABOUT_DEFAULTS, LIST_FIELDS,
                           fallback_field='description')
