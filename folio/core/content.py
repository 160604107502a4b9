"""
Flexible Content Shapes
=======================

List fields in stored JSON documents come in two shapes: the current one, a
list of ``{'id', 'text'}`` items, and an older one where the whole list was a
single newline-separated string. Both are parsed into a tagged variant once,
at load time, and legacy text is migrated to a structured list.
"""

import copy
from collections import namedtuple

from .ordering import new_item_id

LegacyText = namedtuple('LegacyText', ['text'])
StructuredList = namedtuple('StructuredList', ['items'])


def parse_list_field(value, text_key='text'):
    """Classify a raw stored value as LegacyText or StructuredList.

    ``None`` and anything unrecognised become an empty StructuredList. Items
    of a structured list are normalised to dicts with an ``id``.
    """
    if isinstance(value, str):
        return LegacyText(value)
    if not isinstance(value, list):
        return StructuredList([])

    items = []
    for entry in value:
        if isinstance(entry, dict):
            item = dict(entry)
            if not item.get('id'):
                item['id'] = new_item_id('migrated')
            items.append(item)
        elif isinstance(entry, str):
            items.append({'id': new_item_id('migrated'), text_key: entry})
    return StructuredList(items)


def migrate_list(variant, text_key='text'):
    """One-way migration of either variant to a plain list of items.

    Legacy text is split on line breaks and every line, blank ones included,
    becomes a trimmed item with a fresh id. Text that is entirely blank gives
    an empty list.
    """
    if isinstance(variant, StructuredList):
        return list(variant.items)
    if not variant.text.strip():
        return []
    return [
        {'id': new_item_id('migrated'), text_key: line.strip()}
        for line in variant.text.split('\n')
    ]


def load_list_field(value, text_key='text'):
    return migrate_list(parse_list_field(value, text_key), text_key)


def coerce_document(raw, defaults, list_fields, fallback_field=None):
    """Build a complete document from a stored value.

    Missing keys come from *defaults*; every field in *list_fields* is
    migrated to a structured list. *list_fields* is either a sequence of
    names or a ``{name: text_key}`` mapping. A stored plain string (pre-JSON
    rows) is kept as *fallback_field* when one is given.
    """
    document = copy.deepcopy(defaults)
    if isinstance(raw, dict):
        document.update(raw)
    elif isinstance(raw, str) and fallback_field:
        document[fallback_field] = raw

    if not isinstance(list_fields, dict):
        list_fields = {name: 'text' for name in list_fields}
    for name, text_key in list_fields.items():
        document[name] = load_list_field(document.get(name), text_key)
    return document
