"""
Optimistic Editors
==================

In-memory editing state for ordered lists. Every mutation is applied to the
live state immediately and tracked against the last known-durable snapshot;
nothing in this module performs I/O. Persisting is the job of
:mod:`folio.core.sync`.
"""

import copy

from .ordering import OrderedCollection

EMBEDDED = 'embedded'
EXTERNAL = 'external'


class ListEditor:
    """Live ordered list plus a dirty flag and the last-synchronized snapshot.

    ``embedded`` lists live inside one document and are compared structurally
    against the snapshot. ``external`` lists are independently stored records;
    only their order and the fields edited through this editor are compared.
    In both modes an actual reorder keeps the editor dirty until the next
    :meth:`load` or :meth:`mark_synced`.
    """

    def __init__(self, items=None, mode=EMBEDDED, id_prefix='item'):
        if mode not in (EMBEDDED, EXTERNAL):
            raise ValueError(f"Unknown list mode: {mode}")
        self.mode = mode
        self.id_prefix = id_prefix
        self.load(items or [])

    def __len__(self):
        return len(self._collection)

    @property
    def items(self):
        return self._collection.items

    @property
    def snapshot(self):
        return copy.deepcopy(self._snapshot)

    @property
    def dirty(self):
        return self._dirty

    def load(self, sequence):
        """Replace live state and snapshot with *sequence*; clears dirty."""
        self._collection = OrderedCollection(sequence, id_prefix=self.id_prefix)
        self._snapshot = copy.deepcopy(self._collection.items)
        self._reordered = False
        self._edited_fields = {}
        self._dirty = False

    def mark_synced(self):
        """Record the live state as durable after a successful save."""
        self._snapshot = copy.deepcopy(self._collection.items)
        self._reordered = False
        self._edited_fields = {}
        self._dirty = False

    def apply_move(self, from_index, to_index):
        """Move one item and return the new live order.

        Raises IndexOutOfRange (leaving everything untouched) for bad indices.
        """
        self._collection.move(from_index, to_index)
        if from_index != to_index:
            self._reordered = True
            self._dirty = True
        return self.items

    def apply_edit(self, item_id, payload):
        """Update one item in place. Returns False when *item_id* is absent."""
        if not self._collection.update_by_id(item_id, payload):
            return False
        fields = self._edited_fields.setdefault(item_id, set())
        fields.update(k for k in payload if k != 'id')
        self._recompute()
        return True

    def add(self, payload):
        item_id = self._collection.insert_at_end(payload)
        self._recompute()
        return item_id

    def remove(self, item_id):
        if not self._collection.remove_by_id(item_id):
            return False
        self._edited_fields.pop(item_id, None)
        self._recompute()
        return True

    def _recompute(self):
        if self._reordered:
            self._dirty = True
        elif self.mode == EMBEDDED:
            self._dirty = self._collection.items != self._snapshot
        else:
            self._dirty = self._external_differs()

    def _external_differs(self):
        if self._collection.ids != [item['id'] for item in self._snapshot]:
            return True
        snapshot_by_id = {item['id']: item for item in self._snapshot}
        for item_id, fields in self._edited_fields.items():
            live = self._collection.get(item_id)
            saved = snapshot_by_id.get(item_id, {})
            if any(live.get(f) != saved.get(f) for f in fields):
                return True
        return False


class DocumentDraft:
    """A JSON document being edited: scalar fields plus embedded lists.

    Each list field gets its own embedded :class:`ListEditor`; the draft is
    dirty when any scalar differs from the snapshot or any list is dirty.
    """

    def __init__(self, document, list_fields, id_prefixes=None):
        self.list_fields = tuple(list_fields)
        self.id_prefixes = id_prefixes or {}
        self.load(document)

    def load(self, document):
        document = document or {}
        self._fields = {k: copy.deepcopy(v) for k, v in document.items() if k not in self.list_fields}
        self._fields_snapshot = copy.deepcopy(self._fields)
        self.lists = {
            name: ListEditor(document.get(name) or [], mode=EMBEDDED,
                             id_prefix=self.id_prefixes.get(name, 'item'))
            for name in self.list_fields
        }

    def list_editor(self, name):
        """Return the editor for list field *name* (KeyError if unknown)."""
        return self.lists[name]

    def set_field(self, name, value):
        if name in self.list_fields:
            raise ValueError(f"'{name}' is a list field; edit it through its list editor")
        self._fields[name] = value

    @property
    def document(self):
        doc = copy.deepcopy(self._fields)
        for name, editor in self.lists.items():
            doc[name] = editor.items
        return doc

    @property
    def dirty(self):
        if self._fields != self._fields_snapshot:
            return True
        return any(editor.dirty for editor in self.lists.values())

    def mark_synced(self):
        self._fields_snapshot = copy.deepcopy(self._fields)
        for editor in self.lists.values():
            editor.mark_synced()
