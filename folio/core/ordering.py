"""
Ordered Collections
===================

Ordered lists of small records (``{'id': ..., **payload}`` dicts) and the
pure list-splice move used by every drag-and-drop editor in folio.
"""

import uuid


class IndexOutOfRange(IndexError):
    """A move referenced a position outside the sequence."""

    def __init__(self, index, length):
        self.index = index
        self.length = length
        super().__init__(f"Index {index} is out of range for a sequence of length {length}")


def new_item_id(prefix='item'):
    """Generate an opaque item id. Unique even for calls in the same instant."""
    return f"{prefix}-{uuid.uuid4().hex}"


def _check_index(index, length):
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < length:
        raise IndexOutOfRange(index, length)


def move(sequence, from_index, to_index):
    """Return a new list with the element at *from_index* moved to *to_index*.

    The element is removed and reinserted so that it ends up at *to_index*;
    everything in between shifts by one. ``move(seq, i, i)`` returns an equal
    copy. The input is never mutated.

    Raises:
        IndexOutOfRange: if either index is not a valid 0-based position.
    """
    result = list(sequence)
    _check_index(from_index, len(result))
    _check_index(to_index, len(result))

    if from_index != to_index:
        item = result.pop(from_index)
        result.insert(to_index, item)
    return result


class OrderedCollection:
    """An ordered sequence of id-keyed items.

    Items are plain dicts carrying an ``id`` key plus payload keys. Ids handed
    out by :meth:`insert_at_end` never collide with any id the instance has
    held, including removed ones.
    """

    def __init__(self, items=None, id_prefix='item'):
        self.id_prefix = id_prefix
        self._items = []
        self._seen_ids = set()
        for item in items or []:
            self._items.append(dict(item))
            self._seen_ids.add(item['id'])

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(self.items)

    @property
    def items(self):
        """Current order as a list of item copies."""
        return [dict(item) for item in self._items]

    @property
    def ids(self):
        return [item['id'] for item in self._items]

    def index_of(self, item_id):
        """Position of *item_id*, or None when absent."""
        for index, item in enumerate(self._items):
            if item['id'] == item_id:
                return index
        return None

    def get(self, item_id):
        index = self.index_of(item_id)
        return dict(self._items[index]) if index is not None else None

    def insert_at_end(self, payload):
        """Append a new item built from *payload* and return its fresh id."""
        item_id = new_item_id(self.id_prefix)
        while item_id in self._seen_ids:
            item_id = new_item_id(self.id_prefix)

        item = {k: v for k, v in (payload or {}).items() if k != 'id'}
        item['id'] = item_id
        self._items.append(item)
        self._seen_ids.add(item_id)
        return item_id

    def remove_by_id(self, item_id):
        """Remove an item. Returns False (and changes nothing) if it is absent."""
        index = self.index_of(item_id)
        if index is None:
            return False
        del self._items[index]
        return True

    def update_by_id(self, item_id, payload):
        """Merge *payload* into an item. The id itself can never change."""
        index = self.index_of(item_id)
        if index is None:
            return False
        changes = {k: v for k, v in (payload or {}).items() if k != 'id'}
        self._items[index].update(changes)
        return True

    def move(self, from_index, to_index):
        """Reorder in place via :func:`move`."""
        self._items = move(self._items, from_index, to_index)
