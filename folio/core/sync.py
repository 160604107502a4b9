"""
Persistence Synchronizers
=========================

The only part of the editing flow that talks to a store.

- ``DocumentSynchronizer``: embedded lists; one write of the whole document.
- ``RecordOrderSynchronizer``: external lists; one position write per record,
  issued concurrently and awaited together. Successful writes are never
  rolled back, so a partial failure leaves the stored order mixed and the
  caller has to reload.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed


class PersistenceError(Exception):
    """A backing-store write failed. Local edits are kept for a retry."""

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.cause = cause


class PartialOrderPersistence(PersistenceError):
    """Some, not all, position writes failed. Reload before retrying."""

    def __init__(self, succeeded, failed):
        self.succeeded = list(succeeded)
        self.failed = dict(failed)
        super().__init__(
            f"{len(self.failed)} of {len(self.succeeded) + len(self.failed)} position writes failed; "
            "reload the list before saving again"
        )


class RecordNotFound(LookupError):
    pass


class DocumentSynchronizer:
    """Reads and writes one keyed document in a ``DocumentStore``."""

    def __init__(self, store, key):
        self.store = store
        self.key = key

    def load(self):
        """Return the stored document, or None when it does not exist yet."""
        try:
            return self.store.read_one(self.key)
        except Exception as e:
            raise PersistenceError(f"Could not read '{self.key}': {e}", cause=e) from e

    def save(self, document):
        """Write *document* as a single atomic write."""
        try:
            self.store.write_one(self.key, document)
        except Exception as e:
            raise PersistenceError(f"Could not save '{self.key}': {e}", cause=e) from e
        return document


class RecordOrderSynchronizer:
    """Maps an in-memory record order onto per-record ``position`` writes."""

    position_field = 'position'

    def __init__(self, store, max_workers=8):
        self.store = store
        self.max_workers = max(1, int(max_workers))

    def load(self, filters=None):
        try:
            return self.store.read_all(filters)
        except Exception as e:
            raise PersistenceError(f"Could not read records: {e}", cause=e) from e

    @staticmethod
    def target_positions(records):
        """1-based, gap-free positions for *records* in their current order."""
        ids = [record['id'] for record in records]
        if len(set(ids)) != len(ids):
            raise ValueError("Duplicate record ids in order")
        return [(record_id, index + 1) for index, record_id in enumerate(ids)]

    def _write_position(self, record_id, position):
        if not self.store.update_by_id(record_id, {self.position_field: position}):
            raise RecordNotFound(f"Record {record_id} no longer exists")

    def save_order(self, records):
        """Write ``position = index + 1`` for every record; wait for all writes.

        Returns the list of ``(id, position)`` pairs written.

        Raises:
            PartialOrderPersistence: some writes failed, others were applied.
            PersistenceError: every write failed; nothing changed.
        """
        targets = self.target_positions(records)
        if not targets:
            return []

        succeeded = []
        failed = {}
        workers = min(self.max_workers, len(targets))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self._write_position, record_id, position): record_id
                for record_id, position in targets
            }
            for future in as_completed(futures):
                record_id = futures[future]
                try:
                    future.result()
                    succeeded.append(record_id)
                except Exception as e:
                    failed[record_id] = e

        if failed and succeeded:
            raise PartialOrderPersistence(succeeded, failed)
        if failed:
            first = next(iter(failed.values()))
            raise PersistenceError(f"Could not save order: {first}", cause=first)
        return targets

    def update_fields(self, record_id, fields):
        """Single independent write of *fields* onto one record."""
        try:
            found = self.store.update_by_id(record_id, fields)
        except Exception as e:
            raise PersistenceError(f"Could not update record {record_id}: {e}", cause=e) from e
        if not found:
            raise RecordNotFound(f"Record {record_id} no longer exists")
        return fields
