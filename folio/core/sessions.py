"""
Editing Sessions
================

Per-app registry of open editing sessions. Each admin gets at most one
session per resource (``'about'``, ``'project-order'``, ...); the session
object (a draft or list editor) is owned exclusively by that entry.
"""

import threading
from datetime import datetime


class EditingSessions:
    """Thread-safe ``(owner, resource) -> editor`` registry."""

    def __init__(self):
        self._lock = threading.Lock()
        self._sessions = {}

    def start(self, owner, resource, editor):
        """Open (or replace) the session for *owner* on *resource*."""
        with self._lock:
            self._sessions[(owner, resource)] = {
                'editor': editor,
                'started_at': datetime.now().isoformat(),
            }
        return editor

    def get(self, owner, resource):
        with self._lock:
            entry = self._sessions.get((owner, resource))
        return entry['editor'] if entry else None

    def discard(self, owner, resource):
        with self._lock:
            return self._sessions.pop((owner, resource), None) is not None

    def discard_owner(self, owner):
        """Drop every session of *owner* (on logout)."""
        with self._lock:
            keys = [key for key in self._sessions if key[0] == owner]
            for key in keys:
                del self._sessions[key]
        return len(keys)

    def count(self):
        with self._lock:
            return len(self._sessions)
