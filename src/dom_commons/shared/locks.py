"""Advisory per-node locking for serialization.

Trees are not thread-safe. Serialization holds a lock keyed on the identity of
the node being written so that a concurrent writer of the same subtree waits
instead of observing a half-mutated tree.
"""

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator


class _LockEntry:
    """Re-entrant lock plus the number of threads holding or waiting on it."""

    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.holders = 0


class NodeLockRegistry:
    """Registry handing out one lock per live node identity."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._entries: Dict[int, _LockEntry] = {}
        self._lock = threading.Lock()

    @contextmanager
    def hold(self, node: Any) -> Iterator[None]:
        """Hold the lock for ``node`` for the duration of the block.

        The caller's reference keeps ``node`` alive, so ``id(node)`` is stable
        until the entry is released.

        Args:
            node: Any tree node or document
        """
        key = id(node)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _LockEntry()
            entry.holders += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._lock:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._entries[key]

    def active_count(self) -> int:
        """Return the number of node identities currently locked or awaited."""
        with self._lock:
            return len(self._entries)


# Global registry instance
_global_registry = NodeLockRegistry()


def node_lock(node: Any):
    """Context manager holding the global advisory lock for ``node``."""
    return _global_registry.hold(node)


def get_lock_registry() -> NodeLockRegistry:
    """Return the registry used by node_lock()."""
    return _global_registry
