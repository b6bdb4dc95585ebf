"""
Thread-safe batch item collection
"""
import threading
from typing import Callable, Dict, List, Optional

from linguavision.core.models import BatchItem


class ItemStore:
    """Thread-safe, insertion-ordered store of immutable batch items.

    Items are frozen, so reads hand out the stored objects directly; every
    write replaces a whole item keyed by its id.
    """

    def __init__(self):
        self._items: Dict[str, BatchItem] = {}
        self._lock = threading.RLock()

    def add(self, item: BatchItem) -> None:
        """Insert a new item"""
        with self._lock:
            self._items[item.id] = item

    def get(self, item_id: str) -> Optional[BatchItem]:
        with self._lock:
            return self._items.get(item_id)

    def list(self) -> List[BatchItem]:
        """Snapshot of all items in upload order"""
        with self._lock:
            return list(self._items.values())

    def exists(self, item_id: str) -> bool:
        with self._lock:
            return item_id in self._items

    def replace(self, item: BatchItem, expected_attempt: Optional[int] = None) -> bool:
        """
        Replace the stored item with the same id.

        Args:
            item: New version of the item
            expected_attempt: When given, only replace if the stored item is
                still on that attempt

        Returns:
            False if the item is gone or was superseded by a newer attempt
        """
        with self._lock:
            current = self._items.get(item.id)
            if current is None:
                return False
            if expected_attempt is not None and current.attempt != expected_attempt:
                return False
            self._items[item.id] = item
            return True

    def update(self, item_id: str,
               transform: Callable[[BatchItem], Optional[BatchItem]]) -> Optional[BatchItem]:
        """
        Atomically read-modify-write one item.

        ``transform`` receives the current item and returns the replacement,
        or None to leave it untouched.

        Returns:
            The stored replacement, or None when nothing was written
        """
        with self._lock:
            current = self._items.get(item_id)
            if current is None:
                return None
            updated = transform(current)
            if updated is None:
                return None
            self._items[item_id] = updated
            return updated

    def remove(self, item_id: str) -> bool:
        with self._lock:
            return self._items.pop(item_id, None) is not None

    def clear(self) -> int:
        """Remove every item, returns how many were removed"""
        with self._lock:
            count = len(self._items)
            self._items.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
