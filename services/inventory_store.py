"""JSON-file backed inventory store.

The store owns the one mutable inventory list. Everything else (pages, the
maintenance script, the analytics functions) works on snapshots returned by
``items()``.
"""
import json
import logging
import os
import threading
import time
from dataclasses import replace
from typing import Any, List, Optional

from services import config
from services.inventory_items import (
    InventoryItem,
    InventoryValidationError,
    item_from_record,
    make_item,
    parse_item_id,
    parse_price,
    parse_quantity,
)

logger = logging.getLogger(__name__)

SAMPLE_INVENTORY = [
    ('T-Shirt - Red', 25, '15.99'),
    ('Coffee Mug - Logo', 5, '8.50'),
    ('Sticker Pack', 150, '2.00'),
]


class InventoryStore:
    def __init__(self, path: Optional[str] = None, seed_sample: Optional[bool] = None):
        self.path = path or config.storage_path()
        self.seed_sample = config.INVENTORY_SEED_SAMPLE if seed_sample is None else seed_sample
        self._items: List[InventoryItem] = []
        self._last_id = 0
        self._lock = threading.RLock()
        self.load()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> List[InventoryItem]:
        with self._lock:
            if not os.path.exists(self.path):
                if self.seed_sample:
                    logger.info(f"No inventory at {self.path}, seeding sample data")
                    items = self._sample_items()
                    self.save(items)
                else:
                    items = []
                self._items = items
                self._last_id = max([self._last_id] + [item.id for item in items])
                return self.items()

            try:
                with open(self.path, 'rb') as f:
                    raw = f.read()
            except OSError as e:
                logger.error(f"Could not read inventory file {self.path}: {e}")
                raise

            try:
                items = self._parse_records(json.loads(raw.decode('utf-8')))
            except (UnicodeDecodeError, json.JSONDecodeError, InventoryValidationError) as e:
                self._quarantine(e)
                items = []

            self._items = items
            self._last_id = max((item.id for item in items), default=0)
            logger.info(f"Loaded {len(items)} inventory items from {self.path}")
            return self.items()

    def save(self, items: Optional[List[InventoryItem]] = None) -> None:
        """Write ``items`` (default: the current list) to disk atomically."""
        with self._lock:
            if items is None:
                items = self._items
            config.ensure_directories(self.path)
            payload = [item.to_record() for item in items]
            temp_file = f'{self.path}.tmp'
            try:
                with open(temp_file, 'w', encoding='utf-8') as f:
                    json.dump(payload, f, indent=2, ensure_ascii=False)
                os.replace(temp_file, self.path)
            finally:
                if os.path.exists(temp_file):
                    os.remove(temp_file)
            logger.debug(f"Saved {len(payload)} inventory items to {self.path}")

    @staticmethod
    def _parse_records(data: Any) -> List[InventoryItem]:
        if not isinstance(data, list):
            raise InventoryValidationError('inventory', type(data).__name__, 'must be a list of items')

        items = [item_from_record(record) for record in data]
        seen = set()
        for item in items:
            if item.id in seen:
                raise InventoryValidationError('id', item.id, 'is duplicated')
            seen.add(item.id)
        return items

    def _quarantine(self, error: Exception) -> None:
        corrupt_path = f'{self.path}.corrupt'
        logger.warning(f"Inventory file {self.path} is unreadable ({error}); moving it to {corrupt_path}")
        try:
            os.replace(self.path, corrupt_path)
        except OSError as e:
            logger.error(f"Could not move corrupt inventory file aside: {e}")

    def _sample_items(self) -> List[InventoryItem]:
        items = []
        for name, quantity, price in SAMPLE_INVENTORY:
            candidate = make_item(name, quantity, price)
            items.append(replace(candidate, id=self._next_id()))
        return items

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def items(self) -> List[InventoryItem]:
        with self._lock:
            return list(self._items)

    def get_item(self, item_id: int) -> Optional[InventoryItem]:
        with self._lock:
            for item in self._items:
                if item.id == item_id:
                    return item
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    # Commands write the new list before swapping it in.
    def _next_id(self) -> int:
        now_ms = int(time.time() * 1000)
        self._last_id = max(now_ms, self._last_id + 1)
        return self._last_id

    def _commit(self, items: List[InventoryItem]) -> None:
        self.save(items)
        self._items = items

    def add_item(self, name: Any, quantity: Any, price: Any) -> InventoryItem:
        candidate = make_item(name, quantity, price)
        with self._lock:
            item = replace(candidate, id=self._next_id())
            self._commit(self._items + [item])
        logger.info(f"Added item {item.id} ({item.name}): qty={item.quantity} price={item.price}")
        return item

    def edit_item(self, item_id: Any, quantity: Any = None, price: Any = None) -> Optional[InventoryItem]:
        """Update quantity and/or price; unknown ids are ignored."""
        item_id = parse_item_id(item_id)
        changes = {}
        if quantity is not None:
            changes['quantity'] = parse_quantity(quantity)
        if price is not None:
            changes['price'] = parse_price(price)

        with self._lock:
            for index, item in enumerate(self._items):
                if item.id == item_id:
                    updated = replace(item, **changes)
                    if changes:
                        items = list(self._items)
                        items[index] = updated
                        self._commit(items)
                        logger.info(f"Edited item {item_id}: {changes}")
                    return updated

        logger.debug(f"Edit ignored, no item with id {item_id}")
        return None

    def remove_item(self, item_id: Any) -> bool:
        item_id = parse_item_id(item_id)
        with self._lock:
            remaining = [item for item in self._items if item.id != item_id]
            if len(remaining) == len(self._items):
                logger.debug(f"Remove ignored, no item with id {item_id}")
                return False
            self._commit(remaining)
        logger.info(f"Removed item {item_id}")
        return True

    def reset(self, seed_sample: bool = True) -> List[InventoryItem]:
        with self._lock:
            self._commit(self._sample_items() if seed_sample else [])
        logger.info(f"Inventory reset ({'sample data' if seed_sample else 'empty'})")
        return self.items()


_default_store: Optional[InventoryStore] = None
_default_store_lock = threading.Lock()


def get_inventory_store() -> InventoryStore:
    """Process-wide store backed by the configured storage path."""
    global _default_store
    if _default_store is None:
        with _default_store_lock:
            if _default_store is None:
                _default_store = InventoryStore()
    return _default_store
