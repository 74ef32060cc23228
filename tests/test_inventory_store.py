"""
Tests for the JSON-backed inventory store.
Run with: python -m pytest tests/test_inventory_store.py -v
"""
import json
import os
import sys
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from services import config
from services import inventory_store
from services.inventory_items import InventoryValidationError
from services.inventory_store import InventoryStore, get_inventory_store


@pytest.fixture
def store_path(tmp_path):
    return str(tmp_path / 'data' / 'simpleInventory.json')


@pytest.fixture
def empty_store(store_path):
    return InventoryStore(path=store_path, seed_sample=False)


def _read_json(path):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def test_missing_file_seeds_sample_data(store_path):
    store = InventoryStore(path=store_path, seed_sample=True)
    names = [item.name for item in store.items()]
    assert names == ['T-Shirt - Red', 'Coffee Mug - Logo', 'Sticker Pack']
    assert os.path.exists(store_path)
    assert len({item.id for item in store.items()}) == 3


def test_missing_file_without_seeding_starts_empty(empty_store, store_path):
    assert empty_store.items() == []
    assert not os.path.exists(store_path)


def test_save_then_load_round_trips(empty_store, store_path):
    empty_store.add_item('T-Shirt - Red', 25, '15.99')
    empty_store.add_item('Coffee Mug - Logo', '5', 8.5)
    empty_store.add_item('Sticker Pack', 150, 2)

    reloaded = InventoryStore(path=store_path, seed_sample=False)
    assert reloaded.items() == empty_store.items()
    assert [item.price for item in reloaded.items()] == [Decimal('15.99'), Decimal('8.50'), Decimal('2.00')]


def test_prices_are_written_as_strings(empty_store, store_path):
    item = empty_store.add_item('Mug', 5, '8.5')
    assert _read_json(store_path) == [{'id': item.id, 'name': 'Mug', 'quantity': 5, 'price': '8.50'}]
    assert not os.path.exists(f'{store_path}.tmp')


def test_add_item_rejects_invalid_input(empty_store, store_path):
    with pytest.raises(InventoryValidationError):
        empty_store.add_item('Mug', -1, '8.50')
    assert empty_store.items() == []
    assert not os.path.exists(store_path)


def test_ids_are_unique_and_increasing(empty_store, monkeypatch):
    monkeypatch.setattr(inventory_store.time, 'time', lambda: 1000.0)
    first = empty_store.add_item('A', 1, 1)
    second = empty_store.add_item('B', 1, 1)
    third = empty_store.add_item('C', 1, 1)
    assert first.id == 1_000_000
    assert first.id < second.id < third.id


def test_snapshot_is_not_affected_by_later_mutations(empty_store):
    empty_store.add_item('A', 1, 1)
    snapshot = empty_store.items()
    empty_store.add_item('B', 2, 2)
    assert [item.name for item in snapshot] == ['A']
    assert len(empty_store) == 2


def test_edit_item_updates_quantity_and_price_only(empty_store, store_path):
    item = empty_store.add_item('Mug', 5, '8.50')
    updated = empty_store.edit_item(item.id, quantity='12', price='9.999')

    assert updated.id == item.id
    assert updated.name == 'Mug'
    assert updated.quantity == 12
    assert updated.price == Decimal('10.00')
    assert empty_store.get_item(item.id) == updated
    assert _read_json(store_path)[0]['quantity'] == 12


def test_edit_item_partial_update(empty_store):
    item = empty_store.add_item('Mug', 5, '8.50')
    updated = empty_store.edit_item(item.id, price='7.25')
    assert updated.quantity == 5
    assert updated.price == Decimal('7.25')


def test_edit_unknown_item_is_a_noop(empty_store):
    empty_store.add_item('Mug', 5, '8.50')
    before = empty_store.items()
    assert empty_store.edit_item(123, quantity=1) is None
    assert empty_store.items() == before


def test_edit_with_invalid_value_changes_nothing(empty_store):
    item = empty_store.add_item('Mug', 5, '8.50')
    with pytest.raises(InventoryValidationError):
        empty_store.edit_item(item.id, quantity=-3)
    assert empty_store.get_item(item.id) == item


def test_remove_item(empty_store, store_path):
    a = empty_store.add_item('A', 1, 1)
    b = empty_store.add_item('B', 2, 2)
    c = empty_store.add_item('C', 3, 3)

    assert empty_store.remove_item(b.id) is True
    assert [item.id for item in empty_store.items()] == [a.id, c.id]
    assert [record['id'] for record in _read_json(store_path)] == [a.id, c.id]


def test_remove_unknown_item_is_a_noop(empty_store):
    empty_store.add_item('A', 1, 1)
    assert empty_store.remove_item(999) is False
    assert len(empty_store) == 1


@pytest.mark.parametrize('contents', [
    b'not json at all',
    b'{"id": 1}',
    b'[{"id": 1, "name": "", "quantity": 1, "price": "1.00"}]',
    b'[{"id": 1, "name": "A", "quantity": 1, "price": "1.00"},'
    b' {"id": 1, "name": "B", "quantity": 2, "price": "2.00"}]',
    b'[{"id": 1, "name": "\xff\xfe", "quantity": 1, "price": "1.00"}]',
    b'[{"id": 1, "name": "A", "quantity": 1, "price": "1e30"}]',
    b'[{"id": Infinity, "name": "A", "quantity": 1, "price": "1.00"}]',
    b'[{"id": NaN, "name": "A", "quantity": 1, "price": "1.00"}]',
])
def test_corrupt_file_is_moved_aside(store_path, contents):
    os.makedirs(os.path.dirname(store_path), exist_ok=True)
    with open(store_path, 'wb') as f:
        f.write(contents)

    store = InventoryStore(path=store_path, seed_sample=True)

    assert store.items() == []
    assert len(store) == 0
    assert not os.path.exists(store_path)
    with open(f'{store_path}.corrupt', 'rb') as f:
        assert f.read() == contents


def test_unreadable_file_is_left_in_place(store_path, monkeypatch):
    os.makedirs(os.path.dirname(store_path), exist_ok=True)
    with open(store_path, 'w', encoding='utf-8') as f:
        json.dump([{'id': 1, 'name': 'Mug', 'quantity': 5, 'price': '8.50'}], f)

    def deny(*args, **kwargs):
        raise PermissionError(13, 'Permission denied', store_path)

    monkeypatch.setattr(inventory_store, 'open', deny, raising=False)

    with pytest.raises(PermissionError):
        InventoryStore(path=store_path, seed_sample=True)
    assert os.path.exists(store_path)
    assert not os.path.exists(f'{store_path}.corrupt')


def test_loading_accepts_numeric_prices(store_path):
    os.makedirs(os.path.dirname(store_path), exist_ok=True)
    with open(store_path, 'w', encoding='utf-8') as f:
        json.dump([{'id': 5, 'name': 'Mug', 'quantity': 5, 'price': 8.5}], f)

    store = InventoryStore(path=store_path)
    assert store.get_item(5).price == Decimal('8.50')


def test_new_ids_follow_loaded_ids(store_path, monkeypatch):
    os.makedirs(os.path.dirname(store_path), exist_ok=True)
    with open(store_path, 'w', encoding='utf-8') as f:
        json.dump([{'id': 5_000_000, 'name': 'Mug', 'quantity': 5, 'price': '8.50'}], f)

    monkeypatch.setattr(inventory_store.time, 'time', lambda: 1.0)
    store = InventoryStore(path=store_path)
    assert store.add_item('New', 1, 1).id == 5_000_001


def test_reset(empty_store):
    empty_store.add_item('A', 1, 1)
    assert [item.name for item in empty_store.reset()] == ['T-Shirt - Red', 'Coffee Mug - Logo', 'Sticker Pack']
    assert empty_store.reset(seed_sample=False) == []


@pytest.mark.parametrize('command', [
    lambda store, item: store.add_item('New', 1, 1),
    lambda store, item: store.edit_item(item.id, quantity=99),
    lambda store, item: store.remove_item(item.id),
    lambda store, item: store.reset(),
    lambda store, item: store.reset(seed_sample=False),
], ids=['add', 'edit', 'remove', 'reset', 'reset-empty'])
def test_failed_save_leaves_items_unchanged(empty_store, store_path, monkeypatch, command):
    item = empty_store.add_item('Mug', 5, '8.50')
    before = empty_store.items()
    with open(store_path, 'rb') as f:
        on_disk = f.read()

    def fail(*args, **kwargs):
        raise OSError(28, 'No space left on device')

    monkeypatch.setattr(inventory_store.os, 'replace', fail)

    with pytest.raises(OSError):
        command(empty_store, item)
    assert empty_store.items() == before
    assert len(empty_store) == 1
    assert not os.path.exists(f'{store_path}.tmp')
    with open(store_path, 'rb') as f:
        assert f.read() == on_disk


def test_default_store_uses_configured_location(tmp_path, monkeypatch):
    monkeypatch.setattr(config, 'INVENTORY_DATA_DIR', str(tmp_path))
    monkeypatch.setattr(config, 'INVENTORY_STORAGE_KEY', 'testInventory')
    monkeypatch.setattr(config, 'INVENTORY_SEED_SAMPLE', False)
    monkeypatch.setattr(inventory_store, '_default_store', None)

    store = get_inventory_store()
    assert store is get_inventory_store()
    assert store.path == os.path.join(str(tmp_path), 'testInventory.json')
    assert store.items() == []
