"""Inventory item record and the validated construction step.

Every value that ends up in an ``InventoryItem`` passes through ``make_item``
(or the ``parse_*`` helpers it uses), whether it comes from the command line,
a Dash callback or the JSON file on disk.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

CENTS = Decimal('0.01')


class InventoryValidationError(ValueError):
    """Raised when an item field cannot be turned into a valid value."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


@dataclass(frozen=True)
class InventoryItem:
    id: int
    name: str
    quantity: int
    price: Decimal

    @property
    def value(self) -> Decimal:
        return self.quantity * self.price

    def to_record(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'quantity': self.quantity,
            'price': f"{self.price:.2f}",
        }


def parse_name(name: Any) -> str:
    if not isinstance(name, str):
        raise InventoryValidationError('name', name, 'must be a string')
    cleaned = name.strip()
    if not cleaned:
        raise InventoryValidationError('name', name, 'must not be empty')
    return cleaned


def parse_quantity(quantity: Any) -> int:
    if isinstance(quantity, bool):
        raise InventoryValidationError('quantity', quantity, 'must be a whole number')

    if isinstance(quantity, int):
        parsed = quantity
    elif isinstance(quantity, float):
        if not quantity.is_integer():
            raise InventoryValidationError('quantity', quantity, 'must be a whole number')
        parsed = int(quantity)
    elif isinstance(quantity, str):
        try:
            parsed = int(quantity.strip())
        except ValueError:
            raise InventoryValidationError('quantity', quantity, 'must be a whole number') from None
    else:
        raise InventoryValidationError('quantity', quantity, 'must be a whole number')

    if parsed < 0:
        raise InventoryValidationError('quantity', quantity, 'must not be negative')
    return parsed


def parse_price(price: Any) -> Decimal:
    if isinstance(price, bool) or price is None:
        raise InventoryValidationError('price', price, 'must be a number')

    try:
        if isinstance(price, Decimal):
            parsed = price
        elif isinstance(price, int):
            parsed = Decimal(price)
        elif isinstance(price, float):
            # str() keeps 8.5 as 8.5 instead of its binary expansion
            parsed = Decimal(str(price))
        elif isinstance(price, str):
            parsed = Decimal(price.strip())
        else:
            raise InventoryValidationError('price', price, 'must be a number')
    except InvalidOperation:
        raise InventoryValidationError('price', price, 'must be a number') from None

    if not parsed.is_finite():
        raise InventoryValidationError('price', price, 'must be a finite number')
    if parsed < 0:
        raise InventoryValidationError('price', price, 'must not be negative')
    try:
        return parsed.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InventoryValidationError('price', price, 'is too large') from None


def parse_item_id(item_id: Any) -> int:
    if isinstance(item_id, bool):
        raise InventoryValidationError('id', item_id, 'must be an integer')
    try:
        parsed = int(item_id)
    except (TypeError, ValueError, OverflowError):
        raise InventoryValidationError('id', item_id, 'must be an integer') from None
    if isinstance(item_id, float) and item_id != parsed:
        raise InventoryValidationError('id', item_id, 'must be an integer')
    return parsed


def make_item(name: Any, quantity: Any, price: Any, item_id: Optional[Any] = None) -> InventoryItem:
    """Build an ``InventoryItem`` from loose input, normalising numeric fields.

    ``item_id`` may be left out while validating a candidate before the store
    assigns the real id; the resulting item carries id 0 in that case.
    """
    return InventoryItem(
        id=parse_item_id(item_id) if item_id is not None else 0,
        name=parse_name(name),
        quantity=parse_quantity(quantity),
        price=parse_price(price),
    )


def item_from_record(record: Any) -> InventoryItem:
    """Rebuild an item from one stored JSON object."""
    if not isinstance(record, dict):
        raise InventoryValidationError('record', record, 'must be an object')
    if 'id' not in record:
        raise InventoryValidationError('id', None, 'is missing')
    return make_item(
        record.get('name'),
        record.get('quantity'),
        record.get('price'),
        item_id=record['id'],
    )
