from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, NamedTuple, Optional

import pandas as pd

from services.config import (
    DISTRIBUTION_BAR_WIDTH,
    DISTRIBUTION_NAME_WIDTH,
    DISTRIBUTION_TOP_N,
    LOW_STOCK_THRESHOLD,
)
from services.inventory_items import InventoryItem

BAR_CHAR = '█'
FRAME_COLUMNS = ['id', 'name', 'quantity', 'price', 'value']


@dataclass(frozen=True)
class InventorySummary:
    total_units: int
    unique_product_count: int
    total_value: Decimal


class LowStockEntry(NamedTuple):
    name: str
    quantity: int


@dataclass(frozen=True)
class RenderedBar:
    name: str
    quantity: int
    bar_length: int
    name_width: int = DISTRIBUTION_NAME_WIDTH

    @property
    def label(self) -> str:
        return self.name[:self.name_width].ljust(self.name_width)

    @property
    def bar(self) -> str:
        return BAR_CHAR * self.bar_length

    @property
    def line(self) -> str:
        return f"{self.label} | {self.bar} {self.quantity}"


@dataclass(frozen=True)
class InventoryStats:
    summary: InventorySummary
    low_stock: List[LowStockEntry]
    top_item: Optional[InventoryItem]
    average_price: Optional[Decimal]
    distribution: List[RenderedBar]
    low_stock_threshold: int

    @property
    def is_empty(self) -> bool:
        return self.summary.unique_product_count == 0


def compute_summary(items: Iterable[InventoryItem]) -> InventorySummary:
    total_units = 0
    total_value = Decimal('0')
    count = 0
    for item in items:
        total_units += item.quantity
        total_value += item.quantity * item.price
        count += 1
    return InventorySummary(
        total_units=total_units,
        unique_product_count=count,
        total_value=total_value,
    )


def find_low_stock(
    items: Iterable[InventoryItem],
    threshold: int = LOW_STOCK_THRESHOLD,
) -> List[LowStockEntry]:
    """Items strictly below ``threshold``, in list order."""
    return [LowStockEntry(item.name, item.quantity) for item in items if item.quantity < threshold]


def find_top_stocked(items: Iterable[InventoryItem]) -> Optional[InventoryItem]:
    top = None
    for item in items:
        # strict comparison keeps the first item on ties
        if top is None or item.quantity > top.quantity:
            top = item
    return top


def compute_average_price(items: Iterable[InventoryItem]) -> Optional[Decimal]:
    prices = [item.price for item in items]
    if not prices:
        return None
    return sum(prices, Decimal('0')) / len(prices)


def _bar_length(quantity: int, max_qty: int, bar_width: int) -> int:
    scaled = Decimal(quantity) * Decimal(bar_width) / Decimal(max_qty)
    return int(scaled.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def build_distribution_report(
    items: Iterable[InventoryItem],
    top_n: int = DISTRIBUTION_TOP_N,
    bar_width: int = DISTRIBUTION_BAR_WIDTH,
    name_width: int = DISTRIBUTION_NAME_WIDTH,
) -> List[RenderedBar]:
    """Rank items by quantity and scale each to a bar of at most ``bar_width``.

    The sort is stable, so equal quantities keep their list order. Bar lengths
    round half away from zero. An empty inventory, ``top_n <= 0`` or a
    highest quantity of 0 all produce an empty report.
    """
    if top_n <= 0:
        return []

    ranked = sorted(items, key=lambda item: item.quantity, reverse=True)[:top_n]
    if not ranked:
        return []

    max_qty = ranked[0].quantity
    if max_qty <= 0:
        return []

    return [
        RenderedBar(
            name=item.name,
            quantity=item.quantity,
            bar_length=_bar_length(item.quantity, max_qty, bar_width),
            name_width=name_width,
        )
        for item in ranked
    ]


def get_inventory_stats(
    items: Iterable[InventoryItem],
    threshold: int = LOW_STOCK_THRESHOLD,
    top_n: int = DISTRIBUTION_TOP_N,
    bar_width: int = DISTRIBUTION_BAR_WIDTH,
) -> InventoryStats:
    snapshot = list(items)
    return InventoryStats(
        summary=compute_summary(snapshot),
        low_stock=find_low_stock(snapshot, threshold),
        top_item=find_top_stocked(snapshot),
        average_price=compute_average_price(snapshot),
        distribution=build_distribution_report(snapshot, top_n, bar_width),
        low_stock_threshold=threshold,
    )


def inventory_frame(items: Iterable[InventoryItem]) -> pd.DataFrame:
    """Tabular view of the inventory for tables and charts."""
    records = [
        {
            'id': item.id,
            'name': item.name,
            'quantity': item.quantity,
            'price': item.price,
            'value': item.value,
        }
        for item in items
    ]
    if not records:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    return pd.DataFrame(records, columns=FRAME_COLUMNS)
