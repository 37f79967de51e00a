from dataclasses import dataclass
from typing import Iterable

from mtg_tracker.core.filtering import card_price, parse_price
from mtg_tracker.core.models import CardRecord
from mtg_tracker.core.persistence import CollectionStore

MISSING_PRICE = '--'


@dataclass
class CollectionStats:
    total: int = 0
    collected: int = 0
    owned_value: float = 0.0
    set_total: float = 0.0

    @property
    def completion(self) -> float:
        """Collected share of the set, 0-100."""
        if not self.total:
            return 0.0
        return self.collected / self.total * 100

    @property
    def average_price(self) -> float:
        if not self.total:
            return 0.0
        return self.set_total / self.total


def compute_stats(cards: Iterable[CardRecord], store: CollectionStore) -> CollectionStats:
    """Aggregates over the whole catalog, never the filtered view."""
    stats = CollectionStats()
    for card in cards:
        price = card_price(card)
        stats.total += 1
        stats.set_total += price
        record = store.get_or_create(card.id)
        if record.collected:
            stats.collected += 1
            stats.owned_value += price * record.quantity
    return stats


def format_money(value: float) -> str:
    return f"${value:.2f}"


def format_price(raw) -> str:
    if not raw:
        return MISSING_PRICE
    return format_money(parse_price(raw))


def format_percent(value: float) -> str:
    return f"{round(value)}%"
