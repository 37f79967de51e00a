from dataclasses import dataclass
from typing import Iterable, List

from mtg_tracker.core.models import CardRecord
from mtg_tracker.core.persistence import CollectionStore

COLOR_MULTI = 'M'
COLOR_COLORLESS = 'C'
COLOR_LAND = 'L'

STATUS_ALL = 'all'
STATUS_COLLECTED = 'collected'
STATUS_MISSING = 'missing'

SORT_NONE = ''
SORT_LOW = 'low'
SORT_HIGH = 'high'

COLOR_OPTIONS = {
    '': 'All Colors',
    'W': 'White',
    'U': 'Blue',
    'B': 'Black',
    'R': 'Red',
    'G': 'Green',
    COLOR_MULTI: 'Multicolor',
    COLOR_COLORLESS: 'Colorless',
    COLOR_LAND: 'Land',
}
RARITY_OPTIONS = {
    '': 'All Rarities',
    'common': 'Common',
    'uncommon': 'Uncommon',
    'rare': 'Rare',
}
STATUS_OPTIONS = {
    STATUS_ALL: 'All Cards',
    STATUS_COLLECTED: 'Collected',
    STATUS_MISSING: 'Missing',
}
SORT_OPTIONS = {
    SORT_NONE: 'Collector Number',
    SORT_LOW: 'Price: Low to High',
    SORT_HIGH: 'Price: High to Low',
}


@dataclass
class FilterState:
    search: str = ''
    color: str = ''
    rarity: str = ''
    status: str = STATUS_ALL
    sort: str = SORT_NONE


def parse_price(raw) -> float:
    """Numeric value of a stored price string; missing or unparseable prices are 0."""
    if not raw:
        return 0.0
    try:
        return float(raw)
    except (TypeError, ValueError):
        return 0.0


def card_price(card: CardRecord) -> float:
    return parse_price(card.display_price)


def matches_color(card: CardRecord, color: str) -> bool:
    # Order matters: lands can be multicolored, so 'L' is checked before single colors
    if not color:
        return True
    if color == COLOR_MULTI:
        return len(card.colors) > 1
    if color == COLOR_COLORLESS:
        return len(card.colors) == 0 and 'Land' not in card.type_line
    if color == COLOR_LAND:
        return 'Land' in card.type_line
    return len(card.colors) == 1 and card.colors[0] == color


def filter_cards(cards: Iterable[CardRecord], store: CollectionStore, filters: FilterState) -> List[CardRecord]:
    search = filters.search.lower().strip()

    res = []
    for card in cards:
        if search and search not in card.name.lower():
            continue
        if not matches_color(card, filters.color):
            continue
        if filters.rarity and card.rarity != filters.rarity:
            continue
        if filters.status == STATUS_COLLECTED and not store.get_or_create(card.id).collected:
            continue
        if filters.status == STATUS_MISSING and store.get_or_create(card.id).collected:
            continue
        res.append(card)

    if filters.sort == SORT_LOW:
        res.sort(key=card_price)
    elif filters.sort == SORT_HIGH:
        res.sort(key=card_price, reverse=True)

    return res
