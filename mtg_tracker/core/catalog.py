import os
import json
from typing import Any, Dict, Iterator, List, Optional

from mtg_tracker.core.models import CardRecord


def parse_cards_data(data: List[dict]) -> List[CardRecord]:
    return [CardRecord(**c) for c in data]


def read_catalog_file(path: str) -> List[Dict[str, Any]]:
    """Raw card dicts from the catalog file, for the jobs that rewrite it."""
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def write_catalog_file(cards: List[Dict[str, Any]], path: str):
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(cards, f, indent=2)


class Catalog:
    """The fixed list of cards in the tracked set, in catalog-file order."""

    def __init__(self, cards: Optional[List[CardRecord]] = None):
        self._cards: List[CardRecord] = list(cards or [])
        self._by_id: Dict[str, CardRecord] = {c.id: c for c in self._cards}

    @classmethod
    def from_file(cls, path: str) -> "Catalog":
        return cls(parse_cards_data(read_catalog_file(path)))

    def get(self, card_id: str) -> Optional[CardRecord]:
        return self._by_id.get(card_id)

    def __contains__(self, card_id: str) -> bool:
        return card_id in self._by_id

    def __iter__(self) -> Iterator[CardRecord]:
        return iter(self._cards)

    def __len__(self) -> int:
        return len(self._cards)
