from typing import List, Set

from mtg_tracker.core.persistence import CollectionStore


class SelectionManager:
    def __init__(self):
        self._selected: Set[str] = set()

    def toggle(self, card_id: str) -> bool:
        """Flips membership and returns whether the card is now selected."""
        if card_id in self._selected:
            self._selected.discard(card_id)
            return False
        self._selected.add(card_id)
        return True

    def clear(self) -> List[str]:
        """Empties the selection, returning the ids that were selected."""
        cleared = list(self._selected)
        self._selected.clear()
        return cleared

    def apply_bulk_collect(self, store: CollectionStore) -> List[str]:
        """
        Marks every selected card as collected, leaving condition, quantity and
        notes alone, saves the store once and empties the selection.
        Returns the ids that were collected.
        """
        ids = list(self._selected)
        for card_id in ids:
            store.get_or_create(card_id).collected = True
        store.save()
        self._selected.clear()
        return ids

    def is_selected(self, card_id: str) -> bool:
        return card_id in self._selected

    def __contains__(self, card_id: str) -> bool:
        return card_id in self._selected

    def __len__(self) -> int:
        return len(self._selected)
