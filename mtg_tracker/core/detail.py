import logging
from typing import Optional

from mtg_tracker.core.catalog import Catalog
from mtg_tracker.core.models import CardRecord, OwnershipRecord
from mtg_tracker.core.persistence import CollectionStore

logger = logging.getLogger(__name__)


class DetailEditor:
    """
    Open/closed state for the single-card editor.

    Every edit is written straight into the card's OwnershipRecord and the
    whole store is saved; there is nothing to confirm or discard.
    """

    def __init__(self, catalog: Catalog, store: CollectionStore):
        self.catalog = catalog
        self.store = store
        self.active_id: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.active_id is not None

    @property
    def card(self) -> Optional[CardRecord]:
        if self.active_id is None:
            return None
        return self.catalog.get(self.active_id)

    @property
    def record(self) -> Optional[OwnershipRecord]:
        if self.active_id is None:
            return None
        return self.store.get_or_create(self.active_id)

    def open(self, card_id: str) -> bool:
        if card_id not in self.catalog:
            logger.debug(f"Ignoring open request for unknown card {card_id}")
            return False
        self.active_id = card_id
        self.store.get_or_create(card_id)
        return True

    def close(self):
        self.active_id = None

    def set_collected(self, collected: bool) -> bool:
        return self._edit('collected', bool(collected))

    def set_condition(self, condition: str) -> bool:
        return self._edit('condition', condition)

    def set_notes(self, notes: str) -> bool:
        return self._edit('notes', notes or '')

    def increment_quantity(self) -> bool:
        record = self.record
        if record is None:
            return False
        return self._edit('quantity', record.quantity + 1)

    def decrement_quantity(self) -> bool:
        record = self.record
        if record is None or record.quantity <= 1:
            return False
        return self._edit('quantity', record.quantity - 1)

    def _edit(self, field: str, value) -> bool:
        record = self.record
        if record is None:
            return False
        setattr(record, field, value)
        self.store.save()
        return True
