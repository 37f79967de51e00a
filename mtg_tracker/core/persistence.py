import json
import logging
from typing import Dict, MutableMapping, Optional

from pydantic import ValidationError

from mtg_tracker.core.models import OwnershipRecord

logger = logging.getLogger(__name__)

STORAGE_KEY = "mtg-revised-collection"


class CollectionStore:
    """
    Ownership records keyed by card id, kept as one JSON string under a single
    key of a key-value backend (the browser's app.storage.user in the app).
    """

    def __init__(self, backend: MutableMapping[str, str], key: str = STORAGE_KEY):
        self.backend = backend
        self.key = key
        self._records: Dict[str, OwnershipRecord] = {}

    def load(self) -> Dict[str, OwnershipRecord]:
        self._records = {}
        raw = self.backend.get(self.key)
        if not raw:
            return self._records

        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError(f"expected an object, got {type(data).__name__}")
            self._records = {str(card_id): OwnershipRecord(**entry) for card_id, entry in data.items()}
        except (ValueError, TypeError, ValidationError) as e:
            # Unreadable data is dropped, the user starts from an empty collection
            logger.warning(f"Discarding unreadable collection data: {e}")
            self._records = {}

        return self._records

    def save(self):
        data = {card_id: record.model_dump() for card_id, record in self._records.items()}
        self.backend[self.key] = json.dumps(data)

    def get(self, card_id: str) -> Optional[OwnershipRecord]:
        return self._records.get(card_id)

    def get_or_create(self, card_id: str) -> OwnershipRecord:
        record = self._records.get(card_id)
        if record is None:
            record = OwnershipRecord()
            self._records[card_id] = record
        return record

    def __contains__(self, card_id: str) -> bool:
        return card_id in self._records

    def __len__(self) -> int:
        return len(self._records)
