import logging
from typing import Callable, List, MutableMapping, Optional

from mtg_tracker.core.catalog import Catalog
from mtg_tracker.core.debounce import Debouncer
from mtg_tracker.core.detail import DetailEditor
from mtg_tracker.core.filtering import FilterState, filter_cards
from mtg_tracker.core.models import CardRecord
from mtg_tracker.core.persistence import STORAGE_KEY, CollectionStore
from mtg_tracker.core.selection import SelectionManager
from mtg_tracker.core.stats import CollectionStats, compute_stats

logger = logging.getLogger(__name__)

CANCEL_CLOSED_DETAIL = 'closed_detail'
CANCEL_CLEARED_SELECTION = 'cleared_selection'

FILTER_FIELDS = ('color', 'rarity', 'status', 'sort')


def _noop(*args, **kwargs):
    pass


class CollectionController:
    """
    Application state for one tracker page: catalog, ownership store, selection,
    open detail card and filters. The view layer registers the on_* callbacks
    and otherwise only calls methods on this object.
    """

    def __init__(self, backend: MutableMapping[str, str], storage_key: str = STORAGE_KEY,
                 search_debounce: float = 0.2):
        self.catalog = Catalog()
        self.store = CollectionStore(backend, storage_key)
        self.selection = SelectionManager()
        self.detail = DetailEditor(self.catalog, self.store)
        self.filters = FilterState()
        self.stats = CollectionStats()
        self.debouncer = Debouncer(search_debounce)

        self.on_grid_change: Callable[[List[CardRecord]], None] = _noop
        self.on_selection_change: Callable[[str], None] = _noop
        self.on_selection_cleared: Callable[[List[str]], None] = _noop
        self.on_selection_count: Callable[[int], None] = _noop
        self.on_collected_change: Callable[[str], None] = _noop
        self.on_stats_change: Callable[[CollectionStats], None] = _noop
        self.on_detail_change: Callable[[Optional[CardRecord]], None] = _noop

        self.store.load()

    @property
    def active_id(self) -> Optional[str]:
        return self.detail.active_id

    def set_catalog(self, catalog: Catalog):
        logger.info(f"Catalog ready with {len(catalog)} cards")
        self.catalog = catalog
        self.detail.catalog = catalog
        self.refresh_stats()
        self.refresh_grid()

    # --- Filters ---

    def visible_cards(self) -> List[CardRecord]:
        return filter_cards(self.catalog, self.store, self.filters)

    def refresh_grid(self):
        self.on_grid_change(self.visible_cards())

    def set_filter(self, name: str, value: str):
        if name not in FILTER_FIELDS:
            raise ValueError(f"Unknown filter: {name}")
        setattr(self.filters, name, value or '')
        self.refresh_grid()

    def set_search(self, text: str):
        self.filters.search = text or ''
        self.debouncer.schedule(self.refresh_grid)

    # --- Statistics ---

    def refresh_stats(self) -> CollectionStats:
        self.stats = compute_stats(self.catalog, self.store)
        self.on_stats_change(self.stats)
        return self.stats

    # --- Selection ---

    def toggle_select(self, card_id: str) -> bool:
        selected = self.selection.toggle(card_id)
        self.on_selection_change(card_id)
        self.on_selection_count(len(self.selection))
        return selected

    def clear_selection(self) -> List[str]:
        cleared = self.selection.clear()
        self.on_selection_cleared(cleared)
        self.on_selection_count(0)
        return cleared

    def apply_bulk_collect(self) -> List[str]:
        ids = self.selection.apply_bulk_collect(self.store)
        for card_id in ids:
            self.on_collected_change(card_id)
        self.refresh_stats()
        self.on_selection_cleared(ids)
        self.on_selection_count(0)
        return ids

    # --- Detail editor ---

    def open_detail(self, card_id: str) -> bool:
        if not self.detail.open(card_id):
            return False
        self.on_detail_change(self.detail.card)
        return True

    def close_detail(self):
        if not self.detail.is_open:
            return
        self.detail.close()
        self.on_detail_change(None)

    def set_collected(self, collected: bool):
        self._after_edit(self.detail.set_collected(collected))

    def set_condition(self, condition: str):
        self._after_edit(self.detail.set_condition(condition))

    def set_notes(self, notes: str):
        self._after_edit(self.detail.set_notes(notes))

    def increment_quantity(self):
        self._after_edit(self.detail.increment_quantity())

    def decrement_quantity(self):
        self._after_edit(self.detail.decrement_quantity())

    def _after_edit(self, changed: bool):
        if not changed:
            return
        self.refresh_stats()
        self.on_collected_change(self.detail.active_id)

    # --- Keyboard ---

    def handle_cancel(self) -> Optional[str]:
        """Escape: an open editor takes priority over a pending selection."""
        if self.detail.is_open:
            self.close_detail()
            return CANCEL_CLOSED_DETAIL
        if len(self.selection) > 0:
            self.clear_selection()
            return CANCEL_CLEARED_SELECTION
        return None

    def teardown(self):
        self.debouncer.cancel()
