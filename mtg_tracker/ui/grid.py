from nicegui import ui
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional
import logging

from mtg_tracker.core.controller import CollectionController
from mtg_tracker.core.models import CardRecord
from mtg_tracker.ui.viewmodels import CardTileViewModel

logger = logging.getLogger(__name__)

CHECK_MARK = '✓'


@dataclass
class CardTile:
    card_id: str
    element: ui.element
    select_marker: ui.label


class GridRenderer:
    """
    Renders the visible cards and keeps a card id -> tile index so that
    selection and collected changes touch a single tile instead of a rebuild.
    """

    def __init__(self, controller: CollectionController):
        self.controller = controller
        self.container: Optional[ui.element] = None
        self.tiles: Dict[str, CardTile] = {}

    def build(self):
        self.container = ui.element('div').classes('w-full')

    def render(self, cards: List[CardRecord]):
        self.container.clear()
        self.tiles = {}

        with self.container:
            if not cards:
                ui.label('No cards found.').classes('text-grey italic w-full text-center q-mt-xl')
                return

            with ui.grid(columns='repeat(auto-fill, minmax(180px, 1fr))').classes('w-full gap-4'):
                for card in cards:
                    vm = CardTileViewModel.build(
                        card,
                        self.controller.store.get_or_create(card.id),
                        self.controller.selection.is_selected(card.id),
                    )
                    self.tiles[card.id] = self.render_tile(vm)

    def render_tile(self, vm: CardTileViewModel) -> CardTile:
        classes = 'card-item w-full p-0 cursor-pointer border border-gray-700 hover:scale-105 transition-transform'
        if vm.collected:
            classes += ' collected'
        if vm.selected:
            classes += ' selected'

        with ui.card().classes(classes) \
                .on('click', lambda cid=vm.card_id: self.controller.open_detail(cid)) as element:
            with ui.element('div').classes('relative w-full aspect-[488/680] bg-black'):
                if vm.image_url:
                    ui.image(vm.image_url).classes('w-full h-full object-cover')
                # click.stop: selecting must not also open the detail editor
                select_marker = ui.label(CHECK_MARK if vm.selected else '') \
                    .classes('card-select-btn') \
                    .on('click.stop', lambda cid=vm.card_id: self.controller.toggle_select(cid))
                ui.label(CHECK_MARK).classes('card-collected-badge')

            with ui.column().classes('p-2 gap-0 w-full'):
                ui.label(vm.name).classes('text-sm font-bold truncate w-full').tooltip(vm.name)
                ui.label(vm.type_line).classes('text-xs text-gray-400 truncate w-full')
                with ui.row().classes('w-full justify-between text-xs'):
                    ui.label('Market').classes('text-gray-500')
                    ui.label(vm.market_text).classes('text-green-400')
                with ui.row().classes('w-full justify-between text-xs'):
                    ui.label('Median').classes('text-gray-500')
                    ui.label(vm.median_text).classes('text-green-400')

        return CardTile(vm.card_id, element, select_marker)

    def update_selection(self, card_id: str):
        tile = self.tiles.get(card_id)
        if tile is None:
            return
        if self.controller.selection.is_selected(card_id):
            tile.element.classes(add='selected')
            tile.select_marker.set_text(CHECK_MARK)
        else:
            tile.element.classes(remove='selected')
            tile.select_marker.set_text('')

    def clear_selection(self, card_ids: Iterable[str]):
        for card_id in card_ids:
            tile = self.tiles.get(card_id)
            if tile is None:
                continue
            tile.element.classes(remove='selected')
            tile.select_marker.set_text('')

    def update_collected(self, card_id: Optional[str]):
        tile = self.tiles.get(card_id) if card_id else None
        if tile is None:
            return
        record = self.controller.store.get(card_id)
        if record is not None and record.collected:
            tile.element.classes(add='collected')
        else:
            tile.element.classes(remove='collected')

    def show_error(self, message: str):
        self.container.clear()
        self.tiles = {}
        with self.container:
            ui.label(message).classes('w-full text-center text-red-500 q-pa-xl')
