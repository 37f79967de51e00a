from nicegui import ui
from typing import Optional
import html
import logging

from mtg_tracker.core.controller import CollectionController
from mtg_tracker.core.models import CONDITIONS, CardRecord
from mtg_tracker.ui.viewmodels import detail_price_links

logger = logging.getLogger(__name__)


class DetailDialog(ui.dialog):
    """
    Single-card editor. Every control writes through the controller as soon as
    it changes; closing (button, backdrop or Escape) only hides the dialog.
    """

    def __init__(self, controller: CollectionController):
        super().__init__()
        self.controller = controller
        # Escape is routed through the page keyboard handler so it can fall back to clearing the selection
        self.props('no-esc-dismiss')
        self.on('hide', self._on_hide)
        self._populating = False

        with self, ui.card().classes('w-[760px] max-w-full flex flex-row no-wrap p-4 gap-4 bg-gray-900'):
            with ui.column().classes('w-2/5 items-center justify-center'):
                self.image = ui.image().classes('w-full rounded')

            with ui.column().classes('flex-grow gap-1'):
                with ui.row().classes('w-full items-start justify-between no-wrap'):
                    self.name_label = ui.label().classes('text-h6 text-white')
                    ui.button(icon='close', on_click=self.controller.close_detail).props('flat round dense')
                self.type_label = ui.label().classes('text-sm text-gray-300')
                self.rarity_label = ui.label().classes('text-xs text-gray-400 capitalize')
                self.artist_label = ui.label().classes('text-xs text-gray-400 italic')
                self.price_html = ui.html().classes('text-sm text-green-400 q-my-sm')

                ui.separator()

                self.collected_checkbox = ui.checkbox('Collected', on_change=self._on_collected)
                self.condition_select = ui.select(CONDITIONS, label='Condition', on_change=self._on_condition) \
                    .classes('w-full')

                with ui.row().classes('items-center gap-2'):
                    ui.label('Quantity').classes('text-sm text-gray-400')
                    ui.button(icon='remove', on_click=self._decrement).props('flat dense round')
                    self.quantity_label = ui.label().classes('text-lg font-bold w-8 text-center')
                    ui.button(icon='add', on_click=self._increment).props('flat dense round')

                self.notes_input = ui.textarea('Notes', on_change=self._on_notes).classes('w-full')

    def show_card(self, card: Optional[CardRecord]):
        """Populates the controls from the card and its ownership record, or hides the dialog."""
        if card is None:
            self.close()
            return

        record = self.controller.store.get_or_create(card.id)
        self._populating = True
        try:
            self.image.set_source(card.image_normal or card.image_small)
            self.name_label.set_text(card.name)
            self.type_label.set_text(card.type_line)
            self.rarity_label.set_text(card.rarity)
            self.artist_label.set_text(card.artist)
            self.price_html.set_content(self._price_markup(card))

            self.collected_checkbox.value = record.collected
            if record.condition not in self.condition_select.options:
                self.condition_select.set_options(CONDITIONS + [record.condition])
            self.condition_select.value = record.condition
            self.quantity_label.set_text(str(record.quantity))
            self.notes_input.value = record.notes
        finally:
            self._populating = False

        self.open()

    def refresh_quantity(self):
        record = self.controller.detail.record
        if record is not None:
            self.quantity_label.set_text(str(record.quantity))

    @staticmethod
    def _price_markup(card: CardRecord) -> str:
        parts = []
        for link in detail_price_links(card):
            text = html.escape(link.text)
            if link.url:
                parts.append(f'<a href="{html.escape(link.url)}" target="_blank" rel="noopener" class="price-link">{text}</a>')
            else:
                parts.append(text)
        return '  ·  '.join(parts)

    def _increment(self):
        self.controller.increment_quantity()
        self.refresh_quantity()

    def _decrement(self):
        self.controller.decrement_quantity()
        self.refresh_quantity()

    def _on_hide(self):
        self.controller.close_detail()

    def _on_collected(self, e):
        if not self._populating:
            self.controller.set_collected(e.value)

    def _on_condition(self, e):
        if not self._populating and e.value:
            self.controller.set_condition(e.value)

    def _on_notes(self, e):
        if not self._populating:
            self.controller.set_notes(e.value)
