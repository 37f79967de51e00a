import json
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

from mtg_tracker.core.catalog import Catalog
from mtg_tracker.core.controller import CollectionController
from mtg_tracker.core.models import CONDITIONS, CardRecord
from mtg_tracker.core.persistence import STORAGE_KEY
from mtg_tracker.core.stats import CollectionStats
from mtg_tracker.ui.collection_page import LOAD_ERROR_MESSAGE, CollectionPage
from mtg_tracker.ui.detail_dialog import DetailDialog


class FakeControl:
    """Value control that fires on_change on every assignment, like a bound NiceGUI input."""

    def __init__(self, on_change=None, options=None):
        self.on_change = on_change
        self.options = list(options or [])
        self._value = None

    @property
    def value(self):
        return self._value

    @value.setter
    def value(self, value):
        self._value = value
        if self.on_change:
            self.on_change(SimpleNamespace(value=value))

    def set_options(self, options):
        self.options = list(options)


def make_dialog(controller):
    # Controls are replaced so the dialog can be driven without a browser client
    dialog = DetailDialog.__new__(DetailDialog)
    dialog.controller = controller
    dialog._populating = False
    dialog.image = MagicMock()
    dialog.name_label = MagicMock()
    dialog.type_label = MagicMock()
    dialog.rarity_label = MagicMock()
    dialog.artist_label = MagicMock()
    dialog.price_html = MagicMock()
    dialog.quantity_label = MagicMock()
    dialog.collected_checkbox = FakeControl(dialog._on_collected)
    dialog.condition_select = FakeControl(dialog._on_condition, CONDITIONS)
    dialog.notes_input = FakeControl(dialog._on_notes)
    dialog.open = MagicMock()
    dialog.close = MagicMock()
    return dialog


class TestDetailDialog(unittest.TestCase):
    def setUp(self):
        self.backend = {}
        self.controller = CollectionController(self.backend)
        self.controller.set_catalog(Catalog([
            CardRecord(id="a", name="Shivan Dragon", price_usd="3.00"),
        ]))
        record = self.controller.store.get_or_create("a")
        record.collected = True
        record.condition = "Lightly Played"
        record.quantity = 3
        record.notes = "from the binder"
        self.controller.store.save()
        self.saved = self.backend[STORAGE_KEY]

        self.dialog = make_dialog(self.controller)
        self.controller.open_detail("a")

    def test_populating_does_not_write_back(self):
        with patch.object(self.controller, 'set_collected') as set_collected, \
                patch.object(self.controller, 'set_condition') as set_condition, \
                patch.object(self.controller, 'set_notes') as set_notes:
            self.dialog.show_card(self.controller.detail.card)

        set_collected.assert_not_called()
        set_condition.assert_not_called()
        set_notes.assert_not_called()
        self.assertEqual(self.backend[STORAGE_KEY], self.saved)

        self.assertTrue(self.dialog.collected_checkbox.value)
        self.assertEqual(self.dialog.condition_select.value, "Lightly Played")
        self.assertEqual(self.dialog.notes_input.value, "from the binder")
        self.dialog.quantity_label.set_text.assert_called_with("3")
        self.dialog.name_label.set_text.assert_called_with("Shivan Dragon")
        self.dialog.open.assert_called_once()
        self.assertFalse(self.dialog._populating)

    def test_condition_change_writes_through(self):
        self.dialog.show_card(self.controller.detail.card)

        self.dialog.condition_select.value = "Damaged"

        saved = json.loads(self.backend[STORAGE_KEY])
        self.assertEqual(saved["a"]["condition"], "Damaged")
        self.assertEqual(saved["a"]["quantity"], 3)

    def test_unknown_condition_is_kept_selectable(self):
        self.controller.store.get("a").condition = "Played"
        self.dialog.show_card(self.controller.detail.card)

        self.assertIn("Played", self.dialog.condition_select.options)
        self.assertEqual(self.dialog.condition_select.value, "Played")

    def test_quantity_buttons_refresh_label(self):
        self.dialog.show_card(self.controller.detail.card)

        self.dialog._increment()
        self.dialog.quantity_label.set_text.assert_called_with("4")

        for _ in range(5):
            self.dialog._decrement()
        self.dialog.quantity_label.set_text.assert_called_with("1")
        self.assertEqual(self.controller.store.get("a").quantity, 1)

    def test_hide_closes_editor(self):
        self.dialog.show_card(self.controller.detail.card)

        self.dialog._on_hide()

        self.assertFalse(self.controller.detail.is_open)
        # Escape afterwards has nothing left to close
        self.assertIsNone(self.controller.handle_cancel())

    def test_show_none_closes_dialog(self):
        self.dialog.show_card(None)
        self.dialog.close.assert_called_once()
        self.dialog.open.assert_not_called()


class TestCollectionPage(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.run_patcher = patch('mtg_tracker.ui.collection_page.run')
        self.run_mock = self.run_patcher.start()

        self.config_patcher = patch('mtg_tracker.ui.collection_page.config_manager')
        self.config_mock = self.config_patcher.start()
        self.config_mock.get_cards_file.return_value = "data/cards.json"

        self.controller = MagicMock()
        self.page = CollectionPage(self.controller)
        self.page.grid = MagicMock()

    def tearDown(self):
        self.run_patcher.stop()
        self.config_patcher.stop()

    async def test_load_failure_shows_message(self):
        self.run_mock.io_bound = AsyncMock(side_effect=FileNotFoundError("data/cards.json"))

        with self.assertLogs('mtg_tracker.ui.collection_page', level='ERROR'):
            await self.page.load_data()

        self.page.grid.show_error.assert_called_once_with(LOAD_ERROR_MESSAGE)
        self.page.grid.render.assert_not_called()
        self.controller.set_catalog.assert_not_called()

    async def test_load_success_hands_catalog_to_controller(self):
        catalog = Catalog([CardRecord(id="a", name="Sol Ring")])
        self.run_mock.io_bound = AsyncMock(return_value=catalog)

        await self.page.load_data()

        self.run_mock.io_bound.assert_awaited_once_with(Catalog.from_file, "data/cards.json")
        self.controller.set_catalog.assert_called_once_with(catalog)
        self.page.grid.show_error.assert_not_called()

    def test_escape_keydown_cancels(self):
        event = MagicMock()
        event.key.escape = True
        event.action.keydown = False
        self.page.handle_key(event)
        self.controller.handle_cancel.assert_not_called()

        event.action.keydown = True
        self.page.handle_key(event)
        self.controller.handle_cancel.assert_called_once()

    def test_collect_bar_follows_selection_count(self):
        self.page.collect_bar = MagicMock()
        self.page.selected_count_label = MagicMock()

        self.page.update_collect_bar(2)
        self.page.selected_count_label.set_text.assert_called_with("2")
        self.page.collect_bar.set_visibility.assert_called_with(True)

        self.page.update_collect_bar(0)
        self.page.collect_bar.set_visibility.assert_called_with(False)

    def test_update_stats(self):
        self.page.stat_labels = {key: MagicMock() for key in
                                 ('collected', 'total', 'completion', 'value', 'average', 'set_total')}
        self.page.progress = MagicMock()

        self.page.update_stats(CollectionStats(total=3, collected=1, owned_value=4.0, set_total=8.0))

        self.page.stat_labels['collected'].set_text.assert_called_with("1")
        self.page.stat_labels['completion'].set_text.assert_called_with("33%")
        self.page.stat_labels['value'].set_text.assert_called_with("$4.00")
        self.assertAlmostEqual(self.page.progress.set_value.call_args[0][0], 1 / 3)


if __name__ == '__main__':
    unittest.main()
