import asyncio
import unittest
from unittest.mock import MagicMock

from mtg_tracker.core.catalog import Catalog
from mtg_tracker.core.controller import (
    CollectionController, CANCEL_CLOSED_DETAIL, CANCEL_CLEARED_SELECTION,
)
from mtg_tracker.core.models import CardRecord


def make_catalog():
    return Catalog([
        CardRecord(id="a", name="Lightning Bolt", colors=["R"], price_usd="1.00"),
        CardRecord(id="b", name="Serra Angel", colors=["W"], price_usd="2.00"),
        CardRecord(id="c", name="Plains", type_line="Basic Land — Plains"),
    ])


class TestCollectionController(unittest.TestCase):
    def setUp(self):
        self.backend = {}
        self.controller = CollectionController(self.backend)
        self.controller.on_grid_change = MagicMock()
        self.controller.on_selection_change = MagicMock()
        self.controller.on_selection_cleared = MagicMock()
        self.controller.on_selection_count = MagicMock()
        self.controller.on_collected_change = MagicMock()
        self.controller.on_stats_change = MagicMock()
        self.controller.on_detail_change = MagicMock()
        self.controller.set_catalog(make_catalog())

    def test_set_catalog_renders_and_computes_stats(self):
        cards = self.controller.on_grid_change.call_args[0][0]
        self.assertEqual([c.id for c in cards], ["a", "b", "c"])
        self.assertEqual(self.controller.stats.total, 3)
        self.controller.on_stats_change.assert_called_with(self.controller.stats)

    def test_set_filter_recomputes_immediately(self):
        self.controller.set_filter('color', 'L')
        cards = self.controller.on_grid_change.call_args[0][0]
        self.assertEqual([c.id for c in cards], ["c"])

    def test_set_filter_rejects_unknown(self):
        with self.assertRaises(ValueError):
            self.controller.set_filter('artist', 'x')

    def test_toggle_select_notifies_single_tile(self):
        self.controller.on_grid_change.reset_mock()
        self.controller.toggle_select("a")
        self.controller.on_selection_change.assert_called_once_with("a")
        self.controller.on_selection_count.assert_called_with(1)
        self.controller.on_grid_change.assert_not_called()

    def test_bulk_collect(self):
        self.controller.toggle_select("a")
        self.controller.toggle_select("b")

        ids = self.controller.apply_bulk_collect()

        self.assertEqual(sorted(ids), ["a", "b"])
        self.assertTrue(self.controller.store.get("a").collected)
        self.assertTrue(self.controller.store.get("b").collected)
        self.assertEqual(self.controller.stats.collected, 2)
        self.assertEqual(len(self.controller.selection), 0)
        self.controller.on_selection_count.assert_called_with(0)
        self.assertEqual(self.controller.on_collected_change.call_count, 2)

    def test_open_detail_unknown_is_noop(self):
        self.assertFalse(self.controller.open_detail("zzz"))
        self.assertIsNone(self.controller.active_id)
        self.controller.on_detail_change.assert_not_called()

    def test_open_and_close_detail(self):
        self.assertTrue(self.controller.open_detail("b"))
        self.controller.on_detail_change.assert_called_with(self.controller.catalog.get("b"))
        self.controller.close_detail()
        self.assertIsNone(self.controller.active_id)
        self.controller.on_detail_change.assert_called_with(None)

    def test_detail_edit_updates_stats_and_tile(self):
        self.controller.open_detail("b")
        self.controller.set_collected(True)
        self.controller.increment_quantity()
        self.assertEqual(self.controller.stats.owned_value, 4.0)
        self.controller.on_collected_change.assert_called_with("b")

    def test_decrement_at_one_does_not_refresh(self):
        self.controller.open_detail("b")
        self.controller.on_stats_change.reset_mock()
        self.controller.decrement_quantity()
        self.controller.on_stats_change.assert_not_called()

    def test_cancel_closes_detail_before_clearing_selection(self):
        self.controller.toggle_select("a")
        self.controller.open_detail("b")

        self.assertEqual(self.controller.handle_cancel(), CANCEL_CLOSED_DETAIL)
        self.assertIsNone(self.controller.active_id)
        self.assertIn("a", self.controller.selection)

        self.assertEqual(self.controller.handle_cancel(), CANCEL_CLEARED_SELECTION)
        self.assertEqual(len(self.controller.selection), 0)
        self.controller.on_selection_cleared.assert_called_with(["a"])

        self.assertIsNone(self.controller.handle_cancel())

    def test_state_survives_reload(self):
        self.controller.open_detail("a")
        self.controller.set_collected(True)
        self.controller.set_notes("foil")

        reloaded = CollectionController(self.backend)
        self.assertTrue(reloaded.store.get("a").collected)
        self.assertEqual(reloaded.store.get("a").notes, "foil")


class TestControllerSearch(unittest.IsolatedAsyncioTestCase):
    async def test_search_is_debounced(self):
        controller = CollectionController({}, search_debounce=0.01)
        controller.set_catalog(make_catalog())
        controller.on_grid_change = MagicMock()

        controller.set_search("s")
        controller.set_search("se")
        controller.set_search("serra")
        controller.on_grid_change.assert_not_called()

        await asyncio.sleep(0.05)

        controller.on_grid_change.assert_called_once()
        cards = controller.on_grid_change.call_args[0][0]
        self.assertEqual([c.id for c in cards], ["b"])

    async def test_teardown_cancels_pending_search(self):
        controller = CollectionController({}, search_debounce=0.01)
        controller.set_catalog(make_catalog())
        controller.on_grid_change = MagicMock()

        controller.set_search("bolt")
        controller.teardown()
        await asyncio.sleep(0.05)

        controller.on_grid_change.assert_not_called()


if __name__ == '__main__':
    unittest.main()
