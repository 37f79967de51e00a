from nicegui import ui, run, app, events
import logging

from mtg_tracker.core.catalog import Catalog
from mtg_tracker.core.config import config_manager
from mtg_tracker.core.controller import CollectionController
from mtg_tracker.core.filtering import COLOR_OPTIONS, RARITY_OPTIONS, STATUS_OPTIONS, SORT_OPTIONS, STATUS_ALL
from mtg_tracker.core.stats import CollectionStats, format_money, format_percent
from mtg_tracker.ui.detail_dialog import DetailDialog
from mtg_tracker.ui.grid import GridRenderer

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = 'Failed to load card data. Run: mtg-fetch-cards'

PAGE_CSS = '''
<style>
.card-item .card-select-btn {
    position: absolute; top: 6px; left: 6px; width: 26px; height: 26px;
    border-radius: 50%; border: 2px solid white; background: rgba(0,0,0,.5);
    color: white; display: flex; align-items: center; justify-content: center;
    font-weight: bold; z-index: 2;
}
.card-item.selected { outline: 3px solid #3b82f6; }
.card-item.selected .card-select-btn { background: #3b82f6; }
.card-item .card-collected-badge {
    position: absolute; top: 6px; right: 6px; width: 26px; height: 26px;
    border-radius: 50%; background: #16a34a; color: white;
    display: none; align-items: center; justify-content: center; font-weight: bold;
}
.card-item.collected .card-collected-badge { display: flex; }
.card-item:not(.collected) img { filter: grayscale(60%); opacity: .75; }
.price-link { color: inherit; text-decoration: underline; }
</style>
'''


class CollectionPage:
    def __init__(self, controller: CollectionController):
        self.controller = controller
        self.grid = GridRenderer(controller)
        self.detail_dialog = None

        self.stat_labels = {}
        self.progress = None
        self.collect_bar = None
        self.selected_count_label = None

    def wire(self):
        c = self.controller
        c.on_grid_change = self.grid.render
        c.on_selection_change = self.grid.update_selection
        c.on_selection_cleared = self.grid.clear_selection
        c.on_selection_count = self.update_collect_bar
        c.on_collected_change = self.grid.update_collected
        c.on_stats_change = self.update_stats
        c.on_detail_change = self.detail_dialog.show_card

    async def load_data(self):
        path = config_manager.get_cards_file()
        try:
            catalog = await run.io_bound(Catalog.from_file, path)
        except Exception as e:
            logger.error(f"Failed to load card data from {path}: {e}")
            self.grid.show_error(LOAD_ERROR_MESSAGE)
            return
        self.controller.set_catalog(catalog)

    def update_stats(self, stats: CollectionStats):
        self.stat_labels['collected'].set_text(str(stats.collected))
        self.stat_labels['total'].set_text(str(stats.total))
        self.stat_labels['completion'].set_text(format_percent(stats.completion))
        self.stat_labels['value'].set_text(format_money(stats.owned_value))
        self.stat_labels['average'].set_text(format_money(stats.average_price))
        self.stat_labels['set_total'].set_text(format_money(stats.set_total))
        self.progress.set_value(stats.completion / 100)

    def update_collect_bar(self, count: int):
        self.selected_count_label.set_text(str(count))
        self.collect_bar.set_visibility(count > 0)

    def handle_key(self, e: events.KeyEventArguments):
        if e.key.escape and e.action.keydown:
            self.controller.handle_cancel()

    # --- UI Renderers ---

    def render_header(self):
        with ui.column().classes('w-full gap-2 q-mb-md p-4 bg-gray-900 rounded-lg border border-gray-800'):
            with ui.row().classes('w-full items-end justify-between'):
                with ui.column().classes('gap-0'):
                    ui.label(config_manager.get_set_name()).classes('text-h5 text-white')
                    with ui.row().classes('gap-1 text-gray-400'):
                        self.stat_labels['collected'] = ui.label('0')
                        ui.label('/')
                        self.stat_labels['total'] = ui.label('0')
                        ui.label('collected')
                        self.stat_labels['completion'] = ui.label('0%').classes('q-ml-sm')

                with ui.row().classes('gap-6'):
                    for key, title in (('value', 'Collection Value'), ('average', 'Avg Card Price'), ('set_total', 'Set Total')):
                        with ui.column().classes('gap-0 items-end'):
                            ui.label(title).classes('text-xs text-gray-500 uppercase')
                            self.stat_labels[key] = ui.label('$0.00').classes('text-lg text-green-400 font-bold')

            self.progress = ui.linear_progress(value=0, show_value=False).props('color=positive')

    def render_filters(self):
        c = self.controller
        with ui.row().classes('w-full items-center gap-4 q-mb-md'):
            ui.input(placeholder='Search cards...', on_change=lambda e: c.set_search(e.value)) \
                .props('clearable icon=search').classes('w-64')
            ui.select(COLOR_OPTIONS, value='', label='Color',
                      on_change=lambda e: c.set_filter('color', e.value)).classes('min-w-[150px]')
            ui.select(RARITY_OPTIONS, value='', label='Rarity',
                      on_change=lambda e: c.set_filter('rarity', e.value)).classes('min-w-[150px]')
            ui.select(STATUS_OPTIONS, value=STATUS_ALL, label='Status',
                      on_change=lambda e: c.set_filter('status', e.value)).classes('min-w-[150px]')
            ui.select(SORT_OPTIONS, value='', label='Sort',
                      on_change=lambda e: c.set_filter('sort', e.value)).classes('min-w-[180px]')

    def render_collect_bar(self):
        with ui.page_sticky(position='bottom', y_offset=16):
            with ui.row().classes('items-center gap-4 p-3 bg-gray-800 rounded-lg shadow-lg') as bar:
                with ui.row().classes('gap-1 text-white'):
                    self.selected_count_label = ui.label('0')
                    ui.label('selected')
                ui.button('Mark Collected', on_click=self.controller.apply_bulk_collect).props('color=positive')
                ui.button('Cancel', on_click=self.controller.clear_selection).props('flat color=grey')
        self.collect_bar = bar
        self.collect_bar.set_visibility(False)

    def build_ui(self):
        ui.add_head_html(PAGE_CSS)
        self.detail_dialog = DetailDialog(self.controller)
        self.wire()

        self.render_header()
        self.render_filters()
        self.grid.build()
        self.render_collect_bar()

        ui.keyboard(on_key=self.handle_key, ignore=[])
        ui.context.client.on_disconnect(self.controller.teardown)
        ui.timer(0.1, self.load_data, once=True)


def collection_page():
    controller = CollectionController(
        app.storage.user,
        storage_key=config_manager.get_storage_key(),
        search_debounce=config_manager.get_search_debounce(),
    )
    page = CollectionPage(controller)
    page.build_ui()
