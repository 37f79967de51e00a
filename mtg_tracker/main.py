import logging

from nicegui import ui

from mtg_tracker.core.config import config_manager
from mtg_tracker.ui.collection_page import collection_page

logger = logging.getLogger(__name__)


@ui.page('/')
def index_page():
    ui.dark_mode(True)
    collection_page()


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    config_manager.ensure_file()
    logger.info(f"Serving {config_manager.get_set_name()} tracker on port {config_manager.get_port()}")
    ui.run(
        title='MTG Collection Tracker',
        host=config_manager.get_host(),
        port=config_manager.get_port(),
        storage_secret=config_manager.get_storage_secret(),
        reload=False,
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
