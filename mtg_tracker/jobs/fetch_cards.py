"""
Download the card list of the tracked set from Scryfall into the catalog file.

Run this before starting the tracker, and again whenever the catalog should be rebuilt.
"""

import sys
import argparse
import logging
from typing import List, Optional

from mtg_tracker.core.catalog import write_catalog_file
from mtg_tracker.core.config import config_manager
from mtg_tracker.services.scryfall_api import ScryfallService

logger = logging.getLogger(__name__)


def run_fetch(set_code: str, output: str, service: Optional[ScryfallService] = None) -> int:
    """Fetches every card of the set and overwrites the catalog file. Returns the card count."""
    service = service or ScryfallService(delay=config_manager.get_scryfall_delay())
    cards = service.fetch_set_cards(set_code)
    write_catalog_file(cards, output)
    logger.info(f"Done! {len(cards)} cards saved to {output}")
    return len(cards)


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--set",
        dest="set_code",
        default=config_manager.get_set_code(),
        help="Scryfall set code to fetch (default: %(default)s)",
    )
    parser.add_argument(
        "--output",
        default=config_manager.get_cards_file(),
        help="Catalog file to write (default: %(default)s)",
    )
    args = parser.parse_args(argv)

    try:
        run_fetch(args.set_code, args.output)
    except Exception as e:
        logger.error(f"Failed to fetch cards: {e}")
        print(f"Failed to fetch cards: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
