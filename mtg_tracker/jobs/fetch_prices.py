"""
Update the catalog file with TCGplayer market and median prices.

Only cards without a median price are fetched unless --force is given, so an
interrupted or rate-limited run can simply be started again.
"""

import sys
import argparse
import logging
from typing import List, Optional

from mtg_tracker.core.catalog import read_catalog_file, write_catalog_file
from mtg_tracker.core.config import config_manager
from mtg_tracker.services.tcgplayer_api import PriceUpdateResult, TcgplayerService

logger = logging.getLogger(__name__)


def run_fetch(path: str, force: bool = False, service: Optional[TcgplayerService] = None) -> PriceUpdateResult:
    service = service or TcgplayerService(delay=config_manager.get_tcgplayer_delay())
    cards = read_catalog_file(path)

    result = service.update_prices(cards, force=force)
    logger.info(f"Fetched: {result.fetched}, Failed: {result.failed}")

    # Written even after a rate limit so the fetched prices are kept
    write_catalog_file(cards, path)
    logger.info(f"Done! Prices saved to {path}")

    if result.rate_limited:
        logger.info("Tip: Wait a few minutes and re-run to fetch remaining prices.")
    return result


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--force",
        action="store_true",
        help="Re-fetch prices for every card, not only those missing a median price.",
    )
    parser.add_argument(
        "--cards",
        default=config_manager.get_cards_file(),
        help="Catalog file to update (default: %(default)s)",
    )
    args = parser.parse_args(argv)

    try:
        run_fetch(args.cards, force=args.force)
    except Exception as e:
        logger.error(f"Failed: {e}")
        print(f"Failed: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
