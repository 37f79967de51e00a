import re
import time
import logging
from typing import Any, Callable, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

SEARCH_URL = "https://api.scryfall.com/cards/search"
USER_AGENT = "MTGRevisedTracker/1.0"
# Scryfall asks for 50-100ms between requests
RATE_LIMIT_SECONDS = 0.15


class ScryfallError(Exception):
    pass


def card_from_api(card: Dict[str, Any]) -> Dict[str, Any]:
    """Projects a Scryfall card object onto the catalog file format."""
    image_uris = card.get('image_uris') or {}
    prices = card.get('prices') or {}
    return {
        "id": card['id'],
        "name": card.get('name'),
        "collector_number": card.get('collector_number'),
        "type_line": card.get('type_line'),
        "mana_cost": card.get('mana_cost') or '',
        "rarity": card.get('rarity'),
        "colors": card.get('colors') or [],
        "artist": card.get('artist'),
        "image_normal": image_uris.get('normal') or '',
        "image_small": image_uris.get('small') or '',
        "price_usd": prices.get('usd') or None,
        "tcgplayer_id": card.get('tcgplayer_id') or None,
    }


def collector_number_key(card: Dict[str, Any]) -> int:
    # Leading digits only: "12a" sorts with 12, numbers without digits go first
    m = re.match(r'\s*(\d+)', str(card.get('collector_number') or ''))
    return int(m.group(1)) if m else 0


class ScryfallService:
    def __init__(self, session: Optional[requests.Session] = None, delay: float = RATE_LIMIT_SECONDS,
                 sleep: Callable[[float], None] = time.sleep):
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': USER_AGENT})
        self.delay = delay
        self._sleep = sleep

    def _get_page(self, set_code: str, page: int) -> Dict[str, Any]:
        params = {"q": f"set:{set_code}", "order": "name", "page": page}
        response = self.session.get(SEARCH_URL, params=params)
        if response.status_code != 200:
            raise ScryfallError(f"HTTP {response.status_code}: {response.text}")
        try:
            return response.json()
        except ValueError as e:
            raise ScryfallError(f"Invalid JSON on page {page}: {e}") from e

    def fetch_set_cards(self, set_code: str) -> List[Dict[str, Any]]:
        """
        Pages through the search results for one set until Scryfall reports no
        more pages. Returns catalog records sorted by collector number.
        """
        all_cards: List[Dict[str, Any]] = []
        page = 1
        has_more = True

        logger.info(f"Fetching set {set_code.upper()} from Scryfall...")

        while has_more:
            logger.info(f"  Page {page}")
            data = self._get_page(set_code, page)
            cards = [card_from_api(c) for c in data.get('data', [])]
            all_cards.extend(cards)
            logger.info(f"  -> Got {len(cards)} cards (total: {len(all_cards)})")

            has_more = bool(data.get('has_more'))
            if has_more:
                self._sleep(self.delay)
                page += 1

        all_cards.sort(key=collector_number_key)
        return all_cards

