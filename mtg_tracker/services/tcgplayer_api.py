import time
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

PRICE_POINTS_URL = "https://mpapi.tcgplayer.com/v2/product/{product_id}/pricepoints"
HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7)',
    'Accept': 'application/json',
}
# TCGplayer starts answering 403 well before any documented limit
RATE_LIMIT_SECONDS = 0.5
PROGRESS_EVERY = 10


class TcgplayerError(Exception):
    pass


class RateLimitedError(TcgplayerError):
    pass


@dataclass
class PriceUpdateResult:
    candidates: int = 0
    fetched: int = 0
    failed: int = 0
    rate_limited: bool = False


def select_candidates(cards: List[Dict[str, Any]], force: bool = False) -> List[Dict[str, Any]]:
    """Cards with a TCGplayer product id, limited to those still missing a median price unless forced."""
    res = []
    for card in cards:
        if not card.get('tcgplayer_id'):
            continue
        if force or not card.get('price_median'):
            res.append(card)
    return res


def price_text(value: Any) -> str:
    """Price as text, with whole numbers written without a decimal part (5.0 -> "5")."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def apply_price_points(card: Dict[str, Any], points: List[Dict[str, Any]]) -> bool:
    """Copies the 'Normal' printing's prices onto a catalog card. Returns False when there is none."""
    normal = next((p for p in points if p.get('printingType') == 'Normal'), None)
    if normal is None:
        return False
    market = normal.get('marketPrice')
    median = normal.get('listedMedianPrice')
    card['price_market'] = price_text(market) if market else card.get('price_usd')
    card['price_median'] = price_text(median) if median else None
    return True


def fill_market_fallback(cards: List[Dict[str, Any]]):
    for card in cards:
        if not card.get('price_market'):
            card['price_market'] = card.get('price_usd') or None


class TcgplayerService:
    def __init__(self, session: Optional[requests.Session] = None, delay: float = RATE_LIMIT_SECONDS,
                 sleep: Callable[[float], None] = time.sleep):
        self.session = session or requests.Session()
        self.session.headers.update(HEADERS)
        self.delay = delay
        self._sleep = sleep

    def fetch_price_points(self, product_id: int) -> List[Dict[str, Any]]:
        url = PRICE_POINTS_URL.format(product_id=product_id)
        response = self.session.get(url)
        if response.status_code == 403:
            raise RateLimitedError("RATE_LIMITED")
        if response.status_code != 200:
            raise TcgplayerError(f"HTTP {response.status_code}")
        try:
            data = response.json()
        except ValueError as e:
            raise TcgplayerError("Invalid JSON") from e
        if not isinstance(data, list):
            raise TcgplayerError("Unexpected response shape")
        return data

    def update_prices(self, cards: List[Dict[str, Any]], force: bool = False) -> PriceUpdateResult:
        """
        Fetches prices for the candidate cards in place.

        A rate-limit answer stops all further requests; the remaining
        candidates are counted as failed so a later run picks them up.
        Every card ends up with a market price fallback afterwards.
        """
        to_fetch = select_candidates(cards, force)
        result = PriceUpdateResult(candidates=len(to_fetch))

        logger.info(f"TCGplayer price fetch: {len(to_fetch)} cards to update ({len(cards)} total)")
        if not force:
            logger.info("  (use --force to re-fetch all prices)")

        for card in to_fetch:
            if result.rate_limited:
                result.failed += 1
                continue

            try:
                points = self.fetch_price_points(card['tcgplayer_id'])
                apply_price_points(card, points)
                result.fetched += 1
                if result.fetched % PROGRESS_EVERY == 0:
                    logger.info(f"  {result.fetched}/{len(to_fetch)} fetched...")
            except RateLimitedError:
                logger.warning(f"Rate limited after {result.fetched} requests. Saving progress...")
                result.rate_limited = True
                result.failed += 1
            except (TcgplayerError, requests.RequestException) as e:
                logger.error(f"Price fetch failed for {card.get('name')} ({card['tcgplayer_id']}): {e}")
                result.failed += 1
            except Exception as e:
                logger.error(f"Unexpected price data for {card.get('name')} ({card['tcgplayer_id']}): {e}")
                result.failed += 1

            self._sleep(self.delay)

        fill_market_fallback(cards)
        return result
