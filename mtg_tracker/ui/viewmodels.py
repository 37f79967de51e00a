from dataclasses import dataclass
from typing import List, Optional

from mtg_tracker.core.filtering import parse_price
from mtg_tracker.core.models import CardRecord, OwnershipRecord
from mtg_tracker.core.stats import format_money, format_price


@dataclass
class CardTileViewModel:
    card_id: str
    name: str
    type_line: str
    image_url: str
    market_text: str
    median_text: str
    collected: bool
    selected: bool

    @classmethod
    def build(cls, card: CardRecord, record: OwnershipRecord, selected: bool) -> "CardTileViewModel":
        return cls(
            card_id=card.id,
            name=card.name,
            type_line=card.type_line,
            image_url=card.image_normal or card.image_small,
            market_text=format_price(card.display_price),
            median_text=format_price(card.price_median),
            collected=record.collected,
            selected=selected,
        )


@dataclass
class PriceLink:
    text: str
    url: Optional[str] = None


def detail_price_links(card: CardRecord) -> List[PriceLink]:
    """Market and median parts of the detail price line, linked to TCGplayer when the card has a product id."""
    url = card.tcgplayer_url
    market = card.display_price
    if not market:
        parts = [PriceLink("No price data")]
    else:
        parts = [PriceLink(f"Market: {format_money(parse_price(market))}", url)]
    if url and card.price_median:
        parts.append(PriceLink(f"Median: {format_money(parse_price(card.price_median))}", url))
    return parts
