from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONDITIONS = [
    "Near Mint",
    "Lightly Played",
    "Moderately Played",
    "Heavily Played",
    "Damaged",
]
DEFAULT_CONDITION = "Near Mint"


class CardRecord(BaseModel):
    """A single catalog entry, as written by the catalog ingestion job."""
    model_config = ConfigDict(frozen=True, extra='ignore', coerce_numbers_to_str=True)

    id: str
    name: str = ""
    collector_number: str = ""
    type_line: str = ""
    mana_cost: str = ""
    rarity: str = ""
    colors: List[str] = Field(default_factory=list)
    artist: str = ""
    image_normal: str = ""
    image_small: str = ""
    price_usd: Optional[str] = None
    price_market: Optional[str] = None
    price_median: Optional[str] = None
    tcgplayer_id: Optional[int] = None

    @field_validator(
        "name", "collector_number", "type_line", "mana_cost", "rarity", "artist",
        "image_normal", "image_small", mode="before",
    )
    @classmethod
    def _none_as_empty(cls, v):
        return "" if v is None else v

    @field_validator("colors", mode="before")
    @classmethod
    def _none_as_colorless(cls, v):
        return [] if v is None else v

    @property
    def display_price(self) -> Optional[str]:
        # Market price when the price job has run, otherwise the Scryfall snapshot
        return self.price_market or self.price_usd

    @property
    def tcgplayer_url(self) -> Optional[str]:
        if not self.tcgplayer_id:
            return None
        return f"https://www.tcgplayer.com/product/{self.tcgplayer_id}"


class OwnershipRecord(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    collected: bool = False
    condition: str = DEFAULT_CONDITION
    quantity: int = Field(default=1, ge=1)
    notes: str = ""
