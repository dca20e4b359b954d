"""
Market price models.

Prices come from an external market collaborator as ask/bid quotes per
item and enhancement level. A None field means the side is unknown.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PriceSide(str, Enum):
    """Which side of a trade a price is needed for."""

    BUY = "buy"
    SELL = "sell"


class PricingMode(str, Enum):
    """Which quote fields are used for buying and selling.

    conservative: buy at ask, sell at bid (instant trades both ways)
    hybrid:       buy at ask, sell at ask (instant buy, patient sell)
    optimistic:   buy at bid, sell at ask (patient trades both ways)
    """

    CONSERVATIVE = "conservative"
    HYBRID = "hybrid"
    OPTIMISTIC = "optimistic"

    def field_for(self, side: PriceSide) -> str:
        """Quote field ("ask" or "bid") used for a trade side."""
        buy_field, sell_field = _MODE_FIELDS[self]
        return buy_field if side == PriceSide.BUY else sell_field


_MODE_FIELDS = {
    PricingMode.CONSERVATIVE: ("ask", "bid"),
    PricingMode.HYBRID: ("ask", "ask"),
    PricingMode.OPTIMISTIC: ("bid", "ask"),
}


class PriceQuote(BaseModel):
    """Market quote for one item at one enhancement level."""

    model_config = ConfigDict(frozen=True)

    item_hrid: str
    enhancement_level: int = Field(default=0, ge=0)
    ask: Optional[float] = Field(default=None, description="Lowest sell order")
    bid: Optional[float] = Field(default=None, description="Highest buy order")

    def price(self, field: str) -> Optional[float]:
        """Value of a quote field, None when unknown or not positive."""
        value = self.ask if field == "ask" else self.bid
        if value is None or value <= 0:
            return None
        return value
