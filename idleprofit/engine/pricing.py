"""
Price resolution for profit calculations.

This module handles:
- The PriceSource protocol supplied by the market collaborator
- Choosing ask or bid according to the pricing mode
- The fallback valuation chain for items without a market quote
- Market tax and decomposition recovery values

Fallback chain (always in this order):
    1. Market quote (ask or bid per pricing mode)
    2. Crafting cost: recipe inputs at 0.9x (Artisan-equivalent) plus the
       upgrade item at full price, divided by output count; recursive
    3. Shop coin cost
    4. 0, and the item is recorded as missing

Steps 2 and 3 apply to unenhanced items only.

Coins are always worth exactly 1 and are never taxed.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Protocol, runtime_checkable

from idleprofit.config.defaults import MARKET_TAX
from idleprofit.config.schema import EngineConfig, get_default_config
from idleprofit.engine.enhancement import decomposition_essence_count
from idleprofit.models.game_data import GameData
from idleprofit.models.market import PriceQuote, PriceSide, PricingMode

logger = logging.getLogger(__name__)


@runtime_checkable
class PriceSource(Protocol):
    """Market price collaborator."""

    def get_price(self, item_hrid: str, enhancement_level: int = 0) -> Optional[PriceQuote]:
        """Current quote for an item, or None when the market has none."""
        ...

    async def refresh(self) -> None:
        """Fetch fresh prices in bulk."""
        ...


class StaticPriceSource:
    """In-memory price source backed by a fixed set of quotes.

    Example:
        prices = StaticPriceSource([PriceQuote(item_hrid="/items/milk", ask=25, bid=20)])
        prices.get_price("/items/milk")
    """

    def __init__(self, quotes: Optional[Iterable[PriceQuote]] = None):
        self._quotes: dict[tuple[str, int], PriceQuote] = {}
        for quote in quotes or []:
            self.add(quote)

    def add(self, quote: PriceQuote) -> None:
        self._quotes[(quote.item_hrid, quote.enhancement_level)] = quote

    def get_price(self, item_hrid: str, enhancement_level: int = 0) -> Optional[PriceQuote]:
        return self._quotes.get((item_hrid, enhancement_level))

    async def refresh(self) -> None:
        # Static quotes never change
        return None

    def __len__(self) -> int:
        return len(self._quotes)


def price_after_tax(price: float, tax_rate: float = MARKET_TAX) -> float:
    """Seller's proceeds after market tax."""
    return price * (1 - tax_rate)


class PriceOrigin(str, Enum):
    """Which step of the fallback chain produced a price."""

    MARKET = "market"
    CRAFTING = "crafting"
    SHOP = "shop"
    COIN = "coin"
    MISSING = "missing"


@dataclass(frozen=True)
class PriceResolution:
    """A resolved unit price and where it came from."""

    item_hrid: str
    price: float
    origin: PriceOrigin

    @property
    def is_missing(self) -> bool:
        return self.origin == PriceOrigin.MISSING


class PriceResolver:
    """Resolves item prices for one calculation.

    Items that fall through the whole fallback chain are collected in
    `missing` so the result can flag them.
    """

    def __init__(
        self,
        game_data: GameData,
        source: PriceSource,
        config: Optional[EngineConfig] = None,
        mode: Optional[PricingMode] = None,
    ):
        """Initialize the resolver.

        Args:
            game_data: Item and action definitions (recipes, shop costs)
            source: Market price collaborator
            config: Engine configuration (uses defaults if None)
            mode: Pricing mode (configured mode if None)
        """
        self.game_data = game_data
        self.source = source
        self.config = config or get_default_config()
        self.mode = PricingMode(mode or self.config.market.pricing_mode)
        self.missing: list[str] = []

    @property
    def tax_rate(self) -> float:
        return self.config.market.tax_rate

    def market_price(
        self, item_hrid: str, side: PriceSide, enhancement_level: int = 0
    ) -> Optional[float]:
        """Market price for a side, None when the quote is absent."""
        quote = self.source.get_price(item_hrid, enhancement_level)
        if quote is None:
            return None
        return quote.price(self.mode.field_for(side))

    def resolve(
        self, item_hrid: str, side: PriceSide, enhancement_level: int = 0
    ) -> PriceResolution:
        """Resolve a unit price through the fallback chain.

        Args:
            item_hrid: Item to price
            side: BUY for costs, SELL for revenue
            enhancement_level: Enhancement level of the item

        Returns:
            PriceResolution (price 0 with origin MISSING when nothing applies)
        """
        missing: list[str] = []
        resolution = self._resolve(item_hrid, side, enhancement_level, set(), missing)
        for hrid in missing:
            if hrid not in self.missing:
                self.missing.append(hrid)
        return resolution

    def buy_price(self, item_hrid: str, enhancement_level: int = 0) -> float:
        return self.resolve(item_hrid, PriceSide.BUY, enhancement_level).price

    def sell_price(self, item_hrid: str, enhancement_level: int = 0) -> float:
        return self.resolve(item_hrid, PriceSide.SELL, enhancement_level).price

    def sale_value(self, item_hrid: str, enhancement_level: int = 0) -> PriceResolution:
        """Unit proceeds from selling an item (after tax, coins untaxed)."""
        resolution = self.resolve(item_hrid, PriceSide.SELL, enhancement_level)
        if resolution.origin == PriceOrigin.COIN:
            return resolution
        return PriceResolution(
            item_hrid,
            price_after_tax(resolution.price, self.tax_rate),
            resolution.origin,
        )

    def crafting_cost(self, item_hrid: str) -> Optional[float]:
        """Cost to craft one unit from its recipe, None without a recipe."""
        missing: list[str] = []
        cost = self._crafting_cost(item_hrid, set(), missing)
        for hrid in missing:
            if hrid not in self.missing:
                self.missing.append(hrid)
        return cost

    def decomposition_value(self, item_hrid: str, enhancement_level: int) -> float:
        """Proceeds from decomposing one enhanced item.

        Base decomposition outputs plus recovered Enhancing Essence, each
        at its after-tax sale value. Unenhanced items recover nothing.
        """
        if enhancement_level <= 0:
            return 0.0

        item = self.game_data.get_item(item_hrid)
        item_level = item.item_level if item is not None else 0
        value = 0.0

        if item is not None:
            for output in item.decomposition_outputs:
                value += self.sale_value(output.item_hrid).price * output.count

        essence = decomposition_essence_count(item_level, enhancement_level)
        if essence:
            value += self.sale_value(self.config.market.essence_hrid).price * essence

        return value

    def _resolve(
        self,
        item_hrid: str,
        side: PriceSide,
        enhancement_level: int,
        visiting: set[str],
        missing: list[str],
    ) -> PriceResolution:
        if item_hrid == self.config.market.coin_hrid:
            return PriceResolution(item_hrid, 1.0, PriceOrigin.COIN)

        price = self.market_price(item_hrid, side, enhancement_level)
        if price is not None:
            return PriceResolution(item_hrid, price, PriceOrigin.MARKET)

        # Recipes and shops only ever produce +0 items
        if enhancement_level == 0:
            crafting_missing: list[str] = []
            cost = self._crafting_cost(item_hrid, visiting, crafting_missing)
            if cost is not None and cost > 0:
                missing.extend(crafting_missing)
                logger.debug(
                    "No market price for %s; using crafting cost %.2f", item_hrid, cost
                )
                return PriceResolution(item_hrid, cost, PriceOrigin.CRAFTING)

            item = self.game_data.get_item(item_hrid)
            if item is not None and item.shop_coin_cost:
                logger.debug("No market price for %s; using shop cost", item_hrid)
                return PriceResolution(item_hrid, item.shop_coin_cost, PriceOrigin.SHOP)

        logger.debug("No price available for %s +%d", item_hrid, enhancement_level)
        missing.append(item_hrid)
        return PriceResolution(item_hrid, 0.0, PriceOrigin.MISSING)

    def _crafting_cost(
        self, item_hrid: str, visiting: set[str], missing: list[str]
    ) -> Optional[float]:
        if item_hrid in visiting:
            return None

        action = self.game_data.find_producing_action(item_hrid)
        if action is None:
            return None

        visiting = visiting | {item_hrid}
        discount = self.config.market.crafting_material_discount

        input_cost = 0.0
        for input_item in action.input_items:
            unit = self._resolve(
                input_item.item_hrid,
                PriceSide.BUY,
                input_item.enhancement_level,
                visiting,
                missing,
            )
            input_cost += unit.price * input_item.count

        total = input_cost * discount
        if action.upgrade_item_hrid:
            total += self._resolve(
                action.upgrade_item_hrid, PriceSide.BUY, 0, visiting, missing
            ).price

        output_count = next(
            (o.count for o in action.output_items if o.item_hrid == item_hrid), 1.0
        )
        if output_count <= 0:
            return None
        return total / output_count
