"""
Tests for price resolution.

Tests cover:
- Pricing modes (ask/bid selection)
- The fallback chain: market, crafting cost, shop, missing
- Coin handling and market tax
- Decomposition value of enhanced items
"""

import pytest

from conftest import SECOND, create_game_data

from idleprofit.config.schema import EngineConfig, MarketConfig
from idleprofit.engine.pricing import (
    PriceOrigin,
    PriceResolver,
    PriceSource,
    StaticPriceSource,
    price_after_tax,
)
from idleprofit.models import ActionDefinition, GameData, ItemCount, PriceQuote
from idleprofit.models.market import PriceSide, PricingMode


class TestStaticPriceSource:
    """Tests for StaticPriceSource."""

    def test_lookup_by_enhancement_level(self):
        """Test quotes are keyed by item and enhancement level."""
        source = StaticPriceSource(
            [
                PriceQuote(item_hrid="/items/brush", ask=100),
                PriceQuote(item_hrid="/items/brush", enhancement_level=5, ask=900),
            ]
        )
        assert source.get_price("/items/brush").ask == 100
        assert source.get_price("/items/brush", 5).ask == 900
        assert source.get_price("/items/brush", 3) is None
        assert len(source) == 2

    def test_satisfies_protocol(self):
        """Test the static source is a PriceSource."""
        assert isinstance(StaticPriceSource(), PriceSource)


class TestPricingModes:
    """Tests for ask/bid selection per pricing mode."""

    @pytest.mark.parametrize(
        "mode,buy,sell",
        [
            (PricingMode.CONSERVATIVE, 30, 25),
            (PricingMode.HYBRID, 30, 30),
            (PricingMode.OPTIMISTIC, 25, 30),
        ],
    )
    def test_modes(self, game_data, prices, mode, buy, sell):
        """Test each mode picks the documented quote fields."""
        resolver = PriceResolver(game_data, prices, mode=mode)
        assert resolver.buy_price("/items/milk") == buy
        assert resolver.sell_price("/items/milk") == sell

    def test_mode_from_config(self, game_data, prices):
        """Test the configured pricing mode is used by default."""
        config = EngineConfig(market=MarketConfig(pricing_mode="optimistic"))
        resolver = PriceResolver(game_data, prices, config)
        assert resolver.mode == PricingMode.OPTIMISTIC

    def test_non_positive_quote_is_absent(self, game_data):
        """Test a zero quote falls through to the fallback chain."""
        source = StaticPriceSource([PriceQuote(item_hrid="/items/shop_bucket", ask=0, bid=0)])
        resolution = PriceResolver(game_data, source).resolve("/items/shop_bucket", PriceSide.BUY)
        assert resolution.origin == PriceOrigin.SHOP


class TestFallbackChain:
    """Tests for the price fallback chain."""

    def test_market_price(self, game_data, prices):
        """Test a market quote is used first."""
        resolution = PriceResolver(game_data, prices).resolve("/items/cheese", PriceSide.BUY)
        assert resolution.price == 100
        assert resolution.origin == PriceOrigin.MARKET

    def test_coin(self, game_data, prices):
        """Test coins are always worth 1."""
        resolver = PriceResolver(game_data, prices)
        resolution = resolver.resolve("/items/coin", PriceSide.SELL)
        assert resolution.price == 1.0
        assert resolution.origin == PriceOrigin.COIN

    def test_crafting_cost(self, game_data):
        """Test unquoted items are valued at discounted recipe cost."""
        source = StaticPriceSource([PriceQuote(item_hrid="/items/milk", ask=30, bid=25)])
        resolver = PriceResolver(game_data, source)

        resolution = resolver.resolve("/items/cheese", PriceSide.BUY)

        # 2 milk * 30 * 0.9
        assert resolution.price == pytest.approx(54)
        assert resolution.origin == PriceOrigin.CRAFTING
        assert resolver.missing == []

    def test_crafting_cost_upgrade_at_full_price(self):
        """Test the upgrade item is not discounted and outputs divide cost."""
        game_data = GameData.from_lists(
            actions=[
                ActionDefinition(
                    hrid="/actions/crafting/fancy_brush",
                    action_type="/action_types/crafting",
                    base_time_cost=10 * SECOND,
                    input_items=[ItemCount(item_hrid="/items/plank", count=4)],
                    output_items=[ItemCount(item_hrid="/items/fancy_brush", count=2)],
                    upgrade_item_hrid="/items/brush",
                )
            ]
        )
        source = StaticPriceSource(
            [
                PriceQuote(item_hrid="/items/plank", ask=10, bid=8),
                PriceQuote(item_hrid="/items/brush", ask=100, bid=90),
            ]
        )

        cost = PriceResolver(game_data, source).crafting_cost("/items/fancy_brush")

        # (4 * 10 * 0.9 + 100) / 2
        assert cost == pytest.approx(68)

    def test_no_recipe(self, game_data, prices):
        """Test items without a producing action have no crafting cost."""
        assert PriceResolver(game_data, prices).crafting_cost("/items/milk") is None

    def test_shop_cost(self, game_data, prices):
        """Test shop coin cost is used when market and recipe fail."""
        resolution = PriceResolver(game_data, prices).resolve("/items/shop_bucket", PriceSide.BUY)
        assert resolution.price == 500
        assert resolution.origin == PriceOrigin.SHOP

    def test_enhanced_item_skips_recipe_and_shop(self, game_data):
        """Test an unquoted enhanced item is not valued as its +0 recipe or shop cost."""
        source = StaticPriceSource([PriceQuote(item_hrid="/items/milk", ask=30, bid=25)])
        resolver = PriceResolver(game_data, source)

        crafted = resolver.resolve("/items/cheese", PriceSide.BUY, enhancement_level=5)
        bought = resolver.resolve("/items/shop_bucket", PriceSide.BUY, enhancement_level=2)

        assert crafted.is_missing
        assert bought.is_missing
        assert resolver.missing == ["/items/cheese", "/items/shop_bucket"]

    def test_missing(self, game_data, prices):
        """Test unpriceable items resolve to 0 and are recorded."""
        resolver = PriceResolver(game_data, prices)

        resolution = resolver.resolve("/items/small_treasure_chest", PriceSide.SELL)

        assert resolution.price == 0.0
        assert resolution.is_missing
        assert resolver.missing == ["/items/small_treasure_chest"]

    def test_missing_recorded_once(self, game_data, prices):
        """Test repeated lookups do not duplicate missing items."""
        resolver = PriceResolver(game_data, prices)
        resolver.resolve("/items/small_treasure_chest", PriceSide.SELL)
        resolver.resolve("/items/small_treasure_chest", PriceSide.BUY)
        assert resolver.missing == ["/items/small_treasure_chest"]

    def test_crafting_with_unpriced_inputs(self, game_data):
        """Test a zero crafting cost falls through and only the item is missing."""
        resolver = PriceResolver(game_data, StaticPriceSource())

        resolution = resolver.resolve("/items/cheese", PriceSide.BUY)

        assert resolution.is_missing
        assert resolver.missing == ["/items/cheese"]

    def test_recipe_cycle_terminates(self):
        """Test mutually-crafted items do not recurse forever."""
        game_data = GameData.from_lists(
            actions=[
                ActionDefinition(
                    hrid="/actions/crafting/a",
                    action_type="/action_types/crafting",
                    input_items=[ItemCount(item_hrid="/items/b")],
                    output_items=[ItemCount(item_hrid="/items/a")],
                ),
                ActionDefinition(
                    hrid="/actions/crafting/b",
                    action_type="/action_types/crafting",
                    input_items=[ItemCount(item_hrid="/items/a")],
                    output_items=[ItemCount(item_hrid="/items/b")],
                ),
            ]
        )
        resolver = PriceResolver(game_data, StaticPriceSource())

        resolution = resolver.resolve("/items/a", PriceSide.BUY)

        assert resolution.is_missing
        assert "/items/a" in resolver.missing


class TestTax:
    """Tests for market tax."""

    def test_price_after_tax(self):
        """Test the default 2% tax."""
        assert price_after_tax(100) == pytest.approx(98)

    def test_sale_value(self, game_data, prices):
        """Test sale value deducts tax from the sell price."""
        resolution = PriceResolver(game_data, prices).sale_value("/items/milk")
        assert resolution.price == pytest.approx(24.5)

    def test_coin_untaxed(self, game_data, prices):
        """Test coins are never taxed."""
        assert PriceResolver(game_data, prices).sale_value("/items/coin").price == 1.0

    def test_custom_tax(self, game_data, prices):
        """Test a configured tax rate is applied."""
        config = EngineConfig(market=MarketConfig(tax_rate=0.1))
        resolution = PriceResolver(game_data, prices, config).sale_value("/items/milk")
        assert resolution.price == pytest.approx(22.5)


class TestDecompositionValue:
    """Tests for decomposition_value."""

    def test_unenhanced(self, game_data, prices):
        """Test unenhanced items recover nothing."""
        assert PriceResolver(game_data, prices).decomposition_value("/items/cheese_brush", 0) == 0

    def test_enhanced(self, prices):
        """Test outputs and essence are valued after tax."""
        resolver = PriceResolver(create_game_data(), prices)

        value = resolver.decomposition_value("/items/cheese_brush", 1)

        # 5 cheese at 90 * 0.98, plus 3 essence at 8 * 0.98
        assert value == pytest.approx(5 * 88.2 + 3 * 7.84)
