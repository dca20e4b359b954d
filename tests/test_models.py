"""
Unit tests for idleprofit data models.
"""

import pytest
from pydantic import ValidationError

from idleprofit.errors import UnknownActionError
from idleprofit.models import (
    # Items
    ConsumableBuff,
    DrinkSlot,
    DropEntry,
    EquipmentItem,
    ItemCount,
    ItemDetail,
    # Actions
    ActionDefinition,
    # Snapshots
    CharacterState,
    GameData,
    # Market
    PriceQuote,
    PriceSide,
    PricingMode,
)


class TestItems:
    """Tests for item models."""

    def test_drop_average_count(self) -> None:
        entry = DropEntry(item_hrid="/items/log", min_count=1, max_count=4)
        assert entry.average_count == 2.5

    def test_drop_defaults(self) -> None:
        entry = DropEntry(item_hrid="/items/log")
        assert entry.average_count == 1.0
        assert entry.drop_rate == 1.0

    def test_buff_magnitude(self) -> None:
        assert ConsumableBuff(type_hrid="/buff_types/efficiency", flat_boost=0.1).magnitude == 0.1
        assert ConsumableBuff(type_hrid="/buff_types/x", ratio_boost=0.05).magnitude == 0.05

    def test_display_name_from_hrid(self) -> None:
        assert ItemDetail(hrid="/items/super_brewing_tea").display_name == "Super Brewing Tea"
        assert ItemDetail(hrid="/items/x", name="Named").display_name == "Named"

    def test_item_count_rejects_negative(self) -> None:
        with pytest.raises(ValidationError):
            ItemCount(item_hrid="/items/log", count=-1)

    def test_items_are_frozen(self) -> None:
        item = EquipmentItem(item_hrid="/items/ring", enhancement_level=3)
        with pytest.raises(ValidationError):
            item.enhancement_level = 5

    def test_out_of_range_enhancement_accepted(self) -> None:
        item = EquipmentItem(item_hrid="/items/ring", enhancement_level=25)
        assert item.enhancement_level == 25


class TestActions:
    """Tests for action models."""

    def test_base_time_seconds(self) -> None:
        action = ActionDefinition(
            hrid="/actions/brewing/coffee",
            action_type="/action_types/brewing",
            base_time_cost=6_000_000_000,
        )
        assert action.base_time_seconds == 6.0

    def test_skill(self) -> None:
        action = ActionDefinition(hrid="/actions/brewing/coffee", action_type="/action_types/brewing")
        assert action.skill_name == "brewing"
        assert action.skill_hrid == "/skills/brewing"
        assert action.display_name == "Coffee"

    def test_bulk(self) -> None:
        action = ActionDefinition(
            hrid="/actions/crafting/bulk",
            action_type="/action_types/crafting",
            primary_item_hrid="/items/ore",
            bulk_multiplier=5,
        )
        assert action.is_bulk

    def test_success_rate_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ActionDefinition(
                hrid="/actions/alchemy/x",
                action_type="/action_types/alchemy",
                base_success_rate=1.5,
            )


class TestCharacterState:
    """Tests for character snapshots."""

    def test_empty_character(self) -> None:
        character = CharacterState()
        assert character.drinks_for("/action_types/brewing") == []
        assert character.skill_level("/skills/brewing") == 0
        assert character.skill_level("/skills/brewing", default=5) == 5
        assert not character.is_task("/actions/brewing/coffee")

    def test_drinks_and_tasks(self) -> None:
        character = CharacterState(
            drinks_by_action_type={
                "/action_types/brewing": [DrinkSlot(item_hrid="/items/efficiency_tea")]
            },
            task_action_hrids=frozenset({"/actions/brewing/coffee"}),
        )
        assert character.drinks_for("/action_types/brewing")[0].item_hrid == (
            "/items/efficiency_tea"
        )
        assert character.is_task("/actions/brewing/coffee")

    def test_structural_equality(self) -> None:
        first = CharacterState(skill_levels={"/skills/brewing": 10})
        second = CharacterState(skill_levels={"/skills/brewing": 10})
        assert first == second
        assert first != CharacterState(skill_levels={"/skills/brewing": 11})


class TestGameData:
    """Tests for game data lookups."""

    def test_hrids_filled_from_keys(self) -> None:
        game_data = GameData.model_validate(
            {
                "items": {"/items/milk": {"name": "Milk"}},
                "actions": {"/actions/milking/cow": {"action_type": "/action_types/milking"}},
            }
        )
        assert game_data.items["/items/milk"].hrid == "/items/milk"
        assert game_data.get_action("/actions/milking/cow").action_type == "/action_types/milking"

    def test_unknown_action(self) -> None:
        with pytest.raises(UnknownActionError) as exc_info:
            GameData().get_action("/actions/none")
        assert exc_info.value.action_hrid == "/actions/none"

    def test_unknown_item(self) -> None:
        game_data = GameData()
        assert game_data.get_item("/items/none") is None
        assert game_data.item_name("/items/rainbow_milk") == "Rainbow Milk"

    def test_find_processing_action(self, game_data) -> None:
        action = game_data.find_processing_action("/items/milk", ["/action_types/cheesesmithing"])
        assert action.hrid == "/actions/cheesesmithing/cheese"
        assert game_data.find_processing_action("/items/milk", ["/action_types/brewing"]) is None

    def test_find_producing_action(self, game_data) -> None:
        assert game_data.find_producing_action("/items/coffee").hrid == "/actions/brewing/coffee"
        assert game_data.find_producing_action("/items/milk") is None


class TestMarket:
    """Tests for market models."""

    @pytest.mark.parametrize(
        "mode,buy,sell",
        [
            (PricingMode.CONSERVATIVE, "ask", "bid"),
            (PricingMode.HYBRID, "ask", "ask"),
            (PricingMode.OPTIMISTIC, "bid", "ask"),
        ],
    )
    def test_mode_fields(self, mode: PricingMode, buy: str, sell: str) -> None:
        assert mode.field_for(PriceSide.BUY) == buy
        assert mode.field_for(PriceSide.SELL) == sell

    def test_quote_price(self) -> None:
        quote = PriceQuote(item_hrid="/items/milk", ask=30, bid=0)
        assert quote.price("ask") == 30
        assert quote.price("bid") is None

    def test_quote_missing_side(self) -> None:
        assert PriceQuote(item_hrid="/items/milk").price("ask") is None
