"""
Tests for material queue limits.
"""

import pytest

from conftest import ALCHEMY, BREWING, create_character, drinks

from idleprofit.engine.limits import MaterialLimitCalculator, QueueLimit, calculate_max_attempts
from idleprofit.models import ActionDefinition, ItemCount


def crafting_action(**kwargs) -> ActionDefinition:
    """Helper to create a crafting action."""
    defaults = {
        "hrid": "/actions/crafting/test",
        "action_type": "/action_types/crafting",
        "output_items": [ItemCount(item_hrid="/items/product")],
    }
    defaults.update(kwargs)
    return ActionDefinition(**defaults)


class TestCalculateMaxAttempts:
    """Tests for calculate_max_attempts."""

    def test_single_input(self):
        """Test attempts are available divided by requirement."""
        action = crafting_action(input_items=[ItemCount(item_hrid="/items/log", count=2)])

        limit = calculate_max_attempts({"/items/log": 9}, action)

        assert limit.max_attempts == 4
        assert limit.limiting_item_hrid == "/items/log"

    def test_artisan_reduces_requirement(self):
        """Test 1000 units at 3.7 each with 10% Artisan allow 300 attempts."""
        action = crafting_action(input_items=[ItemCount(item_hrid="/items/log", count=3.7)])

        limit = calculate_max_attempts({"/items/log": 1000}, action, artisan_percent=10)

        assert limit.max_attempts == 300

    def test_whole_quotient_not_lost_to_float_error(self):
        """Test a quotient that should be whole is not floored down."""
        action = crafting_action(input_items=[ItemCount(item_hrid="/items/log", count=4)])

        limit = calculate_max_attempts({"/items/log": 10}, action, artisan_percent=50)

        assert limit.max_attempts == 5

    def test_limiting_item(self):
        """Test the scarcest input limits the queue."""
        action = crafting_action(
            input_items=[
                ItemCount(item_hrid="/items/log", count=1),
                ItemCount(item_hrid="/items/bar", count=2),
            ]
        )

        limit = calculate_max_attempts({"/items/log": 100, "/items/bar": 10}, action)

        assert limit.max_attempts == 5
        assert limit.limiting_item_hrid == "/items/bar"

    def test_upgrade_item_not_discounted(self):
        """Test Artisan never reduces the upgrade item."""
        action = crafting_action(
            input_items=[ItemCount(item_hrid="/items/log", count=1)],
            upgrade_item_hrid="/items/brush",
        )

        limit = calculate_max_attempts(
            {"/items/log": 100, "/items/brush": 3}, action, artisan_percent=50
        )

        assert limit.max_attempts == 3
        assert limit.limiting_item_hrid == "/items/brush"

    def test_missing_item(self):
        """Test an input not in inventory allows no attempts."""
        action = crafting_action(input_items=[ItemCount(item_hrid="/items/log", count=1)])
        assert calculate_max_attempts({}, action).max_attempts == 0

    def test_bulk_action(self):
        """Test bulk actions are driven by their primary item."""
        action = crafting_action(
            input_items=[ItemCount(item_hrid="/items/log", count=1)],
            primary_item_hrid="/items/ore",
            bulk_multiplier=5,
        )

        limit = calculate_max_attempts({"/items/ore": 23, "/items/log": 0}, action)

        assert limit.max_attempts == 4
        assert limit.limiting_item_hrid == "/items/ore"

    def test_no_inputs_is_unbounded(self):
        """Test actions without requirements are explicitly unbounded."""
        limit = calculate_max_attempts({}, crafting_action())

        assert limit.is_unbounded
        assert limit == QueueLimit.unbounded()


class TestMaterialLimitCalculator:
    """Tests for MaterialLimitCalculator."""

    def test_uses_character_artisan(self, game_data):
        """Test the character's Artisan teas reduce requirements."""
        character = create_character(
            inventory={"/items/coffee_bean": 100},
            drinks_by_action_type=drinks(BREWING, "/items/artisan_tea"),
        )

        limit = MaterialLimitCalculator(game_data).max_attempts(
            character, "/actions/brewing/coffee"
        )

        # 100 / (2 * 0.9)
        assert limit.max_attempts == 55

    def test_artisan_ignored_for_alchemy(self, game_data):
        """Test Artisan teas do not stretch alchemy inputs."""
        character = create_character(
            inventory={"/items/cheese": 9},
            drinks_by_action_type=drinks(ALCHEMY, "/items/artisan_tea"),
        )

        limit = MaterialLimitCalculator(game_data).max_attempts(
            character, "/actions/alchemy/transmute_cheese"
        )

        assert limit.max_attempts == 9
        assert limit.limiting_item_hrid == "/items/cheese"

    def test_gathering_is_unbounded(self, game_data):
        """Test gathering actions have no material limit."""
        limit = MaterialLimitCalculator(game_data).max_attempts(
            create_character(), "/actions/milking/cow"
        )
        assert limit.is_unbounded

    def test_unknown_action(self, game_data):
        """Test unknown actions raise."""
        from idleprofit.errors import UnknownActionError

        with pytest.raises(UnknownActionError):
            MaterialLimitCalculator(game_data).max_attempts(create_character(), "/actions/x")
