"""
Pytest configuration and fixtures for idleprofit tests.

The fixture game data is a small, self-contained slice of the game:
milking (gathering), cheesesmithing and brewing (production), alchemy
and enhancing, plus the teas and equipment that feed their bonuses.
"""

import pytest

from idleprofit.config.schema import EngineConfig, get_default_config
from idleprofit.engine.pricing import StaticPriceSource
from idleprofit.models import (
    ActionDefinition,
    CharacterState,
    ConsumableBuff,
    DrinkSlot,
    DropEntry,
    EquipmentItem,
    GameData,
    ItemCount,
    ItemDetail,
    PriceQuote,
)

SECOND = 1_000_000_000  # Nanoseconds

BREWING = "/action_types/brewing"
MILKING = "/action_types/milking"
ALCHEMY = "/action_types/alchemy"


def tea(hrid: str, buff_type: str, flat_boost: float = 0.0, ratio_boost: float = 0.0) -> ItemDetail:
    """Helper to create a drink item with one buff."""
    return ItemDetail(
        hrid=hrid,
        consumable_buffs=[
            ConsumableBuff(type_hrid=buff_type, flat_boost=flat_boost, ratio_boost=ratio_boost)
        ],
    )


def create_game_data() -> GameData:
    """Helper to create the fixture game data."""
    items = [
        ItemDetail(hrid="/items/coin", name="Coin"),
        ItemDetail(hrid="/items/milk", name="Milk", item_level=1),
        ItemDetail(hrid="/items/cheese", name="Cheese", item_level=1),
        ItemDetail(hrid="/items/coffee_bean", name="Coffee Bean", item_level=1),
        ItemDetail(hrid="/items/coffee", name="Coffee", item_level=1),
        ItemDetail(hrid="/items/enhancing_essence", name="Enhancing Essence"),
        ItemDetail(hrid="/items/milking_essence", name="Milking Essence"),
        ItemDetail(hrid="/items/small_treasure_chest", name="Small Treasure Chest"),
        ItemDetail(hrid="/items/catalyst_of_transmutation", name="Catalyst Of Transmutation"),
        ItemDetail(
            hrid="/items/cheese_brush",
            name="Cheese Brush",
            item_level=10,
            equipment_type="/equipment_types/milking_tool",
            decomposition_outputs=[ItemCount(item_hrid="/items/cheese", count=5)],
        ),
        ItemDetail(
            hrid="/items/shop_bucket",
            name="Shop Bucket",
            shop_coin_cost=500,
        ),
        tea("/items/efficiency_tea", "/buff_types/efficiency", 0.1),
        tea("/items/artisan_tea", "/buff_types/artisan", 0.1),
        tea("/items/brewing_tea", "/buff_types/brewing_level", 3),
        tea("/items/super_brewing_tea", "/buff_types/action_level", 6),
        tea("/items/gathering_tea", "/buff_types/gathering", 0.15),
        tea("/items/processing_tea", "/buff_types/processing", 0.15),
        tea("/items/gourmet_tea", "/buff_types/gourmet", 0.12),
        tea("/items/wisdom_tea", "/buff_types/wisdom", 0.12),
        tea("/items/catalytic_tea", "/buff_types/alchemy_success", ratio_boost=0.05),
    ]
    actions = [
        ActionDefinition(
            hrid="/actions/milking/cow",
            name="Cow",
            action_type=MILKING,
            base_time_cost=6 * SECOND,
            level_requirement=1,
            drop_table=[DropEntry(item_hrid="/items/milk", min_count=1, max_count=1, drop_rate=1.0)],
            essence_drop_table=[
                DropEntry(item_hrid="/items/milking_essence", drop_rate=0.1)
            ],
            rare_drop_table=[
                DropEntry(item_hrid="/items/small_treasure_chest", drop_rate=0.01)
            ],
        ),
        ActionDefinition(
            hrid="/actions/cheesesmithing/cheese",
            name="Cheese",
            action_type="/action_types/cheesesmithing",
            base_time_cost=10 * SECOND,
            level_requirement=1,
            input_items=[ItemCount(item_hrid="/items/milk", count=2)],
            output_items=[ItemCount(item_hrid="/items/cheese", count=1)],
        ),
        ActionDefinition(
            hrid="/actions/brewing/coffee",
            name="Coffee",
            action_type=BREWING,
            base_time_cost=6 * SECOND,
            level_requirement=10,
            input_items=[ItemCount(item_hrid="/items/coffee_bean", count=2)],
            output_items=[ItemCount(item_hrid="/items/coffee", count=1)],
        ),
        ActionDefinition(
            hrid="/actions/alchemy/transmute_cheese",
            name="Transmute Cheese",
            action_type=ALCHEMY,
            base_time_cost=20 * SECOND,
            level_requirement=1,
            input_items=[ItemCount(item_hrid="/items/cheese", count=1)],
            drop_table=[
                DropEntry(item_hrid="/items/coffee_bean", min_count=2, max_count=2, drop_rate=1.0)
            ],
            essence_drop_table=[
                DropEntry(item_hrid="/items/enhancing_essence", drop_rate=0.5)
            ],
            catalyst_item_hrid="/items/catalyst_of_transmutation",
            base_success_rate=0.5,
        ),
        ActionDefinition(
            hrid="/actions/enhancing/enhance",
            name="Enhance",
            action_type="/action_types/enhancing",
            base_time_cost=12 * SECOND,
        ),
    ]
    return GameData.from_lists(items=items, actions=actions)


def create_character(**kwargs) -> CharacterState:
    """Helper to create a character snapshot (skill levels default to 10)."""
    defaults = {
        "character_id": "test",
        "skill_levels": {
            "/skills/milking": 10,
            "/skills/cheesesmithing": 10,
            "/skills/brewing": 10,
            "/skills/alchemy": 10,
        },
    }
    defaults.update(kwargs)
    return CharacterState(**defaults)


def drinks(action_type: str, *item_hrids: str) -> dict[str, list[DrinkSlot]]:
    """Helper to build a drinks_by_action_type map."""
    return {action_type: [DrinkSlot(item_hrid=hrid) for hrid in item_hrids]}


def pouch(concentration: float, level: int = 0) -> dict[str, EquipmentItem]:
    """Helper to equip a Drink Concentration pouch."""
    return {
        "/item_locations/pouch": EquipmentItem(
            item_hrid="/items/guzzling_pouch",
            enhancement_level=level,
            slot_category="/equipment_types/pouch",
            noncombat_stats={"drinkConcentration": concentration},
        )
    }


PRICE_QUOTES = [
    PriceQuote(item_hrid="/items/milk", ask=30, bid=25),
    PriceQuote(item_hrid="/items/cheese", ask=100, bid=90),
    PriceQuote(item_hrid="/items/coffee_bean", ask=50, bid=45),
    PriceQuote(item_hrid="/items/coffee", ask=120, bid=100),
    PriceQuote(item_hrid="/items/milking_essence", ask=40, bid=30),
    PriceQuote(item_hrid="/items/enhancing_essence", ask=10, bid=8),
    PriceQuote(item_hrid="/items/efficiency_tea", ask=200, bid=150),
    PriceQuote(item_hrid="/items/artisan_tea", ask=300, bid=250),
    PriceQuote(item_hrid="/items/catalyst_of_transmutation", ask=1000, bid=900),
]


def create_prices() -> StaticPriceSource:
    """Helper to create market quotes for the fixture items."""
    return StaticPriceSource(PRICE_QUOTES)


@pytest.fixture
def config() -> EngineConfig:
    """Return the default engine configuration."""
    return get_default_config()


@pytest.fixture
def game_data() -> GameData:
    """Return the fixture game data."""
    return create_game_data()


@pytest.fixture
def character() -> CharacterState:
    """Return a character with no bonuses beyond skill levels."""
    return create_character()


@pytest.fixture
def prices() -> StaticPriceSource:
    """Return market quotes for the fixture items."""
    return create_prices()
