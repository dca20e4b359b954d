"""
Enhancement scaling for equipment stats.

Enhanced equipment grants more of each stat. Two scaling rules exist:

    table  (default):  scaled = base * (1 + bonus_table[level] * slot_multiplier)
    linear:            scaled = base + per_item_bonus[stat] * level

The slot multiplier is 5 for accessory-like slots (neck, ring, earrings,
back, trinket, charm) and 1 for every other slot. Levels outside [0, 20]
scale as level 0 and never raise.

Decomposing an enhanced item also recovers Enhancing Essence:

    essence = round(2 * (0.5 + 0.1 * 1.05^item_level) * 2^enhancement_level)
"""

import math
from typing import Optional

from idleprofit.config.defaults import (
    ACCESSORY_SLOT_MULTIPLIER,
    ACCESSORY_SLOTS,
    ENHANCEMENT_BONUSES,
    MAX_ENHANCEMENT_LEVEL,
)
from idleprofit.config.schema import EngineConfig, ScalingMode, get_default_config
from idleprofit.models.items import EquipmentItem


def is_valid_level(level: int) -> bool:
    return 0 <= level <= MAX_ENHANCEMENT_LEVEL


def slot_multiplier(
    slot_category: str,
    accessory_slots: Optional[list[str]] = None,
    accessory_multiplier: float = ACCESSORY_SLOT_MULTIPLIER,
) -> float:
    """Enhancement bonus multiplier for an equipment slot.

    Args:
        slot_category: Equipment type HRID, e.g. /equipment_types/ring
        accessory_slots: Slots treated as accessories (defaults to game data)
        accessory_multiplier: Multiplier for accessory slots

    Returns:
        accessory_multiplier for accessory slots, otherwise 1.0
    """
    slots = ACCESSORY_SLOTS if accessory_slots is None else accessory_slots
    return accessory_multiplier if slot_category in slots else 1.0


def enhancement_multiplier(
    level: int,
    slot_category: str,
    table: Optional[dict[int, float]] = None,
    accessory_slots: Optional[list[str]] = None,
    accessory_multiplier: float = ACCESSORY_SLOT_MULTIPLIER,
) -> float:
    """Multiplier applied to a base stat at an enhancement level.

    Args:
        level: Enhancement level (0-20; anything else is treated as 0)
        slot_category: Equipment type HRID of the item
        table: Cumulative bonus table (defaults to game data)
        accessory_slots: Slots treated as accessories
        accessory_multiplier: Multiplier for accessory slots

    Returns:
        1 + table[level] * slot multiplier (1.0 at level 0)
    """
    if not is_valid_level(level) or level == 0:
        return 1.0

    bonuses = ENHANCEMENT_BONUSES if table is None else table
    bonus = bonuses.get(level, 0.0)
    return 1.0 + bonus * slot_multiplier(
        slot_category, accessory_slots, accessory_multiplier
    )


def scale_stat(
    base_value: float,
    level: int,
    slot_category: str,
    table: Optional[dict[int, float]] = None,
) -> float:
    """Scale a base stat by enhancement level using the bonus table."""
    return base_value * enhancement_multiplier(level, slot_category, table)


def scale_stat_linear(base_value: float, level: int, bonus_per_level: float) -> float:
    """Scale a base stat with a per-item linear bonus."""
    if not is_valid_level(level):
        return base_value
    return base_value + bonus_per_level * level


def decomposition_essence_count(item_level: int, enhancement_level: int) -> int:
    """Enhancing Essence recovered when decomposing an enhanced item.

    Halves round up, matching the game client.

    Examples:
        item level 1, +1  -> 2
        item level 10, +5 -> 42

    Args:
        item_level: Item level of the decomposed item
        enhancement_level: Enhancement level of the decomposed item

    Returns:
        Essence units recovered (0 for unenhanced items)
    """
    if enhancement_level <= 0:
        return 0

    raw = 2 * (0.5 + 0.1 * 1.05**item_level) * 2**enhancement_level
    return int(math.floor(raw + 0.5))


class EnhancementScaler:
    """Scales equipment stats according to the configured scaling mode.

    Example:
        scaler = EnhancementScaler(config)
        efficiency = scaler.scaled_stat(equipped_item, "brewingEfficiency")
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """Initialize with configuration.

        Args:
            config: Engine configuration (uses defaults if None)
        """
        self.config = config or get_default_config()

    def multiplier(self, level: int, slot_category: str) -> float:
        enhancement = self.config.enhancement
        return enhancement_multiplier(
            level,
            slot_category,
            table=enhancement.bonuses,
            accessory_slots=enhancement.accessory_slots,
            accessory_multiplier=enhancement.accessory_multiplier,
        )

    def scaled_stat(self, item: EquipmentItem, stat_name: str) -> float:
        """Enhanced value of one stat on an equipped item.

        Args:
            item: Equipped item
            stat_name: Noncombat stat name, e.g. "drinkConcentration"

        Returns:
            Scaled stat value (0.0 when the item lacks the stat)
        """
        base_value = item.noncombat_stats.get(stat_name, 0.0)
        if base_value == 0.0:
            return 0.0

        if self.config.enhancement.scaling_mode == ScalingMode.LINEAR:
            bonus_per_level = item.noncombat_enhancement_bonuses.get(stat_name, 0.0)
            return scale_stat_linear(base_value, item.enhancement_level, bonus_per_level)

        return base_value * self.multiplier(item.enhancement_level, item.slot_category)
