"""
Drink Concentration scaling.

Drink Concentration is an equipment stat that amplifies consumable buffs
linearly:

    scaled = flat_boost * (1 + concentration)

It also shortens how long each drink lasts, so more drinks are consumed
per hour:

    drinks_per_hour = 3600 / buff_duration * (1 + concentration)

Only consumable-sourced bonuses are scaled. Equipment, house, community
and achievement bonuses never are.
"""

from typing import Optional

from idleprofit.config.defaults import DEFAULT_BUFF_DURATION_SECONDS, SECONDS_PER_HOUR
from idleprofit.engine.enhancement import EnhancementScaler
from idleprofit.models.character import CharacterState

DRINK_CONCENTRATION_STAT = "drinkConcentration"


def scale_by_concentration(flat_boost: float, concentration: float) -> float:
    """Scale a consumable buff by Drink Concentration (decimal, 0.1 = 10%)."""
    return flat_boost * (1 + concentration)


def drinks_per_hour(
    concentration: float,
    buff_duration_seconds: float = DEFAULT_BUFF_DURATION_SECONDS,
) -> float:
    """Drinks consumed per hour to keep one slot active.

    Args:
        concentration: Drink Concentration as a decimal
        buff_duration_seconds: Base duration of one drink

    Returns:
        Drinks per hour (12 at 300s with no concentration)
    """
    if buff_duration_seconds <= 0:
        return 0.0
    return SECONDS_PER_HOUR / buff_duration_seconds * (1 + concentration)


def drink_concentration(
    character: CharacterState, scaler: Optional[EnhancementScaler] = None
) -> float:
    """Total Drink Concentration from equipment (decimal).

    Args:
        character: Character snapshot
        scaler: Enhancement scaler (default configuration if None)

    Returns:
        Sum of every equipped item's enhanced drinkConcentration stat
    """
    scaler = scaler or EnhancementScaler()
    return sum(
        scaler.scaled_stat(item, DRINK_CONCENTRATION_STAT)
        for item in character.equipment.values()
    )
