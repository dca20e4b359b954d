"""
Data models for idleprofit.

All models are frozen Pydantic value objects: a computation receives a
snapshot and never mutates it. Structural equality tells callers whether
a snapshot changed.
"""

from idleprofit.models.actions import ActionArchetype, ActionDefinition
from idleprofit.models.character import CharacterState
from idleprofit.models.game_data import GameData
from idleprofit.models.items import (
    ConsumableBuff,
    DrinkSlot,
    DropEntry,
    EquipmentItem,
    ItemCount,
    ItemDetail,
)
from idleprofit.models.market import PriceQuote, PriceSide, PricingMode

__all__ = [
    # Items
    "ConsumableBuff",
    "DrinkSlot",
    "DropEntry",
    "EquipmentItem",
    "ItemCount",
    "ItemDetail",
    # Actions
    "ActionArchetype",
    "ActionDefinition",
    # Snapshots
    "CharacterState",
    "GameData",
    # Market
    "PriceQuote",
    "PriceSide",
    "PricingMode",
]
