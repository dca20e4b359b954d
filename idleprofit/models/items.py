"""
Item models for idleprofit.

Items are identified by HRID (e.g. "/items/cheese"). Game data describes
each item once (ItemDetail); characters carry concrete instances:
- EquipmentItem: an equipped item with its enhancement level
- DrinkSlot: a drink active in an action type's consumable slots

Stat values use the game's decimal convention (0.15 means +15%).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ItemCount(BaseModel):
    """A quantity of one item, optionally enhanced."""

    model_config = ConfigDict(frozen=True)

    item_hrid: str
    count: float = Field(default=1.0, ge=0, description="Units per action")
    enhancement_level: int = Field(default=0, description="Enhancement level of the item")


class DropEntry(BaseModel):
    """One row of a drop table."""

    model_config = ConfigDict(frozen=True)

    item_hrid: str
    min_count: float = Field(default=1.0, ge=0)
    max_count: float = Field(default=1.0, ge=0)
    drop_rate: float = Field(default=1.0, ge=0, description="Chance per action (0-1)")

    @property
    def average_count(self) -> float:
        """Expected count when the drop occurs."""
        return (self.min_count + self.max_count) / 2


class ConsumableBuff(BaseModel):
    """A buff granted by a drink or food item.

    flat_boost is either a decimal percent (0.1 = +10%) or a number of
    levels for level-type buffs. ratio_boost carries multiplicative buffs
    such as alchemy success.
    """

    model_config = ConfigDict(frozen=True)

    type_hrid: str = Field(description="Buff type, e.g. /buff_types/efficiency")
    flat_boost: float = Field(default=0.0)
    ratio_boost: float = Field(default=0.0)

    @property
    def magnitude(self) -> float:
        """Whichever boost the buff carries."""
        return self.flat_boost or self.ratio_boost


class ItemDetail(BaseModel):
    """Static game data for one item."""

    model_config = ConfigDict(frozen=True)

    hrid: str
    name: str = ""
    item_level: int = Field(default=0, ge=0)
    equipment_type: Optional[str] = Field(
        default=None,
        description="Equipment type HRID when the item can be equipped",
    )
    noncombat_stats: dict[str, float] = Field(default_factory=dict)
    noncombat_enhancement_bonuses: dict[str, float] = Field(
        default_factory=dict,
        description="Per-level stat growth used by linear enhancement scaling",
    )
    consumable_buffs: list[ConsumableBuff] = Field(default_factory=list)
    buff_duration_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Duration of the item's buffs (None = engine default)",
    )
    decomposition_outputs: list[ItemCount] = Field(default_factory=list)
    shop_coin_cost: Optional[float] = Field(
        default=None,
        ge=0,
        description="Coin price when the item is sold by the NPC shop",
    )

    @property
    def display_name(self) -> str:
        return self.name or self.hrid.rsplit("/", 1)[-1].replace("_", " ").title()


class EquipmentItem(BaseModel):
    """An equipped item.

    Enhancement levels outside [0, 20] are accepted and scale as level 0.
    """

    model_config = ConfigDict(frozen=True)

    item_hrid: str
    enhancement_level: int = Field(default=0)
    slot_category: str = Field(
        default="",
        description="Equipment type HRID, e.g. /equipment_types/ring",
    )
    noncombat_stats: dict[str, float] = Field(default_factory=dict)
    noncombat_enhancement_bonuses: dict[str, float] = Field(default_factory=dict)


class DrinkSlot(BaseModel):
    """A drink active in an action type's consumable slots."""

    model_config = ConfigDict(frozen=True)

    item_hrid: str
