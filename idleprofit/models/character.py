"""
Character state snapshot.

A CharacterState is supplied per computation and never mutated by the
engine. Every map may be empty; calculators treat missing entries as
"no bonus" rather than an error.
"""

from pydantic import BaseModel, ConfigDict, Field

from idleprofit.models.items import DrinkSlot, EquipmentItem


class CharacterState(BaseModel):
    """Immutable snapshot of everything about a character that feeds bonuses."""

    model_config = ConfigDict(frozen=True)

    character_id: str = ""
    skill_levels: dict[str, int] = Field(
        default_factory=dict,
        description="Skill HRID -> level",
    )
    equipment: dict[str, EquipmentItem] = Field(
        default_factory=dict,
        description="Wearable location HRID -> equipped item",
    )
    house_room_levels: dict[str, int] = Field(
        default_factory=dict,
        description="House room HRID -> level",
    )
    drinks_by_action_type: dict[str, list[DrinkSlot]] = Field(
        default_factory=dict,
        description="Action type HRID -> active drinks",
    )
    community_buff_levels: dict[str, int] = Field(
        default_factory=dict,
        description="Community buff HRID -> tier",
    )
    achievement_buffs: dict[str, dict[str, float]] = Field(
        default_factory=dict,
        description="Action type HRID -> buff kind -> decimal value",
    )
    task_action_hrids: frozenset[str] = Field(
        default_factory=frozenset,
        description="Actions that are currently active tasks",
    )
    task_speed_bonus: float = Field(
        default=0.0,
        ge=0,
        description="Speed % applied to task actions",
    )
    inventory: dict[str, float] = Field(
        default_factory=dict,
        description="Item HRID -> count owned",
    )

    def drinks_for(self, action_type: str) -> list[DrinkSlot]:
        return self.drinks_by_action_type.get(action_type, [])

    def skill_level(self, skill_hrid: str, default: int = 0) -> int:
        return self.skill_levels.get(skill_hrid, default)

    def is_task(self, action_hrid: str) -> bool:
        return action_hrid in self.task_action_hrids
