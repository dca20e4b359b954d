"""
Action models for idleprofit.

An action is one repeatable skilling activity (e.g. "/actions/brewing/coffee").
Each action belongs to an action type, and action types are grouped into
archetypes with distinct output and profit formulas:
- Gathering: drop tables, no inputs (foraging, woodcutting, milking)
- Production: inputs -> outputs (brewing, cooking, crafting, ...)
- Alchemy: success-gated outputs, optional catalyst
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from idleprofit.models.items import DropEntry, ItemCount

NANOSECONDS_PER_SECOND = 1e9


class ActionArchetype(str, Enum):
    """Families of actions sharing output and profit formulas."""

    GATHERING = "gathering"
    PRODUCTION = "production"
    ALCHEMY = "alchemy"
    ENHANCING = "enhancing"
    OTHER = "other"


class ActionDefinition(BaseModel):
    """Static game data for one action.

    Sourced from game data; read-only to the engine.
    """

    model_config = ConfigDict(frozen=True)

    hrid: str
    name: str = ""
    action_type: str = Field(description="Action type HRID, e.g. /action_types/brewing")
    base_time_cost: float = Field(
        default=0.0,
        ge=0,
        description="Base duration in nanoseconds",
    )
    level_requirement: int = Field(default=1, ge=0)
    input_items: list[ItemCount] = Field(default_factory=list)
    output_items: list[ItemCount] = Field(default_factory=list)
    drop_table: list[DropEntry] = Field(default_factory=list)
    essence_drop_table: list[DropEntry] = Field(default_factory=list)
    rare_drop_table: list[DropEntry] = Field(default_factory=list)
    upgrade_item_hrid: Optional[str] = Field(
        default=None,
        description="Item consumed whole per action (not reduced by Artisan)",
    )
    catalyst_item_hrid: Optional[str] = Field(
        default=None,
        description="Alchemy catalyst, consumed only on success",
    )
    base_success_rate: float = Field(
        default=1.0,
        ge=0,
        le=1,
        description="Success chance before bonuses (alchemy)",
    )
    bulk_multiplier: int = Field(
        default=1,
        ge=1,
        description="Units of the primary item consumed per action",
    )
    primary_item_hrid: Optional[str] = Field(
        default=None,
        description="Single driving item for bulk-consumption actions",
    )

    @property
    def base_time_seconds(self) -> float:
        return self.base_time_cost / NANOSECONDS_PER_SECOND

    @property
    def skill_name(self) -> str:
        """Skill name, e.g. "brewing" for /action_types/brewing."""
        return self.action_type.rsplit("/", 1)[-1]

    @property
    def skill_hrid(self) -> str:
        return f"/skills/{self.skill_name}"

    @property
    def display_name(self) -> str:
        return self.name or self.hrid.rsplit("/", 1)[-1].replace("_", " ").title()

    @property
    def is_bulk(self) -> bool:
        """Whether consumption is driven by a single primary item."""
        return self.primary_item_hrid is not None
