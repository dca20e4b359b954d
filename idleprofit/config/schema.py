"""
Configuration schema for the idleprofit engine.

Provides Pydantic models for configuration validation and type safety.
Defaults come from idleprofit.config.defaults, where every constant is
annotated with how it was confirmed against live game data.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from idleprofit.config import defaults
from idleprofit.models.actions import ActionArchetype
from idleprofit.models.market import PricingMode


class ScalingMode(str, Enum):
    """How equipment stats grow with enhancement level."""

    TABLE = "table"  # Shared cumulative bonus table x slot multiplier
    LINEAR = "linear"  # Per-item bonus per level, base + bonus * level


class ActionTypesConfig(BaseModel):
    """Action type HRIDs grouped by archetype."""

    gathering: list[str] = Field(
        default_factory=lambda: list(defaults.GATHERING_TYPES),
        description="Action types whose outputs come from drop tables",
    )
    production: list[str] = Field(
        default_factory=lambda: list(defaults.PRODUCTION_TYPES),
        description="Action types that turn input items into outputs",
    )
    alchemy: list[str] = Field(
        default_factory=lambda: list(defaults.ALCHEMY_TYPES),
        description="Action types with success-gated outputs and catalysts",
    )
    enhancing: list[str] = Field(
        default_factory=lambda: list(defaults.ENHANCING_TYPES),
        description="Action types that use the Observatory",
    )
    gourmet: list[str] = Field(
        default_factory=lambda: list(defaults.GOURMET_TYPES),
        description="Action types whose outputs benefit from Gourmet (verified)",
    )


class EnhancementConfig(BaseModel):
    """Enhancement level scaling of equipment stats."""

    bonuses: dict[int, float] = Field(
        default_factory=lambda: dict(defaults.ENHANCEMENT_BONUSES),
        description="Cumulative bonus fraction per enhancement level (verified)",
    )
    accessory_slots: list[str] = Field(
        default_factory=lambda: list(defaults.ACCESSORY_SLOTS),
        description="Equipment types whose enhancement bonus is multiplied",
    )
    accessory_multiplier: float = Field(
        default=defaults.ACCESSORY_SLOT_MULTIPLIER,
        ge=0.0,
        description="Enhancement bonus multiplier for accessory slots (verified: 5x)",
    )
    scaling_mode: ScalingMode = Field(
        default=ScalingMode.TABLE,
        description="Shared table (default) or per-item linear scaling",
    )

    @field_validator("bonuses")
    @classmethod
    def validate_bonuses(cls, v: dict[int, float]) -> dict[int, float]:
        """Ensure the bonus table never decreases with level."""
        previous = 0.0
        for level in sorted(v):
            if v[level] < previous:
                raise ValueError(
                    f"Enhancement bonus for level {level} ({v[level]}) is lower "
                    f"than the previous level ({previous})"
                )
            previous = v[level]
        return v


class HouseConfig(BaseModel):
    """House room bonus rates (percent per room level)."""

    efficiency_per_level: float = Field(
        default=defaults.HOUSE_EFFICIENCY_PER_LEVEL,
        ge=0.0,
        description="Efficiency % per level of the action type's room (verified: 1.5%)",
    )
    action_type_rooms: dict[str, str] = Field(
        default_factory=lambda: dict(defaults.ACTION_TYPE_HOUSE_ROOMS),
        description="Action type HRID -> house room HRID",
    )
    observatory_hrid: str = Field(
        default=defaults.OBSERVATORY_HRID,
        description="House room used by enhancing",
    )
    observatory_rates: dict[str, float] = Field(
        default_factory=lambda: dict(defaults.OBSERVATORY_RATES),
        description="Bonus category -> % per Observatory level (enhancing only)",
    )
    global_rates: dict[str, float] = Field(
        default_factory=lambda: dict(defaults.HOUSE_GLOBAL_RATES),
        description="Bonus category -> % per level, summed over every room",
    )


class CommunityBuffRule(BaseModel):
    """Tiered community buff formula."""

    category: str = Field(description="Bonus category the buff feeds")
    base_percent: float = Field(ge=0.0, description="Bonus % at tier 1")
    per_level_percent: float = Field(ge=0.0, description="Additional % per tier")
    action_types: list[str] = Field(
        default_factory=list,
        description="Action types the buff applies to (empty = all)",
    )

    def percent_at(self, tier: int) -> float:
        """Bonus percent at a tier; tiers below 1 grant nothing."""
        if tier < 1:
            return 0.0
        return self.base_percent + (tier - 1) * self.per_level_percent

    def applies_to(self, action_type: str) -> bool:
        return not self.action_types or action_type in self.action_types


class MarketConfig(BaseModel):
    """Market pricing parameters."""

    tax_rate: float = Field(
        default=defaults.MARKET_TAX,
        ge=0.0,
        le=1.0,
        description="Fraction deducted from non-coin sales (verified: 2%)",
    )
    pricing_mode: PricingMode = Field(
        default=PricingMode.CONSERVATIVE,
        description="conservative (ask/bid), hybrid (ask/ask) or optimistic (bid/ask)",
    )
    crafting_material_discount: float = Field(
        default=defaults.CRAFTING_FALLBACK_MATERIAL_DISCOUNT,
        ge=0.0,
        le=1.0,
        description="Multiplier on recipe inputs when valuing by crafting cost",
    )
    coin_hrid: str = Field(default=defaults.COIN_HRID)
    essence_hrid: str = Field(
        default=defaults.ENHANCING_ESSENCE_HRID,
        description="Item recovered when decomposing enhanced equipment",
    )


class ConsumableConfig(BaseModel):
    """Drink and food consumption parameters."""

    default_buff_duration_seconds: float = Field(
        default=defaults.DEFAULT_BUFF_DURATION_SECONDS,
        gt=0.0,
        description="Buff duration when an item does not declare one (verified: 300s)",
    )

    @property
    def drinks_per_hour_base(self) -> float:
        """Drinks consumed per hour without Drink Concentration."""
        return defaults.SECONDS_PER_HOUR / self.default_buff_duration_seconds


class BonusesConfig(BaseModel):
    """Bonus aggregation switches."""

    scale_action_level_with_concentration: bool = Field(
        default=False,
        description="Apply Drink Concentration to action level teas",
    )


class BatchConfig(BaseModel):
    """Concurrent batch calculation parameters."""

    timeout_seconds: float = Field(
        default=defaults.BATCH_TIMEOUT_SECONDS,
        gt=0.0,
        description="Per-action timeout before a result is reported unavailable",
    )


def _default_community_buffs() -> dict[str, CommunityBuffRule]:
    return {
        hrid: CommunityBuffRule(**rule)
        for hrid, rule in defaults.COMMUNITY_BUFFS.items()
    }


class EngineConfig(BaseModel):
    """Complete idleprofit configuration.

    This is the top-level configuration object that contains every
    tunable used by the bonus, timing and profit calculators.
    """

    action_types: ActionTypesConfig = Field(default_factory=ActionTypesConfig)
    enhancement: EnhancementConfig = Field(default_factory=EnhancementConfig)
    house: HouseConfig = Field(default_factory=HouseConfig)
    community_buffs: dict[str, CommunityBuffRule] = Field(
        default_factory=_default_community_buffs
    )
    market: MarketConfig = Field(default_factory=MarketConfig)
    consumables: ConsumableConfig = Field(default_factory=ConsumableConfig)
    bonuses: BonusesConfig = Field(default_factory=BonusesConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EngineConfig":
        """Create configuration from a dictionary.

        Args:
            data: Configuration dictionary (can be partial)

        Returns:
            EngineConfig with defaults for any missing values
        """
        return cls.model_validate(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "EngineConfig":
        """Load configuration from a JSON or YAML file.

        Args:
            path: Path to configuration file (.json or .yaml/.yml)

        Returns:
            Parsed configuration

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file format is not supported
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        suffix = path.suffix.lower()

        if suffix == ".json":
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        elif suffix in (".yaml", ".yml"):
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        else:
            raise ValueError(
                f"Unsupported config file format: {suffix}. "
                "Use .json or .yaml/.yml"
            )

        return cls.from_dict(data or {})

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return self.model_dump()

    def to_file(self, path: str | Path) -> None:
        """Save configuration to a JSON or YAML file.

        Args:
            path: Path to save configuration to

        Raises:
            ValueError: If file format is not supported
        """
        path = Path(path)
        suffix = path.suffix.lower()
        data = self.model_dump(mode="json")

        if suffix == ".json":
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        elif suffix in (".yaml", ".yml"):
            with open(path, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            raise ValueError(
                f"Unsupported config file format: {suffix}. "
                "Use .json or .yaml/.yml"
            )

    def merge(self, overrides: dict[str, Any]) -> "EngineConfig":
        """Create a new config with overrides applied.

        Args:
            overrides: Dictionary of values to override

        Returns:
            New EngineConfig with overrides merged in
        """
        base = self.to_dict()
        _deep_merge(base, overrides)
        return EngineConfig.from_dict(base)

    def archetype_of(self, action_type: str) -> ActionArchetype:
        """Archetype for an action type (OTHER when unclassified)."""
        groups = self.action_types
        if action_type in groups.gathering:
            return ActionArchetype.GATHERING
        if action_type in groups.production:
            return ActionArchetype.PRODUCTION
        if action_type in groups.alchemy:
            return ActionArchetype.ALCHEMY
        if action_type in groups.enhancing:
            return ActionArchetype.ENHANCING
        return ActionArchetype.OTHER


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> None:
    """Deep merge overrides into base dict (in place).

    Args:
        base: Base dictionary to merge into
        overrides: Values to merge in
    """
    for key, value in overrides.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def get_default_config() -> EngineConfig:
    """Get the default engine configuration.

    Returns:
        EngineConfig with all default values
    """
    return EngineConfig()
