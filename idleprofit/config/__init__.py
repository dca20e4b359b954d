"""
Configuration management for idleprofit.

This module provides:
- Default game constants (enhancement table, house rates, community buffs)
- Configuration schema and validation
- Support for custom configuration files (JSON/YAML)
"""

from idleprofit.config.defaults import DEFAULT_CONFIG
from idleprofit.config.schema import (
    ActionTypesConfig,
    BatchConfig,
    BonusesConfig,
    CommunityBuffRule,
    ConsumableConfig,
    EngineConfig,
    EnhancementConfig,
    HouseConfig,
    MarketConfig,
    ScalingMode,
    get_default_config,
)

__all__ = [
    # Dict-based defaults
    "DEFAULT_CONFIG",
    # Pydantic config classes
    "ActionTypesConfig",
    "BatchConfig",
    "BonusesConfig",
    "CommunityBuffRule",
    "ConsumableConfig",
    "EngineConfig",
    "EnhancementConfig",
    "HouseConfig",
    "MarketConfig",
    "ScalingMode",
    # Functions
    "get_default_config",
]
