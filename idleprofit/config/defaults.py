"""
Default configuration values for the idleprofit engine.

These values mirror live game data as observed from the client. Values marked
(verified) match in-game tooltips exactly; values marked (observed) were read
off breakdown panels and agree to the displayed precision. Values marked
(unconfirmed) have competing readings and are configurable.

Bonus units used throughout the engine:
    - Bonus totals are percentages (15.0 means +15%)
    - Equipment stats and tea flat boosts arrive from game data as decimals
      (0.15 means +15%) and are converted at aggregation time
    - Level bonuses (skill level teas, action level teas) are flat levels
"""

from typing import Any

# =============================================================================
# ACTION TYPES
# =============================================================================

GATHERING_TYPES: list[str] = [
    "/action_types/foraging",
    "/action_types/woodcutting",
    "/action_types/milking",
]

PRODUCTION_TYPES: list[str] = [
    "/action_types/brewing",
    "/action_types/cooking",
    "/action_types/cheesesmithing",
    "/action_types/crafting",
    "/action_types/tailoring",
]

ALCHEMY_TYPES: list[str] = ["/action_types/alchemy"]

ENHANCING_TYPES: list[str] = ["/action_types/enhancing"]

# Production types whose outputs benefit from the Gourmet buff (verified)
GOURMET_TYPES: list[str] = [
    "/action_types/brewing",
    "/action_types/cooking",
]

# =============================================================================
# TIME & MARKET (verified)
# =============================================================================

SECONDS_PER_HOUR: float = 3600.0
HOURS_PER_DAY: float = 24.0

MARKET_TAX: float = 0.02  # Deducted from non-coin sale revenue

COIN_HRID: str = "/items/coin"
ENHANCING_ESSENCE_HRID: str = "/items/enhancing_essence"

# Crafting-cost fallback assumes an Artisan Tea is active on material inputs
CRAFTING_FALLBACK_MATERIAL_DISCOUNT: float = 0.9

# Drinks last 300 seconds, so 12 are consumed per hour before Drink Concentration
DEFAULT_BUFF_DURATION_SECONDS: float = 300.0
DRINKS_PER_HOUR_BASE: float = SECONDS_PER_HOUR / DEFAULT_BUFF_DURATION_SECONDS

# =============================================================================
# ENHANCEMENT SCALING (unconfirmed)
# =============================================================================
# Cumulative bonus fraction granted by each enhancement level. The per-item
# linear reading is available through EnhancementConfig.scaling_mode.
ENHANCEMENT_BONUSES: dict[int, float] = {
    1: 0.02,
    2: 0.042,
    3: 0.066,
    4: 0.092,
    5: 0.12,
    6: 0.15,
    7: 0.182,
    8: 0.216,
    9: 0.252,
    10: 0.29,
    11: 0.334,
    12: 0.384,
    13: 0.44,
    14: 0.502,
    15: 0.57,
    16: 0.644,
    17: 0.724,
    18: 0.81,
    19: 0.902,
    20: 1.0,
}

MAX_ENHANCEMENT_LEVEL: int = 20

# Accessory-like slots scale enhancement bonuses 5x; every other slot 1x
ACCESSORY_SLOTS: list[str] = [
    "/equipment_types/neck",
    "/equipment_types/ring",
    "/equipment_types/earring",
    "/equipment_types/earrings",
    "/equipment_types/back",
    "/equipment_types/trinket",
    "/equipment_types/charm",
]

ACCESSORY_SLOT_MULTIPLIER: float = 5.0


# =============================================================================
# HOUSE ROOMS (verified)
# =============================================================================

# Skilling rooms grant 1.5% efficiency per level to their action type
HOUSE_EFFICIENCY_PER_LEVEL: float = 1.5

ACTION_TYPE_HOUSE_ROOMS: dict[str, str] = {
    "/action_types/brewing": "/house_rooms/brewery",
    "/action_types/cheesesmithing": "/house_rooms/forge",
    "/action_types/cooking": "/house_rooms/kitchen",
    "/action_types/crafting": "/house_rooms/workshop",
    "/action_types/foraging": "/house_rooms/garden",
    "/action_types/milking": "/house_rooms/dairy_barn",
    "/action_types/tailoring": "/house_rooms/sewing_parlor",
    "/action_types/woodcutting": "/house_rooms/log_shed",
    "/action_types/alchemy": "/house_rooms/laboratory",
}

HOUSE_ROOM_NAMES: dict[str, str] = {
    "/house_rooms/brewery": "Brewery",
    "/house_rooms/forge": "Forge",
    "/house_rooms/kitchen": "Kitchen",
    "/house_rooms/workshop": "Workshop",
    "/house_rooms/garden": "Garden",
    "/house_rooms/dairy_barn": "Dairy Barn",
    "/house_rooms/sewing_parlor": "Sewing Parlor",
    "/house_rooms/log_shed": "Log Shed",
    "/house_rooms/laboratory": "Laboratory",
    "/house_rooms/observatory": "Observatory",
}

# Enhancing uses the Observatory, not a skilling room
OBSERVATORY_HRID: str = "/house_rooms/observatory"
OBSERVATORY_RATES: dict[str, float] = {
    "success_rate": 0.05,  # % per level
    "speed": 1.0,
    "rare_find": 0.2,
    "wisdom": 0.05,
}

# Every room (of level >= 1) adds these globally (observed)
HOUSE_GLOBAL_RATES: dict[str, float] = {
    "rare_find": 0.2,  # % per room level
    "wisdom": 0.05,
}

# =============================================================================
# COMMUNITY BUFFS (verified)
# =============================================================================

# bonus % = base + (tier - 1) * per_level, for tier >= 1
COMMUNITY_BUFFS: dict[str, dict[str, Any]] = {
    "/community_buff_types/production_efficiency": {
        "category": "efficiency",
        "base_percent": 14.0,
        "per_level_percent": 0.3,
        "action_types": PRODUCTION_TYPES,
    },
    "/community_buff_types/gathering_quantity": {
        "category": "gathering_quantity",
        "base_percent": 20.0,
        "per_level_percent": 0.5,
        "action_types": GATHERING_TYPES,
    },
    "/community_buff_types/enhancing_speed": {
        "category": "speed",
        "base_percent": 20.0,
        "per_level_percent": 0.5,
        "action_types": ENHANCING_TYPES,
    },
    "/community_buff_types/experience": {
        "category": "wisdom",
        "base_percent": 20.0,
        "per_level_percent": 0.5,
        "action_types": [],  # Empty list = applies to every action type
    },
}

# =============================================================================
# ACHIEVEMENT BUFF KEYS
# =============================================================================

# Bonus category -> key used in a character's achievement buff map
ACHIEVEMENT_BUFF_KEYS: dict[str, str] = {
    "efficiency": "efficiency",
    "speed": "actionSpeed",
    "gathering_quantity": "gatheringQuantity",
    "rare_find": "rareFind",
    "essence_find": "essenceFind",
    "wisdom": "wisdom",
}

# =============================================================================
# BATCH CALCULATION
# =============================================================================

BATCH_TIMEOUT_SECONDS: float = 5.0

# =============================================================================
# CONSOLIDATED CONFIG DICT
# =============================================================================

DEFAULT_CONFIG: dict[str, Any] = {
    "action_types": {
        "gathering": GATHERING_TYPES,
        "production": PRODUCTION_TYPES,
        "alchemy": ALCHEMY_TYPES,
        "enhancing": ENHANCING_TYPES,
        "gourmet": GOURMET_TYPES,
    },
    "enhancement": {
        "bonuses": ENHANCEMENT_BONUSES,
        "accessory_slots": ACCESSORY_SLOTS,
        "accessory_multiplier": ACCESSORY_SLOT_MULTIPLIER,
        "scaling_mode": "table",
    },
    "house": {
        "efficiency_per_level": HOUSE_EFFICIENCY_PER_LEVEL,
        "action_type_rooms": ACTION_TYPE_HOUSE_ROOMS,
        "observatory_rates": OBSERVATORY_RATES,
        "global_rates": HOUSE_GLOBAL_RATES,
    },
    "community_buffs": COMMUNITY_BUFFS,
    "market": {
        "tax_rate": MARKET_TAX,
        "pricing_mode": "conservative",
        "crafting_material_discount": CRAFTING_FALLBACK_MATERIAL_DISCOUNT,
        "coin_hrid": COIN_HRID,
        "essence_hrid": ENHANCING_ESSENCE_HRID,
    },
    "consumables": {
        "default_buff_duration_seconds": DEFAULT_BUFF_DURATION_SECONDS,
    },
    "bonuses": {
        "scale_action_level_with_concentration": False,
    },
    "batch": {
        "timeout_seconds": BATCH_TIMEOUT_SECONDS,
    },
}
