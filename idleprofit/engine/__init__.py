"""
idleprofit calculation engine.

This module contains the core calculation logic:
- Enhancement and Drink Concentration scaling
- Bonus aggregation with per-source breakdowns
- Action timing, efficiency and expected outputs
- Price resolution with the fallback valuation chain
- Profit per hour for gathering, production and alchemy
- Material queue limits
- Concurrent batch calculation with cancellation tokens
"""

from idleprofit.engine.action_time import (
    ActionTimeCalculator,
    ActionTiming,
    EfficiencyRoll,
    ExpectedOutput,
    OutputKind,
    action_time,
    actions_per_hour,
    efficiency_roll,
    expected_actions_per_attempt,
    hours_for_actions,
    processing_conversion,
    seconds_for_actions,
    success_rate,
)
from idleprofit.engine.batch import (
    BatchEntry,
    BatchProfitRunner,
    BatchResult,
    CalculationToken,
    CalculationTokenSource,
    EntryStatus,
)
from idleprofit.engine.bonuses import (
    BonusAggregator,
    BonusCategory,
    BonusContribution,
    BonusSource,
    BonusTotal,
)
from idleprofit.engine.concentration import (
    drink_concentration,
    drinks_per_hour,
    scale_by_concentration,
)
from idleprofit.engine.enhancement import (
    EnhancementScaler,
    decomposition_essence_count,
    enhancement_multiplier,
    scale_stat,
    scale_stat_linear,
    slot_multiplier,
)
from idleprofit.engine.limits import (
    MaterialLimitCalculator,
    QueueLimit,
    calculate_max_attempts,
)
from idleprofit.engine.pricing import (
    PriceOrigin,
    PriceResolution,
    PriceResolver,
    PriceSource,
    StaticPriceSource,
    price_after_tax,
)
from idleprofit.engine.profit import (
    CatalystCost,
    DrinkCost,
    MaterialCost,
    OutputRevenue,
    ProfitBreakdown,
    ProfitCalculator,
    ProfitResult,
    QueueProfitBreakdown,
    queue_profit_breakdown,
)

__all__ = [
    # Scaling
    "EnhancementScaler",
    "decomposition_essence_count",
    "drink_concentration",
    "drinks_per_hour",
    "enhancement_multiplier",
    "scale_by_concentration",
    "scale_stat",
    "scale_stat_linear",
    "slot_multiplier",
    # Bonuses
    "BonusAggregator",
    "BonusCategory",
    "BonusContribution",
    "BonusSource",
    "BonusTotal",
    # Timing
    "ActionTimeCalculator",
    "ActionTiming",
    "EfficiencyRoll",
    "ExpectedOutput",
    "OutputKind",
    "action_time",
    "actions_per_hour",
    "efficiency_roll",
    "expected_actions_per_attempt",
    "hours_for_actions",
    "processing_conversion",
    "seconds_for_actions",
    "success_rate",
    # Pricing
    "PriceOrigin",
    "PriceResolution",
    "PriceResolver",
    "PriceSource",
    "StaticPriceSource",
    "price_after_tax",
    # Profit
    "CatalystCost",
    "DrinkCost",
    "MaterialCost",
    "OutputRevenue",
    "ProfitBreakdown",
    "ProfitCalculator",
    "ProfitResult",
    "QueueProfitBreakdown",
    "queue_profit_breakdown",
    # Limits
    "MaterialLimitCalculator",
    "QueueLimit",
    "calculate_max_attempts",
    # Batch
    "BatchEntry",
    "BatchProfitRunner",
    "BatchResult",
    "CalculationToken",
    "CalculationTokenSource",
    "EntryStatus",
]
