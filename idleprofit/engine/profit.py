"""
Profit calculations for gathering, production and alchemy actions.

This module handles:
- Material cost per attempt (Artisan reduction, upgrade items,
  decomposition recovery for enhanced inputs)
- Alchemy catalyst cost (consumed only on success)
- Revenue per attempt from outputs, gourmet bonus items, processed items,
  essence drops and rare drops (taxed, coins untaxed)
- Drink running cost per hour
- Hourly and daily profit, and totals for a queued number of actions

Key formulas:
    alchemy cost = materials * (1 - success) + (materials + catalyst) * success
    profit_per_hour = (revenue - cost) * expected_actions / action_time * 3600
                      - drink_cost_per_hour

Prices that cannot be resolved count as 0 and are listed in
ProfitResult.missing_prices.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from idleprofit.config.defaults import HOURS_PER_DAY, SECONDS_PER_HOUR
from idleprofit.config.schema import EngineConfig, get_default_config
from idleprofit.engine.action_time import (
    ActionTimeCalculator,
    ActionTiming,
    ExpectedOutput,
    OutputKind,
)
from idleprofit.engine.bonuses import BonusCategory, BonusTotal
from idleprofit.engine.concentration import drinks_per_hour
from idleprofit.engine.pricing import PriceOrigin, PriceResolver, PriceSource
from idleprofit.errors import UnsupportedActionError
from idleprofit.models.actions import ActionArchetype, ActionDefinition
from idleprofit.models.character import CharacterState
from idleprofit.models.game_data import GameData
from idleprofit.models.market import PriceSide, PricingMode

logger = logging.getLogger(__name__)

PROFITABLE_ARCHETYPES = (
    ActionArchetype.GATHERING,
    ActionArchetype.PRODUCTION,
    ActionArchetype.ALCHEMY,
)


@dataclass
class MaterialCost:
    """Cost of one input item per attempt."""

    item_hrid: str
    count: float  # Units consumed per attempt, after Artisan
    unit_price: float
    origin: PriceOrigin = PriceOrigin.MARKET
    decomposition_value: float = 0.0  # Recovered per unit (enhanced inputs)

    @property
    def total(self) -> float:
        return self.count * (self.unit_price - self.decomposition_value)


@dataclass
class CatalystCost:
    """Alchemy catalyst, paid only when an attempt succeeds."""

    item_hrid: str
    unit_price: float
    success_rate: float
    origin: PriceOrigin = PriceOrigin.MARKET

    @property
    def cost_per_attempt(self) -> float:
        return self.unit_price * self.success_rate


@dataclass
class OutputRevenue:
    """Revenue from one output source per attempt."""

    item_hrid: str
    kind: OutputKind
    quantity: float  # Expected units per attempt
    unit_value: float  # After tax
    origin: PriceOrigin = PriceOrigin.MARKET

    @property
    def total(self) -> float:
        return self.quantity * self.unit_value


@dataclass
class DrinkCost:
    """Running cost of one active drink."""

    item_hrid: str
    unit_price: float
    drinks_per_hour: float
    origin: PriceOrigin = PriceOrigin.MARKET

    @property
    def cost_per_hour(self) -> float:
        return self.unit_price * self.drinks_per_hour


@dataclass
class ProfitBreakdown:
    """Per-source costs and revenues behind a ProfitResult."""

    materials: list[MaterialCost] = field(default_factory=list)
    outputs: list[OutputRevenue] = field(default_factory=list)
    drinks: list[DrinkCost] = field(default_factory=list)
    catalyst: Optional[CatalystCost] = None
    bonuses: dict[BonusCategory, BonusTotal] = field(default_factory=dict)

    @property
    def material_cost(self) -> float:
        return sum(m.total for m in self.materials)

    @property
    def revenue(self) -> float:
        return sum(o.total for o in self.outputs)

    @property
    def drink_cost_per_hour(self) -> float:
        return sum(d.cost_per_hour for d in self.drinks)


@dataclass
class QueueProfitBreakdown:
    """Profit and time for a queued number of actions."""

    total_profit: float
    profit_per_action: float
    hours_needed: float
    seconds_needed: float
    value_per_hour: float


@dataclass
class ProfitResult:
    """Profit of one action for one character."""

    action_hrid: str
    archetype: ActionArchetype
    pricing_mode: PricingMode
    action_time: float
    actions_per_hour: float  # Attempts per hour
    expected_actions_per_attempt: float
    revenue_per_attempt: float
    cost_per_attempt: float
    tea_cost_per_hour: float
    breakdown: ProfitBreakdown = field(default_factory=ProfitBreakdown)
    missing_prices: list[str] = field(default_factory=list)

    @property
    def actions_per_hour_effective(self) -> float:
        return self.actions_per_hour * self.expected_actions_per_attempt

    @property
    def profit_per_attempt(self) -> float:
        return self.revenue_per_attempt - self.cost_per_attempt

    @property
    def revenue_per_hour(self) -> float:
        return self.revenue_per_attempt * self.actions_per_hour_effective

    @property
    def cost_per_hour(self) -> float:
        return self.cost_per_attempt * self.actions_per_hour_effective + self.tea_cost_per_hour

    @property
    def profit_per_hour(self) -> float:
        if self.action_time <= 0:
            return 0.0
        return (
            self.profit_per_attempt
            * self.expected_actions_per_attempt
            / self.action_time
            * SECONDS_PER_HOUR
            - self.tea_cost_per_hour
        )

    @property
    def profit_per_day(self) -> float:
        return self.profit_per_hour * HOURS_PER_DAY

    @property
    def has_missing_prices(self) -> bool:
        return bool(self.missing_prices)

    def queue_breakdown(
        self, action_count: float, value_mode: str = "profit"
    ) -> QueueProfitBreakdown:
        """Profit and time for a number of queued completions."""
        return queue_profit_breakdown(
            self.profit_per_hour,
            self.actions_per_hour_effective,
            action_count,
            value_mode=value_mode,
            revenue_per_hour=self.revenue_per_hour,
        )


def queue_profit_breakdown(
    profit_per_hour: float,
    actions_per_hour: float,
    action_count: float,
    value_mode: str = "profit",
    revenue_per_hour: Optional[float] = None,
) -> QueueProfitBreakdown:
    """Totals for a queue of actions.

    Args:
        profit_per_hour: Profit per hour of the action
        actions_per_hour: Completions per hour (including efficiency)
        action_count: Queued completions
        value_mode: "profit" or "estimated_value" (revenue, ignoring costs)
        revenue_per_hour: Revenue per hour, used by "estimated_value"

    Returns:
        QueueProfitBreakdown (all zeros when actions_per_hour is not positive)
    """
    if actions_per_hour <= 0:
        return QueueProfitBreakdown(0.0, 0.0, 0.0, 0.0, 0.0)

    value_per_hour = profit_per_hour
    if value_mode == "estimated_value" and revenue_per_hour is not None:
        value_per_hour = revenue_per_hour

    per_action = value_per_hour / actions_per_hour
    hours = action_count / actions_per_hour
    return QueueProfitBreakdown(
        total_profit=per_action * action_count,
        profit_per_action=per_action,
        hours_needed=hours,
        seconds_needed=hours * SECONDS_PER_HOUR,
        value_per_hour=value_per_hour,
    )


class ProfitCalculator:
    """Computes hourly profit for an action.

    Example:
        calculator = ProfitCalculator(game_data, prices, config)
        result = calculator.calculate(character, "/actions/brewing/coffee")
        print(result.profit_per_hour, result.missing_prices)
    """

    def __init__(
        self,
        game_data: GameData,
        price_source: PriceSource,
        config: Optional[EngineConfig] = None,
        timing_calculator: Optional[ActionTimeCalculator] = None,
    ):
        """Initialize the calculator.

        Args:
            game_data: Item and action definitions
            price_source: Market price collaborator
            config: Engine configuration (uses defaults if None)
            timing_calculator: Timing calculator (built if None)
        """
        self.game_data = game_data
        self.price_source = price_source
        self.config = config or get_default_config()
        self.timing_calculator = timing_calculator or ActionTimeCalculator(
            game_data, self.config
        )

    def calculate(
        self,
        character: CharacterState,
        action_hrid: str,
        pricing_mode: Optional[PricingMode] = None,
    ) -> ProfitResult:
        """Calculate profit for one action.

        Args:
            character: Character snapshot
            action_hrid: Action to evaluate
            pricing_mode: Override of the configured pricing mode

        Returns:
            ProfitResult with breakdown

        Raises:
            UnknownActionError: If the action does not exist
            UnsupportedActionError: If the action is not gathering,
                production or alchemy
        """
        action = self.game_data.get_action(action_hrid)
        archetype = self.config.archetype_of(action.action_type)
        if archetype not in PROFITABLE_ARCHETYPES:
            raise UnsupportedActionError(
                f"No profit model for {action_hrid} ({archetype.value})"
            )

        resolver = PriceResolver(self.game_data, self.price_source, self.config, pricing_mode)
        timing = self.timing_calculator.timing(character, action)
        breakdown = ProfitBreakdown(bonuses=timing.bonuses)

        breakdown.materials = self._material_costs(action, timing, resolver)
        cost_per_attempt = breakdown.material_cost
        if archetype == ActionArchetype.ALCHEMY:
            breakdown.catalyst = self._catalyst_cost(action, timing, resolver)
            if breakdown.catalyst is not None:
                cost_per_attempt += breakdown.catalyst.cost_per_attempt

        outputs = self.timing_calculator.expected_outputs(character, action, timing)
        breakdown.outputs = self._output_revenues(outputs, resolver)
        breakdown.drinks = self._drink_costs(character, action, resolver)

        result = ProfitResult(
            action_hrid=action.hrid,
            archetype=archetype,
            pricing_mode=resolver.mode,
            action_time=timing.action_time,
            actions_per_hour=timing.actions_per_hour,
            expected_actions_per_attempt=timing.expected_actions_per_attempt,
            revenue_per_attempt=breakdown.revenue,
            cost_per_attempt=cost_per_attempt,
            tea_cost_per_hour=breakdown.drink_cost_per_hour,
            breakdown=breakdown,
            missing_prices=list(resolver.missing),
        )

        if result.has_missing_prices:
            logger.debug(
                "Profit for %s excludes unpriced items: %s",
                action.hrid,
                ", ".join(result.missing_prices),
            )
        return result

    def _material_costs(
        self, action: ActionDefinition, timing: ActionTiming, resolver: PriceResolver
    ) -> list[MaterialCost]:
        artisan = 0.0
        if timing.archetype == ActionArchetype.PRODUCTION:
            artisan = min(1.0, timing.bonuses[BonusCategory.ARTISAN].decimal)

        materials = []
        for input_item in action.input_items:
            price = resolver.resolve(
                input_item.item_hrid, PriceSide.BUY, input_item.enhancement_level
            )
            # An unpriced input is excluded entirely, recovery included
            recovery = 0.0
            if not price.is_missing:
                recovery = resolver.decomposition_value(
                    input_item.item_hrid, input_item.enhancement_level
                )
            materials.append(
                MaterialCost(
                    item_hrid=input_item.item_hrid,
                    count=input_item.count * (1 - artisan),
                    unit_price=price.price,
                    origin=price.origin,
                    decomposition_value=recovery,
                )
            )

        if action.upgrade_item_hrid:
            price = resolver.resolve(action.upgrade_item_hrid, PriceSide.BUY)
            materials.append(
                MaterialCost(
                    item_hrid=action.upgrade_item_hrid,
                    count=1.0,
                    unit_price=price.price,
                    origin=price.origin,
                )
            )

        return materials

    def _catalyst_cost(
        self, action: ActionDefinition, timing: ActionTiming, resolver: PriceResolver
    ) -> Optional[CatalystCost]:
        if not action.catalyst_item_hrid:
            return None
        price = resolver.resolve(action.catalyst_item_hrid, PriceSide.BUY)
        return CatalystCost(
            item_hrid=action.catalyst_item_hrid,
            unit_price=price.price,
            success_rate=timing.success_rate,
            origin=price.origin,
        )

    def _output_revenues(
        self, outputs: list[ExpectedOutput], resolver: PriceResolver
    ) -> list[OutputRevenue]:
        revenues = []
        for output in outputs:
            value = resolver.sale_value(output.item_hrid)
            revenues.append(
                OutputRevenue(
                    item_hrid=output.item_hrid,
                    kind=output.kind,
                    quantity=output.quantity_per_attempt,
                    unit_value=value.price,
                    origin=value.origin,
                )
            )
        return revenues

    def _drink_costs(
        self,
        character: CharacterState,
        action: ActionDefinition,
        resolver: PriceResolver,
    ) -> list[DrinkCost]:
        concentration = self.timing_calculator.aggregator.drink_concentration(character)
        default_duration = self.config.consumables.default_buff_duration_seconds

        costs = []
        for drink in character.drinks_for(action.action_type):
            item = self.game_data.get_item(drink.item_hrid)
            duration = default_duration
            if item is not None and item.buff_duration_seconds:
                duration = item.buff_duration_seconds
            price = resolver.resolve(drink.item_hrid, PriceSide.BUY)
            costs.append(
                DrinkCost(
                    item_hrid=drink.item_hrid,
                    unit_price=price.price,
                    drinks_per_hour=drinks_per_hour(concentration, duration),
                    origin=price.origin,
                )
            )
        return costs
