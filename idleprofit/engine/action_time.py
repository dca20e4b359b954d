"""
Action time and output calculations.

This module handles:
- Action duration from speed bonuses (and task speed for task actions)
- Converting efficiency into expected completions per attempt
- Actions per hour (base and effective)
- Expected output per attempt for each archetype

Key formulas:
    action_time = base_time / (1 + speed%)  [/ (1 + task_speed%) for tasks]
    expected_actions = 1 + floor(eff / 100) + (eff mod 100) / 100
    actions_per_hour = 3600 / action_time
    effective_actions_per_hour = actions_per_hour * expected_actions

Output per attempt:
    Gathering:   drop_rate * avg_count * (1 + gathering_quantity)
    Production:  output_count (* (1 + gourmet) for gourmet action types)
    Alchemy:     drop_rate * avg_count * success_rate
    Essence:     drop_rate * (1 + essence_find) * avg_count (never success-gated)
    Rare:        drop_rate * (1 + rare_find) * avg_count (* success for alchemy)
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from idleprofit.config.defaults import SECONDS_PER_HOUR
from idleprofit.config.schema import EngineConfig, get_default_config
from idleprofit.engine.bonuses import BonusAggregator, BonusCategory, BonusTotal
from idleprofit.models.actions import ActionArchetype, ActionDefinition
from idleprofit.models.character import CharacterState
from idleprofit.models.game_data import GameData
from idleprofit.models.items import DropEntry

logger = logging.getLogger(__name__)


def action_time(
    base_time_seconds: float,
    speed_percent: float = 0.0,
    task_speed_percent: float = 0.0,
) -> float:
    """Seconds per action after speed bonuses.

    Args:
        base_time_seconds: Base action duration
        speed_percent: Total speed bonus (%)
        task_speed_percent: Task speed bonus (%), applied as a second divisor

    Returns:
        Action duration in seconds (0.0 for a non-positive base time)
    """
    if base_time_seconds <= 0:
        return 0.0

    seconds = base_time_seconds / (1 + speed_percent / 100)
    if task_speed_percent:
        seconds /= 1 + task_speed_percent / 100
    return seconds


def expected_actions_per_attempt(efficiency_percent: float) -> float:
    """Expected completions per attempt for an efficiency %.

    Every full 100% is a guaranteed extra completion; the remainder is
    the chance of one more. Exact at multiples of 100
    (0% -> 1.0, 100% -> 2.0, 150% -> 2.5).
    """
    guaranteed_extra = math.floor(efficiency_percent / 100)
    fractional_chance = efficiency_percent % 100
    return 1 + guaranteed_extra + fractional_chance / 100


@dataclass(frozen=True)
class EfficiencyRoll:
    """Distribution of completions per attempt."""

    guaranteed: int  # Completions every attempt
    chance_for_more: float  # % chance of one extra completion
    min_actions: int
    max_actions: int

    @property
    def expected(self) -> float:
        return self.guaranteed + self.chance_for_more / 100


def efficiency_roll(efficiency_percent: float) -> EfficiencyRoll:
    """Break an efficiency % into guaranteed completions and a chance for more."""
    guaranteed = 1 + math.floor(efficiency_percent / 100)
    chance = efficiency_percent % 100
    return EfficiencyRoll(
        guaranteed=guaranteed,
        chance_for_more=chance,
        min_actions=guaranteed,
        max_actions=guaranteed + (1 if chance > 0 else 0),
    )


def actions_per_hour(seconds_per_action: float) -> float:
    """Actions per hour, 0.0 when the action time is not positive."""
    if seconds_per_action <= 0:
        return 0.0
    return SECONDS_PER_HOUR / seconds_per_action


def hours_for_actions(count: float, effective_actions_per_hour: float) -> float:
    """Hours needed to complete a number of actions."""
    if effective_actions_per_hour <= 0:
        return 0.0
    return count / effective_actions_per_hour


def seconds_for_actions(count: float, effective_actions_per_hour: float) -> float:
    """Seconds needed to complete a number of actions."""
    return hours_for_actions(count, effective_actions_per_hour) * SECONDS_PER_HOUR


def processing_conversion(quantity: float, input_count: float) -> tuple[int, float]:
    """Split a raw quantity into processed batches and leftover raw items.

    Args:
        quantity: Raw items gathered
        input_count: Raw items consumed per processed batch

    Returns:
        (processed batches, raw leftover)
    """
    if input_count <= 0:
        return 0, quantity
    batches = math.floor(quantity / input_count)
    return batches, quantity - batches * input_count


class OutputKind(str, Enum):
    """Where an output item comes from."""

    OUTPUT = "output"
    DROP = "drop"
    GOURMET = "gourmet"
    PROCESSED = "processed"
    ESSENCE = "essence"
    RARE = "rare"


@dataclass(frozen=True)
class ExpectedOutput:
    """Expected quantity of one item per attempt."""

    item_hrid: str
    quantity_per_attempt: float
    kind: OutputKind = OutputKind.OUTPUT
    drop_rate: float = 1.0  # Effective rate after find/success bonuses


@dataclass
class ActionTiming:
    """Timing and bonus state for one action."""

    action_hrid: str
    archetype: ActionArchetype
    base_time: float  # Seconds before bonuses
    action_time: float  # Seconds after speed bonuses
    speed_bonus: float  # %
    task_speed_bonus: float  # % (0 when not a task)
    efficiency: float  # %
    expected_actions_per_attempt: float
    actions_per_hour: float  # Attempts per hour
    success_rate: float = 1.0
    bonuses: dict[BonusCategory, BonusTotal] = field(default_factory=dict)

    @property
    def actions_per_hour_effective(self) -> float:
        """Completions per hour including efficiency."""
        return self.actions_per_hour * self.expected_actions_per_attempt

    @property
    def efficiency_roll(self) -> EfficiencyRoll:
        return efficiency_roll(self.efficiency)

    def items_per_hour(self, output: ExpectedOutput) -> float:
        if self.archetype == ActionArchetype.ALCHEMY:
            # Success rate takes the place of extra completions
            return output.quantity_per_attempt * self.actions_per_hour
        return output.quantity_per_attempt * self.actions_per_hour_effective


class ActionTimeCalculator:
    """Computes action timing and expected outputs for a character.

    Example:
        calculator = ActionTimeCalculator(game_data, config)
        timing = calculator.timing(character, action)
        outputs = calculator.expected_outputs(character, action, timing)
    """

    def __init__(
        self,
        game_data: GameData,
        config: Optional[EngineConfig] = None,
        aggregator: Optional[BonusAggregator] = None,
    ):
        """Initialize the calculator.

        Args:
            game_data: Item and action definitions
            config: Engine configuration (uses defaults if None)
            aggregator: Bonus aggregator (built from game_data/config if None)
        """
        self.game_data = game_data
        self.config = config or get_default_config()
        self.aggregator = aggregator or BonusAggregator(game_data, self.config)

    def timing(self, character: CharacterState, action: ActionDefinition) -> ActionTiming:
        """Compute timing for an action.

        Args:
            character: Character snapshot
            action: Action being performed

        Returns:
            ActionTiming including every bonus total for the action
        """
        bonuses = self.aggregator.all_totals(character, action)
        speed = bonuses[BonusCategory.SPEED].total
        efficiency = bonuses[BonusCategory.EFFICIENCY].total
        task_speed = character.task_speed_bonus if character.is_task(action.hrid) else 0.0

        seconds = action_time(action.base_time_seconds, speed, task_speed)
        if seconds <= 0:
            logger.debug("Action %s has no base time; rates are 0", action.hrid)

        return ActionTiming(
            action_hrid=action.hrid,
            archetype=self.config.archetype_of(action.action_type),
            base_time=action.base_time_seconds,
            action_time=seconds,
            speed_bonus=speed,
            task_speed_bonus=task_speed,
            efficiency=efficiency,
            expected_actions_per_attempt=expected_actions_per_attempt(efficiency),
            actions_per_hour=actions_per_hour(seconds),
            success_rate=success_rate(action, bonuses[BonusCategory.SUCCESS_RATE]),
            bonuses=bonuses,
        )

    def expected_outputs(
        self,
        character: CharacterState,
        action: ActionDefinition,
        timing: Optional[ActionTiming] = None,
    ) -> list[ExpectedOutput]:
        """Expected items produced per attempt.

        Args:
            character: Character snapshot
            action: Action being performed
            timing: Precomputed timing (computed if None)

        Returns:
            One ExpectedOutput per item source
        """
        timing = timing or self.timing(character, action)
        bonuses = timing.bonuses

        if timing.archetype == ActionArchetype.GATHERING:
            outputs = self._gathering_outputs(action, bonuses)
        elif timing.archetype == ActionArchetype.ALCHEMY:
            outputs = [
                _drop_output(entry, timing.success_rate, OutputKind.DROP)
                for entry in action.drop_table
            ]
        else:
            outputs = self._production_outputs(action, bonuses)

        gated = timing.success_rate if timing.archetype == ActionArchetype.ALCHEMY else 1.0
        essence_find = bonuses[BonusCategory.ESSENCE_FIND].multiplier
        rare_find = bonuses[BonusCategory.RARE_FIND].multiplier

        outputs.extend(
            _drop_output(entry, essence_find, OutputKind.ESSENCE)
            for entry in action.essence_drop_table
        )
        outputs.extend(
            _drop_output(entry, rare_find * gated, OutputKind.RARE)
            for entry in action.rare_drop_table
        )
        return outputs

    def items_per_hour(
        self, character: CharacterState, action: ActionDefinition
    ) -> dict[str, float]:
        """Items produced per hour, summed per item HRID."""
        timing = self.timing(character, action)
        rates: dict[str, float] = {}
        for output in self.expected_outputs(character, action, timing):
            rates[output.item_hrid] = rates.get(output.item_hrid, 0.0) + timing.items_per_hour(
                output
            )
        return rates

    def _gathering_outputs(
        self, action: ActionDefinition, bonuses: dict[BonusCategory, BonusTotal]
    ) -> list[ExpectedOutput]:
        quantity_multiplier = bonuses[BonusCategory.GATHERING_QUANTITY].multiplier
        processing_chance = min(1.0, bonuses[BonusCategory.PROCESSING].decimal)
        outputs: list[ExpectedOutput] = []

        for entry in action.drop_table:
            quantity = entry.average_count * quantity_multiplier
            processor = None
            if processing_chance > 0:
                processor = self.game_data.find_processing_action(
                    entry.item_hrid, self.config.action_types.production
                )

            if processor is None:
                outputs.append(
                    ExpectedOutput(
                        entry.item_hrid,
                        quantity * entry.drop_rate,
                        OutputKind.DROP,
                        entry.drop_rate,
                    )
                )
            else:
                outputs.extend(
                    _processed_outputs(entry, quantity, processing_chance, processor)
                )

        return outputs

    def _production_outputs(
        self, action: ActionDefinition, bonuses: dict[BonusCategory, BonusTotal]
    ) -> list[ExpectedOutput]:
        gourmet = self._gourmet_decimal(action, bonuses)
        outputs = []
        for output in action.output_items:
            outputs.append(ExpectedOutput(output.item_hrid, output.count, OutputKind.OUTPUT))
            if gourmet > 0:
                outputs.append(
                    ExpectedOutput(output.item_hrid, output.count * gourmet, OutputKind.GOURMET)
                )
        return outputs

    def _gourmet_decimal(
        self, action: ActionDefinition, bonuses: dict[BonusCategory, BonusTotal]
    ) -> float:
        if action.action_type not in self.config.action_types.gourmet:
            return 0.0
        return bonuses[BonusCategory.GOURMET].decimal


def success_rate(action: ActionDefinition, bonus: BonusTotal) -> float:
    """Chance an attempt succeeds: base rate scaled by the success bonus, capped at 1."""
    return max(0.0, min(1.0, action.base_success_rate * bonus.multiplier))


def _drop_output(entry: DropEntry, rate_multiplier: float, kind: OutputKind) -> ExpectedOutput:
    rate = entry.drop_rate * rate_multiplier
    return ExpectedOutput(entry.item_hrid, rate * entry.average_count, kind, rate)


def _processed_outputs(
    entry: DropEntry,
    quantity: float,
    chance: float,
    processor: ActionDefinition,
) -> list[ExpectedOutput]:
    """Expected raw and processed items when a Processing Tea may proc.

    With probability `chance` the raw quantity converts into processed
    batches plus raw leftovers; otherwise everything stays raw.
    """
    input_count = processor.input_items[0].count
    processed_item = processor.output_items[0]
    batches, leftover = processing_conversion(quantity, input_count)

    raw = (chance * leftover + (1 - chance) * quantity) * entry.drop_rate
    processed = chance * batches * processed_item.count * entry.drop_rate

    outputs = [ExpectedOutput(entry.item_hrid, raw, OutputKind.DROP, entry.drop_rate)]
    if processed > 0:
        outputs.append(
            ExpectedOutput(
                processed_item.item_hrid, processed, OutputKind.PROCESSED, entry.drop_rate
            )
        )
    return outputs
