"""
Material limits for queued actions.

How many attempts can the character afford with what is in inventory?

    effective_requirement = count * (1 - artisan)
    max_attempts = min(floor(available / effective_requirement))

taken over every input item and the upgrade item (which Artisan never
reduces). Artisan only reduces production inputs. Bulk-consumption actions are driven by one primary item:

    max_attempts = floor(available / bulk_multiplier)

Actions without any inputs are unbounded, reported explicitly rather than
as an infinite float.
"""

import math
from dataclasses import dataclass
from typing import Optional

from idleprofit.config.schema import EngineConfig
from idleprofit.engine.bonuses import BonusAggregator
from idleprofit.models.actions import ActionArchetype, ActionDefinition
from idleprofit.models.character import CharacterState
from idleprofit.models.game_data import GameData

# Absorbs float error in quotients that should be whole (e.g. 10 / (4 * 0.5))
_FLOOR_EPSILON = 1e-9


@dataclass(frozen=True)
class QueueLimit:
    """Maximum number of attempts inventory allows."""

    max_attempts: Optional[int]  # None when unbounded
    limiting_item_hrid: Optional[str] = None

    @classmethod
    def unbounded(cls) -> "QueueLimit":
        return cls(max_attempts=None)

    @property
    def is_unbounded(self) -> bool:
        return self.max_attempts is None


def _attempts(available: float, per_attempt: float) -> int:
    if per_attempt <= 0:
        return 0
    return max(0, math.floor(available / per_attempt + _FLOOR_EPSILON))


def calculate_max_attempts(
    inventory: dict[str, float],
    action: ActionDefinition,
    artisan_percent: float = 0.0,
) -> QueueLimit:
    """Attempts affordable from inventory.

    Args:
        inventory: Item HRID -> count owned
        action: Action to queue
        artisan_percent: Artisan bonus (%) reducing input requirements

    Returns:
        QueueLimit naming the item that runs out first
    """
    if action.primary_item_hrid is not None:
        available = inventory.get(action.primary_item_hrid, 0)
        return QueueLimit(
            _attempts(available, action.bulk_multiplier),
            action.primary_item_hrid,
        )

    artisan = min(1.0, max(0.0, artisan_percent / 100))
    requirements: list[tuple[str, float]] = [
        (item.item_hrid, item.count * (1 - artisan)) for item in action.input_items
    ]
    if action.upgrade_item_hrid:
        requirements.append((action.upgrade_item_hrid, 1.0))

    if not requirements:
        return QueueLimit.unbounded()

    limits = [
        (_attempts(inventory.get(item_hrid, 0), per_attempt), item_hrid)
        for item_hrid, per_attempt in requirements
        if per_attempt > 0
    ]
    if not limits:
        # Artisan reduced every requirement to nothing
        return QueueLimit.unbounded()

    attempts, item_hrid = min(limits, key=lambda limit: limit[0])
    return QueueLimit(attempts, item_hrid)


class MaterialLimitCalculator:
    """Bounds queue sizes by the character's inventory.

    Example:
        limits = MaterialLimitCalculator(game_data)
        limit = limits.max_attempts(character, "/actions/cooking/donut")
    """

    def __init__(
        self,
        game_data: GameData,
        config: Optional[EngineConfig] = None,
        aggregator: Optional[BonusAggregator] = None,
    ):
        self.game_data = game_data
        self.aggregator = aggregator or BonusAggregator(game_data, config)

    def max_attempts(self, character: CharacterState, action_hrid: str) -> QueueLimit:
        """Attempts the character can afford for an action.

        Raises:
            UnknownActionError: If the action does not exist
        """
        action = self.game_data.get_action(action_hrid)
        artisan = 0.0
        archetype = self.aggregator.config.archetype_of(action.action_type)
        if archetype == ActionArchetype.PRODUCTION:
            artisan = self.aggregator.artisan(character, action).total
        return calculate_max_attempts(character.inventory, action, artisan)
