"""
Bonus aggregation for skilling actions.

This module handles:
- Enumerating every bonus source for a category (level advantage, house
  rooms, equipment, teas, community buffs, achievements)
- Scaling each source the way the game does (enhancement for equipment,
  Drink Concentration for teas)
- Summing contributions into a total with an ordered breakdown

Contributions within a category are always summed, never multiplied.
Totals are percentages (15.0 = +15%) except the level categories
(action_level, skill_level) which are flat levels.

Sources per category:
    efficiency          level advantage, house room, equipment, tea,
                        community (production), achievement
    speed               equipment, tea, Observatory, community (enhancing)
    success_rate        equipment, tea, Observatory
    rare_find           equipment, house rooms (all), achievement
    essence_find        equipment, tea, achievement
    wisdom              equipment, tea, house rooms (all), community
    action_level        tea
    skill_level         tea
    gathering_quantity  tea, community, achievement (gathering only)
    gourmet             tea (production only)
    artisan             tea
    processing          tea (gathering only)
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from idleprofit.config.defaults import ACHIEVEMENT_BUFF_KEYS, HOUSE_ROOM_NAMES
from idleprofit.config.schema import EngineConfig, get_default_config
from idleprofit.engine.concentration import drink_concentration, scale_by_concentration
from idleprofit.engine.enhancement import EnhancementScaler
from idleprofit.models.actions import ActionArchetype, ActionDefinition
from idleprofit.models.character import CharacterState
from idleprofit.models.game_data import GameData
from idleprofit.models.items import ConsumableBuff

logger = logging.getLogger(__name__)


class BonusCategory(str, Enum):
    """Categories of skilling bonuses."""

    EFFICIENCY = "efficiency"
    SPEED = "speed"
    SUCCESS_RATE = "success_rate"
    RARE_FIND = "rare_find"
    ESSENCE_FIND = "essence_find"
    WISDOM = "wisdom"
    ACTION_LEVEL = "action_level"
    SKILL_LEVEL = "skill_level"
    GATHERING_QUANTITY = "gathering_quantity"
    GOURMET = "gourmet"
    ARTISAN = "artisan"
    PROCESSING = "processing"

    @property
    def is_level(self) -> bool:
        """Whether totals are levels rather than percentages."""
        return self in (BonusCategory.ACTION_LEVEL, BonusCategory.SKILL_LEVEL)


class BonusSource(str, Enum):
    """Where a contribution comes from."""

    LEVEL = "level"
    HOUSE = "house"
    EQUIPMENT = "equipment"
    CONSUMABLE = "consumable"
    COMMUNITY = "community"
    ACHIEVEMENT = "achievement"


@dataclass(frozen=True)
class BonusContribution:
    """One labelled source of a bonus."""

    source_name: str
    category: BonusCategory
    base_value: float  # Before enhancement/concentration scaling
    scaled_value: float  # Value added to the total
    concentration_scaled: bool = False
    source: BonusSource = BonusSource.EQUIPMENT


@dataclass
class BonusTotal:
    """Sum of every contribution to one category."""

    category: BonusCategory
    contributions: list[BonusContribution] = field(default_factory=list)

    @property
    def total(self) -> float:
        """Total bonus (percent, or levels for level categories)."""
        return sum(c.scaled_value for c in self.contributions)

    @property
    def decimal(self) -> float:
        """Total as a decimal fraction (15% -> 0.15)."""
        return self.total / 100

    @property
    def multiplier(self) -> float:
        """Multiplier applied to a base quantity (15% -> 1.15)."""
        return 1 + self.decimal

    def by_source(self, source: BonusSource) -> float:
        """Sum of contributions from one kind of source."""
        return sum(c.scaled_value for c in self.contributions if c.source == source)


# Tea buff types per category. "{skill}" is replaced by the action's skill.
_TEA_BUFF_TYPES: dict[BonusCategory, list[str]] = {
    BonusCategory.EFFICIENCY: ["/buff_types/efficiency"],
    BonusCategory.SPEED: ["/buff_types/action_speed"],
    BonusCategory.SUCCESS_RATE: ["/buff_types/{skill}_success"],
    BonusCategory.ESSENCE_FIND: ["/buff_types/essence_find"],
    BonusCategory.WISDOM: ["/buff_types/wisdom"],
    BonusCategory.ACTION_LEVEL: ["/buff_types/action_level"],
    BonusCategory.SKILL_LEVEL: ["/buff_types/{skill}_level"],
    BonusCategory.GATHERING_QUANTITY: ["/buff_types/gathering"],
    BonusCategory.GOURMET: ["/buff_types/gourmet"],
    BonusCategory.ARTISAN: ["/buff_types/artisan"],
    BonusCategory.PROCESSING: ["/buff_types/processing"],
}

# Equipment stat names per category. "{skill}" is replaced by the skill name.
_EQUIPMENT_STATS: dict[BonusCategory, list[str]] = {
    BonusCategory.EFFICIENCY: ["{skill}Efficiency", "skillingEfficiency"],
    BonusCategory.SPEED: ["{skill}Speed", "skillingSpeed"],
    BonusCategory.SUCCESS_RATE: ["{skill}Success"],
    BonusCategory.RARE_FIND: ["{skill}RareFind", "skillingRareFind"],
    BonusCategory.ESSENCE_FIND: ["skillingEssenceFind"],
    BonusCategory.WISDOM: ["skillingExperience"],
}

# Categories restricted to one archetype
_ARCHETYPE_ONLY: dict[BonusCategory, ActionArchetype] = {
    BonusCategory.GATHERING_QUANTITY: ActionArchetype.GATHERING,
    BonusCategory.GOURMET: ActionArchetype.PRODUCTION,
    BonusCategory.PROCESSING: ActionArchetype.GATHERING,
}


class BonusAggregator:
    """Aggregates bonuses for a character performing an action.

    Example:
        aggregator = BonusAggregator(game_data, config)
        efficiency = aggregator.efficiency(character, action)
        print(efficiency.total, [c.source_name for c in efficiency.contributions])
    """

    def __init__(self, game_data: GameData, config: Optional[EngineConfig] = None):
        """Initialize the aggregator.

        Args:
            game_data: Item and action definitions
            config: Engine configuration (uses defaults if None)
        """
        self.game_data = game_data
        self.config = config or get_default_config()
        self.scaler = EnhancementScaler(self.config)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def drink_concentration(self, character: CharacterState) -> float:
        """Drink Concentration from equipment (decimal)."""
        return drink_concentration(character, self.scaler)

    def total(
        self,
        category: BonusCategory,
        character: CharacterState,
        action: ActionDefinition,
    ) -> BonusTotal:
        """Aggregate one category for an action.

        Args:
            category: Bonus category
            character: Character snapshot
            action: Action being performed

        Returns:
            BonusTotal with an ordered breakdown
        """
        handlers: dict[BonusCategory, Callable[..., BonusTotal]] = {
            BonusCategory.EFFICIENCY: self.efficiency,
            BonusCategory.SPEED: self.speed,
            BonusCategory.SUCCESS_RATE: self.success_rate,
            BonusCategory.RARE_FIND: self.rare_find,
            BonusCategory.ESSENCE_FIND: self.essence_find,
            BonusCategory.WISDOM: self.wisdom,
            BonusCategory.ACTION_LEVEL: self.action_level,
            BonusCategory.SKILL_LEVEL: self.skill_level,
            BonusCategory.GATHERING_QUANTITY: self.gathering_quantity,
            BonusCategory.GOURMET: self.gourmet,
            BonusCategory.ARTISAN: self.artisan,
            BonusCategory.PROCESSING: self.processing,
        }
        return handlers[BonusCategory(category)](character, action)

    def all_totals(
        self, character: CharacterState, action: ActionDefinition
    ) -> dict[BonusCategory, BonusTotal]:
        """Aggregate every category for an action."""
        return {
            category: self.total(category, character, action)
            for category in BonusCategory
        }

    def efficiency(
        self, character: CharacterState, action: ActionDefinition
    ) -> BonusTotal:
        """Efficiency % (extra completions per attempt).

        Skill level teas feed the level advantage and are not counted
        again as a separate source.
        """
        result = BonusTotal(BonusCategory.EFFICIENCY)

        advantage = self.level_advantage(character, action)
        if advantage > 0:
            result.contributions.append(
                BonusContribution(
                    source_name="Level advantage",
                    category=BonusCategory.EFFICIENCY,
                    base_value=advantage,
                    scaled_value=advantage,
                    source=BonusSource.LEVEL,
                )
            )

        result.contributions.extend(self._house_room(character, action))
        result.contributions.extend(
            self._equipment(character, action, BonusCategory.EFFICIENCY)
        )
        result.contributions.extend(
            self._teas(character, action, BonusCategory.EFFICIENCY)
        )
        result.contributions.extend(
            self._community(character, action, BonusCategory.EFFICIENCY)
        )
        result.contributions.extend(
            self._achievement(character, action, BonusCategory.EFFICIENCY)
        )
        return result

    def speed(self, character: CharacterState, action: ActionDefinition) -> BonusTotal:
        """Action speed %."""
        return self._aggregate(BonusCategory.SPEED, character, action, observatory=True)

    def success_rate(
        self, character: CharacterState, action: ActionDefinition
    ) -> BonusTotal:
        """Success rate % (relative to the action's base success rate)."""
        return self._aggregate(
            BonusCategory.SUCCESS_RATE, character, action, observatory=True
        )

    def rare_find(
        self, character: CharacterState, action: ActionDefinition
    ) -> BonusTotal:
        """Rare find % applied to rare drop rates."""
        return self._aggregate(
            BonusCategory.RARE_FIND, character, action, house_global=True
        )

    def essence_find(
        self, character: CharacterState, action: ActionDefinition
    ) -> BonusTotal:
        """Essence find % applied to essence drop rates."""
        return self._aggregate(BonusCategory.ESSENCE_FIND, character, action)

    def wisdom(self, character: CharacterState, action: ActionDefinition) -> BonusTotal:
        """Experience gain %."""
        return self._aggregate(
            BonusCategory.WISDOM, character, action, house_global=True
        )

    def action_level(
        self, character: CharacterState, action: ActionDefinition
    ) -> BonusTotal:
        """Levels added to the action's requirement by action level teas."""
        return self._aggregate(BonusCategory.ACTION_LEVEL, character, action)

    def skill_level(
        self, character: CharacterState, action: ActionDefinition
    ) -> BonusTotal:
        """Levels added to the character's skill by skill level teas."""
        return self._aggregate(BonusCategory.SKILL_LEVEL, character, action)

    def gathering_quantity(
        self, character: CharacterState, action: ActionDefinition
    ) -> BonusTotal:
        """Gathering quantity % (gathering actions only)."""
        return self._aggregate(BonusCategory.GATHERING_QUANTITY, character, action)

    def gourmet(self, character: CharacterState, action: ActionDefinition) -> BonusTotal:
        """Gourmet % bonus output chance (production actions only)."""
        return self._aggregate(BonusCategory.GOURMET, character, action)

    def artisan(self, character: CharacterState, action: ActionDefinition) -> BonusTotal:
        """Artisan % reduction of input materials."""
        return self._aggregate(BonusCategory.ARTISAN, character, action)

    def processing(
        self, character: CharacterState, action: ActionDefinition
    ) -> BonusTotal:
        """Processing % chance to convert raw gathered items (gathering only)."""
        return self._aggregate(BonusCategory.PROCESSING, character, action)

    def level_advantage(
        self, character: CharacterState, action: ActionDefinition
    ) -> float:
        """Efficiency % from out-levelling an action.

        effective_level = skill level + skill level teas
        effective_requirement = requirement + floor(action level teas)
        advantage = max(0, effective_level - effective_requirement)

        A character with no recorded skill level is treated as exactly
        meeting the requirement.
        """
        base_level = character.skill_level(action.skill_hrid, action.level_requirement)
        effective_level = base_level + self.skill_level(character, action).total
        effective_requirement = action.level_requirement + math.floor(
            self.action_level(character, action).total
        )
        return max(0.0, effective_level - effective_requirement)

    # ------------------------------------------------------------------
    # Source enumeration
    # ------------------------------------------------------------------

    def _aggregate(
        self,
        category: BonusCategory,
        character: CharacterState,
        action: ActionDefinition,
        observatory: bool = False,
        house_global: bool = False,
    ) -> BonusTotal:
        result = BonusTotal(category)

        only = _ARCHETYPE_ONLY.get(category)
        if only is not None and self.config.archetype_of(action.action_type) != only:
            return result

        if observatory:
            result.contributions.extend(self._observatory(character, action, category))
        if house_global:
            result.contributions.extend(self._house_global(character, category))
        result.contributions.extend(self._equipment(character, action, category))
        result.contributions.extend(self._teas(character, action, category))
        result.contributions.extend(self._community(character, action, category))
        result.contributions.extend(self._achievement(character, action, category))
        return result

    def _house_room(
        self, character: CharacterState, action: ActionDefinition
    ) -> list[BonusContribution]:
        room_hrid = self.config.house.action_type_rooms.get(action.action_type)
        if room_hrid is None:
            return []

        level = character.house_room_levels.get(room_hrid, 0)
        if level <= 0:
            return []

        value = level * self.config.house.efficiency_per_level
        return [
            BonusContribution(
                source_name=f"House: {_room_name(room_hrid)}",
                category=BonusCategory.EFFICIENCY,
                base_value=level,
                scaled_value=value,
                source=BonusSource.HOUSE,
            )
        ]

    def _observatory(
        self,
        character: CharacterState,
        action: ActionDefinition,
        category: BonusCategory,
    ) -> list[BonusContribution]:
        house = self.config.house
        if action.action_type not in self.config.action_types.enhancing:
            return []

        rate = house.observatory_rates.get(category.value, 0.0)
        level = character.house_room_levels.get(house.observatory_hrid, 0)
        if rate == 0.0 or level <= 0:
            return []

        return [
            BonusContribution(
                source_name=f"House: {_room_name(house.observatory_hrid)}",
                category=category,
                base_value=level,
                scaled_value=level * rate,
                source=BonusSource.HOUSE,
            )
        ]

    def _house_global(
        self, character: CharacterState, category: BonusCategory
    ) -> list[BonusContribution]:
        rate = self.config.house.global_rates.get(category.value, 0.0)
        total_levels = sum(
            level for level in character.house_room_levels.values() if level > 0
        )
        if rate == 0.0 or total_levels == 0:
            return []

        return [
            BonusContribution(
                source_name="House rooms",
                category=category,
                base_value=total_levels,
                scaled_value=total_levels * rate,
                source=BonusSource.HOUSE,
            )
        ]

    def _equipment(
        self,
        character: CharacterState,
        action: ActionDefinition,
        category: BonusCategory,
    ) -> list[BonusContribution]:
        stat_names = [
            stat.format(skill=action.skill_name)
            for stat in _EQUIPMENT_STATS.get(category, [])
        ]
        contributions = []

        for item in character.equipment.values():
            for stat_name in stat_names:
                base_value = item.noncombat_stats.get(stat_name, 0.0)
                if base_value == 0.0:
                    continue
                scaled = self.scaler.scaled_stat(item, stat_name)
                name = self.game_data.item_name(item.item_hrid)
                if item.enhancement_level > 0:
                    name = f"{name} +{item.enhancement_level}"
                contributions.append(
                    BonusContribution(
                        source_name=name,
                        category=category,
                        base_value=base_value * 100,
                        scaled_value=scaled * 100,
                        source=BonusSource.EQUIPMENT,
                    )
                )

        return contributions

    def _teas(
        self,
        character: CharacterState,
        action: ActionDefinition,
        category: BonusCategory,
    ) -> list[BonusContribution]:
        buff_types = {
            buff_type.format(skill=action.skill_name)
            for buff_type in _TEA_BUFF_TYPES.get(category, [])
        }
        if not buff_types:
            return []

        drinks = character.drinks_for(action.action_type)
        if not drinks:
            return []

        concentrate = True
        if category == BonusCategory.ACTION_LEVEL:
            concentrate = self.config.bonuses.scale_action_level_with_concentration
        concentration = self.drink_concentration(character) if concentrate else 0.0

        contributions = []
        for drink in drinks:
            item = self.game_data.get_item(drink.item_hrid)
            if item is None:
                logger.debug("Drink %s has no item detail; skipped", drink.item_hrid)
                continue
            for buff in item.consumable_buffs:
                if buff.type_hrid not in buff_types:
                    continue
                contributions.append(
                    self._tea_contribution(
                        item.display_name, category, buff, concentration, concentrate
                    )
                )

        return contributions

    @staticmethod
    def _tea_contribution(
        name: str,
        category: BonusCategory,
        buff: ConsumableBuff,
        concentration: float,
        concentrate: bool,
    ) -> BonusContribution:
        base_value = buff.magnitude if category.is_level else buff.magnitude * 100
        return BonusContribution(
            source_name=name,
            category=category,
            base_value=base_value,
            scaled_value=scale_by_concentration(base_value, concentration),
            concentration_scaled=concentrate and concentration != 0.0,
            source=BonusSource.CONSUMABLE,
        )

    def _community(
        self,
        character: CharacterState,
        action: ActionDefinition,
        category: BonusCategory,
    ) -> list[BonusContribution]:
        contributions = []
        for buff_hrid, rule in self.config.community_buffs.items():
            if rule.category != category.value or not rule.applies_to(action.action_type):
                continue
            tier = character.community_buff_levels.get(buff_hrid, 0)
            value = rule.percent_at(tier)
            if value == 0.0:
                continue
            name = buff_hrid.rsplit("/", 1)[-1].replace("_", " ").title()
            contributions.append(
                BonusContribution(
                    source_name=f"Community: {name}",
                    category=category,
                    base_value=tier,
                    scaled_value=value,
                    source=BonusSource.COMMUNITY,
                )
            )
        return contributions

    def _achievement(
        self,
        character: CharacterState,
        action: ActionDefinition,
        category: BonusCategory,
    ) -> list[BonusContribution]:
        key = ACHIEVEMENT_BUFF_KEYS.get(category.value)
        if key is None:
            return []

        value = character.achievement_buffs.get(action.action_type, {}).get(key, 0.0)
        if value == 0.0:
            return []

        return [
            BonusContribution(
                source_name="Achievements",
                category=category,
                base_value=value * 100,
                scaled_value=value * 100,
                source=BonusSource.ACHIEVEMENT,
            )
        ]


def _room_name(room_hrid: str) -> str:
    return HOUSE_ROOM_NAMES.get(
        room_hrid, room_hrid.rsplit("/", 1)[-1].replace("_", " ").title()
    )
