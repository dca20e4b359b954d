"""
Game data snapshot: every item and action definition.

Lookups for actions fail fast (an unknown action is a programmer error);
lookups for items return None so callers can degrade.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from idleprofit.errors import UnknownActionError
from idleprofit.models.actions import ActionDefinition
from idleprofit.models.items import ItemDetail


class GameData(BaseModel):
    """Static item and action definitions keyed by HRID."""

    model_config = ConfigDict(frozen=True)

    items: dict[str, ItemDetail] = Field(default_factory=dict)
    actions: dict[str, ActionDefinition] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def fill_hrids(cls, data: Any) -> Any:
        """Allow definitions keyed by HRID to omit their own hrid field."""
        if not isinstance(data, dict):
            return data
        for section in ("items", "actions"):
            entries = data.get(section)
            if not isinstance(entries, dict):
                continue
            data = {
                **data,
                section: {
                    hrid: {"hrid": hrid, **entry} if isinstance(entry, dict) else entry
                    for hrid, entry in entries.items()
                },
            }
        return data

    @classmethod
    def from_lists(
        cls,
        items: Optional[list[ItemDetail]] = None,
        actions: Optional[list[ActionDefinition]] = None,
    ) -> "GameData":
        """Build game data from lists of definitions."""
        return cls(
            items={item.hrid: item for item in items or []},
            actions={action.hrid: action for action in actions or []},
        )

    def get_item(self, item_hrid: str) -> Optional[ItemDetail]:
        return self.items.get(item_hrid)

    def get_action(self, action_hrid: str) -> ActionDefinition:
        """Look up an action definition.

        Raises:
            UnknownActionError: If the action does not exist
        """
        try:
            return self.actions[action_hrid]
        except KeyError:
            raise UnknownActionError(action_hrid) from None

    def item_name(self, item_hrid: str) -> str:
        item = self.items.get(item_hrid)
        if item is not None:
            return item.display_name
        return item_hrid.rsplit("/", 1)[-1].replace("_", " ").title()

    def find_producing_action(self, item_hrid: str) -> Optional[ActionDefinition]:
        """First action whose outputs include the item, if any."""
        for action in self.actions.values():
            if any(output.item_hrid == item_hrid for output in action.output_items):
                return action
        return None

    def find_processing_action(
        self, raw_item_hrid: str, action_types: Optional[list[str]] = None
    ) -> Optional[ActionDefinition]:
        """Action converting a raw gathered item, e.g. milk into cheese.

        A processing action's first input is the raw item.

        Args:
            raw_item_hrid: Gathered item to convert
            action_types: Restrict the search to these action types

        Returns:
            The processing action, or None
        """
        for action in self.actions.values():
            if action_types is not None and action.action_type not in action_types:
                continue
            if not action.input_items or not action.output_items:
                continue
            if action.input_items[0].item_hrid == raw_item_hrid:
                return action
        return None
