"""
Snapshot files for the CLI.

A snapshot bundles everything one calculation needs into a single JSON
or YAML document:

    game_data:  items and actions keyed by HRID
    character:  CharacterState fields
    prices:     list of PriceQuote entries
"""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from idleprofit.engine.pricing import StaticPriceSource
from idleprofit.errors import SnapshotLoadError
from idleprofit.models.character import CharacterState
from idleprofit.models.game_data import GameData
from idleprofit.models.market import PriceQuote


class Snapshot(BaseModel):
    """Game data, character state and market prices captured together."""

    game_data: GameData = Field(default_factory=GameData)
    character: CharacterState = Field(default_factory=CharacterState)
    prices: list[PriceQuote] = Field(default_factory=list)

    def price_source(self) -> StaticPriceSource:
        """Price source serving this snapshot's quotes."""
        return StaticPriceSource(self.prices)


def _read_document(path: Path) -> Any:
    suffix = path.suffix.lower()
    with open(path, "r", encoding="utf-8") as f:
        if suffix == ".json":
            return json.load(f)
        if suffix in (".yaml", ".yml"):
            return yaml.safe_load(f)
    raise SnapshotLoadError(
        f"Unsupported snapshot format: {suffix}. Use .json or .yaml/.yml"
    )


def load_snapshot(path: str | Path) -> Snapshot:
    """Load a snapshot from a JSON or YAML file.

    Args:
        path: Snapshot file path

    Returns:
        Validated Snapshot

    Raises:
        SnapshotLoadError: If the file is missing, unreadable or invalid
    """
    path = Path(path)

    if not path.exists():
        raise SnapshotLoadError(f"Snapshot not found: {path}")

    try:
        data = _read_document(path)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SnapshotLoadError(f"Corrupt snapshot file {path}: {e}") from e
    except OSError as e:
        raise SnapshotLoadError(f"Failed to read snapshot {path}: {e}") from e

    try:
        return Snapshot.model_validate(data or {})
    except ValidationError as e:
        raise SnapshotLoadError(f"Invalid snapshot {path}: {e}") from e


def save_snapshot(snapshot: Snapshot, path: str | Path) -> Path:
    """Write a snapshot to a JSON or YAML file.

    Args:
        snapshot: Snapshot to write
        path: Destination (.json or .yaml/.yml)

    Returns:
        Path written

    Raises:
        SnapshotLoadError: If the format is not supported
    """
    path = Path(path)
    suffix = path.suffix.lower()
    data = snapshot.model_dump(mode="json")

    if suffix == ".json":
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    elif suffix in (".yaml", ".yml"):
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    else:
        raise SnapshotLoadError(
            f"Unsupported snapshot format: {suffix}. Use .json or .yaml/.yml"
        )

    return path
