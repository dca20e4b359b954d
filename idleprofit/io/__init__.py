"""
File I/O for idleprofit.

This module handles reading and writing snapshot files (JSON/YAML) that
bundle game data, character state and market prices for the CLI.
"""

from idleprofit.io.snapshot_io import Snapshot, load_snapshot, save_snapshot

__all__ = [
    "Snapshot",
    "load_snapshot",
    "save_snapshot",
]
