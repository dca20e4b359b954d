"""
idleprofit - Bonus aggregation and profit valuation for an idle game

Turns a snapshot of character state, equipment, consumables and market
prices into action timings, output rates and hourly profit.

This package provides:
- Enhancement and Drink Concentration scaling of bonus sources
- A bonus aggregator with per-source breakdowns
- Action time, output and profit calculators for gathering, production
  and alchemy
- Material queue limits and a concurrent batch runner
- A small CLI over JSON/YAML snapshot files
"""

__version__ = "0.1.0"

from idleprofit.config.defaults import DEFAULT_CONFIG

__all__ = [
    "__version__",
    "DEFAULT_CONFIG",
]
