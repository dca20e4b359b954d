"""
Exceptions raised by idleprofit.

Only missing required objects are raised. Missing prices, empty character
data and zero rates degrade to zero values and flags on the results.
"""


class IdleProfitError(Exception):
    """Base class for idleprofit errors."""

    pass


class UnknownActionError(IdleProfitError, KeyError):
    """Raised when no ActionDefinition exists for an action HRID."""

    def __init__(self, action_hrid: str):
        self.action_hrid = action_hrid
        super().__init__(f"Unknown action: {action_hrid}")

    def __str__(self) -> str:
        return f"Unknown action: {self.action_hrid}"


class UnsupportedActionError(IdleProfitError):
    """Raised when an action's archetype has no profit model."""

    pass


class SnapshotLoadError(IdleProfitError):
    """Raised when a snapshot file cannot be read or validated."""

    pass
