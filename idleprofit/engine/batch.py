"""
Concurrent profit calculation for many actions.

Each action is calculated in its own task and the tasks are awaited
together, so one slow or failing calculation cannot hold up the rest.
Every calculation races a timeout and degrades to UNAVAILABLE instead of
failing the batch.

Character context can change while a batch is running (e.g. the user
switches character). Each run carries a CalculationToken; invalidating
the token source makes older tokens stale, and a stale run discards its
results and returns None. Cancellation is cooperative: the token is
checked after the price refresh and again once every calculation is done.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Optional

from idleprofit.config.schema import EngineConfig
from idleprofit.engine.profit import ProfitCalculator, ProfitResult
from idleprofit.models.character import CharacterState
from idleprofit.models.market import PricingMode

logger = logging.getLogger(__name__)


class CalculationTokenSource:
    """Issues monotonically increasing calculation tokens."""

    def __init__(self) -> None:
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def issue(self) -> "CalculationToken":
        """Start a new calculation, making every earlier token stale."""
        self._generation += 1
        return CalculationToken(self._generation, self)

    def invalidate(self) -> None:
        """Make every outstanding token stale."""
        self._generation += 1

    def is_current(self, token: "CalculationToken") -> bool:
        return token.source is self and token.generation == self._generation


@dataclass(frozen=True)
class CalculationToken:
    """Identifies one batch run."""

    generation: int
    source: CalculationTokenSource = field(compare=False, repr=False)

    @property
    def is_current(self) -> bool:
        return self.source.is_current(self)


class EntryStatus(str, Enum):
    OK = "ok"
    UNAVAILABLE = "unavailable"


@dataclass
class BatchEntry:
    """Outcome for one action in a batch."""

    action_hrid: str
    status: EntryStatus
    result: Optional[ProfitResult] = None
    error: Optional[str] = None

    @property
    def is_available(self) -> bool:
        return self.status == EntryStatus.OK


@dataclass
class BatchResult:
    """Outcomes of a completed, still-current batch run."""

    token: CalculationToken
    entries: dict[str, BatchEntry] = field(default_factory=dict)

    @property
    def available(self) -> dict[str, ProfitResult]:
        return {
            hrid: entry.result
            for hrid, entry in self.entries.items()
            if entry.result is not None
        }

    @property
    def unavailable(self) -> list[str]:
        return [hrid for hrid, entry in self.entries.items() if not entry.is_available]


class BatchProfitRunner:
    """Runs profit calculations for many actions concurrently.

    Example:
        runner = BatchProfitRunner(calculator)
        result = await runner.run(character, action_hrids)
        if result is not None:
            show(result.available)
    """

    def __init__(
        self,
        calculator: ProfitCalculator,
        config: Optional[EngineConfig] = None,
        token_source: Optional[CalculationTokenSource] = None,
    ):
        """Initialize the runner.

        Args:
            calculator: Profit calculator used for every action
            config: Engine configuration (calculator's config if None)
            token_source: Token source shared with whatever invalidates runs
        """
        self.calculator = calculator
        self.config = config or calculator.config
        self.token_source = token_source or CalculationTokenSource()

    @property
    def timeout(self) -> float:
        return self.config.batch.timeout_seconds

    async def run(
        self,
        character: CharacterState,
        action_hrids: Iterable[str],
        pricing_mode: Optional[PricingMode] = None,
        token: Optional[CalculationToken] = None,
        refresh_prices: bool = True,
    ) -> Optional[BatchResult]:
        """Calculate profit for every action concurrently.

        Args:
            character: Character snapshot shared by every calculation
            action_hrids: Actions to calculate
            pricing_mode: Override of the configured pricing mode
            token: Token for this run (a new one is issued if None)
            refresh_prices: Refresh the price source before calculating

        Returns:
            BatchResult, or None when the token went stale during the run
        """
        token = token or self.token_source.issue()
        hrids = list(dict.fromkeys(action_hrids))

        if refresh_prices:
            await self._refresh_prices()
        if not token.is_current:
            logger.debug("Batch %d went stale during price refresh", token.generation)
            return None

        entries = await asyncio.gather(
            *(self._calculate_one(character, hrid, pricing_mode) for hrid in hrids)
        )

        if not token.is_current:
            logger.debug("Batch %d went stale; discarding results", token.generation)
            return None

        return BatchResult(token, {entry.action_hrid: entry for entry in entries})

    async def run_and_apply(
        self,
        character: CharacterState,
        action_hrids: Iterable[str],
        apply: Callable[[BatchResult], None],
        pricing_mode: Optional[PricingMode] = None,
    ) -> bool:
        """Run a batch and hand the results to `apply` if still current.

        Returns:
            True if results were applied
        """
        token = self.token_source.issue()
        result = await self.run(character, action_hrids, pricing_mode, token=token)
        if result is None or not token.is_current:
            return False
        apply(result)
        return True

    async def _refresh_prices(self) -> None:
        try:
            await asyncio.wait_for(self.calculator.price_source.refresh(), self.timeout)
        except asyncio.TimeoutError:
            logger.warning("Price refresh timed out; using existing prices")
        except Exception:
            logger.warning("Price refresh failed; using existing prices", exc_info=True)

    async def _calculate_one(
        self,
        character: CharacterState,
        action_hrid: str,
        pricing_mode: Optional[PricingMode],
    ) -> BatchEntry:
        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(
                    self.calculator.calculate, character, action_hrid, pricing_mode
                ),
                self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Profit calculation for %s timed out after %.1fs", action_hrid, self.timeout
            )
            return BatchEntry(action_hrid, EntryStatus.UNAVAILABLE, error="timeout")
        except Exception as e:
            logger.warning("Profit calculation for %s failed: %s", action_hrid, e)
            return BatchEntry(action_hrid, EntryStatus.UNAVAILABLE, error=str(e))

        return BatchEntry(action_hrid, EntryStatus.OK, result=result)
