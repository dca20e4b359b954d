"""
idleprofit Command-Line Interface.

Reads a snapshot file (game data, character, prices) and prints profit,
queue limits or bonus breakdowns.
"""

import asyncio
import sys
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from idleprofit import __version__
from idleprofit.config.schema import EngineConfig, get_default_config
from idleprofit.engine.batch import BatchProfitRunner
from idleprofit.engine.bonuses import BonusAggregator, BonusCategory
from idleprofit.engine.limits import MaterialLimitCalculator
from idleprofit.engine.profit import PROFITABLE_ARCHETYPES, ProfitCalculator, ProfitResult
from idleprofit.errors import IdleProfitError
from idleprofit.io.snapshot_io import Snapshot, load_snapshot
from idleprofit.logging_setup import configure_logging
from idleprofit.models.market import PricingMode

console = Console()


def format_coins(value: float) -> str:
    """Format a coin amount with thousands separators."""
    if value < 0:
        return f"[red]-{abs(value):,.0f}[/red]"
    return f"{value:,.0f}"


def _load(path: str) -> Snapshot:
    try:
        return load_snapshot(path)
    except IdleProfitError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)


# =============================================================================
# Main CLI Group
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="idleprofit")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Engine configuration file (.json/.yaml)",
)
@click.option("--log-level", default=None, help="Logging level (e.g. DEBUG, INFO)")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], log_level: Optional[str]) -> None:
    """
    idleprofit - bonus aggregation and profit valuation

    Every command reads a snapshot file holding game data, character state
    and market prices.
    """
    configure_logging(level=log_level)
    ctx.ensure_object(dict)
    ctx.obj["config"] = (
        EngineConfig.from_file(config_path) if config_path else get_default_config()
    )


# =============================================================================
# Commands
# =============================================================================


@cli.command()
@click.argument("snapshot_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--action",
    "-a",
    "action_hrids",
    multiple=True,
    help="Action HRID (repeatable; default: every gathering/production/alchemy action)",
)
@click.option(
    "--mode",
    "-m",
    type=click.Choice([mode.value for mode in PricingMode]),
    default=None,
    help="Pricing mode (default: from configuration)",
)
@click.option("--count", "-n", type=float, default=None, help="Queued completions to total")
@click.pass_context
def profit(
    ctx: click.Context,
    snapshot_path: str,
    action_hrids: tuple[str, ...],
    mode: Optional[str],
    count: Optional[float],
) -> None:
    """Show profit per hour for actions in a snapshot."""
    config: EngineConfig = ctx.obj["config"]
    snapshot = _load(snapshot_path)
    game_data = snapshot.game_data

    hrids = list(action_hrids) or [
        hrid
        for hrid, action in game_data.actions.items()
        if config.archetype_of(action.action_type) in PROFITABLE_ARCHETYPES
    ]
    if not hrids:
        console.print("[yellow]No actions to calculate.[/yellow]")
        return

    calculator = ProfitCalculator(game_data, snapshot.price_source(), config)
    runner = BatchProfitRunner(calculator, config)
    pricing_mode = PricingMode(mode) if mode else None
    batch = asyncio.run(runner.run(snapshot.character, hrids, pricing_mode))
    if batch is None:
        console.print("[red]Calculation was superseded.[/red]")
        sys.exit(1)

    table = Table(title="Profit", box=None)
    table.add_column("Action")
    table.add_column("Time (s)", justify="right")
    table.add_column("Actions/h", justify="right")
    table.add_column("Profit/h", justify="right")
    table.add_column("Profit/day", justify="right")
    if count is not None:
        table.add_column(f"Total ({count:,.0f})", justify="right")
    table.add_column("Notes")

    for hrid in hrids:
        entry = batch.entries[hrid]
        name = game_data.actions[hrid].display_name if hrid in game_data.actions else hrid
        if entry.result is None:
            row = [name, "-", "-", "-", "-"]
            if count is not None:
                row.append("-")
            row.append(f"[red]unavailable ({escape(entry.error or '')})[/red]")
            table.add_row(*row)
            continue
        table.add_row(*_profit_row(name, entry.result, count))

    console.print(table)


def _profit_row(name: str, result: ProfitResult, count: Optional[float]) -> list[str]:
    row = [
        name,
        f"{result.action_time:.2f}",
        f"{result.actions_per_hour_effective:,.1f}",
        format_coins(result.profit_per_hour),
        format_coins(result.profit_per_day),
    ]
    if count is not None:
        row.append(format_coins(result.queue_breakdown(count).total_profit))
    notes = ""
    if result.has_missing_prices:
        notes = f"[yellow]no price: {', '.join(result.missing_prices)}[/yellow]"
    row.append(notes)
    return row


@cli.command()
@click.argument("snapshot_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("action_hrid")
@click.pass_context
def limit(ctx: click.Context, snapshot_path: str, action_hrid: str) -> None:
    """Show how many attempts of an action inventory allows."""
    config: EngineConfig = ctx.obj["config"]
    snapshot = _load(snapshot_path)

    calculator = MaterialLimitCalculator(snapshot.game_data, config)
    try:
        queue_limit = calculator.max_attempts(snapshot.character, action_hrid)
    except IdleProfitError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    if queue_limit.is_unbounded:
        console.print(f"{action_hrid}: [green]unlimited[/green] (no materials required)")
        return

    limiting = snapshot.game_data.item_name(queue_limit.limiting_item_hrid or "")
    console.print(
        f"{action_hrid}: [bold]{queue_limit.max_attempts:,}[/bold] attempts "
        f"(limited by {limiting})"
    )


@cli.command()
@click.argument("snapshot_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("action_hrid")
@click.pass_context
def bonuses(ctx: click.Context, snapshot_path: str, action_hrid: str) -> None:
    """Show every bonus source for an action."""
    config: EngineConfig = ctx.obj["config"]
    snapshot = _load(snapshot_path)

    try:
        action = snapshot.game_data.get_action(action_hrid)
    except IdleProfitError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    aggregator = BonusAggregator(snapshot.game_data, config)
    totals = aggregator.all_totals(snapshot.character, action)

    console.print(Panel.fit(
        f"[bold]{action.display_name}[/bold]\n"
        f"[dim]Drink Concentration: "
        f"{aggregator.drink_concentration(snapshot.character) * 100:.2f}%[/dim]",
        border_style="blue",
    ))

    table = Table(box=None)
    table.add_column("Category")
    table.add_column("Source")
    table.add_column("Base", justify="right")
    table.add_column("Scaled", justify="right")

    for category, total in totals.items():
        if not total.contributions:
            continue
        unit = "" if category.is_level else "%"
        for contribution in total.contributions:
            marker = " *" if contribution.concentration_scaled else ""
            table.add_row(
                category.value,
                contribution.source_name + marker,
                f"{contribution.base_value:.2f}",
                f"{contribution.scaled_value:.2f}{unit}",
            )
        table.add_row(
            f"[bold]{category.value}[/bold]", "[bold]Total[/bold]", "",
            f"[bold]{total.total:.2f}{unit}[/bold]",
        )

    console.print(table)
    if any(c.concentration_scaled for t in totals.values() for c in t.contributions):
        console.print("[dim]* scaled by Drink Concentration[/dim]")
    if not totals[BonusCategory.EFFICIENCY].contributions:
        console.print("[dim]No efficiency sources found.[/dim]")


# =============================================================================
# Entry Point
# =============================================================================


if __name__ == "__main__":
    cli()
