"""PLO Equity CLI: Typer-based command line interface."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from plo_equity.exceptions import InvalidHandError, RankTableError

app = typer.Typer(
    name="plo-equity",
    help="Pot-Limit Omaha equity calculator",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level",
                                            help="Logging level (default from PLO_LOG_LEVEL)"),
):
    """Monte-Carlo equity for four-card Omaha hands."""
    from plo_equity.logging_config import configure_logging
    configure_logging(log_level, console=console)


def _load_cache(table: Optional[Path]):
    from plo_equity import config
    from plo_equity.ranking import RankCache

    path = table or config.RANK_TABLE_PATH
    if not path.exists():
        console.print(f"[red]Rank table not found:[/red] {path}")
        console.print("Build it with: plo-equity build-table")
        raise typer.Exit(1)
    try:
        return RankCache.from_file(path)
    except RankTableError as e:
        console.print(f"[red]Invalid rank table:[/red] {e}")
        raise typer.Exit(1)


def _criteria(min_trials, max_sigma, max_half_width):
    from plo_equity.models import StoppingCriteria

    defaults = StoppingCriteria.from_config()
    return StoppingCriteria(
        min_trials=defaults.min_trials if min_trials is None else min_trials,
        max_sigma=defaults.max_sigma if max_sigma is None else max_sigma,
        max_half_width=defaults.max_half_width if max_half_width is None else max_half_width,
    )


@app.command()
def build_table(
    output: Optional[Path] = typer.Argument(None, help="Where to write the rank table CSV"),
):
    """Generate the five-card rank table."""
    from plo_equity import config
    from plo_equity.ranking import generate_rank_table, write_rank_table

    path = output or config.RANK_TABLE_PATH
    console.print("Generating all normalized five-card hands...")
    table = generate_rank_table()
    write_rank_table(path, table)
    console.print(f"[green]Wrote {len(table)} hands to[/green] [cyan]{path}[/cyan]")


@app.command()
def equity(
    hero: str = typer.Argument(..., help="Hero hole cards, e.g. KsKh8d7c"),
    opponents: Optional[List[str]] = typer.Argument(None, help="Opponent hands; none means one random opponent"),
    workers: int = typer.Option(1, "--workers", "-w", help="Worker threads"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
    min_trials: Optional[int] = typer.Option(None, "--min-trials", help="Minimum trials before stopping"),
    max_sigma: Optional[float] = typer.Option(None, "--max-sigma", help="Target standard deviation"),
    max_half_width: Optional[float] = typer.Option(None, "--max-half-width",
                                                   help="Target 95% confidence half-width"),
    table: Optional[Path] = typer.Option(None, "--table", "-t", help="Rank table CSV"),
):
    """Estimate the hero's win rate."""
    from plo_equity.simulation import EquityEngine, validate_hands

    try:
        hero_cards, opponent_hands = validate_hands(hero, opponents or [])
    except InvalidHandError as e:
        console.print(f"[red]Invalid input:[/red] {e}")
        raise typer.Exit(1)

    cache = _load_cache(table)
    engine = EquityEngine(cache, criteria=_criteria(min_trials, max_sigma, max_half_width))
    with console.status("Simulating..."):
        result = engine.simulate(hero_cards, opponent_hands, workers=workers, seed=seed)

    out = Table(title=f"Equity: {hero}")
    out.add_column("Metric", style="cyan")
    out.add_column("Value", justify="right", style="green")
    out.add_row("Opponents", ", ".join(opponents) if opponents else "1 random")
    out.add_row("Win rate", f"{result.win_rate * 100:.2f}%")
    out.add_row("Std. deviation", f"{result.standard_deviation * 100:.3f}%")
    out.add_row("95% half-width", f"{result.confidence_half_width * 100:.3f}%")
    out.add_row("Trials", str(result.trials))
    console.print(out)


@app.command()
def rank_hands(
    output: Path = typer.Argument(..., help="CSV file to write"),
    hands: Optional[List[str]] = typer.Option(None, "--hand",
                                              help="Hand to rank (repeatable); all hands if omitted"),
    workers: int = typer.Option(1, "--workers", "-w", help="Worker threads per hand"),
    table: Optional[Path] = typer.Option(None, "--table", "-t", help="Rank table CSV"),
):
    """Rank starting hands by equity against one random opponent."""
    from plo_equity.simulation import EquityEngine, StartingHandRanker, write_rankings

    cache = _load_cache(table)
    ranker = StartingHandRanker(EquityEngine(cache), workers=workers)
    try:
        rankings = ranker.rank(hands or None)
    except InvalidHandError as e:
        console.print(f"[red]Invalid input:[/red] {e}")
        raise typer.Exit(1)

    write_rankings(output, rankings)
    console.print(f"[green]Ranked {len(rankings)} hands into[/green] [cyan]{output}[/cyan]")


@app.command()
def normalize(
    cards: str = typer.Argument(..., help="Cards to normalize, e.g. AhKsKhJd"),
    dependent: Optional[str] = typer.Option(None, "--dependent", "-d",
                                            help="Cards to normalize against the same suit mapping"),
):
    """Show the canonical form of a set of cards."""
    from plo_equity.models import format_cards, parse_cards
    from plo_equity.normalization import normalize as normalize_cards, normalize_dependent

    try:
        parsed = parse_cards(cards)
        normalized, mapping = normalize_cards(parsed)
        other = normalize_dependent(mapping, parse_cards(dependent)) if dependent else None
    except InvalidHandError as e:
        console.print(f"[red]Invalid input:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"Normalized: [cyan]{format_cards(normalized)}[/cyan]")
    for raw in mapping:
        labels = "".join(s.value for s in sorted(mapping[raw].candidates, key=lambda s: s.order))
        console.print(f"  {raw.value} -> {{{labels}}}")
    if other is not None:
        console.print(f"Dependent: [cyan]{format_cards(other)}[/cyan]")


if __name__ == "__main__":
    app()
