"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import BridgeConfig, load_config
from ..domain.block_codes import BLOCK_CODES, SLOTS_PER_DAY, Weekday
from ..domain.models import Plan
from ..domain.results import OperationResult
from ..services.plan_bridge import PlanCsvBridge

app = typer.Typer(
    name="spabridge",
    help="Convert exam plans to the csv files of sp-automatisch and back",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./spabridge.yaml"),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show log output.")]


def _setup(config_file: Optional[Path], verbose: bool) -> BridgeConfig:
    """Configure logging and load the configuration, exiting on errors."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    try:
        return load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Fehler:[/bold red] {e}")
        raise typer.Exit(1)


def _fail(result: OperationResult, action: str) -> None:
    console.print(f"[bold red]✗ {action} fehlgeschlagen[/bold red] ({result.kind.value}): {result.message}")
    raise typer.Exit(1)


def _print_plan(plan: Plan) -> None:
    modules = Table(title="Prüfungen", show_header=True, header_style="bold cyan")
    modules.add_column("Nummer", style="bold yellow")
    modules.add_column("Name")
    modules.add_column("Form")
    modules.add_column("Dauer", justify="right")
    modules.add_column("Block", style="dim")

    for module in plan.modules:
        blocks = ", ".join(
            BLOCK_CODES.code_for(timeslot.coordinate) for timeslot in plan.timeslots_of(module)
        )
        modules.add_row(module.number, module.name, module.exam_type.value, str(module.exam_duration), blocks)

    groups = Table(title="Züge", show_header=True, header_style="bold cyan")
    groups.add_column("Zug", style="bold yellow")
    groups.add_column("Aktiv")
    groups.add_column("Prüfungen/Tag", justify="right")
    groups.add_column("Prüfungen", style="dim")

    for group in plan.groups:
        groups.add_row(
            group.name,
            "ja" if group.selected else "nein",
            str(group.exams_per_day),
            ", ".join(f"{link.module.number} ({link.preference})" for link in group.modules),
        )

    console.print()
    console.print(modules)
    console.print()
    console.print(groups)


def _print_grid(plan: Plan) -> None:
    for week in plan.weeks:
        interval = plan.interval_for(week.number)
        title = f"Woche {week.number}"
        if interval.start and interval.end:
            title += f" ({interval.start.format('DD.MM.YYYY')} - {interval.end.format('DD.MM.YYYY')})"

        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("Block", style="bold")
        for day in week.days:
            table.add_column(day.weekday.abbreviation)

        for slot in range(SLOTS_PER_DAY):
            table.add_row(
                str(slot + 1),
                *[
                    "\n".join(module.number for module in day.timeslots[slot].modules)
                    for day in week.days
                ],
            )

        console.print()
        console.print(table)


@app.command()
def status(
    directory: Annotated[Path, typer.Argument(help="Directory containing the csv files")],
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Show which csv files are present in a directory.
    """
    config = _setup(config_file, verbose)
    bridge = PlanCsvBridge(directory, config=config)

    written = "[green]✓ vorhanden[/green]" if bridge.is_written() else "[yellow]✗ unvollständig[/yellow]"
    scheduled = "[green]✓ vorhanden[/green]" if bridge.is_scheduled() else "[yellow]✗ unvollständig[/yellow]"

    console.print(f"\n[bold]Verzeichnis:[/bold] {bridge.path}")
    console.print(f"   Eingabedateien: {written}")
    console.print(f"   Ergebnisdateien ({config.result_directory}): {scheduled}\n")


@app.command()
def show(
    directory: Annotated[Path, typer.Argument(help="Directory containing the csv files")],
    schedule: Annotated[bool, typer.Option("--schedule", "-s", help="Also read the result files of sp-automatisch.")] = False,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Read a plan from the csv files and display it.

    Examples:

        spabridge show ./planung

        spabridge show ./planung --schedule
    """
    config = _setup(config_file, verbose)
    bridge = PlanCsvBridge(directory, config=config)

    result = bridge.read_plan()
    if not result:
        _fail(result, "Einlesen des Plans")
    plan = result.plan

    if schedule:
        merged = bridge.read_schedule(plan)
        if not merged:
            _fail(merged, "Einlesen der Planung")

    _print_plan(plan)
    if schedule:
        _print_grid(plan)
    console.print()


@app.command()
def rewrite(
    source: Annotated[Path, typer.Argument(help="Directory to read the csv files from")],
    target: Annotated[Path, typer.Argument(help="Existing directory to write the csv files to")],
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Read a plan (and its schedule, if present) and write it to another directory.
    """
    config = _setup(config_file, verbose)
    source_bridge = PlanCsvBridge(source, config=config)
    target_bridge = PlanCsvBridge(target, config=config)

    result = source_bridge.read_plan()
    if not result:
        _fail(result, "Einlesen des Plans")
    plan = result.plan

    if source_bridge.is_scheduled():
        merged = source_bridge.read_schedule(plan)
        if not merged:
            _fail(merged, "Einlesen der Planung")

    written = target_bridge.write_plan(plan)
    if not written:
        _fail(written, "Schreiben des Plans")

    console.print(f"[green]✓ {len(plan.modules)} Prüfung(en) nach {target_bridge.path} geschrieben[/green]")


@app.command()
def blocks():
    """
    List all block codes of the planning grid.
    """
    table = Table(title="Blöcke", show_header=True, header_style="bold cyan")
    table.add_column("Woche", style="bold")
    table.add_column("Tag", style="bold")
    for slot in range(1, SLOTS_PER_DAY + 1):
        table.add_column(str(slot))

    weeks = sorted({coordinate.week for coordinate in BLOCK_CODES})
    for week in weeks:
        for weekday in Weekday:
            table.add_row(
                str(week),
                weekday.abbreviation,
                *[BLOCK_CODES.code_for(week, weekday, slot) for slot in range(1, SLOTS_PER_DAY + 1)],
            )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]spabridge[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
