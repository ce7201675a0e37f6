#!/usr/bin/env python3
"""
Command-line interface for the combat interaction analyzer.
"""

import logging

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .analyzer.displays import ReportMode
from .analyzer.export import export_csv, export_json
from .analyzer.session import ReportSession
from .config.loader import load_and_apply_config
from .config.settings import get_settings
from .models.snapshot import load_snapshot
from .segmentation.mob_filter import CustomSet, SingleBattle, selected_battles
from .segmentation.mob_list import build_mob_list, parse_mob_selection
from .segmentation.mob_xp import MobXPTable


# Set up rich console for pretty output
console = Console()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    handlers=[RichHandler(console=console, rich_tracebacks=True)],
)
logger = logging.getLogger(__name__)


def _load(data_file):
    try:
        return load_snapshot(data_file)
    except (ValueError, KeyError, yaml.YAMLError) as e:
        raise click.ClickException(f"Could not load {data_file}: {e}")


def _parse_battle_ids(value):
    try:
        return frozenset(int(part) for part in value.split(",") if part.strip())
    except ValueError:
        raise click.BadParameter(f"expected comma-separated battle ids, got {value!r}")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--config", "config_path", type=click.Path(), help="YAML file with custom spell mappings")
@click.pass_context
def cli(ctx, verbose, config_path):
    """FFXI Combat Interaction Analyzer - buff, recovery and curing statistics"""
    settings = get_settings()
    try:
        settings.validate()
    except ValueError as e:
        raise click.ClickException(str(e))

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        settings.log_configuration()
    else:
        logging.getLogger().setLevel(settings.log_level.upper())

    load_and_apply_config(config_path or settings.config_path)
    ctx.obj = settings


@cli.command()
@click.argument("data_file", type=click.Path(exists=True))
@click.option(
    "--mode",
    "-m",
    type=click.Choice([m.value for m in ReportMode]),
    default=None,
    help="Report view (default: AIDSTATS_DEFAULT_MODE or buffs_used)",
)
@click.option("--mob", help='Mob selection: "All", "Name", "Name (xp)" or "id: Name"')
@click.option("--battle", type=int, help="Restrict to a single battle id")
@click.option("--battles", help="Restrict to a comma-separated set of battle ids")
@click.option("--exclude-zero-xp", is_flag=True, help="Skip mobs that gave no XP")
@click.option("--format", "output_format", type=click.Choice(["text", "json", "csv"]), default="text")
@click.option("--output", "-o", help="Output file for json/csv exports")
@click.pass_obj
def report(settings, data_file, mode, mob, battle, battles, exclude_zero_xp, output_format, output):
    """Render a statistics report for an interaction snapshot."""
    snapshot = _load(data_file)
    xp_table = MobXPTable.from_snapshot(snapshot)

    exclude_zero_xp = exclude_zero_xp or settings.report.exclude_zero_xp

    if sum(option is not None for option in (mob, battle, battles)) > 1:
        raise click.UsageError("Use only one of --mob, --battle and --battles")

    if battles is not None:
        criteria = CustomSet(battle_ids=_parse_battle_ids(battles))
    elif battle is not None:
        criteria = SingleBattle(battle_id=battle)
    else:
        criteria = parse_mob_selection(mob, exclude_zero_xp=exclude_zero_xp)

    report_mode = ReportMode(mode or settings.report.default_mode)
    logger.debug(
        f"{report_mode.value}: {criteria!r} selects "
        f"{len(selected_battles(criteria, snapshot, xp_table))} battles"
    )

    session = ReportSession(
        mode=report_mode,
        criteria=criteria,
        base_xp=xp_table,
        max_interactions=settings.report.max_interactions,
    )
    result = session.refresh(snapshot)

    if output_format == "json":
        count = export_json(result, output or "report.json")
        console.print(f"[green]Exported {count} rows to {output or 'report.json'}[/green]")
    elif output_format == "csv":
        count = export_csv(result, output or "report.csv")
        console.print(f"[green]Exported {count} rows to {output or 'report.csv'}[/green]")
    elif result.is_empty:
        console.print("[yellow]No data matches the current selection.[/yellow]")
    else:
        console.print(result.to_rich_text(), soft_wrap=True)


@cli.command()
@click.argument("data_file", type=click.Path(exists=True))
@click.option("--group/--no-group", default=True, help="Group battles by mob name and XP")
@click.option("--exclude-zero-xp", is_flag=True, help="Skip mobs that gave no XP")
def mobs(data_file, group, exclude_zero_xp):
    """List the mob selections available for --mob."""
    snapshot = _load(data_file)
    for entry in build_mob_list(snapshot, group_mobs=group, exclude_zero_xp=exclude_zero_xp):
        console.print(entry, highlight=False, markup=False)


@cli.command()
@click.argument("data_file", type=click.Path(exists=True))
def roster(data_file):
    """Show the combatants that appear in reports."""
    snapshot = _load(data_file)
    members = snapshot.roster()

    if not members:
        console.print("[yellow]No players, pets or fellows in this snapshot.[/yellow]")
        return

    table = Table(title=f"Roster ({len(members)})", show_header=True, header_style="bold magenta")
    table.add_column("Name", width=20)
    table.add_column("Type", width=12)
    table.add_column("Notes")

    for combatant in members:
        table.add_row(
            combatant.name,
            combatant.entity_type.name.replace("_", " ").title(),
            combatant.notes or "",
        )

    console.print(table)


if __name__ == "__main__":
    cli()
