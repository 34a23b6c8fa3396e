"""Command-line interface for building the canonical patient roster."""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import ResolutionConfig, load_config
from ..core.diagnostics import DiagnosticsLog
from ..core.pipeline import get_cleaned_roster
from ..utils import RosterValidator, prepare_output_data

console = Console()


def setup_logging(verbose: bool = False):
    """
    Setup logging configuration.

    Args:
        verbose: Enable debug level logging
    """
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@click.command()
@click.option(
    "--input",
    "input_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory with one subdirectory per clinic site (overrides config)",
)
@click.option(
    "--output",
    "output_dir",
    type=click.Path(path_type=Path),
    default=None,
    help="Output directory (overrides config)",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration YAML file",
)
@click.option(
    "--cache-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Roster cache file, .parquet or .csv (overrides config)",
)
@click.option(
    "--cache/--no-cache",
    "use_cache",
    default=None,
    help="Reuse the cached roster if present (default from config)",
)
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def main(
    input_dir: Path,
    output_dir: Path,
    config_file: Path,
    cache_path: Path,
    use_cache: bool,
    verbose: bool,
):
    """
    Patient Roster Resolution

    Merges per-site patient extracts into one canonical roster with
    deterministic patient UUIDs, and writes the patient import table.
    """
    setup_logging(verbose)

    console.print(
        Panel.fit("[bold cyan]Patient Roster Resolution[/bold cyan]")
    )

    config = load_config(config_file)

    # Apply CLI overrides
    if input_dir is not None:
        config.paths.input_dir = input_dir
    if output_dir is not None:
        config.paths.output_dir = output_dir
    if cache_path is not None:
        config.paths.cache_path = cache_path
    if use_cache is not None:
        config.use_cache = use_cache

    display_configuration(config)

    diagnostics = DiagnosticsLog()
    with console.status("[bold blue]Resolving patient roster..."):
        roster = get_cleaned_roster(config, diagnostics=diagnostics)

    is_valid, errors = RosterValidator().validate_roster(roster)
    if not is_valid:
        console.print("\n[bold red]✗ Roster failed validation:[/bold red]")
        for error in errors:
            console.print(f"  • {error}")
        raise click.ClickException("Roster failed validation")

    out = config.paths.output_dir
    out.mkdir(parents=True, exist_ok=True)

    roster.to_parquet(out / "roster.parquet", index=False)
    prepare_output_data(roster).to_csv(out / "patients.csv", index=False)
    diagnostics.export_jsonl(out / "diagnostics.jsonl")

    display_summary(roster, diagnostics)
    console.print(f"\n[bold green]✓ Output written to {out}[/bold green]")


def display_configuration(config: ResolutionConfig):
    """Display configuration summary."""
    table = Table(title="Configuration Summary", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Input Directory", str(config.paths.input_dir))
    table.add_row("Cache", f"{config.paths.cache_path} ({'on' if config.use_cache else 'off'})")
    table.add_row("Manual Overrides", str(len(config.manual_overrides)))
    table.add_row("UUID Namespace", str(config.uuid.namespace))
    table.add_row("Timezone", config.timezone)

    console.print(table)


def display_summary(roster, diagnostics: DiagnosticsLog):
    """Display final summary statistics."""
    console.print("\n" + "=" * 60)
    console.print("[bold cyan]Resolution Summary[/bold cyan]")
    console.print("=" * 60)

    multi_site = roster["origin_sites"].str.contains(",").sum()
    split = (roster["canonical_id"] != roster["local_id"]).sum()

    console.print(f"  Patients: {len(roster)}")
    console.print(f"  Registered at several sites: {multi_site}")
    console.print(f"  Renamed by override or split: {split}")

    counts = diagnostics.counts()
    if counts:
        console.print("\n[bold]Diagnostics:[/bold]")
        for kind, count in sorted(counts.items()):
            console.print(f"  {kind}: {count}")
    else:
        console.print("\n[dim]No diagnostics (roster may have come from cache)[/dim]")


if __name__ == "__main__":
    main()
