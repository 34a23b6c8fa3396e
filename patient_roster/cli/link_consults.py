"""Command-line interface for linking site consults to canonical patients."""

from pathlib import Path

import click
from rich.console import Console

from ..config import load_config
from ..core.consult_linker import link_consults
from ..core.cross_reference import CrossReferenceIndex
from ..core.diagnostics import DiagnosticsLog
from ..core.pipeline import get_cleaned_roster
from ..utils import SiteLoader
from .resolve import setup_logging

console = Console()


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
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Where to write the linked consults (.parquet or .csv)",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration YAML file",
)
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def main(input_dir: Path, output_path: Path, config_file: Path, verbose: bool):
    """Resolve consult patient identifiers against the canonical roster."""
    setup_logging(verbose)

    config = load_config(config_file)
    if input_dir is not None:
        config.paths.input_dir = input_dir
    if config.paths.input_dir is None:
        raise click.UsageError("--input is required when the config has no input_dir")

    with console.status("[bold blue]Loading roster and consults..."):
        roster = get_cleaned_roster(config)
        consults = SiteLoader.load_site_consults(config.paths.input_dir)

    diagnostics = DiagnosticsLog()
    index = CrossReferenceIndex.from_roster(roster, diagnostics)

    with console.status(f"[bold blue]Linking {len(consults)} consults..."):
        linked = link_consults(consults, roster, index, config.uuid.namespace)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    if output_path.suffix.lower() == ".csv":
        linked.to_csv(output_path, index=False)
    else:
        linked.to_parquet(output_path, index=False)

    diagnostics.export_jsonl(output_path.with_name("link_diagnostics.jsonl"))

    counts = diagnostics.counts()
    console.print(f"[green]✓[/green] Linked {len(linked)} of {len(consults)} consults")
    console.print(
        f"  Ambiguous lookups: {counts.get('ambiguous_cross_reference', 0)}, "
        f"unresolved: {counts.get('unresolved_cross_reference', 0)}"
    )


if __name__ == "__main__":
    main()
