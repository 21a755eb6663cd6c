"""
Command-line interface for layerweave.

Provides commands for inspecting the global layer schedule of a build,
writing its infill toolpaths, and listing configuration profiles.
"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from layerweave import __version__
from layerweave.build.loader import load_build
from layerweave.core.config import ConfigManager, LayerOrdering
from layerweave.core.exceptions import LayerWeaveError
from layerweave.core.logging import configure_logging
from layerweave.pipeline import BuildPipeline
from layerweave.scheduling.layer_order import log_global_layers, schedule

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Minimum log level",
)
@click.option("--json-logs", is_flag=True, help="Emit JSON log lines")
@click.pass_context
def main(ctx: click.Context, log_level: str, json_logs: bool) -> None:
    """layerweave - multi-part layer scheduling and infill toolpaths."""
    ctx.ensure_object(dict)
    configure_logging(level=log_level, json_output=json_logs)


# =============================================================================
# Scheduling Commands
# =============================================================================


@main.command("schedule")
@click.argument("build_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--ordering",
    type=click.Choice([o.value for o in LayerOrdering]),
    default=None,
    help="Override the layer ordering policy",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Append a plain-text dump of the global layers to this file",
)
def schedule_command(build_file: Path, ordering: Optional[str], log_file: Optional[Path]) -> None:
    """Show how the parts of a build interleave into global layers."""
    try:
        settings, parts = load_build(build_file)
        layers = schedule(parts, ordering, settings.scheduler)
    except LayerWeaveError as e:
        console.print(f"[red]✗[/red] Scheduling failed: {e}")
        raise SystemExit(1)

    if log_file is not None:
        log_global_layers(layers, log_file)

    names = {part.get_id(): part.name for part in parts}
    step_index = {
        id(pair): i for part in parts for i, pair in enumerate(part.step_pairs)
    }

    table = Table(title=f"Global layers ({ordering or settings.scheduler.layer_ordering.value})")
    table.add_column("Layer", style="cyan", justify="right")
    table.add_column("Steps")
    for layer in layers:
        entries = ", ".join(
            f"{names[part_id]}:{step_index[id(pair)]}"
            for part_id, pair in layer.get_step_pairs().items()
        )
        table.add_row(str(layer.index), entries or "-")

    console.print(table)


@main.command("toolpath")
@click.argument("build_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the program here instead of stdout",
)
def toolpath_command(build_file: Path, output: Optional[Path]) -> None:
    """Schedule a build and write the infill toolpaths of every layer."""
    try:
        settings, parts = load_build(build_file)
        result = BuildPipeline().execute(parts, settings)
    except LayerWeaveError as e:
        console.print(f"[red]✗[/red] Toolpath generation failed: {e}")
        raise SystemExit(1)

    if not result.success:
        for error in result.errors:
            console.print(f"[red]✗[/red] {error}")
        raise SystemExit(1)

    if output is None:
        click.echo(result.program, nl=False)
        return

    output.write_text(result.program)
    console.print(
        f"[green]✓[/green] Wrote {len(result.global_layers)} layers, "
        f"{sum(result.path_counts.values())} paths "
        f"({sum(result.path_lengths.values()):.1f} mm) to {output}"
    )


# =============================================================================
# Configuration Commands
# =============================================================================


@main.group()
@click.option(
    "--config-dir",
    type=click.Path(exists=True, path_type=Path),
    default="config",
    help="Configuration directory",
)
@click.pass_context
def config(ctx: click.Context, config_dir: Path) -> None:
    """Configuration management commands."""
    ctx.obj["config_dir"] = config_dir


@config.command("list-profiles")
@click.pass_context
def config_list_profiles(ctx: click.Context) -> None:
    """List available slicing profiles."""
    try:
        config_mgr = ConfigManager(ctx.obj["config_dir"])
        profiles = config_mgr.list_profiles()

        if not profiles:
            console.print("[yellow]No profiles found.[/yellow]")
            return

        table = Table(title="Available Profiles")
        table.add_column("Name", style="cyan")
        table.add_column("Pattern")
        table.add_column("Layer Height")

        for name in profiles:
            profile = config_mgr.get_profile(name)
            table.add_row(name, profile.infill.pattern.value, f"{profile.layer_height:g}")

        console.print(table)

    except LayerWeaveError as e:
        console.print(f"[red]✗[/red] Failed to list profiles: {e}")
        raise SystemExit(1)


@config.command("show")
@click.argument("name")
@click.pass_context
def config_show(ctx: click.Context, name: str) -> None:
    """Show the settings of one profile."""
    try:
        settings = ConfigManager(ctx.obj["config_dir"]).get_build_settings(name)
    except LayerWeaveError as e:
        console.print(f"[red]✗[/red] {e}")
        raise SystemExit(1)

    console.print_json(settings.model_dump_json())


if __name__ == "__main__":
    main()
