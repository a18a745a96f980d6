from __future__ import annotations
import time
from pathlib import Path
from typing import List, Optional

import typer
import yaml
from pydantic import ValidationError
from rich import print
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from radarmerge.config.settings import ObstacleConfig, PipelineConfig, RadarConfig, Settings, TerrainConfig, load_settings
from radarmerge.geo.earth import single_horizon_distance
from radarmerge.geo.errors import GeometryError
from radarmerge.geo.geometry import area
from radarmerge.io.csv_input import parse_csv_radars
from radarmerge.io.export import export_geojson, export_svg
from radarmerge.manager import CoverageMergeManager
from radarmerge.models.radar import RadarParams
from radarmerge.utils.logging import log_memory_usage, setup_logging

__version__ = "0.1.0"

app = typer.Typer(help="Multi-radar coverage merging utility", context_settings={"help_option_names": ["-h", "--help"]})


def version_callback(value: bool):
    if value:
        print(f"\n[bold cyan]RadarMerge v{__version__}[/bold cyan]")
        print("\n[bold]Terrain-aware radar coverage merging[/bold]")
        print("\n[bold]Key Features:[/bold]")
        print(" • Line-of-sight footprints with Earth curvature and terrain masking")
        print(" • Nonzero-winding polygon booleans with hole recovery")
        print(" • SVG and GeoJSON export\n")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True, help="Show version and info."
    )
):
    """
    RadarMerge: merge the terrain-limited coverage of many radars into regions with holes.
    """
    pass


def format_duration(seconds: float) -> str:
    """Format seconds into human readable string (e.g. 1h 23m 45s)."""
    m, s = divmod(int(seconds), 60)
    h, m = divmod(m, 60)
    parts = []
    if h > 0:
        parts.append(f"{h}h")
    if m > 0:
        parts.append(f"{m}m")
    parts.append(f"{s}s")
    return " ".join(parts)


def _resolve_inputs(input_path: Optional[Path]) -> List[Path]:
    """Resolve input path to a list of CSV files."""
    if input_path is None:
        return []
    if input_path.is_dir():
        return sorted(input_path.glob("*.csv"))
    return [input_path]


def _load_radars(input_files: List[Path]) -> List[RadarParams]:
    """Load radars from multiple CSV files."""
    all_radars = []
    for file_path in input_files:
        if not file_path.exists():
            print(f"[yellow]Warning: Input file {file_path} not found.[/yellow]")
            continue
        if file_path.suffix.lower() != ".csv":
            print(f"[yellow]Warning: Unsupported file type {file_path.suffix} for {file_path.name}[/yellow]")
            continue
        all_radars.extend(parse_csv_radars(file_path))
    return all_radars


def demo_settings() -> Settings:
    """Built-in scenario: five radars around three hills on an 800x600 canvas."""
    return Settings(
        pipeline=PipelineConfig(ray_count=72, simplify_epsilon=2.0, smooth_iterations=1),
        terrain=TerrainConfig(obstacles=[
            ObstacleConfig(center=(400, 280), rx=100, ry=80, height=800, name="Central Ridge"),
            ObstacleConfig(center=(250, 400), rx=50, ry=60, height=400, name="West Hill"),
            ObstacleConfig(center=(550, 420), rx=60, ry=50, height=450, name="East Hill"),
        ]),
        radars=[
            RadarConfig(id=1, name="Radar A", position=(200, 200), range_m=180, height_m=80),
            RadarConfig(id=2, name="Radar B", position=(600, 180), range_m=160, height_m=100),
            RadarConfig(id=3, name="Radar C", position=(150, 400), range_m=140, height_m=70),
            RadarConfig(id=4, name="Radar D", position=(650, 380), range_m=150, height_m=90),
            RadarConfig(id=5, name="Radar E", position=(400, 500), range_m=170, height_m=85),
        ],
    )


def _print_summary(console: Console, manager: CoverageMergeManager, created_files: List[Path], duration: float):
    terrain = manager.terrain
    table = Table(title="Radar Coverage Summary")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Range", justify="right")
    table.add_column("Horizon", justify="right")
    table.add_column("Coverage Area", justify="right")

    for radar, poly in zip(manager.radars, manager.individual_coverages):
        horizon = single_horizon_distance(radar.height_m, terrain.earth_radius_m, terrain.curvature_coefficient)
        table.add_row(
            str(radar.id),
            escape(radar.name),
            f"{radar.range_m:.1f}",
            f"{horizon:.1f}",
            f"{area(poly):.1f}",
        )
    console.print(table)

    stats = manager.stats
    console.print(f"\n[bold]Merged Regions:[/bold] {stats.region_count}")
    console.print(f"[bold]Holes:[/bold] {stats.total_hole_count}")
    console.print(f"[bold]Total Area:[/bold] {stats.total_area:.1f}")
    console.print(f"[bold]Total Perimeter:[/bold] {stats.total_perimeter:.1f}")
    console.print(f"\n[bold]Total Execution Time:[/bold] {duration:.2f}s ({format_duration(duration)})")
    console.print(f"[bold]Files Created:[/bold] {len(created_files)}")
    for path in created_files:
        console.print(f"  [cyan]{escape(str(path))}[/cyan]")


def _export(settings: Settings, manager: CoverageMergeManager, output_dir: Path) -> List[Path]:
    created = []
    base = output_dir / settings.output_basename
    if "SVG" in settings.export_formats:
        created.append(export_svg(
            base.with_suffix(".svg"),
            manager.radars,
            manager.individual_coverages,
            manager.merged_coverage,
            manager.terrain.obstacles,
            settings.style.model_dump(),
        ))
    if "GeoJSON" in settings.export_formats:
        created.append(export_geojson(base.with_suffix(".geojson"), manager.merged_coverage))
    return created


def _process(settings: Settings, radars: List[RadarParams], output_dir: Path, verbose: int) -> None:
    start_time = time.time()
    console = Console()
    log = setup_logging(settings.logging, verbose=verbose, console=console)

    manager = CoverageMergeManager.from_settings(settings)
    for radar in radars:
        manager.add_radar(radar)

    if not manager.radars:
        print("[red]No radars defined. Add radars to the config or pass --input.[/red]")
        raise typer.Exit(code=1)

    if verbose >= 1:
        print(f"[bold cyan]Loaded {len(manager.radars)} radars and {len(manager.terrain.obstacles)} obstacles.[/bold cyan]")

    created_files = _export(settings, manager, output_dir)
    log_memory_usage(log, "after export")
    _print_summary(console, manager, created_files, time.time() - start_time)


@app.command()
def run(
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config YAML"),
    input_path: Optional[Path] = typer.Option(None, "--input", "-i", help="Radar CSV file or directory of CSV files"),
    output_dir: Optional[Path] = typer.Option(None, "--output", "-o", help="Output directory"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Verbosity level: 0=Standard, 1=Info, 2=Debug"),
):
    """
    Compute, merge and export the coverage of the radars in the config (plus any CSV input).
    """
    try:
        settings = Settings.from_file(config) if config else load_settings()
        radars = _load_radars(_resolve_inputs(input_path))
        out = output_dir if output_dir else settings.resolve_path(settings.output_dir)
        _process(settings, radars, out, verbose)
    except FileNotFoundError as e:
        print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)
    except yaml.YAMLError as e:
        print(f"[red]Could not parse configuration:[/red]\n{escape(str(e))}")
        raise typer.Exit(code=1)
    except ValidationError as e:
        print(f"[red]Invalid configuration:[/red]\n{escape(str(e))}")
        raise typer.Exit(code=1)
    except (GeometryError, ValueError) as e:
        print(f"[red]Coverage computation failed: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@app.command()
def demo(
    output_dir: Path = typer.Option(Path("working_files/output"), "--output", "-o", help="Output directory"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Verbosity level: 0=Standard, 1=Info, 2=Debug"),
):
    """
    Run the built-in five-radar scenario and export SVG and GeoJSON.
    """
    try:
        _process(demo_settings(), [], output_dir, verbose)
    except GeometryError as e:
        print(f"[red]Coverage computation failed: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
