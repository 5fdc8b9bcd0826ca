"""
BIPV Solar Exposure CLI.

Command-line interface for inspecting sun position, scoring an instant and
replaying a GeoJSON building dataset through the scoring pipeline.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .analysis.classifier import Classifier
from .core.errors import BipvError
from .core.models import IrradianceInput, ScoreRecord
from .core.session import ScoringSession
from .geometry.pv_potential import incident_potential
from .ingest.geojson_tileset import GeoJSONTileset
from .ingest.tile_pipeline import FeatureExtractionPipeline
from .solar.irradiance import StaticIrradianceProvider
from .solar.position import SolarPositionModel
from .utils.logging_config import ensure_logging

app = typer.Typer(
    name="bipv",
    help="BIPV solar exposure scoring for 3D building tiles",
    add_completion=False,
)
console = Console()

TIMESTAMP_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M"]

BAND_STYLES = {"high": "green", "medium": "yellow", "low": "red"}


def _fail(error: Exception) -> NoReturn:
    console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(code=1)


@app.callback()
def _setup(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Console log level (default: BIPV_LOG_LEVEL or INFO)"
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", dir_okay=False, help="Also write JSON log lines to this file"
    ),
) -> None:
    ensure_logging(level=log_level, log_file=log_file)


@app.command()
def sun(
    at: Optional[datetime] = typer.Option(
        None, "--at", formats=TIMESTAMP_FORMATS, help="UTC instant (default: now)"
    ),
):
    """
    Show the sub-solar azimuth and elevation for an instant.
    """
    session = ScoringSession()
    try:
        position = session.refresh(at)
    except BipvError as e:
        _fail(e)

    table = Table(title="Sun Position")
    table.add_column("Quantity", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Timestamp (UTC)", position.timestamp.isoformat())
    table.add_row("Azimuth", f"{position.azimuth_deg:.3f}°")
    table.add_row("Elevation", f"{position.elevation_deg:.3f}°")
    table.add_row("Zenith", f"{position.zenith_deg:.3f}°")
    console.print(table)


@app.command()
def score(
    elevation: float = typer.Option(..., "--elevation", "-e", help="Sun elevation in degrees"),
    ghi: Optional[float] = typer.Option(None, "--ghi", help="Global horizontal irradiance (W/m²)"),
):
    """
    Score a single sun elevation and print its band.
    """
    try:
        irradiance: IrradianceInput = StaticIrradianceProvider(ghi_w_m2=ghi).current()
    except BipvError as e:
        _fail(e)

    potential = incident_potential(elevation, irradiance.ghi_w_m2)
    band = Classifier().classify(potential)

    band_style = BAND_STYLES.get(band.band.value, "white")
    console.print(f"Potential: [bold]{potential:.2f}[/bold]")
    console.print(f"Band: [{band_style}]{band.band.value}[/{band_style}] ({band.color})")


@app.command()
def style():
    """
    Print the 3D Tiles style document for the classification bands.
    """
    console.print_json(json.dumps(Classifier().style_document()))


@app.command()
def run(
    input_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="GeoJSON FeatureCollection"),
    at: Optional[datetime] = typer.Option(
        None, "--at", formats=TIMESTAMP_FORMATS, help="UTC instant (default: now)"
    ),
    ghi: Optional[float] = typer.Option(None, "--ghi", help="Global horizontal irradiance (W/m²)"),
    tile_size: Optional[float] = typer.Option(None, "--tile-size", help="Tile edge in degrees"),
    limit: int = typer.Option(20, "--limit", "-n", help="Rows to show"),
):
    """
    Load a GeoJSON building collection, show every tile and report scores.
    """
    console.print(Panel.fit(
        "[bold blue]BIPV Solar Exposure[/bold blue]\n"
        "Tile Scoring Pipeline",
        border_style="blue"
    ))

    try:
        tileset = GeoJSONTileset.from_file(input_file, tile_size_deg=tile_size)
    except (OSError, ValueError) as e:
        _fail(e)

    session = ScoringSession(
        provider=StaticIrradianceProvider(ghi_w_m2=ghi),
        solar_model=SolarPositionModel(),
    )
    try:
        position = session.refresh(at)
    except BipvError as e:
        _fail(e)

    console.print(
        f"\n[cyan]Sun:[/cyan] azimuth {position.azimuth_deg:.2f}°, "
        f"elevation {position.elevation_deg:.2f}°"
    )

    records: List[ScoreRecord] = []
    pipeline = FeatureExtractionPipeline(
        tileset.tile_visible, session, reload_source=tileset.reloaded
    )
    pipeline.add_score_listener(records.append)
    pipeline.attach()
    try:
        tiles = tileset.show_all()
    finally:
        pipeline.detach()

    console.print(f"[green]Scored {len(records)} buildings across {tiles} tiles[/green]")

    table = Table(title="Building Potential")
    table.add_column("Feature", style="cyan")
    table.add_column("Lon", justify="right")
    table.add_column("Lat", justify="right")
    table.add_column("Height", justify="right")
    table.add_column("Potential", justify="right")
    table.add_column("Band")

    for record in records[:limit]:
        color = BAND_STYLES.get(record.band.value, "white")
        table.add_row(
            record.feature_id or "-",
            f"{record.longitude:.5f}",
            f"{record.latitude:.5f}",
            f"{record.height_m:.1f} m",
            f"{record.potential:.2f}",
            f"[{color}]{record.band.value}[/{color}]",
        )
    console.print(table)

    stats = pipeline.stats
    if stats.features_missing_attributes:
        console.print(
            f"[yellow]![/yellow] {stats.features_missing_attributes} features skipped (missing attributes)"
        )
    if stats.features_failed:
        console.print(f"[red]✗[/red] {stats.features_failed} features failed")


@app.command()
def version():
    """Show version information."""
    from . import __version__
    console.print(f"BIPV Solar Exposure v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
