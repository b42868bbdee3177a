"""Main CLI entry point for Bezier Rope."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import structlog
import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

app = typer.Typer(
    name="bezier-rope",
    help="Bezier Rope - headless spring-driven cubic curve simulation",
    add_completion=False,
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))


def _parse_point(raw: str, name: str):
    """Parse ``"x,y"`` into a vector."""
    from bezier_rope.physics.vector import Vector2

    try:
        x, y = (float(part) for part in raw.split(","))
    except ValueError:
        console.print(f"[red]Error: {name} must look like 'x,y', got {raw!r}[/red]")
        raise typer.Exit(1)
    return Vector2(x, y)


@app.command()
def simulate(
    width: float = typer.Option(800.0, "--width", "-W", help="Viewport width"),
    height: float = typer.Option(600.0, "--height", "-H", help="Viewport height"),
    frames: int = typer.Option(120, "--frames", "-n", min=0, help="Display frames to run"),
    frame_dt: float = typer.Option(1 / 60, "--frame-dt", help="Elapsed seconds per frame"),
    pitch: float = typer.Option(0.0, "--pitch", help="Device pitch in radians"),
    roll: float = typer.Option(0.0, "--roll", help="Device roll in radians"),
    pointer: Optional[str] = typer.Option(
        None,
        "--pointer",
        help="Drag position 'x,y' (overrides tilt)",
    ),
    stiffness: Optional[float] = typer.Option(None, "--stiffness", "-k"),
    damping: Optional[float] = typer.Option(None, "--damping", "-c"),
    mass: Optional[float] = typer.Option(None, "--mass", "-m"),
    steps: Optional[int] = typer.Option(None, "--steps", "-s", help="Curve sample steps"),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output file for the final snapshot (JSON)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """
    Run the rope for a number of frames and report where it ended up.

    Physical parameters default to ROPE_* environment variables (a .env file
    is read) and then to the built-in defaults.
    """
    from bezier_rope.config import RopeSettings
    from bezier_rope.rig import RopeRig

    load_dotenv()
    _configure_logging(verbose)

    try:
        settings = RopeSettings.from_env(
            mass=mass,
            stiffness=stiffness,
            damping=damping,
            sample_steps=steps,
        )
        rig = RopeRig(settings)
        rig.resize(width, height)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if pointer is not None:
        drag = _parse_point(pointer, "--pointer")
        try:
            rig.apply_pointer(drag)
        except ValueError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise typer.Exit(1)
        source = f"pointer at ({drag.x:g}, {drag.y:g})"
    else:
        try:
            rig.apply_tilt(pitch, roll)
        except ValueError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise typer.Exit(1)
        source = f"tilt pitch={pitch:g} roll={roll:g}"

    console.print(Panel.fit(
        "[bold blue]Bezier Rope[/bold blue]\n"
        f"Viewport {width:g}x{height:g}, {frames} frames, input: {source}",
        border_style="blue",
    ))

    for _ in range(frames):
        rig.frame(frame_dt)

    snapshot = rig.snapshot()
    _display_snapshot(snapshot)

    if output:
        output.write_text(snapshot.model_dump_json(indent=2))
        console.print(f"\n[green]Snapshot saved to {output}[/green]")


def _display_snapshot(snapshot) -> None:
    """Show control point state and a short summary."""
    table = Table(title="Control points")
    table.add_column("Point", style="cyan")
    table.add_column("Position")
    table.add_column("Velocity")
    table.add_column("Target")
    table.add_column("Distance", justify="right")

    for name, state in (("A", snapshot.control_a), ("B", snapshot.control_b)):
        table.add_row(
            name,
            _fmt(state.position),
            _fmt(state.velocity),
            _fmt(state.target),
            f"{state.distance_to_target:.3f}",
        )

    console.print(table)

    summary = Table(show_header=False, box=None)
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value")
    summary.add_row("Frames", str(snapshot.frame))
    summary.add_row("Simulated time", f"{snapshot.simulated_time:.3f}s")
    summary.add_row("Samples", str(len(snapshot.samples)))
    summary.add_row("Tangent ticks", str(len(snapshot.ticks)))
    summary.add_row(
        "Settled",
        "[green]yes[/green]" if snapshot.is_settled else "[yellow]no[/yellow]",
    )
    console.print(summary)


def _fmt(point) -> str:
    return f"({point[0]:.2f}, {point[1]:.2f})"


@app.command()
def sample(
    start: str = typer.Argument(..., help="Anchor start 'x,y'"),
    control_a: str = typer.Argument(..., help="First control point 'x,y'"),
    control_b: str = typer.Argument(..., help="Second control point 'x,y'"),
    end: str = typer.Argument(..., help="Anchor end 'x,y'"),
    steps: int = typer.Option(10, "--steps", "-s", min=1, help="Sample steps"),
):
    """
    Print positions and unit tangents along a static cubic curve.

    Example:
        bezier-rope sample 0,0 25,-50 75,-50 100,0 --steps 4
    """
    from bezier_rope.physics.curve import CubicCurve, FixedPoint

    curve = CubicCurve(
        _parse_point(start, "start"),
        _parse_point(end, "end"),
        FixedPoint(_parse_point(control_a, "control_a")),
        FixedPoint(_parse_point(control_b, "control_b")),
    )
    samples = curve.sample(steps)

    table = Table(title=f"Curve samples ({len(samples)})")
    table.add_column("t", justify="right", style="cyan")
    table.add_column("Position")
    table.add_column("Direction")

    for t, point in zip(samples.parameters(), samples):
        direction = curve.unit_tangent(t)
        table.add_row(
            f"{t:.3f}",
            _fmt(point.as_tuple()),
            _fmt(direction.as_tuple()),
        )

    console.print(table)


@app.command()
def version():
    """Show version information."""
    from bezier_rope import __version__

    console.print(f"Bezier Rope v{__version__}")


if __name__ == "__main__":
    app()
