"""CLI for the ImageMagick geometry toolkit.

Commands:
  - parse: Show the parts and shape of a geometry string
  - transform: Compute resize/crop arguments between two geometries
  - identify: Measure image files
  - plan: Print convert commands that bring images to a named style
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

import click
from config import CONFIG, PROBE_BACKENDS
from src.magick.errors import NotIdentifiedError
from src.magick.geometry import Geometry
from src.magick.identify import iter_image_paths
from src.magick.plan import plan_batch, resolve_style


CROP_MODES = {"style": None, "crop": True, "fit": False}


def _orientation(geometry: Geometry) -> str:
    if geometry.square:
        return "square"
    if geometry.horizontal:
        return "horizontal"
    return "vertical"


def _resolve_style(style: str) -> Geometry:
    try:
        return resolve_style(style)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="'--style'") from exc


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """ImageMagick geometry toolkit."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command(name="parse")
@click.argument("text")
def cmd_parse(text: str) -> None:
    """Parse a geometry such as 100x200, 50x, x50 or 200x200^#."""

    geometry = Geometry.parse(text)
    if geometry is None:
        raise click.ClickException(f"Not a geometry: {text!r}")
    click.echo(f"geometry: {geometry}")
    click.echo(f"width: {geometry.width:g}")
    click.echo(f"height: {geometry.height:g}")
    click.echo(f"modifier: {geometry.modifier or '-'}")
    click.echo(f"orientation: {_orientation(geometry)}")
    if geometry.height > 0:
        click.echo(f"aspect: {geometry.aspect():.4f}")


@cli.command(name="transform")
@click.argument("source")
@click.argument("target", required=False, default="")
@click.option(
    "--crop/--no-crop",
    default=False,
    help="Fill and crop to exactly the target size",
)
def cmd_transform(source: str, target: str, crop: bool) -> None:
    """Compute resize and crop arguments to turn SOURCE into TARGET.

    An empty TARGET means no resize at all.
    """

    src = Geometry.parse(source)
    if src is None:
        raise click.BadParameter(f"Not a geometry: {source!r}", param_hint="'SOURCE'")
    dst = Geometry.parse(target)
    if target.strip() and dst is None:
        raise click.BadParameter(f"Not a geometry: {target!r}", param_hint="'TARGET'")
    if crop and dst is not None and (src.width == 0 or src.height == 0):
        raise click.BadParameter(
            f"Cannot fill and crop from a zero-sized geometry: {source!r}",
            param_hint="'SOURCE'",
        )
    scale, cropping = src.transformation_to(dst, crop=crop)
    click.echo(f"scale: {scale or '-'}")
    click.echo(f"crop: {cropping or '-'}")


@cli.command(name="identify")
@click.argument(
    "input_path", type=click.Path(path_type=Path, exists=True), required=True
)
@click.option(
    "--backend",
    type=click.Choice(PROBE_BACKENDS, case_sensitive=False),
    default=CONFIG.probe.backend,
)
def cmd_identify(input_path: Path, backend: str) -> None:
    """Print the dimensions of an image file or of every image in a directory."""

    failures = 0
    for src in iter_image_paths(input_path):
        try:
            geometry = Geometry.from_file(src, backend=backend)
        except NotIdentifiedError as exc:
            click.echo(str(exc), err=True)
            failures += 1
            continue
        click.echo(f"{src}\t{geometry}")
    if failures:
        raise click.ClickException(f"{failures} file(s) could not be identified")


@cli.command(name="plan")
@click.option(
    "--input-path",
    type=click.Path(path_type=Path, exists=True),
    default=CONFIG.paths.input_path,
    show_default=True,
    help="Image file or directory",
)
@click.option(
    "--output-dir",
    type=click.Path(path_type=Path),
    default=CONFIG.paths.output_dir,
    show_default=True,
    help="Output directory for the planned files",
)
@click.option(
    "--style",
    type=str,
    required=True,
    help="Style label, e.g., thumb, square, medium",
)
@click.option(
    "--crop-mode",
    type=click.Choice(list(CROP_MODES), case_sensitive=False),
    default="style",
    help="crop: fill and crop, fit: resize only, style: follow the style's '#'",
)
@click.option("--overwrite/--no-overwrite", default=CONFIG.behavior.overwrite)
@click.option(
    "--backend",
    type=click.Choice(PROBE_BACKENDS, case_sensitive=False),
    default=CONFIG.probe.backend,
)
def cmd_plan(
    input_path: Path,
    output_dir: Path,
    style: str,
    crop_mode: str,
    overwrite: bool,
    backend: str,
) -> None:
    """Print one convert command per image to bring it to STYLE."""

    _resolve_style(style)
    plans = plan_batch(
        input_path=input_path,
        output_dir=output_dir,
        style=style,
        crop=CROP_MODES[crop_mode.lower()],
        overwrite=overwrite,
        backend=backend,
    )
    for plan in plans:
        click.echo(shlex.join(plan.arguments))


if __name__ == "__main__":
    cli()
