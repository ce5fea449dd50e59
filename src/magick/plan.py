"""Batch planning of ImageMagick ``convert`` invocations.

Each input image is measured, its geometry is compared with a named style, and
the resulting resize/crop arguments are assembled into a ``convert`` command.
Commands are returned, never executed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from config import CONFIG
from .errors import NotIdentifiedError
from .geometry import Geometry, Transformation
from .identify import iter_image_paths

logger = logging.getLogger(__name__)

CROP_FLAG = "#"


@dataclass
class ImagePlan:
    """Planned processing of one image."""

    source: Path
    dest: Path
    source_geometry: Geometry
    transformation: Transformation
    arguments: List[str]


def wants_crop(geometry: Optional[Geometry]) -> bool:
    """True when the geometry asks for fill-and-crop via a trailing ``#``."""

    return (
        geometry is not None
        and geometry.modifier is not None
        and geometry.modifier.endswith(CROP_FLAG)
    )


def resolve_style(label: str) -> Geometry:
    """Look up a named style and parse it.

    Raises
    ------
    ValueError
        If the label is unknown or its geometry string does not parse.
    """

    if label not in CONFIG.styles:
        choices = ", ".join(CONFIG.styles.keys())
        raise ValueError(f"Unknown style '{label}'. Choose from: {choices}")
    geometry = Geometry.parse(CONFIG.styles[label])
    if geometry is None:
        raise ValueError(f"Style '{label}' has an invalid geometry: {CONFIG.styles[label]!r}")
    return geometry


def convert_arguments(
    source: Path,
    dest: Path,
    transformation: Transformation,
    convert_options: Sequence[str] = (),
) -> List[str]:
    """Assemble a ``convert`` argument vector.

    Parameters
    ----------
    source, dest
        Input and output files. Only the first frame of ``source`` is read.
    transformation
        Resize/crop pair; absent parts are left out of the command.
    convert_options
        Extra arguments placed after the geometry operations.

    Returns
    -------
    list of str
        Argument vector starting with ``CONFIG.behavior.convert_command``.
    """

    arguments = [CONFIG.behavior.convert_command, f"{source}[0]", "-auto-orient"]
    if transformation.scale is not None:
        arguments += ["-resize", transformation.scale]
    if transformation.crop is not None:
        arguments += ["-crop", transformation.crop, "+repage"]
    arguments += list(convert_options)
    arguments.append(str(dest))
    return arguments


def plan_image(
    source: Path,
    dest: Path,
    target: Optional[Geometry],
    crop: Optional[bool] = None,
    backend: Optional[str] = None,
    convert_options: Optional[Sequence[str]] = None,
) -> ImagePlan:
    """Measure one image and plan its conversion to ``target``.

    Parameters
    ----------
    source, dest
        Input image and planned output path.
    target
        Destination geometry, or None to convert without resizing.
    crop
        Fill-and-crop override. None follows :func:`wants_crop`.
    backend
        Probe backend name.
    convert_options
        Extra ``convert`` arguments. Defaults to ``CONFIG.behavior.convert_options``.

    Raises
    ------
    NotIdentifiedError
        If the source image cannot be measured.
    """

    source_geometry = Geometry.from_file(source, backend=backend)
    if crop is None:
        crop = wants_crop(target)
    transformation = source_geometry.transformation_to(target, crop=crop)
    if convert_options is None:
        convert_options = CONFIG.behavior.convert_options
    arguments = convert_arguments(source, dest, transformation, convert_options)
    logger.debug("Planned %s -> %s: %s", source, dest, transformation)
    return ImagePlan(source, dest, source_geometry, transformation, arguments)


def plan_batch(
    input_path: Path,
    output_dir: Path,
    style: str,
    crop: Optional[bool] = None,
    overwrite: bool = False,
    backend: Optional[str] = None,
) -> List[ImagePlan]:
    """Plan conversions for every image under ``input_path``.

    Parameters
    ----------
    input_path
        Path to a single image or a directory.
    output_dir
        Destination directory for the planned outputs.
    style
        Key from ``CONFIG.styles``.
    crop
        Fill-and-crop override applied to every image.
    overwrite
        Whether to plan outputs that already exist.
    backend
        Probe backend name.

    Returns
    -------
    list of ImagePlan
        One plan per image that could be measured.
    """

    target = resolve_style(style)
    out_dir = Path(output_dir)
    root = Path(input_path)

    plans: List[ImagePlan] = []
    for src in iter_image_paths(root):
        # Keep subdirectories so same-named files do not collide.
        dest = out_dir / (src.relative_to(root) if root.is_dir() else src.name)
        if dest.exists() and not overwrite:
            logger.info("Skipping %s, %s already exists", src, dest)
            continue
        try:
            plans.append(plan_image(src, dest, target, crop=crop, backend=backend))
        except NotIdentifiedError as exc:
            logger.warning("Skipping %s: %s", src, exc)
    return plans
