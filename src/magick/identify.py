"""Image discovery and dimension probing.

This module enumerates input images and measures them, either by shelling out
to ImageMagick's ``identify`` or by opening the file with Pillow. Both
backends return a ``"WxH"`` string for the first frame; turning that string
into a :class:`~src.magick.geometry.Geometry` is left to the caller.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Generator, Optional

from PIL import Image, UnidentifiedImageError

from config import CONFIG, IMAGE_EXTENSIONS, PROBE_BACKENDS
from .errors import CommandLineError, ProbeError

logger = logging.getLogger(__name__)


def iter_image_paths(input_path: Path) -> Generator[Path, None, None]:
    """Yield image file paths from a file or directory.

    Parameters
    ----------
    input_path
        A path to a single image or a directory containing images.

    Yields
    ------
    Path
        Individual image file paths, sorted.
    """

    path = Path(input_path)
    if path.is_file():
        if path.suffix.lower() in IMAGE_EXTENSIONS:
            yield path
        return
    if path.is_dir():
        for p in sorted(path.rglob("*")):
            if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS:
                yield p


def file_path(file) -> Path:
    """Resolve a path-like, or an upload object exposing ``path`` or ``name``."""

    if isinstance(file, (str, os.PathLike)):
        return Path(file)
    for attribute in ("path", "name"):
        value = getattr(file, attribute, None)
        if isinstance(value, (str, os.PathLike)):
            return Path(value)
    raise TypeError(f"Cannot determine a file path from {file!r}")


def run(command: str, *arguments: str) -> str:
    """Run an external command and return its standard output.

    Raises
    ------
    CommandLineError
        If the executable cannot be started or exits with a non-zero status.
    """

    argv = [command, *arguments]
    logger.debug("Running %s", shlex.join(argv))
    try:
        proc = subprocess.run(argv, capture_output=True, text=True)
    except OSError as exc:
        raise CommandLineError(argv, None, str(exc)) from exc
    if proc.returncode != 0:
        raise CommandLineError(argv, proc.returncode, proc.stderr)
    return proc.stdout


def _identify(path: Path) -> str:
    probe = CONFIG.probe
    # "[0]" restricts identify to the first frame of animations and PDFs.
    output = run(probe.identify_command, "-format", probe.dimension_format, f"{path}[0]")
    return output.strip()


def _pillow(path: Path) -> str:
    try:
        with Image.open(path) as img:
            width, height = img.size
    except (OSError, UnidentifiedImageError) as exc:
        raise ProbeError(f"Pillow cannot read {path}: {exc}") from exc
    return f"{width}x{height}"


def identify_dimensions(file, backend: Optional[str] = None) -> str:
    """Measure an image and return its size as ``"WxH"``.

    Parameters
    ----------
    file
        Path-like or object with a ``path``/``name`` attribute.
    backend
        ``"identify"`` or ``"pillow"``. Defaults to ``CONFIG.probe.backend``.

    Returns
    -------
    str
        Width and height of the first frame, e.g. ``"640x480"``.

    Raises
    ------
    ProbeError
        If the image cannot be measured.
    ValueError
        If ``backend`` is unknown.
    """

    name = (backend or CONFIG.probe.backend).lower()
    if name not in PROBE_BACKENDS:
        choices = ", ".join(PROBE_BACKENDS)
        raise ValueError(f"Unknown probe backend '{name}'. Choose from: {choices}")
    path = file_path(file)
    if name == "pillow":
        return _pillow(path)
    return _identify(path)
