"""Global configuration for the geometry toolkit.

This module centralizes defaults and user-tunable settings for:
- locating input images and writing planned outputs
- named target geometries ("styles")
- measuring images (ImageMagick ``identify`` or Pillow)
- the ``convert`` commands emitted by the planner

All values can be overridden via CLI flags or direct imports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Tuple


# Supported file extensions for images
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".tiff", ".avif"}


# Named target geometries. A trailing "#" requests fill-and-crop to the exact
# size; "^#" anchors that crop to the top edge, "<#" to the left edge.
STYLES: Dict[str, str] = {
    "thumb": "100x100#",
    "square": "200x200#",
    "small": "240x240>",
    "medium": "640x480>",
    "large": "1280x1024>",
    "portrait": "480x640^#",
    "banner": "1200x300<#",
}


PROBE_BACKENDS = ("identify", "pillow")


@dataclass
class Paths:
    """I/O locations.

    Attributes
    ----------
    input_path
        Path to a single image or a directory containing images.
    output_dir
        Directory the planned ``convert`` commands write into.
    """

    input_path: Path = Path("./data/input")
    output_dir: Path = Path("./data/output")


@dataclass
class Probe:
    """How image dimensions are measured.

    Attributes
    ----------
    backend
        One of ``PROBE_BACKENDS``. ``identify`` shells out to ImageMagick,
        ``pillow`` opens the file in-process.
    identify_command
        Executable used by the ``identify`` backend.
    dimension_format
        ``-format`` argument passed to ``identify``.
    """

    backend: str = "identify"
    identify_command: str = "identify"
    dimension_format: str = "%wx%h"


@dataclass
class Behavior:
    """Planning behavior toggles.

    Attributes
    ----------
    overwrite
        Whether to plan outputs that already exist.
    convert_command
        Executable named at the head of each planned command.
    convert_options
        Extra arguments appended after the resize/crop operations.
    """

    overwrite: bool = False
    convert_command: str = "convert"
    convert_options: Tuple[str, ...] = ("-strip",)


@dataclass
class ProjectConfig:
    """Top-level configuration container.

    Attributes
    ----------
    paths
        Input/output locations.
    probe
        Dimension probe settings.
    behavior
        Planning toggles.
    styles
        Mapping from style label to geometry string.
    """

    paths: Paths = field(default_factory=Paths)
    probe: Probe = field(default_factory=Probe)
    behavior: Behavior = field(default_factory=Behavior)
    styles: Dict[str, str] = field(default_factory=lambda: dict(STYLES))


# Default singleton-style config instance used by CLI unless overridden
CONFIG = ProjectConfig()
