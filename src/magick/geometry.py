"""Image geometry parsing and resize/crop planning.

A :class:`Geometry` holds a width, a height and an optional ImageMagick
modifier flag. It can be parsed from ``WxH`` notation (``"100x200"``,
``"50x"``, ``"x50"``, ``"200x200^#"``), classified, and asked for the
``-resize`` / ``-crop`` arguments that turn one geometry into another.

Only strings are produced here; nothing in this module touches pixels.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple, Union

from .errors import NotIdentifiedError, ProbeError
from .identify import file_path, identify_dimensions

logger = logging.getLogger(__name__)


# Width, optional "x", height, then an optional modifier anchored at the end:
# either a run of anchor characters closed by "#" or a single flag character.
GEOMETRY_PATTERN = re.compile(r"\b(\d*)x?(\d*)\b([<>^v]*#|[><@%^!])?$", re.ASCII)

# Leading decimal number, read the way Ruby's String#to_f reads it.
LEADING_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

TOP_ANCHOR = "^"
LEFT_ANCHOR = "<"

Number = Union[int, float, str, None]


def _to_float(value: Number) -> float:
    """Convert to float; text without a leading number becomes 0.0."""

    if value is None:
        return 0.0
    if isinstance(value, str):
        match = LEADING_NUMBER.match(value.strip())
        return float(match.group(0)) if match else 0.0
    return float(value)


def _divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics instead of raising ``ZeroDivisionError``."""

    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)


class Transformation(NamedTuple):
    """Resize and crop arguments, either of which may be absent."""

    scale: Optional[str]
    crop: Optional[str]


@dataclass(frozen=True, repr=False)
class Geometry:
    """Width, height and modifier of an image or of a resize target.

    Attributes
    ----------
    width, height
        Dimensions as floats. Zero means "unspecified".
    modifier
        Trailing ImageMagick flag such as ``"^"``, ``"!"``, ``">"`` or
        ``"^#"``, or None.
    """

    width: float = 0.0
    height: float = 0.0
    modifier: Optional[str] = None

    def __post_init__(self) -> None:
        width = _to_float(self.width)
        height = _to_float(self.height)
        if width < 0 or height < 0:
            raise ValueError(f"Geometry dimensions must be non-negative: {width}x{height}")
        object.__setattr__(self, "width", width)
        object.__setattr__(self, "height", height)

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["Geometry"]:
        """Parse ``WxH`` notation, returning None for blank or unmatched text."""

        if text is None or not text.strip():
            logger.debug("No geometry given")
            return None
        match = GEOMETRY_PATTERN.search(text)
        if match is None:
            logger.debug("Text %r does not look like a geometry", text)
            return None
        width, height, modifier = match.groups()
        return cls(width, height, modifier)

    @classmethod
    def from_dimensions(cls, text: Optional[str]) -> "Geometry":
        """Build a geometry from a probe's ``WxH`` output.

        Raises
        ------
        NotIdentifiedError
            If the text does not parse.
        """

        geometry = cls.parse(text)
        if geometry is None:
            raise NotIdentifiedError(f"{text!r} is not a recognizable image size.")
        return geometry

    @classmethod
    def from_file(cls, file, backend: Optional[str] = None) -> "Geometry":
        """Probe an image file (a path, or an object with ``path``/``name``).

        Parameters
        ----------
        file
            Image to measure. Only the first frame is considered.
        backend
            Probe backend name, see :func:`identify_dimensions`.

        Raises
        ------
        NotIdentifiedError
            If the probe fails or returns something that is not a size.
        """

        path = file_path(file)
        try:
            dimensions = identify_dimensions(path, backend=backend)
        except ProbeError as exc:
            logger.debug("Probe failed for %s: %s", path, exc)
            dimensions = ""
        geometry = cls.parse(dimensions)
        if geometry is None:
            raise NotIdentifiedError(
                f"{path} is not recognized by the 'identify' command."
            )
        return geometry

    @property
    def square(self) -> bool:
        return self.height == self.width

    @property
    def horizontal(self) -> bool:
        return self.height < self.width

    @property
    def vertical(self) -> bool:
        return self.height > self.width

    def aspect(self) -> float:
        """Width divided by height; ``inf`` or ``nan`` when height is zero."""

        return _divide(self.width, self.height)

    def larger(self) -> float:
        return max(self.height, self.width)

    def smaller(self) -> float:
        return min(self.height, self.width)

    def to_text(self) -> str:
        """Render in a form accepted by :meth:`parse`. Fractions are truncated."""

        text = ""
        if self.width > 0:
            text += str(int(self.width))
        if self.height > 0:
            text += f"x{int(self.height)}"
        if self.modifier:
            text += self.modifier
        return text

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"Geometry({self.to_text()!r})"

    def transformation_to(
        self, dst: Optional["Geometry"], crop: bool = False
    ) -> Transformation:
        """Return the resize and crop arguments that turn ``self`` into ``dst``.

        Without ``crop`` the destination geometry is used as a plain resize
        argument. With ``crop`` the destination is the exact final size: the
        image is scaled along one axis so that it covers the destination, then
        the overflow on the other axis is cropped, centered unless the
        destination modifier holds a top (``^``) or left (``<``) anchor.

        A missing destination yields ``(None, None)`` so callers can run other
        operations without resizing.
        """

        if dst is None:
            return Transformation(None, None)
        if not crop:
            return Transformation(dst.to_text(), None)

        ratio = Geometry(
            _divide(dst.width, self.width), _divide(dst.height, self.height)
        )
        # Ties go to the width so a square ratio never crops horizontally.
        width_driven = ratio.horizontal or ratio.square
        scale_geometry, scale = self._scaling(dst, ratio, width_driven)
        return Transformation(scale_geometry, self._cropping(dst, scale, width_driven))

    def _scaling(
        self, dst: "Geometry", ratio: "Geometry", width_driven: bool
    ) -> Tuple[str, float]:
        if width_driven:
            return "%dx" % dst.width, ratio.width
        return "x%d" % dst.height, ratio.height

    def _cropping(self, dst: "Geometry", scale: float, width_driven: bool) -> str:
        if width_driven:
            vertical = (self.height * scale - dst.height) / 2
            if dst.has_anchor(TOP_ANCHOR):
                vertical = 0
            return "%dx%d+%d+%d" % (dst.width, dst.height, 0, vertical)
        horizontal = (self.width * scale - dst.width) / 2
        if dst.has_anchor(LEFT_ANCHOR):
            horizontal = 0
        return "%dx%d+%d+%d" % (dst.width, dst.height, horizontal, 0)

    def has_anchor(self, anchor: str) -> bool:
        return self.modifier is not None and anchor in self.modifier
