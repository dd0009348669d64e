"""Pixel canvas and plain-text PPM serialization.

A canvas is a grid of RGB colors that can be written pixel by pixel and
serialized to the ``P3`` PPM format. Channel values are stored unclamped as
floats and only scaled, clamped and rounded when the image is emitted.
"""

from __future__ import annotations

import logging
from typing import List

import numpy as np

from tracer.tuples import Color

logger = logging.getLogger(__name__)

PPM_FORMAT = "P3"
PPM_MAX_COLOR_VALUE = 255
# PPM readers must accept lines up to 70 characters
PPM_MAX_LINE_LENGTH = 70
# A line is broken as soon as it gets this close to the limit
PPM_LINE_MARGIN = 3


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Round non-negative values to the nearest integer, ties going up.

    Unlike ``np.round`` this does not round ties to even: 126.5 becomes 127.
    """
    whole = np.floor(values)
    return (whole + (values - whole >= 0.5)).astype(np.int64)


def scale_channels(values: np.ndarray) -> np.ndarray:
    """Scale [0, 1] channels to integer PPM values.

    Values are multiplied by 255, clamped to [0, 255] and rounded half up
    (127.5 becomes 128).

    Args:
        values: Array of float channel values in any shape

    Returns:
        Integer array of the same shape
    """
    scaled = np.clip(np.asarray(values, dtype=np.float64) * PPM_MAX_COLOR_VALUE, 0, PPM_MAX_COLOR_VALUE)
    return round_half_up(scaled)


def _wrap_row(tokens: List[str]) -> str:
    """Join one canvas row of channel tokens, breaking lines before 70 chars."""
    out = []
    count = 0
    last = len(tokens) - 1

    for i, token in enumerate(tokens):
        length = count + len(token)
        if length > PPM_MAX_LINE_LENGTH:
            out.append("\n")
            out.append(token)
            count = len(token)
        elif length == PPM_MAX_LINE_LENGTH:
            out.append(token)
            if i != last:
                out.append("\n")
            count = 0
        else:
            out.append(token)
            count = length

        if i == last:
            break

        if count >= PPM_MAX_LINE_LENGTH - PPM_LINE_MARGIN:
            out.append("\n")
            count = 0
        elif count != 0:
            out.append(" ")
            count += 1

    return "".join(out)


class Canvas:
    """Rectangular grid of colors, initially black."""

    def __init__(self, width: int, height: int):
        """Initialize a black canvas.

        Args:
            width: Number of columns (pixels per row)
            height: Number of rows

        Raises:
            ValueError: If either dimension is not a positive integer
        """
        for name, value in (("width", width), ("height", height)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
                raise ValueError(f"Canvas {name} must be a positive integer, got {value!r}")

        self._pixels = np.zeros((height, width, 3), dtype=np.float64)

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"Pixel ({x}, {y}) is outside the {self.width}x{self.height} canvas"
            )

    def write_pixel(self, x: int, y: int, color: Color) -> None:
        """Store a color at column x, row y."""
        if not isinstance(color, Color):
            raise TypeError(f"Expected a Color, got {type(color).__name__}")
        self._check_bounds(x, y)
        self._pixels[y, x] = color.data

    def pixel_at(self, x: int, y: int) -> Color:
        self._check_bounds(x, y)
        return Color(*self._pixels[y, x].tolist())

    def fill(self, color: Color) -> None:
        """Set every pixel to the same color."""
        if not isinstance(color, Color):
            raise TypeError(f"Expected a Color, got {type(color).__name__}")
        self._pixels[:, :] = color.data

    def to_rgb8(self) -> np.ndarray:
        """Clamped 8-bit copy of the pixels, shape (height, width, 3)."""
        return scale_channels(self._pixels).astype(np.uint8)

    def to_ppm(self) -> str:
        """Serialize the canvas as plain-text PPM.

        The header is the format tag, the dimensions and the maximum channel
        value, one per line. Each canvas row then follows as space separated
        channel values, wrapped so that no line reaches 70 characters. Rows
        are separated by newlines and the text has no trailing newline.

        Returns:
            PPM image text
        """
        header = f"{PPM_FORMAT}\n{self.width} {self.height}\n{PPM_MAX_COLOR_VALUE}\n"

        values = scale_channels(self._pixels)
        rows = [_wrap_row([str(v) for v in row.ravel().tolist()]) for row in values]
        text = header + "\n".join(rows)

        n_lines = text.count("\n") + 1
        logger.debug(
            f"Serialized {self.width}x{self.height} canvas to PPM: "
            f"{len(text)} characters, {n_lines} lines"
        )
        return text
