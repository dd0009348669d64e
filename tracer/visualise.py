"""Preview rendering for canvases.

PPM text is the library's output format; this module additionally renders a
canvas to a PNG with matplotlib for quick inspection.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import matplotlib.pyplot as plt

from tracer.canvas import Canvas

logger = logging.getLogger(__name__)


def save_canvas_preview(
    canvas: Canvas,
    output_path: str,
    title: Optional[str] = None
) -> None:
    """Save a PNG preview of a canvas.

    Colors go through the same clamping and rounding as the PPM output, so
    the preview shows exactly what the PPM file contains.

    Args:
        canvas: Canvas to render
        output_path: Path of the PNG file to write
        title: Optional figure title
    """
    pixels = canvas.to_rgb8()

    aspect = canvas.height / canvas.width
    fig, ax = plt.subplots(figsize=(8, max(2.0, 8 * aspect)))
    ax.imshow(pixels, interpolation="nearest")
    ax.set_axis_off()
    if title:
        ax.set_title(title)

    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    plt.tight_layout()
    plt.savefig(output_path, dpi=100, bbox_inches='tight')
    plt.close(fig)

    logger.info(f"Saved canvas preview to {output_path}")
