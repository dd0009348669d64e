"""Projectile simulation used to exercise tuples and the canvas.

A projectile is moved by its velocity once per tick while gravity and wind
change the velocity. The resulting trajectory can be plotted onto a canvas.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from tracer.canvas import Canvas
from tracer.tuples import Color, Tuple4

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Projectile:
    position: Tuple4
    velocity: Tuple4


@dataclass(frozen=True)
class Environment:
    gravity: Tuple4
    wind: Tuple4


def tick(env: Environment, proj: Projectile) -> Projectile:
    """Advance the projectile by one time step."""
    return Projectile(
        position=proj.position + proj.velocity,
        velocity=proj.velocity + (env.gravity + env.wind),
    )


def simulate(
    env: Environment,
    proj: Projectile,
    max_ticks: Optional[int] = None
) -> List[Tuple4]:
    """Run the projectile until it reaches the ground.

    Args:
        env: Gravity and wind
        proj: Initial projectile state
        max_ticks: Stop after this many ticks even if still airborne

    Returns:
        Positions visited, starting with the initial one and ending with the
        first position at or below y=0
    """
    positions = [proj.position]
    n_ticks = 0
    while proj.position.y > 0:
        if max_ticks is not None and n_ticks >= max_ticks:
            logger.warning(f"Projectile still airborne after {max_ticks} ticks")
            break
        proj = tick(env, proj)
        positions.append(proj.position)
        n_ticks += 1

    logger.debug(f"Simulated {n_ticks} ticks, final position {proj.position}")
    return positions


def draw_trajectory(
    canvas: Canvas,
    positions: Iterable[Tuple4],
    color: Color,
    size: int = 1
) -> int:
    """Plot positions onto a canvas as size x size squares.

    The y axis is flipped so that larger y is drawn higher up. Positions
    whose square does not fit on the canvas are skipped.

    Args:
        canvas: Target canvas
        positions: Points to plot, in canvas pixel units
        color: Square color
        size: Edge length of each square in pixels

    Returns:
        Number of squares drawn
    """
    if size < 1:
        raise ValueError(f"Square size must be positive, got {size}")

    drawn = 0
    skipped = 0
    for position in positions:
        left = int(position.x)
        bottom = int(position.y)
        if (
            position.x < 0 or position.y < 0
            or left + size > canvas.width or bottom + size > canvas.height
        ):
            skipped += 1
            continue

        for i in range(size):
            for j in range(size):
                canvas.write_pixel(left + i, canvas.height - 1 - (bottom + j), color)
        drawn += 1

    if skipped:
        logger.warning(f"Skipped {skipped} positions outside the {canvas.width}x{canvas.height} canvas")

    return drawn
