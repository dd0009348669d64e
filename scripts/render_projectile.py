#!/usr/bin/env python3
"""
Projectile Renderer

This script fires a projectile through a simple gravity and wind environment,
plots its trajectory onto a canvas and writes the result as a plain-text PPM
image.
"""

from __future__ import annotations

import argparse
import copy
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional

import yaml
from tqdm import tqdm

# Add parent directory to path
sys.path.append(str(Path(__file__).resolve().parent.parent))

from tracer import timing, visualise
from tracer.canvas import Canvas
from tracer.projectile import Environment, Projectile, draw_trajectory, simulate
from tracer.tuples import Color, point, vector


logger = logging.getLogger("render_projectile")

DEFAULT_CONFIG = {
    "canvas": {"width": 900, "height": 550},
    "projectile": {
        "start": [0.0, 1.0, 0.0],
        "direction": [1.0, 1.8, 0.0],
        "speed": 11.25,
        "max_ticks": 10000,
    },
    "environment": {
        "gravity": [0.0, -0.1, 0.0],
        "wind": [-0.01, 0.0, 0.0],
    },
    "draw": {"color": [1.0, 0.5, 0.25], "size": 3},
    "io": {"output": "results/projectile.ppm"},
}


def load_config(config_path: Optional[str] = None) -> Dict:
    """Load configuration from YAML file.

    Sections or keys missing from the file keep their default values.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary
    """
    # Default config path
    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"

    with open(config_path, "r") as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise ValueError(f"Configuration in {config_path} must be a mapping")

    config = copy.deepcopy(DEFAULT_CONFIG)
    for section, values in loaded.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values

    return config


def build_scene(config: Dict) -> tuple[Environment, Projectile]:
    """Create the environment and initial projectile from configuration."""
    proj_cfg = config["projectile"]
    env_cfg = config["environment"]

    velocity = vector(*proj_cfg["direction"]).normalize() * proj_cfg["speed"]
    proj = Projectile(point(*proj_cfg["start"]), velocity)
    env = Environment(vector(*env_cfg["gravity"]), vector(*env_cfg["wind"]))

    return env, proj


def run(config: Dict, output_path: str, preview: bool = False) -> Dict:
    """Simulate, draw and save the projectile image.

    Args:
        config: Configuration dictionary
        output_path: Path of the PPM file to write
        preview: Whether to also save a PNG preview next to the PPM file

    Returns:
        Dictionary summarizing the run
    """
    timers = {}

    env, proj = build_scene(config)
    canvas = Canvas(config["canvas"]["width"], config["canvas"]["height"])
    logger.info(f"Rendering onto a {canvas.width}x{canvas.height} canvas")

    # === Stage 1: Simulate ===
    with timing.Timer("Simulate") as timers["simulate"]:
        positions = simulate(env, proj, max_ticks=config["projectile"]["max_ticks"])
    logger.info(f"Projectile landed after {len(positions) - 1} ticks")

    # === Stage 2: Draw ===
    with timing.Timer("Draw") as timers["draw"]:
        drawn = draw_trajectory(
            canvas,
            tqdm(positions, desc="Drawing trajectory"),
            Color(*config["draw"]["color"]),
            size=config["draw"]["size"],
        )

    # === Stage 3: Serialize and save ===
    with timing.Timer("Save PPM") as timers["save"]:
        output_dir = os.path.dirname(output_path)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        with open(output_path, "w") as f:
            f.write(canvas.to_ppm())
    logger.info(f"Wrote {output_path}")

    if preview:
        preview_path = os.path.splitext(output_path)[0] + ".png"
        visualise.save_canvas_preview(canvas, preview_path, title="Projectile trajectory")

    return {
        "ticks": len(positions) - 1,
        "drawn": drawn,
        "skipped": len(positions) - drawn,
        "timings": timing.summarize(timers),
    }


def main():
    """Main function to parse arguments and render the projectile."""
    parser = argparse.ArgumentParser(description="Projectile PPM Renderer")
    parser.add_argument(
        "--config", "-c", dest="config_path", default=None,
        help="Path to configuration file"
    )
    parser.add_argument(
        "--output", "-o", dest="output_path", default=None,
        help="Path to output PPM file (overrides io.output)"
    )
    parser.add_argument(
        "--preview", "-p", dest="preview", action="store_true",
        help="Also save a PNG preview"
    )
    parser.add_argument(
        "--verbose", "-v", dest="verbose", action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    # Set up logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
        handlers=[
            logging.StreamHandler(),
        ],
    )

    try:
        config = load_config(args.config_path)
        output_path = args.output_path or config["io"]["output"]
        summary = run(config, output_path, args.preview)
        logger.info(f"Summary: {summary}")
    except Exception as e:
        logger.exception(f"Error rendering projectile: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
