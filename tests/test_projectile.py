"""Tests for the projectile simulation and the render script.

This module tests ticking a projectile through its environment, plotting the
trajectory onto a canvas, and running the complete render script into a
temporary directory.
"""

import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path

import yaml

# Add parent directory to path
sys.path.append(str(Path(__file__).resolve().parent.parent))

from tracer import timing
from tracer.canvas import Canvas
from tracer.projectile import Environment, Projectile, draw_trajectory, simulate, tick
from tracer.tuples import Color, point, vector
from scripts import render_projectile

EPSILON = 1e-8


class TestSimulation(unittest.TestCase):
    """Test projectile motion."""

    def setUp(self):
        self.env = Environment(vector(0, -0.1, 0), vector(-0.01, 0, 0))
        self.proj = Projectile(point(0, 1, 0), vector(1, 1, 0).normalize())

    def test_tick(self):
        """Test a single time step."""
        proj = Projectile(point(0, 1, 0), vector(1, 2, 0))
        moved = tick(self.env, proj)
        self.assertTrue(moved.position.equal(point(1, 3, 0), EPSILON))
        self.assertTrue(moved.velocity.equal(vector(0.99, 1.9, 0), EPSILON))
        # The original state is untouched
        self.assertTrue(proj.position.equal(point(0, 1, 0), EPSILON))

    def test_simulate_until_ground(self):
        """Test that the simulation stops at the first position on the ground."""
        positions = simulate(self.env, self.proj)
        self.assertEqual(len(positions), 18)
        self.assertTrue(positions[0].equal(point(0, 1, 0), EPSILON))
        self.assertLessEqual(positions[-1].y, 0)
        for position in positions[:-1]:
            self.assertGreater(position.y, 0)

    def test_simulate_max_ticks(self):
        """Test the tick limit."""
        positions = simulate(self.env, self.proj, max_ticks=5)
        self.assertEqual(len(positions), 6)
        self.assertGreater(positions[-1].y, 0)


class TestDrawTrajectory(unittest.TestCase):
    """Test plotting positions onto a canvas."""

    def test_draw_single_pixels(self):
        """Test that y is flipped and off-canvas positions are skipped."""
        canvas = Canvas(10, 5)
        white = Color(1, 1, 1)
        positions = [
            point(0, 0, 0),
            point(2.7, 3.2, 0),
            point(9.5, 0, 0),
            point(-1, 0, 0),
            point(0, 5, 0),
        ]
        drawn = draw_trajectory(canvas, positions, white)

        self.assertEqual(drawn, 3)
        self.assertTrue(canvas.pixel_at(0, 4).equal(white, EPSILON))
        self.assertTrue(canvas.pixel_at(2, 1).equal(white, EPSILON))
        self.assertTrue(canvas.pixel_at(9, 4).equal(white, EPSILON))
        self.assertTrue(canvas.pixel_at(0, 0).equal(Color(0, 0, 0), EPSILON))

    def test_draw_squares(self):
        """Test drawing size x size squares."""
        canvas = Canvas(4, 4)
        orange = Color(1, 0.5, 0.25)
        self.assertEqual(draw_trajectory(canvas, [point(1, 1, 0)], orange, size=2), 1)

        for x, y in [(1, 1), (2, 1), (1, 2), (2, 2)]:
            self.assertTrue(canvas.pixel_at(x, y).equal(orange, EPSILON))
        self.assertTrue(canvas.pixel_at(0, 0).equal(Color(0, 0, 0), EPSILON))
        self.assertTrue(canvas.pixel_at(3, 3).equal(Color(0, 0, 0), EPSILON))

    def test_invalid_size(self):
        """Test that squares need a positive size."""
        with self.assertRaises(ValueError):
            draw_trajectory(Canvas(2, 2), [point(0, 0, 0)], Color(1, 1, 1), size=0)


class TestTimer(unittest.TestCase):
    """Test the stage timer."""

    def test_context_manager(self):
        """Test timing a block."""
        with timing.Timer("block") as timer:
            sum(range(1000))
        elapsed = timer.elapsed
        self.assertGreaterEqual(elapsed, 0.0)
        # Frozen after stopping
        self.assertEqual(timer.elapsed, elapsed)
        self.assertEqual(timing.summarize({"block": timer}), {"block": round(elapsed, 6)})

    def test_stop_without_start(self):
        """Test stopping a timer that never started."""
        self.assertEqual(timing.Timer("idle").stop(), 0.0)


class TestRenderScript(unittest.TestCase):
    """Test the projectile render script end to end."""

    def setUp(self):
        self.output_dir = tempfile.mkdtemp()

    def tearDown(self):
        if os.path.exists(self.output_dir):
            shutil.rmtree(self.output_dir)

    def _write_config(self, config):
        path = os.path.join(self.output_dir, "config.yaml")
        with open(path, "w") as f:
            yaml.safe_dump(config, f)
        return path

    def test_load_default_config(self):
        """Test loading the repository configuration."""
        config = render_projectile.load_config()
        self.assertEqual(config["canvas"], {"width": 900, "height": 550})
        self.assertEqual(config["draw"]["size"], 3)

    def test_partial_config_keeps_defaults(self):
        """Test that missing keys fall back to defaults."""
        path = self._write_config({"canvas": {"width": 50}})
        config = render_projectile.load_config(path)
        self.assertEqual(config["canvas"], {"width": 50, "height": 550})
        self.assertEqual(config["projectile"]["speed"], 11.25)

    def test_invalid_config(self):
        """Test that a non-mapping configuration is rejected."""
        path = os.path.join(self.output_dir, "bad.yaml")
        with open(path, "w") as f:
            f.write("- just\n- a list\n")
        with self.assertRaises(ValueError):
            render_projectile.load_config(path)

    def test_run(self):
        """Test rendering a small image with a preview."""
        path = self._write_config({
            "canvas": {"width": 100, "height": 60},
            "projectile": {"speed": 3.0},
            "draw": {"size": 2},
        })
        config = render_projectile.load_config(path)
        output_path = os.path.join(self.output_dir, "out", "projectile.ppm")

        summary = render_projectile.run(config, output_path, preview=True)

        self.assertTrue(os.path.exists(output_path))
        self.assertTrue(os.path.exists(os.path.join(self.output_dir, "out", "projectile.png")))
        self.assertGreater(summary["ticks"], 0)
        self.assertGreater(summary["drawn"], 0)
        self.assertEqual(summary["drawn"] + summary["skipped"], summary["ticks"] + 1)
        self.assertEqual(set(summary["timings"]), {"simulate", "draw", "save"})

        with open(output_path) as f:
            text = f.read()
        self.assertTrue(text.startswith("P3\n100 60\n255\n"))
        self.assertFalse(text.endswith("\n"))
        # The trajectory color (1, 0.5, 0.25) appears in the pixel data
        pixel_data = " ".join(text.split("\n")[3:])
        self.assertIn("255 128 64", pixel_data)
        for line in text.split("\n"):
            self.assertLessEqual(len(line), 70)


if __name__ == "__main__":
    unittest.main()
