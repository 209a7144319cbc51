"""
Tests for the render surface, grayscale transform and overlay drawing.
"""

import numpy as np
import pytest

from analytics.classifier import classify
from models.counters import ScaleFactors
from rendering.grayscale import to_grayscale
from rendering.overlay import draw_classified
from rendering.surface import RenderSurface

from conftest import det


class TestGrayscale:
    def test_known_pixels(self):
        buf = np.array([[[255, 0, 0, 7], [0, 255, 0, 8], [0, 0, 255, 9], [10, 20, 30, 255]]], dtype=np.uint8)
        to_grayscale(buf)
        # 0.299*255=76.245, 0.587*255=149.685, 0.114*255=29.07, 2.99+11.74+3.42=18.15
        assert buf[0, :, 0].tolist() == [76, 150, 29, 18]
        assert (buf[..., 0] == buf[..., 1]).all()
        assert (buf[..., 1] == buf[..., 2]).all()

    def test_alpha_untouched(self):
        rng = np.random.default_rng(1)
        buf = rng.integers(0, 256, size=(8, 8, 4), dtype=np.uint8)
        alpha = buf[..., 3].copy()
        to_grayscale(buf)
        assert np.array_equal(buf[..., 3], alpha)

    def test_in_place(self):
        buf = np.full((2, 2, 4), 100, dtype=np.uint8)
        assert to_grayscale(buf) is buf

    def test_idempotent(self):
        rng = np.random.default_rng(7)
        buf = rng.integers(0, 256, size=(32, 48, 4), dtype=np.uint8)
        once = to_grayscale(buf.copy())
        twice = to_grayscale(once.copy())
        assert np.array_equal(once, twice)

    def test_rgb_buffer(self):
        buf = np.array([[[0, 255, 0]]], dtype=np.uint8)
        to_grayscale(buf)
        assert buf.tolist() == [[[150, 150, 150]]]

    def test_white_stays_white(self):
        buf = np.full((3, 3, 4), 255, dtype=np.uint8)
        to_grayscale(buf)
        assert (buf == 255).all()

    def test_rejects_bad_shape(self):
        with pytest.raises(ValueError):
            to_grayscale(np.zeros((4, 4), dtype=np.uint8))
        with pytest.raises(ValueError):
            to_grayscale(np.zeros((4, 4, 2), dtype=np.uint8))


class TestRenderSurface:
    def test_unsized_surface(self):
        surface = RenderSurface()
        assert not surface.is_sized
        assert surface.size == (0, 0)
        with pytest.raises(RuntimeError):
            _ = surface.pixels

    def test_configure_allocates_rgba(self):
        surface = RenderSurface()
        surface.configure(320, 240)
        assert surface.pixels.shape == (240, 320, 4)
        assert surface.pixels.dtype == np.uint8
        assert surface.is_bound

    def test_cannot_resize_while_bound(self):
        surface = RenderSurface()
        surface.configure(320, 240)
        with pytest.raises(RuntimeError):
            surface.configure(640, 480)
        # Same size is fine
        surface.configure(320, 240)

    def test_detach_allows_resize(self):
        surface = RenderSurface()
        surface.configure(320, 240)
        surface.detach()
        assert not surface.is_sized
        surface.configure(640, 480)
        assert surface.size == (640, 480)

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            RenderSurface().configure(0, 10)

    def test_draw_frame_converts_bgr_to_rgba(self):
        surface = RenderSurface()
        surface.configure(4, 2)
        frame = np.zeros((2, 4, 3), dtype=np.uint8)
        frame[..., 0] = 255  # blue in BGR
        surface.draw_frame(frame)
        assert surface.pixels[0, 0].tolist() == [0, 0, 255, 255]

    def test_draw_frame_stretches_to_surface(self):
        surface = RenderSurface()
        surface.configure(8, 6)
        surface.draw_frame(np.full((3, 4, 3), 50, dtype=np.uint8))
        assert surface.pixels.shape == (6, 8, 4)
        assert (surface.pixels[..., :3] == 50).all()

    def test_clear(self):
        surface = RenderSurface()
        surface.configure(4, 4)
        surface.draw_frame(np.full((4, 4, 3), 200, dtype=np.uint8))
        surface.clear()
        assert not surface.pixels.any()

    def test_snapshot_bgr(self):
        surface = RenderSurface()
        surface.configure(2, 2)
        surface.pixels[..., 0] = 255  # red in RGBA
        bgr = surface.snapshot_bgr()
        assert bgr.shape == (2, 2, 3)
        assert bgr[0, 0].tolist() == [0, 0, 255]


class TestOverlay:
    def test_draws_box_in_category_color(self):
        surface = RenderSurface()
        surface.configure(200, 200)
        classified = classify(det("dog", 50, 60, 80, 70), ScaleFactors(1.0, 1.0))
        draw_classified(surface, classified)
        px = surface.pixels
        # Left edge of the box is red, interior is untouched
        assert px[100, 50].tolist() == [255, 0, 0, 255]
        assert px[95, 90].tolist() == [0, 0, 0, 0]

    def test_label_drawn_above_box(self):
        surface = RenderSurface()
        surface.configure(300, 200)
        classified = classify(det("person", 40, 100, 200, 80), ScaleFactors(1.0, 1.0))
        draw_classified(surface, classified)
        above = surface.pixels[70:95, 45:250, :3]
        assert above.any()
