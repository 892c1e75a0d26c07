# python/scenescript/raster.py
# Z-buffered RGB canvas with line drawing and flat-shaded scanline polygon fill
# Exists to turn transformed geometry buffers into pixels for display and persistence

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from .geometry import EdgeBuffer, PolygonBuffer
from .lighting import SceneLighting, phong, surface_normal
from .materials import MaterialConstant

logger = logging.getLogger(__name__)

Color3 = Tuple[int, int, int]

_MAX_DIM = 8192


class Canvas:
    """RGB image plus depth buffer.

    The origin is the bottom-left pixel; larger z is closer to the viewer.
    Drawing outside the canvas is clipped silently.
    """

    def __init__(self, width: int = 500, height: int = 500, background: Sequence[int] = (0, 0, 0)):
        w, h = int(width), int(height)
        if w <= 0 or h <= 0:
            raise ValueError("width and height must be > 0")
        if w > _MAX_DIM or h > _MAX_DIM:
            raise ValueError(f"width/height must be <= {_MAX_DIM}")
        self.width = w
        self.height = h
        self.background = tuple(int(c) for c in background)
        self.pixels = np.empty((h, w, 3), dtype=np.uint8)
        self.zbuffer = np.empty((h, w), dtype=np.float64)
        self.clear()

    def clear(self) -> None:
        self.pixels[:, :] = self.background
        self.zbuffer.fill(-np.inf)

    def _row(self, y: int) -> int:
        return self.height - 1 - y

    def plot(self, x: int, y: int, z: float, color: Sequence[int]) -> None:
        row = self._row(y)
        if 0 <= x < self.width and 0 <= row < self.height and z > self.zbuffer[row, x]:
            self.pixels[row, x] = color
            self.zbuffer[row, x] = z

    def pixel(self, x: int, y: int) -> Color3:
        r, g, b = self.pixels[self._row(y), x]
        return int(r), int(g), int(b)

    def draw_line(
        self, x0: float, y0: float, z0: float, x1: float, y1: float, z1: float, color: Sequence[int]
    ) -> None:
        """Bresenham line with depth interpolated along the major axis.

        The segment is clipped to the canvas first, so only visible pixels are stepped.
        """
        clipped = self._clip_segment(x0, y0, z0, x1, y1, z1)
        if clipped is None:
            return
        x0, y0, z0, x1, y1, z1 = clipped
        xa, ya = int(round(x0)), int(round(y0))
        xb, yb = int(round(x1)), int(round(y1))
        dx = abs(xb - xa)
        dy = -abs(yb - ya)
        sx = 1 if xa < xb else -1
        sy = 1 if ya < yb else -1
        steps = max(dx, -dy)
        dz = (z1 - z0) / steps if steps else 0.0
        err = dx + dy
        z = float(z0)
        while True:
            self.plot(xa, ya, z, color)
            if xa == xb and ya == yb:
                break
            e2 = 2 * err
            if e2 >= dy:
                err += dy
                xa += sx
            if e2 <= dx:
                err += dx
                ya += sy
            z += dz

    def _clip_segment(
        self, x0: float, y0: float, z0: float, x1: float, y1: float, z1: float
    ) -> Optional[Tuple[float, float, float, float, float, float]]:
        """Liang-Barsky clip against the pixel centers' half-pixel border."""
        dx, dy = x1 - x0, y1 - y0
        t0, t1 = 0.0, 1.0
        bounds = (
            (-dx, x0 + 0.5),
            (dx, self.width - 0.5 - x0),
            (-dy, y0 + 0.5),
            (dy, self.height - 0.5 - y0),
        )
        for p, q in bounds:
            if p == 0.0:
                if q < 0.0:
                    return None
                continue
            t = q / p
            if p < 0.0:
                if t > t1:
                    return None
                t0 = max(t0, t)
            else:
                if t < t0:
                    return None
                t1 = min(t1, t)
        dz = z1 - z0
        return (
            x0 + t0 * dx, y0 + t0 * dy, z0 + t0 * dz,
            x0 + t1 * dx, y0 + t1 * dy, z0 + t1 * dz,
        )

    def draw_lines(self, edges: EdgeBuffer, color: Sequence[int]) -> None:
        for p0, p1 in edges.edges():
            if not (np.isfinite(p0[:3]).all() and np.isfinite(p1[:3]).all()):
                logger.debug("Skipping line with non-finite coordinates")
                continue
            self.draw_line(p0[0], p0[1], p0[2], p1[0], p1[1], p1[2], color)

    def _span(self, y: int, xa: float, za: float, xb: float, zb: float, color: Color3) -> None:
        row = self._row(y)
        if not 0 <= row < self.height:
            return
        if xa > xb:
            xa, xb, za, zb = xb, xa, zb, za
        x_start, x_end = int(round(xa)), int(round(xb))
        lo, hi = max(x_start, 0), min(x_end, self.width - 1)
        if lo > hi:
            return
        xs = np.arange(lo, hi + 1)
        if x_end > x_start:
            zs = za + (zb - za) * (xs - x_start) / (x_end - x_start)
        else:
            zs = np.full(xs.shape, max(za, zb))
        visible = zs > self.zbuffer[row, xs]
        xs, zs = xs[visible], zs[visible]
        self.pixels[row, xs] = color
        self.zbuffer[row, xs] = zs

    def fill_triangle(self, p0, p1, p2, color: Color3) -> None:
        bottom, middle, top = sorted((p0, p1, p2), key=lambda p: p[1])

        def edge(p, q, y: float) -> Tuple[float, float]:
            if q[1] == p[1]:
                return q[0], q[2]
            t = min(1.0, max(0.0, (y - p[1]) / (q[1] - p[1])))
            return p[0] + (q[0] - p[0]) * t, p[2] + (q[2] - p[2]) * t

        y_start = int(math.floor(bottom[1] + 0.5))
        y_end = int(math.floor(top[1] + 0.5))
        for y in range(max(y_start, 0), min(y_end, self.height - 1) + 1):
            xa, za = edge(bottom, top, y)
            if y < middle[1]:
                xb, zb = edge(bottom, middle, y)
            else:
                xb, zb = edge(middle, top, y)
            self._span(y, xa, za, xb, zb, color)

    def draw_polygons(
        self,
        polygons: PolygonBuffer,
        scene: SceneLighting,
        material: MaterialConstant,
    ) -> int:
        """Shade and fill every triangle facing the viewer. Returns the number drawn."""
        view = np.asarray(scene.view, dtype=np.float64)
        drawn = 0
        for p0, p1, p2 in polygons.triangles():
            if not np.isfinite(np.stack((p0[:3], p1[:3], p2[:3]))).all():
                continue
            normal = surface_normal(p0, p1, p2)
            if float(np.dot(normal, view)) <= 0.0:
                continue
            self.fill_triangle(p0, p1, p2, phong(normal, scene, material))
            drawn += 1
        logger.debug(f"Filled {drawn}/{len(polygons)} triangles with material {material.name!r}")
        return drawn

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)

    def to_ppm_bytes(self) -> bytes:
        header = f"P6\n{self.width} {self.height}\n255\n".encode("ascii")
        return header + np.ascontiguousarray(self.pixels).tobytes()

    def __repr__(self) -> str:
        return f"Canvas({self.width}x{self.height})"


__all__ = ["Canvas"]
