# python/scenescript/geometry.py
# Polygon and edge buffers with parametric primitive generation (box, sphere, torus)
# Exists to give each drawing directive a scratch buffer it fills, transforms and hands to the canvas

from __future__ import annotations

import math
from typing import Iterator, Tuple

import numpy as np

from . import matrix


def _rows(points) -> np.ndarray:
    arr = np.asarray(points, dtype=np.float64)
    if arr.ndim == 1:
        arr = arr.reshape(1, -1)
    if arr.shape[1] == 3:
        arr = np.hstack([arr, np.ones((arr.shape[0], 1))])
    if arr.ndim != 2 or arr.shape[1] != 4:
        raise ValueError("points must have shape (N, 3) or (N, 4)")
    return arr


class _PointBuffer:
    """Homogeneous row points grouped in fixed-size primitives."""

    group = 1

    def __init__(self):
        self._points = np.empty((0, 4), dtype=np.float64)

    @property
    def points(self) -> np.ndarray:
        return self._points

    def _extend(self, points) -> None:
        rows = _rows(points)
        if rows.shape[0] % self.group:
            raise ValueError(f"point count must be a multiple of {self.group}")
        self._points = np.vstack([self._points, rows])

    def transform(self, m: np.ndarray) -> None:
        if self._points.shape[0]:
            self._points = matrix.apply(self._points, m)

    def clear(self) -> None:
        self._points = np.empty((0, 4), dtype=np.float64)

    def __len__(self) -> int:
        return self._points.shape[0] // self.group

    def __bool__(self) -> bool:
        return self._points.shape[0] > 0


class EdgeBuffer(_PointBuffer):
    """Line segments, two rows per edge."""

    group = 2

    def add_edge(self, x0: float, y0: float, z0: float, x1: float, y1: float, z1: float) -> None:
        self._extend([[x0, y0, z0, 1.0], [x1, y1, z1, 1.0]])

    def edges(self) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
        pts = self._points
        for i in range(0, pts.shape[0], 2):
            yield pts[i], pts[i + 1]


class PolygonBuffer(_PointBuffer):
    """Triangles, three rows per triangle, wound counter-clockwise when seen from outside."""

    group = 3

    def add_polygon(self, p0, p1, p2) -> None:
        self._extend([p0, p1, p2])

    def triangles(self) -> Iterator[Tuple[np.ndarray, np.ndarray, np.ndarray]]:
        pts = self._points
        for i in range(0, pts.shape[0], 3):
            yield pts[i], pts[i + 1], pts[i + 2]

    def add_box(self, x: float, y: float, z: float, width: float, height: float, depth: float) -> None:
        """Axis-aligned box from its front-top-left corner.

        Width extends along +x, height along -y and depth along -z.
        """
        xs = (x, x + width)
        ys = (y, y - height)
        zs = (z, z - depth)
        corner = lambda ix, iy, iz: (xs[ix], ys[iy], zs[iz])  # noqa: E731
        center = np.array([x + width / 2.0, y - height / 2.0, z - depth / 2.0])
        faces = (
            ((0, 0, 0), (0, 1, 0), (1, 1, 0), (1, 0, 0)),  # front
            ((1, 0, 1), (1, 1, 1), (0, 1, 1), (0, 0, 1)),  # back
            ((0, 0, 1), (0, 1, 1), (0, 1, 0), (0, 0, 0)),  # left
            ((1, 0, 0), (1, 1, 0), (1, 1, 1), (1, 0, 1)),  # right
            ((0, 0, 1), (0, 0, 0), (1, 0, 0), (1, 0, 1)),  # top
            ((0, 1, 0), (0, 1, 1), (1, 1, 1), (1, 1, 0)),  # bottom
        )
        tris = []
        for quad in faces:
            q = [np.array(corner(*c), dtype=np.float64) for c in quad]
            for tri in ((q[0], q[1], q[2]), (q[0], q[2], q[3])):
                tris.extend(_outward(tri, center))
        self._extend(tris)

    def add_sphere(self, cx: float, cy: float, cz: float, r: float, steps: int) -> None:
        pts = sphere_points(cx, cy, cz, r, steps)
        ring = steps + 1

        def idx(i: int, j: int) -> int:
            return (i % steps) * ring + j

        tris = []
        for i in range(steps):
            for j in range(steps):
                a, b = idx(i, j), idx(i, j + 1)
                c, d = idx(i + 1, j + 1), idx(i + 1, j)
                # the two triangles touching a pole collapse to a line
                if j != steps - 1:
                    tris.extend((pts[a], pts[b], pts[c]))
                if j != 0:
                    tris.extend((pts[a], pts[c], pts[d]))
        if tris:
            self._extend(tris)

    def add_torus(self, cx: float, cy: float, cz: float, r1: float, r2: float, steps: int) -> None:
        """Torus around the y axis; ``r1`` is the tube radius, ``r2`` the ring radius."""
        pts = torus_points(cx, cy, cz, r1, r2, steps)

        def idx(i: int, j: int) -> int:
            return (i % steps) * steps + (j % steps)

        tris = []
        for i in range(steps):
            for j in range(steps):
                a, b = idx(i, j), idx(i, j + 1)
                c, d = idx(i + 1, j + 1), idx(i + 1, j)
                tris.extend((pts[a], pts[d], pts[c]))
                tris.extend((pts[a], pts[c], pts[b]))
        if tris:
            self._extend(tris)


def _outward(tri, center: np.ndarray):
    p0, p1, p2 = tri
    normal = np.cross(p1 - p0, p2 - p0)
    if np.dot(normal, p0 - center) < 0:
        return (p0, p2, p1)
    return (p0, p1, p2)


def sphere_points(cx: float, cy: float, cz: float, r: float, steps: int) -> np.ndarray:
    """Semicircle in the xy plane swept a full turn about the x axis.

    Returns ``steps * (steps + 1)`` points, grouped by longitude.
    """
    if steps < 2:
        raise ValueError("steps must be >= 2")
    out = np.empty((steps * (steps + 1), 3), dtype=np.float64)
    k = 0
    for i in range(steps):
        theta = 2.0 * math.pi * i / steps
        for j in range(steps + 1):
            phi = math.pi * j / steps
            out[k] = (
                r * math.cos(phi) + cx,
                r * math.sin(phi) * math.cos(theta) + cy,
                r * math.sin(phi) * math.sin(theta) + cz,
            )
            k += 1
    return out


def torus_points(cx: float, cy: float, cz: float, r1: float, r2: float, steps: int) -> np.ndarray:
    """Circle of radius ``r1`` offset by ``r2`` and swept a full turn about the y axis."""
    if steps < 3:
        raise ValueError("steps must be >= 3")
    out = np.empty((steps * steps, 3), dtype=np.float64)
    k = 0
    for i in range(steps):
        theta = 2.0 * math.pi * i / steps
        for j in range(steps):
            phi = 2.0 * math.pi * j / steps
            ring = r1 * math.cos(phi) + r2
            out[k] = (
                math.cos(theta) * ring + cx,
                r1 * math.sin(phi) + cy,
                -math.sin(theta) * ring + cz,
            )
            k += 1
    return out


__all__ = ["EdgeBuffer", "PolygonBuffer", "sphere_points", "torus_points"]
