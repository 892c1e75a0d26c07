# tests/test_geometry_buffers.py
# Tests for polygon/edge buffers and the parametric primitives they generate

from __future__ import annotations

import numpy as np
import pytest

from scenescript import matrix
from scenescript.geometry import EdgeBuffer, PolygonBuffer, sphere_points, torus_points


def _normals(buf: PolygonBuffer) -> np.ndarray:
    return np.array([np.cross(p1[:3] - p0[:3], p2[:3] - p0[:3]) for p0, p1, p2 in buf.triangles()])


def _centroids(buf: PolygonBuffer) -> np.ndarray:
    return np.array([(p0[:3] + p1[:3] + p2[:3]) / 3.0 for p0, p1, p2 in buf.triangles()])


class TestEdgeBuffer:
    def test_add_and_clear(self):
        edges = EdgeBuffer()
        assert len(edges) == 0 and not edges
        edges.add_edge(0, 0, 0, 1, 1, 1)
        assert len(edges) == 1
        edges.clear()
        assert len(edges) == 0

    def test_transform(self):
        edges = EdgeBuffer()
        edges.add_edge(0, 0, 0, 1, 0, 0)
        edges.transform(matrix.translate(5, 5, 5))
        (a, b), = list(edges.edges())
        np.testing.assert_allclose(a, [5, 5, 5, 1])
        np.testing.assert_allclose(b, [6, 5, 5, 1])

    def test_transform_empty_is_noop(self):
        edges = EdgeBuffer()
        edges.transform(matrix.scale(2, 2, 2))
        assert len(edges) == 0


class TestBox:
    def test_twelve_triangles(self):
        buf = PolygonBuffer()
        buf.add_box(0, 0, 0, 10, 20, 30)
        assert len(buf) == 12

    def test_extent(self):
        buf = PolygonBuffer()
        buf.add_box(1, 2, 3, 10, 20, 30)
        pts = buf.points[:, :3]
        np.testing.assert_allclose(pts.min(axis=0), (1, -18, -27))
        np.testing.assert_allclose(pts.max(axis=0), (11, 2, 3))

    def test_normals_point_outward(self):
        buf = PolygonBuffer()
        buf.add_box(0, 0, 0, 10, 10, 10)
        center = np.array([5.0, -5.0, -5.0])
        dots = np.einsum("ij,ij->i", _normals(buf), _centroids(buf) - center)
        assert (dots > 0).all()


class TestSphere:
    def test_point_count(self):
        assert sphere_points(0, 0, 0, 1, 10).shape == (110, 3)

    def test_points_on_surface(self):
        pts = sphere_points(1, 2, 3, 5, 12)
        dist = np.linalg.norm(pts - np.array([1, 2, 3]), axis=1)
        np.testing.assert_allclose(dist, 5.0)

    def test_triangle_count_skips_poles(self):
        steps = 10
        buf = PolygonBuffer()
        buf.add_sphere(0, 0, 0, 50, steps)
        assert len(buf) == steps * (2 * steps - 2)

    def test_normals_point_outward(self):
        buf = PolygonBuffer()
        buf.add_sphere(0, 0, 0, 50, 12)
        dots = np.einsum("ij,ij->i", _normals(buf), _centroids(buf))
        assert (dots > 0).all()

    def test_steps_validated(self):
        with pytest.raises(ValueError):
            sphere_points(0, 0, 0, 1, 1)


class TestTorus:
    def test_point_count(self):
        assert torus_points(0, 0, 0, 1, 5, 8).shape == (64, 3)

    def test_triangle_count(self):
        buf = PolygonBuffer()
        buf.add_torus(0, 0, 0, 5, 20, 8)
        assert len(buf) == 2 * 8 * 8

    def test_normals_point_away_from_tube_center(self):
        r1, r2 = 5.0, 20.0
        buf = PolygonBuffer()
        buf.add_torus(0, 0, 0, r1, r2, 16)
        centroids = _centroids(buf)
        ring = centroids.copy()
        ring[:, 1] = 0.0
        radial = np.linalg.norm(ring, axis=1, keepdims=True)
        tube_center = ring / radial * r2
        dots = np.einsum("ij,ij->i", _normals(buf), centroids - tube_center)
        assert (dots > 0).all()


class TestPolygonBuffer:
    def test_transform_and_clear(self):
        buf = PolygonBuffer()
        buf.add_polygon((0, 0, 0), (1, 0, 0), (0, 1, 0))
        buf.transform(matrix.scale(2, 2, 2))
        (p0, p1, p2), = list(buf.triangles())
        np.testing.assert_allclose(p1, [2, 0, 0, 1])
        buf.clear()
        assert not buf

    def test_rejects_partial_triangle(self):
        buf = PolygonBuffer()
        with pytest.raises(ValueError):
            buf._extend([(0, 0, 0), (1, 1, 1)])
