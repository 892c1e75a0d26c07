# python/scenescript/matrix.py
# 4x4 transform construction and application for the scene interpreter
#
# Points are stored as rows (x, y, z, 1) and transformed with ``points @ m``.
# Under that convention ``a @ b`` applies ``a`` first and ``b`` second.

from __future__ import annotations

import math

import numpy as np

from .errors import InvalidAxis

AXES = ("x", "y", "z")


def identity() -> np.ndarray:
    return np.eye(4, dtype=np.float64)


def translate(dx: float, dy: float, dz: float) -> np.ndarray:
    m = identity()
    m[3, :3] = (dx, dy, dz)
    return m


def scale(sx: float, sy: float, sz: float) -> np.ndarray:
    return np.diag([float(sx), float(sy), float(sz), 1.0])


def rot_x(degrees: float) -> np.ndarray:
    theta = math.radians(degrees)
    c, s = math.cos(theta), math.sin(theta)
    m = identity()
    m[1, 1], m[1, 2] = c, s
    m[2, 1], m[2, 2] = -s, c
    return m


def rot_y(degrees: float) -> np.ndarray:
    theta = math.radians(degrees)
    c, s = math.cos(theta), math.sin(theta)
    m = identity()
    m[0, 0], m[0, 2] = c, -s
    m[2, 0], m[2, 2] = s, c
    return m


def rot_z(degrees: float) -> np.ndarray:
    theta = math.radians(degrees)
    c, s = math.cos(theta), math.sin(theta)
    m = identity()
    m[0, 0], m[0, 1] = c, s
    m[1, 0], m[1, 1] = -s, c
    return m


_ROTATIONS = {"x": rot_x, "y": rot_y, "z": rot_z}


def rotate(axis: str, degrees: float) -> np.ndarray:
    """Counter-clockwise rotation about ``axis`` when looking down it toward the origin."""
    try:
        build = _ROTATIONS[axis]
    except KeyError:
        raise InvalidAxis(f"invalid rotation axis {axis!r}: use x, y or z") from None
    return build(degrees)


def compose(elementary: np.ndarray, current: np.ndarray) -> np.ndarray:
    """Return ``elementary`` followed by ``current``."""
    return np.asarray(elementary, dtype=np.float64) @ np.asarray(current, dtype=np.float64)


def apply(points: np.ndarray, m: np.ndarray) -> np.ndarray:
    """Transform an ``(N, 4)`` array of homogeneous row points."""
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 4:
        raise ValueError("points must have shape (N, 4)")
    return pts @ np.asarray(m, dtype=np.float64)


__all__ = [
    "AXES",
    "identity",
    "translate",
    "scale",
    "rot_x",
    "rot_y",
    "rot_z",
    "rotate",
    "compose",
    "apply",
]
