# python/scenescript/lighting.py
# Flat Phong shading: ambient, diffuse and specular terms from a single point light

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from .materials import MaterialConstant

Color3 = Tuple[int, int, int]


@dataclass(frozen=True)
class PointLight:
    """Light direction (toward the light) and its RGB color in 0-255 units."""

    position: Tuple[float, float, float] = (0.5, 0.75, 1.0)
    color: Tuple[float, float, float] = (255.0, 255.0, 255.0)


@dataclass(frozen=True)
class SceneLighting:
    view: Tuple[float, float, float] = (0.0, 0.0, 1.0)
    ambient: Tuple[float, float, float] = (50.0, 50.0, 50.0)
    light: PointLight = PointLight()
    specular_exponent: float = 8.0


def normalize(v: Sequence[float]) -> np.ndarray:
    arr = np.asarray(v, dtype=np.float64)[:3]
    length = float(np.linalg.norm(arr))
    if length == 0.0:
        return arr.copy()
    return arr / length


def surface_normal(p0: np.ndarray, p1: np.ndarray, p2: np.ndarray) -> np.ndarray:
    """Unnormalized normal of a counter-clockwise triangle."""
    return np.cross(np.asarray(p1[:3]) - np.asarray(p0[:3]), np.asarray(p2[:3]) - np.asarray(p0[:3]))


def phong(normal: Sequence[float], scene: SceneLighting, material: MaterialConstant) -> Color3:
    n = normalize(normal)
    l = normalize(scene.light.position)  # noqa: E741
    v = normalize(scene.view)
    light_color = np.asarray(scene.light.color, dtype=np.float64)

    ambient = np.asarray(scene.ambient, dtype=np.float64) * np.asarray(material.ambient)

    n_dot_l = float(np.dot(n, l))
    diffuse = light_color * np.asarray(material.diffuse) * max(0.0, n_dot_l)

    specular = np.zeros(3)
    if n_dot_l > 0.0:
        reflect = 2.0 * n * n_dot_l - l
        r_dot_v = max(0.0, float(np.dot(reflect, v)))
        specular = light_color * np.asarray(material.specular) * (r_dot_v ** scene.specular_exponent)

    total = np.clip(np.rint(ambient + diffuse + specular), 0, 255).astype(int)
    return int(total[0]), int(total[1]), int(total[2])


__all__ = ["PointLight", "SceneLighting", "normalize", "surface_normal", "phong"]
