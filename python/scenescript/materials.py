# python/scenescript/materials.py
# Named reflectance constants registered by ``constants`` directives

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from .errors import UnknownMaterial


Reflect3 = Tuple[float, float, float]
Color3 = Tuple[float, float, float]


@dataclass(frozen=True)
class MaterialConstant:
    name: str
    ambient: Reflect3 = (0.1, 0.1, 0.1)
    diffuse: Reflect3 = (0.5, 0.5, 0.5)
    specular: Reflect3 = (0.5, 0.5, 0.5)
    color: Optional[Color3] = None

    @classmethod
    def from_channels(cls, name: str, values, color: Optional[Color3] = None) -> "MaterialConstant":
        """Build from the script's per-channel order ``kar kdr ksr kag kdg ksg kab kdb ksb``."""
        v = [float(x) for x in values]
        if len(v) != 9:
            raise ValueError("material constants require nine coefficients")
        return cls(
            name=name,
            ambient=(v[0], v[3], v[6]),
            diffuse=(v[1], v[4], v[7]),
            specular=(v[2], v[5], v[8]),
            color=color,
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "ambient": list(self.ambient),
            "diffuse": list(self.diffuse),
            "specular": list(self.specular),
            "color": list(self.color) if self.color is not None else None,
        }


DEFAULT_MATERIAL = MaterialConstant(name="default")


class MaterialRegistry:
    """Materials visible at the current point of the directive stream."""

    def __init__(self, default: MaterialConstant = DEFAULT_MATERIAL):
        self.default = default
        self._materials: Dict[str, MaterialConstant] = {}

    def define(
        self,
        name: str,
        ambient: Reflect3,
        diffuse: Reflect3,
        specular: Reflect3,
        color: Optional[Color3] = None,
    ) -> MaterialConstant:
        material = MaterialConstant(
            name=name,
            ambient=tuple(float(x) for x in ambient),
            diffuse=tuple(float(x) for x in diffuse),
            specular=tuple(float(x) for x in specular),
            color=None if color is None else tuple(float(x) for x in color),
        )
        self._materials[name] = material
        return material

    def register(self, material: MaterialConstant) -> MaterialConstant:
        self._materials[material.name] = material
        return material

    def resolve(self, name: Optional[str], line: Optional[int] = None) -> MaterialConstant:
        """Look up ``name``; ``None`` selects the default material."""
        if name is None:
            return self.default
        try:
            return self._materials[name]
        except KeyError:
            raise UnknownMaterial(f"material {name!r} is not defined", line=line) from None

    def clear(self) -> None:
        self._materials.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._materials

    def __len__(self) -> int:
        return len(self._materials)

    def __iter__(self) -> Iterator[str]:
        return iter(self._materials)


__all__ = ["MaterialConstant", "MaterialRegistry", "DEFAULT_MATERIAL"]
