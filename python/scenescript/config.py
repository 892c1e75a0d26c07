# python/scenescript/config.py
# Interpreter configuration parsing: canvas, lighting, shading and output settings
# Exists to keep the fixed rendering constants of a script run in one validated place
from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .lighting import PointLight, SceneLighting
from .materials import MaterialConstant

ConfigSource = Union["InterpreterConfig", Mapping[str, Any], str, Path, None]

_CONVERTERS: Dict[str, str] = {
    "pillow": "pillow",
    "pil": "pillow",
    "magick": "magick",
    "imagemagick": "magick",
    "convert": "magick",
    "none": "none",
    "off": "none",
}


def _normalize_key(value: Any) -> str:
    return "".join(
        c
        for c in str(value).strip().lower()
        if c not in {"-", "_", " ", "."}
    )


def _normalize_choice(value: Any, mapping: Mapping[str, str], label: str) -> str:
    key = _normalize_key(value)
    if key not in mapping:
        raise ValueError(f"Unknown {label}: {value!r}")
    return mapping[key]


def _to_float3(value: Any, label: str) -> Tuple[float, float, float]:
    if value is None:
        raise ValueError(f"{label} requires three floats")
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return (float(value[0]), float(value[1]), float(value[2]))
    raise ValueError(f"{label} must be a sequence of three numeric values")


def _to_color(value: Any, label: str) -> Tuple[int, int, int]:
    r, g, b = _to_float3(value, label)
    color = (int(r), int(g), int(b))
    if any(c < 0 or c > 255 for c in color):
        raise ValueError(f"{label} channels must be within [0, 255]")
    return color


@dataclass
class CanvasParams:
    width: int = 500
    height: int = 500
    background: Tuple[int, int, int] = (0, 0, 0)

    def to_dict(self) -> dict:
        return {"width": self.width, "height": self.height, "background": list(self.background)}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["CanvasParams"] = None) -> "CanvasParams":
        base = copy.deepcopy(default) if default is not None else cls()
        if "width" in data:
            base.width = int(data["width"])
        if "height" in data:
            base.height = int(data["height"])
        if "background" in data:
            base.background = _to_color(data["background"], "canvas.background")
        return base


@dataclass
class LightingParams:
    view: Tuple[float, float, float] = (0.0, 0.0, 1.0)
    ambient: Tuple[float, float, float] = (50.0, 50.0, 50.0)
    light_position: Tuple[float, float, float] = (0.5, 0.75, 1.0)
    light_color: Tuple[float, float, float] = (255.0, 255.0, 255.0)
    specular_exponent: float = 8.0

    def to_dict(self) -> dict:
        return {
            "view": list(self.view),
            "ambient": list(self.ambient),
            "light_position": list(self.light_position),
            "light_color": list(self.light_color),
            "specular_exponent": self.specular_exponent,
        }

    def to_scene(self) -> SceneLighting:
        return SceneLighting(
            view=self.view,
            ambient=self.ambient,
            light=PointLight(position=self.light_position, color=self.light_color),
            specular_exponent=self.specular_exponent,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["LightingParams"] = None) -> "LightingParams":
        base = copy.deepcopy(default) if default is not None else cls()
        if "view" in data:
            base.view = _to_float3(data["view"], "lighting.view")
        if "ambient" in data:
            base.ambient = _to_float3(data["ambient"], "lighting.ambient")
        if "light_position" in data:
            base.light_position = _to_float3(data["light_position"], "lighting.light_position")
        if "light_color" in data:
            base.light_color = _to_float3(data["light_color"], "lighting.light_color")
        if "specular_exponent" in data:
            base.specular_exponent = float(data["specular_exponent"])
        return base


@dataclass
class ShadingParams:
    steps: int = 20
    draw_color: Tuple[int, int, int] = (0, 255, 0)
    ambient_reflect: Tuple[float, float, float] = (0.1, 0.1, 0.1)
    diffuse_reflect: Tuple[float, float, float] = (0.5, 0.5, 0.5)
    specular_reflect: Tuple[float, float, float] = (0.5, 0.5, 0.5)

    def to_dict(self) -> dict:
        return {
            "steps": self.steps,
            "draw_color": list(self.draw_color),
            "ambient_reflect": list(self.ambient_reflect),
            "diffuse_reflect": list(self.diffuse_reflect),
            "specular_reflect": list(self.specular_reflect),
        }

    def default_material(self) -> MaterialConstant:
        return MaterialConstant(
            name="default",
            ambient=self.ambient_reflect,
            diffuse=self.diffuse_reflect,
            specular=self.specular_reflect,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["ShadingParams"] = None) -> "ShadingParams":
        base = copy.deepcopy(default) if default is not None else cls()
        if "steps" in data:
            base.steps = int(data["steps"])
        if "draw_color" in data:
            base.draw_color = _to_color(data["draw_color"], "shading.draw_color")
        if "ambient_reflect" in data:
            base.ambient_reflect = _to_float3(data["ambient_reflect"], "shading.ambient_reflect")
        if "diffuse_reflect" in data:
            base.diffuse_reflect = _to_float3(data["diffuse_reflect"], "shading.diffuse_reflect")
        if "specular_reflect" in data:
            base.specular_reflect = _to_float3(data["specular_reflect"], "shading.specular_reflect")
        return base


@dataclass
class OutputParams:
    directory: str = "."
    basename: str = "output"
    converter: str = "pillow"
    default_format: str = "PNG"
    frame_suffix: str = ""

    def to_dict(self) -> dict:
        return {
            "directory": self.directory,
            "basename": self.basename,
            "converter": self.converter,
            "default_format": self.default_format,
            "frame_suffix": self.frame_suffix,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["OutputParams"] = None) -> "OutputParams":
        base = copy.deepcopy(default) if default is not None else cls()
        if "directory" in data:
            base.directory = str(data["directory"])
        if "basename" in data:
            base.basename = str(data["basename"])
        if "converter" in data:
            base.converter = _normalize_choice(data["converter"], _CONVERTERS, "converter")
        if "default_format" in data:
            base.default_format = str(data["default_format"]).upper()
        if "frame_suffix" in data:
            base.frame_suffix = str(data["frame_suffix"])
        return base


@dataclass
class InterpreterConfig:
    canvas: CanvasParams = field(default_factory=CanvasParams)
    lighting: LightingParams = field(default_factory=LightingParams)
    shading: ShadingParams = field(default_factory=ShadingParams)
    output: OutputParams = field(default_factory=OutputParams)

    def to_dict(self) -> dict:
        return {
            "canvas": self.canvas.to_dict(),
            "lighting": self.lighting.to_dict(),
            "shading": self.shading.to_dict(),
            "output": self.output.to_dict(),
        }

    def copy(self) -> "InterpreterConfig":
        return copy.deepcopy(self)

    def validate(self) -> None:
        if self.canvas.width <= 0 or self.canvas.height <= 0:
            raise ValueError("canvas.width and canvas.height must be > 0")
        if self.canvas.width > 8192 or self.canvas.height > 8192:
            raise ValueError("canvas.width and canvas.height must be <= 8192")
        if self.shading.steps < 3:
            raise ValueError("shading.steps must be >= 3")
        if self.lighting.specular_exponent <= 0.0:
            raise ValueError("lighting.specular_exponent must be positive")
        if not any(self.lighting.view):
            raise ValueError("lighting.view must be a non-zero vector")
        if not self.output.basename:
            raise ValueError("output.basename must not be empty")
        if self.output.converter not in set(_CONVERTERS.values()):
            raise ValueError(f"Unknown converter: {self.output.converter!r}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["InterpreterConfig"] = None) -> "InterpreterConfig":
        base = copy.deepcopy(default) if default is not None else cls()
        sections = {
            "canvas": CanvasParams,
            "lighting": LightingParams,
            "shading": ShadingParams,
            "output": OutputParams,
        }
        for key, params in sections.items():
            if key not in data:
                continue
            if not isinstance(data[key], Mapping):
                raise TypeError(f"{key} must be a mapping")
            setattr(base, key, params.from_mapping(data[key], getattr(base, key)))
        return base


def _load_from_path(path: Path) -> Mapping[str, Any]:
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix in {".json", ""}:
        return json.loads(text)
    raise ValueError(f"Unsupported interpreter config file format: {path}")


def _build_override_mapping(overrides: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    out: Dict[str, Dict[str, Any]] = {}
    for key, value in overrides.items():
        if value is None:
            continue
        if key in {"width", "height", "background"}:
            out.setdefault("canvas", {})[key] = value
        elif key in {"steps", "draw_color"}:
            out.setdefault("shading", {})[key] = value
        elif key in {"output_dir", "directory"}:
            out.setdefault("output", {})["directory"] = value
        elif key in {"converter", "basename", "default_format", "frame_suffix"}:
            out.setdefault("output", {})[key] = value
        elif key in {"ambient", "view", "light_position", "light_color"}:
            out.setdefault("lighting", {})[key] = value
        else:
            raise ValueError(f"Unknown config override: {key!r}")
    return out


def load_config(config: ConfigSource = None, overrides: Optional[Mapping[str, Any]] = None) -> InterpreterConfig:
    if isinstance(config, InterpreterConfig):
        cfg = config.copy()
    elif isinstance(config, Mapping):
        cfg = InterpreterConfig.from_mapping(config)
    elif isinstance(config, (str, Path)):
        cfg = InterpreterConfig.from_mapping(_load_from_path(Path(config)))
    elif config is None:
        cfg = InterpreterConfig()
    else:
        raise TypeError("config must be InterpreterConfig, mapping, path, or None")

    if overrides:
        merged = _build_override_mapping(overrides)
        if merged:
            cfg = InterpreterConfig.from_mapping(merged, cfg)
    cfg.validate()
    return cfg


__all__ = [
    "CanvasParams",
    "LightingParams",
    "ShadingParams",
    "OutputParams",
    "InterpreterConfig",
    "load_config",
]
