# python/scenescript/animation.py
"""
Knob animation for scene scripts.

Animation is resolved before anything is drawn, in two scans over the
directive stream:

    scan_configuration  - finds ``frames``, ``basename`` and whether any ``vary`` exists
    resolve_knobs       - expands every ``vary`` into per-frame knob values

Example:
    >>> from scenescript.parser import parse_script
    >>> from scenescript.animation import resolve_animation
    >>> config, table = resolve_animation(parse_script("frames 11\\nvary k 0 10 0 100"))
    >>> table[5]["k"]
    50.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .errors import FrameOutOfRange, InvertedFrameRange, VaryWithoutFrames
from .parser import Directive, DirectiveKind

logger = logging.getLogger(__name__)

DEFAULT_BASENAME = "output"


@dataclass(frozen=True)
class AnimationConfig:
    frame_count: Optional[int] = None
    basename: str = DEFAULT_BASENAME
    vary_present: bool = False
    warnings: Tuple[str, ...] = ()

    @property
    def animated(self) -> bool:
        return self.frame_count is not None

    @property
    def frames_to_render(self) -> int:
        return self.frame_count if self.frame_count is not None else 1


class KnobFrameTable:
    """Knob values per frame. Frames without a value for a knob simply lack the key."""

    def __init__(self, frame_count: int = 0):
        self._frames: List[Dict[str, float]] = [{} for _ in range(int(frame_count))]
        self._frozen = False

    def set(self, frame: int, knob: str, value: float) -> None:
        if self._frozen:
            raise RuntimeError("knob table is read-only once rendering starts")
        self._frames[frame][knob] = value

    def freeze(self) -> "KnobFrameTable":
        self._frozen = True
        return self

    def value(self, frame: int, knob: str, default: Optional[float] = None) -> Optional[float]:
        if not 0 <= frame < len(self._frames):
            return default
        return self._frames[frame].get(knob, default)

    def knobs(self) -> List[str]:
        names: Dict[str, None] = {}
        for entry in self._frames:
            names.update(dict.fromkeys(entry))
        return list(names)

    def __getitem__(self, frame: int) -> Mapping[str, float]:
        return MappingProxyType(self._frames[frame])

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[Mapping[str, float]]:
        for entry in self._frames:
            yield MappingProxyType(entry)

    def __repr__(self) -> str:
        return f"KnobFrameTable(frames={len(self._frames)}, knobs={self.knobs()})"


def scan_configuration(stream: Sequence[Directive], default_basename: str = DEFAULT_BASENAME) -> AnimationConfig:
    """First scan: frame count, output stem and whether any knob is varied."""
    frame_count: Optional[int] = None
    basename = default_basename
    vary_present = False
    warnings: List[str] = []

    for directive in stream:
        if directive.kind is DirectiveKind.FRAMES:
            count = int(directive.operands[0])
            if frame_count is not None and count != frame_count:
                msg = f"line {directive.line}: frames {count} overrides earlier frames {frame_count}"
                logger.warning(msg)
                warnings.append(msg)
            frame_count = count
        elif directive.kind is DirectiveKind.BASENAME:
            name = directive.operands[0]
            if name is None:
                msg = f"line {directive.line}: basename without a name, keeping {basename!r}"
                logger.warning(msg)
                warnings.append(msg)
            else:
                basename = str(name)
        elif directive.kind is DirectiveKind.VARY:
            vary_present = True

    return AnimationConfig(frame_count, basename, vary_present, tuple(warnings))


def resolve_knobs(stream: Sequence[Directive], config: AnimationConfig) -> KnobFrameTable:
    """Second scan: linear interpolation of every ``vary`` over its inclusive frame range.

    When two ``vary`` directives set the same knob on the same frame, the later one wins.
    """
    if not config.vary_present:
        return KnobFrameTable(config.frame_count or 0).freeze()
    if config.frame_count is None:
        first = next(d for d in stream if d.kind is DirectiveKind.VARY)
        raise VaryWithoutFrames("vary requires a frames directive", line=first.line)

    table = KnobFrameTable(config.frame_count)
    for directive in stream:
        if directive.kind is not DirectiveKind.VARY:
            continue
        knob, start, end, start_value, end_value = directive.operands
        start_frame, end_frame = int(start), int(end)
        if end_frame < start_frame:
            raise InvertedFrameRange(
                f"vary {knob}: end frame {end_frame} is before start frame {start_frame}",
                line=directive.line,
            )
        if end_frame >= config.frame_count:
            raise FrameOutOfRange(
                f"vary {knob}: frame {end_frame} is outside 0..{config.frame_count - 1}",
                line=directive.line,
            )
        if end_frame == start_frame:
            table.set(start_frame, knob, float(start_value))
            continue
        step = (end_value - start_value) / (end_frame - start_frame)
        for frame in range(start_frame, end_frame + 1):
            table.set(frame, knob, start_value + step * (frame - start_frame))
    logger.debug(f"Resolved knobs {table.knobs()} over {len(table)} frames")
    return table.freeze()


def resolve_animation(
    stream: Sequence[Directive], default_basename: str = DEFAULT_BASENAME
) -> Tuple[AnimationConfig, KnobFrameTable]:
    config = scan_configuration(stream, default_basename)
    return config, resolve_knobs(stream, config)


def frame_name(basename: str, frame: int, frame_count: int, suffix: str = "") -> str:
    """Output name for one frame: the index is zero-padded to the width of the last index."""
    width = len(str(max(frame_count - 1, 0)))
    return f"{basename}{frame:0{width}d}{suffix}"


__all__ = [
    "DEFAULT_BASENAME",
    "AnimationConfig",
    "KnobFrameTable",
    "scan_configuration",
    "resolve_knobs",
    "resolve_animation",
    "frame_name",
]
