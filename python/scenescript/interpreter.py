# python/scenescript/interpreter.py
# Directive dispatcher and frame renderer for scene scripts
# Exists to replay one parsed directive stream per animation frame against fresh per-frame state

"""
Scene script interpreter.

A run has three phases over the same immutable directive stream:

1. configuration scan (``frames``, ``basename``, presence of ``vary``)
2. knob resolution (per-frame values for every ``vary``)
3. the frame loop, which replays every directive once per frame

Each frame starts from an identity transform stack, an empty material
registry, empty geometry buffers and a cleared canvas, so frames never share
mutable state.

Example:
    >>> from scenescript import Interpreter
    >>> result = Interpreter({"output": {"directory": "out"}}).run_script(
    ...     "constants red 0.1 0.5 0.5 0.1 0.5 0.5 0.1 0.5 0.5\\n"
    ...     "sphere red 250 250 0 100\\n"
    ...     "save red.png\\n"
    ... )
    >>> [p.name for p in result.written]
    ['red.png']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Union

from .animation import AnimationConfig, KnobFrameTable, frame_name, resolve_animation
from .config import ConfigSource, load_config
from .errors import PersistenceFailure, ScriptError, UnsupportedDirective
from .geometry import EdgeBuffer, PolygonBuffer
from .materials import MaterialConstant, MaterialRegistry
from . import matrix
from .parser import Directive, DirectiveKind, parse_file, parse_script
from .persist import ImagePersister, Persister, Presenter, make_normalizer, show_canvas
from .raster import Canvas
from .stack import TransformStack

logger = logging.getLogger(__name__)


@dataclass
class FrameContext:
    """Mutable state for drawing one frame."""

    index: int
    canvas: Canvas
    materials: MaterialRegistry
    knobs: Mapping[str, float] = field(default_factory=dict)
    stack: TransformStack = field(default_factory=TransformStack)
    polygons: PolygonBuffer = field(default_factory=PolygonBuffer)
    edges: EdgeBuffer = field(default_factory=EdgeBuffer)
    written: List[Path] = field(default_factory=list)
    warnings: List[ScriptError] = field(default_factory=list)

    def buffers_empty(self) -> bool:
        return not self.polygons and not self.edges


@dataclass
class RunResult:
    animation: AnimationConfig
    knobs: KnobFrameTable
    frame_count: int = 0
    written: List[Path] = field(default_factory=list)
    warnings: List[ScriptError] = field(default_factory=list)


Handler = Callable[[Directive, FrameContext], None]


class Interpreter:
    """Executes directive streams and writes the resulting images.

    Args:
        config: ``InterpreterConfig``, mapping, JSON path or ``None`` for defaults
        persister: object with ``save(canvas, path) -> Path``; defaults to a PPM
            writer followed by the configured converter
        presenter: callable used by ``display``; defaults to ``Image.show``
    """

    def __init__(
        self,
        config: ConfigSource = None,
        persister: Optional[Persister] = None,
        presenter: Optional[Presenter] = None,
    ):
        self.config = load_config(config)
        output = self.config.output
        self.persister = persister if persister is not None else ImagePersister(
            make_normalizer(output.converter, output.default_format)
        )
        self.presenter = presenter if presenter is not None else show_canvas
        self.scene = self.config.lighting.to_scene()
        self.default_material = self.config.shading.default_material()
        self.last_result: Optional[RunResult] = None

        self._handlers: Dict[DirectiveKind, Handler] = {
            DirectiveKind.CONSTANTS: self._constants,
            DirectiveKind.PUSH: self._push,
            DirectiveKind.POP: self._pop,
            DirectiveKind.MOVE: self._move,
            DirectiveKind.ROTATE: self._rotate,
            DirectiveKind.SCALE: self._scale,
            DirectiveKind.SPHERE: self._sphere,
            DirectiveKind.BOX: self._box,
            DirectiveKind.TORUS: self._torus,
            DirectiveKind.LINE: self._line,
            DirectiveKind.DISPLAY: self._display,
            DirectiveKind.SAVE: self._save,
            DirectiveKind.FRAMES: self._skip,
            DirectiveKind.BASENAME: self._skip,
            DirectiveKind.VARY: self._skip,
            DirectiveKind.UNKNOWN: self._unknown,
            DirectiveKind.END: self._skip,
        }
        missing = set(DirectiveKind) - set(self._handlers)
        if missing:
            raise RuntimeError(f"no handler for directive kinds: {sorted(k.value for k in missing)}")

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    def run(self, stream: Sequence[Directive]) -> RunResult:
        animation, knobs = resolve_animation(stream, self.config.output.basename)
        result = RunResult(animation=animation, knobs=knobs)
        self.last_result = result

        total = animation.frames_to_render
        logger.info(f"Rendering {total} frame(s) from {len(stream)} directives")
        for index in range(total):
            ctx = self.new_frame(index, knobs)
            try:
                self.render_frame(stream, ctx)
                if animation.animated:
                    name = frame_name(animation.basename, index, total, self.config.output.frame_suffix)
                    ctx.written.append(self._persist(ctx.canvas, self.output_path(name)))
            except ScriptError as exc:
                if exc.frame is None and animation.animated:
                    exc.frame = index
                raise
            finally:
                result.written.extend(ctx.written)
                result.warnings.extend(ctx.warnings)
            result.frame_count += 1
            logger.debug(f"Frame {index} done")
        return result

    def run_script(self, text: str) -> RunResult:
        return self.run(parse_script(text))

    def run_file(self, path: Union[str, Path]) -> RunResult:
        return self.run(parse_file(path))

    def new_frame(self, index: int = 0, knobs: Optional[KnobFrameTable] = None) -> FrameContext:
        canvas = Canvas(self.config.canvas.width, self.config.canvas.height, self.config.canvas.background)
        values: Mapping[str, float] = {}
        if knobs is not None and index < len(knobs):
            values = knobs[index]
        return FrameContext(
            index=index,
            canvas=canvas,
            materials=MaterialRegistry(self.default_material),
            knobs=values,
        )

    def render_frame(self, stream: Sequence[Directive], ctx: FrameContext) -> None:
        for directive in stream:
            if directive.kind is DirectiveKind.END:
                break
            self.execute(directive, ctx)

    def execute(self, directive: Directive, ctx: FrameContext) -> None:
        """Run one directive. Non-fatal errors are reported on the first frame and skipped."""
        logger.debug(f"frame {ctx.index} line {directive.line}: {directive.keyword} {directive.operands}")
        try:
            self._handlers[directive.kind](directive, ctx)
        except ScriptError as exc:
            if exc.line is None:
                exc.line = directive.line
            if exc.fatal:
                raise
            if ctx.index == 0:
                logger.warning(str(exc))
                ctx.warnings.append(exc)

    def output_path(self, name: Union[str, Path]) -> Path:
        path = Path(name)
        if path.is_absolute():
            return path
        return Path(self.config.output.directory) / path

    def _persist(self, canvas: Canvas, path: Path) -> Path:
        try:
            return Path(self.persister.save(canvas, path))
        except OSError as exc:
            raise PersistenceFailure(f"could not save {path}: {exc}") from exc

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _knob(self, ctx: FrameContext, knob: Optional[str]) -> float:
        if knob is None:
            return 1.0
        value = ctx.knobs.get(knob)
        if value is None:
            logger.debug(f"frame {ctx.index}: knob {knob!r} has no value, using 1.0")
            return 1.0
        return float(value)

    def _constants(self, directive: Directive, ctx: FrameContext) -> None:
        name, *values = directive.operands
        color = None if values[9] is None else tuple(values[9:12])
        ctx.materials.register(MaterialConstant.from_channels(name, values[:9], color))

    def _push(self, directive: Directive, ctx: FrameContext) -> None:
        ctx.stack.push()

    def _pop(self, directive: Directive, ctx: FrameContext) -> None:
        ctx.stack.pop(line=directive.line)

    def _move(self, directive: Directive, ctx: FrameContext) -> None:
        dx, dy, dz, knob = directive.operands
        k = self._knob(ctx, knob)
        ctx.stack.compose(matrix.translate(dx * k, dy * k, dz * k))

    def _rotate(self, directive: Directive, ctx: FrameContext) -> None:
        axis, degrees, knob = directive.operands
        ctx.stack.compose(matrix.rotate(axis, degrees * self._knob(ctx, knob)))

    def _scale(self, directive: Directive, ctx: FrameContext) -> None:
        sx, sy, sz, knob = directive.operands
        k = self._knob(ctx, knob)
        ctx.stack.compose(matrix.scale(sx * k, sy * k, sz * k))

    def _draw_polygons(self, ctx: FrameContext, material: MaterialConstant) -> None:
        try:
            ctx.polygons.transform(ctx.stack.top())
            ctx.canvas.draw_polygons(ctx.polygons, self.scene, material)
        finally:
            ctx.polygons.clear()

    def _sphere(self, directive: Directive, ctx: FrameContext) -> None:
        name, cx, cy, cz, r = directive.operands
        material = ctx.materials.resolve(name, line=directive.line)
        ctx.polygons.add_sphere(cx, cy, cz, r, self.config.shading.steps)
        self._draw_polygons(ctx, material)

    def _box(self, directive: Directive, ctx: FrameContext) -> None:
        name, x, y, z, w, h, d = directive.operands
        material = ctx.materials.resolve(name, line=directive.line)
        ctx.polygons.add_box(x, y, z, w, h, d)
        self._draw_polygons(ctx, material)

    def _torus(self, directive: Directive, ctx: FrameContext) -> None:
        name, cx, cy, cz, r1, r2 = directive.operands
        material = ctx.materials.resolve(name, line=directive.line)
        ctx.polygons.add_torus(cx, cy, cz, r1, r2, self.config.shading.steps)
        self._draw_polygons(ctx, material)

    def _line(self, directive: Directive, ctx: FrameContext) -> None:
        try:
            ctx.edges.add_edge(*directive.operands)
            ctx.edges.transform(ctx.stack.top())
            ctx.canvas.draw_lines(ctx.edges, self.config.shading.draw_color)
        finally:
            ctx.edges.clear()

    def _display(self, directive: Directive, ctx: FrameContext) -> None:
        try:
            self.presenter(ctx.canvas)
        except Exception as exc:
            logger.warning(f"line {directive.line}: display failed: {exc}")

    def _save(self, directive: Directive, ctx: FrameContext) -> None:
        path = self.output_path(directive.operands[0])
        ctx.written.append(self._persist(ctx.canvas, path))

    def _unknown(self, directive: Directive, ctx: FrameContext) -> None:
        raise UnsupportedDirective(f"{directive.keyword!r} is not supported, skipping", line=directive.line)

    def _skip(self, directive: Directive, ctx: FrameContext) -> None:
        pass


def run_script(text: str, config: ConfigSource = None, **kwargs) -> RunResult:
    """Convenience wrapper: ``Interpreter(config, **kwargs).run_script(text)``."""
    return Interpreter(config, **kwargs).run_script(text)


def run_file(path: Union[str, Path], config: ConfigSource = None, **kwargs) -> RunResult:
    return Interpreter(config, **kwargs).run_file(path)


__all__ = ["FrameContext", "RunResult", "Interpreter", "run_script", "run_file"]
