# python/scenescript/__init__.py
# Public Python API for the scene script interpreter
# Exists to expose parsing, animation resolution and rendering from one import
from .errors import (
    ScriptError,
    ParseFailure,
    InvalidAxis,
    StackUnderflow,
    UnknownMaterial,
    FrameRangeError,
    VaryWithoutFrames,
    InvertedFrameRange,
    FrameOutOfRange,
    UnsupportedDirective,
    PersistenceFailure,
)
from .parser import Directive, DirectiveKind, parse_script, parse_file
from .animation import AnimationConfig, KnobFrameTable, resolve_animation, frame_name
from .config import InterpreterConfig, load_config
from .materials import MaterialConstant, MaterialRegistry
from .stack import TransformStack
from .raster import Canvas
from .persist import ImagePersister, PillowNormalizer, MagickNormalizer
from .interpreter import FrameContext, Interpreter, RunResult, run_script, run_file

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # errors
    "ScriptError",
    "ParseFailure",
    "InvalidAxis",
    "StackUnderflow",
    "UnknownMaterial",
    "FrameRangeError",
    "VaryWithoutFrames",
    "InvertedFrameRange",
    "FrameOutOfRange",
    "UnsupportedDirective",
    "PersistenceFailure",
    # parsing and animation
    "Directive",
    "DirectiveKind",
    "parse_script",
    "parse_file",
    "AnimationConfig",
    "KnobFrameTable",
    "resolve_animation",
    "frame_name",
    # rendering
    "InterpreterConfig",
    "load_config",
    "MaterialConstant",
    "MaterialRegistry",
    "TransformStack",
    "Canvas",
    "ImagePersister",
    "PillowNormalizer",
    "MagickNormalizer",
    "FrameContext",
    "Interpreter",
    "RunResult",
    "run_script",
    "run_file",
]
