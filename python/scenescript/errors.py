# python/scenescript/errors.py
# Error taxonomy raised by the parser, the animation resolver and the frame renderer

from __future__ import annotations

from typing import Optional


class ScriptError(RuntimeError):
    """Base class for every error a scene script can produce.

    ``fatal`` errors abort the run; non-fatal ones are reported and skipped.
    ``line`` is the 1-based script line of the offending directive when known and
    ``frame`` is the animation frame being rendered when the error was raised.
    """

    fatal = True

    def __init__(self, message: str, line: Optional[int] = None, frame: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.frame = frame

    def __str__(self) -> str:
        where = []
        if self.line is not None:
            where.append(f"line {self.line}")
        if self.frame is not None:
            where.append(f"frame {self.frame}")
        if where:
            return f"{self.message} ({', '.join(where)})"
        return self.message


class ParseFailure(ScriptError, ValueError):
    """Malformed directive: wrong operand count or a non-numeric token where a number is required."""


class InvalidAxis(ScriptError, ValueError):
    """Rotation axis other than x, y or z."""


class StackUnderflow(ScriptError):
    """``pop`` with only the root transform left on the stack."""


class UnknownMaterial(ScriptError):
    """Geometry directive names a material that has not been defined yet."""


class FrameRangeError(ScriptError):
    """Base class for animation configuration errors."""


class VaryWithoutFrames(FrameRangeError):
    pass


class InvertedFrameRange(FrameRangeError):
    pass


class FrameOutOfRange(FrameRangeError):
    pass


class UnsupportedDirective(ScriptError):
    """Directive keyword the interpreter does not implement."""

    fatal = False


class PersistenceFailure(ScriptError):
    """Writing or normalizing an output image failed."""


__all__ = [
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
]
