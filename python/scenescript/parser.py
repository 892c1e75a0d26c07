# python/scenescript/parser.py
# Line-oriented parser turning scene script text into typed directives
# Exists so the interpreter can replay an immutable directive stream once per frame

"""
Scene script parser.

Each non-blank line holds one directive: a keyword followed by whitespace
separated operands. ``//`` starts a comment. The parser checks every known
keyword against its operand signature and converts numbers up front, so the
interpreter never sees raw text.

Example:
    >>> from scenescript.parser import parse_script
    >>> stream = parse_script("push\\nmove 250 250 0\\nsphere 0 0 0 100")
    >>> [d.kind.value for d in stream]
    ['push', 'move', 'sphere', 'end']
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from .errors import ParseFailure


class DirectiveKind(Enum):
    CONSTANTS = "constants"
    PUSH = "push"
    POP = "pop"
    MOVE = "move"
    ROTATE = "rotate"
    SCALE = "scale"
    SPHERE = "sphere"
    BOX = "box"
    TORUS = "torus"
    LINE = "line"
    DISPLAY = "display"
    SAVE = "save"
    FRAMES = "frames"
    BASENAME = "basename"
    VARY = "vary"
    UNKNOWN = "unknown"
    END = "end"


Operand = Union[str, float, None]


@dataclass(frozen=True)
class Directive:
    """One parsed instruction.

    ``operands`` are typed: names are ``str``, numbers are ``float`` and absent
    optional operands are ``None``. For ``UNKNOWN`` directives they are the raw
    tokens that followed the keyword.
    """

    kind: DirectiveKind
    operands: Tuple[Operand, ...] = ()
    line: int = 0
    keyword: str = ""


def _finite(token: str) -> Optional[float]:
    try:
        value = float(token)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _number(token: str, line: int, keyword: str) -> float:
    value = _finite(token)
    if value is None:
        raise ParseFailure(f"{keyword}: expected a finite number, got {token!r}", line=line)
    return value


def _is_number(token: str) -> bool:
    return _finite(token) is not None


def _name(token: str, line: int, keyword: str) -> str:
    if _is_number(token):
        raise ParseFailure(f"{keyword}: expected a name, got {token!r}", line=line)
    return token


def _arity(keyword: str, tokens: Sequence[str], line: int, *allowed: int) -> None:
    if len(tokens) not in allowed:
        expected = " or ".join(str(n) for n in allowed)
        raise ParseFailure(
            f"{keyword}: expected {expected} operands, got {len(tokens)}", line=line
        )


def _integral(value: float, keyword: str, label: str, line: int, minimum: int) -> float:
    if not math.isfinite(value) or value != int(value) or value < minimum:
        raise ParseFailure(
            f"{keyword}: {label} must be an integer >= {minimum}, got {value:g}", line=line
        )
    return value


def _signature(pattern: str) -> Callable[[str, Sequence[str], int], Tuple[Operand, ...]]:
    """Build an operand checker from a compact signature.

    ``S`` is a name, ``D`` a number. A leading ``?`` marks an optional leading
    material name (``sphere [S] D...``), a trailing ``k`` an optional trailing
    knob name (``move D D D [K]``).
    """

    leading = pattern.startswith("?")
    trailing = pattern.endswith("k")
    body = pattern.strip("?k")

    def check(keyword: str, tokens: Sequence[str], line: int) -> Tuple[Operand, ...]:
        tokens = list(tokens)
        head: List[Operand] = []
        tail: List[Operand] = []
        if leading:
            if len(tokens) == len(body) + 1:
                head.append(_name(tokens.pop(0), line, keyword))
            else:
                head.append(None)
        if trailing:
            if len(tokens) == len(body) + 1:
                tail.append(_name(tokens.pop(), line, keyword))
            else:
                tail.append(None)
        _arity(keyword, tokens, line, len(body))
        values: List[Operand] = []
        for slot, token in zip(body, tokens):
            if slot == "S":
                values.append(_name(token, line, keyword))
            else:
                values.append(_number(token, line, keyword))
        return tuple(head + values + tail)

    return check


def _constants(keyword: str, tokens: Sequence[str], line: int) -> Tuple[Operand, ...]:
    _arity(keyword, tokens, line, 10, 13)
    name = _name(tokens[0], line, keyword)
    values = [_number(token, line, keyword) for token in tokens[1:]]
    if len(values) == 9:
        values.extend([None, None, None])
    return (name, *values)


def _frames(keyword: str, tokens: Sequence[str], line: int) -> Tuple[Operand, ...]:
    _arity(keyword, tokens, line, 1)
    count = _number(tokens[0], line, keyword)
    return (_integral(count, keyword, "frame count", line, 1),)


def _basename(keyword: str, tokens: Sequence[str], line: int) -> Tuple[Operand, ...]:
    _arity(keyword, tokens, line, 0, 1)
    if not tokens:
        return (None,)
    return (tokens[0],)


def _vary(keyword: str, tokens: Sequence[str], line: int) -> Tuple[Operand, ...]:
    _arity(keyword, tokens, line, 5)
    knob = _name(tokens[0], line, keyword)
    start, end, v0, v1 = (_number(token, line, keyword) for token in tokens[1:])
    _integral(start, keyword, "start frame", line, 0)
    _integral(end, keyword, "end frame", line, 0)
    return (knob, start, end, v0, v1)


_RULES: Dict[DirectiveKind, Callable[[str, Sequence[str], int], Tuple[Operand, ...]]] = {
    DirectiveKind.CONSTANTS: _constants,
    DirectiveKind.PUSH: _signature(""),
    DirectiveKind.POP: _signature(""),
    DirectiveKind.MOVE: _signature("DDDk"),
    DirectiveKind.ROTATE: _signature("SDk"),
    DirectiveKind.SCALE: _signature("DDDk"),
    DirectiveKind.SPHERE: _signature("?DDDD"),
    DirectiveKind.BOX: _signature("?DDDDDD"),
    DirectiveKind.TORUS: _signature("?DDDDD"),
    DirectiveKind.LINE: _signature("DDDDDD"),
    DirectiveKind.DISPLAY: _signature(""),
    DirectiveKind.SAVE: _signature("S"),
    DirectiveKind.FRAMES: _frames,
    DirectiveKind.BASENAME: _basename,
    DirectiveKind.VARY: _vary,
}

_KEYWORDS: Dict[str, DirectiveKind] = {kind.value: kind for kind in _RULES}


def _strip_comment(raw: str) -> str:
    idx = raw.find("//")
    return raw if idx < 0 else raw[:idx]


def parse_line(raw: str, line: int = 0) -> Optional[Directive]:
    """Parse a single line. Returns ``None`` for blank and comment-only lines."""
    tokens = _strip_comment(raw).split()
    if not tokens:
        return None
    keyword, rest = tokens[0], tokens[1:]
    kind = _KEYWORDS.get(keyword)
    if kind is None:
        return Directive(DirectiveKind.UNKNOWN, tuple(rest), line, keyword)
    operands = _RULES[kind](keyword, rest, line)
    return Directive(kind, operands, line, keyword)


def parse_script(text: str) -> List[Directive]:
    """Parse script text into a directive stream terminated by an ``END`` marker."""
    stream: List[Directive] = []
    lineno = 0
    for lineno, raw in enumerate(text.splitlines(), start=1):
        directive = parse_line(raw, lineno)
        if directive is not None:
            stream.append(directive)
    stream.append(Directive(DirectiveKind.END, (), lineno + 1, "end"))
    return stream


def parse_file(path: Union[str, Path]) -> List[Directive]:
    return parse_script(Path(path).read_text(encoding="utf-8"))


__all__ = [
    "DirectiveKind",
    "Directive",
    "parse_line",
    "parse_script",
    "parse_file",
]
