# python/scenescript/stack.py
# Relative coordinate system stack used while a frame is being drawn

from __future__ import annotations

from typing import List, Optional

import numpy as np

from . import matrix
from .errors import StackUnderflow


class TransformStack:
    """Non-empty stack of composed transforms; the top is the current transform.

    Example:
        >>> stack = TransformStack()
        >>> stack.push()
        >>> stack.compose(matrix.translate(10, 0, 0))
        >>> stack.pop()
        >>> bool((stack.top() == matrix.identity()).all())
        True
    """

    def __init__(self, root: Optional[np.ndarray] = None):
        base = matrix.identity() if root is None else np.array(root, dtype=np.float64)
        self._frames: List[np.ndarray] = [base]

    def __len__(self) -> int:
        return len(self._frames)

    def push(self) -> None:
        """Enter a nested scope holding a copy of the current transform."""
        self._frames.append(self._frames[-1].copy())

    def pop(self, line: Optional[int] = None) -> None:
        if len(self._frames) == 1:
            raise StackUnderflow("pop with no pushed transform to remove", line=line)
        self._frames.pop()

    def compose(self, elementary: np.ndarray) -> None:
        """Replace the top with ``elementary`` applied before it. Stack size is unchanged."""
        self._frames[-1] = matrix.compose(elementary, self._frames[-1])

    def top(self) -> np.ndarray:
        view = self._frames[-1].view()
        view.flags.writeable = False
        return view

    def reset(self) -> None:
        self._frames = [matrix.identity()]

    def __repr__(self) -> str:
        return f"TransformStack(depth={len(self._frames)})"


__all__ = ["TransformStack"]
