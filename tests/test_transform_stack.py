# tests/test_transform_stack.py
# Tests for the relative coordinate system stack and the transform builders it composes

from __future__ import annotations

import numpy as np
import pytest

from scenescript import matrix
from scenescript.errors import InvalidAxis, StackUnderflow
from scenescript.stack import TransformStack


def _point(x: float, y: float, z: float) -> np.ndarray:
    return np.array([[x, y, z, 1.0]])


class TestTransformBuilders:
    def test_translate_moves_points(self):
        out = matrix.apply(_point(1, 2, 3), matrix.translate(10, 20, 30))
        np.testing.assert_allclose(out, [[11, 22, 33, 1]])

    def test_scale_scales_points(self):
        out = matrix.apply(_point(1, 2, 3), matrix.scale(2, 3, 4))
        np.testing.assert_allclose(out, [[2, 6, 12, 1]])

    @pytest.mark.parametrize(
        "axis, start, expected",
        [
            ("z", (1, 0, 0), (0, 1, 0)),
            ("x", (0, 1, 0), (0, 0, 1)),
            ("y", (0, 0, 1), (1, 0, 0)),
        ],
    )
    def test_rotation_quarter_turn(self, axis, start, expected):
        out = matrix.apply(_point(*start), matrix.rotate(axis, 90))
        np.testing.assert_allclose(out[0, :3], expected, atol=1e-12)

    @pytest.mark.parametrize("axis", ["w", "X", "", "xy"])
    def test_invalid_axis(self, axis):
        with pytest.raises(InvalidAxis):
            matrix.rotate(axis, 30)

    def test_compose_order(self):
        # scale first, then translate
        m = matrix.compose(matrix.scale(2, 2, 2), matrix.translate(5, 0, 0))
        out = matrix.apply(_point(1, 0, 0), m)
        np.testing.assert_allclose(out, [[7, 0, 0, 1]])

    def test_apply_rejects_bad_shape(self):
        with pytest.raises(ValueError):
            matrix.apply(np.zeros((2, 3)), matrix.identity())


class TestTransformStack:
    """Push, pop and compose on the transform stack."""

    def test_starts_with_identity(self):
        stack = TransformStack()
        assert len(stack) == 1
        np.testing.assert_array_equal(stack.top(), matrix.identity())

    def test_push_duplicates_top(self):
        stack = TransformStack()
        stack.compose(matrix.translate(1, 2, 3))
        stack.push()
        assert len(stack) == 2
        np.testing.assert_array_equal(stack.top(), matrix.translate(1, 2, 3))

    def test_balanced_push_pop_restores_top(self):
        stack = TransformStack()
        stack.compose(matrix.rotate("z", 30))
        before = stack.top().copy()
        stack.push()
        stack.pop()
        np.testing.assert_array_equal(stack.top(), before)

    def test_pop_discards_nested_compose(self):
        stack = TransformStack()
        stack.compose(matrix.translate(5, 0, 0))
        before = stack.top().copy()
        stack.push()
        stack.compose(matrix.scale(3, 3, 3))
        stack.pop()
        np.testing.assert_array_equal(stack.top(), before)

    def test_compose_replaces_top(self):
        stack = TransformStack()
        stack.push()
        stack.compose(matrix.translate(1, 0, 0))
        assert len(stack) == 2

    def test_move_on_identity_is_canonical_translation(self):
        stack = TransformStack()
        stack.compose(matrix.translate(4, -5, 6))
        np.testing.assert_array_equal(stack.top(), matrix.translate(4, -5, 6))

    def test_compose_applies_new_transform_first(self):
        stack = TransformStack()
        stack.compose(matrix.translate(100, 0, 0))
        stack.compose(matrix.rotate("z", 90))
        out = matrix.apply(_point(1, 0, 0), stack.top())
        # rotated about the moved origin, then moved
        np.testing.assert_allclose(out[0, :3], (100, 1, 0), atol=1e-12)

    def test_pop_last_element_underflows(self):
        stack = TransformStack()
        with pytest.raises(StackUnderflow):
            stack.pop()
        assert len(stack) == 1

    def test_underflow_after_balanced_pairs(self):
        stack = TransformStack()
        stack.push()
        stack.pop()
        with pytest.raises(StackUnderflow) as info:
            stack.pop(line=12)
        assert info.value.line == 12

    def test_top_is_read_only(self):
        stack = TransformStack()
        with pytest.raises(ValueError):
            stack.top()[0, 0] = 5.0

    def test_reset(self):
        stack = TransformStack()
        stack.push()
        stack.compose(matrix.scale(2, 2, 2))
        stack.reset()
        assert len(stack) == 1
        np.testing.assert_array_equal(stack.top(), matrix.identity())
