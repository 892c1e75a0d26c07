# tests/test_material_registry.py
# Tests for named material constants and their lookup rules

from __future__ import annotations

import pytest

from scenescript.errors import UnknownMaterial
from scenescript.materials import DEFAULT_MATERIAL, MaterialConstant, MaterialRegistry


class TestMaterialConstant:
    def test_from_channels_deinterleaves(self):
        m = MaterialConstant.from_channels("red", [0.1, 0.5, 0.9, 0.2, 0.6, 0.8, 0.3, 0.7, 0.4])
        assert m.ambient == pytest.approx((0.1, 0.2, 0.3))
        assert m.diffuse == pytest.approx((0.5, 0.6, 0.7))
        assert m.specular == pytest.approx((0.9, 0.8, 0.4))

    def test_from_channels_requires_nine(self):
        with pytest.raises(ValueError):
            MaterialConstant.from_channels("bad", [0.1, 0.2])

    def test_to_dict(self):
        m = MaterialConstant("m", color=(255.0, 0.0, 0.0))
        data = m.to_dict()
        assert data["name"] == "m"
        assert data["color"] == [255.0, 0.0, 0.0]


class TestMaterialRegistry:
    def test_resolve_defined(self):
        reg = MaterialRegistry()
        reg.define("red", (0.1, 0.1, 0.1), (0.5, 0.0, 0.0), (0.5, 0.5, 0.5))
        assert reg.resolve("red").diffuse == (0.5, 0.0, 0.0)
        assert "red" in reg
        assert len(reg) == 1

    def test_resolve_none_gives_default(self):
        reg = MaterialRegistry()
        assert reg.resolve(None) is DEFAULT_MATERIAL

    def test_custom_default(self):
        custom = MaterialConstant("flat", ambient=(1.0, 1.0, 1.0))
        assert MaterialRegistry(custom).resolve(None) is custom

    def test_unknown_material(self):
        reg = MaterialRegistry()
        with pytest.raises(UnknownMaterial) as info:
            reg.resolve("ghost", line=9)
        assert info.value.line == 9
        assert "ghost" in str(info.value)

    def test_redefinition_overwrites(self):
        reg = MaterialRegistry()
        reg.define("m", (0.1, 0.1, 0.1), (0.2, 0.2, 0.2), (0.3, 0.3, 0.3))
        reg.define("m", (0.9, 0.9, 0.9), (0.8, 0.8, 0.8), (0.7, 0.7, 0.7))
        assert reg.resolve("m").ambient == (0.9, 0.9, 0.9)
        assert len(reg) == 1

    def test_no_range_validation(self):
        reg = MaterialRegistry()
        m = reg.define("hot", (5.0, -1.0, 0.0), (0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
        assert m.ambient == (5.0, -1.0, 0.0)

    def test_clear(self):
        reg = MaterialRegistry()
        reg.register(MaterialConstant("a"))
        reg.clear()
        assert len(reg) == 0
        with pytest.raises(UnknownMaterial):
            reg.resolve("a")
