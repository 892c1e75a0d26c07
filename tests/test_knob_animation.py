# tests/test_knob_animation.py
"""
Tests for the two-pass animation resolver: configuration scan and knob expansion.
"""

import pytest

from scenescript.animation import (
    KnobFrameTable,
    frame_name,
    resolve_animation,
    resolve_knobs,
    scan_configuration,
)
from scenescript.errors import FrameOutOfRange, InvertedFrameRange, VaryWithoutFrames
from scenescript.parser import parse_script


class TestConfigurationScan:
    """First pass over the stream."""

    def test_static_script(self):
        config = scan_configuration(parse_script("sphere 0 0 0 10\nsave out"))
        assert config.frame_count is None
        assert not config.animated
        assert config.frames_to_render == 1
        assert config.basename == "output"
        assert not config.vary_present

    def test_frames_and_basename(self):
        config = scan_configuration(parse_script("frames 24\nbasename spin\nvary k 0 23 0 1"))
        assert config.frame_count == 24
        assert config.basename == "spin"
        assert config.vary_present
        assert config.animated

    def test_basename_without_name_warns(self, caplog):
        config = scan_configuration(parse_script("frames 2\nbasename"))
        assert config.basename == "output"
        assert len(config.warnings) == 1
        assert "basename" in caplog.text

    def test_scan_does_not_depend_on_order(self):
        config = scan_configuration(parse_script("vary k 0 1 0 1\nbasename late\nframes 2"))
        assert config.frame_count == 2
        assert config.basename == "late"

    def test_last_frames_directive_wins(self):
        config = scan_configuration(parse_script("frames 5\nframes 7"))
        assert config.frame_count == 7
        assert config.warnings

    def test_default_basename_override(self):
        config = scan_configuration(parse_script("frames 2"), default_basename="clip")
        assert config.basename == "clip"


class TestKnobResolution:
    """Second pass: per-frame knob values."""

    def test_linear_values(self):
        _, table = resolve_animation(parse_script("frames 11\nvary k 0 10 0 100"))
        assert len(table) == 11
        assert table[0]["k"] == 0
        assert table[5]["k"] == 50
        assert table[10]["k"] == 100

    def test_partial_range(self):
        _, table = resolve_animation(parse_script("frames 10\nvary k 2 4 1 0"))
        assert "k" not in table[0]
        assert "k" not in table[1]
        assert table[2]["k"] == pytest.approx(1.0)
        assert table[3]["k"] == pytest.approx(0.5)
        assert table[4]["k"] == pytest.approx(0.0)
        assert "k" not in table[5]

    def test_single_frame_range_takes_start_value(self):
        _, table = resolve_animation(parse_script("frames 5\nvary k 3 3 7 99"))
        assert table[3]["k"] == 7.0

    def test_multiple_knobs(self):
        _, table = resolve_animation(parse_script("frames 3\nvary a 0 2 0 2\nvary b 0 2 10 0"))
        assert dict(table[1]) == {"a": pytest.approx(1.0), "b": pytest.approx(5.0)}
        assert table.knobs() == ["a", "b"]

    def test_later_vary_wins_on_overlap(self):
        _, table = resolve_animation(parse_script("frames 5\nvary k 0 4 0 4\nvary k 2 4 100 100"))
        assert table[1]["k"] == pytest.approx(1.0)
        assert table[2]["k"] == 100.0
        assert table[4]["k"] == 100.0

    def test_vary_without_frames(self):
        stream = parse_script("vary k 0 10 0 1\nsphere 0 0 0 5")
        config = scan_configuration(stream)
        with pytest.raises(VaryWithoutFrames) as info:
            resolve_knobs(stream, config)
        assert info.value.line == 1

    def test_inverted_range(self):
        with pytest.raises(InvertedFrameRange) as info:
            resolve_animation(parse_script("frames 10\n\nvary k 5 2 0 10"))
        assert info.value.line == 3

    def test_range_past_last_frame(self):
        with pytest.raises(FrameOutOfRange):
            resolve_animation(parse_script("frames 10\nvary k 0 10 0 1"))

    def test_frames_without_vary(self):
        config, table = resolve_animation(parse_script("frames 3\nsphere 0 0 0 1"))
        assert config.frames_to_render == 3
        assert len(table) == 3
        assert all(len(entry) == 0 for entry in table)

    def test_no_animation_is_noop(self):
        config, table = resolve_animation(parse_script("sphere 0 0 0 1"))
        assert len(table) == 0
        assert config.frames_to_render == 1


class TestKnobFrameTable:
    def test_read_only_after_freeze(self):
        table = KnobFrameTable(2)
        table.set(0, "k", 1.0)
        table.freeze()
        with pytest.raises(RuntimeError):
            table.set(1, "k", 2.0)
        with pytest.raises(TypeError):
            table[0]["k"] = 5.0

    def test_value_lookup(self):
        table = KnobFrameTable(2)
        table.set(1, "k", 3.0)
        assert table.value(1, "k") == 3.0
        assert table.value(0, "k", 1.0) == 1.0
        assert table.value(9, "k") is None


class TestFrameName:
    @pytest.mark.parametrize(
        "frame, count, expected",
        [
            (0, 3, "spin0"),
            (2, 3, "spin2"),
            (0, 11, "spin00"),
            (7, 100, "spin07"),
            (42, 101, "spin042"),
            (0, 1, "spin0"),
        ],
    )
    def test_zero_padding(self, frame, count, expected):
        assert frame_name("spin", frame, count) == expected

    def test_suffix(self):
        assert frame_name("spin", 3, 10, ".png") == "spin3.png"
