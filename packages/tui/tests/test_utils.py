"""Tests for toon_tui.utils"""
import pytest

from toon_tui.utils import MAX_DIMENSION, char_width, check_dimension, is_printable, str_width


class TestCharWidth:
    def test_ascii(self):
        assert char_width("a") == 1

    def test_wide(self):
        # CJK characters are double-width
        assert char_width("中") == 2
        assert char_width("😃") == 2

    def test_combining_mark_is_zero_width(self):
        assert char_width("\u0301") == 0

    @pytest.mark.parametrize("c", ["\0", "\n", "\x1b", "\x7f"])
    def test_control_characters_have_no_width(self, c):
        assert char_width(c) is None
        assert not is_printable(c)

    def test_rejects_strings(self):
        with pytest.raises(ValueError):
            char_width("ab")


class TestStrWidth:
    def test_mixed(self):
        assert str_width("a中é") == 4

    def test_controls_count_as_zero(self):
        assert str_width("a\nb") == 2

    def test_empty(self):
        assert str_width("") == 0


class TestCheckDimension:
    def test_bounds(self):
        assert check_dimension(0, "width") == 0
        assert check_dimension(MAX_DIMENSION, "width") == MAX_DIMENSION
        with pytest.raises(ValueError, match="height"):
            check_dimension(-1, "height")
