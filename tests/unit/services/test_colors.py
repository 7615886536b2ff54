"""
Tests for the color resolver
"""

import pytest

from chartforge.models.schemas import ColorScheme
from chartforge.services.colors import (
    COLOR_PALETTES, color_for, colors_for, hex_to_rgb, palette_length, resolve_scheme,
)


class TestPalettes:
    """Test the palette table"""

    def test_every_scheme_has_a_palette(self):
        for scheme in ColorScheme:
            assert len(COLOR_PALETTES[scheme.value]) >= 5

    @pytest.mark.parametrize("scheme", list(COLOR_PALETTES))
    def test_colors_cycle(self, scheme):
        """Test that index i and i + palette length pick the same color"""
        length = palette_length(scheme)
        for index in range(length):
            assert color_for(scheme, index) == color_for(scheme, index + length)
            assert color_for(scheme, index, 0.5) == color_for(scheme, index + length, 0.5)


class TestColorFor:
    """Test color_for"""

    def test_opaque_returns_hex(self):
        assert color_for("blue", 0) == "#3B82F6"

    def test_alpha_returns_rgba(self):
        assert color_for("blue", 0, 0.7) == "rgba(59, 130, 246, 0.7)"

    def test_zero_alpha(self):
        assert color_for("red", 0, 0) == "rgba(239, 68, 68, 0)"

    @pytest.mark.parametrize("scheme", [None, "", "chartreuse", 42])
    def test_unknown_scheme_falls_back_to_blue(self, scheme):
        assert color_for(scheme, 1) == COLOR_PALETTES["blue"][1]

    def test_scheme_names_are_case_insensitive(self):
        assert resolve_scheme(" Green ") == "green"

    def test_configured_default_scheme(self, monkeypatch):
        from chartforge.config.settings import clear_settings_cache

        monkeypatch.setenv("DEFAULT_COLOR_SCHEME", "purple")
        clear_settings_cache()

        assert resolve_scheme("unknown") == "purple"

    def test_unknown_configured_default_uses_blue(self, monkeypatch):
        from chartforge.config.settings import clear_settings_cache

        monkeypatch.setenv("DEFAULT_COLOR_SCHEME", "plaid")
        clear_settings_cache()

        assert resolve_scheme(None) == "blue"


def test_colors_for_offsets():
    assert colors_for("green", 2, offset=1) == [COLOR_PALETTES["green"][1], COLOR_PALETTES["green"][2]]


def test_hex_to_rgb():
    assert hex_to_rgb("#FF8000") == (255, 128, 0)
