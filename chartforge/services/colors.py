"""
Color Resolver - deterministic palette lookup by scheme name and index
"""

from typing import Any, Dict, List, Optional, Tuple

from chartforge.config.settings import get_settings
from chartforge.models.schemas import ColorScheme

COLOR_PALETTES: Dict[str, Tuple[str, ...]] = {
    ColorScheme.BLUE.value: ("#3B82F6", "#1D4ED8", "#1E40AF", "#1E3A8A", "#312E81"),
    ColorScheme.GREEN.value: ("#10B981", "#059669", "#047857", "#065F46", "#064E3B"),
    ColorScheme.RED.value: ("#EF4444", "#DC2626", "#B91C1C", "#991B1B", "#7F1D1D"),
    ColorScheme.PURPLE.value: ("#8B5CF6", "#7C3AED", "#6D28D9", "#5B21B6", "#4C1D95"),
    ColorScheme.ORANGE.value: ("#F59E0B", "#D97706", "#B45309", "#92400E", "#78350F"),
    ColorScheme.TEAL.value: ("#14B8A6", "#0D9488", "#0F766E", "#115E59", "#134E4A"),
    ColorScheme.PINK.value: ("#EC4899", "#DB2777", "#BE185D", "#9D174D", "#831843"),
    ColorScheme.INDIGO.value: ("#6366F1", "#4F46E5", "#4338CA", "#3730A3", "#312E81"),
    ColorScheme.RAINBOW.value: ("#3B82F6", "#10B981", "#F59E0B", "#EF4444", "#8B5CF6", "#06B6D4", "#84CC16"),
    ColorScheme.PASTEL.value: ("#93C5FD", "#86EFAC", "#FDE68A", "#FCA5A5", "#C4B5FD", "#7DD3FC", "#BEF264"),
    ColorScheme.DARK.value: ("#1F2937", "#374151", "#4B5563", "#6B7280", "#9CA3AF"),
    ColorScheme.WARM.value: ("#DC2626", "#EA580C", "#D97706", "#CA8A04", "#65A30D"),
    ColorScheme.COOL.value: ("#0EA5E9", "#0284C7", "#0369A1", "#075985", "#0C4A6E"),
    ColorScheme.GRAY.value: ("#E5E7EB", "#D1D5DB", "#9CA3AF", "#6B7280", "#4B5563"),
}

FALLBACK_SCHEME = ColorScheme.BLUE.value


def resolve_scheme(scheme: Any) -> str:
    """Known palette name for a template value, else the configured default"""
    if isinstance(scheme, ColorScheme):
        return scheme.value
    if scheme is not None:
        name = str(scheme).strip().lower()
        if name in COLOR_PALETTES:
            return name

    default = get_settings().default_color_scheme
    return default if default in COLOR_PALETTES else FALLBACK_SCHEME


def palette_for(scheme: Any) -> Tuple[str, ...]:
    return COLOR_PALETTES[resolve_scheme(scheme)]


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    value = hex_color.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def _format_alpha(alpha: float) -> str:
    if float(alpha).is_integer():
        return str(int(alpha))
    return f"{alpha:g}"


def color_for(scheme: Any, index: int = 0, alpha: float = 1) -> str:
    """
    Palette color at `index`, cycling through the scheme.

    Unknown schemes fall back to the default palette. With alpha != 1 the
    color is returned as `rgba(r, g, b, alpha)` with the palette's channels.
    """
    palette = palette_for(scheme)
    color = palette[index % len(palette)]
    if alpha == 1:
        return color
    r, g, b = hex_to_rgb(color)
    return f"rgba({r}, {g}, {b}, {_format_alpha(alpha)})"


def colors_for(scheme: Any, count: int, alpha: float = 1, offset: int = 0) -> List[str]:
    """One color per point, cycling the palette"""
    return [color_for(scheme, offset + i, alpha) for i in range(count)]


def palette_length(scheme: Optional[str]) -> int:
    return len(palette_for(scheme))
