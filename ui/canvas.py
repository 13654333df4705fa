"""
canvas.py — SVG Bar Chart Renderer
====================================
Pure rendering function: (array, highlighted indices) → SVG string.

Each value is one bar, its height proportional to value / max(array).
Bars named by the last step are drawn in the highlight colour and
every bar carries its value as a label.

Design decisions:
  - NO mutation.  The caller passes the working array and the
    highlights and gets back a string.
  - Non-positive values are drawn as zero-height bars so a mixed-sign
    array still renders.
"""

from typing import Dict, Iterable, Optional, Sequence


# ---------------------------------------------------------------------------
# Visual Config: colors, dimensions, fonts
# ---------------------------------------------------------------------------
class CanvasConfig:
    width:  int = 800
    height: int = 400
    bg:     str = "#0d1117"

    bar_colors: Dict[str, str] = {
        "default":   "#0ea5e9",   # cyan
        "highlight": "#f43f5e",   # rose: touched by the current step
        "sorted":    "#10b981",   # emerald: run complete
    }

    bar_gap:         int = 2
    min_bar_width:   int = 5
    top_padding:     int = 24     # room for the value label above the tallest bar
    label_color:     str = "#e6edf3"
    label_size:      int = 12


CONFIG = CanvasConfig()


def render_bars(
    array: Sequence[float],
    highlights: Iterable[int] = (),
    config: CanvasConfig = CONFIG,
    complete: bool = False,
) -> str:
    """
    Returns an SVG string.

    Args:
        array      : Working array to draw.
        highlights : Indices to draw in the highlight colour.
        config     : Visual config.
        complete   : Draw every non-highlighted bar in the "sorted" colour.
    """
    marked = set(highlights)
    parts = [
        f'<svg width="{config.width}" height="{config.height}" '
        f'viewBox="0 0 {config.width} {config.height}" '
        f'xmlns="http://www.w3.org/2000/svg" style="background: {config.bg};">',
        f'<rect width="{config.width}" height="{config.height}" fill="{config.bg}"/>',
    ]

    if array:
        bar_width = max(config.min_bar_width, config.width / len(array))
        peak = max(array)
        usable = config.height - config.top_padding

        for i, value in enumerate(array):
            parts.append(_render_bar(i, value, peak, bar_width, usable, i in marked, complete, config))

    parts.append("</svg>")
    return "\n".join(parts)


def _render_bar(
    i: int,
    value: float,
    peak: float,
    bar_width: float,
    usable: float,
    highlighted: bool,
    complete: bool,
    config: CanvasConfig,
) -> str:
    height = _bar_height(value, peak, usable)
    x = i * bar_width
    y = config.height - height

    if highlighted:
        fill = config.bar_colors["highlight"]
    elif complete:
        fill = config.bar_colors["sorted"]
    else:
        fill = config.bar_colors["default"]

    return "\n".join([
        f'<g class="bar{" highlight" if highlighted else ""}" data-index="{i}">',
        f'  <rect x="{x:.2f}" y="{y:.2f}" width="{max(bar_width - config.bar_gap, 1):.2f}" '
        f'height="{height:.2f}" fill="{fill}"/>',
        f'  <text x="{x + bar_width / 2:.2f}" y="{y - 5:.2f}" text-anchor="middle" '
        f'font-size="{config.label_size}" fill="{config.label_color}">{_format(value)}</text>',
        '</g>',
    ])


def _bar_height(value: float, peak: float, usable: float) -> float:
    if peak <= 0 or value <= 0:
        return 0.0
    return value / peak * usable


def _format(value: Optional[float]) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
