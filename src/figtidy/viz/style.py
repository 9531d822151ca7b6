"""
style.py
========

Presentation styling for existing figures.

increase_size() makes a figure readable on a projector:
• white figure background
• thicker plot lines (Line2D and stairs)
• larger tick labels, axis labels and titles (legends at 90%)
• a fixed, thin axes border
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import StepPatch

from ..io.config import check_positive, map_option_names
from .figure import resolve_figure


logger = logging.getLogger(__name__)

# Border (spines + ticks) width applied to every axes
AXES_LINE_WIDTH = 0.75

# Legend text relative to the axes font size
LEGEND_FONT_SCALE = 0.9

STYLE_ALIASES: Dict[str, str] = {
    "LineWidth": "line_width",
    "FontSize": "font_size",
}


@dataclass(frozen=True)
class StyleOptions:
    """Line width (points) and font size (points) used by increase_size()."""

    line_width: float = 1.5
    font_size: float = 20

    def __post_init__(self) -> None:
        object.__setattr__(self, "line_width", check_positive("line_width", self.line_width))
        object.__setattr__(self, "font_size", check_positive("font_size", self.font_size))

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "StyleOptions":
        return cls(**_map_names(options))

    def replace(self, **overrides: Any) -> "StyleOptions":
        return dataclasses.replace(self, **_map_names(overrides))


def _map_names(options: Mapping[str, Any]) -> Dict[str, Any]:
    fields = {f.name: f for f in dataclasses.fields(StyleOptions)}
    return map_option_names(options, STYLE_ALIASES, fields)


def _set_font_size(ax: Axes, font_size: float) -> None:
    ax.tick_params(axis="both", which="both", labelsize=font_size)
    ax.xaxis.label.set_fontsize(font_size)
    ax.yaxis.label.set_fontsize(font_size)
    ax.title.set_fontsize(font_size)

    legend = ax.get_legend()
    if legend is not None:
        for text in legend.get_texts():
            text.set_fontsize(LEGEND_FONT_SCALE * font_size)
        legend.get_title().set_fontsize(LEGEND_FONT_SCALE * font_size)


def _set_border_width(ax: Axes, width: float) -> None:
    for spine in ax.spines.values():
        spine.set_linewidth(width)
    ax.tick_params(axis="both", which="both", width=width)


def increase_size(
    fig: Optional[Figure] = None,
    options: Optional[Union[StyleOptions, Mapping[str, Any]]] = None,
    **overrides: Any,
) -> None:
    """
    Increase font size and line width of all axes in `fig` (in place).

    Parameters
    ----------
    fig : Figure, optional
        Defaults to the active pyplot figure (NoActiveFigureError if none).
    options : StyleOptions or mapping, optional
        Mappings may use "line_width"/"font_size" or "LineWidth"/"FontSize".
    **overrides
        Individual options applied on top of `options`.
    """
    if options is None:
        opts = StyleOptions()
    elif isinstance(options, StyleOptions):
        opts = options
    else:
        opts = StyleOptions.from_mapping(options)
    if overrides:
        opts = opts.replace(**overrides)

    fig = resolve_figure(fig)
    fig.set_facecolor("white")

    n_lines = 0
    for ax in fig.get_axes():
        for line in ax.get_lines():
            line.set_linewidth(opts.line_width)
            n_lines += 1
        for patch in ax.patches:
            if isinstance(patch, StepPatch):
                patch.set_linewidth(opts.line_width)
                n_lines += 1

        _set_font_size(ax, opts.font_size)
        _set_border_width(ax, AXES_LINE_WIDTH)

    fig.canvas.draw_idle()
    logger.debug(
        "Styled %d axes, %d lines (line_width=%s, font_size=%s)",
        len(fig.get_axes()), n_lines, opts.line_width, opts.font_size,
    )
