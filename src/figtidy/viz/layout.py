"""
layout.py
=========

Tight layout for one column of stacked subplots that share an x-axis.

format_subplots() takes a figure like the one produced by

    fig, axes = plt.subplots(3, 1)

and
  - stacks the axes top-to-bottom with equal heights and a fixed gap
  - keeps the outer margins wide enough for tick labels, axis labels and
    titles (unless allow_textcut=True)
  - removes the x tick labels and x label from all but the bottom axes
  - optionally moves every legend to the right of the plotting area
  - links the x-axes and switches the grid on

The geometry (compute_stack_boxes, required_margins, effective_margins) is
kept separate from the figure mutation so it can be checked on its own.

Usage
-----
    x = np.linspace(0, 4 * np.pi, 100)
    fig, axes = plt.subplots(3, 1)
    axes[0].plot(x, np.sin(x), label="sin(x)")
    axes[1].plot(x, np.cos(x), label="cos(x)")
    axes[2].plot(x, np.sin(2 * x), label="sin(2x)")
    for ax in axes:
        ax.legend()
    axes[-1].set_xlabel("x [rad]")

    format_subplots(fig, legend_outside=True)
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from ..errors import InvalidParameterError, NoAxesFoundError, NotSingleColumnError
from ..io.config import check_flag, check_open_interval, map_option_names
from .figure import Box, get_renderer, inner_box, legend_box, outer_box, resolve_figure


logger = logging.getLogger(__name__)

# Tolerance when comparing the horizontal origin of axes (figure fraction)
X_ORIGIN_TOL = 1e-6


# ============================================================
# OPTIONS
# ============================================================

# Name-value spellings accepted in mappings / YAML files
LAYOUT_ALIASES: Dict[str, str] = {
    "TopMargin": "top_margin",
    "BottomMargin": "bottom_margin",
    "LeftMargin": "left_margin",
    "RightMargin": "right_margin",
    "Gap": "gap",
    "LegendGap": "legend_gap",
    "LegendOutsideGap": "legend_gap",
    "LegendOutside": "legend_outside",
    "AllowTextcut": "allow_textcut",
}


@dataclass(frozen=True)
class Margins:
    """Figure margins as normalized fractions."""

    top: float
    bottom: float
    left: float
    right: float


@dataclass(frozen=True)
class LayoutOptions:
    """
    Options of format_subplots().

    Attributes
    ----------
    top_margin, bottom_margin, left_margin, right_margin : float
        Normalized figure margins, each in (0, 0.5).
    gap : float
        Vertical gap between stacked axes, in (0, 0.2).
    legend_gap : float
        Gap between the plotting area and outside legends, in (0, 0.1).
    legend_outside : bool
        Move legends to the right of the plotting area.
    allow_textcut : bool
        Keep the requested margins even if they cut off labels or titles.
    """

    top_margin: float = 0.05
    bottom_margin: float = 0.08
    left_margin: float = 0.08
    right_margin: float = 0.02
    gap: float = 0.02
    legend_gap: float = 0.02
    legend_outside: bool = False
    allow_textcut: bool = False

    def __post_init__(self) -> None:
        checked = {
            "top_margin": check_open_interval("top_margin", self.top_margin, 0.0, 0.5),
            "bottom_margin": check_open_interval("bottom_margin", self.bottom_margin, 0.0, 0.5),
            "left_margin": check_open_interval("left_margin", self.left_margin, 0.0, 0.5),
            "right_margin": check_open_interval("right_margin", self.right_margin, 0.0, 0.5),
            "gap": check_open_interval("gap", self.gap, 0.0, 0.2),
            "legend_gap": check_open_interval("legend_gap", self.legend_gap, 0.0, 0.1),
            "legend_outside": check_flag("legend_outside", self.legend_outside),
            "allow_textcut": check_flag("allow_textcut", self.allow_textcut),
        }
        for name, value in checked.items():
            object.__setattr__(self, name, value)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "LayoutOptions":
        """Build options from a mapping using field names or name-value spellings."""
        return cls(**_map_names(options))

    def replace(self, **overrides: Any) -> "LayoutOptions":
        """Copy with some options changed (validated again)."""
        return dataclasses.replace(self, **_map_names(overrides))

    @property
    def margins(self) -> Margins:
        return Margins(
            top=self.top_margin,
            bottom=self.bottom_margin,
            left=self.left_margin,
            right=self.right_margin,
        )


def _map_names(options: Mapping[str, Any]) -> Dict[str, Any]:
    fields = {f.name: f for f in dataclasses.fields(LayoutOptions)}
    return map_option_names(options, LAYOUT_ALIASES, fields)


def _resolve_options(
    options: Optional[Union[LayoutOptions, Mapping[str, Any]]],
    overrides: Mapping[str, Any],
) -> LayoutOptions:
    if options is None:
        opts = LayoutOptions()
    elif isinstance(options, LayoutOptions):
        opts = options
    else:
        opts = LayoutOptions.from_mapping(options)
    if overrides:
        opts = opts.replace(**overrides)
    return opts


# ============================================================
# GEOMETRY
# ============================================================

def compute_stack_boxes(count: int, margins: Margins, gap: float) -> List[Box]:
    """
    Boxes for `count` equally tall axes stacked top-to-bottom.

    The stack spans [left, 1 - right] horizontally and [bottom, 1 - top]
    vertically, with `gap` between neighbours. boxes[0] is the topmost.
    """
    if count < 1:
        raise ValueError(f"count must be >= 1, got {count}")

    width = 1.0 - margins.left - margins.right
    height = (1.0 - margins.top - margins.bottom - gap * (count - 1)) / count
    if width <= 0 or height <= 0:
        raise InvalidParameterError(
            f"Margins and gaps leave no room for {count} axes "
            f"(width={width:.4f}, height={height:.4f})"
        )

    boxes: List[Box] = []
    y = 1.0 - margins.top - height
    for _ in range(count):
        boxes.append(Box(margins.left, y, width, height))
        y -= height + gap
    return boxes


def required_margins(top_ax: Axes, bottom_ax: Axes, renderer) -> Margins:
    """
    Space taken by axes decorations on each side of the stack.

    Top, left and right are measured on the topmost axes, bottom on the
    bottommost one: outer edge (with tick labels, labels, titles) minus the
    edge of the plotting area.
    """
    top_inner = inner_box(top_ax)
    top_outer = outer_box(top_ax, renderer)
    bottom_inner = inner_box(bottom_ax)
    bottom_outer = outer_box(bottom_ax, renderer)

    return Margins(
        top=top_outer.y1 - top_inner.y1,
        bottom=bottom_inner.y - bottom_outer.y,
        left=top_inner.x - top_outer.x,
        right=top_outer.x1 - top_inner.x1,
    )


def effective_margins(requested: Margins, required: Margins, allow_textcut: bool = False) -> Margins:
    """Requested margins, each enlarged to the required one unless text may be cut."""
    if allow_textcut:
        return requested
    return Margins(
        top=max(requested.top, required.top),
        bottom=max(requested.bottom, required.bottom),
        left=max(requested.left, required.left),
        right=max(requested.right, required.right),
    )


# ============================================================
# FIGURE HELPERS
# ============================================================

def _check_single_column(axes: Sequence[Axes]) -> None:
    x0 = np.array([inner_box(ax).x for ax in axes])
    if not np.allclose(x0, x0[0], rtol=0.0, atol=X_ORIGIN_TOL):
        raise NotSingleColumnError(
            "All subplots have to be in one column for this function to execute "
            f"(horizontal origins: {np.round(x0, 4).tolist()})"
        )


def sort_top_to_bottom(axes: Sequence[Axes]) -> List[Axes]:
    """Axes ordered by descending vertical origin (ties keep their order)."""
    return sorted(axes, key=lambda ax: inner_box(ax).y, reverse=True)


def _disable_layout_engine(fig: Figure) -> None:
    # tight/constrained layout would move the axes again on the next draw
    if fig.get_layout_engine() is not None:
        logger.debug("Switching off layout engine %s", type(fig.get_layout_engine()).__name__)
        fig.set_layout_engine("none")


def _strip_x_labels(axes: Sequence[Axes]) -> None:
    for ax in axes:
        ax.tick_params(axis="x", labelbottom=False)
        ax.set_xlabel("")


def _place_legends_outside(
    fig: Figure,
    axes: Sequence[Axes],
    margins: Margins,
    legend_gap: float,
) -> None:
    pairs = [(ax, ax.get_legend()) for ax in axes if ax.get_legend() is not None]
    # Figure-level legends follow the topmost axes
    pairs += [(axes[0], leg) for leg in fig.legends]
    if not pairs:
        logger.debug("legend_outside requested but no legends found")
        return

    # "outside upper right": legend's upper-left corner on the axes' upper-right corner
    for ax, leg in pairs:
        leg.set_loc("upper left")
        leg.set_bbox_to_anchor((1.0, 1.0), transform=ax.transAxes)
        leg.borderaxespad = 0.0

    renderer = get_renderer(fig)
    max_width = max(legend_box(leg, renderer).width for _, leg in pairs)

    width = 1.0 - margins.left - margins.right - max_width - legend_gap
    if width <= 0:
        raise InvalidParameterError(
            f"Legends are too wide to fit next to the axes (legend width={max_width:.4f})"
        )

    for ax in axes:
        box = inner_box(ax)
        ax.set_position([box.x, box.y, width, box.height])

    x_legend = margins.left + width + legend_gap
    for ax, leg in pairs:
        leg.set_bbox_to_anchor((x_legend, inner_box(ax).y1), transform=fig.transFigure)

    logger.debug(
        "Placed %d legend(s) outside at x=%.4f, axes width=%.4f",
        len(pairs), x_legend, width,
    )


def _link_x_axes(axes: Sequence[Axes]) -> None:
    leader = axes[0]
    for ax in axes[1:]:
        if leader.get_shared_x_axes().joined(leader, ax):
            continue
        ax.sharex(leader)


# ============================================================
# PUBLIC API
# ============================================================

def format_subplots(
    fig: Optional[Figure] = None,
    options: Optional[Union[LayoutOptions, Mapping[str, Any]]] = None,
    **overrides: Any,
) -> Tuple[Figure, List[Axes]]:
    """
    Reduce the gaps between the subplots of a single-column figure.

    Parameters
    ----------
    fig : Figure, optional
        Figure to format. Defaults to the active pyplot figure.
    options : LayoutOptions or mapping, optional
        Layout options. Mappings may use field names ("top_margin") or the
        name-value spellings ("TopMargin").
    **overrides
        Individual options applied on top of `options`.

    Returns
    -------
    fig, axes
        The figure and its axes sorted top-to-bottom.

    Raises
    ------
    NoActiveFigureError
        fig is None and no figure is open.
    NoAxesFoundError
        The figure has no axes.
    NotSingleColumnError
        The axes do not share one horizontal origin.
    InvalidParameterError, UnrecognizedParameterError
        Bad option value or name.
    """
    opts = _resolve_options(options, overrides)
    fig = resolve_figure(fig)

    axes = fig.get_axes()
    if not axes:
        raise NoAxesFoundError("No axes found in current figure.")
    _check_single_column(axes)
    axes = sort_top_to_bottom(axes)

    margins = opts.margins
    if not opts.allow_textcut:
        required = required_margins(axes[0], axes[-1], get_renderer(fig))
        margins = effective_margins(margins, required)
    logger.debug("Effective margins: %s", margins)

    boxes = compute_stack_boxes(len(axes), margins, opts.gap)

    # Nothing has been touched up to here
    _disable_layout_engine(fig)
    for ax, box in zip(axes, boxes):
        ax.set_position(box.as_list())

    _strip_x_labels(axes[:-1])

    if opts.legend_outside:
        _place_legends_outside(fig, axes, margins, opts.legend_gap)

    _link_x_axes(axes)
    for ax in axes:
        ax.grid(True)

    fig.canvas.draw_idle()
    logger.debug("Formatted %d axes (height=%.4f, gap=%.4f)", len(axes), boxes[0].height, opts.gap)
    return fig, axes
