"""
figure.py
=========

Thin access layer between the figtidy operations and matplotlib.

• Resolves the implicit "current figure" at the call boundary, so the
  operations themselves always work on an explicit Figure.
• Reads axes / legend bounding boxes in figure-normalized coordinates
  (0..1), which is the only unit the layout code deals in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.backends.backend_agg import RendererAgg
from matplotlib.figure import Figure
from matplotlib.legend import Legend
from matplotlib.transforms import Bbox

from ..errors import NoActiveFigureError


# ============================================================
# BOX
# ============================================================

@dataclass(frozen=True)
class Box:
    """Rectangle in figure-normalized coordinates."""

    x: float
    y: float
    width: float
    height: float

    @property
    def x1(self) -> float:
        return self.x + self.width

    @property
    def y1(self) -> float:
        return self.y + self.height

    @classmethod
    def from_bbox(cls, bbox: Bbox) -> "Box":
        return cls(float(bbox.x0), float(bbox.y0), float(bbox.width), float(bbox.height))

    def as_list(self) -> List[float]:
        """[x, y, width, height], the form Axes.set_position accepts."""
        return [self.x, self.y, self.width, self.height]


# ============================================================
# CURRENT FIGURE
# ============================================================

def current_figure() -> Figure:
    """
    Return the active pyplot figure.

    Unlike plt.gcf() this never creates a new figure: with no figure open it
    raises NoActiveFigureError.
    """
    if not plt.get_fignums():
        raise NoActiveFigureError("No figure open.")
    return plt.gcf()


def resolve_figure(fig: Optional[Figure]) -> Figure:
    """Return `fig`, or the active pyplot figure when `fig` is None."""
    if fig is None:
        return current_figure()
    return fig


# ============================================================
# BOX READERS
# ============================================================

def get_renderer(fig: Figure):
    """Renderer used to measure text extents of `fig`."""
    canvas = fig.canvas
    if hasattr(canvas, "get_renderer"):
        return canvas.get_renderer()
    # Vector canvases (svg, pdf, ps) keep no renderer; measure with Agg at the figure's size and dpi
    width, height = fig.bbox.size
    return RendererAgg(int(width), int(height), fig.dpi)


def _to_figure_fraction(fig: Figure, bbox: Bbox) -> Box:
    return Box.from_bbox(bbox.transformed(fig.transFigure.inverted()))


def inner_box(ax: Axes) -> Box:
    """Plotting area of `ax` (no tick labels, axis labels or titles)."""
    return Box.from_bbox(ax.get_position())


def outer_box(ax: Axes, renderer) -> Box:
    """
    Plotting area of `ax` plus its decorations: tick labels, axis labels, titles.

    Legends and other child artists are not included (bbox_extra_artists=[]).
    """
    bbox = ax.get_tightbbox(renderer, bbox_extra_artists=[])
    return _to_figure_fraction(ax.figure, bbox)


def legend_box(legend: Legend, renderer) -> Box:
    """Bounding box of `legend` including its frame."""
    return _to_figure_fraction(legend.figure, legend.get_window_extent(renderer))
