from __future__ import annotations

import matplotlib.pyplot as plt
import pytest
from matplotlib.backends.backend_svg import FigureCanvasSVG
from matplotlib.figure import Figure

from figtidy.errors import (
    InvalidParameterError,
    NoActiveFigureError,
    NoAxesFoundError,
    NotSingleColumnError,
    UnrecognizedParameterError,
)
from figtidy.viz.figure import get_renderer, inner_box, legend_box, outer_box
from figtidy.viz.layout import (
    LayoutOptions,
    Margins,
    compute_stack_boxes,
    effective_margins,
    format_subplots,
    required_margins,
)


DEFAULT_MARGINS = Margins(top=0.05, bottom=0.08, left=0.08, right=0.02)


def _positions(axes):
    return [inner_box(ax).as_list() for ax in axes]


# ============================================================
# GEOMETRY
# ============================================================

@pytest.mark.parametrize("count", [1, 2, 5])
def test_stack_boxes_fill_vertical_span(count):
    gap = 0.02
    boxes = compute_stack_boxes(count, DEFAULT_MARGINS, gap)

    assert len(boxes) == count
    heights = [b.height for b in boxes]
    assert heights == pytest.approx([heights[0]] * count)
    assert sum(heights) + gap * (count - 1) == pytest.approx(1 - 0.05 - 0.08)
    assert boxes[0].y1 == pytest.approx(0.95)
    assert boxes[-1].y == pytest.approx(0.08)
    for b in boxes:
        assert b.x == pytest.approx(0.08)
        assert b.x1 == pytest.approx(0.98)


def test_stack_boxes_are_ordered_and_separated_by_gap():
    boxes = compute_stack_boxes(4, DEFAULT_MARGINS, 0.03)
    for upper, lower in zip(boxes, boxes[1:]):
        assert upper.y > lower.y
        assert upper.y - lower.y1 == pytest.approx(0.03)


def test_stack_boxes_without_room_fail():
    crowded = Margins(top=0.45, bottom=0.45, left=0.1, right=0.1)
    with pytest.raises(InvalidParameterError):
        compute_stack_boxes(3, crowded, 0.15)


def test_effective_margins_take_the_larger_value():
    required = Margins(top=0.01, bottom=0.12, left=0.2, right=0.0)

    eff = effective_margins(DEFAULT_MARGINS, required)
    assert eff == Margins(top=0.05, bottom=0.12, left=0.2, right=0.02)

    assert effective_margins(DEFAULT_MARGINS, required, allow_textcut=True) == DEFAULT_MARGINS


# ============================================================
# OPTIONS
# ============================================================

def test_layout_option_defaults():
    opts = LayoutOptions()
    assert opts.margins == DEFAULT_MARGINS
    assert opts.gap == 0.02
    assert opts.legend_gap == 0.02
    assert opts.legend_outside is False
    assert opts.allow_textcut is False


@pytest.mark.parametrize(
    "kwargs",
    [
        {"top_margin": 0.5},
        {"bottom_margin": 0.0},
        {"left_margin": -0.1},
        {"right_margin": 0.7},
        {"gap": 0.2},
        {"legend_gap": 0.1},
        {"gap": "small"},
        {"top_margin": True},
        {"legend_outside": "yes"},
        {"allow_textcut": 2},
    ],
)
def test_invalid_layout_options(kwargs):
    with pytest.raises(InvalidParameterError):
        LayoutOptions(**kwargs)


def test_layout_options_from_name_value_mapping():
    opts = LayoutOptions.from_mapping(
        {"TopMargin": 0.1, "LegendOutside": 1, "legendoutsidegap": 0.05, "gap": 0.01}
    )
    assert opts.top_margin == 0.1
    assert opts.legend_outside is True
    assert opts.legend_gap == 0.05
    assert opts.gap == 0.01


def test_layout_options_reject_unknown_names():
    with pytest.raises(UnrecognizedParameterError, match="Spacing"):
        LayoutOptions.from_mapping({"Spacing": 0.1})


# ============================================================
# FORMAT_SUBPLOTS
# ============================================================

def test_format_subplots_stacks_axes(make_stacked_figure):
    fig, axes = make_stacked_figure(3)

    out_fig, out_axes = format_subplots(fig, allow_textcut=True)

    assert out_fig is fig
    assert out_axes == axes
    expected = compute_stack_boxes(3, DEFAULT_MARGINS, 0.02)
    for ax, box in zip(out_axes, expected):
        assert inner_box(ax).as_list() == pytest.approx(box.as_list())


def test_format_subplots_sorts_top_to_bottom():
    fig = plt.figure()
    low = fig.add_axes([0.1, 0.1, 0.8, 0.2])
    high = fig.add_axes([0.1, 0.7, 0.8, 0.2])
    mid = fig.add_axes([0.1, 0.4, 0.8, 0.2])

    _, axes = format_subplots(fig, allow_textcut=True)

    assert axes == [high, mid, low]
    ys = [inner_box(ax).y for ax in axes]
    assert ys == sorted(ys, reverse=True)


def test_format_subplots_uses_current_figure(make_stacked_figure):
    fig, _ = make_stacked_figure(2)
    out_fig, _ = format_subplots()
    assert out_fig is fig


def test_format_subplots_without_figure_fails():
    plt.close("all")
    with pytest.raises(NoActiveFigureError):
        format_subplots()
    assert plt.get_fignums() == []


def test_format_subplots_without_axes_fails():
    fig = plt.figure()
    with pytest.raises(NoAxesFoundError):
        format_subplots(fig)
    assert fig.get_axes() == []


def test_format_subplots_rejects_side_by_side_axes():
    fig, axes = plt.subplots(1, 2)
    before = _positions(axes)

    with pytest.raises(NotSingleColumnError):
        format_subplots(fig)

    assert _positions(axes) == before


def test_format_subplots_rejects_bad_options_before_touching_axes(make_stacked_figure):
    fig, axes = make_stacked_figure(2)
    before = _positions(axes)

    with pytest.raises(InvalidParameterError):
        format_subplots(fig, TopMargin=0.6)
    with pytest.raises(UnrecognizedParameterError):
        format_subplots(fig, Margin=0.1)

    assert _positions(axes) == before


def test_format_subplots_accepts_option_mapping(make_stacked_figure):
    fig, axes = make_stacked_figure(2)

    format_subplots(fig, {"TopMargin": 0.1, "Gap": 0.05, "AllowTextcut": True})

    expected = compute_stack_boxes(2, Margins(0.1, 0.08, 0.08, 0.02), 0.05)
    assert _positions(axes) == [pytest.approx(b.as_list()) for b in expected]


def test_keyword_overrides_apply_on_top_of_options(make_stacked_figure):
    fig, axes = make_stacked_figure(2)
    base = LayoutOptions(gap=0.1, allow_textcut=True)

    format_subplots(fig, base, gap=0.01)

    assert inner_box(axes[0]).y - inner_box(axes[1]).y1 == pytest.approx(0.01)


def test_margins_grow_to_fit_decorations():
    fig, axes = plt.subplots(2, 1, figsize=(4, 3))
    axes[0].set_ylabel("large label", fontsize=40)
    axes[1].set_xlabel("x", fontsize=30)

    required = required_margins(axes[0], axes[1], get_renderer(fig))
    assert required.left > 0.08
    assert required.bottom > 0.08

    format_subplots(fig)

    assert inner_box(axes[0]).x == pytest.approx(required.left)
    assert inner_box(axes[1]).y == pytest.approx(required.bottom)


def test_allow_textcut_keeps_requested_margins():
    fig, axes = plt.subplots(2, 1, figsize=(4, 3))
    axes[0].set_ylabel("large label", fontsize=40)

    format_subplots(fig, allow_textcut=True)

    assert inner_box(axes[0]).x == pytest.approx(0.08)


def test_x_labels_only_on_bottom_axes(make_stacked_figure):
    fig, axes = make_stacked_figure(3)

    format_subplots(fig)
    fig.canvas.draw()

    for ax in axes[:-1]:
        assert ax.get_xlabel() == ""
        assert not any(t.label1.get_visible() for t in ax.xaxis.get_major_ticks())
    assert axes[-1].get_xlabel() == "x [rad]"
    assert any(t.label1.get_visible() for t in axes[-1].xaxis.get_major_ticks())


def test_x_axes_are_linked(make_stacked_figure):
    fig, axes = make_stacked_figure(3)

    format_subplots(fig)

    shared = axes[0].get_shared_x_axes()
    assert shared.joined(axes[0], axes[1])
    assert shared.joined(axes[0], axes[2])

    axes[2].set_xlim(1.0, 2.0)
    assert axes[0].get_xlim() == pytest.approx((1.0, 2.0))


def test_already_shared_axes_are_left_alone(make_stacked_figure):
    fig, axes = make_stacked_figure(3, sharex=True)
    format_subplots(fig)
    assert axes[0].get_shared_x_axes().joined(axes[0], axes[2])


def test_grid_is_enabled(make_stacked_figure):
    fig, axes = make_stacked_figure(2)
    format_subplots(fig)
    fig.canvas.draw()
    for ax in axes:
        assert all(line.get_visible() for line in ax.get_xgridlines())


def test_layout_engine_does_not_undo_the_layout(make_stacked_figure):
    fig, axes = make_stacked_figure(3, layout="constrained")

    format_subplots(fig, allow_textcut=True)
    fig.canvas.draw()

    expected = compute_stack_boxes(3, DEFAULT_MARGINS, 0.02)
    assert _positions(axes) == [pytest.approx(b.as_list()) for b in expected]


def test_legends_outside(make_stacked_figure):
    fig, axes = make_stacked_figure(3)
    axes[1].get_legend().remove()
    axes[1].legend(["a much longer legend entry"])

    format_subplots(fig, legend_outside=True, allow_textcut=True, legend_gap=0.03)
    fig.canvas.draw()

    renderer = get_renderer(fig)
    legends = [ax.get_legend() for ax in axes]
    widths = [legend_box(leg, renderer).width for leg in legends]

    axes_width = inner_box(axes[0]).width
    assert axes_width == pytest.approx(1 - 0.08 - 0.02 - max(widths) - 0.03, abs=1e-3)

    for ax, leg in zip(axes, legends):
        box = inner_box(ax)
        assert box.width == pytest.approx(axes_width)
        assert box.x == pytest.approx(0.08)

        lbox = legend_box(leg, renderer)
        assert lbox.x == pytest.approx(0.08 + axes_width + 0.03, abs=1e-3)
        assert lbox.y1 == pytest.approx(box.y1, abs=1e-3)


def test_figure_legend_is_moved_outside(make_stacked_figure):
    fig, axes = make_stacked_figure(2, legends=False)
    fig.legend(["sin(x)"], loc="center")

    format_subplots(fig, legend_outside=True, allow_textcut=True)
    fig.canvas.draw()

    top = inner_box(axes[0])
    lbox = legend_box(fig.legends[0], get_renderer(fig))
    assert top.x1 < lbox.x
    assert lbox.x == pytest.approx(top.x1 + 0.02, abs=1e-3)
    assert lbox.y1 == pytest.approx(top.y1, abs=1e-3)
    assert inner_box(axes[1]).width == pytest.approx(top.width)


def test_legend_outside_without_legends_keeps_width(make_stacked_figure):
    fig, axes = make_stacked_figure(2, legends=False)
    format_subplots(fig, legend_outside=True, allow_textcut=True)
    assert inner_box(axes[0]).width == pytest.approx(0.9)


def test_inner_box_reads_axes_position():
    fig, ax = plt.subplots()
    ax.set_position([0.1, 0.2, 0.3, 0.4])

    box = inner_box(ax)
    assert box.as_list() == pytest.approx([0.1, 0.2, 0.3, 0.4])
    assert box.x1 == pytest.approx(0.4)
    assert box.y1 == pytest.approx(0.6)


def test_vector_canvas_is_measured_without_agg_canvas():
    fig = Figure(figsize=(4, 3))
    FigureCanvasSVG(fig)
    axes = fig.subplots(2, 1)
    axes[0].set_ylabel("large label", fontsize=40)

    renderer = get_renderer(fig)
    assert outer_box(axes[0], renderer).x < inner_box(axes[0]).x

    format_subplots(fig)
    assert inner_box(axes[0]).x > 0.08
