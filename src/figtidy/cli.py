#!/usr/bin/env python3
"""
cli.py
======

Command-line entry point ("figtidy").

Subcommands
-----------
summarize   List the variables stored in .npz / .h5 files as a table
demo        Build the three-row sin/cos example figure, format it, save it

Usage
-----
figtidy summarize results.h5 arrays.npz
figtidy demo --out-dir figures --formats png pdf --legend-outside --presentation
figtidy demo --out-dir figures --config configs/presentation.yaml
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from .io.config import load_option_sections
from .io.logging_utils import setup_logger
from .viz.layout import LayoutOptions, format_subplots
from .viz.style import StyleOptions, increase_size
from .workspace import VariableDescriptor, describe_h5, describe_npz, print_workspace_summary


NPZ_SUFFIXES = (".npz",)
H5_SUFFIXES = (".h5", ".hdf5", ".hdf")


def save_figure(fig: Figure, out_base: Path, formats: Sequence[str], dpi: int = 160) -> List[Path]:
    """Save `fig` once per format next to `out_base`; return the written paths."""
    out_base.parent.mkdir(parents=True, exist_ok=True)
    written = []
    for fmt in formats:
        fmt = fmt.lower().lstrip(".")
        path = out_base.with_suffix(f".{fmt}")
        fig.savefig(path, dpi=dpi)
        written.append(path)
    return written


def build_demo_figure() -> Figure:
    """Three stacked subplots sharing x, each with a legend."""
    x = np.linspace(0.0, 4.0 * np.pi, 100)
    fig, axes = plt.subplots(3, 1, figsize=(8, 6))

    axes[0].plot(x, np.sin(x), label="sin(x)")
    axes[1].plot(x, np.cos(x), label="cos(x)")
    axes[2].plot(x, np.sin(2.0 * x), label="sin(2x)")
    for ax in axes:
        ax.legend()
    axes[-1].set_xlabel("x [rad]")
    return fig


def describe_file(path: Path) -> List[VariableDescriptor]:
    suffix = path.suffix.lower()
    if suffix in NPZ_SUFFIXES:
        return describe_npz(path)
    if suffix in H5_SUFFIXES:
        return describe_h5(path)
    raise ValueError(
        f"Unsupported file type '{path.suffix}' for {path}. "
        f"Expected one of: {', '.join(NPZ_SUFFIXES + H5_SUFFIXES)}"
    )


# ============================================================
# SUBCOMMANDS
# ============================================================

def _cmd_summarize(args: argparse.Namespace, logger) -> int:
    for raw in args.files:
        path = Path(raw).expanduser().resolve()
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        descriptors = describe_file(path)
        if len(args.files) > 1:
            print(f"== {path}")
        print_workspace_summary(descriptors)
        logger.info("Summarized %d variable(s) from %s", len(descriptors), path)
    return 0


def _cmd_demo(args: argparse.Namespace, logger) -> int:
    layout = LayoutOptions()
    style = StyleOptions()
    if args.config:
        sections = load_option_sections(args.config)
        layout = LayoutOptions.from_mapping(sections["layout"])
        style = StyleOptions.from_mapping(sections["style"])
        logger.info("Loaded options from %s", args.config)

    overrides = {}
    if args.legend_outside:
        overrides["legend_outside"] = True

    fig = build_demo_figure()
    try:
        if args.presentation:
            # styling first: larger fonts change the margins the layout needs
            increase_size(fig, style)
        format_subplots(fig, layout, **overrides)

        out_dir = Path(args.out_dir).expanduser().resolve()
        for path in save_figure(fig, out_dir / "formatplot_demo", args.formats, dpi=args.dpi):
            logger.info("Saved demo figure: %s", path)
    finally:
        plt.close(fig)
    return 0


# ============================================================
# MAIN
# ============================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="figtidy", description="Figure formatting helpers.")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR).")
    parser.add_argument("--log-file", type=str, default=None, help="Also write log messages to this file.")

    sub = parser.add_subparsers(dest="command", required=True)

    p_sum = sub.add_parser("summarize", help="List variables stored in .npz / .h5 files")
    p_sum.add_argument("files", nargs="+", help="Files to summarize")

    p_demo = sub.add_parser("demo", help="Format and save the example figure")
    p_demo.add_argument("--out-dir", required=True, help="Directory for the saved figure")
    p_demo.add_argument("--formats", nargs="+", default=["png"], help="e.g. png pdf")
    p_demo.add_argument("--dpi", type=int, default=160, help="DPI for raster outputs")
    p_demo.add_argument("--config", type=str, default=None, help="YAML file with layout:/style: sections")
    p_demo.add_argument("--legend-outside", action="store_true", help="Move legends right of the plots")
    p_demo.add_argument("--presentation", action="store_true", help="Increase font size and line width")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = setup_logger(args.log_file, level=args.log_level)

    if args.command == "summarize":
        return _cmd_summarize(args, logger)
    return _cmd_demo(args, logger)


if __name__ == "__main__":
    raise SystemExit(main())
