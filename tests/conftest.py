"""Shared fixtures: headless matplotlib, figure cleanup, stacked-subplot figures."""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import numpy as np
import matplotlib.pyplot as plt
import pytest

from figtidy.io.logging_utils import reset_logger


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    reset_logger()


@pytest.fixture()
def make_stacked_figure():
    """Factory: n subplots in one column, each with a line and a legend."""

    def _make(n: int = 3, *, legends: bool = True, figsize=(8, 6), **kwargs):
        x = np.linspace(0.0, 4.0 * np.pi, 50)
        fig, axes = plt.subplots(n, 1, figsize=figsize, squeeze=False, **kwargs)
        axes = list(axes[:, 0])
        for k, ax in enumerate(axes):
            ax.plot(x, np.sin((k + 1) * x), label=f"sin({k + 1}x)")
            ax.set_xlabel("x [rad]")
            if legends:
                ax.legend()
        return fig, axes

    return _make
