"""Stacked bar rendering for composition tables.

Provides matplotlib helpers that draw one stacked bar per sample along a given
sample order and export a before/after comparison of an ordering.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.axes import Axes
from matplotlib.patches import Patch


def category_palette(categories: Iterable[str]) -> Dict[str, tuple]:
    """Map categories to stable colours from tab10 (tab20 beyond ten)."""

    categories = list(dict.fromkeys(str(c) for c in categories))
    cmap = plt.get_cmap("tab10" if len(categories) <= 10 else "tab20")
    return {category: cmap(i % cmap.N) for i, category in enumerate(categories)}


def plot_stacked_bars(
    ax: Axes,
    observations: pd.DataFrame,
    order: Sequence[str] | None = None,
    category_colors: Dict[str, tuple] | None = None,
    title: str | None = None,
    sample_col: str = "sample",
    category_col: str = "category",
    value_col: str = "value",
    show_sample_labels: bool = True,
) -> Axes:
    """Draw one bar per sample with categories stacked bottom-up."""

    frame = observations[[sample_col, category_col, value_col]].copy()
    frame[sample_col] = frame[sample_col].astype(str)
    frame[category_col] = frame[category_col].astype(str)

    samples: List[str] = list(order) if order is not None else list(dict.fromkeys(frame[sample_col]))
    categories: List[str] = list(dict.fromkeys(frame[category_col]))
    if category_colors is None:
        category_colors = category_palette(categories)

    wide = (
        frame.pivot(index=sample_col, columns=category_col, values=value_col)
        .reindex(index=samples, columns=categories)
        .fillna(0.0)
    )

    positions = np.arange(len(samples))
    bottom = np.zeros(len(samples))
    for category in categories:
        heights = wide[category].to_numpy(dtype=float)
        ax.bar(
            positions,
            heights,
            bottom=bottom,
            width=1.0,
            edgecolor="white",
            linewidth=0.3,
            color=category_colors.get(category),
            label=category,
        )
        bottom += heights

    ax.set_xlim(-0.5, len(samples) - 0.5)
    if show_sample_labels:
        ax.set_xticks(positions)
        ax.set_xticklabels(samples, rotation=90, fontsize=7)
    else:
        ax.set_xticks([])
    ax.set_xlabel("Sample")
    ax.set_ylabel(value_col.capitalize())
    if title:
        ax.set_title(title)
    return ax


def plot_before_after(
    observations: pd.DataFrame,
    order: Sequence[str],
    output_path: Path,
    sample_col: str = "sample",
    category_col: str = "category",
    value_col: str = "value",
    dpi: int = 150,
    figsize: tuple = (12, 7),
) -> Path:
    """
    Save a two-panel figure: input sample order above, reordered samples below.

    The image format follows the suffix of ``output_path`` (png, pdf, svg).
    """

    output_path = Path(output_path)
    categories = list(dict.fromkeys(observations[category_col].astype(str)))
    colors = category_palette(categories)
    show_labels = len(order) <= 60

    fig, (ax_before, ax_after) = plt.subplots(2, 1, figsize=figsize, sharey=True)
    plot_stacked_bars(
        ax_before,
        observations,
        order=None,
        category_colors=colors,
        title="Before",
        sample_col=sample_col,
        category_col=category_col,
        value_col=value_col,
        show_sample_labels=show_labels,
    )
    plot_stacked_bars(
        ax_after,
        observations,
        order=order,
        category_colors=colors,
        title="After: grouped by peak category",
        sample_col=sample_col,
        category_col=category_col,
        value_col=value_col,
        show_sample_labels=show_labels,
    )

    handles = [Patch(facecolor=colors[c], label=c) for c in categories]
    fig.legend(handles=handles, title=category_col.capitalize(), loc="center right")
    fig.tight_layout(rect=(0, 0, 0.9, 1))

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi)
    plt.close(fig)
    logging.info("Saved before/after figure to %s", output_path)
    return output_path
