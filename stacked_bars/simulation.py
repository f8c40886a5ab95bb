"""Synthetic composition data for demonstrating sample ordering.

Draws per-sample proportions from a symmetric Dirichlet distribution and
returns them as a long-format percentage table in shuffled sample order.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import pandas as pd


def simulate_compositions(
    n_samples: int = 30,
    categories: Sequence[str] = ("A", "B", "C", "D"),
    concentration: float = 1.0,
    seed: int | None = None,
    sample_col: str = "sample",
    category_col: str = "category",
    value_col: str = "value",
) -> pd.DataFrame:
    """
    Generate a long table of percentages summing to 100 per sample.

    Lower ``concentration`` values give more dominant peaks.
    """

    if n_samples < 1:
        raise ValueError(f"n_samples must be at least 1, got {n_samples}")
    categories = [str(c) for c in categories]
    if not categories:
        raise ValueError("At least one category is required.")
    if len(set(categories)) != len(categories):
        raise ValueError(f"Categories must be unique: {categories}")
    if concentration <= 0:
        raise ValueError(f"concentration must be positive, got {concentration}")

    rng = np.random.default_rng(seed)
    proportions = rng.dirichlet(np.full(len(categories), float(concentration)), size=n_samples) * 100.0

    width = max(2, len(str(n_samples)))
    sample_ids = [f"S{i:0{width}d}" for i in range(1, n_samples + 1)]
    wide = pd.DataFrame(proportions, columns=categories)
    wide.insert(0, sample_col, sample_ids)
    wide = wide.iloc[rng.permutation(n_samples)].reset_index(drop=True)

    long = wide.melt(id_vars=sample_col, var_name=category_col, value_name=value_col)
    # melt stacks by category; regroup rows per sample in the shuffled order
    long["_pos"] = long[sample_col].map({s: i for i, s in enumerate(wide[sample_col])})
    long = long.sort_values("_pos", kind="mergesort").drop(columns="_pos").reset_index(drop=True)

    logging.info(
        "Simulated %d samples over %d categories (concentration=%.2f, seed=%s)",
        n_samples,
        len(categories),
        concentration,
        seed,
    )
    return long
