"""Input/output helpers for the sample ordering pipeline.

Covers CSV loading in long or wide layout, required-column checks, wide to long
conversion and CSV saving.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import pandas as pd

from stacked_bars.errors import ValidationError


def ensure_required_columns(df: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """Validate that the DataFrame contains the required columns."""

    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise ValidationError(f"Missing required columns: {missing}")
    return df


def wide_to_long(
    df: pd.DataFrame,
    sample_col: str = "sample",
    category_col: str = "category",
    value_col: str = "value",
) -> pd.DataFrame:
    """
    Melt a sample-by-category table into long observations.

    Every column other than ``sample_col`` is treated as a category. Rows stay
    grouped per sample in the input row order.
    """

    ensure_required_columns(df, [sample_col])
    category_columns = [col for col in df.columns if col != sample_col]
    if not category_columns:
        raise ValidationError("Wide table has no category columns.")

    wide = df.reset_index(drop=True)
    long = wide.melt(
        id_vars=sample_col,
        value_vars=category_columns,
        var_name=category_col,
        value_name=value_col,
        ignore_index=False,
    )
    long = long.sort_index(kind="mergesort").reset_index(drop=True)
    long[category_col] = long[category_col].astype(str)
    return long


def load_observations(
    path: str | Path,
    layout: str = "long",
    sample_col: str = "sample",
    category_col: str = "category",
    value_col: str = "value",
    sep: str = ",",
) -> pd.DataFrame:
    """Load a composition table from CSV/TSV and return long observations."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    df = pd.read_csv(path, sep=sep)
    logging.info("Read %d rows from %s (layout=%s)", len(df), path, layout)

    if layout == "wide":
        return wide_to_long(df, sample_col, category_col, value_col)
    if layout != "long":
        raise ValidationError(f"Unsupported input layout {layout!r}; expected 'long' or 'wide'")

    ensure_required_columns(df, [sample_col, category_col, value_col])
    return df


def save_dataframe(df: pd.DataFrame, path: str | Path) -> None:
    """Persist a DataFrame to CSV."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    logging.info("Saved %d rows to %s", len(df), path)
