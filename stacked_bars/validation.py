"""Validation of long-format composition tables.

Checks the (sample, category, value) contract before any ordering is computed:
required columns, identifiers, numeric non-negative values, unique categories
per sample and, optionally, complete category coverage for every sample.
"""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np
import pandas as pd

from stacked_bars.errors import EmptyInputError, InconsistentSampleError, ValidationError


def _format_pairs(frame: pd.DataFrame, sample_col: str, category_col: str, max_items: int = 5) -> str:
    """Return a short 'sample/category' preview of offending rows."""

    pairs = [f"{s}/{c}" for s, c in zip(frame[sample_col], frame[category_col])]
    preview = ", ".join(pairs[:max_items])
    if len(pairs) > max_items:
        preview += " ..."
    return preview


def _rows_to_frame(rows: Iterable, sample_col: str, category_col: str, value_col: str) -> pd.DataFrame:
    """Build an observation frame from (sample, category, value) rows."""

    message = f"Observations must be a DataFrame or (sample, category, value) rows, got {type(rows).__name__}"
    if isinstance(rows, (str, bytes)):
        raise ValidationError(message)
    try:
        records = [row if isinstance(row, (str, bytes)) else tuple(row) for row in rows]
    except TypeError as exc:
        raise ValidationError(message) from exc

    malformed = [row for row in records if not isinstance(row, tuple) or len(row) != 3]
    if malformed:
        raise ValidationError(f"Observation rows must have 3 fields (sample, category, value): {malformed[:5]}")
    return pd.DataFrame(records, columns=[sample_col, category_col, value_col])


def validate_observations(
    df: pd.DataFrame | Iterable | None,
    sample_col: str = "sample",
    category_col: str = "category",
    value_col: str = "value",
    require_complete: bool = False,
) -> pd.DataFrame:
    """
    Return a cleaned copy of the observations or raise on malformed input.

    Identifiers are cast to ``str`` and values to ``float``. With
    ``require_complete`` every sample must report every category seen in the table.
    """

    if df is not None and not isinstance(df, pd.DataFrame):
        df = _rows_to_frame(df, sample_col, category_col, value_col)

    if df is None or len(df) == 0:
        raise EmptyInputError("No observations supplied.")

    missing = [col for col in (sample_col, category_col, value_col) if col not in df.columns]
    if missing:
        raise ValidationError(f"Missing required columns: {missing}")

    frame = df[[sample_col, category_col, value_col]].reset_index(drop=True)

    if isinstance(frame[sample_col].dtype, pd.CategoricalDtype):
        unused = sorted(set(frame[sample_col].cat.categories) - set(frame[sample_col].dropna()), key=str)
        if unused:
            raise InconsistentSampleError(f"Samples without observations: {unused}")

    null_ids = frame[frame[sample_col].isna() | frame[category_col].isna()]
    if not null_ids.empty:
        raise ValidationError(f"{len(null_ids)} observation(s) have a missing sample or category.")

    frame[sample_col] = frame[sample_col].astype(str)
    frame[category_col] = frame[category_col].astype(str)

    values = pd.to_numeric(frame[value_col], errors="coerce")
    bad = frame[values.isna()]
    if not bad.empty:
        raise ValidationError(
            f"Non-numeric or missing {value_col!r} for sample/category: "
            f"{_format_pairs(bad, sample_col, category_col)}"
        )
    values = values.astype(float)

    infinite = frame[np.isinf(values)]
    if not infinite.empty:
        raise ValidationError(
            f"Infinite {value_col!r} for sample/category: {_format_pairs(infinite, sample_col, category_col)}"
        )

    negative = frame[values < 0]
    if not negative.empty:
        raise ValidationError(
            f"Negative {value_col!r} for sample/category: {_format_pairs(negative, sample_col, category_col)}"
        )
    frame[value_col] = values

    duplicated = frame[frame.duplicated([sample_col, category_col], keep=False)]
    if not duplicated.empty:
        raise ValidationError(
            "Duplicate category per sample: "
            f"{_format_pairs(duplicated.drop_duplicates([sample_col, category_col]), sample_col, category_col)}"
        )

    if require_complete:
        n_categories = frame[category_col].nunique()
        counts = frame.groupby(sample_col, sort=False)[category_col].nunique()
        incomplete = counts[counts < n_categories]
        if not incomplete.empty:
            all_categories = set(frame[category_col])
            first = incomplete.index[0]
            absent = sorted(all_categories - set(frame.loc[frame[sample_col] == first, category_col]))
            raise ValidationError(
                f"{len(incomplete)} sample(s) lack categories present elsewhere; "
                f"sample {first!r} is missing {absent}"
            )

    logging.debug(
        "Validated %d observations over %d samples and %d categories",
        len(frame),
        frame[sample_col].nunique(),
        frame[category_col].nunique(),
    )
    return frame
