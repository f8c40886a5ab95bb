"""Sample ordering for stacked bar charts.

Assigns every sample its peak category (the category with the largest value),
ranks samples within each peak block by that value, and sorts the samples on
the composed key (block index, signed rank) so samples sharing a peak form
contiguous, monotonic blocks.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, List, Mapping, Sequence

import pandas as pd

from stacked_bars.errors import InconsistentSampleError, ValidationError
from stacked_bars.validation import validate_observations


class CategoryOrder(str, Enum):
    """Policy for arranging peak blocks along the axis."""

    ALPHABETICAL = "alphabetical"
    GROUP_SIZE = "group_size"
    CUSTOM = "custom"


class SortDirection(str, Enum):
    """Direction of the peak value inside each block."""

    ASCENDING = "ascending"
    DESCENDING = "descending"


TABLE_COLUMNS: List[str] = ["position", "sample", "peak_category", "peak_value", "rank", "block"]


def coerce_policy(enum_cls: type[Enum], value: Enum | str) -> Enum:
    """Accept enum members or their string values."""

    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError as exc:
        allowed = [member.value for member in enum_cls]
        raise ValidationError(f"Unsupported {enum_cls.__name__} {value!r}; expected one of {allowed}") from exc


def _assign_peaks(frame: pd.DataFrame, sample_col: str, category_col: str, value_col: str) -> pd.Series:
    """Peak assignment over an already validated frame."""

    peak_idx = frame.groupby(sample_col, sort=False)[value_col].idxmax()
    return pd.Series(
        frame.loc[peak_idx.to_numpy(), category_col].to_numpy(),
        index=pd.Index(peak_idx.index, name=sample_col),
        name="peak_category",
    )


def compute_peak_assignment(
    observations: pd.DataFrame,
    sample_col: str = "sample",
    category_col: str = "category",
    value_col: str = "value",
) -> pd.Series:
    """
    Map each sample to the category holding its maximum value.

    Ties resolve to the first category encountered in row order; samples keep
    their first-seen order in the returned Series.
    """

    frame = validate_observations(observations, sample_col, category_col, value_col)
    peaks = _assign_peaks(frame, sample_col, category_col, value_col)
    logging.debug("Assigned peaks for %d samples across %d categories", len(peaks), peaks.nunique())
    return peaks


def _peak_values(
    frame: pd.DataFrame,
    peak_assignment: Mapping[str, str] | pd.Series,
    sample_col: str,
    category_col: str,
    value_col: str,
) -> pd.DataFrame:
    """Return sample, peak_category and peak_value in first-seen sample order."""

    peaks = pd.Series(peak_assignment, dtype=object)
    peaks.index = peaks.index.astype(str)
    peaks = peaks.astype(str)

    samples = frame[sample_col].drop_duplicates()
    observed = set(samples)
    unknown = [s for s in peaks.index if s not in observed]
    if unknown:
        raise InconsistentSampleError(f"Peak assignment names samples without observations: {unknown}")
    unassigned = samples[~samples.isin(peaks.index)].tolist()
    if unassigned:
        raise InconsistentSampleError(f"Samples missing from peak assignment: {unassigned}")

    keyed = pd.DataFrame({"sample": samples.reset_index(drop=True)})
    keyed["peak_category"] = keyed["sample"].map(peaks).astype(str)
    lookup = frame.rename(
        columns={sample_col: "sample", category_col: "peak_category", value_col: "peak_value"}
    )
    merged = keyed.merge(lookup, on=["sample", "peak_category"], how="left")

    missing = merged[merged["peak_value"].isna()]
    if not missing.empty:
        pairs = [f"{s}/{c}" for s, c in zip(missing["sample"], missing["peak_category"])]
        raise ValidationError(f"No observation for assigned peak category: {pairs}")
    return merged


def _rank_within_blocks(peak_table: pd.DataFrame, ascending: bool = True) -> pd.Series:
    """1-based rank of peak_value inside each peak block, ties in first-seen order."""

    ranks = peak_table.groupby("peak_category", sort=False)["peak_value"].rank(method="first", ascending=ascending)
    return ranks.astype(int)


def compute_rank(
    observations: pd.DataFrame,
    peak_assignment: Mapping[str, str] | pd.Series,
    sample_col: str = "sample",
    category_col: str = "category",
    value_col: str = "value",
) -> pd.Series:
    """
    Rank samples within their peak block by the value held for that peak.

    Ranks are 1-based and ascending; equal values keep first-appearance order.
    """

    frame = validate_observations(observations, sample_col, category_col, value_col)
    peak_table = _peak_values(frame, peak_assignment, sample_col, category_col, value_col)
    return pd.Series(
        _rank_within_blocks(peak_table).to_numpy(),
        index=pd.Index(peak_table["sample"], name=sample_col),
        name="rank",
    )


def _block_order(
    peaks: pd.Series,
    policy: CategoryOrder,
    custom_order: Sequence[str] | None,
) -> List[str]:
    """Arrange the peak categories according to the block policy."""

    categories = list(dict.fromkeys(peaks.tolist()))
    if policy is CategoryOrder.ALPHABETICAL:
        return sorted(categories)
    if policy is CategoryOrder.GROUP_SIZE:
        sizes = peaks.value_counts()
        return sorted(categories, key=lambda c: (-int(sizes[c]), c))

    if not custom_order:
        raise ValidationError("Category order 'custom' requires a non-empty custom_order list.")
    listed = [str(c) for c in dict.fromkeys(custom_order)]
    unlisted = sorted(set(categories) - set(listed))
    if unlisted:
        raise ValidationError(f"Peak categories missing from custom_order: {unlisted}")
    present = set(categories)
    return [c for c in listed if c in present]


def ordering_table(
    observations: pd.DataFrame,
    category_order: CategoryOrder | str = CategoryOrder.ALPHABETICAL,
    direction: SortDirection | str = SortDirection.ASCENDING,
    custom_order: Sequence[str] | None = None,
    sample_col: str = "sample",
    category_col: str = "category",
    value_col: str = "value",
) -> pd.DataFrame:
    """Return the reordered samples with the keys that placed them."""

    policy = coerce_policy(CategoryOrder, category_order)
    direction = coerce_policy(SortDirection, direction)
    frame = validate_observations(observations, sample_col, category_col, value_col)

    peaks = _assign_peaks(frame, sample_col, category_col, value_col)
    table = _peak_values(frame, peaks, sample_col, category_col, value_col)
    table["rank"] = _rank_within_blocks(table)

    blocks = _block_order(peaks, policy, custom_order)
    table["block"] = table["peak_category"].map({c: i for i, c in enumerate(blocks)}).astype(int)

    # ranking in the requested direction keeps equal values first-seen either way
    table["_sort_rank"] = _rank_within_blocks(table, ascending=direction is SortDirection.ASCENDING)
    table = table.sort_values(["block", "_sort_rank"]).drop(columns="_sort_rank").reset_index(drop=True)
    table.insert(0, "position", range(1, len(table) + 1))

    logging.info(
        "Ordered %d samples into %d blocks (category_order=%s, direction=%s)",
        len(table),
        len(blocks),
        policy.value,
        direction.value,
    )
    return table[TABLE_COLUMNS]


def reorder(
    observations: pd.DataFrame,
    category_order: CategoryOrder | str = CategoryOrder.ALPHABETICAL,
    direction: SortDirection | str = SortDirection.ASCENDING,
    custom_order: Sequence[str] | None = None,
    sample_col: str = "sample",
    category_col: str = "category",
    value_col: str = "value",
) -> List[str]:
    """Return sample ids grouped by peak category and sorted within each block."""

    table = ordering_table(
        observations,
        category_order=category_order,
        direction=direction,
        custom_order=custom_order,
        sample_col=sample_col,
        category_col=category_col,
        value_col=value_col,
    )
    return table["sample"].tolist()


def apply_order(observations: pd.DataFrame, order: Iterable[str], sample_col: str = "sample") -> pd.DataFrame:
    """Return a copy whose sample column is an ordered Categorical following ``order``."""

    if sample_col not in observations.columns:
        raise ValidationError(f"Missing required columns: {[sample_col]}")

    order = [str(s) for s in order]
    samples = set(observations[sample_col].astype(str))
    listed = pd.Series(order, dtype=object)
    duplicates = sorted(set(listed[listed.duplicated()]))
    if duplicates:
        raise ValidationError(f"Order lists samples more than once: {duplicates}")
    if set(order) != samples:
        raise ValidationError(
            "Order is not a permutation of the table's samples: "
            f"missing={sorted(samples - set(order))}, unknown={sorted(set(order) - samples)}"
        )

    ordered = observations.copy()
    ordered[sample_col] = pd.Categorical(ordered[sample_col].astype(str), categories=order, ordered=True)
    return ordered.sort_values(sample_col, kind="mergesort").reset_index(drop=True)
