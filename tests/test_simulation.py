import numpy as np
import pandas as pd
import pytest

from stacked_bars.simulation import simulate_compositions


def test_percentages_sum_to_100_per_sample():
    df = simulate_compositions(n_samples=12, categories=["x", "y", "z"], seed=1)
    totals = df.groupby("sample")["value"].sum()
    assert len(totals) == 12
    assert np.allclose(totals, 100.0)
    assert (df["value"] >= 0).all()


def test_rows_grouped_per_sample():
    df = simulate_compositions(n_samples=5, categories=["x", "y"], seed=2)
    assert df["category"].tolist()[:2] == ["x", "y"]
    assert df["sample"].iloc[0] == df["sample"].iloc[1]


def test_seed_is_reproducible():
    a = simulate_compositions(n_samples=8, seed=5)
    b = simulate_compositions(n_samples=8, seed=5)
    pd.testing.assert_frame_equal(a, b)


def test_custom_column_names():
    df = simulate_compositions(n_samples=3, seed=0, category_col="class", value_col="percentage")
    assert list(df.columns) == ["sample", "class", "percentage"]


@pytest.mark.parametrize(
    "kwargs",
    [{"n_samples": 0}, {"categories": []}, {"concentration": 0}, {"categories": ["a", "a"]}],
)
def test_invalid_arguments(kwargs):
    with pytest.raises(ValueError):
        simulate_compositions(**kwargs)
