import numpy as np
import pandas as pd
import pytest

from stacked_bars.errors import EmptyInputError, InconsistentSampleError, OrderingError, ValidationError
from stacked_bars.validation import validate_observations


def _frame(rows):
    return pd.DataFrame(rows, columns=["sample", "category", "value"])


def test_valid_table_is_cleaned_copy():
    df = _frame([(1, "A", "60"), (1, "B", 40)])
    cleaned = validate_observations(df)
    assert cleaned["sample"].tolist() == ["1", "1"]
    assert cleaned["value"].tolist() == [60.0, 40.0]
    assert df["sample"].tolist() == [1, 1]


def test_none_and_empty_rejected():
    with pytest.raises(EmptyInputError):
        validate_observations(None)
    with pytest.raises(EmptyInputError):
        validate_observations(_frame([]))


def test_missing_columns_rejected():
    df = pd.DataFrame({"sample": ["s1"], "value": [1.0]})
    with pytest.raises(ValidationError, match="category"):
        validate_observations(df)


def test_non_numeric_value_names_offender():
    df = _frame([("s1", "A", 50), ("s2", "B", "lots")])
    with pytest.raises(ValidationError, match="s2/B"):
        validate_observations(df)


def test_negative_value_rejected():
    with pytest.raises(ValidationError, match="Negative"):
        validate_observations(_frame([("s1", "A", -1)]))


def test_infinite_value_rejected():
    with pytest.raises(ValidationError, match="Infinite"):
        validate_observations(_frame([("s1", "A", np.inf)]))


def test_missing_identifier_rejected():
    with pytest.raises(ValidationError):
        validate_observations(_frame([(None, "A", 10)]))


def test_duplicate_category_per_sample_rejected():
    df = _frame([("s1", "A", 10), ("s1", "A", 20)])
    with pytest.raises(ValidationError, match="s1/A"):
        validate_observations(df)


def test_require_complete_flags_missing_category():
    df = _frame([("s1", "A", 60), ("s1", "B", 40), ("s2", "A", 100)])
    assert len(validate_observations(df)) == 3
    with pytest.raises(ValidationError, match="'s2' is missing \\['B'\\]"):
        validate_observations(df, require_complete=True)


def test_errors_share_base_class():
    with pytest.raises(OrderingError):
        validate_observations(None)
    assert issubclass(ValidationError, ValueError)


def test_rows_of_tuples_become_frame():
    cleaned = validate_observations([("s1", "A", 70), ("s1", "B", 30)])
    assert list(cleaned.columns) == ["sample", "category", "value"]
    assert cleaned["value"].tolist() == [70.0, 30.0]


def test_empty_row_list_rejected():
    with pytest.raises(EmptyInputError):
        validate_observations([])


@pytest.mark.parametrize("observations", [42, "s1,A,70", [("s1", "A")], ["s1A"]])
def test_non_table_input_rejected(observations):
    with pytest.raises(ValidationError):
        validate_observations(observations)


def test_unused_categorical_sample_rejected():
    df = _frame([("s1", "A", 60), ("s1", "B", 40)])
    df["sample"] = pd.Categorical(df["sample"], categories=["s1", "s2"])
    with pytest.raises(InconsistentSampleError, match="s2"):
        validate_observations(df)
