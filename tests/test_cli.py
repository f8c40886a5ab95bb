import logging

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

import cli
from stacked_bars.errors import ValidationError


def _write_config(tmp_path, body):
    path = tmp_path / "ordering.yaml"
    path.write_text(body, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)


def test_simulated_run_writes_outputs(tmp_path):
    config = _write_config(
        tmp_path,
        f"""
logging:
  dir: {tmp_path / "logs"}
simulation:
  n_samples: 15
  seed: 1
output:
  dir: {tmp_path / "out"}
  name: demo
  save_observations: true
  figure_format: png
""",
    )
    order = cli.main(str(config))
    assert len(order) == 15

    table = pd.read_csv(tmp_path / "out" / "ordering_demo.csv")
    assert table["sample"].tolist() == order
    assert (tmp_path / "out" / "observations_demo.csv").exists()
    assert (tmp_path / "out" / "before_after_demo.png").exists()
    assert (tmp_path / "logs" / "ordering.log").exists()


def test_input_override_with_custom_columns(tmp_path):
    data = tmp_path / "obs.csv"
    pd.DataFrame(
        {
            "sample": ["s1", "s1", "s2", "s2", "s3", "s3"],
            "class": ["A", "B", "A", "B", "B", "A"],
            "percentage": [70, 30, 90, 10, 60, 40],
        }
    ).to_csv(data, index=False)
    config = _write_config(
        tmp_path,
        f"""
logging:
  dir: {tmp_path / "logs"}
columns:
  category: class
  value: percentage
ordering:
  category_order: custom
  custom_order: [B, A]
output:
  save_plots: false
""",
    )
    order = cli.main(str(config), input_path=str(data), output_dir=str(tmp_path / "out"))
    assert order == ["s3", "s1", "s2"]
    assert not list((tmp_path / "out").glob("*.png"))


def test_incomplete_input_fails(tmp_path):
    data = tmp_path / "obs.csv"
    pd.DataFrame({"sample": ["s1", "s1", "s2"], "category": ["A", "B", "A"], "value": [60, 40, 100]}).to_csv(
        data, index=False
    )
    config = _write_config(
        tmp_path,
        f"""
logging:
  dir: {tmp_path / "logs"}
input:
  path: {data}
output:
  dir: {tmp_path / "out"}
""",
    )
    with pytest.raises(ValidationError):
        cli.main(str(config))
    assert not (tmp_path / "out" / "ordering_stacked_bars.csv").exists()
