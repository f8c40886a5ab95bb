"""CLI entry point for the stacked bar ordering pipeline.

Orchestrates loading or simulating composition data, validation, peak-based
sample ordering, CSV export and the optional before/after figure.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, List

import pandas as pd

from stacked_bars.config import OrderingConfig, get_nested, load_config
from stacked_bars.io import load_observations, save_dataframe
from stacked_bars.ordering import ordering_table
from stacked_bars.simulation import simulate_compositions
from stacked_bars.validation import validate_observations


def configure_logging(log_cfg: Dict[str, object]) -> None:
    """Configure root logger with both file and console handlers."""

    log_dir = Path(log_cfg.get("dir", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    filename = log_cfg.get("filename", "ordering.log")
    log_path = log_dir / filename
    level_name = str(log_cfg.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s - %(levelname)s - %(message)s"
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    file_handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(fmt))
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(fmt))

    root.addHandler(file_handler)
    root.addHandler(stream_handler)
    root.info("Logging to %s (level=%s)", log_path, level_name)


def _load_input(cfg: Dict[str, object], columns: Dict[str, str], input_path: str | None) -> pd.DataFrame:
    """Read the configured input file, or simulate data when no path is set."""

    input_cfg = cfg.get("input", {}) or {}
    path = input_path or input_cfg.get("path")
    if path:
        return load_observations(
            path,
            layout=str(input_cfg.get("layout", "long")),
            sep=str(input_cfg.get("sep", ",")),
            **columns,
        )

    sim_cfg = cfg.get("simulation", {}) or {}
    logging.info("No input path configured; simulating data.")
    return simulate_compositions(
        n_samples=int(sim_cfg.get("n_samples", 30)),
        categories=sim_cfg.get("categories", ["A", "B", "C", "D"]),
        concentration=float(sim_cfg.get("concentration", 1.0)),
        seed=sim_cfg.get("seed"),
        **columns,
    )


def main(
    config_path: str = "config/ordering.yaml",
    input_path: str | None = None,
    output_dir: str | None = None,
) -> List[str]:
    cfg = load_config(config_path)
    configure_logging(cfg.get("logging", {}) or {})

    columns = {
        "sample_col": str(get_nested(cfg, ["columns", "sample"], "sample")),
        "category_col": str(get_nested(cfg, ["columns", "category"], "category")),
        "value_col": str(get_nested(cfg, ["columns", "value"], "value")),
    }
    ordering_cfg = OrderingConfig.from_dict(cfg.get("ordering", {}))
    logging.info(
        "Ordering policy: category_order=%s, direction=%s",
        ordering_cfg.category_order.value,
        ordering_cfg.direction.value,
    )

    observations = _load_input(cfg, columns, input_path)
    observations = validate_observations(observations, require_complete=ordering_cfg.require_complete, **columns)

    table = ordering_table(
        observations,
        category_order=ordering_cfg.category_order,
        direction=ordering_cfg.direction,
        custom_order=ordering_cfg.custom_order,
        **columns,
    )

    output_cfg = cfg.get("output", {}) or {}
    out_dir = Path(output_dir or output_cfg.get("dir", "output"))
    name = str(output_cfg.get("name", "stacked_bars"))
    out_dir.mkdir(parents=True, exist_ok=True)
    logging.info("Using output directory %s (name=%s)", out_dir, name)

    save_dataframe(table, out_dir / f"ordering_{name}.csv")
    if output_cfg.get("save_observations", False):
        save_dataframe(observations, out_dir / f"observations_{name}.csv")

    order = table["sample"].tolist()
    if output_cfg.get("save_plots", True):
        from stacked_bars.plots import plot_before_after

        fmt = str(output_cfg.get("figure_format", "png")).lstrip(".")
        plot_before_after(
            observations,
            order,
            out_dir / f"before_after_{name}.{fmt}",
            dpi=int(output_cfg.get("dpi", 150)),
            **columns,
        )

    return order


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order samples in stacked bar charts by peak category.")
    parser.add_argument(
        "-c",
        "--config",
        default="config/ordering.yaml",
        help="Path to YAML config file.",
    )
    parser.add_argument("-i", "--input", default=None, help="Override the input CSV path.")
    parser.add_argument("-o", "--output-dir", default=None, help="Override the output directory.")
    args = parser.parse_args()
    main(args.config, input_path=args.input, output_dir=args.output_dir)
