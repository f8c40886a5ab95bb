"""Configuration helpers for the sample ordering pipeline.

Provides YAML loading, a small utility for accessing nested configuration
values with defaults, and the typed ordering options.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from stacked_bars.errors import ValidationError
from stacked_bars.ordering import CategoryOrder, SortDirection, coerce_policy


def load_config(path: str | Path) -> Dict[str, Any]:
    """Load a YAML configuration file."""

    with Path(path).open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def get_nested(config: Dict[str, Any], keys: list[str], default: Any) -> Any:
    """Retrieve a nested value from a config dict with a default."""

    current: Any = config
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current


@dataclass
class OrderingConfig:
    """Typed view of the ``ordering`` config section."""

    category_order: CategoryOrder = CategoryOrder.ALPHABETICAL
    direction: SortDirection = SortDirection.ASCENDING
    custom_order: Optional[List[str]] = None
    require_complete: bool = True

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any] | None) -> "OrderingConfig":
        cfg = cfg or {}
        custom = cfg.get("custom_order")
        if custom is not None and not isinstance(custom, list):
            raise ValidationError(f"custom_order must be a list, got {type(custom).__name__}")
        return cls(
            category_order=coerce_policy(CategoryOrder, cfg.get("category_order", CategoryOrder.ALPHABETICAL)),
            direction=coerce_policy(SortDirection, cfg.get("direction", SortDirection.ASCENDING)),
            custom_order=[str(c) for c in custom] if custom is not None else None,
            require_complete=bool(cfg.get("require_complete", True)),
        )
