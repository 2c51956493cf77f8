"""Configuration management for vaultlens."""

import os
from pathlib import Path
from typing import Any

import yaml

from .aggregation import parse_visualization_type
from .models import CasePolicy, PropertyView, VisualizationConfig
from .timeframe import parse_time_frame
from .timekeys import parse_granularity


DEFAULT_CONFIG = {
    "vault_path": "~/vault",
    "granularity": "daily",
    "date_anchor_property": None,
    "show_empty_values": True,
    "time_frame": "all-time",
    "label_max_depth": 10,
    "grouping_case": None,
    "views": {},
}


def _find_config_file() -> Path | None:
    """Look for a vaultlens config in standard locations."""
    candidates = [
        Path.cwd() / "config" / "vaultlens.yaml",
        Path.cwd() / "vaultlens.yaml",
        Path.home() / ".vaultlens" / "config.yaml",
    ]
    for p in candidates:
        if p.exists():
            return p
    return None


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration, merging defaults with file and env vars."""
    cfg = _copy(DEFAULT_CONFIG)

    path = Path(config_path) if config_path else _find_config_file()
    if path and path.exists():
        with open(path) as f:
            file_cfg = yaml.safe_load(f) or {}
        if not isinstance(file_cfg, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        _deep_merge(cfg, file_cfg)

    # Env overrides
    if vault := os.environ.get("VAULTLENS_VAULT"):
        cfg["vault_path"] = vault

    cfg["vault_path"] = str(Path(cfg["vault_path"]).expanduser().resolve())
    validate_config(cfg)
    return cfg


def validate_config(cfg: dict[str, Any]) -> None:
    """Fail fast on values that would otherwise be silently defaulted."""
    parse_granularity(cfg.get("granularity", "daily"))
    parse_time_frame(cfg.get("time_frame"))
    case_policy(cfg)
    depth = cfg.get("label_max_depth", 10)
    if not isinstance(depth, int) or isinstance(depth, bool) or depth < 0:
        raise ValueError(f"label_max_depth must be a non-negative integer, got {depth!r}")
    parse_views(cfg)


def case_policy(cfg: dict[str, Any]) -> CasePolicy | None:
    value = cfg.get("grouping_case")
    if value is None:
        return None
    try:
        return CasePolicy(str(value).lower())
    except ValueError:
        raise ValueError(f"Unknown grouping_case: {value!r} (expected sensitive or insensitive)") from None


def parse_views(cfg: dict[str, Any]) -> list[PropertyView]:
    """Turn the ``views`` mapping into PropertyView objects, in file order."""
    views_cfg = cfg.get("views") or {}
    if not isinstance(views_cfg, dict):
        raise ValueError("views must be a mapping of property id to view settings")

    views = []
    for property_id, view in views_cfg.items():
        view = view or {}
        visualizations = []
        for i, viz in enumerate(view.get("visualizations", [])):
            if isinstance(viz, str):
                viz = {"type": viz}
            viz_type = parse_visualization_type(viz.get("type", ""))
            if "granularity" in (viz.get("settings") or {}):
                parse_granularity(viz["settings"]["granularity"])
            visualizations.append(VisualizationConfig(
                id=str(viz.get("id") or f"{property_id}-{viz_type.value}-{i}"),
                type=viz_type,
                settings=dict(viz.get("settings") or {}),
            ))
        views.append(PropertyView(
            property_id=str(property_id),
            display_name=str(view.get("display_name") or property_id),
            visualizations=tuple(visualizations),
        ))
    return views


def _copy(cfg: dict[str, Any]) -> dict[str, Any]:
    return {k: _copy(v) if isinstance(v, dict) else v for k, v in cfg.items()}


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override into base in-place."""
    for k, v in override.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
