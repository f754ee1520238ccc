"""Load and expose task table column configuration from YAML (with fallbacks)."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .config import DISPLAY_ORDER_DELETED, DISPLAY_ORDER_TASK_LIST, TASK_CORE_COLUMNS

_CACHE: dict[str, list[str]] | None = None

logger = logging.getLogger(__name__)


def _defaults() -> dict[str, list[str]]:
    return {
        "core": list(TASK_CORE_COLUMNS),
        "task_list": list(DISPLAY_ORDER_TASK_LIST),
        "deleted": list(DISPLAY_ORDER_DELETED),
    }


def load_column_sets(base_path: str | Path | None = None, *, refresh: bool = False):
    global _CACHE
    if _CACHE is not None and not refresh:
        return _CACHE
    base = Path(base_path or Path(__file__).resolve().parent.parent)
    yaml_path = base / "columns.yaml"
    if not yaml_path.exists():
        _CACHE = _defaults()
        return _CACHE
    try:
        data = yaml.safe_load(yaml_path.read_text()) or {}
    except yaml.YAMLError as exc:
        logger.warning("Ignoring unreadable %s: %s", yaml_path, exc)
        _CACHE = _defaults()
        return _CACHE
    sets = data.get("sets", {}) if isinstance(data, dict) else {}
    _CACHE = {name: list(sets.get(name) or default) for name, default in _defaults().items()}
    return _CACHE


def get_columns(set_name: str) -> list[str]:
    sets = load_column_sets()
    return sets.get(set_name, [])
