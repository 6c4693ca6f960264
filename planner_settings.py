"""Planner tunables and their JSON persistence.

Settings are best effort: unknown keys are ignored, values are coerced to
the type of the default, and a missing or broken file leaves the defaults in
place.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from costmap import LETHAL_COST, OBSTACLE_FACTOR


@dataclass
class PlannerSettings:
    # obstacle cutoff is lethal_cost * factor
    lethal_cost: float = float(LETHAL_COST)
    factor: float = OBSTACLE_FACTOR
    # set map border cells to lethal before planning
    outline_map: bool = False
    # draw the expand trace in overlays
    expand_zone: bool = True
    # search budget; None means unlimited
    max_expansions: Optional[int] = None
    max_time_s: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PlannerSettings":
        settings = cls()
        if not isinstance(data, dict):
            return settings
        for f in fields(cls):
            if f.name not in data:
                continue
            value = _coerce(getattr(settings, f.name), data[f.name], f.name)
            setattr(settings, f.name, value)
        return settings

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# budget keys may legitimately be null
_OPTIONAL_INT = {'max_expansions'}
_OPTIONAL_FLOAT = {'max_time_s'}


def _coerce(default, value, name):
    if value is None:
        if name in _OPTIONAL_INT or name in _OPTIONAL_FLOAT:
            return None
        return default
    try:
        if name in _OPTIONAL_INT:
            return int(value)
        if name in _OPTIONAL_FLOAT:
            return float(value)
        if isinstance(default, bool):
            return bool(value)
        if isinstance(default, int):
            return int(value)
        if isinstance(default, float):
            return float(value)
    except (TypeError, ValueError):
        logging.warning(f"Ignoring bad planner setting {name}={value!r}")
        return default
    return value


def load_settings(path) -> PlannerSettings:
    path = Path(path)
    if not path.exists():
        return PlannerSettings()
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        logging.warning(f"Could not read planner settings from {path}: {e}")
        return PlannerSettings()
    return PlannerSettings.from_dict(data)


def save_settings(settings: PlannerSettings, path) -> None:
    Path(path).write_text(json.dumps(settings.to_dict(), indent=2, sort_keys=True))
