"""
Lattice Presets and Trace Configuration

Each preset names a Life-like rule known to produce interesting structures
to trace. A configuration is a plain dict (or JSON document) layered as:
preset values, then explicit overrides; the result is validated into a
LatticeConfig.
"""

import copy
import json
import os

from pydantic import BaseModel, Field, model_validator

from .life import format_rule

PRESETS = {
    "classic_life": {
        "engine": "life",
        "name": "Classic Life",
        "description": "Conway's Game of Life - the original B3/S23",
        "rule": "B3/S23", "density": 0.20,
    },
    "highlife": {
        "engine": "life",
        "name": "HighLife",
        "description": "B36/S23 - features a self-replicating pattern",
        "rule": "B36/S23", "density": 0.30,
    },
    "day_night": {
        "engine": "life",
        "name": "Day & Night",
        "description": "Symmetric rule - patterns work in positive and negative",
        "rule": "B3678/S34678", "density": 0.45,
    },
    "diamoeba": {
        "engine": "life",
        "name": "Diamoeba",
        "description": "Amoeba-like growth with diamond shapes",
        "rule": "B35678/S5678", "density": 0.50,
    },
    "seeds": {
        "engine": "life",
        "name": "Seeds",
        "description": "Explosive growth - every birth dies next step",
        "rule": "B2/S", "density": 0.08,
    },
}

PRESET_ORDER = ["classic_life", "highlife", "day_night", "diamoeba", "seeds"]

DEFAULT_PRESET = "classic_life"


class TraceSettings(BaseModel):
    """Bounds on how far and how much the tracer may work."""

    history_capacity: int = Field(default=200, ge=1, description="Frames kept for backward tracing")
    max_frames: int = Field(default=200, ge=0, description="Search depth in each direction")
    stop_on_expanded: float = Field(
        default=0.5, gt=0.0, le=1.0,
        description="Forward trace stops once the blob covers this fraction of the grid",
    )
    max_voxels: int = Field(default=20000, ge=0, description="Hard cap on emitted voxels")


class LatticeConfig(BaseModel):
    preset: str = DEFAULT_PRESET
    engine: str = "life"
    rule: str = "B3/S23"
    width: int = Field(default=128, ge=1)
    height: int = Field(default=128, ge=1)
    density: float = Field(default=0.20, ge=0.0, le=1.0)
    seed: int | None = None
    cell_size: int = Field(default=4, ge=1)
    trace: TraceSettings = Field(default_factory=TraceSettings)

    model_config = {"extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def _rule_from_lists(cls, data):
        # Rules may also arrive as birth/survival digit lists.
        if isinstance(data, dict) and ("birth" in data or "survival" in data):
            data = dict(data)
            data["rule"] = format_rule(data.pop("birth", [3]), data.pop("survival", [2, 3]))
        return data


def list_presets():
    """Return list of (key, name, description) for presets."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in PRESET_ORDER]


def merge_config(defaults, overrides):
    """Deep-merge overrides onto defaults. Neither input is modified."""
    result = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_config(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def load_config(source=None):
    """
    Build a LatticeConfig from a dict, a JSON string, or a JSON file path.

    A "preset" key pulls that preset's values in beneath the explicit ones.
    Raises KeyError for an unknown preset and pydantic.ValidationError for
    out-of-range values.
    """
    if source is None:
        source = {}
    elif isinstance(source, (str, os.PathLike)):
        if os.path.exists(source):
            with open(source) as f:
                source = json.load(f)
        else:
            source = json.loads(source)

    name = source.get("preset", DEFAULT_PRESET)
    if name not in PRESETS:
        raise KeyError(f"unknown preset: {name}")
    base = {k: v for k, v in PRESETS[name].items() if k not in ("name", "description")}
    base["preset"] = name
    # Explicit birth/survival lists replace the preset's rule string.
    if "birth" in source or "survival" in source:
        base.pop("rule", None)
    return LatticeConfig.model_validate(merge_config(base, source))
