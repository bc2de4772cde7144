################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""YAML schema utilities for trained model snapshots.

A snapshot records the model kind, its hyper-parameters as plain YAML
values, and its learned arrays. Arrays are stored as a shape plus a
row-major list of values so they survive a round trip through
``yaml.safe_dump`` and ``yaml.safe_load``.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from dataclasses import field
from typing import Any

import numpy as np
import yaml


# Snapshot schema version written by this module
FORMAT_VERSION: int = 1

# Model kinds that can be snapshotted
MODEL_KINDS: frozenset[str] = frozenset(
    {"lin_reg", "logistic_reg", "k_means", "nnet", "gp", "svm"}
)


class ModelYamlError(Exception):
    """Raised when the model snapshot YAML schema is invalid."""


@dataclass(frozen=True)
class ModelSnapshotYaml:
    """Serializable state of a trained model.

    Attributes:
        model: Model kind, one of MODEL_KINDS
        hyper: Hyper-parameters as plain YAML values
        arrays: Learned arrays by name
        format_version: Snapshot schema version
    """

    model: str
    hyper: dict[str, Any] = field(default_factory=dict)
    arrays: dict[str, np.ndarray] = field(default_factory=dict)
    format_version: int = FORMAT_VERSION

    def __post_init__(self) -> None:
        """Validate the model kind and coerce arrays."""
        object.__setattr__(
            self, "format_version", _require_int(self.format_version, "format_version")
        )
        if self.format_version != FORMAT_VERSION:
            raise ModelYamlError(f"format_version must be {FORMAT_VERSION}")
        model: str = _require_str(self.model, "model")
        if model not in MODEL_KINDS:
            raise ModelYamlError(f"Unknown model kind: {model}")
        hyper: dict[str, Any] = dict(_require_mapping(self.hyper, "hyper"))
        arrays: dict[str, np.ndarray] = {}
        for name, value in _require_mapping(self.arrays, "arrays").items():
            arrays[_require_str(name, "array name")] = _coerce_array(
                value, f"arrays.{name}"
            )
        object.__setattr__(self, "hyper", hyper)
        object.__setattr__(self, "arrays", arrays)

    def array(self, name: str) -> np.ndarray:
        """Return a named array, raising ModelYamlError if absent."""
        if name not in self.arrays:
            raise ModelYamlError(f"Missing array: {name}")
        return self.arrays[name]


def snapshot_to_dict(snapshot: ModelSnapshotYaml) -> dict[str, object]:
    """Convert a snapshot to a YAML-safe dictionary."""
    arrays: dict[str, object] = {
        name: {
            "shape": [int(dim) for dim in value.shape],
            "data": [float(item) for item in value.reshape(-1)],
        }
        for name, value in snapshot.arrays.items()
    }
    return {
        "format_version": snapshot.format_version,
        "model": snapshot.model,
        "hyper": _plain(snapshot.hyper),
        "arrays": arrays,
    }


def snapshot_from_dict(data: dict[str, object]) -> ModelSnapshotYaml:
    """Parse a YAML dictionary into a snapshot."""
    if not isinstance(data, dict):
        raise ModelYamlError("YAML root must be a mapping")
    _require_keys("root", data, {"format_version", "model", "hyper", "arrays"})

    arrays: dict[str, np.ndarray] = {}
    arrays_data: dict[str, object] = _require_mapping(data["arrays"], "arrays")
    for name, entry in arrays_data.items():
        scope: str = f"arrays.{name}"
        entry_data: dict[str, object] = _require_mapping(entry, scope)
        _require_keys(scope, entry_data, {"shape", "data"})
        shape_value: object = entry_data["shape"]
        if not isinstance(shape_value, list):
            raise ModelYamlError(f"{scope}.shape must be a list")
        shape: tuple[int, ...] = tuple(
            _require_int(dim, f"{scope}.shape") for dim in shape_value
        )
        if any(dim < 0 for dim in shape):
            raise ModelYamlError(f"{scope}.shape must not be negative")
        flat: np.ndarray = _coerce_array(entry_data["data"], f"{scope}.data")
        if flat.ndim != 1 or flat.size != int(np.prod(shape, dtype=np.int64)):
            raise ModelYamlError(f"{scope}.data does not match shape {shape}")
        arrays[str(name)] = flat.reshape(shape)

    return ModelSnapshotYaml(
        model=_require_str(data["model"], "model"),
        hyper=_require_mapping(data["hyper"], "hyper"),
        arrays=arrays,
        format_version=_require_int(data["format_version"], "format_version"),
    )


def dumps_yaml(snapshot: ModelSnapshotYaml) -> str:
    """Serialize a snapshot to deterministic YAML."""
    data: dict[str, object] = snapshot_to_dict(snapshot)
    return yaml.safe_dump(
        data,
        sort_keys=False,
        indent=2,
        default_flow_style=False,
    )


def loads_yaml(text: str) -> ModelSnapshotYaml:
    """Parse a snapshot from YAML text."""
    try:
        loaded: Any = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ModelYamlError("Snapshot is not valid YAML") from exc
    if not isinstance(loaded, dict):
        raise ModelYamlError("YAML root must be a mapping")
    return snapshot_from_dict(loaded)


def _plain(value: Any) -> Any:
    """Convert numpy scalars, arrays and tuples into plain YAML values."""
    if isinstance(value, dict):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, np.ndarray):
        return _plain(value.tolist())
    if isinstance(value, np.generic):
        return value.item()
    return value


def _require_keys(scope: str, data: dict[str, object], required: set[str]) -> None:
    """Ensure a mapping has exactly the required keys."""
    unknown: set[str] = {key for key in data.keys() if key not in required}
    if unknown:
        raise ModelYamlError(
            f"Unexpected keys in {scope}: {', '.join(sorted(unknown))}"
        )
    missing: set[str] = {key for key in required if key not in data}
    if missing:
        raise ModelYamlError(f"Missing keys in {scope}: {', '.join(sorted(missing))}")


def _require_mapping(value: object, name: str) -> dict[str, object]:
    """Ensure the value is a dictionary."""
    if not isinstance(value, dict):
        raise ModelYamlError(f"{name} must be a mapping")
    return value


def _require_str(value: object, name: str) -> str:
    """Ensure the value is a string."""
    if not isinstance(value, str):
        raise ModelYamlError(f"{name} must be a string")
    return value


def _require_int(value: object, name: str) -> int:
    """Ensure the value is an integer."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ModelYamlError(f"{name} must be an integer")
    return int(value)


def _coerce_array(value: object, name: str) -> np.ndarray:
    """Convert an input to a finite float64 numpy array."""
    try:
        array: np.ndarray = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise ModelYamlError(f"{name} must be numeric") from exc
    if not np.all(np.isfinite(array)):
        raise ModelYamlError(f"{name} must be finite")
    return array
