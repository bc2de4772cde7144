################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Reading and writing trained models as YAML files.

``save_model`` and ``load_model`` cover the whole flow from a model object
to a file and back. The snapshot level functions are exposed for callers
that inspect or edit snapshots before restoring them.

Files are written next to their destination under a hidden temporary
name, synced, then renamed over the destination, so readers never see a
partially written model. The temporary file is removed if any step fails.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from learnkit.storage.model_snapshot import Model
from learnkit.storage.model_snapshot import restore_model
from learnkit.storage.model_snapshot import snapshot_model
from learnkit.storage.yaml_format import ModelSnapshotYaml
from learnkit.storage.yaml_format import ModelYamlError
from learnkit.storage.yaml_format import dumps_yaml
from learnkit.storage.yaml_format import loads_yaml


_LOG: logging.Logger = logging.getLogger(__name__)

# File suffixes accepted for model files, compared case-insensitively
MODEL_FILE_SUFFIXES: frozenset[str] = frozenset({".yaml", ".yml"})


class ModelPersistenceError(Exception):
    """Raised when loading or saving model snapshot files fails."""


def _model_path(path: str | os.PathLike[str]) -> Path:
    """Return path as a Path, requiring a YAML suffix."""
    path_obj: Path = Path(os.fspath(path))
    if path_obj.suffix.lower() not in MODEL_FILE_SUFFIXES:
        raise ModelPersistenceError(
            f"Model file {path_obj} must end with .yaml or .yml"
        )
    return path_obj


def _replace_atomically(path_obj: Path, text: str) -> None:
    tmp_path: Path = path_obj.with_name(f".{path_obj.name}.tmp.{os.getpid()}")
    try:
        with tmp_path.open("w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path_obj)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def save_yaml_snapshot(
    path: str | os.PathLike[str],
    snapshot: ModelSnapshotYaml,
    *,
    atomic_write: bool = True,
) -> None:
    """Write a snapshot to path, creating parent directories as needed."""
    path_obj: Path = _model_path(path)
    try:
        text: str = dumps_yaml(snapshot)
        path_obj.parent.mkdir(parents=True, exist_ok=True)
        if atomic_write:
            _replace_atomically(path_obj, text)
        else:
            path_obj.write_text(text, encoding="utf-8")
    except (OSError, ModelYamlError) as exc:
        raise ModelPersistenceError(
            f"Could not write {snapshot.model} model to {path_obj}"
        ) from exc
    _LOG.info("Saved %s model snapshot to %s", snapshot.model, path_obj)


def load_yaml_snapshot(path: str | os.PathLike[str]) -> ModelSnapshotYaml:
    """Read and validate the snapshot stored at path."""
    path_obj: Path = _model_path(path)
    try:
        snapshot: ModelSnapshotYaml = loads_yaml(
            path_obj.read_text(encoding="utf-8")
        )
    except (OSError, ModelYamlError) as exc:
        raise ModelPersistenceError(f"Could not read model from {path_obj}") from exc
    _LOG.debug("Loaded %s model snapshot from %s", snapshot.model, path_obj)
    return snapshot


def save_model(
    path: str | os.PathLike[str], model: Model, *, atomic_write: bool = True
) -> None:
    """Snapshot a trained model and write it to path."""
    save_yaml_snapshot(path, snapshot_model(model), atomic_write=atomic_write)


def load_model(path: str | os.PathLike[str]) -> Model:
    """Read the model file at path and rebuild the trained model."""
    return restore_model(load_yaml_snapshot(path))
