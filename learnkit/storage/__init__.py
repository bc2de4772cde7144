################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Saving and loading trained models."""

from __future__ import annotations

from learnkit.storage.model_snapshot import ModelSnapshotError
from learnkit.storage.model_snapshot import restore_model
from learnkit.storage.model_snapshot import snapshot_model
from learnkit.storage.persistence import ModelPersistenceError
from learnkit.storage.persistence import load_model
from learnkit.storage.persistence import load_yaml_snapshot
from learnkit.storage.persistence import save_model
from learnkit.storage.persistence import save_yaml_snapshot


__all__ = [
    "ModelPersistenceError",
    "ModelSnapshotError",
    "load_model",
    "load_yaml_snapshot",
    "restore_model",
    "save_model",
    "save_yaml_snapshot",
    "snapshot_model",
]
