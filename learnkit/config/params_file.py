################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Loading learning parameter overrides from YAML files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from learnkit.config.learning_params import LearningParams
from learnkit.config.learning_params import LearningParamsError


def load_params(path: str | os.PathLike[str]) -> LearningParams:
    """Return default parameters overridden by the YAML file at path.

    An empty file yields the defaults. Unknown namespaces or keys and
    invalid values raise LearningParamsError.
    """
    path_obj: Path = Path(os.fspath(path))
    try:
        text: str = path_obj.read_text(encoding="utf-8")
        loaded: Any = yaml.safe_load(text)
    except (OSError, yaml.YAMLError) as exc:
        raise LearningParamsError(f"Failed to load parameters from {path_obj}") from exc

    if loaded is None:
        return LearningParams.defaults()
    if not isinstance(loaded, dict):
        raise LearningParamsError(f"{path_obj} must contain a mapping")
    return LearningParams.from_dict(loaded)
