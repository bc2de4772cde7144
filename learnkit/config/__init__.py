################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Configuration for model training."""

from __future__ import annotations

from learnkit.config.learning_params import LearningParams
from learnkit.config.learning_params import LearningParamsError
from learnkit.config.params_file import load_params


__all__ = [
    "LearningParams",
    "LearningParamsError",
    "load_params",
]
