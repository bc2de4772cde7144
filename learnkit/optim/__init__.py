################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Gradient based optimization."""

from __future__ import annotations

from learnkit.optim.grad_desc import GradientDesc
from learnkit.optim.grad_desc import StochasticGD
from learnkit.optim.optimizable import OptimAlgorithm
from learnkit.optim.optimizable import Optimizable
from learnkit.optim.optimizable import OptimError
from learnkit.optim.optimizable import OptimReport


__all__ = [
    "GradientDesc",
    "OptimAlgorithm",
    "OptimError",
    "OptimReport",
    "Optimizable",
    "StochasticGD",
]
