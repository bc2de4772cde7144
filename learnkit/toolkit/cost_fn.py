################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Cost functions comparing model outputs against targets.

Costs are averaged over the number of samples (rows). Vectors are treated
as single-column matrices so the same cost works for regression outputs
and neural network output layers.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from learnkit.linalg.matrix_utils import MatrixShapeError
from learnkit.linalg.matrix_utils import as_column


# Units: probability. Meaning: clip margin keeping log terms finite
CROSS_ENTROPY_EPS: float = 1e-12


def _pair(
    outputs: NDArray[np.float64], targets: NDArray[np.float64]
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    out: NDArray[np.float64] = as_column(outputs)
    tgt: NDArray[np.float64] = as_column(targets)
    if out.shape != tgt.shape:
        raise MatrixShapeError(
            f"outputs shape {out.shape} does not match targets shape {tgt.shape}"
        )
    return out, tgt


class CostFunc:
    """Base class for cost functions."""

    @staticmethod
    def cost(outputs: NDArray[np.float64], targets: NDArray[np.float64]) -> float:
        """Return the scalar cost."""
        raise NotImplementedError

    @staticmethod
    def grad_cost(
        outputs: NDArray[np.float64], targets: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """Return the per-element gradient of the cost w.r.t. the outputs."""
        raise NotImplementedError


class MeanSqError(CostFunc):
    """Half mean squared error, sum((o - t)^2) / (2 n)."""

    @staticmethod
    def cost(outputs: NDArray[np.float64], targets: NDArray[np.float64]) -> float:
        out, tgt = _pair(outputs, targets)
        diff: NDArray[np.float64] = out - tgt
        return float(np.sum(diff * diff) / (2.0 * out.shape[0]))

    @staticmethod
    def grad_cost(
        outputs: NDArray[np.float64], targets: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        out, tgt = _pair(outputs, targets)
        return out - tgt


class CrossEntropyError(CostFunc):
    """Binary cross entropy, -sum(t ln o + (1 - t) ln(1 - o)) / n."""

    @staticmethod
    def cost(outputs: NDArray[np.float64], targets: NDArray[np.float64]) -> float:
        out, tgt = _pair(outputs, targets)
        clipped: NDArray[np.float64] = np.clip(
            out, CROSS_ENTROPY_EPS, 1.0 - CROSS_ENTROPY_EPS
        )
        log_terms: NDArray[np.float64] = tgt * np.log(clipped) + (1.0 - tgt) * np.log(
            1.0 - clipped
        )
        return float(-np.sum(log_terms) / out.shape[0])

    @staticmethod
    def grad_cost(
        outputs: NDArray[np.float64], targets: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        out, tgt = _pair(outputs, targets)
        clipped: NDArray[np.float64] = np.clip(
            out, CROSS_ENTROPY_EPS, 1.0 - CROSS_ENTROPY_EPS
        )
        return (clipped - tgt) / (clipped * (1.0 - clipped))
