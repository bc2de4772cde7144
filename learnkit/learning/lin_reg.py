################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Linear regression.

The intercept term is added automatically, so the fitted parameter vector
has one more entry than the input matrix has columns. ``train`` solves the
normal equations directly; ``train_with_optimization`` minimises the mean
squared error by gradient descent instead, which suits inputs with many
columns.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from learnkit.learning.base import ModelNotTrainedError
from learnkit.learning.base import SupModel
from learnkit.linalg.matrix_utils import add_bias_column
from learnkit.linalg.matrix_utils import as_matrix
from learnkit.linalg.matrix_utils import as_vector
from learnkit.linalg.matrix_utils import ensure_cols
from learnkit.linalg.matrix_utils import ensure_rows_match
from learnkit.linalg.matrix_utils import solve_normal_equations
from learnkit.optim.grad_desc import GradientDesc
from learnkit.optim.optimizable import OptimAlgorithm
from learnkit.toolkit.cost_fn import MeanSqError


_LOG: logging.Logger = logging.getLogger(__name__)


class LinRegressor(SupModel):
    """Ordinary least squares linear regression model."""

    def __init__(self) -> None:
        self._parameters: NDArray[np.float64] | None = None

    @property
    def parameters(self) -> NDArray[np.float64] | None:
        """Return a copy of the fitted parameters, or None if untrained."""
        if self._parameters is None:
            return None
        return self._parameters.copy()

    def set_parameters(self, parameters: NDArray[np.float64]) -> None:
        """Install previously fitted parameters, intercept first."""
        params: NDArray[np.float64] = as_vector(parameters, "parameters")
        if params.shape[0] < 1:
            raise ValueError("parameters must include the intercept")
        self._parameters = params.copy()

    def train(self, inputs: NDArray[np.float64], targets: NDArray[np.float64]) -> None:
        """Fit the parameters by solving (X^T X) b = X^T y."""
        X, y = self._prepare(inputs, targets)
        H: NDArray[np.float64] = X.T @ X
        b: NDArray[np.float64] = X.T @ y
        self._parameters = solve_normal_equations(H, b)
        _LOG.debug("Fitted linear regression on %d samples", X.shape[0])

    def train_with_optimization(
        self,
        inputs: NDArray[np.float64],
        targets: NDArray[np.float64],
        gd: OptimAlgorithm | None = None,
    ) -> None:
        """Fit the parameters by gradient descent on the mean squared error."""
        X, y = self._prepare(inputs, targets)
        optimizer: OptimAlgorithm = gd if gd is not None else GradientDesc()
        start: NDArray[np.float64] = np.zeros(X.shape[1], dtype=np.float64)
        self._parameters = optimizer.optimize(self, start, X, y)

    def predict(self, inputs: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return [1 X] b for each row of inputs."""
        if self._parameters is None:
            raise ModelNotTrainedError("Linear regression model has not been trained")
        X: NDArray[np.float64] = as_matrix(inputs, "inputs")
        ensure_cols(X, self._parameters.shape[0] - 1, "inputs")
        return add_bias_column(X) @ self._parameters

    def compute_grad(
        self,
        params: NDArray[np.float64],
        inputs: NDArray[np.float64],
        targets: NDArray[np.float64],
    ) -> tuple[float, NDArray[np.float64]]:
        """Return the mean squared error and its gradient.

        Inputs must already carry the bias column.
        """
        outputs: NDArray[np.float64] = inputs @ params
        cost: float = MeanSqError.cost(outputs, targets)
        grad: NDArray[np.float64] = inputs.T @ (outputs - targets) / inputs.shape[0]
        return cost, grad

    @staticmethod
    def _prepare(
        inputs: NDArray[np.float64], targets: NDArray[np.float64]
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        X: NDArray[np.float64] = as_matrix(inputs, "inputs")
        y: NDArray[np.float64] = as_vector(targets, "targets")
        ensure_rows_match(X, y)
        return add_bias_column(X), y
