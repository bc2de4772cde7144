################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Logistic regression trained by gradient descent.

The regressor adds the intercept term itself, so inputs are passed as
plain feature matrices. Predictions are probabilities of the positive
class.

Example::

    inputs = np.array([[1.0], [3.0], [5.0], [7.0]])
    targets = np.array([0.0, 0.0, 1.0, 1.0])

    model = LogisticRegressor()
    model.train(inputs, targets)
    model.predict(np.array([[10.0]]))  # close to 1

A ``GradientDesc`` with custom step size and iteration budget can be
passed to the constructor.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from learnkit.learning.base import LearningError
from learnkit.learning.base import ModelNotTrainedError
from learnkit.learning.base import SupModel
from learnkit.linalg.matrix_utils import add_bias_column
from learnkit.linalg.matrix_utils import as_matrix
from learnkit.linalg.matrix_utils import as_vector
from learnkit.linalg.matrix_utils import ensure_cols
from learnkit.linalg.matrix_utils import ensure_rows_match
from learnkit.optim.grad_desc import GradientDesc
from learnkit.optim.optimizable import OptimAlgorithm
from learnkit.toolkit.activ_fn import Sigmoid
from learnkit.toolkit.cost_fn import CrossEntropyError


_LOG: logging.Logger = logging.getLogger(__name__)

# Starting value for every parameter
INITIAL_PARAMETER: float = 0.5


class LogisticRegressor(SupModel):
    """Binary logistic regression model."""

    def __init__(self, gd: OptimAlgorithm | None = None) -> None:
        self.gd: OptimAlgorithm = gd if gd is not None else GradientDesc()
        self._parameters: NDArray[np.float64] | None = None

    @property
    def parameters(self) -> NDArray[np.float64] | None:
        """Return a copy of the fitted parameters, or None if untrained."""
        if self._parameters is None:
            return None
        return self._parameters.copy()

    def set_parameters(self, parameters: NDArray[np.float64]) -> None:
        """Install previously fitted parameters, intercept first."""
        self._parameters = as_vector(parameters, "parameters").copy()

    def train(self, inputs: NDArray[np.float64], targets: NDArray[np.float64]) -> None:
        X: NDArray[np.float64] = as_matrix(inputs, "inputs")
        y: NDArray[np.float64] = as_vector(targets, "targets")
        ensure_rows_match(X, y)
        if np.any(y < 0.0) or np.any(y > 1.0):
            raise LearningError("targets must lie in [0, 1]")

        full_inputs: NDArray[np.float64] = add_bias_column(X)
        start: NDArray[np.float64] = np.full(
            full_inputs.shape[1], INITIAL_PARAMETER, dtype=np.float64
        )
        self._parameters = self.gd.optimize(self, start, full_inputs, y)
        if self.gd.last_report is not None:
            _LOG.info(
                "Logistic regression trained, cross entropy %.6g -> %.6g",
                self.gd.last_report.initial_cost,
                self.gd.last_report.final_cost,
            )

    def predict(self, inputs: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return the positive class probability for each row."""
        if self._parameters is None:
            raise ModelNotTrainedError("Logistic regression model has not been trained")
        X: NDArray[np.float64] = as_matrix(inputs, "inputs")
        ensure_cols(X, self._parameters.shape[0] - 1, "inputs")
        return Sigmoid.func(add_bias_column(X) @ self._parameters)

    def compute_grad(
        self,
        params: NDArray[np.float64],
        inputs: NDArray[np.float64],
        targets: NDArray[np.float64],
    ) -> tuple[float, NDArray[np.float64]]:
        """Return the cross entropy and its gradient X^T (s(X b) - y) / n."""
        outputs: NDArray[np.float64] = Sigmoid.func(inputs @ params)
        cost: float = CrossEntropyError.cost(outputs, targets)
        grad: NDArray[np.float64] = inputs.T @ (outputs - targets) / inputs.shape[0]
        return cost, grad
