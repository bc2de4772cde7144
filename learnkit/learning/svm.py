################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Support vector machine classification.

The classifier is a kernel SVM trained with the Pegasos stochastic
sub-gradient method. Inputs are augmented with a bias column before the
kernel is applied, and targets must be labelled ``-1`` or ``1``.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from learnkit.config.learning_params import SVM_ITERS
from learnkit.config.learning_params import SVM_LAMBDA
from learnkit.config.learning_params import SvmParams
from learnkit.learning.base import LearningError
from learnkit.learning.base import ModelNotTrainedError
from learnkit.learning.base import SupModel
from learnkit.linalg.matrix_utils import add_bias_column
from learnkit.linalg.matrix_utils import as_matrix
from learnkit.linalg.matrix_utils import as_vector
from learnkit.linalg.matrix_utils import ensure_cols
from learnkit.linalg.matrix_utils import ensure_rows_match
from learnkit.toolkit.kernel import Kernel
from learnkit.toolkit.kernel import Linear


_LOG: logging.Logger = logging.getLogger(__name__)


class SVMError(LearningError):
    """Raised when an SVM is misconfigured or given bad labels."""


class SVM(SupModel):
    """Kernel support vector machine trained with Pegasos."""

    def __init__(
        self,
        kernel: Kernel | None = None,
        lambda_: float = SVM_LAMBDA,
        iters: int = SVM_ITERS,
        rng: np.random.Generator | None = None,
    ) -> None:
        if not np.isfinite(lambda_) or lambda_ <= 0.0:
            raise SVMError("lambda_ must be positive")
        if isinstance(iters, bool) or not isinstance(iters, int) or iters < 1:
            raise SVMError("iters must be a positive int")
        self.kernel: Kernel = kernel if kernel is not None else Linear()
        self.lambda_: float = float(lambda_)
        self.iters: int = iters
        self._rng: np.random.Generator = (
            rng if rng is not None else np.random.default_rng()
        )
        self._alpha: NDArray[np.float64] | None = None
        self._train_inputs: NDArray[np.float64] | None = None
        self._train_targets: NDArray[np.float64] | None = None

    @classmethod
    def from_params(
        cls,
        params: SvmParams,
        kernel: Kernel | None = None,
        rng: np.random.Generator | None = None,
    ) -> SVM:
        """Create a classifier from configuration."""
        return cls(kernel=kernel, lambda_=params.lambda_, iters=params.iters, rng=rng)

    @property
    def alpha(self) -> NDArray[np.float64] | None:
        """Return a copy of the per-sample update counts, or None if untrained."""
        return None if self._alpha is None else self._alpha.copy()

    def set_state(
        self,
        alpha: NDArray[np.float64],
        train_inputs: NDArray[np.float64],
        train_targets: NDArray[np.float64],
    ) -> None:
        """Install a previously trained state; inputs exclude the bias column."""
        X: NDArray[np.float64] = as_matrix(train_inputs, "train_inputs")
        y: NDArray[np.float64] = self._validate_labels(train_targets)
        counts: NDArray[np.float64] = as_vector(alpha, "alpha")
        ensure_rows_match(X, y)
        ensure_rows_match(X, counts)
        self._alpha = counts.copy()
        self._train_inputs = add_bias_column(X)
        self._train_targets = y

    @property
    def train_inputs(self) -> NDArray[np.float64] | None:
        """Return the training inputs without the bias column."""
        if self._train_inputs is None:
            return None
        return self._train_inputs[:, 1:].copy()

    @property
    def train_targets(self) -> NDArray[np.float64] | None:
        """Return a copy of the training labels, or None if untrained."""
        return None if self._train_targets is None else self._train_targets.copy()

    def train(self, inputs: NDArray[np.float64], targets: NDArray[np.float64]) -> None:
        X: NDArray[np.float64] = as_matrix(inputs, "inputs")
        y: NDArray[np.float64] = self._validate_labels(targets)
        ensure_rows_match(X, y)

        full_inputs: NDArray[np.float64] = add_bias_column(X)
        gram: NDArray[np.float64] = self.kernel.gram(full_inputs, full_inputs)
        n_rows: int = int(X.shape[0])
        alpha: NDArray[np.float64] = np.zeros(n_rows, dtype=np.float64)

        for t in range(1, self.iters + 1):
            row: int = int(self._rng.integers(n_rows))
            margin: float = float(
                y[row] * (gram[row] @ (alpha * y)) / (self.lambda_ * float(t))
            )
            if margin < 1.0:
                alpha[row] += 1.0

        self._alpha = alpha
        self._train_inputs = full_inputs
        self._train_targets = y
        _LOG.debug(
            "SVM trained on %d samples, %d support vectors",
            n_rows,
            int(np.count_nonzero(alpha)),
        )

    def decision_function(self, inputs: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return the Pegasos score (1 / (lambda T)) sum_i alpha_i y_i K(x_i, x).

        T is the iteration budget. The sign of the score is the predicted
        class.
        """
        if (
            self._alpha is None
            or self._train_inputs is None
            or self._train_targets is None
        ):
            raise ModelNotTrainedError("SVM has not been trained")
        X: NDArray[np.float64] = as_matrix(inputs, "inputs")
        ensure_cols(X, self._train_inputs.shape[1] - 1, "inputs")
        gram: NDArray[np.float64] = self.kernel.gram(
            add_bias_column(X), self._train_inputs
        )
        weights: NDArray[np.float64] = (
            self._alpha * self._train_targets / (self.lambda_ * float(self.iters))
        )
        return gram @ weights

    def predict(self, inputs: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return 1 or -1 for each row."""
        scores: NDArray[np.float64] = self.decision_function(inputs)
        return np.where(scores >= 0.0, 1.0, -1.0)

    @staticmethod
    def _validate_labels(targets: NDArray[np.float64]) -> NDArray[np.float64]:
        y: NDArray[np.float64] = as_vector(targets, "targets")
        if not np.all(np.isin(y, (-1.0, 1.0))):
            raise SVMError("targets must be -1 or 1")
        return y
