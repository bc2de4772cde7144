################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Gaussian process regression.

The prior is defined by a kernel and a mean function. Training stores
the data and factors ``K(X, X) + noise I`` by Cholesky decomposition;
predictions are posterior means, and ``get_posterior`` also returns the
posterior covariance.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from learnkit.config.learning_params import GaussianProcessParams
from learnkit.learning.base import LearningError
from learnkit.learning.base import ModelNotTrainedError
from learnkit.learning.base import SupModel
from learnkit.linalg.matrix_utils import as_matrix
from learnkit.linalg.matrix_utils import as_vector
from learnkit.linalg.matrix_utils import ensure_cols
from learnkit.linalg.matrix_utils import ensure_rows_match
from learnkit.toolkit.kernel import Kernel
from learnkit.toolkit.kernel import SquaredExp


_LOG: logging.Logger = logging.getLogger(__name__)

# Units: kernel units. Meaning: first diagonal jitter tried when Cholesky fails
CHOLESKY_JITTER_START: float = 1e-10
# Units: kernel units. Meaning: largest diagonal jitter tried before giving up
CHOLESKY_JITTER_MAX: float = 1e-4


class GaussianProcessError(LearningError):
    """Raised when a Gaussian process cannot be fit."""


class MeanFunc:
    """Base class for prior mean functions."""

    def func(self, inputs: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return the prior mean for each row of inputs."""
        raise NotImplementedError


class ConstMean(MeanFunc):
    """Constant prior mean."""

    def __init__(self, a: float = 0.0) -> None:
        if not np.isfinite(a):
            raise GaussianProcessError("mean constant must be finite")
        self.a: float = float(a)

    def func(self, inputs: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.full(inputs.shape[0], self.a, dtype=np.float64)


def _solve_factor(
    L: NDArray[np.float64], b: NDArray[np.float64]
) -> NDArray[np.float64]:
    """Solve L x = b for a Cholesky factor with a dense LU solve."""
    return np.asarray(np.linalg.solve(L, b), dtype=np.float64)


class GaussianProcess(SupModel):
    """Gaussian process regression model."""

    def __init__(
        self,
        kernel: Kernel | None = None,
        mean: MeanFunc | None = None,
        noise: float = 0.0,
    ) -> None:
        if not np.isfinite(noise) or noise < 0.0:
            raise GaussianProcessError("noise must be non-negative")
        self.kernel: Kernel = kernel if kernel is not None else SquaredExp()
        self.mean: MeanFunc = mean if mean is not None else ConstMean()
        self.noise: float = float(noise)
        self._train_inputs: NDArray[np.float64] | None = None
        self._train_targets: NDArray[np.float64] | None = None
        self._chol: NDArray[np.float64] | None = None
        self._alpha: NDArray[np.float64] | None = None

    @classmethod
    def from_params(cls, params: GaussianProcessParams) -> GaussianProcess:
        """Create a squared exponential process from configuration."""
        return cls(
            kernel=SquaredExp(ls=params.length_scale, ampl=params.amplitude),
            noise=params.noise,
        )

    @property
    def train_inputs(self) -> NDArray[np.float64] | None:
        """Return a copy of the training inputs, or None if untrained."""
        return None if self._train_inputs is None else self._train_inputs.copy()

    @property
    def train_targets(self) -> NDArray[np.float64] | None:
        """Return a copy of the training targets, or None if untrained."""
        return None if self._train_targets is None else self._train_targets.copy()

    def train(self, inputs: NDArray[np.float64], targets: NDArray[np.float64]) -> None:
        X: NDArray[np.float64] = as_matrix(inputs, "inputs")
        y: NDArray[np.float64] = as_vector(targets, "targets")
        ensure_rows_match(X, y)

        cov: NDArray[np.float64] = self.kernel.gram(X, X) + self.noise * np.eye(
            X.shape[0], dtype=np.float64
        )
        L: NDArray[np.float64] = self._cholesky(cov)
        residual: NDArray[np.float64] = y - self.mean.func(X)
        alpha: NDArray[np.float64] = _solve_factor(
            L.T, _solve_factor(L, residual)
        )

        self._train_inputs = X.copy()
        self._train_targets = y.copy()
        self._chol = L
        self._alpha = alpha
        _LOG.debug("Gaussian process conditioned on %d samples", X.shape[0])

    def predict(self, inputs: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return the posterior mean at each row of inputs."""
        X_train, _, alpha = self._require_trained()
        X: NDArray[np.float64] = as_matrix(inputs, "inputs")
        ensure_cols(X, X_train.shape[1], "inputs")
        K_star: NDArray[np.float64] = self.kernel.gram(X, X_train)
        return self.mean.func(X) + K_star @ alpha

    def get_posterior(
        self, inputs: NDArray[np.float64]
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Return the posterior mean vector and covariance matrix."""
        X_train, L, alpha = self._require_trained()
        X: NDArray[np.float64] = as_matrix(inputs, "inputs")
        ensure_cols(X, X_train.shape[1], "inputs")
        K_star: NDArray[np.float64] = self.kernel.gram(X, X_train)
        mean: NDArray[np.float64] = self.mean.func(X) + K_star @ alpha
        v: NDArray[np.float64] = _solve_factor(L, K_star.T)
        cov: NDArray[np.float64] = self.kernel.gram(X, X) - v.T @ v
        return mean, 0.5 * (cov + cov.T)

    def log_marginal_likelihood(self) -> float:
        """Return log p(y | X) of the training data under the prior."""
        X_train, L, alpha = self._require_trained()
        y_train: NDArray[np.float64] = np.asarray(
            self._train_targets, dtype=np.float64
        )
        residual: NDArray[np.float64] = y_train - self.mean.func(X_train)
        n_rows: int = int(X_train.shape[0])
        return float(
            -0.5 * residual @ alpha
            - np.sum(np.log(np.diag(L)))
            - 0.5 * n_rows * np.log(2.0 * np.pi)
        )

    def _cholesky(self, cov: NDArray[np.float64]) -> NDArray[np.float64]:
        eye: NDArray[np.float64] = np.eye(cov.shape[0], dtype=np.float64)
        jitter: float = 0.0
        while True:
            try:
                L: NDArray[np.float64] = np.linalg.cholesky(cov + jitter * eye)
            except np.linalg.LinAlgError as exc:
                jitter = CHOLESKY_JITTER_START if jitter == 0.0 else jitter * 10.0
                if jitter > CHOLESKY_JITTER_MAX:
                    raise GaussianProcessError(
                        "covariance matrix is not positive definite"
                    ) from exc
                continue
            if jitter > 0.0:
                _LOG.info("Added jitter %.1e to the covariance diagonal", jitter)
            return L

    def _require_trained(
        self,
    ) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
        if self._train_inputs is None or self._chol is None or self._alpha is None:
            raise ModelNotTrainedError("Gaussian process has not been trained")
        return self._train_inputs, self._chol, self._alpha
