################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Gradient descent optimizers.

``GradientDesc`` takes full-batch steps. ``StochasticGD`` steps once per
sample with classical momentum, ``v = mu v + alpha g`` then ``w = w - v``,
visiting the rows in a fresh random order every epoch. Both stop early
once the cost changes by less than ``LEARNING_EPS`` between iterations.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from learnkit.config.learning_params import GRAD_DESC_ALPHA
from learnkit.config.learning_params import GRAD_DESC_ITERS
from learnkit.config.learning_params import SGD_ALPHA
from learnkit.config.learning_params import SGD_ITERS
from learnkit.config.learning_params import SGD_MU
from learnkit.config.learning_params import GradDescParams
from learnkit.config.learning_params import SgdParams
from learnkit.linalg.matrix_utils import ensure_rows_match
from learnkit.optim.optimizable import OptimAlgorithm
from learnkit.optim.optimizable import Optimizable
from learnkit.optim.optimizable import OptimError
from learnkit.optim.optimizable import OptimReport
from learnkit.optim.optimizable import evaluate


_LOG: logging.Logger = logging.getLogger(__name__)

# Units: cost. Meaning: cost change below which optimization has converged
LEARNING_EPS: float = 1e-10


def _validate_common(alpha: float, iters: int) -> None:
    if not np.isfinite(alpha) or alpha <= 0.0:
        raise OptimError("alpha must be positive")
    if not isinstance(iters, int) or iters < 1:
        raise OptimError("iters must be a positive int")


def _as_start(start: NDArray[np.float64]) -> NDArray[np.float64]:
    params: NDArray[np.float64] = np.array(start, dtype=np.float64).reshape(-1)
    if not np.all(np.isfinite(params)):
        raise OptimError("start parameters must be finite")
    return params


class GradientDesc(OptimAlgorithm):
    """Batch gradient descent with a fixed step size."""

    def __init__(
        self, alpha: float = GRAD_DESC_ALPHA, iters: int = GRAD_DESC_ITERS
    ) -> None:
        super().__init__()
        _validate_common(alpha, iters)
        self.alpha: float = float(alpha)
        self.iters: int = iters

    @classmethod
    def from_params(cls, params: GradDescParams) -> GradientDesc:
        """Create an optimizer from configuration."""
        return cls(alpha=params.alpha, iters=params.iters)

    def optimize(
        self,
        model: Optimizable,
        start: NDArray[np.float64],
        inputs: NDArray[np.float64],
        targets: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        ensure_rows_match(inputs, targets)
        params: NDArray[np.float64] = _as_start(start)

        initial_cost: float = 0.0
        prev_cost: float | None = None
        converged: bool = False
        iterations: int = 0
        for iteration in range(self.iters):
            cost, grad = evaluate(model, params, inputs, targets)
            if iteration == 0:
                initial_cost = cost
            iterations = iteration + 1
            if prev_cost is not None and abs(prev_cost - cost) < LEARNING_EPS:
                converged = True
                break
            params = params - self.alpha * grad
            prev_cost = cost

        final_cost, _ = evaluate(model, params, inputs, targets)
        self.last_report = OptimReport(
            initial_cost=initial_cost,
            final_cost=final_cost,
            iterations=iterations,
            converged=converged,
        )
        _LOG.debug(
            "Gradient descent finished after %d iterations, cost %.6g -> %.6g",
            iterations,
            initial_cost,
            final_cost,
        )
        return params


class StochasticGD(OptimAlgorithm):
    """Per-sample gradient descent with momentum."""

    def __init__(
        self,
        alpha: float = SGD_ALPHA,
        mu: float = SGD_MU,
        iters: int = SGD_ITERS,
        rng: np.random.Generator | None = None,
    ) -> None:
        super().__init__()
        _validate_common(alpha, iters)
        if not np.isfinite(mu) or mu < 0.0 or mu >= 1.0:
            raise OptimError("mu must be in [0, 1)")
        self.alpha: float = float(alpha)
        self.mu: float = float(mu)
        self.iters: int = iters
        self._rng: np.random.Generator = (
            rng if rng is not None else np.random.default_rng()
        )

    @classmethod
    def from_params(
        cls, params: SgdParams, rng: np.random.Generator | None = None
    ) -> StochasticGD:
        """Create an optimizer from configuration."""
        return cls(alpha=params.alpha, mu=params.mu, iters=params.iters, rng=rng)

    def optimize(
        self,
        model: Optimizable,
        start: NDArray[np.float64],
        inputs: NDArray[np.float64],
        targets: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        ensure_rows_match(inputs, targets)
        params: NDArray[np.float64] = _as_start(start)
        velocity: NDArray[np.float64] = np.zeros_like(params)
        n_rows: int = int(inputs.shape[0])

        initial_cost, _ = evaluate(model, params, inputs, targets)
        prev_cost: float | None = None
        converged: bool = False
        epochs: int = 0
        for epoch in range(self.iters):
            epoch_cost: float = 0.0
            for row in self._rng.permutation(n_rows):
                cost, grad = evaluate(
                    model,
                    params,
                    inputs[row : row + 1],
                    targets[row : row + 1],
                )
                velocity = self.mu * velocity + self.alpha * grad
                params = params - velocity
                epoch_cost += cost
            epoch_cost /= float(n_rows)
            epochs = epoch + 1
            if prev_cost is not None and abs(prev_cost - epoch_cost) < LEARNING_EPS:
                converged = True
                break
            prev_cost = epoch_cost

        final_cost, _ = evaluate(model, params, inputs, targets)
        self.last_report = OptimReport(
            initial_cost=initial_cost,
            final_cost=final_cost,
            iterations=epochs,
            converged=converged,
        )
        _LOG.debug(
            "Stochastic gradient descent finished after %d epochs, cost %.6g -> %.6g",
            epochs,
            initial_cost,
            final_cost,
        )
        return params
