################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for gradient descent optimizers."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.typing import NDArray

from learnkit.config.learning_params import GradDescParams
from learnkit.config.learning_params import SgdParams
from learnkit.optim.grad_desc import GradientDesc
from learnkit.optim.grad_desc import StochasticGD
from learnkit.optim.optimizable import OptimError


class _LeastSquares:
    """Mean squared error of a linear model without intercept."""

    def compute_grad(
        self,
        params: NDArray[np.float64],
        inputs: NDArray[np.float64],
        targets: NDArray[np.float64],
    ) -> tuple[float, NDArray[np.float64]]:
        residual: NDArray[np.float64] = inputs @ params - targets.reshape(-1)
        n_rows: int = inputs.shape[0]
        cost: float = float(residual @ residual / (2.0 * n_rows))
        return cost, inputs.T @ residual / n_rows


class _BadShape:
    def compute_grad(
        self,
        params: NDArray[np.float64],
        inputs: NDArray[np.float64],
        targets: NDArray[np.float64],
    ) -> tuple[float, NDArray[np.float64]]:
        return 0.0, np.zeros(params.shape[0] + 1)


class _NotFinite:
    def compute_grad(
        self,
        params: NDArray[np.float64],
        inputs: NDArray[np.float64],
        targets: NDArray[np.float64],
    ) -> tuple[float, NDArray[np.float64]]:
        return float("nan"), np.zeros_like(params)


def _problem() -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    rng: np.random.Generator = np.random.default_rng(0)
    inputs: NDArray[np.float64] = rng.normal(size=(40, 2))
    true_params: NDArray[np.float64] = np.array([1.5, -0.5])
    return inputs, inputs @ true_params, true_params


def test_gradient_desc_converges_on_least_squares() -> None:
    """Batch gradient descent recovers exact linear parameters."""
    inputs, targets, true_params = _problem()
    gd: GradientDesc = GradientDesc(alpha=0.5, iters=2000)
    params: NDArray[np.float64] = gd.optimize(
        _LeastSquares(), np.zeros(2), inputs, targets
    )
    assert np.allclose(params, true_params, atol=1e-4)
    assert gd.last_report is not None
    assert gd.last_report.final_cost < gd.last_report.initial_cost
    assert gd.last_report.converged


def test_gradient_desc_respects_iteration_budget() -> None:
    """The report counts at most iters iterations."""
    inputs, targets, _ = _problem()
    gd: GradientDesc = GradientDesc(alpha=0.01, iters=3)
    gd.optimize(_LeastSquares(), np.zeros(2), inputs, targets)
    assert gd.last_report is not None
    assert gd.last_report.iterations == 3
    assert not gd.last_report.converged
    assert gd.last_report.as_dict()["iterations"] == 3


def test_stochastic_gd_reduces_cost() -> None:
    """SGD with momentum moves toward the solution."""
    inputs, targets, true_params = _problem()
    sgd: StochasticGD = StochasticGD(
        alpha=0.05, mu=0.1, iters=50, rng=np.random.default_rng(1)
    )
    params: NDArray[np.float64] = sgd.optimize(
        _LeastSquares(), np.zeros(2), inputs, targets
    )
    assert np.allclose(params, true_params, atol=1e-2)
    assert sgd.last_report is not None
    assert sgd.last_report.final_cost < sgd.last_report.initial_cost


def test_stochastic_gd_is_reproducible_with_seed() -> None:
    """Equal seeds visit samples in the same order."""
    inputs, targets, _ = _problem()
    first: NDArray[np.float64] = StochasticGD(
        iters=3, rng=np.random.default_rng(7)
    ).optimize(_LeastSquares(), np.zeros(2), inputs, targets)
    second: NDArray[np.float64] = StochasticGD(
        iters=3, rng=np.random.default_rng(7)
    ).optimize(_LeastSquares(), np.zeros(2), inputs, targets)
    assert np.array_equal(first, second)


def test_from_params() -> None:
    """Optimizers are built from configuration dataclasses."""
    gd: GradientDesc = GradientDesc.from_params(GradDescParams(alpha=0.2, iters=5))
    assert gd.alpha == 0.2
    assert gd.iters == 5
    sgd: StochasticGD = StochasticGD.from_params(SgdParams(alpha=0.3, mu=0.5, iters=2))
    assert (sgd.alpha, sgd.mu, sgd.iters) == (0.3, 0.5, 2)


def test_invalid_settings_raise() -> None:
    """Step sizes, budgets and momentum are range-checked."""
    with pytest.raises(OptimError):
        GradientDesc(alpha=0.0)
    with pytest.raises(OptimError):
        GradientDesc(iters=0)
    with pytest.raises(OptimError):
        StochasticGD(mu=1.0)


def test_model_errors_are_reported() -> None:
    """Bad gradient shapes and non-finite costs raise OptimError."""
    inputs, targets, _ = _problem()
    with pytest.raises(OptimError):
        GradientDesc().optimize(_BadShape(), np.zeros(2), inputs, targets)
    with pytest.raises(OptimError):
        GradientDesc().optimize(_NotFinite(), np.zeros(2), inputs, targets)
