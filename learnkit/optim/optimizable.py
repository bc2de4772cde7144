################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Interfaces shared by gradient based optimizers and the models they fit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from typing import Protocol

import numpy as np
from numpy.typing import NDArray


class OptimError(Exception):
    """Raised when an optimizer is misconfigured or its model misbehaves."""


class Optimizable(Protocol):
    """A model whose parameters can be fit from a cost gradient."""

    def compute_grad(
        self,
        params: NDArray[np.float64],
        inputs: NDArray[np.float64],
        targets: NDArray[np.float64],
    ) -> tuple[float, NDArray[np.float64]]:
        """Return the cost and its gradient at params."""
        ...


@dataclass(frozen=True)
class OptimReport:
    """Summary of a finished optimization run.

    Attributes:
        initial_cost: Cost at the starting parameters
        final_cost: Cost at the returned parameters
        iterations: Number of iterations (epochs for stochastic methods) run
        converged: Whether the cost change dropped below the tolerance
    """

    initial_cost: float
    final_cost: float
    iterations: int
    converged: bool

    def as_dict(self) -> dict[str, Any]:
        """Return the report as plain values."""
        return {
            "initial_cost": self.initial_cost,
            "final_cost": self.final_cost,
            "iterations": self.iterations,
            "converged": self.converged,
        }


class OptimAlgorithm:
    """Base class for optimization algorithms."""

    def __init__(self) -> None:
        self.last_report: OptimReport | None = None

    def optimize(
        self,
        model: Optimizable,
        start: NDArray[np.float64],
        inputs: NDArray[np.float64],
        targets: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        """Return parameters minimising the model cost, starting from start."""
        raise NotImplementedError


def evaluate(
    model: Optimizable,
    params: NDArray[np.float64],
    inputs: NDArray[np.float64],
    targets: NDArray[np.float64],
) -> tuple[float, NDArray[np.float64]]:
    """Call compute_grad and validate what the model returned."""
    cost, grad = model.compute_grad(params, inputs, targets)
    grad_arr: NDArray[np.float64] = np.asarray(grad, dtype=np.float64)
    if grad_arr.shape != params.shape:
        raise OptimError(
            f"gradient shape {grad_arr.shape} does not match parameters "
            f"{params.shape}"
        )
    if not np.isfinite(cost) or not np.all(np.isfinite(grad_arr)):
        raise OptimError("cost or gradient is not finite")
    return float(cost), grad_arr
