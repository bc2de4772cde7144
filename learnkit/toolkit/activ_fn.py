################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Element-wise activation functions for models and neural networks."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


class ActivationFunc:
    """Base class for element-wise activation functions."""

    @staticmethod
    def func(x: NDArray[np.float64]) -> NDArray[np.float64]:
        """Apply the activation."""
        raise NotImplementedError

    @staticmethod
    def func_grad(x: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return the derivative of the activation at x."""
        raise NotImplementedError

    @staticmethod
    def func_inv(y: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return the inverse of the activation at y."""
        raise NotImplementedError


class Sigmoid(ActivationFunc):
    """Logistic sigmoid activation."""

    @staticmethod
    def func(x: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return 1 / (1 + exp(-x)) without overflowing for large |x|."""
        arr: NDArray[np.float64] = np.asarray(x, dtype=np.float64)
        out: NDArray[np.float64] = np.empty_like(arr)
        positive: NDArray[np.bool_] = arr >= 0.0
        out[positive] = 1.0 / (1.0 + np.exp(-arr[positive]))
        exp_x: NDArray[np.float64] = np.exp(arr[~positive])
        out[~positive] = exp_x / (1.0 + exp_x)
        return out

    @staticmethod
    def func_grad(x: NDArray[np.float64]) -> NDArray[np.float64]:
        s: NDArray[np.float64] = Sigmoid.func(x)
        return s * (1.0 - s)

    @staticmethod
    def func_inv(y: NDArray[np.float64]) -> NDArray[np.float64]:
        arr: NDArray[np.float64] = np.asarray(y, dtype=np.float64)
        return np.log(arr / (1.0 - arr))


class Linear(ActivationFunc):
    """Identity activation."""

    @staticmethod
    def func(x: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.asarray(x, dtype=np.float64).copy()

    @staticmethod
    def func_grad(x: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.ones_like(np.asarray(x, dtype=np.float64))

    @staticmethod
    def func_inv(y: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.asarray(y, dtype=np.float64).copy()


class Exp(ActivationFunc):
    """Exponential activation."""

    @staticmethod
    def func(x: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.exp(np.asarray(x, dtype=np.float64))

    @staticmethod
    def func_grad(x: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.exp(np.asarray(x, dtype=np.float64))

    @staticmethod
    def func_inv(y: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.log(np.asarray(y, dtype=np.float64))
