################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Kernel functions for Gaussian processes and support vector machines.

A kernel maps two sample vectors to a scalar similarity. ``gram`` builds
the matrix of pairwise kernels between the rows of two data matrices.
Kernels compose with ``+`` and ``*``.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray

from learnkit.linalg.matrix_utils import MatrixShapeError
from learnkit.linalg.matrix_utils import as_matrix


class KernelError(Exception):
    """Raised when kernel hyper-parameters are invalid."""


def _sq_distances(
    X1: NDArray[np.float64], X2: NDArray[np.float64]
) -> NDArray[np.float64]:
    """Return pairwise squared Euclidean distances between rows."""
    sq1: NDArray[np.float64] = np.sum(X1 * X1, axis=1)[:, None]
    sq2: NDArray[np.float64] = np.sum(X2 * X2, axis=1)[None, :]
    dist: NDArray[np.float64] = sq1 + sq2 - 2.0 * (X1 @ X2.T)
    return np.maximum(dist, 0.0)


def _require_positive(value: float, name: str) -> float:
    if not np.isfinite(value) or value <= 0.0:
        raise KernelError(f"{name} must be positive")
    return float(value)


class Kernel:
    """Base class for kernels."""

    def gram(
        self, X1: NDArray[np.float64], X2: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """Return the matrix K[i, j] = k(X1[i], X2[j])."""
        raise NotImplementedError

    def kernel(self, x1: NDArray[np.float64], x2: NDArray[np.float64]) -> float:
        """Return the kernel between two sample vectors."""
        v1: NDArray[np.float64] = np.asarray(x1, dtype=np.float64).reshape(1, -1)
        v2: NDArray[np.float64] = np.asarray(x2, dtype=np.float64).reshape(1, -1)
        if v1.shape != v2.shape:
            raise MatrixShapeError("kernel arguments must have the same length")
        return float(self.gram(v1, v2)[0, 0])

    def __add__(self, other: Kernel) -> KernelSum:
        return KernelSum(self, other)

    def __mul__(self, other: Kernel) -> KernelProduct:
        return KernelProduct(self, other)

    def hyper_parameters(self) -> dict[str, Any]:
        """Return the kernel name and hyper-parameters as plain values."""
        raise NotImplementedError


def _coerce_pair(
    X1: NDArray[np.float64], X2: NDArray[np.float64]
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    A: NDArray[np.float64] = as_matrix(X1, "X1")
    B: NDArray[np.float64] = as_matrix(X2, "X2")
    if A.shape[1] != B.shape[1]:
        raise MatrixShapeError("X1 and X2 must have the same number of columns")
    return A, B


class SquaredExp(Kernel):
    """Squared exponential kernel, ampl * exp(-|x1 - x2|^2 / (2 ls^2))."""

    def __init__(self, ls: float = 1.0, ampl: float = 1.0) -> None:
        self.ls: float = _require_positive(ls, "ls")
        self.ampl: float = _require_positive(ampl, "ampl")

    def gram(
        self, X1: NDArray[np.float64], X2: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        A, B = _coerce_pair(X1, X2)
        return self.ampl * np.exp(-_sq_distances(A, B) / (2.0 * self.ls * self.ls))

    def hyper_parameters(self) -> dict[str, Any]:
        return {"name": "squared_exp", "ls": self.ls, "ampl": self.ampl}


class Exponential(Kernel):
    """Exponential kernel, ampl * exp(-|x1 - x2| / (2 ls^2))."""

    def __init__(self, ls: float = 1.0, ampl: float = 1.0) -> None:
        self.ls: float = _require_positive(ls, "ls")
        self.ampl: float = _require_positive(ampl, "ampl")

    def gram(
        self, X1: NDArray[np.float64], X2: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        A, B = _coerce_pair(X1, X2)
        dist: NDArray[np.float64] = np.sqrt(_sq_distances(A, B))
        return self.ampl * np.exp(-dist / (2.0 * self.ls * self.ls))

    def hyper_parameters(self) -> dict[str, Any]:
        return {"name": "exponential", "ls": self.ls, "ampl": self.ampl}


class Linear(Kernel):
    """Linear kernel, x1 . x2 + c."""

    def __init__(self, c: float = 0.0) -> None:
        if not np.isfinite(c):
            raise KernelError("c must be finite")
        self.c: float = float(c)

    def gram(
        self, X1: NDArray[np.float64], X2: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        A, B = _coerce_pair(X1, X2)
        return A @ B.T + self.c

    def hyper_parameters(self) -> dict[str, Any]:
        return {"name": "linear", "c": self.c}


class Polynomial(Kernel):
    """Polynomial kernel, (alpha x1 . x2 + c)^d."""

    def __init__(self, alpha: float = 1.0, c: float = 0.0, d: float = 2.0) -> None:
        if not np.isfinite(alpha) or not np.isfinite(c):
            raise KernelError("alpha and c must be finite")
        if not np.isfinite(d) or d < 0.0:
            raise KernelError("d must be non-negative")
        self.alpha: float = float(alpha)
        self.c: float = float(c)
        self.d: float = float(d)

    def gram(
        self, X1: NDArray[np.float64], X2: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        A, B = _coerce_pair(X1, X2)
        return np.power(self.alpha * (A @ B.T) + self.c, self.d)

    def hyper_parameters(self) -> dict[str, Any]:
        return {"name": "polynomial", "alpha": self.alpha, "c": self.c, "d": self.d}


class RationalQuadratic(Kernel):
    """Rational quadratic kernel, (1 + |x1 - x2|^2 / (2 alpha ls^2))^-alpha."""

    def __init__(self, alpha: float = 1.0, ls: float = 1.0) -> None:
        self.alpha: float = _require_positive(alpha, "alpha")
        self.ls: float = _require_positive(ls, "ls")

    def gram(
        self, X1: NDArray[np.float64], X2: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        A, B = _coerce_pair(X1, X2)
        base: NDArray[np.float64] = 1.0 + _sq_distances(A, B) / (
            2.0 * self.alpha * self.ls * self.ls
        )
        return np.power(base, -self.alpha)

    def hyper_parameters(self) -> dict[str, Any]:
        return {"name": "rational_quadratic", "alpha": self.alpha, "ls": self.ls}


class KernelSum(Kernel):
    """Sum of two kernels."""

    def __init__(self, left: Kernel, right: Kernel) -> None:
        self.left: Kernel = left
        self.right: Kernel = right

    def gram(
        self, X1: NDArray[np.float64], X2: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        return self.left.gram(X1, X2) + self.right.gram(X1, X2)

    def hyper_parameters(self) -> dict[str, Any]:
        return {
            "name": "sum",
            "left": self.left.hyper_parameters(),
            "right": self.right.hyper_parameters(),
        }


class KernelProduct(Kernel):
    """Element-wise product of two kernels."""

    def __init__(self, left: Kernel, right: Kernel) -> None:
        self.left: Kernel = left
        self.right: Kernel = right

    def gram(
        self, X1: NDArray[np.float64], X2: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        return self.left.gram(X1, X2) * self.right.gram(X1, X2)

    def hyper_parameters(self) -> dict[str, Any]:
        return {
            "name": "product",
            "left": self.left.hyper_parameters(),
            "right": self.right.hyper_parameters(),
        }


def kernel_from_dict(data: dict[str, Any]) -> Kernel:
    """Rebuild a kernel from the output of ``hyper_parameters``."""
    name: Any = data.get("name")
    if name == "squared_exp":
        return SquaredExp(ls=float(data["ls"]), ampl=float(data["ampl"]))
    if name == "exponential":
        return Exponential(ls=float(data["ls"]), ampl=float(data["ampl"]))
    if name == "linear":
        return Linear(c=float(data["c"]))
    if name == "polynomial":
        return Polynomial(
            alpha=float(data["alpha"]), c=float(data["c"]), d=float(data["d"])
        )
    if name == "rational_quadratic":
        return RationalQuadratic(alpha=float(data["alpha"]), ls=float(data["ls"]))
    if name == "sum":
        return KernelSum(
            kernel_from_dict(data["left"]), kernel_from_dict(data["right"])
        )
    if name == "product":
        return KernelProduct(
            kernel_from_dict(data["left"]), kernel_from_dict(data["right"])
        )
    raise KernelError(f"Unknown kernel: {name}")
