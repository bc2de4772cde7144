################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Validation and reshaping helpers for data matrices.

Data matrices hold one sample per row and one feature per column. Every
model coerces its inputs through these helpers so shape errors surface as
``MatrixShapeError`` before any numerical work starts.
"""

from __future__ import annotations

from typing import Any
from typing import Sequence

import numpy as np
from numpy.typing import NDArray


# Units: unitless. Meaning: diagonal damping for singular normal equations
SOLVE_DAMPING: float = 1e-8


class MatrixShapeError(ValueError):
    """Raised when a data matrix or vector has an invalid shape."""


def assert_finite(x: NDArray[np.float64], name: str) -> None:
    """Raise MatrixShapeError when the array contains non-finite values."""
    if not np.all(np.isfinite(x)):
        raise MatrixShapeError(f"{name} must be finite")


def as_matrix(value: Any, name: str) -> NDArray[np.float64]:
    """Coerce a value to a finite 2D float64 array."""
    array: NDArray[np.float64] = np.asarray(value, dtype=np.float64)
    if array.ndim != 2:
        raise MatrixShapeError(f"{name} must be a 2D matrix, got {array.ndim}D")
    if array.shape[0] == 0:
        raise MatrixShapeError(f"{name} must have at least one row")
    assert_finite(array, name)
    return array


def as_vector(value: Any, name: str) -> NDArray[np.float64]:
    """Coerce a value to a finite 1D float64 array."""
    array: NDArray[np.float64] = np.asarray(value, dtype=np.float64)
    if array.ndim == 2 and array.shape[1] == 1:
        array = array[:, 0]
    if array.ndim != 1:
        raise MatrixShapeError(f"{name} must be a vector, got {array.ndim}D")
    assert_finite(array, name)
    return array


def as_column(value: NDArray[np.float64]) -> NDArray[np.float64]:
    """Return vectors as single-column matrices, leaving matrices untouched."""
    array: NDArray[np.float64] = np.asarray(value, dtype=np.float64)
    if array.ndim == 1:
        return array.reshape(-1, 1)
    return array


def add_bias_column(inputs: NDArray[np.float64]) -> NDArray[np.float64]:
    """Prepend a column of ones to a data matrix."""
    mat: NDArray[np.float64] = np.asarray(inputs, dtype=np.float64)
    ones: NDArray[np.float64] = np.ones((mat.shape[0], 1), dtype=np.float64)
    return np.hstack((ones, mat))


def select_rows(
    matrix: NDArray[np.float64], rows: Sequence[int]
) -> NDArray[np.float64]:
    """Return a copy holding the given rows, in order."""
    mat: NDArray[np.float64] = np.asarray(matrix, dtype=np.float64)
    index: NDArray[np.intp] = np.asarray(rows, dtype=np.intp)
    if index.size and (index.min() < -mat.shape[0] or index.max() >= mat.shape[0]):
        raise MatrixShapeError("row index out of range")
    return mat[index]


def select_cols(
    matrix: NDArray[np.float64], cols: Sequence[int]
) -> NDArray[np.float64]:
    """Return a copy holding the given columns, in order."""
    mat: NDArray[np.float64] = np.asarray(matrix, dtype=np.float64)
    if mat.ndim != 2:
        raise MatrixShapeError("matrix must be 2D")
    index: NDArray[np.intp] = np.asarray(cols, dtype=np.intp)
    if index.size and (index.min() < -mat.shape[1] or index.max() >= mat.shape[1]):
        raise MatrixShapeError("column index out of range")
    return mat[:, index]


def ensure_rows_match(
    inputs: NDArray[np.float64],
    targets: NDArray[np.float64],
) -> None:
    """Ensure inputs and targets describe the same number of samples."""
    if inputs.shape[0] != targets.shape[0]:
        raise MatrixShapeError(
            f"inputs have {inputs.shape[0]} rows but targets have "
            f"{targets.shape[0]}"
        )


def ensure_cols(matrix: NDArray[np.float64], cols: int, name: str) -> None:
    """Ensure a matrix has the expected column count."""
    if matrix.shape[1] != cols:
        raise MatrixShapeError(
            f"{name} must have {cols} columns, got {matrix.shape[1]}"
        )


def solve_normal_equations(
    H: NDArray[np.float64], b: NDArray[np.float64]
) -> NDArray[np.float64]:
    """Solve H x = b, damping or falling back to least squares if singular."""
    try:
        x: NDArray[np.float64] = np.asarray(np.linalg.solve(H, b), dtype=np.float64)
    except np.linalg.LinAlgError:
        dim: int = int(H.shape[0])
        H_damped: NDArray[np.float64] = H + SOLVE_DAMPING * np.eye(dim)
        try:
            x = np.asarray(np.linalg.solve(H_damped, b), dtype=np.float64)
        except np.linalg.LinAlgError:
            x = np.asarray(
                np.linalg.lstsq(H_damped, b, rcond=None)[0],
                dtype=np.float64,
            )
    return x
