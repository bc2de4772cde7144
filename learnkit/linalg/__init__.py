################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Data matrix helpers."""

from __future__ import annotations

from learnkit.linalg.matrix_utils import MatrixShapeError
from learnkit.linalg.matrix_utils import add_bias_column
from learnkit.linalg.matrix_utils import as_matrix
from learnkit.linalg.matrix_utils import as_vector


__all__ = [
    "MatrixShapeError",
    "add_bias_column",
    "as_matrix",
    "as_vector",
]
