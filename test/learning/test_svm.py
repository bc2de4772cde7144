################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for support vector machines."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.typing import NDArray

from learnkit.config.learning_params import SvmParams
from learnkit.learning.base import ModelNotTrainedError
from learnkit.learning.svm import SVM
from learnkit.learning.svm import SVMError
from learnkit.toolkit.kernel import SquaredExp


INPUTS: NDArray[np.float64] = np.array(
    [[2.0, 2.0], [3.0, 3.0], [2.5, 3.5], [-2.0, -2.0], [-3.0, -3.0], [-3.5, -2.5]]
)
TARGETS: NDArray[np.float64] = np.array([1.0, 1.0, 1.0, -1.0, -1.0, -1.0])


def test_linear_svm_separates_training_data() -> None:
    """A linearly separable problem is classified correctly."""
    svm: SVM = SVM(iters=500, rng=np.random.default_rng(0))
    svm.train(INPUTS, TARGETS)
    assert np.array_equal(svm.predict(INPUTS), TARGETS)
    assert np.array_equal(svm.predict(np.array([[4.0, 4.0], [-4.0, -4.0]])), [1, -1])


def test_rbf_svm_decision_function_signs() -> None:
    """Decision scores carry the predicted class in their sign."""
    svm: SVM = SVM(kernel=SquaredExp(ls=2.0), iters=1000, rng=np.random.default_rng(1))
    svm.train(INPUTS, TARGETS)
    scores: NDArray[np.float64] = svm.decision_function(INPUTS)
    assert np.array_equal(np.sign(scores), TARGETS)


def test_update_counts() -> None:
    """Alpha counts margin violations and never exceeds the iteration budget."""
    svm: SVM = SVM(iters=50, rng=np.random.default_rng(2))
    svm.train(INPUTS, TARGETS)
    alpha = svm.alpha
    assert alpha is not None
    assert alpha.shape == (6,)
    assert np.all(alpha >= 0.0)
    assert 1.0 <= float(np.sum(alpha)) <= 50.0


def test_set_state_restores_predictions() -> None:
    """An installed state predicts like the trained model."""
    trained: SVM = SVM(iters=200, rng=np.random.default_rng(3))
    trained.train(INPUTS, TARGETS)
    assert trained.alpha is not None
    assert trained.train_inputs is not None
    assert trained.train_targets is not None

    restored: SVM = SVM(lambda_=trained.lambda_, iters=trained.iters)
    restored.set_state(trained.alpha, trained.train_inputs, trained.train_targets)
    query: NDArray[np.float64] = np.array([[1.0, 0.5], [-0.2, -1.0]])
    assert np.allclose(
        restored.decision_function(query), trained.decision_function(query)
    )


def test_seeded_training_is_reproducible() -> None:
    """Equal seeds draw the same samples."""
    first: SVM = SVM(iters=30, rng=np.random.default_rng(9))
    second: SVM = SVM(iters=30, rng=np.random.default_rng(9))
    first.train(INPUTS, TARGETS)
    second.train(INPUTS, TARGETS)
    assert np.array_equal(first.alpha, second.alpha)


def test_from_params() -> None:
    """Configuration sets the regularization and budget."""
    svm: SVM = SVM.from_params(SvmParams(lambda_=0.5, iters=10))
    assert svm.lambda_ == 0.5
    assert svm.iters == 10


def test_invalid_usage() -> None:
    """Bad labels, settings and untrained use are rejected."""
    with pytest.raises(SVMError):
        SVM().train(INPUTS, np.array([0.0, 1.0, 1.0, 0.0, 0.0, 1.0]))
    with pytest.raises(SVMError):
        SVM(lambda_=0.0)
    with pytest.raises(SVMError):
        SVM(iters=0)
    with pytest.raises(ModelNotTrainedError):
        SVM().predict(INPUTS)


def test_decision_function_is_scaled_by_lambda_and_iterations() -> None:
    """Scores follow (1 / (lambda T)) sum_i alpha_i y_i K(x_i, x)."""
    svm: SVM = SVM(lambda_=0.5, iters=4)
    train_inputs: NDArray[np.float64] = np.array([[1.0], [-1.0]])
    svm.set_state(np.array([2.0, 1.0]), train_inputs, np.array([1.0, -1.0]))
    # Linear kernel on [1, x]: K([1, 1], [1, 2]) = 3, K([1, -1], [1, 2]) = -1
    expected: float = (2.0 * 3.0 - 1.0 * -1.0) / (0.5 * 4.0)
    assert np.allclose(svm.decision_function(np.array([[2.0]])), [expected])
