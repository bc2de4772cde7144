################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Supervised and unsupervised models."""

from __future__ import annotations

from learnkit.learning.base import LearningError
from learnkit.learning.base import ModelNotTrainedError
from learnkit.learning.base import SupModel
from learnkit.learning.base import UnSupModel
from learnkit.learning.gp import GaussianProcess
from learnkit.learning.k_means import KMeansClassifier
from learnkit.learning.lin_reg import LinRegressor
from learnkit.learning.logistic_reg import LogisticRegressor
from learnkit.learning.nnet import NeuralNet
from learnkit.learning.svm import SVM


__all__ = [
    "GaussianProcess",
    "KMeansClassifier",
    "LearningError",
    "LinRegressor",
    "LogisticRegressor",
    "ModelNotTrainedError",
    "NeuralNet",
    "SVM",
    "SupModel",
    "UnSupModel",
]
