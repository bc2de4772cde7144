################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Interfaces implemented by every model."""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod

import numpy as np
from numpy.typing import NDArray


class LearningError(Exception):
    """Raised when a model receives data it cannot learn from."""


class ModelNotTrainedError(LearningError):
    """Raised when a model is used before it has been trained."""


class SupModel(ABC):
    """A supervised model fit from inputs and known targets."""

    @abstractmethod
    def train(self, inputs: NDArray[np.float64], targets: NDArray[np.float64]) -> None:
        """Fit the model to inputs and targets."""

    @abstractmethod
    def predict(self, inputs: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return predictions for the given inputs."""


class UnSupModel(ABC):
    """An unsupervised model fit from inputs alone."""

    @abstractmethod
    def train(self, inputs: NDArray[np.float64]) -> None:
        """Fit the model to inputs."""

    @abstractmethod
    def predict(self, inputs: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return predictions for the given inputs."""
