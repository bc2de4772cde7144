################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""K-means clustering.

Centroids are seeded by an ``Initializer`` and refined with Lloyd
iterations until the assignments stop changing or the iteration budget
runs out. A cluster that loses all of its samples keeps its previous
centroid. Distance ties resolve to the lowest centroid index.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from learnkit.config.learning_params import K_MEANS_ITERS
from learnkit.config.learning_params import KMeansParams
from learnkit.learning.base import LearningError
from learnkit.learning.base import ModelNotTrainedError
from learnkit.learning.base import UnSupModel
from learnkit.linalg.matrix_utils import as_matrix
from learnkit.linalg.matrix_utils import ensure_cols


_LOG: logging.Logger = logging.getLogger(__name__)


class KMeansError(LearningError):
    """Raised when k-means clustering receives invalid settings or data."""


def _sq_distances(
    inputs: NDArray[np.float64], centroids: NDArray[np.float64]
) -> NDArray[np.float64]:
    """Return squared distances, one row per sample, one column per centroid."""
    diff: NDArray[np.float64] = inputs[:, None, :] - centroids[None, :, :]
    return np.sum(diff * diff, axis=2)


def _assign(
    inputs: NDArray[np.float64], centroids: NDArray[np.float64]
) -> NDArray[np.intp]:
    return np.argmin(_sq_distances(inputs, centroids), axis=1)


class Initializer:
    """Base class for centroid initialization algorithms."""

    name: str = ""

    def init_centroids(
        self, k: int, inputs: NDArray[np.float64], rng: np.random.Generator
    ) -> NDArray[np.float64]:
        """Return a k x cols matrix of starting centroids."""
        raise NotImplementedError


class Forgy(Initializer):
    """Pick k distinct samples as the starting centroids."""

    name = "forgy"

    def init_centroids(
        self, k: int, inputs: NDArray[np.float64], rng: np.random.Generator
    ) -> NDArray[np.float64]:
        rows: NDArray[np.int64] = rng.choice(inputs.shape[0], size=k, replace=False)
        return inputs[rows].copy()


class RandomPartition(Initializer):
    """Assign samples to clusters at random and use the partition means."""

    name = "random_partition"

    def init_centroids(
        self, k: int, inputs: NDArray[np.float64], rng: np.random.Generator
    ) -> NDArray[np.float64]:
        # Every cluster receives at least one sample when rows >= k
        labels: NDArray[np.int64] = rng.permutation(np.arange(inputs.shape[0]) % k)
        centroids: NDArray[np.float64] = np.empty(
            (k, inputs.shape[1]), dtype=np.float64
        )
        for cluster in range(k):
            centroids[cluster] = np.mean(inputs[labels == cluster], axis=0)
        return centroids


class KPlusPlus(Initializer):
    """k-means++ seeding, sampling proportional to squared distance."""

    name = "kplusplus"

    def init_centroids(
        self, k: int, inputs: NDArray[np.float64], rng: np.random.Generator
    ) -> NDArray[np.float64]:
        n_rows: int = int(inputs.shape[0])
        chosen: list[int] = [int(rng.integers(n_rows))]
        min_sq: NDArray[np.float64] = _sq_distances(inputs, inputs[chosen])[:, 0]
        while len(chosen) < k:
            total: float = float(np.sum(min_sq))
            if total <= 0.0:
                # Remaining samples duplicate the chosen centroids
                remaining: NDArray[np.int64] = np.setdiff1d(
                    np.arange(n_rows), np.asarray(chosen)
                )
                next_row: int = int(rng.choice(remaining))
            else:
                next_row = int(rng.choice(n_rows, p=min_sq / total))
            chosen.append(next_row)
            new_sq: NDArray[np.float64] = _sq_distances(
                inputs, inputs[[next_row]]
            )[:, 0]
            min_sq = np.minimum(min_sq, new_sq)
        return inputs[chosen].copy()


_INITIALIZERS: dict[str, type[Initializer]] = {
    Forgy.name: Forgy,
    RandomPartition.name: RandomPartition,
    KPlusPlus.name: KPlusPlus,
}


def initializer_from_name(name: str) -> Initializer:
    """Return the initializer registered under name."""
    try:
        return _INITIALIZERS[name]()
    except KeyError as exc:
        raise KMeansError(f"Unknown k-means initializer: {name}") from exc


class KMeansClassifier(UnSupModel):
    """K-means clustering model."""

    def __init__(
        self,
        k: int,
        iters: int = K_MEANS_ITERS,
        init: Initializer | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        if isinstance(k, bool) or not isinstance(k, int) or k < 1:
            raise KMeansError("k must be a positive int")
        if isinstance(iters, bool) or not isinstance(iters, int) or iters < 1:
            raise KMeansError("iters must be a positive int")
        self.k: int = k
        self.iters: int = iters
        self.init: Initializer = init if init is not None else KPlusPlus()
        self._rng: np.random.Generator = (
            rng if rng is not None else np.random.default_rng()
        )
        self._centroids: NDArray[np.float64] | None = None
        self._iterations: int = 0

    @classmethod
    def from_params(
        cls, params: KMeansParams, rng: np.random.Generator | None = None
    ) -> KMeansClassifier:
        """Create a classifier from configuration."""
        return cls(
            k=params.k,
            iters=params.iters,
            init=initializer_from_name(params.init),
            rng=rng,
        )

    @property
    def centroids(self) -> NDArray[np.float64] | None:
        """Return a copy of the centroids, or None if untrained."""
        if self._centroids is None:
            return None
        return self._centroids.copy()

    def set_centroids(self, centroids: NDArray[np.float64]) -> None:
        """Install previously trained centroids."""
        mat: NDArray[np.float64] = as_matrix(centroids, "centroids")
        if mat.shape[0] != self.k:
            raise KMeansError(f"centroids must have {self.k} rows")
        self._centroids = mat.copy()

    @property
    def iterations(self) -> int:
        """Return the number of Lloyd iterations run by the last train."""
        return self._iterations

    def train(self, inputs: NDArray[np.float64]) -> None:
        X: NDArray[np.float64] = as_matrix(inputs, "inputs")
        if X.shape[0] < self.k:
            raise KMeansError(
                f"need at least k={self.k} samples, got {X.shape[0]}"
            )

        centroids: NDArray[np.float64] = self.init.init_centroids(self.k, X, self._rng)
        labels: NDArray[np.intp] | None = None
        iterations: int = 0
        for iteration in range(self.iters):
            new_labels: NDArray[np.intp] = _assign(X, centroids)
            if labels is not None and np.array_equal(labels, new_labels):
                break
            labels = new_labels
            iterations = iteration + 1
            for cluster in range(self.k):
                members: NDArray[np.bool_] = labels == cluster
                if np.any(members):
                    centroids[cluster] = np.mean(X[members], axis=0)

        self._centroids = centroids
        self._iterations = iterations
        _LOG.debug(
            "K-means with k=%d finished after %d iterations", self.k, iterations
        )

    def predict(self, inputs: NDArray[np.float64]) -> NDArray[np.intp]:
        """Return the index of the nearest centroid for each row."""
        centroids: NDArray[np.float64] = self._require_centroids()
        X: NDArray[np.float64] = as_matrix(inputs, "inputs")
        ensure_cols(X, centroids.shape[1], "inputs")
        return _assign(X, centroids)

    def inertia(self, inputs: NDArray[np.float64]) -> float:
        """Return the sum of squared distances to the nearest centroid."""
        centroids: NDArray[np.float64] = self._require_centroids()
        X: NDArray[np.float64] = as_matrix(inputs, "inputs")
        ensure_cols(X, centroids.shape[1], "inputs")
        return float(np.sum(np.min(_sq_distances(X, centroids), axis=1)))

    def _require_centroids(self) -> NDArray[np.float64]:
        if self._centroids is None:
            raise ModelNotTrainedError("K-means model has not been trained")
        return self._centroids
