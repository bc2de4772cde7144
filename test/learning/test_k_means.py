################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for k-means clustering."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.typing import NDArray

from learnkit.config.learning_params import KMeansParams
from learnkit.learning.base import ModelNotTrainedError
from learnkit.learning.k_means import Forgy
from learnkit.learning.k_means import Initializer
from learnkit.learning.k_means import KMeansClassifier
from learnkit.learning.k_means import KMeansError
from learnkit.learning.k_means import KPlusPlus
from learnkit.learning.k_means import RandomPartition
from learnkit.learning.k_means import initializer_from_name


def _blobs() -> NDArray[np.float64]:
    rng: np.random.Generator = np.random.default_rng(0)
    left: NDArray[np.float64] = rng.normal(loc=(-5.0, 0.0), scale=0.3, size=(20, 2))
    right: NDArray[np.float64] = rng.normal(loc=(5.0, 0.0), scale=0.3, size=(20, 2))
    return np.vstack((left, right))


@pytest.mark.parametrize("init", [Forgy(), RandomPartition(), KPlusPlus()])
def test_separates_blobs(init: Initializer) -> None:
    """Each initializer ends with one centroid per blob."""
    inputs: NDArray[np.float64] = _blobs()
    model: KMeansClassifier = KMeansClassifier(
        2, init=init, rng=np.random.default_rng(3)
    )
    model.train(inputs)

    labels: NDArray[np.intp] = model.predict(inputs)
    assert len(set(labels[:20].tolist())) == 1
    assert len(set(labels[20:].tolist())) == 1
    assert labels[0] != labels[20]

    centroids = model.centroids
    assert centroids is not None
    xs: list[float] = sorted(centroids[:, 0].tolist())
    assert np.allclose(xs, [-5.0, 5.0], atol=0.3)
    assert 1 <= model.iterations <= model.iters


def test_initializers_return_k_rows() -> None:
    """Initial centroids have one row per cluster."""
    inputs: NDArray[np.float64] = _blobs()
    rng: np.random.Generator = np.random.default_rng(0)
    for init in (Forgy(), RandomPartition(), KPlusPlus()):
        assert init.init_centroids(3, inputs, rng).shape == (3, 2)


def test_kplusplus_handles_duplicate_samples() -> None:
    """Identical samples still yield k centroids."""
    inputs: NDArray[np.float64] = np.ones((4, 2))
    centroids: NDArray[np.float64] = KPlusPlus().init_centroids(
        3, inputs, np.random.default_rng(0)
    )
    assert centroids.shape == (3, 2)
    assert np.allclose(centroids, 1.0)


def test_ties_resolve_to_lowest_index() -> None:
    """A point equidistant to two centroids joins the first."""
    model: KMeansClassifier = KMeansClassifier(2)
    model.set_centroids(np.array([[0.0, 0.0], [2.0, 0.0]]))
    assert model.predict(np.array([[1.0, 0.0]])).tolist() == [0]


def test_inertia() -> None:
    """Inertia sums squared distances to the nearest centroid."""
    model: KMeansClassifier = KMeansClassifier(2)
    model.set_centroids(np.array([[0.0, 0.0], [10.0, 0.0]]))
    inputs: NDArray[np.float64] = np.array([[1.0, 0.0], [10.0, 2.0]])
    assert np.isclose(model.inertia(inputs), 5.0)


def test_from_params() -> None:
    """Configuration selects the initializer by name."""
    model: KMeansClassifier = KMeansClassifier.from_params(
        KMeansParams(k=3, iters=7, init="forgy")
    )
    assert model.k == 3
    assert model.iters == 7
    assert isinstance(model.init, Forgy)
    assert isinstance(initializer_from_name("random_partition"), RandomPartition)
    with pytest.raises(KMeansError):
        initializer_from_name("spectral")


def test_invalid_usage() -> None:
    """Bad settings, too few samples and untrained use are rejected."""
    with pytest.raises(KMeansError):
        KMeansClassifier(0)
    with pytest.raises(KMeansError):
        KMeansClassifier(3).train(np.ones((2, 2)))
    with pytest.raises(KMeansError):
        KMeansClassifier(2).set_centroids(np.ones((3, 2)))
    with pytest.raises(ModelNotTrainedError):
        KMeansClassifier(2).predict(np.ones((1, 2)))


class _FixedCentroids(Initializer):
    """Start from a fixed set of centroids."""

    name = "fixed"

    def __init__(self, centroids: NDArray[np.float64]) -> None:
        self._centroids: NDArray[np.float64] = centroids

    def init_centroids(
        self, k: int, inputs: NDArray[np.float64], rng: np.random.Generator
    ) -> NDArray[np.float64]:
        return self._centroids.copy()


def test_empty_cluster_keeps_its_centroid() -> None:
    """A centroid that attracts no samples stays where it started."""
    start: NDArray[np.float64] = np.array([[-1.0, 0.0], [1.0, 0.0], [1e3, 1e3]])
    inputs: NDArray[np.float64] = np.array(
        [[-5.0, 0.0], [-4.0, 0.0], [4.0, 0.0], [5.0, 0.0]]
    )
    model: KMeansClassifier = KMeansClassifier(3, init=_FixedCentroids(start))
    model.train(inputs)

    centroids = model.centroids
    assert centroids is not None
    assert np.array_equal(centroids[2], start[2])
    assert np.allclose(centroids[0], [-4.5, 0.0])
    assert np.allclose(centroids[1], [4.5, 0.0])
    assert model.predict(inputs).tolist() == [0, 0, 1, 1]
