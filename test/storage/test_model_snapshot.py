################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for converting models to and from snapshots."""

from __future__ import annotations

from typing import Callable

import numpy as np
import pytest
from numpy.typing import NDArray

from learnkit.learning.base import ModelNotTrainedError
from learnkit.learning.gp import GaussianProcess
from learnkit.learning.k_means import KMeansClassifier
from learnkit.learning.lin_reg import LinRegressor
from learnkit.learning.logistic_reg import LogisticRegressor
from learnkit.learning.nnet import MSECriterion
from learnkit.learning.nnet import NeuralNet
from learnkit.learning.svm import SVM
from learnkit.optim.grad_desc import GradientDesc
from learnkit.storage.model_snapshot import Model
from learnkit.storage.model_snapshot import ModelSnapshotError
from learnkit.storage.model_snapshot import restore_model
from learnkit.storage.model_snapshot import snapshot_model
from learnkit.storage.yaml_format import ModelSnapshotYaml
from learnkit.storage.yaml_format import dumps_yaml
from learnkit.storage.yaml_format import loads_yaml
from learnkit.toolkit.kernel import Kernel
from learnkit.toolkit.kernel import Linear
from learnkit.toolkit.kernel import SquaredExp


INPUTS: NDArray[np.float64] = np.array(
    [[0.0, 1.0], [1.0, 0.5], [2.0, 2.0], [3.0, 1.5], [4.0, 3.0], [5.0, 2.0]]
)
QUERY: NDArray[np.float64] = np.array([[0.5, 0.5], [4.5, 2.5]])


def _lin_reg() -> Model:
    model: LinRegressor = LinRegressor()
    model.train(INPUTS, INPUTS[:, 0] - INPUTS[:, 1])
    return model


def _logistic_reg() -> Model:
    model: LogisticRegressor = LogisticRegressor()
    model.train(INPUTS, np.array([0.0, 0.0, 0.0, 1.0, 1.0, 1.0]))
    return model


def _k_means() -> Model:
    model: KMeansClassifier = KMeansClassifier(2, rng=np.random.default_rng(0))
    model.train(INPUTS)
    return model


def _nnet() -> Model:
    model: NeuralNet = NeuralNet(
        (2, 3, 1),
        criterion=MSECriterion(),
        gd=GradientDesc(alpha=0.01, iters=20),
        rng=np.random.default_rng(0),
    )
    model.train(INPUTS, 0.1 * INPUTS[:, 0])
    return model


def _gp() -> Model:
    model: GaussianProcess = GaussianProcess(
        kernel=SquaredExp(ls=2.0) + Linear(c=1.0), noise=0.1
    )
    model.train(INPUTS, np.sin(INPUTS[:, 0]))
    return model


def _svm() -> Model:
    model: SVM = SVM(iters=50, rng=np.random.default_rng(0))
    model.train(INPUTS, np.array([-1.0, -1.0, -1.0, 1.0, 1.0, 1.0]))
    return model


@pytest.mark.parametrize(
    "build", [_lin_reg, _logistic_reg, _k_means, _nnet, _gp, _svm]
)
def test_restored_models_predict_identically(build: Callable[[], Model]) -> None:
    """A model restored from YAML text predicts like the trained one."""
    model: Model = build()
    snapshot: ModelSnapshotYaml = loads_yaml(dumps_yaml(snapshot_model(model)))
    restored: Model = restore_model(snapshot)
    assert type(restored) is type(model)
    assert np.allclose(restored.predict(QUERY), model.predict(QUERY))


def test_hyper_parameters_are_recorded() -> None:
    """Snapshots carry the settings needed to rebuild the model."""
    snapshot: ModelSnapshotYaml = snapshot_model(_k_means())
    assert snapshot.model == "k_means"
    assert snapshot.hyper == {"k": 2, "iters": 100, "init": "kplusplus"}

    nnet_snapshot: ModelSnapshotYaml = snapshot_model(_nnet())
    assert nnet_snapshot.hyper == {"layer_sizes": [2, 3, 1], "criterion": "mse"}
    assert nnet_snapshot.array("weights").shape == (3 * 3 + 4 * 1,)


def test_untrained_models_cannot_be_snapshotted() -> None:
    """Models without learned state raise ModelNotTrainedError."""
    with pytest.raises(ModelNotTrainedError):
        snapshot_model(LinRegressor())
    with pytest.raises(ModelNotTrainedError):
        snapshot_model(SVM())


def test_custom_kernels_are_rejected() -> None:
    """Kernels without hyper-parameters cannot be written out."""

    class _Custom(Kernel):
        def gram(
            self, X1: NDArray[np.float64], X2: NDArray[np.float64]
        ) -> NDArray[np.float64]:
            return SquaredExp().gram(X1, X2)

    model: GaussianProcess = GaussianProcess(kernel=_Custom())
    model.train(INPUTS, INPUTS[:, 0])
    with pytest.raises(ModelSnapshotError):
        snapshot_model(model)


def test_unsupported_objects_are_rejected() -> None:
    """Only known model classes can be snapshotted."""
    with pytest.raises(ModelSnapshotError):
        snapshot_model(object())  # type: ignore[arg-type]


def test_inconsistent_snapshots_are_rejected() -> None:
    """Snapshots whose contents disagree raise ModelSnapshotError."""
    missing_hyper: ModelSnapshotYaml = ModelSnapshotYaml(
        model="k_means", arrays={"centroids": np.zeros((2, 2))}
    )
    with pytest.raises(ModelSnapshotError):
        restore_model(missing_hyper)

    wrong_weights: ModelSnapshotYaml = ModelSnapshotYaml(
        model="nnet",
        hyper={"layer_sizes": [2, 3, 1], "criterion": "mse"},
        arrays={"weights": np.zeros(5)},
    )
    with pytest.raises(ModelSnapshotError):
        restore_model(wrong_weights)

    bad_kernel: ModelSnapshotYaml = ModelSnapshotYaml(
        model="svm",
        hyper={"kernel": {"name": "periodic"}, "lambda_": 0.3, "iters": 10},
        arrays={
            "alpha": np.ones(2),
            "train_inputs": np.zeros((2, 2)),
            "train_targets": np.array([1.0, -1.0]),
        },
    )
    with pytest.raises(ModelSnapshotError):
        restore_model(bad_kernel)
