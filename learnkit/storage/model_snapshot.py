################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Conversion between trained models and YAML snapshots."""

from __future__ import annotations

from typing import Any
from typing import Union

import numpy as np

from learnkit.learning.base import LearningError
from learnkit.learning.base import ModelNotTrainedError
from learnkit.learning.gp import ConstMean
from learnkit.learning.gp import GaussianProcess
from learnkit.learning.k_means import KMeansClassifier
from learnkit.learning.k_means import initializer_from_name
from learnkit.learning.lin_reg import LinRegressor
from learnkit.learning.logistic_reg import LogisticRegressor
from learnkit.learning.nnet import NeuralNet
from learnkit.learning.nnet import criterion_from_name
from learnkit.learning.svm import SVM
from learnkit.storage.yaml_format import ModelSnapshotYaml
from learnkit.storage.yaml_format import ModelYamlError
from learnkit.toolkit.kernel import KernelError
from learnkit.toolkit.kernel import kernel_from_dict


Model = Union[
    LinRegressor,
    LogisticRegressor,
    KMeansClassifier,
    NeuralNet,
    GaussianProcess,
    SVM,
]


class ModelSnapshotError(Exception):
    """Raised when a model cannot be converted to or from a snapshot."""


def snapshot_model(model: Model) -> ModelSnapshotYaml:
    """Return a snapshot of a trained model."""
    if isinstance(model, LinRegressor):
        return ModelSnapshotYaml(
            model="lin_reg",
            arrays={"parameters": _trained(model.parameters)},
        )
    if isinstance(model, LogisticRegressor):
        return ModelSnapshotYaml(
            model="logistic_reg",
            arrays={"parameters": _trained(model.parameters)},
        )
    if isinstance(model, KMeansClassifier):
        return ModelSnapshotYaml(
            model="k_means",
            hyper={"k": model.k, "iters": model.iters, "init": model.init.name},
            arrays={"centroids": _trained(model.centroids)},
        )
    if isinstance(model, NeuralNet):
        if not model.criterion.name:
            raise ModelSnapshotError("custom criteria cannot be snapshotted")
        return ModelSnapshotYaml(
            model="nnet",
            hyper={
                "layer_sizes": list(model.layer_sizes),
                "criterion": model.criterion.name,
            },
            arrays={"weights": model.weights},
        )
    if isinstance(model, GaussianProcess):
        if not isinstance(model.mean, ConstMean):
            raise ModelSnapshotError("only constant means can be snapshotted")
        return ModelSnapshotYaml(
            model="gp",
            hyper={
                "kernel": _kernel_hyper(model),
                "mean": model.mean.a,
                "noise": model.noise,
            },
            arrays={
                "train_inputs": _trained(model.train_inputs),
                "train_targets": _trained(model.train_targets),
            },
        )
    if isinstance(model, SVM):
        return ModelSnapshotYaml(
            model="svm",
            hyper={
                "kernel": _kernel_hyper(model),
                "lambda_": model.lambda_,
                "iters": model.iters,
            },
            arrays={
                "alpha": _trained(model.alpha),
                "train_inputs": _trained(model.train_inputs),
                "train_targets": _trained(model.train_targets),
            },
        )
    raise ModelSnapshotError(f"Unsupported model type: {type(model).__name__}")


def restore_model(snapshot: ModelSnapshotYaml) -> Model:
    """Rebuild a trained model from a snapshot."""
    hyper: dict[str, Any] = snapshot.hyper
    try:
        if snapshot.model == "lin_reg":
            lin_reg: LinRegressor = LinRegressor()
            lin_reg.set_parameters(snapshot.array("parameters"))
            return lin_reg
        if snapshot.model == "logistic_reg":
            logistic_reg: LogisticRegressor = LogisticRegressor()
            logistic_reg.set_parameters(snapshot.array("parameters"))
            return logistic_reg
        if snapshot.model == "k_means":
            k_means: KMeansClassifier = KMeansClassifier(
                k=int(hyper["k"]),
                iters=int(hyper["iters"]),
                init=initializer_from_name(str(hyper["init"])),
            )
            k_means.set_centroids(snapshot.array("centroids"))
            return k_means
        if snapshot.model == "nnet":
            nnet: NeuralNet = NeuralNet(
                [int(size) for size in hyper["layer_sizes"]],
                criterion=criterion_from_name(str(hyper["criterion"])),
            )
            nnet.set_weights(snapshot.array("weights"))
            return nnet
        if snapshot.model == "gp":
            gp: GaussianProcess = GaussianProcess(
                kernel=kernel_from_dict(hyper["kernel"]),
                mean=ConstMean(float(hyper["mean"])),
                noise=float(hyper["noise"]),
            )
            gp.train(snapshot.array("train_inputs"), snapshot.array("train_targets"))
            return gp
        if snapshot.model == "svm":
            svm: SVM = SVM(
                kernel=kernel_from_dict(hyper["kernel"]),
                lambda_=float(hyper["lambda_"]),
                iters=int(hyper["iters"]),
            )
            svm.set_state(
                snapshot.array("alpha"),
                snapshot.array("train_inputs"),
                snapshot.array("train_targets"),
            )
            return svm
    except (
        KeyError,
        TypeError,
        ValueError,
        KernelError,
        LearningError,
        ModelYamlError,
    ) as exc:
        raise ModelSnapshotError(
            f"Invalid {snapshot.model} snapshot: {exc}"
        ) from exc
    raise ModelSnapshotError(f"Unsupported model kind: {snapshot.model}")


def _trained(value: np.ndarray | None) -> np.ndarray:
    if value is None:
        raise ModelNotTrainedError("Model has not been trained")
    return value


def _kernel_hyper(model: GaussianProcess | SVM) -> dict[str, Any]:
    try:
        return model.kernel.hyper_parameters()
    except NotImplementedError as exc:
        raise ModelSnapshotError("custom kernels cannot be snapshotted") from exc
