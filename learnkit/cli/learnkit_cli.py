################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""
Command line entry point for training models and predicting with them
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from learnkit.config.learning_params import LearningParams
from learnkit.config.learning_params import LearningParamsError
from learnkit.config.params_file import load_params
from learnkit.learning.base import LearningError
from learnkit.learning.base import SupModel
from learnkit.learning.gp import GaussianProcess
from learnkit.learning.k_means import KMeansClassifier
from learnkit.learning.lin_reg import LinRegressor
from learnkit.learning.logistic_reg import LogisticRegressor
from learnkit.learning.nnet import NeuralNet
from learnkit.learning.svm import SVM
from learnkit.linalg.matrix_utils import MatrixShapeError
from learnkit.optim.grad_desc import GradientDesc
from learnkit.optim.grad_desc import StochasticGD
from learnkit.optim.optimizable import OptimError
from learnkit.storage.model_snapshot import Model
from learnkit.storage.model_snapshot import ModelSnapshotError
from learnkit.storage.persistence import ModelPersistenceError
from learnkit.storage.persistence import load_model
from learnkit.storage.persistence import save_model
from learnkit.toolkit.kernel import KernelError


_LOG: logging.Logger = logging.getLogger(__name__)

MODEL_CHOICES: tuple[str, ...] = ("linreg", "logreg", "kmeans", "nnet", "gp", "svm")

# Errors reported to the user rather than raised
_CLI_ERRORS: tuple[type[Exception], ...] = (
    LearningError,
    LearningParamsError,
    MatrixShapeError,
    ModelPersistenceError,
    ModelSnapshotError,
    KernelError,
    OptimError,
    OSError,
)


################################################################################
# Argument parsing
################################################################################


def _parse_args(args: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="learnkit", description="Train models and predict with them"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    train = subparsers.add_parser("train", help="Train a model and save it")
    train.add_argument("--model", choices=MODEL_CHOICES, required=True)
    train.add_argument("--inputs", required=True, help="CSV file of inputs")
    train.add_argument(
        "--targets",
        help="CSV file of targets (required for supervised models)",
    )
    train.add_argument("--output", required=True, help="YAML file for the model")
    train.add_argument("--config", help="YAML file of parameter overrides")

    predict = subparsers.add_parser("predict", help="Predict with a saved model")
    predict.add_argument("--model-file", required=True, help="Saved YAML model")
    predict.add_argument("--inputs", required=True, help="CSV file of inputs")
    predict.add_argument(
        "--output",
        help="CSV file for predictions (printed to stdout when omitted)",
    )

    return parser.parse_args(args=args)


################################################################################
# Commands
################################################################################


def read_csv(path: str) -> NDArray[np.float64]:
    """Read a comma separated numeric file as a 2D matrix."""
    try:
        return np.loadtxt(path, delimiter=",", ndmin=2, dtype=np.float64)
    except ValueError as exc:
        raise LearningError(f"{path} is not a numeric CSV file: {exc}") from exc


def build_model(name: str, params: LearningParams) -> Model:
    """Create an untrained model from its command line name."""
    rng: np.random.Generator = params.random.rng()
    if name == "linreg":
        return LinRegressor()
    if name == "logreg":
        return LogisticRegressor(GradientDesc.from_params(params.grad_desc))
    if name == "kmeans":
        return KMeansClassifier.from_params(params.k_means, rng=rng)
    if name == "nnet":
        return NeuralNet.from_params(
            params.nnet,
            gd=StochasticGD.from_params(params.sgd, rng=rng),
            rng=rng,
        )
    if name == "gp":
        return GaussianProcess.from_params(params.gp)
    if name == "svm":
        return SVM.from_params(params.svm, rng=rng)
    raise LearningError(f"Unknown model: {name}")


def _targets_for(model: Model, targets: NDArray[np.float64]) -> NDArray[np.float64]:
    if isinstance(model, NeuralNet):
        return targets
    if targets.shape[1] != 1:
        raise LearningError("targets must have a single column")
    return targets[:, 0]


def run_train(options: argparse.Namespace) -> None:
    params: LearningParams = (
        load_params(options.config) if options.config else LearningParams.defaults()
    )
    params.validate()

    model: Model = build_model(options.model, params)
    inputs: NDArray[np.float64] = read_csv(options.inputs)
    if isinstance(model, SupModel):
        if not options.targets:
            raise LearningError(f"--targets is required for {options.model}")
        model.train(inputs, _targets_for(model, read_csv(options.targets)))
    else:
        model.train(inputs)

    save_model(options.output, model)
    _LOG.info("Trained %s on %d samples", options.model, inputs.shape[0])


def run_predict(options: argparse.Namespace) -> None:
    model: Model = load_model(options.model_file)
    predictions: NDArray[np.float64] = np.asarray(
        model.predict(read_csv(options.inputs)), dtype=np.float64
    )
    if predictions.ndim == 1:
        predictions = predictions.reshape(-1, 1)
    if options.output:
        np.savetxt(options.output, predictions, delimiter=",")
    else:
        np.savetxt(sys.stdout, predictions, delimiter=",")


################################################################################
# Entry point
################################################################################


def main(args: Optional[list[str]] = None) -> int:
    options: argparse.Namespace = _parse_args(args=args)

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if options.command == "train":
            run_train(options)
        else:
            run_predict(options)
    except _CLI_ERRORS as exc:
        _LOG.error("%s failed: %s", options.command, exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
