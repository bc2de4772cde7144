################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Feed-forward neural networks.

Networks are described by their layer sizes, from the input layer through
the hidden layers to the output layer. All weights live in one flat
vector: layer ``i`` contributes a ``(layer_sizes[i] + 1) x
layer_sizes[i + 1]`` row-major block whose first row holds the bias
weights. Training optimizes the flat vector with the gradient from back
propagation.

A ``Criterion`` pairs the activation function applied at every layer
with the cost function scored at the output layer, in the manner of
Torch criterions. ``BCECriterion`` (sigmoid with cross entropy) suits
classification and ``MSECriterion`` (identity with squared error) suits
regression. Subclass ``Criterion`` to combine other functions.

Example::

    inputs = np.array([[1.0, 1.0, 1.0], [2.0, 2.0, 2.0], [3.0, 3.0, 3.0]])
    targets = np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])

    net = NeuralNet((3, 5, 3))
    net.train(inputs, targets)
    net.predict(np.array([[1.5, 1.5, 1.5]]))
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from learnkit.config.learning_params import NeuralNetParams
from learnkit.learning.base import LearningError
from learnkit.learning.base import SupModel
from learnkit.linalg.matrix_utils import add_bias_column
from learnkit.linalg.matrix_utils import as_column
from learnkit.linalg.matrix_utils import as_matrix
from learnkit.linalg.matrix_utils import ensure_cols
from learnkit.linalg.matrix_utils import ensure_rows_match
from learnkit.optim.grad_desc import StochasticGD
from learnkit.optim.optimizable import OptimAlgorithm
from learnkit.toolkit import activ_fn
from learnkit.toolkit import cost_fn


_LOG: logging.Logger = logging.getLogger(__name__)


class NeuralNetError(LearningError):
    """Raised when a neural network is misconfigured or given bad data."""


class Criterion:
    """Activation function and cost function used by a network."""

    name: str = ""
    activ: type[activ_fn.ActivationFunc] = activ_fn.ActivationFunc
    cost_func: type[cost_fn.CostFunc] = cost_fn.CostFunc

    def activate(self, mat: NDArray[np.float64]) -> NDArray[np.float64]:
        """Apply the activation function element-wise."""
        return self.activ.func(mat)

    def grad_activ(self, mat: NDArray[np.float64]) -> NDArray[np.float64]:
        """Apply the activation gradient element-wise."""
        return self.activ.func_grad(mat)

    def cost(self, outputs: NDArray[np.float64], targets: NDArray[np.float64]) -> float:
        """Return the scalar cost of the outputs."""
        return self.cost_func.cost(outputs, targets)

    def cost_grad(
        self, outputs: NDArray[np.float64], targets: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """Return the cost gradient with respect to the outputs."""
        return self.cost_func.grad_cost(outputs, targets)


class BCECriterion(Criterion):
    """Sigmoid activation with binary cross entropy."""

    name = "bce"
    activ = activ_fn.Sigmoid
    cost_func = cost_fn.CrossEntropyError


class MSECriterion(Criterion):
    """Linear activation with mean squared error."""

    name = "mse"
    activ = activ_fn.Linear
    cost_func = cost_fn.MeanSqError


_CRITERIA: dict[str, type[Criterion]] = {
    BCECriterion.name: BCECriterion,
    MSECriterion.name: MSECriterion,
}


def criterion_from_name(name: str) -> Criterion:
    """Return the criterion registered under name."""
    try:
        return _CRITERIA[name]()
    except KeyError as exc:
        raise NeuralNetError(f"Unknown criterion: {name}") from exc


def _layer_shapes(layer_sizes: tuple[int, ...]) -> list[tuple[int, int]]:
    return [
        (layer_sizes[idx] + 1, layer_sizes[idx + 1])
        for idx in range(len(layer_sizes) - 1)
    ]


class NeuralNet(SupModel):
    """Fully connected feed-forward neural network."""

    def __init__(
        self,
        layer_sizes: Sequence[int],
        criterion: Criterion | None = None,
        gd: OptimAlgorithm | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        sizes: tuple[int, ...] = tuple(layer_sizes)
        if len(sizes) < 2:
            raise NeuralNetError("layer_sizes needs an input and an output layer")
        for size in sizes:
            if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
                raise NeuralNetError("layer sizes must be ints")
            if size < 1:
                raise NeuralNetError("layer sizes must be positive")
        self.layer_sizes: tuple[int, ...] = tuple(int(size) for size in sizes)
        self.criterion: Criterion = (
            criterion if criterion is not None else BCECriterion()
        )
        self._rng: np.random.Generator = (
            rng if rng is not None else np.random.default_rng()
        )
        self.gd: OptimAlgorithm = gd if gd is not None else StochasticGD(rng=self._rng)

        self._shapes: list[tuple[int, int]] = _layer_shapes(self.layer_sizes)
        self._offsets: list[int] = [0]
        for rows, cols in self._shapes:
            self._offsets.append(self._offsets[-1] + rows * cols)
        self._weights: NDArray[np.float64] = self._create_weights()

    @classmethod
    def from_params(
        cls,
        params: NeuralNetParams,
        gd: OptimAlgorithm | None = None,
        rng: np.random.Generator | None = None,
    ) -> NeuralNet:
        """Create a network from configuration."""
        return cls(
            params.layer_sizes,
            criterion=criterion_from_name(params.criterion),
            gd=gd,
            rng=rng,
        )

    @property
    def num_weights(self) -> int:
        """Return the length of the flat weight vector."""
        return self._offsets[-1]

    @property
    def weights(self) -> NDArray[np.float64]:
        """Return a copy of the flat weight vector."""
        return self._weights.copy()

    def set_weights(self, weights: NDArray[np.float64]) -> None:
        """Replace the flat weight vector."""
        flat: NDArray[np.float64] = np.asarray(weights, dtype=np.float64).reshape(-1)
        if flat.shape[0] != self.num_weights:
            raise NeuralNetError(
                f"expected {self.num_weights} weights, got {flat.shape[0]}"
            )
        if not np.all(np.isfinite(flat)):
            raise NeuralNetError("weights must be finite")
        self._weights = flat.copy()

    def _create_weights(self) -> NDArray[np.float64]:
        """Draw uniform weights in [-eps, eps], eps = sqrt(6 / (l_in + l_out))."""
        blocks: list[NDArray[np.float64]] = []
        for l_in, l_out in self._shapes:
            eps_init: float = float(np.sqrt(6.0 / float(l_in + l_out)))
            blocks.append(self._rng.uniform(-eps_init, eps_init, size=l_in * l_out))
        return np.concatenate(blocks)

    def _layer_weights(
        self, weights: NDArray[np.float64], idx: int
    ) -> NDArray[np.float64]:
        if idx < 0 or idx >= len(self._shapes):
            raise NeuralNetError(
                f"layer index {idx} out of range for {len(self._shapes)} weight layers"
            )
        if weights.shape[0] != self.num_weights:
            raise NeuralNetError(
                f"expected {self.num_weights} weights, got {weights.shape[0]}"
            )
        start: int = self._offsets[idx]
        stop: int = self._offsets[idx + 1]
        return weights[start:stop].reshape(self._shapes[idx])

    def get_net_weights(self, idx: int) -> NDArray[np.float64]:
        """Return the weight matrix from layer idx to layer idx + 1.

        The first row holds the bias weights.
        """
        return self._layer_weights(self._weights, idx).copy()

    def compute_grad(
        self,
        params: NDArray[np.float64],
        inputs: NDArray[np.float64],
        targets: NDArray[np.float64],
    ) -> tuple[float, NDArray[np.float64]]:
        """Return the cost and its gradient using back propagation."""
        ensure_cols(inputs, self.layer_sizes[0], "inputs")
        targets_mat: NDArray[np.float64] = as_column(targets)
        n_layers: int = len(self.layer_sizes)
        n_rows: float = float(inputs.shape[0])

        # Forward propagation
        activations: list[NDArray[np.float64]] = [add_bias_column(inputs)]
        weighted: list[NDArray[np.float64]] = []
        for layer in range(n_layers - 1):
            W: NDArray[np.float64] = self._layer_weights(params, layer)
            z: NDArray[np.float64] = activations[layer] @ W
            weighted.append(z)
            if layer < n_layers - 2:
                activations.append(add_bias_column(self.criterion.activate(z)))
        outputs: NDArray[np.float64] = self.criterion.activate(weighted[-1])

        # Back propagation, bias rows carry no error backwards
        deltas: list[NDArray[np.float64]] = [np.empty(0)] * (n_layers - 1)
        deltas[-1] = self.criterion.cost_grad(
            outputs, targets_mat
        ) * self.criterion.grad_activ(weighted[-1])
        for layer in range(n_layers - 3, -1, -1):
            forward: NDArray[np.float64] = self._layer_weights(params, layer + 1)[1:]
            deltas[layer] = (deltas[layer + 1] @ forward.T) * (
                self.criterion.grad_activ(weighted[layer])
            )

        gradients: list[NDArray[np.float64]] = [
            (activations[layer].T @ deltas[layer]).reshape(-1) / n_rows
            for layer in range(n_layers - 1)
        ]
        cost: float = self.criterion.cost(outputs, targets_mat)
        return cost, np.concatenate(gradients)

    def _forward_prop(
        self, weights: NDArray[np.float64], inputs: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        ensure_cols(inputs, self.layer_sizes[0], "inputs")
        a: NDArray[np.float64] = inputs
        for layer in range(len(self.layer_sizes) - 1):
            a = self.criterion.activate(
                add_bias_column(a) @ self._layer_weights(weights, layer)
            )
        return a

    def train(self, inputs: NDArray[np.float64], targets: NDArray[np.float64]) -> None:
        """Fit the weights with the configured optimizer."""
        X: NDArray[np.float64] = as_matrix(inputs, "inputs")
        T: NDArray[np.float64] = as_matrix(as_column(targets), "targets")
        ensure_rows_match(X, T)
        ensure_cols(X, self.layer_sizes[0], "inputs")
        ensure_cols(T, self.layer_sizes[-1], "targets")
        self._weights = self.gd.optimize(self, self._weights, X, T)
        if self.gd.last_report is not None:
            _LOG.info(
                "Neural network %s trained, cost %.6g -> %.6g",
                self.layer_sizes,
                self.gd.last_report.initial_cost,
                self.gd.last_report.final_cost,
            )

    def predict(self, inputs: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return the output layer activations for each row."""
        X: NDArray[np.float64] = as_matrix(inputs, "inputs")
        return self._forward_prop(self._weights, X)
