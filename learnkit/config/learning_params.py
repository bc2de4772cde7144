################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Structured configuration schema for model training."""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from dataclasses import fields
from dataclasses import replace
from typing import Any

import numpy as np


# Gradient descent step size
GRAD_DESC_ALPHA: float = 0.3
# Gradient descent iteration budget
GRAD_DESC_ITERS: int = 100

# Stochastic gradient descent step size
SGD_ALPHA: float = 0.1
# Stochastic gradient descent momentum
SGD_MU: float = 0.1
# Stochastic gradient descent epoch budget
SGD_ITERS: int = 20

# Number of k-means clusters
K_MEANS_K: int = 2
# Maximum number of Lloyd iterations
K_MEANS_ITERS: int = 100
# Centroid initialization algorithm
K_MEANS_INIT: str = "kplusplus"

# Neural network layer sizes, input to output
NNET_LAYER_SIZES: tuple[int, ...] = (2, 3, 1)
# Neural network criterion identifier
NNET_CRITERION: str = "bce"

# Gaussian process observation noise variance
GP_NOISE: float = 0.0
# Squared exponential length scale
GP_LENGTH_SCALE: float = 1.0
# Squared exponential amplitude
GP_AMPLITUDE: float = 1.0

# SVM regularization strength
SVM_LAMBDA: float = 0.3
# SVM Pegasos iteration budget
SVM_ITERS: int = 100

# Seed for random number generation (None draws fresh entropy)
RANDOM_SEED: int | None = None

K_MEANS_INIT_NAMES: frozenset[str] = frozenset(
    {"forgy", "random_partition", "kplusplus"}
)
NNET_CRITERION_NAMES: frozenset[str] = frozenset({"bce", "mse"})


class LearningParamsError(Exception):
    """Raised when learning parameter validation fails."""


def _require_real(value: float, name: str) -> None:
    """Require a real number, rejecting bools and strings."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise LearningParamsError(f"{name} must be a number")


def _require_positive(value: float, name: str) -> None:
    """Require a positive finite value."""
    _require_real(value, name)
    if not np.isfinite(value) or value <= 0.0:
        raise LearningParamsError(f"{name} must be positive")


def _require_non_negative(value: float, name: str) -> None:
    """Require a non-negative finite value."""
    _require_real(value, name)
    if not np.isfinite(value) or value < 0.0:
        raise LearningParamsError(f"{name} must be non-negative")


def _require_positive_int(value: int, name: str) -> None:
    """Require a positive integer."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise LearningParamsError(f"{name} must be an int")
    if value <= 0:
        raise LearningParamsError(f"{name} must be positive")


def _require_str(value: str, name: str) -> None:
    """Require a string value."""
    if not isinstance(value, str):
        raise LearningParamsError(f"{name} must be a string")


@dataclass(frozen=True)
class GradDescParams:
    """Batch gradient descent settings."""

    # Step size
    alpha: float = GRAD_DESC_ALPHA
    # Iteration budget
    iters: int = GRAD_DESC_ITERS


@dataclass(frozen=True)
class SgdParams:
    """Stochastic gradient descent settings."""

    # Step size
    alpha: float = SGD_ALPHA
    # Momentum coefficient in [0, 1)
    mu: float = SGD_MU
    # Epoch budget
    iters: int = SGD_ITERS


@dataclass(frozen=True)
class KMeansParams:
    """K-means clustering settings."""

    # Number of clusters
    k: int = K_MEANS_K
    # Maximum number of Lloyd iterations
    iters: int = K_MEANS_ITERS
    # Initialization algorithm name
    init: str = K_MEANS_INIT


@dataclass(frozen=True)
class NeuralNetParams:
    """Feed-forward neural network settings."""

    # Layer sizes including input and output layers
    layer_sizes: tuple[int, ...] = NNET_LAYER_SIZES
    # Criterion name
    criterion: str = NNET_CRITERION

    def __post_init__(self) -> None:
        """Coerce layer sizes into a tuple."""
        object.__setattr__(self, "layer_sizes", tuple(self.layer_sizes))


@dataclass(frozen=True)
class GaussianProcessParams:
    """Gaussian process regression settings."""

    # Observation noise variance
    noise: float = GP_NOISE
    # Squared exponential length scale
    length_scale: float = GP_LENGTH_SCALE
    # Squared exponential amplitude
    amplitude: float = GP_AMPLITUDE


@dataclass(frozen=True)
class SvmParams:
    """Support vector machine settings."""

    # Regularization strength
    lambda_: float = SVM_LAMBDA
    # Pegasos iteration budget
    iters: int = SVM_ITERS


@dataclass(frozen=True)
class RandomParams:
    """Random number generation settings."""

    # Seed, or None for fresh entropy
    seed: int | None = RANDOM_SEED

    def rng(self) -> np.random.Generator:
        """Return a generator seeded from this configuration."""
        return np.random.default_rng(self.seed)


@dataclass(frozen=True)
class LearningParams:
    """Complete configuration tree for model training."""

    grad_desc: GradDescParams
    sgd: SgdParams
    k_means: KMeansParams
    nnet: NeuralNetParams
    gp: GaussianProcessParams
    svm: SvmParams
    random: RandomParams

    @classmethod
    def defaults(cls) -> LearningParams:
        """Return the default parameter tree."""
        return cls(
            grad_desc=GradDescParams(),
            sgd=SgdParams(),
            k_means=KMeansParams(),
            nnet=NeuralNetParams(),
            gp=GaussianProcessParams(),
            svm=SvmParams(),
            random=RandomParams(),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LearningParams:
        """Return defaults overridden by a nested mapping, then validate."""
        if not isinstance(data, dict):
            raise LearningParamsError("configuration must be a mapping")
        params: LearningParams = cls.defaults()
        overrides: dict[str, Any] = {}
        for namespace, values in data.items():
            if namespace not in _NAMESPACES:
                raise LearningParamsError(f"Unknown namespace: {namespace}")
            if not isinstance(values, dict):
                raise LearningParamsError(f"{namespace} must be a mapping")
            current: Any = getattr(params, namespace)
            known: set[str] = {field.name for field in fields(current)}
            unknown: set[str] = set(values) - known
            if unknown:
                raise LearningParamsError(
                    f"Unknown keys in {namespace}: {sorted(unknown)}"
                )
            try:
                overrides[namespace] = replace(current, **values)
            except TypeError as exc:
                raise LearningParamsError(str(exc)) from exc
        result: LearningParams = params.replace(**overrides)
        result.validate()
        return result

    def validate(self) -> None:
        """Validate parameter invariants and constraints."""
        _require_positive(self.grad_desc.alpha, "grad_desc.alpha")
        _require_positive_int(self.grad_desc.iters, "grad_desc.iters")

        _require_positive(self.sgd.alpha, "sgd.alpha")
        _require_non_negative(self.sgd.mu, "sgd.mu")
        if self.sgd.mu >= 1.0:
            raise LearningParamsError("sgd.mu must be less than 1")
        _require_positive_int(self.sgd.iters, "sgd.iters")

        _require_positive_int(self.k_means.k, "k_means.k")
        _require_positive_int(self.k_means.iters, "k_means.iters")
        _require_str(self.k_means.init, "k_means.init")
        if self.k_means.init not in K_MEANS_INIT_NAMES:
            raise LearningParamsError(
                "k_means.init must be forgy, random_partition, or kplusplus"
            )

        if len(self.nnet.layer_sizes) < 2:
            raise LearningParamsError("nnet.layer_sizes needs at least two layers")
        for size in self.nnet.layer_sizes:
            _require_positive_int(size, "nnet.layer_sizes")
        _require_str(self.nnet.criterion, "nnet.criterion")
        if self.nnet.criterion not in NNET_CRITERION_NAMES:
            raise LearningParamsError("nnet.criterion must be bce or mse")

        _require_non_negative(self.gp.noise, "gp.noise")
        _require_positive(self.gp.length_scale, "gp.length_scale")
        _require_positive(self.gp.amplitude, "gp.amplitude")

        _require_positive(self.svm.lambda_, "svm.lambda_")
        _require_positive_int(self.svm.iters, "svm.iters")

        if self.random.seed is not None:
            if isinstance(self.random.seed, bool) or not isinstance(
                self.random.seed, int
            ):
                raise LearningParamsError("random.seed must be an int or None")
            if self.random.seed < 0:
                raise LearningParamsError("random.seed must be non-negative")

    def replace(self, **namespace_overrides: Any) -> LearningParams:
        """Return a modified copy of the parameters."""
        return replace(self, **namespace_overrides)

    def as_nested_dict(self) -> dict[str, Any]:
        """Return a nested dict representation."""
        return _dataclass_to_dict(self)


_NAMESPACES: frozenset[str] = frozenset(
    field.name for field in fields(LearningParams)
)


def _dataclass_to_dict(value: Any) -> Any:
    """Convert dataclasses and tuples into plain Python values."""
    if hasattr(value, "__dataclass_fields__"):
        return {
            field.name: _dataclass_to_dict(getattr(value, field.name))
            for field in fields(value)
        }
    if isinstance(value, tuple):
        return list(value)
    return value
