################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for learning parameter configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import numpy as np
import pytest

from learnkit.config.learning_params import GRAD_DESC_ALPHA
from learnkit.config.learning_params import LearningParams
from learnkit.config.learning_params import LearningParamsError
from learnkit.config.learning_params import SgdParams
from learnkit.config.params_file import load_params


def test_defaults_validate() -> None:
    """The default tree passes validation."""
    params: LearningParams = LearningParams.defaults()
    params.validate()
    assert params.grad_desc.alpha == GRAD_DESC_ALPHA
    assert params.nnet.layer_sizes == (2, 3, 1)


def test_from_dict_overrides_single_keys() -> None:
    """Overrides replace only the named keys."""
    params: LearningParams = LearningParams.from_dict(
        {"sgd": {"alpha": 0.05}, "nnet": {"layer_sizes": [4, 8, 2]}}
    )
    assert params.sgd.alpha == 0.05
    assert params.sgd.mu == SgdParams().mu
    assert params.nnet.layer_sizes == (4, 8, 2)


@pytest.mark.parametrize(
    "data",
    [
        {"unknown": {}},
        {"sgd": {"momentum": 0.5}},
        {"sgd": 0.5},
        {"sgd": {"mu": 1.0}},
        {"grad_desc": {"alpha": -0.1}},
        {"grad_desc": {"iters": 2.5}},
        {"k_means": {"init": "spectral"}},
        {"nnet": {"layer_sizes": [3]}},
        {"nnet": {"criterion": "hinge"}},
        {"gp": {"noise": -1.0}},
        {"svm": {"lambda_": 0.0}},
        {"random": {"seed": -1}},
        {"grad_desc": {"alpha": "fast"}},
        {"sgd": {"mu": True}},
        {"gp": {"noise": "low"}},
        {"gp": {"length_scale": None}},
        {"k_means": {"init": ["forgy"]}},
        {"nnet": {"criterion": ["bce"]}},
        {"nnet": {"layer_sizes": 3}},
    ],
)
def test_from_dict_rejects_invalid(data: dict[str, Any]) -> None:
    """Unknown names and out of range values raise LearningParamsError."""
    with pytest.raises(LearningParamsError):
        LearningParams.from_dict(data)


def test_as_nested_dict_feeds_from_dict() -> None:
    """The nested dict form is accepted by from_dict."""
    params: LearningParams = LearningParams.defaults().replace(
        sgd=SgdParams(alpha=0.2, mu=0.3, iters=4)
    )
    nested: dict[str, Any] = params.as_nested_dict()
    assert nested["nnet"]["layer_sizes"] == [2, 3, 1]
    assert LearningParams.from_dict(nested) == params


def test_random_seed_makes_generators_repeatable() -> None:
    """A fixed seed produces identical draws."""
    params: LearningParams = LearningParams.from_dict({"random": {"seed": 11}})
    first: np.ndarray = params.random.rng().normal(size=3)
    second: np.ndarray = params.random.rng().normal(size=3)
    assert np.array_equal(first, second)


def test_load_params_reads_yaml(tmp_path: Path) -> None:
    """YAML files override the defaults."""
    path: Path = tmp_path / "params.yaml"
    path.write_text("k_means:\n  k: 4\n  init: forgy\n", encoding="utf-8")
    params: LearningParams = load_params(path)
    assert params.k_means.k == 4
    assert params.k_means.init == "forgy"


def test_load_params_empty_file_gives_defaults(tmp_path: Path) -> None:
    """An empty file yields the default tree."""
    path: Path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_params(path) == LearningParams.defaults()


def test_load_params_errors(tmp_path: Path) -> None:
    """Missing files, bad YAML and non-mappings raise LearningParamsError."""
    with pytest.raises(LearningParamsError):
        load_params(tmp_path / "missing.yaml")

    bad: Path = tmp_path / "bad.yaml"
    bad.write_text("sgd: [unclosed\n", encoding="utf-8")
    with pytest.raises(LearningParamsError):
        load_params(bad)

    listing: Path = tmp_path / "list.yaml"
    listing.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(LearningParamsError):
        load_params(listing)
