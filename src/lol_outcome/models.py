"""Model specifications for the four compared classifiers.

Each builder turns a flat parameter dict (one grid point) into an unfitted
estimator. ``make_pipeline`` prepends the feature recipe so that every fit,
including those inside cross-validation folds, learns its preprocessing from
training rows only.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

import pandas as pd
from lightgbm import LGBMClassifier
from sklearn.base import ClassifierMixin
from sklearn.ensemble import RandomForestClassifier
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline
from sklearn.tree import DecisionTreeClassifier

from .preprocessor import Preprocessor


def _logistic_regression(params: Dict[str, Any], random_state: int) -> LogisticRegression:
    # elastic net: C ~ 1 / penalty, l1_ratio ~ mixture
    kwargs = {"penalty": "elasticnet", "solver": "saga", "l1_ratio": 0.5, "max_iter": 5000}
    kwargs.update(params)
    return LogisticRegression(random_state=random_state, **kwargs)


def _decision_tree(params: Dict[str, Any], random_state: int) -> DecisionTreeClassifier:
    return DecisionTreeClassifier(random_state=random_state, **params)


def _random_forest(params: Dict[str, Any], random_state: int) -> RandomForestClassifier:
    kwargs = {"n_estimators": 500, "n_jobs": -1}
    kwargs.update(params)
    return RandomForestClassifier(random_state=random_state, **kwargs)


def _boosted_tree(params: Dict[str, Any], random_state: int) -> LGBMClassifier:
    kwargs = {"n_estimators": 200, "verbosity": -1, "n_jobs": -1}
    kwargs.update(params)
    return LGBMClassifier(random_state=random_state, **kwargs)


MODEL_BUILDERS: Dict[str, Callable[[Dict[str, Any], int], ClassifierMixin]] = {
    "logistic_regression": _logistic_regression,
    "decision_tree": _decision_tree,
    "random_forest": _random_forest,
    "boosted_tree": _boosted_tree,
}

# models whose recipe must standardize continuous inputs
SCALED_MODELS = {"logistic_regression"}


def build_model(
    name: str,
    params: Optional[Dict[str, Any]] = None,
    random_state: int = 42,
) -> ClassifierMixin:
    if name not in MODEL_BUILDERS:
        raise ValueError(
            f"Unknown model '{name}'. Expected one of {sorted(MODEL_BUILDERS)}"
        )
    return MODEL_BUILDERS[name](dict(params or {}), random_state)


def make_pipeline(
    name: str,
    X: pd.DataFrame,
    params: Optional[Dict[str, Any]] = None,
    preprocessing: Optional[Dict[str, Any]] = None,
    random_state: int = 42,
) -> Pipeline:
    """Recipe + model for ``name``; X is only used to detect column groups."""
    preprocessing = preprocessing or {}
    prep = Preprocessor(
        impute_strategy=preprocessing.get("impute_strategy", "median"),
        use_scaler=name in SCALED_MODELS or preprocessing.get("scale_trees", False),
        drop_zero_variance=preprocessing.get("drop_zero_variance", True),
    )
    return Pipeline(
        steps=[
            ("recipe", prep.build(X)),
            ("model", build_model(name, params, random_state)),
        ]
    )
