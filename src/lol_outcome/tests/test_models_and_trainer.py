import os

import joblib
import numpy as np
import pytest
from lightgbm import LGBMClassifier
from sklearn.ensemble import RandomForestClassifier
from sklearn.linear_model import LogisticRegression
from sklearn.tree import DecisionTreeClassifier

from lol_outcome.cleaner import DataCleaner
from lol_outcome.model_trainer import ModelTrainer
from lol_outcome.models import MODEL_BUILDERS, build_model, make_pipeline


@pytest.fixture
def train_xy(snapshots):
    df = DataCleaner().transform(snapshots)
    return df.drop(columns=["blueWins"]), df["blueWins"].to_numpy()


def test_registry_covers_the_four_classifiers():
    assert set(MODEL_BUILDERS) == {
        "logistic_regression", "decision_tree", "random_forest", "boosted_tree"
    }
    assert isinstance(build_model("logistic_regression"), LogisticRegression)
    assert isinstance(build_model("decision_tree"), DecisionTreeClassifier)
    assert isinstance(build_model("random_forest"), RandomForestClassifier)
    assert isinstance(build_model("boosted_tree"), LGBMClassifier)


def test_build_model_applies_params_and_seed():
    model = build_model("decision_tree", {"max_depth": 3}, random_state=7)
    assert model.max_depth == 3
    assert model.random_state == 7


def test_build_model_unknown_name_raises():
    with pytest.raises(ValueError):
        build_model("svm")


def test_logistic_pipeline_scales_but_trees_do_not(train_xy):
    X, _ = train_xy
    lr = make_pipeline("logistic_regression", X)
    tree = make_pipeline("decision_tree", X)

    lr_num = lr.named_steps["recipe"].named_steps["columns"].transformers[0][1]
    tree_num = tree.named_steps["recipe"].named_steps["columns"].transformers[0][1]
    assert "scaler" in lr_num.named_steps
    assert "scaler" not in tree_num.named_steps


def test_cross_validate_returns_one_row_per_fold(train_xy):
    X, y = train_xy
    trainer = ModelTrainer(n_splits=3, n_repeats=2, random_state=0)
    pipeline = make_pipeline("decision_tree", X, {"max_depth": 3})

    scores = trainer.cross_validate(pipeline, X, y)

    assert list(scores.columns) == ["repeat", "fold", "accuracy", "roc_auc"]
    assert len(scores) == 6
    assert sorted(scores["repeat"].unique()) == [1, 2]
    assert scores[["accuracy", "roc_auc"]].apply(lambda s: s.between(0, 1)).all().all()


def test_cross_validate_does_not_fit_the_given_pipeline(train_xy):
    X, y = train_xy
    trainer = ModelTrainer(n_splits=3, n_repeats=1)
    pipeline = make_pipeline("decision_tree", X)
    trainer.cross_validate(pipeline, X, y)
    assert not hasattr(pipeline.named_steps["model"], "tree_")


def test_predict_before_fit_raises(train_xy):
    X, _ = train_xy
    with pytest.raises(RuntimeError):
        ModelTrainer().predict_proba(X)


def test_fit_final_saves_model_and_predicts(tmp_path, train_xy):
    X, y = train_xy
    model_path = tmp_path / "artifacts" / "model.joblib"
    trainer = ModelTrainer()
    trainer.fit_final(
        make_pipeline("logistic_regression", X, {"C": 1.0}), X, y, model_path=str(model_path)
    )

    assert os.path.exists(model_path)
    proba = trainer.predict_proba(X)
    assert proba.shape == (len(X),)
    assert ((proba >= 0) & (proba <= 1)).all()
    assert set(np.unique(trainer.predict(X))).issubset({0, 1})

    reloaded = joblib.load(model_path)
    np.testing.assert_allclose(reloaded.predict_proba(X)[:, 1], proba)


def test_logistic_regression_is_elastic_net():
    model = build_model("logistic_regression", {"C": 0.1, "l1_ratio": 0.25})
    assert model.penalty == "elasticnet"
    assert model.solver == "saga"
    assert model.l1_ratio == 0.25
    assert model.C == 0.1
