import os
import warnings
from typing import Optional

import joblib
import numpy as np
import pandas as pd
from sklearn.base import clone
from sklearn.metrics import accuracy_score, roc_auc_score
from sklearn.model_selection import RepeatedStratifiedKFold
from sklearn.pipeline import Pipeline

from .utils.logger import get_logger


class ModelTrainer:
    """
    Repeated stratified k-fold harness for recipe + model pipelines.
    The recipe lives inside the pipeline, so it is refit on every training fold.

    Provides:
      - cross_validate: per-fold accuracy and ROC-AUC
      - fit_final: trains the chosen pipeline on the full training set and saves it
    """

    def __init__(
        self,
        n_splits: int = 5,
        n_repeats: int = 2,
        random_state: int = 42,
    ):
        self.n_splits = n_splits
        self.n_repeats = n_repeats
        self.random_state = random_state

        self.logger = get_logger(self.__class__.__name__)
        self.final_pipeline: Optional[Pipeline] = None

    def folds(self) -> RepeatedStratifiedKFold:
        return RepeatedStratifiedKFold(
            n_splits=self.n_splits,
            n_repeats=self.n_repeats,
            random_state=self.random_state,
        )

    def cross_validate(
        self,
        pipeline: Pipeline,
        X_df: pd.DataFrame,
        y: np.ndarray,
    ) -> pd.DataFrame:
        """
        Fit a fresh clone of ``pipeline`` on each training fold and score it on
        the matching validation fold. Returns one row per (repeat, fold).
        """
        warnings.filterwarnings("ignore", category=UserWarning, module="lightgbm")

        y = np.asarray(y).astype(int)
        rows = []

        for i, (train_idx, val_idx) in enumerate(self.folds().split(X_df, y)):
            repeat, fold = divmod(i, self.n_splits)

            model = clone(pipeline)
            model.fit(X_df.iloc[train_idx], y[train_idx])

            val_proba = model.predict_proba(X_df.iloc[val_idx])[:, 1]
            val_pred = (val_proba >= 0.5).astype(int)

            acc = accuracy_score(y[val_idx], val_pred)
            auc = roc_auc_score(y[val_idx], val_proba)
            rows.append(
                {
                    "repeat": repeat + 1,
                    "fold": fold + 1,
                    "accuracy": float(acc),
                    "roc_auc": float(auc),
                }
            )

            self.logger.info(
                f"Repeat {repeat + 1}/{self.n_repeats} fold {fold + 1}/{self.n_splits} "
                f"accuracy: {acc:.4f} ROC-AUC: {auc:.4f}"
            )

        return pd.DataFrame(rows, columns=["repeat", "fold", "accuracy", "roc_auc"])

    def fit_final(
        self,
        pipeline: Pipeline,
        X_df: pd.DataFrame,
        y: np.ndarray,
        model_path: Optional[str] = None,
    ) -> Pipeline:
        """Fit the pipeline on all training rows; save it if a path is given."""
        warnings.filterwarnings("ignore", category=UserWarning, module="lightgbm")

        y = np.asarray(y).astype(int)
        fitted = clone(pipeline)
        fitted.fit(X_df, y)
        self.final_pipeline = fitted

        if model_path:
            os.makedirs(os.path.dirname(model_path) or ".", exist_ok=True)
            joblib.dump(fitted, model_path)
            self.logger.info(f"Saved model: {model_path}")

        return fitted

    def predict_proba(self, X_df: pd.DataFrame) -> np.ndarray:
        """Positive-class probabilities from the final pipeline."""
        if self.final_pipeline is None:
            raise RuntimeError("Call fit_final() before predict_proba().")
        return self.final_pipeline.predict_proba(X_df)[:, 1]

    def predict(self, X_df: pd.DataFrame, threshold: float = 0.5) -> np.ndarray:
        return (self.predict_proba(X_df) >= threshold).astype(int)
