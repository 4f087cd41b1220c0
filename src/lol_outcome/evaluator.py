import json
import os
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score,
    balanced_accuracy_score,
    confusion_matrix,
    f1_score,
    precision_score,
    recall_score,
    roc_auc_score,
)
from sklearn.pipeline import Pipeline

from .utils.logger import get_logger


class Evaluator:
    """Score held-out predictions and rank the features of a fitted pipeline."""

    def __init__(self, metrics_path: Optional[str] = None, verbose: bool = True):
        self.metrics_path = metrics_path
        self.verbose = verbose
        self.logger = get_logger(self.__class__.__name__)

    def evaluate(
        self,
        y_true: np.ndarray,
        y_proba: np.ndarray,
        threshold: float = 0.5,
    ) -> Dict[str, Any]:
        """Compute metrics at ``threshold``; save JSON when metrics_path is set."""
        y_true = np.asarray(y_true).astype(int)
        y_proba = np.asarray(y_proba).astype(float)
        y_pred = (y_proba >= threshold).astype(int)

        tn, fp, fn, tp = confusion_matrix(y_true, y_pred, labels=[0, 1]).ravel()

        metrics: Dict[str, Any] = {
            "Accuracy": float(accuracy_score(y_true, y_pred)),
            "ROC_AUC": float(roc_auc_score(y_true, y_proba)),
            "Balanced_Accuracy": float(balanced_accuracy_score(y_true, y_pred)),
            "F1": float(f1_score(y_true, y_pred, zero_division=0)),
            "Precision": float(precision_score(y_true, y_pred, zero_division=0)),
            "Recall": float(recall_score(y_true, y_pred, zero_division=0)),
            "Threshold": float(threshold),
            "Confusion_Matrix": {
                "tn": int(tn), "fp": int(fp), "fn": int(fn), "tp": int(tp)
            },
        }

        if self.metrics_path:
            os.makedirs(os.path.dirname(self.metrics_path) or ".", exist_ok=True)
            with open(self.metrics_path, "w") as f:
                json.dump(metrics, f, indent=4)
            if self.verbose:
                self.logger.info(f"Saved metrics: {self.metrics_path}")

        return metrics

    def feature_importance(self, pipeline: Pipeline) -> pd.DataFrame:
        """
        Importance of each transformed feature, normalised to sum to one.
        Trees and boosting use ``feature_importances_``; linear models use the
        absolute coefficients of the standardized inputs.
        """
        model = pipeline.named_steps["model"]
        names = pipeline[:-1].get_feature_names_out()

        if hasattr(model, "feature_importances_"):
            raw = np.asarray(model.feature_importances_, dtype=float)
        elif hasattr(model, "coef_"):
            raw = np.abs(np.ravel(model.coef_)).astype(float)
        else:
            raise ValueError(
                f"{type(model).__name__} exposes neither feature_importances_ nor coef_"
            )

        total = raw.sum()
        importance = raw / total if total > 0 else raw

        ranking = pd.DataFrame({"feature": names, "importance": importance})
        ranking = ranking.sort_values("importance", ascending=False, kind="stable")
        return ranking.reset_index(drop=True)
