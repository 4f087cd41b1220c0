import logging
from typing import Any, Dict, List, Optional

import numpy as np
import optuna
import pandas as pd

from .model_trainer import ModelTrainer
from .models import make_pipeline
from .utils.logger import get_logger

METRICS = ("accuracy", "roc_auc")


class HyperTuner:
    """Exhaustive grid search with Optuna's GridSampler over ModelTrainer CV."""

    def __init__(self, trainer: ModelTrainer, metric: str = "roc_auc"):
        if metric not in METRICS:
            raise ValueError(f"Unknown metric '{metric}'. Expected one of {METRICS}")
        self.trainer = trainer
        self.metric = metric
        self.logger = get_logger(self.__class__.__name__)
        self.results_: Optional[pd.DataFrame] = None
        self.best_params_: Optional[Dict[str, Any]] = None

    @staticmethod
    def _summarize(scores: pd.DataFrame) -> Dict[str, float]:
        n = len(scores)
        summary = {}
        for metric in METRICS:
            values = scores[metric].to_numpy()
            summary[f"mean_{metric}"] = float(np.mean(values))
            summary[f"std_err_{metric}"] = (
                float(np.std(values, ddof=1) / np.sqrt(n)) if n > 1 else 0.0
            )
        return summary

    def tune(
        self,
        name: str,
        X_df: pd.DataFrame,
        y: np.ndarray,
        grid: Optional[Dict[str, List[Any]]] = None,
        base_params: Optional[Dict[str, Any]] = None,
        preprocessing: Optional[Dict[str, Any]] = None,
    ) -> pd.DataFrame:
        """
        Cross-validate every point of ``grid`` (merged over ``base_params``) and
        return one row per configuration with mean/standard-error metrics.
        """
        grid = {k: list(v) for k, v in (grid or {}).items()}
        base_params = dict(base_params or {})
        y = np.asarray(y).astype(int)
        n_configs = int(np.prod([len(v) for v in grid.values()])) if grid else 1

        self.logger.info(
            f"Tuning {name}: {n_configs} configurations, "
            f"{self.trainer.n_repeats}x{self.trainer.n_splits}-fold CV"
        )

        def evaluate(params: Dict[str, Any]) -> Dict[str, float]:
            pipeline = make_pipeline(
                name,
                X_df,
                params=params,
                preprocessing=preprocessing,
                random_state=self.trainer.random_state,
            )
            return self._summarize(self.trainer.cross_validate(pipeline, X_df, y))

        # reduce log noise during tuning
        previous_level = self.trainer.logger.level
        previous_verbosity = optuna.logging.get_verbosity()
        self.trainer.logger.setLevel(logging.WARNING)
        optuna.logging.set_verbosity(optuna.logging.WARNING)
        try:
            if not grid:
                configs = [base_params]
                rows = [evaluate(base_params)]
            else:
                sampler = optuna.samplers.GridSampler(grid, seed=self.trainer.random_state)
                study = optuna.create_study(direction="maximize", sampler=sampler)

                def objective(trial: optuna.Trial) -> float:
                    trial_params = {
                        key: trial.suggest_categorical(key, values)
                        for key, values in grid.items()
                    }
                    params = dict(base_params)
                    params.update(trial_params)
                    summary = evaluate(params)
                    for key, value in summary.items():
                        trial.set_user_attr(key, value)
                    return summary[f"mean_{self.metric}"]

                study.optimize(objective, n_trials=n_configs)

                configs, rows = [], []
                for trial in sorted(study.trials, key=lambda t: t.number):
                    if trial.state != optuna.trial.TrialState.COMPLETE:
                        continue
                    row = dict(trial.params)
                    row.update(trial.user_attrs)
                    rows.append(row)
                    configs.append({**base_params, **trial.params})
        finally:
            self.trainer.logger.setLevel(previous_level)
            optuna.logging.set_verbosity(previous_verbosity)

        results = pd.DataFrame(rows)
        results.insert(0, "model", name)
        self.results_ = results

        best = self.select_best(results, self.metric)
        self.best_params_ = dict(configs[best.name])

        self.logger.info(
            f"Best {name} CV {self.metric}: {best[f'mean_{self.metric}']:.4f} "
            f"with {self.best_params_}"
        )
        return results

    @staticmethod
    def select_best(results: pd.DataFrame, metric: str = "roc_auc") -> pd.Series:
        """Row with the highest mean ``metric``; the first one wins ties."""
        column = f"mean_{metric}"
        if results is None or results.empty:
            raise ValueError("No tuning results to select from")
        if column not in results.columns:
            raise ValueError(f"Results have no '{column}' column")
        return results.loc[results[column].idxmax()]
