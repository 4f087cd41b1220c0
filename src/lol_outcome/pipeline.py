import warnings
from dataclasses import dataclass, field
from textwrap import indent
from typing import Any, Dict, Optional

import pandas as pd

from .cleaner import DataCleaner
from .config import Config
from .data_loader import DataLoader
from .eda import ExploratoryAnalyzer
from .evaluator import Evaluator
from .hyper_tuner import HyperTuner
from .model_trainer import ModelTrainer
from .models import MODEL_BUILDERS, make_pipeline
from .splitter import DataSplitter
from .utils.logger import get_logger


@dataclass
class PipelineResult:
    """Everything the run produces, for callers that want more than the logs."""
    comparison: pd.DataFrame
    best_model: str
    best_params: Dict[str, Any]
    metrics: Dict[str, Any]
    importance: pd.DataFrame
    examples: pd.DataFrame
    tuning: Dict[str, pd.DataFrame] = field(default_factory=dict)
    eda: Optional[Dict[str, Any]] = None


class PipelineRunner:
    """End-to-end 10-minute win prediction pipeline.

    Steps:
      1. Load snapshots and check the data invariants
      2. Summarize the raw table (size, missingness, balance, correlations)
      3. Drop redundant columns and cast objective flags to categorical
      4. Split train/test stratified on the outcome
      5. Grid-search each enabled model with repeated stratified k-fold CV
      6. Compare models on their best CV score and pick the winner
      7. Refit the winner on the full training set and score the test set
      8. Rank feature importance and show example predictions"""

    def __init__(self, config_path: str):
        self.config = Config.from_yaml(config_path)
        self.logger = get_logger(self.__class__.__name__)
        warnings.filterwarnings(
            "ignore",
            message="X does not have valid feature names",
            category=UserWarning,
            module="sklearn",
        )

    def _enabled_models(self) -> Dict[str, Dict[str, Any]]:
        specs = self.config.model.get("models", {})
        unknown = sorted(set(specs) - set(MODEL_BUILDERS))
        if unknown:
            raise ValueError(f"Unknown models in config: {unknown}")
        enabled = {
            name: spec or {}
            for name, spec in specs.items()
            if (spec or {}).get("enabled", True)
        }
        if not enabled:
            raise ValueError("No models enabled in config")
        return enabled

    def run(self) -> PipelineResult:
        cfg = self.config
        self.logger.info("Starting win prediction pipeline")
        models = self._enabled_models()

        id_col = cfg.data.get("id_col", "gameId")
        target_col = cfg.data.get("target_col", "blueWins")
        random_state = cfg.validation.get("random_state", 42)
        metric = cfg.validation.get("metric", "roc_auc")
        threshold = cfg.validation.get("threshold", 0.5)

        raw = DataLoader(
            cfg.data["path"], cfg.data.get("sample_size"), random_state=random_state
        ).load()
        self.logger.info(f"Loaded dataset: {raw.shape[0]:,} rows x {raw.shape[1]} cols")

        cleaner = DataCleaner(
            id_col=id_col,
            target_col=target_col,
            drop_cols=cfg.cleaning.get("drop_cols"),
            categorical_cols=cfg.cleaning.get("categorical_cols"),
            balance_tolerance=cfg.cleaning.get("balance_tolerance", 0.10),
        )
        cleaner.validate(raw)
        eda = ExploratoryAnalyzer(target_col=target_col, id_col=id_col).summarize(raw)
        df = cleaner.transform(raw)

        splitter = DataSplitter(
            target_col=target_col,
            test_size=cfg.validation.get("test_size", 0.25),
            random_state=random_state,
        )
        train_df, test_df = splitter.split(df)

        X_train = train_df.drop(columns=[target_col])
        y_train = train_df[target_col].to_numpy()
        X_test = test_df.drop(columns=[target_col])
        y_test = test_df[target_col].to_numpy()

        trainer = ModelTrainer(
            n_splits=cfg.validation.get("n_splits", 5),
            n_repeats=cfg.validation.get("n_repeats", 2),
            random_state=random_state,
        )
        tuner = HyperTuner(trainer, metric=metric)

        tuning: Dict[str, pd.DataFrame] = {}
        best_rows = []
        best_params: Dict[str, Dict[str, Any]] = {}
        for name, spec in models.items():
            results = tuner.tune(
                name,
                X_train,
                y_train,
                grid=spec.get("grid"),
                base_params=spec.get("params"),
                preprocessing=cfg.preprocessing,
            )
            tuning[name] = results
            best_params[name] = tuner.best_params_
            best_rows.append(HyperTuner.select_best(results, metric))

        comparison = (
            pd.DataFrame(best_rows)[["model", "mean_accuracy", "std_err_accuracy",
                                     "mean_roc_auc", "std_err_roc_auc"]]
            .sort_values(f"mean_{metric}", ascending=False, kind="stable")
            .reset_index(drop=True)
        )
        comparison_str = indent(comparison.to_string(index=False), " " * 4)
        self.logger.info(f"Model comparison (best configuration per model):\n{comparison_str}")

        winner = str(comparison.loc[0, "model"])
        self.logger.info(f"Selected model: {winner} with {best_params[winner]}")

        final = make_pipeline(
            winner,
            X_train,
            params=best_params[winner],
            preprocessing=cfg.preprocessing,
            random_state=random_state,
        )
        trainer.fit_final(final, X_train, y_train, model_path=cfg.output.get("model_path"))

        y_proba = trainer.predict_proba(X_test)
        evaluator = Evaluator(cfg.output.get("metrics_path"))
        metrics = evaluator.evaluate(y_test, y_proba, threshold=threshold)

        metrics_str = indent(
            "\n".join([f"{k}: {v:.4f}" for k, v in metrics.items() if isinstance(v, float)]),
            " " * 4,
        )
        self.logger.info(f"Test metrics:\n{metrics_str}")

        importance = evaluator.feature_importance(trainer.final_pipeline)
        top_n = cfg.output.get("top_features", 10)
        importance_str = indent(importance.head(top_n).to_string(index=False), " " * 4)
        self.logger.info(f"Top {top_n} features:\n{importance_str}")

        examples = self._example_predictions(
            X_test, y_test, y_proba, threshold, cfg.output.get("n_examples", 2), random_state
        )
        self.logger.info(f"Example predictions:\n{indent(examples.to_string(), ' ' * 4)}")

        self.logger.info("Pipeline finished")
        return PipelineResult(
            comparison=comparison,
            best_model=winner,
            best_params=best_params[winner],
            metrics=metrics,
            importance=importance,
            examples=examples,
            tuning=tuning,
            eda=eda,
        )

    @staticmethod
    def _example_predictions(
        X_test: pd.DataFrame,
        y_test,
        y_proba,
        threshold: float,
        n: int,
        random_state: int,
    ) -> pd.DataFrame:
        """A few held-out games with their actual and predicted outcome."""
        frame = pd.DataFrame(
            {
                "actual": y_test,
                "predicted": (y_proba >= threshold).astype(int),
                "probability": y_proba,
            },
            index=X_test.index,
        )
        return frame.sample(min(n, len(frame)), random_state=random_state)
