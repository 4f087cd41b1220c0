"""
League of Legends 10-Minute Win Prediction — Modular Machine Learning Pipeline

This package predicts the winning side of a ranked match from a snapshot
of its statistics at the 10-minute mark. It cleans the snapshot table,
grid-searches four standard classifiers with repeated stratified k-fold
cross-validation, and scores the best one on a held-out split.

Modules:
    config          — Load YAML configuration safely.
    data_loader     — Read and optionally sample CSV data.
    cleaner         — Validate snapshots, drop redundant columns, cast factors.
    eda             — Tabular exploratory summary of the raw table.
    splitter        — Stratified train/test split.
    preprocessor    — Impute, encode, and scale features.
    models          — Logistic regression, decision tree, random forest, LightGBM.
    model_trainer   — Repeated stratified k-fold CV and final fit.
    hyper_tuner     — Grid search with Optuna's GridSampler.
    evaluator       — Held-out metrics and feature-importance ranking.
    pipeline        — Orchestrates all components.
    utils.logger    — Unified timestamped console logger.
"""

from .config import Config
from .data_loader import DataLoader
from .cleaner import DataCleaner
from .eda import ExploratoryAnalyzer
from .splitter import DataSplitter
from .preprocessor import Preprocessor
from .models import MODEL_BUILDERS, build_model, make_pipeline
from .model_trainer import ModelTrainer
from .hyper_tuner import HyperTuner
from .evaluator import Evaluator
from .pipeline import PipelineResult, PipelineRunner

__all__ = [
    "Config",
    "DataLoader",
    "DataCleaner",
    "ExploratoryAnalyzer",
    "DataSplitter",
    "Preprocessor",
    "MODEL_BUILDERS",
    "build_model",
    "make_pipeline",
    "ModelTrainer",
    "HyperTuner",
    "Evaluator",
    "PipelineResult",
    "PipelineRunner",
]
