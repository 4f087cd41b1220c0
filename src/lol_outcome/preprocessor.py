from __future__ import annotations

from typing import Dict, List, Optional

import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.feature_selection import VarianceThreshold
from sklearn.impute import SimpleImputer
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder, StandardScaler

from .utils.logger import get_logger


class Preprocessor:
    """Builds the feature recipe applied in front of every classifier."""

    def __init__(
        self,
        impute_strategy: str = "median",
        use_scaler: bool = False,
        drop_zero_variance: bool = True,
        verbose: bool = False,
    ):
        """
        Parameters
        ----------
        impute_strategy:
            Strategy for continuous numeric imputation (median/mean/most_frequent).
        use_scaler:
            Whether to standardize continuous numeric features. Needed for the
            penalized logistic regression, unnecessary for tree models.
        drop_zero_variance:
            Remove transformed columns that are constant on the training data.
        verbose:
            If True, logs detected feature groups.
        """
        self.impute_strategy = impute_strategy
        self.use_scaler = use_scaler
        self.drop_zero_variance = drop_zero_variance
        self.verbose = verbose
        self.logger = get_logger(self.__class__.__name__)
        self.transformer: Optional[Pipeline] = None

    @staticmethod
    def feature_groups(X: pd.DataFrame) -> Dict[str, List[str]]:
        """Split columns into continuous, binary (0/1 numeric) and categorical."""
        numeric = X.select_dtypes(include=["number", "bool"]).columns.tolist()
        categorical = X.select_dtypes(include=["object", "category"]).columns.tolist()
        binary = [
            col for col in numeric
            if set(X[col].dropna().unique()).issubset({0, 1})
        ]
        continuous = [col for col in numeric if col not in binary]
        return {"continuous": continuous, "binary": binary, "categorical": categorical}

    def build(self, X: pd.DataFrame) -> Pipeline:
        """Build (but do not fit) the recipe for the columns of X."""
        groups = self.feature_groups(X)

        num_steps = [("imputer", SimpleImputer(strategy=self.impute_strategy))]
        if self.use_scaler:
            num_steps.append(("scaler", StandardScaler()))

        encoder = OneHotEncoder(
            handle_unknown="ignore", drop="if_binary", sparse_output=False
        )
        columns = ColumnTransformer(
            transformers=[
                ("num", Pipeline(steps=num_steps), groups["continuous"]),
                ("bin", SimpleImputer(strategy="most_frequent"), groups["binary"]),
                (
                    "cat",
                    Pipeline(
                        steps=[
                            ("imputer", SimpleImputer(strategy="most_frequent")),
                            ("encoder", encoder),
                        ]
                    ),
                    groups["categorical"],
                ),
            ],
            remainder="drop",
        )

        steps = [("columns", columns)]
        if self.drop_zero_variance:
            steps.append(("zero_variance", VarianceThreshold(threshold=0.0)))
        self.transformer = Pipeline(steps=steps)

        if self.verbose:
            self.logger.info(
                f"Columns detected: continuous={len(groups['continuous'])}, "
                f"binary={len(groups['binary'])}, "
                f"categorical={len(groups['categorical'])}"
            )

        return self.transformer
