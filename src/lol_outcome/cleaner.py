from __future__ import annotations

from typing import Optional, Sequence

import pandas as pd

from .utils.logger import get_logger


class DataCleaner:
    """Validates raw match snapshots and reduces them to the modelling table."""

    # red-side mirrors, differences, per-minute rates and sums of other columns
    REDUNDANT_COLS = [
        "redFirstBlood",
        "redKills",
        "redDeaths",
        "blueGoldDiff",
        "redGoldDiff",
        "blueExperienceDiff",
        "redExperienceDiff",
        "blueCSPerMin",
        "redCSPerMin",
        "blueGoldPerMin",
        "redGoldPerMin",
        "blueEliteMonsters",
        "redEliteMonsters",
        "blueTotalExperience",
        "redTotalExperience",
    ]
    CATEGORICAL_COLS = [
        "blueFirstBlood",
        "blueDragons",
        "blueHeralds",
        "redDragons",
        "redHeralds",
    ]
    BINARY_OBJECTIVE_COLS = CATEGORICAL_COLS

    def __init__(
        self,
        id_col: str = "gameId",
        target_col: str = "blueWins",
        drop_cols: Optional[Sequence[str]] = None,
        categorical_cols: Optional[Sequence[str]] = None,
        balance_tolerance: float = 0.10,
    ):
        self.id_col = id_col
        self.target_col = target_col
        self.drop_cols = list(self.REDUNDANT_COLS if drop_cols is None else drop_cols)
        self.categorical_cols = list(
            self.CATEGORICAL_COLS if categorical_cols is None else categorical_cols
        )
        self.balance_tolerance = balance_tolerance
        self.logger = get_logger(self.__class__.__name__)

    def validate(self, df: pd.DataFrame) -> None:
        """Raise ValueError if the raw table breaks the snapshot invariants."""
        for col in (self.id_col, self.target_col):
            if col not in df.columns:
                raise ValueError(f"Required column missing: {col}")

        if df[self.id_col].duplicated().any():
            n_dup = int(df[self.id_col].duplicated().sum())
            raise ValueError(f"{n_dup} duplicated values in {self.id_col}")

        n_missing = int(df.isna().sum().sum())
        if n_missing:
            raise ValueError(f"Dataset contains {n_missing} missing values")

        target_values = set(df[self.target_col].unique())
        if not target_values.issubset({0, 1}):
            raise ValueError(
                f"{self.target_col} must be binary 0/1, found {sorted(target_values)}"
            )

        for col in self.BINARY_OBJECTIVE_COLS:
            if col in df.columns and not set(df[col].unique()).issubset({0, 1}):
                raise ValueError(f"{col} must be bounded to {{0, 1}}")

        pos_rate = float(df[self.target_col].mean())
        if abs(pos_rate - 0.5) > self.balance_tolerance:
            self.logger.warning(
                f"Outcome is imbalanced: {self.target_col}=1 in {pos_rate:.1%} of rows"
            )

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        out = df.copy()

        to_drop = [col for col in self.drop_cols if col in out.columns]
        out = out.drop(columns=to_drop)

        if self.id_col in out.columns:
            out = out.set_index(self.id_col)

        missing = [col for col in self.categorical_cols if col not in out.columns]
        if missing:
            raise KeyError(f"Cannot cast missing columns to category: {missing}")
        for col in self.categorical_cols:
            out[col] = out[col].astype("category")

        out[self.target_col] = out[self.target_col].astype(int)

        self.logger.info(
            f"Dropped {len(to_drop)} redundant columns; "
            f"{out.shape[1] - 1} features retained"
        )
        return out
