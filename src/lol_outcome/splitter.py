from typing import Tuple

import pandas as pd
from sklearn.model_selection import train_test_split

from .utils.logger import get_logger


class DataSplitter:
    """Train/test split stratified on the outcome column."""

    def __init__(self, target_col: str = "blueWins", test_size: float = 0.25, random_state: int = 42):
        self.target_col = target_col
        self.test_size = test_size
        self.random_state = random_state
        self.logger = get_logger(self.__class__.__name__)

    def split(self, df: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
        train_df, test_df = train_test_split(
            df,
            test_size=self.test_size,
            stratify=df[self.target_col],
            random_state=self.random_state,
        )
        self.logger.info(
            f"Train: {len(train_df):,} rows ({train_df[self.target_col].mean():.1%} positive), "
            f"test: {len(test_df):,} rows ({test_df[self.target_col].mean():.1%} positive)"
        )
        return train_df, test_df

    def stratification_gap(self, train_df: pd.DataFrame, test_df: pd.DataFrame) -> float:
        """Absolute difference between the positive rates of the two parts."""
        return float(abs(train_df[self.target_col].mean() - test_df[self.target_col].mean()))
