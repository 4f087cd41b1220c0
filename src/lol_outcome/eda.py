from typing import Any, Dict

import pandas as pd

from .utils.logger import get_logger


class ExploratoryAnalyzer:
    """Tabular summary of the raw snapshots: size, missingness, balance, correlations."""

    def __init__(self, target_col: str = "blueWins", id_col: str = "gameId"):
        self.target_col = target_col
        self.id_col = id_col
        self.logger = get_logger(self.__class__.__name__)

    def summarize(self, df: pd.DataFrame) -> Dict[str, Any]:
        if self.target_col not in df.columns:
            raise KeyError(f"Target column not found: {self.target_col}")

        numeric = df.select_dtypes(include="number").drop(
            columns=[c for c in (self.id_col, self.target_col) if c in df.columns],
        )
        balance = df[self.target_col].value_counts(normalize=True).sort_index()

        correlations = numeric.corrwith(df[self.target_col].astype(float)).dropna()
        ranked = correlations.reindex(
            correlations.abs().sort_values(ascending=False).index
        )

        summary = {
            "n_rows": int(df.shape[0]),
            "n_cols": int(df.shape[1]),
            "n_missing": int(df.isna().sum().sum()),
            "class_balance": {int(k): float(v) for k, v in balance.items()},
            "describe": numeric.describe().T,
            "target_correlation": ranked,
        }

        self.logger.info(
            f"{summary['n_rows']:,} rows x {summary['n_cols']} cols, "
            f"{summary['n_missing']} missing values"
        )
        self.logger.info(
            "Class balance: "
            + ", ".join(f"{k}={v:.1%}" for k, v in summary["class_balance"].items())
        )
        if not ranked.empty:
            top = ranked.head(5)
            self.logger.info(
                "Strongest correlations with outcome: "
                + ", ".join(f"{name}={value:+.3f}" for name, value in top.items())
            )
        return summary
