from typing import Optional
import pandas as pd


class DataLoader:
    """Loads CSV dataset and optionally samples rows."""

    def __init__(self, path: str, sample_size: Optional[int] = None, random_state: int = 42):
        self.path = path
        self.sample_size = sample_size
        self.random_state = random_state

    def load(self) -> pd.DataFrame:
        df = pd.read_csv(self.path)
        if df.empty:
            raise ValueError(f"No rows found in {self.path}")
        if self.sample_size and self.sample_size < len(df):
            df = df.sample(self.sample_size, random_state=self.random_state)
        return df
