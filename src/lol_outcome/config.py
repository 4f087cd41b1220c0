from dataclasses import dataclass
from typing import Any, Dict
import yaml


@dataclass
class Config:
    """Run configuration; each attribute is one top-level YAML section."""
    data: Dict[str, Any]
    cleaning: Dict[str, Any]
    preprocessing: Dict[str, Any]
    model: Dict[str, Any]
    validation: Dict[str, Any]
    output: Dict[str, Any]

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """
        Load the six sections from ``path``:

        data           CSV path, id/target columns, optional sample size
        cleaning       columns to drop and to cast to category, balance tolerance
        preprocessing  imputation strategy and recipe switches
        model          per-model ``enabled`` flag, fixed ``params`` and search ``grid``
        validation     test size, folds, repeats, seed, selection metric, threshold
        output         model/metrics paths and report sizes

        A missing or extra section raises TypeError.
        """
        with open(path, "r") as f:
            sections = yaml.safe_load(f)
        return cls(**sections)
