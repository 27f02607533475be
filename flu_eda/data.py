"""
Loading and checking the cleaned flu symptom table.

The file is expected to be already cleaned, so nothing is repaired here:
anything unexpected (missing file, missing column, empty cell, a category
other than Yes/No) stops the run with an explicit error.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from flu_eda import config

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PATHS
# -----------------------------------------------------------------------------
def find_project_root(start: Path | None = None, marker: str = config.DATA_DIRNAME) -> Path:
    """Return the first of `start` and its parents that contains `marker`."""
    here = Path(start or Path.cwd()).resolve()
    for p in [here, *here.parents]:
        if (p / marker).is_dir():
            return p
    raise FileNotFoundError(f"No '{marker}/' directory found above {here}")


def default_data_path(start: Path | None = None) -> Path:
    return find_project_root(start) / config.DATA_RELPATH


# -----------------------------------------------------------------------------
# SCHEMA
# -----------------------------------------------------------------------------
def select_columns(df: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """Project `df` to `columns` (in that order); raise if any is missing."""
    columns = list(columns)
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise KeyError(f"Missing column(s): {missing}. Available: {list(df.columns)}")
    return df.loc[:, columns].copy()


def check_no_missing(df: pd.DataFrame) -> None:
    counts = df.isna().sum()
    bad = counts[counts > 0]
    if not bad.empty:
        raise ValueError(f"Missing values in required columns: {bad.to_dict()}")


def check_binary(
    df: pd.DataFrame,
    columns: Sequence[str],
    levels: Sequence[str] = (config.POSITIVE, config.NEGATIVE),
) -> None:
    """Every value of every column in `columns` must be one of `levels`."""
    for col in columns:
        unexpected = sorted(set(df[col].astype(str)) - set(levels))
        if unexpected:
            raise ValueError(f"Column {col!r} has values outside {list(levels)}: {unexpected}")


def check_numeric(df: pd.DataFrame, column: str) -> pd.DataFrame:
    """Coerce `column` to float; raise if any value does not parse or is infinite."""
    values = pd.to_numeric(df[column], errors="coerce")
    bad_mask = values.isna() | ~np.isfinite(values.astype(float))
    if bad_mask.any():
        bad = df.loc[bad_mask, column].unique().tolist()
        raise ValueError(f"Column {column!r} has non-numeric or infinite values: {bad[:5]}")
    df[column] = values.astype(float)
    return df


# -----------------------------------------------------------------------------
# LOADING
# -----------------------------------------------------------------------------
def validate(df: pd.DataFrame) -> pd.DataFrame:
    """Project to the analysis columns and run all checks."""
    df = select_columns(df, config.ANALYSIS_COLUMNS)
    check_no_missing(df)
    df = check_numeric(df, config.CONTINUOUS_OUTCOME)
    binary = [config.BINARY_OUTCOME, *config.PREDICTORS]
    check_binary(df, binary)
    df[binary] = df[binary].astype(str)
    return df


def load_data(path: Path | str | None = None) -> pd.DataFrame:
    """Read the cleaned CSV and return the validated analysis table."""
    path = Path(path) if path is not None else default_data_path()
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found: {path}")
    df = validate(pd.read_csv(path))
    logger.info("Loaded %s: %d rows, %d columns", path.name, *df.shape)
    return df
