"""Shared fixtures: a synthetic flu symptom table shaped like the real one."""

import numpy as np
import pandas as pd
import pytest

from flu_eda import config


def _yes_no(mask: np.ndarray) -> np.ndarray:
    return np.where(mask, "Yes", "No")


@pytest.fixture
def flu_df() -> pd.DataFrame:
    """730 encounters; Nausea rises with BodyTemp so the logistic fit is well posed."""
    rng = np.random.default_rng(0)
    n = 730
    temp = np.round(np.clip(rng.normal(98.9, 1.1, n), 97.2, 103.1), 1)
    p_nausea = 1.0 / (1.0 + np.exp(-(-1.0 + 0.4 * (temp - 98.9))))
    prevalence = {"CoughYN": 0.75, "WeaknessYN": 0.9, "MyalgiaYN": 0.85, "ChillsSweats": 0.8, "SubjectiveFever": 0.7}
    df = pd.DataFrame({
        "Id": np.arange(n),
        config.CONTINUOUS_OUTCOME: temp,
        config.BINARY_OUTCOME: _yes_no(rng.uniform(size=n) < p_nausea),
    })
    for name, p in prevalence.items():
        df[name] = _yes_no(rng.uniform(size=n) < p)
    return df


@pytest.fixture
def flu_csv(tmp_path, flu_df):
    """The synthetic table written where the project expects it."""
    path = tmp_path / config.DATA_RELPATH
    path.parent.mkdir(parents=True)
    flu_df.to_csv(path, index=False)
    return path
