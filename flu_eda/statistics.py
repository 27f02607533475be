"""
Descriptive statistics for the flu symptom table.

All functions are pure: they take sequences / DataFrames and return new
objects. Values are kept at full precision; the *_table helpers round for
display only.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import math
import warnings
from typing import Any, Mapping, Sequence

import numpy as np
import pandas as pd
from scipy import stats
import statsmodels.api as sm
from statsmodels.tools.sm_exceptions import PerfectSeparationError, PerfectSeparationWarning

from flu_eda import config
from flu_eda.exceptions import DegenerateInputError, DegenerateInputWarning

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# SMALL UTILS
# -----------------------------------------------------------------------------
def _finite_array(values) -> np.ndarray:
    data = np.asarray(values, dtype=float).ravel()
    if data.size == 0:
        raise DegenerateInputError("Empty input: nothing to summarize")
    if not np.isfinite(data).all():
        raise ValueError("Input contains missing or non-finite values")
    return data


def _generator(rng: np.random.Generator | None, seed: int | None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng(seed)


def quantile_label(q: float) -> str:
    """0.25 -> 'p25', 0.025 -> 'p2.5'"""
    return f"p{q * 100:g}"


def recode_binary(values, positive: str = config.POSITIVE, negative: str = config.NEGATIVE) -> pd.Series:
    """Map positive/negative labels to 1/0; anything else is an error."""
    s = pd.Series(values)
    bad = ~s.isin([positive, negative])
    if bad.any():
        raise ValueError(
            f"Values outside [{positive!r}, {negative!r}]: {sorted(s[bad].astype(str).unique())}"
        )
    return (s == positive).astype(int)


# -----------------------------------------------------------------------------
# CONTINUOUS
# -----------------------------------------------------------------------------
def bootstrap_mean_ci(
    values,
    n_boot: int = config.N_BOOT,
    level: float = config.CI_LEVEL,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
) -> tuple[float, float]:
    """
    Percentile bootstrap interval for the mean.

    Draws `n_boot` resamples of the same size as the input, with
    replacement, and returns the (1-level)/2 and (1+level)/2 percentiles of
    the resampled means. Pass `rng` or `seed` for reproducible draws.
    """
    data = _finite_array(values)
    if n_boot < 1:
        raise ValueError(f"n_boot must be >= 1, got {n_boot}")
    if not 0 < level < 1:
        raise ValueError(f"level must be in (0, 1), got {level}")
    rng = _generator(rng, seed)
    means = rng.choice(data, size=(n_boot, data.size), replace=True).mean(axis=1)
    tail = (1 - level) / 2 * 100
    lower, upper = np.percentile(means, [tail, 100 - tail])
    return float(lower), float(upper)


def summarize_continuous(
    values,
    n_boot: int = config.N_BOOT,
    level: float = config.CI_LEVEL,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
    probs: Sequence[float] = config.QUANTILE_PROBS,
) -> dict[str, float]:
    """
    Mean with bootstrap CI, sd (ddof=1), standard error and quantiles.

    Quantiles use the linear interpolation (type 7) estimator and are keyed
    'p0', 'p25', ... . Needs at least two observations.
    """
    data = _finite_array(values)
    if data.size < 2:
        raise DegenerateInputError(f"Need at least 2 observations, got {data.size}")

    lower, upper = bootstrap_mean_ci(data, n_boot=n_boot, level=level, rng=rng, seed=seed)
    out = {
        "n": int(data.size),
        "mean": float(data.mean()),
        "ci_lower": lower,
        "ci_upper": upper,
        "sd": float(data.std(ddof=1)),
        "se": float(stats.sem(data, ddof=1)),
    }
    qs = np.quantile(data, probs, method="linear")
    out.update({quantile_label(q): float(v) for q, v in zip(probs, qs)})
    return out


def continuous_summary_table(
    summary: Mapping[str, float], name: str, decimals: int = config.DISPLAY_DECIMALS
) -> pd.DataFrame:
    return pd.DataFrame([dict(summary)], index=pd.Index([name], name="variable")).round(decimals)


# -----------------------------------------------------------------------------
# BINARY
# -----------------------------------------------------------------------------
def wald_interval(
    k: int, n: int, z: float = config.Z_95, n_ci: int | None = None
) -> tuple[float, float, float]:
    """
    Proportion k/n with a Wald interval p +/- z*sqrt(p(1-p)/n_ci).

    `n_ci` defaults to `n`; pass it to use a fixed sample size in the
    standard error instead. Bounds are not clipped to [0, 1].
    """
    if n <= 0:
        raise DegenerateInputError("Cannot compute a proportion of zero observations")
    if not 0 <= k <= n:
        raise ValueError(f"Positive count {k} outside [0, {n}]")
    n_ci = n if n_ci is None else n_ci
    if n_ci <= 0:
        raise ValueError(f"Sample size for the interval must be positive, got {n_ci}")
    p = k / n
    half = z * math.sqrt(p * (1 - p) / n_ci)
    return p, p - half, p + half


def binary_proportions(
    columns: Mapping[str, Sequence] | pd.DataFrame,
    n: int | None = None,
    positive: str = config.POSITIVE,
    negative: str = config.NEGATIVE,
    z: float = config.Z_95,
) -> pd.DataFrame:
    """
    One row per binary variable: positive count, size, proportion, Wald CI.

    Rows follow the input order. `n` fixes the sample size used in every
    interval; by default each variable uses its own length. A proportion of
    exactly 0 or 1 is kept but flagged `degenerate` and warned about.
    """
    rows: dict[str, dict[str, Any]] = {}
    for name, values in columns.items():
        if name in rows:
            raise ValueError(f"Duplicate variable name: {name!r}")
        s = pd.Series(values, dtype=object)
        if s.empty:
            raise DegenerateInputError(f"Variable {name!r} has no observations")
        k = int(recode_binary(s, positive, negative).sum())
        p, lower, upper = wald_interval(k, len(s), z=z, n_ci=n)
        degenerate = k in (0, len(s))
        if degenerate:
            msg = f"{name}: proportion is {p:g}, Wald interval has zero width"
            logger.warning(msg)
            warnings.warn(msg, DegenerateInputWarning, stacklevel=2)
        rows[name] = {
            "n_positive": k,
            "n": len(s),
            "proportion": p,
            "ci_lower": lower,
            "ci_upper": upper,
            "degenerate": degenerate,
        }
    if not rows:
        raise DegenerateInputError("No variables given")
    table = pd.DataFrame.from_dict(rows, orient="index")
    table.index.name = "variable"
    return table


def binary_summary_table(table: pd.DataFrame, decimals: int = config.DISPLAY_DECIMALS) -> pd.DataFrame:
    return table.round({"proportion": decimals, "ci_lower": decimals, "ci_upper": decimals})


# -----------------------------------------------------------------------------
# BIVARIATE
# -----------------------------------------------------------------------------
def paired_long(df: pd.DataFrame, outcome: str, predictors: Sequence[str]) -> pd.DataFrame:
    """Raw (predictor, level, outcome) rows for point / violin / box plots."""
    long = df.melt(
        id_vars=[outcome], value_vars=list(predictors), var_name="predictor", value_name="level"
    )
    return long[["predictor", "level", outcome]]


def contingency_proportions(df: pd.DataFrame, outcome: str, predictor: str) -> pd.DataFrame:
    """
    Percent of each outcome level within each predictor level.

    Rows are the predictor levels that actually occur, so a predictor with
    a single level gives a single row.
    """
    counts = pd.crosstab(df[predictor], df[outcome])
    return counts.div(counts.sum(axis=1), axis=0) * 100


def contingency_long(df: pd.DataFrame, outcome: str, predictor: str) -> pd.DataFrame:
    pct = contingency_proportions(df, outcome, predictor)
    pct.columns = pct.columns.astype(str)
    return pct.reset_index().melt(id_vars=predictor, var_name=outcome, value_name="percent")


@dataclass
class LogisticFit:
    outcome: str
    predictor: str
    groups: pd.DataFrame
    curve: pd.DataFrame
    intercept: float
    slope: float
    level: float
    results: Any = field(repr=False, default=None)

    def predict(self, x) -> np.ndarray:
        """Fitted probability at predictor value(s) `x`."""
        eta = self.intercept + self.slope * np.asarray(x, dtype=float)
        return 1.0 / (1.0 + np.exp(-eta))


def group_by_value(
    df: pd.DataFrame, outcome: str, predictor: str, positive: str = config.POSITIVE,
    negative: str = config.NEGATIVE,
) -> pd.DataFrame:
    """Successes / trials of the outcome at each exact predictor value."""
    y = recode_binary(df[outcome].to_numpy(), positive, negative).to_numpy()
    x = df[predictor].to_numpy(dtype=float)
    grouped = (
        pd.DataFrame({predictor: x, "y": y})
        .groupby(predictor)["y"]
        .agg(n="size", successes="sum")
        .reset_index()
    )
    grouped["proportion"] = grouped["successes"] / grouped["n"]
    return grouped


def fit_grouped_logistic(
    df: pd.DataFrame,
    outcome: str = config.BINARY_OUTCOME,
    predictor: str = config.CONTINUOUS_OUTCOME,
    positive: str = config.POSITIVE,
    negative: str = config.NEGATIVE,
    level: float = config.CI_LEVEL,
    grid_size: int = 200,
) -> LogisticFit:
    """
    Binomial GLM (logit link) of `outcome` on `predictor`, fit on rows
    grouped by exact predictor value and weighted by group size.

    Returns the grouped table, the fitted probability curve on an even grid
    with its pointwise confidence band, and the coefficients.
    """
    groups = group_by_value(df, outcome, predictor, positive, negative)
    total = int(groups["successes"].sum())
    if total in (0, int(groups["n"].sum())):
        raise DegenerateInputError(f"{outcome} takes a single value; logistic fit is undefined")
    if len(groups) < 2:
        raise DegenerateInputError(f"{predictor} has a single value; logistic fit is singular")

    endog = np.column_stack([groups["successes"], groups["n"] - groups["successes"]])
    exog = sm.add_constant(groups[predictor].to_numpy(dtype=float), has_constant="add")
    model = sm.GLM(endog, exog, family=sm.families.Binomial())
    with warnings.catch_warnings():
        warnings.simplefilter("error", PerfectSeparationWarning)
        try:
            results = model.fit()
        except (PerfectSeparationError, PerfectSeparationWarning, np.linalg.LinAlgError) as exc:
            raise DegenerateInputError(f"Logistic fit of {outcome} on {predictor} failed: {exc}") from exc

    xs = np.linspace(groups[predictor].min(), groups[predictor].max(), grid_size)
    frame = results.get_prediction(sm.add_constant(xs, has_constant="add")).summary_frame(alpha=1 - level)
    curve = pd.DataFrame({
        predictor: xs,
        "fit": frame["mean"].to_numpy(),
        "lower": frame["mean_ci_lower"].to_numpy(),
        "upper": frame["mean_ci_upper"].to_numpy(),
    })
    intercept, slope = (float(v) for v in results.params)
    logger.info("Logistic fit %s ~ %s: intercept=%.3f slope=%.3f", outcome, predictor, intercept, slope)
    return LogisticFit(
        outcome=outcome,
        predictor=predictor,
        groups=groups,
        curve=curve,
        intercept=intercept,
        slope=slope,
        level=level,
        results=results,
    )
