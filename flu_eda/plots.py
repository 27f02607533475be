"""
Static figures of the flu symptom analysis.

Each function draws one figure, saves it to `save_path` and closes it.
"""

from __future__ import annotations
import logging
from pathlib import Path

import numpy as np
import pandas as pd
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import seaborn as sns  # noqa: E402
from scipy.stats import norm  # noqa: E402

from flu_eda import config  # noqa: E402
from flu_eda.statistics import LogisticFit  # noqa: E402

logger = logging.getLogger(__name__)

sns.set_theme(style=config.SEABORN_STYLE)


def _ensure_dir(p: Path):
    p.parent.mkdir(parents=True, exist_ok=True)


def _save(fig, save_path: Path) -> Path:
    save_path = Path(save_path)
    _ensure_dir(save_path)
    fig.savefig(save_path, dpi=config.FIG_DPI, bbox_inches="tight")
    plt.close(fig)
    logger.info("Saved figure %s", save_path)
    return save_path


# -----------------------------------------------------------------------------
# UNIVARIATE
# -----------------------------------------------------------------------------
def plot_histogram(values, column: str, save_path: Path, bins="auto") -> Path:
    """Histogram + KDE with a fitted normal curve, mean and median lines."""
    s = pd.Series(values, dtype=float).dropna()
    mu, sigma = s.mean(), s.std(ddof=1)

    fig, ax = plt.subplots(figsize=(8, 5))
    sns.histplot(s, kde=True, stat="density", bins=bins, ax=ax, alpha=0.7)
    if sigma > 0:
        x = np.linspace(s.min(), s.max(), 400)
        ax.plot(x, norm.pdf(x, mu, sigma), lw=2, label=f"Normal(μ={mu:.2f}, σ={sigma:.2f})")
    ax.axvline(mu, ls="--", label="Mean")
    ax.axvline(s.median(), ls=":", label="Median")
    ax.set_title(f"Distribution of {column}")
    ax.set_xlabel(column); ax.set_ylabel("Density")
    ax.legend(); ax.grid(alpha=0.2)
    return _save(fig, save_path)


def plot_proportions(table: pd.DataFrame, save_path: Path, title: str = "Symptom prevalence") -> Path:
    """Bars of `proportion` per variable with Wald CI error bars."""
    labels = table.index.astype(str)
    p = table["proportion"].to_numpy()
    err = np.vstack([p - table["ci_lower"].to_numpy(), table["ci_upper"].to_numpy() - p])

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.bar(labels, p, yerr=err, capsize=4, color=sns.color_palette()[0], alpha=0.8)
    for x, v in enumerate(p):
        ax.text(x, v + 0.02, f"{v:.2f}", ha="center")
    ax.set_ylim(0, 1.05)
    ax.set_title(title); ax.set_ylabel("Proportion 'Yes' (95% CI)")
    ax.tick_params(axis="x", rotation=20)
    ax.grid(axis="y", alpha=0.2)
    return _save(fig, save_path)


def plot_level_counts(df: pd.DataFrame, column: str, save_path: Path) -> Path:
    """Count bar chart of one categorical column."""
    fig, ax = plt.subplots(figsize=(6, 5))
    sns.countplot(data=df, x=column, order=sorted(df[column].unique()), ax=ax)
    ax.set_title(f"{column} counts")
    ax.grid(axis="y", alpha=0.2)
    return _save(fig, save_path)


# -----------------------------------------------------------------------------
# BIVARIATE
# -----------------------------------------------------------------------------
def plot_jitter_violin_box(long: pd.DataFrame, outcome: str, save_path: Path, seed: int = config.SEED) -> Path:
    """
    One panel per predictor: violin, a narrow box and the jittered raw points
    of `outcome` at each predictor level. `long` comes from `paired_long`.
    """
    predictors = list(dict.fromkeys(long["predictor"]))
    fig, axes = plt.subplots(1, len(predictors), figsize=(3.2 * len(predictors), 5), sharey=True, squeeze=False)
    rng = np.random.default_rng(seed)
    for ax, name in zip(axes[0], predictors):
        d = long[long["predictor"] == name]
        order = sorted(d["level"].unique())
        sns.violinplot(data=d, x="level", y=outcome, order=order, ax=ax, inner=None, color="0.9", cut=0)
        sns.boxplot(data=d, x="level", y=outcome, order=order, ax=ax, width=0.15, showfliers=False)
        xs = d["level"].map({lvl: i for i, lvl in enumerate(order)}).to_numpy(dtype=float)
        ax.scatter(xs + rng.uniform(-0.2, 0.2, xs.size), d[outcome], s=6, alpha=0.3, color="k")
        ax.set_title(name); ax.set_xlabel("")
        ax.grid(axis="y", alpha=0.2)
    axes[0][0].set_ylabel(outcome)
    fig.suptitle(f"{outcome} by symptom")
    fig.tight_layout()
    return _save(fig, save_path)


def plot_logistic_fit(fit: LogisticFit, save_path: Path) -> Path:
    """Binned proportions (size = group n) with the fitted curve and CI band."""
    g, c = fit.groups, fit.curve
    fig, ax = plt.subplots(figsize=(8, 5))
    ax.scatter(g[fit.predictor], g["proportion"], s=20 + 4 * g["n"], alpha=0.5, label="Observed (binned)")
    ax.plot(c[fit.predictor], c["fit"], lw=2, label="Logistic fit")
    ax.fill_between(c[fit.predictor], c["lower"], c["upper"], alpha=0.2, label=f"{fit.level:.0%} CI")
    ax.set_ylim(-0.05, 1.05)
    ax.set_title(f"P({fit.outcome}) vs {fit.predictor}")
    ax.set_xlabel(fit.predictor); ax.set_ylabel(f"P({fit.outcome} = Yes)")
    ax.legend(); ax.grid(alpha=0.2)
    return _save(fig, save_path)


def plot_contingency(long: pd.DataFrame, outcome: str, predictor: str, save_path: Path) -> Path:
    """Stacked percent bars of `outcome` within each level of `predictor`."""
    wide = long.pivot(index=predictor, columns=outcome, values="percent").fillna(0)
    fig, ax = plt.subplots(figsize=(5, 5))
    wide.plot(kind="bar", stacked=True, ax=ax, rot=0)
    ax.set_ylim(0, 100)
    ax.set_title(f"{outcome} by {predictor}")
    ax.set_ylabel("Percent within level")
    ax.legend(title=outcome)
    return _save(fig, save_path)
