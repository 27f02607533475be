"""
Flu symptoms: exploratory analysis
Run from repo root:
    python -m flu_eda
This script:
1) reads data/processed/flu_symptoms.csv
2) summarizes body temperature (mean, bootstrap CI, sd, se, quantiles)
3) summarizes the binary symptoms (proportion, Wald CI)
4) looks at each symptom against BodyTemp and Nausea
5) fits a logistic curve of Nausea on BodyTemp
6) writes figures and a text/HTML report under results/
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from pathlib import Path

import pandas as pd

from flu_eda import config
from flu_eda import plots
from flu_eda import statistics as st
from flu_eda.data import find_project_root, load_data
from flu_eda.report import Report

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResults:
    continuous: dict[str, float]
    continuous_table: pd.DataFrame
    binary: pd.DataFrame
    binary_table: pd.DataFrame
    contingency: dict[str, pd.DataFrame]
    logistic: st.LogisticFit
    figures: dict[str, Path] = field(default_factory=dict)
    report: dict[str, Path] = field(default_factory=dict)


# -----------------------------------------------------------------------------
# PARTS
# -----------------------------------------------------------------------------
def describe_outcomes(df: pd.DataFrame, seed: int, n_boot: int):
    """Univariate summaries of BodyTemp and of all binary columns."""
    cont = st.summarize_continuous(df[config.CONTINUOUS_OUTCOME], n_boot=n_boot, seed=seed)
    binary = st.binary_proportions(df[[config.BINARY_OUTCOME, *config.PREDICTORS]])
    return cont, binary


def univariate_figures(df: pd.DataFrame, binary: pd.DataFrame, fig_dir: Path) -> dict[str, Path]:
    return {
        "bodytemp_hist": plots.plot_histogram(
            df[config.CONTINUOUS_OUTCOME], config.CONTINUOUS_OUTCOME, fig_dir / "bodytemp_hist.png"
        ),
        "nausea_counts": plots.plot_level_counts(df, config.BINARY_OUTCOME, fig_dir / "nausea_counts.png"),
        "symptom_prevalence": plots.plot_proportions(binary, fig_dir / "symptom_prevalence.png"),
    }


def bivariate_figures(df: pd.DataFrame, fig_dir: Path, seed: int):
    figures = {}
    long = st.paired_long(df, config.CONTINUOUS_OUTCOME, config.PREDICTORS)
    figures["bodytemp_by_symptom"] = plots.plot_jitter_violin_box(
        long, config.CONTINUOUS_OUTCOME, fig_dir / "bodytemp_by_symptom.png", seed=seed
    )

    fit = st.fit_grouped_logistic(df, config.BINARY_OUTCOME, config.CONTINUOUS_OUTCOME)
    figures["nausea_vs_bodytemp"] = plots.plot_logistic_fit(fit, fig_dir / "nausea_vs_bodytemp.png")

    contingency = {}
    for name in config.PREDICTORS:
        contingency[name] = st.contingency_proportions(df, config.BINARY_OUTCOME, name)
        figures[f"nausea_by_{name}"] = plots.plot_contingency(
            st.contingency_long(df, config.BINARY_OUTCOME, name),
            config.BINARY_OUTCOME, name, fig_dir / f"nausea_by_{name}.png",
        )
    return fit, contingency, figures


def build_report(df: pd.DataFrame, res: AnalysisResults, n_boot: int, seed: int) -> Report:
    c = res.continuous
    fit = res.logistic
    rep = Report("Flu symptoms: exploratory analysis")
    rep.add_text(
        f"{len(df)} encounters, {len(df.columns)} analysis columns. "
        f"Outcomes: {config.CONTINUOUS_OUTCOME} and {config.BINARY_OUTCOME}; "
        f"predictors: {', '.join(config.PREDICTORS)}."
    )

    rep.add_heading(config.CONTINUOUS_OUTCOME)
    rep.add_text(
        f"Mean {c['mean']:.2f} °F, 95% bootstrap CI ({c['ci_lower']:.2f}, {c['ci_upper']:.2f}) "
        f"from {n_boot} resamples (seed {seed}). Median {c['p50']:.2f}, range {c['p0']:.2f} to {c['p100']:.2f}."
    )
    rep.add_table("Summary", res.continuous_table)
    rep.add_figure("Distribution of body temperature", res.figures["bodytemp_hist"])

    rep.add_heading("Binary variables")
    rep.add_text("Proportion of 'Yes' with a 95% Wald interval based on each variable's own sample size.")
    rep.add_table("Proportions", res.binary_table)
    rep.add_figure("Nausea counts", res.figures["nausea_counts"])
    rep.add_figure("Symptom prevalence", res.figures["symptom_prevalence"])

    rep.add_heading(f"{config.CONTINUOUS_OUTCOME} by symptom")
    rep.add_figure("Body temperature by symptom", res.figures["bodytemp_by_symptom"])

    rep.add_heading(f"{config.BINARY_OUTCOME} vs {config.CONTINUOUS_OUTCOME}")
    rep.add_text(
        f"Logistic fit on {len(fit.groups)} distinct temperatures: "
        f"intercept {fit.intercept:.3f}, slope {fit.slope:.3f} per °F."
    )
    rep.add_figure("Nausea probability vs body temperature", res.figures["nausea_vs_bodytemp"])

    rep.add_heading(f"{config.BINARY_OUTCOME} by symptom")
    for name, table in res.contingency.items():
        rep.add_table(f"% {config.BINARY_OUTCOME} within {name}", table.round(config.DISPLAY_DECIMALS))
        rep.add_figure(f"Nausea by {name}", res.figures[f"nausea_by_{name}"])
    return rep


# -----------------------------------------------------------------------------
# PIPELINE
# -----------------------------------------------------------------------------
def run_analysis(
    df: pd.DataFrame,
    out_dir: Path,
    seed: int = config.SEED,
    n_boot: int = config.N_BOOT,
) -> AnalysisResults:
    """Compute every summary, draw every figure and write the report."""
    out_dir = Path(out_dir)
    fig_dir = out_dir / "figures"

    cont, binary = describe_outcomes(df, seed=seed, n_boot=n_boot)
    figures = univariate_figures(df, binary, fig_dir)
    fit, contingency, more = bivariate_figures(df, fig_dir, seed=seed)
    figures.update(more)

    res = AnalysisResults(
        continuous=cont,
        continuous_table=st.continuous_summary_table(cont, config.CONTINUOUS_OUTCOME),
        binary=binary,
        binary_table=st.binary_summary_table(binary),
        contingency=contingency,
        logistic=fit,
        figures=figures,
    )
    res.report = build_report(df, res, n_boot=n_boot, seed=seed).write(out_dir)
    return res


def main(data_path: Path | str | None = None, out_dir: Path | str | None = None, seed: int = config.SEED):
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if data_path is None or out_dir is None:
        root = find_project_root()
        data_path = data_path or root / config.DATA_RELPATH
        out_dir = out_dir or root / config.RESULTS_DIRNAME
    print(f"[LOAD] {data_path}")
    df = load_data(data_path)
    print("Shape:", df.shape)

    res = run_analysis(df, Path(out_dir), seed=seed)
    print(f"\n[{config.CONTINUOUS_OUTCOME}] Descriptive statistics:\n", res.continuous_table.T)
    print("\n[Binary] Proportions:\n", res.binary_table)
    print(f"\n[Logistic] intercept={res.logistic.intercept:.3f}, slope={res.logistic.slope:.3f}")
    print(f"\n[OK] Figures and report saved under {out_dir}")
    return res


if __name__ == "__main__":
    main()
