"""
Fixed settings of the analysis.

Everything here is a plain constant; functions take them as keyword
defaults so a caller can override any of them.
"""

from __future__ import annotations
from pathlib import Path

# -----------------------------------------------------------------------------
# PATHS (auto)
# -----------------------------------------------------------------------------
DATA_DIRNAME = "data"
DATA_RELPATH = Path(DATA_DIRNAME) / "processed" / "flu_symptoms.csv"
RESULTS_DIRNAME = "results"

# -----------------------------------------------------------------------------
# COLUMNS
# -----------------------------------------------------------------------------
CONTINUOUS_OUTCOME = "BodyTemp"
BINARY_OUTCOME = "Nausea"
PREDICTORS = ["CoughYN", "WeaknessYN", "MyalgiaYN", "ChillsSweats", "SubjectiveFever"]
ANALYSIS_COLUMNS = [CONTINUOUS_OUTCOME, BINARY_OUTCOME, *PREDICTORS]

POSITIVE = "Yes"
NEGATIVE = "No"

# -----------------------------------------------------------------------------
# STATISTICS
# -----------------------------------------------------------------------------
N_BOOT = 1000
SEED = 2025
CI_LEVEL = 0.95
Z_95 = 1.96
QUANTILE_PROBS = (0.0, 0.25, 0.5, 0.75, 1.0)
DISPLAY_DECIMALS = 2

# -----------------------------------------------------------------------------
# PLOTS
# -----------------------------------------------------------------------------
FIG_DPI = 160
SEABORN_STYLE = "whitegrid"
