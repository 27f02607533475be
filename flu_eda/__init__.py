"""Exploratory analysis of flu symptoms: body temperature and nausea."""

from flu_eda.exceptions import DegenerateInputError, DegenerateInputWarning

__version__ = "0.1.0"

__all__ = ["DegenerateInputError", "DegenerateInputWarning", "__version__"]
