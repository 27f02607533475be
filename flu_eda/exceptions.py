class DegenerateInputError(ValueError):
    """Input is valid data but too degenerate for the requested statistic."""


class DegenerateInputWarning(UserWarning):
    """A statistic was computed but collapses (e.g. a proportion of 0 or 1)."""
