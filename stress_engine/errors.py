"""
Engine Error Taxonomy
=====================
Every failure is raised synchronously to the immediate caller; a risk
run never returns a partial result.
"""


class StressEngineError(Exception):
    """Base class for all stress engine failures."""


class InvalidParameterError(StressEngineError, ValueError):
    """Simulation parameters outside their valid domain."""


class UndefinedInstrumentError(StressEngineError, KeyError):
    """A portfolio symbol has no corresponding instrument in the market."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(symbol)

    def __str__(self) -> str:
        return f"Undefined instrument: {self.symbol!r} is not in the market"


class DegenerateBaselineError(StressEngineError, ValueError):
    """Initial portfolio value is zero or negative; loss ratio undefined."""
