"""Exception types raised by the analysis engine."""
from __future__ import annotations


class FinbenchError(Exception):
    """Base class for engine errors."""


class StructuralError(FinbenchError):
    """Input problem that makes the whole run impossible (fatal, aborts the run)."""


class UnknownAnalysis(StructuralError, KeyError):
    """Raised when an analysis id is not present in the catalog."""

    def __init__(self, analysis_id: str) -> None:
        super().__init__(analysis_id)
        self.analysis_id = analysis_id

    def __str__(self) -> str:
        return f"Unknown analysis id: {self.analysis_id}"


class CatalogError(FinbenchError):
    """The static catalog failed validation at load time."""


class RunCancelled(FinbenchError):
    """The caller cancelled the run; partial results were discarded."""
