from __future__ import annotations


class GerrymanderError(Exception):
    """Base class for every error raised by this package."""


class PrecinctNotFoundError(GerrymanderError, KeyError):
    def __init__(self, precinct_id: int):
        self.precinct_id = precinct_id
        super().__init__(f"No precinct for given id: {precinct_id}")

    def __str__(self) -> str:
        return self.args[0]


class InvalidPlanError(GerrymanderError, ValueError):
    """The plan is not a contiguous, population-balanced partition of the graph."""


class DistrictCountError(GerrymanderError, ValueError):
    """Requested district count cannot be used (zero or negative)."""


class SearchExhaustedError(GerrymanderError, RuntimeError):
    def __init__(self, what: str, attempts: int):
        self.attempts = attempts
        super().__init__(f"{what}: no acceptable plan after {attempts} attempts")
