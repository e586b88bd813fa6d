"""
Domain Errors

Error taxonomy shared by the engine, the application services and the
inbound adapters.

    NotFoundError                 design or scenario id could not be resolved
    InvalidInputError             malformed design / connection / property data,
                                  raised before any simulation work starts
    SimulationInvariantViolation  internal guard tripped during traversal;
                                  indicates a defect, never a user condition

None of these are retried. Replaying the same (design, scenario, elapsed)
triple reproduces the same error.
"""

from __future__ import annotations
from typing import Any, Dict, Optional


class SDGameError(Exception):
    """Base class for all errors raised by the package."""

    code: str = "SDGAME_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(SDGameError):
    """A design or scenario identifier could not be resolved."""

    code = "NOT_FOUND"


class InvalidInputError(SDGameError):
    """Design, connection or property data is malformed."""

    code = "INVALID_INPUT"


class SimulationInvariantViolation(SDGameError):
    """An internal traversal invariant was broken."""

    code = "SIMULATION_INVARIANT"
