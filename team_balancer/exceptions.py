"""Exceptions for Team Balancer."""

from typing import Optional


class TeamBalancerError(Exception):
    """Base exception for all Team Balancer errors."""

    pass


# ========== Ingestion Exceptions ==========


class RosterError(TeamBalancerError, ValueError):
    """Raised when a roster source cannot be read at all."""

    pass


class RowParseError(TeamBalancerError, ValueError):
    """Raised when a single roster row is malformed.

    The loader collects these instead of aborting, so each one keeps
    enough context to be reported back to the user.
    """

    def __init__(self, reason: str, row: str = "", line_number: Optional[int] = None):
        self.reason = reason
        self.row = row
        self.line_number = line_number
        location = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{location}{reason} ({row!r})" if row else f"{location}{reason}")


# ========== Balancing Exceptions ==========


class BalanceError(TeamBalancerError):
    """Base exception for errors raised while generating teams."""

    pass


class ConfigurationError(BalanceError, ValueError):
    """Raised when the roster or constraints make a split impossible by construction."""

    pass


class ConstraintUnsatisfiable(BalanceError):
    """Raised when the trial budget runs out without an acceptable split."""

    def __init__(self, trials: int):
        self.trials = trials
        super().__init__(
            f"Could not find balanced teams after {trials} attempts; "
            "loosen constraints (raise the max rating delta or lower the "
            "position minimums)"
        )
