# Specific exception types for different error conditions
class LudoError(Exception):
    """Base exception for rule-engine errors."""

    pass


class InvalidSelectionError(LudoError):
    """Raised when a human selection is not in the legal-move set (no state change)."""

    def __init__(self, token_id, legal):
        self.token_id = token_id
        self.legal = frozenset(legal)
        super().__init__(
            f"Token {token_id!r} is not a legal move; choose one of {sorted(self.legal)}"
        )


class InvariantViolation(LudoError):
    """Raised when the engine is driven in a way that would corrupt match state."""

    pass


class PhaseError(InvariantViolation):
    """Raised when an operation is attempted in the wrong turn phase."""

    pass


class MatchOverError(InvariantViolation):
    """Raised when a finished match is asked to roll, select or apply."""

    pass


class AdvisorError(LudoError):
    """Base exception for remote advisory failures (always recovered locally)."""

    pass


class AdvisorTimeoutError(AdvisorError):
    """Raised when the remote advisory call exceeds its time budget."""

    pass


class AdvisorResponseError(AdvisorError):
    """Raised when the remote advisory reply cannot be parsed or is illegal."""

    pass
