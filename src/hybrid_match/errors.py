"""Exception taxonomy for the hybrid scoring engine.

Only ``InvalidInputError`` is meant to reach callers of
``HybridScorer.calculate_hybrid_score``. The other errors are raised inside
individual stages and recovered by the orchestrator, which degrades the
richness of the result instead of failing the request.
"""


class HybridMatchError(Exception):
    """Base class for all engine errors."""


class InvalidInputError(HybridMatchError, ValueError):
    """Raised when a requirement or candidate text is empty before normalization."""


class SignalUnavailableError(HybridMatchError):
    """Raised when a remote-dependent signal could not be computed.

    Attributes:
        signal: Name of the signal that failed (e.g. "embedding").
    """

    def __init__(self, signal: str, reason: str) -> None:
        super().__init__(f"{signal} signal unavailable: {reason}")
        self.signal = signal
        self.reason = reason


class SemanticAnalysisError(HybridMatchError):
    """Raised when the qualitative analysis could not be obtained or validated."""


class CacheError(HybridMatchError):
    """Raised by cache backends when the cache cannot serve a request."""
