"""Combine signal scores into one final score under a performance mode."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence

from hybrid_match.scoring.models import PerformanceMode, ProfileContext, Signal, SignalBreakdown

logger = logging.getLogger(__name__)


class Aggregator:
    """Weighted combination of the present signals.

    Each performance mode declares a canonical weight per signal. Signals that
    did not run or were unavailable are dropped and the remaining weights are
    renormalized, so the effective weights always sum to 1.
    """

    # Canonical weights; a signal missing from a mode's map never runs in that mode
    MODE_WEIGHTS: dict[PerformanceMode, dict[Signal, float]] = {
        PerformanceMode.FAST: {
            Signal.KEYWORD: 0.60,
            Signal.VECTOR: 0.40,
        },
        PerformanceMode.BALANCED: {
            Signal.KEYWORD: 0.35,
            Signal.VECTOR: 0.25,
            Signal.EMBEDDING: 0.25,
            Signal.SEMANTIC: 0.15,
        },
        PerformanceMode.THOROUGH: {
            Signal.KEYWORD: 0.22,
            Signal.VECTOR: 0.22,
            Signal.EMBEDDING: 0.26,
            Signal.SEMANTIC: 0.30,
        },
    }

    def signals_for(self, mode: PerformanceMode) -> frozenset[Signal]:
        """Signals that run under a performance mode."""
        return frozenset(self.MODE_WEIGHTS[mode])

    def effective_weights(
        self,
        breakdown: SignalBreakdown,
        mode: PerformanceMode,
        base_weights: Mapping[Signal, float] | None = None,
    ) -> dict[Signal, float]:
        """Normalize weights over the signals present in ``breakdown``.

        ``base_weights`` replaces the mode's canonical weights (the domain
        focus uses this); it is still restricted to the signals the mode runs.
        """
        present = breakdown.present()
        mode_signals = self.MODE_WEIGHTS[mode]
        weights = base_weights if base_weights is not None else mode_signals
        sparse = {
            signal: weight
            for signal, weight in weights.items()
            if signal in mode_signals and signal in present and weight > 0
        }
        total = sum(sparse.values())
        if total == 0:
            return {}
        return {signal: weight / total for signal, weight in sparse.items()}

    def aggregate(
        self,
        breakdown: SignalBreakdown,
        mode: PerformanceMode,
        base_weights: Mapping[Signal, float] | None = None,
    ) -> int:
        """Compute the final 0-100 score.

        Returns 0 when no signal is present at all.
        """
        weights = self.effective_weights(breakdown, mode, base_weights)
        if not weights:
            logger.warning(f"No signal available for mode {mode.value}; final score is 0")
            return 0

        present = breakdown.present()
        total = sum(present[signal] * weight for signal, weight in weights.items())
        final = max(0, min(100, round(total)))
        logger.debug(
            f"Aggregated {mode.value}: "
            + ", ".join(f"{s.value}={present[s]}x{w:.2f}" for s, w in weights.items())
            + f" -> {final}"
        )
        return final


def compute_confidence(
    breakdown: SignalBreakdown,
    domain_expertise: Sequence[ProfileContext] = (),
) -> int:
    """Consistency of the present signals, on a 0-100 scale.

    Signals that agree give a high confidence; every point of standard
    deviation costs two points. Having all four signals adds a bonus of 10,
    and so does a candidate with expertise in more than one domain.
    """
    scores = list(breakdown.present().values())
    if not scores:
        return 0

    mean = sum(scores) / len(scores)
    stddev = math.sqrt(sum((score - mean) ** 2 for score in scores) / len(scores))
    confidence = 100 - 2 * stddev
    if len(scores) == len(Signal):
        confidence += 10
    if len(domain_expertise) > 1:
        confidence += 10
    return max(0, min(100, round(confidence)))
