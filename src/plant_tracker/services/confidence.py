"""Confidence gate for identification results."""

from dataclasses import dataclass

from plant_tracker.domain.identification import IdentificationResult

DEFAULT_CONFIDENCE_THRESHOLD = 0.5


@dataclass(frozen=True)
class Accepted:
    """Result cleared the threshold."""

    result: IdentificationResult


@dataclass(frozen=True)
class Rejected:
    """Result fell below the threshold."""

    probability: float


@dataclass(frozen=True)
class ConfidenceGate:
    """Converts a result probability into an accept/reject decision."""

    threshold: float = DEFAULT_CONFIDENCE_THRESHOLD

    def evaluate(self, result: IdentificationResult) -> Accepted | Rejected:
        """Accept results whose probability reaches the threshold."""
        if result.probability < self.threshold:
            return Rejected(probability=result.probability)
        return Accepted(result=result)
