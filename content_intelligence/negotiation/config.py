"""
Configuration for NegotiationEngine
"""
from dataclasses import dataclass
import os


@dataclass(frozen=True)
class NegotiationConfig:
    """Configuration for field-level negotiation"""

    # Hard cap on refinement rounds
    max_rounds: int = 3

    # A cut must raise the summed owner affinity by at least this much
    min_split_gain: float = 0.40

    # Each side of a cut must own this many non-shared fields
    min_fields_per_side: int = 2

    # Leader boost when competitors are absent
    absence_boost: float = 0.10
    absence_threshold: float = 0.20
    absence_min_weak: int = 2

    # A leader further ahead than this keeps the whole unit; only agents
    # within this distance of the leader may own a region
    clear_winner_gap: float = 0.25

    # Region confidence below this needs a person
    review_confidence: float = 0.50

    # Mean null-rate difference across a cut that reads as two stacked layouts
    sparsity_gradient: float = 0.50

    @classmethod
    def from_env(cls) -> 'NegotiationConfig':
        """Create configuration from environment variables"""
        return cls(
            max_rounds=int(os.getenv("NEGOTIATION_MAX_ROUNDS", "3")),
            min_split_gain=float(os.getenv("NEGOTIATION_MIN_SPLIT_GAIN", "0.40")),
            min_fields_per_side=int(os.getenv("NEGOTIATION_MIN_FIELDS_PER_SIDE", "2")),
            absence_boost=float(os.getenv("NEGOTIATION_ABSENCE_BOOST", "0.10")),
            absence_threshold=float(os.getenv("NEGOTIATION_ABSENCE_THRESHOLD", "0.20")),
            absence_min_weak=int(os.getenv("NEGOTIATION_ABSENCE_MIN_WEAK", "2")),
            clear_winner_gap=float(os.getenv("NEGOTIATION_CLEAR_WINNER_GAP", "0.25")),
            review_confidence=float(os.getenv("NEGOTIATION_REVIEW_CONFIDENCE", "0.50")),
            sparsity_gradient=float(os.getenv("NEGOTIATION_SPARSITY_GRADIENT", "0.50")),
        )
