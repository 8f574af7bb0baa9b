"""
Configuration for ClaimResolver
"""
from dataclasses import dataclass
import os


@dataclass(frozen=True)
class ReviewConfig:
    """Thresholds for escalating a Phase 1 decision to a person"""

    # Leader must be ahead of the runner-up by at least this much to be decisive
    gap_threshold: float = 0.10

    # Leader confidence below this is weak
    confidence_threshold: float = 0.50

    @classmethod
    def from_env(cls) -> 'ReviewConfig':
        """Create configuration from environment variables"""
        return cls(
            gap_threshold=float(os.getenv("CLAIMS_REVIEW_GAP", "0.10")),
            confidence_threshold=float(os.getenv("CLAIMS_REVIEW_CONFIDENCE", "0.50")),
        )
