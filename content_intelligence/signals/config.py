"""
Configuration for WeightEvolutionAnalyzer
"""
from dataclasses import dataclass
import os


@dataclass(frozen=True)
class EvolutionConfig:
    """Configuration for weight proposals"""

    # Reviewed decisions required before anything is proposed
    min_sample_size: int = 5

    # Firings of one signal required before its weight is judged
    min_observations: int = 2

    # Step size and per-signal cap for one proposal
    learning_rate: float = 0.3
    max_adjustment: float = 0.05
    min_delta: float = 0.001

    # Rates that trigger a shrink or a grow
    harmful_threshold: float = 0.5
    helpful_threshold: float = 0.7

    # Sample size at which proposal confidence reaches 1.0
    full_confidence_sample: int = 50

    @classmethod
    def from_env(cls) -> 'EvolutionConfig':
        """Create configuration from environment variables"""
        return cls(
            min_sample_size=int(os.getenv("EVOLUTION_MIN_SAMPLE_SIZE", "5")),
            min_observations=int(os.getenv("EVOLUTION_MIN_OBSERVATIONS", "2")),
            learning_rate=float(os.getenv("EVOLUTION_LEARNING_RATE", "0.3")),
            max_adjustment=float(os.getenv("EVOLUTION_MAX_ADJUSTMENT", "0.05")),
            min_delta=float(os.getenv("EVOLUTION_MIN_DELTA", "0.001")),
            harmful_threshold=float(os.getenv("EVOLUTION_HARMFUL_THRESHOLD", "0.5")),
            helpful_threshold=float(os.getenv("EVOLUTION_HELPFUL_THRESHOLD", "0.7")),
            full_confidence_sample=int(os.getenv("EVOLUTION_FULL_CONFIDENCE_SAMPLE", "50")),
        )
