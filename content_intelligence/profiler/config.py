"""
Configuration for ContentProfiler
"""
from dataclasses import dataclass
import os


@dataclass(frozen=True)
class ProfilerConfig:
    """Configuration for profiling operations"""

    # Sampling
    sample_size: int = 10000

    # Row count shape: at or above this many rows a sheet reads as an event log
    transactional_row_threshold: int = 100

    # Share of non-blank values that must agree before a type is assigned
    type_consensus_ratio: float = 1.0

    # Text columns with fewer distinct values than this count as descriptive labels
    descriptive_label_max_distinct: int = 10

    # Low-cardinality text values kept on the distribution
    categorical_values_limit: int = 20

    # Currency shape: two-decimal share and magnitude
    currency_two_decimal_ratio: float = 0.5
    currency_min_magnitude: float = 100.0

    @classmethod
    def from_env(cls) -> 'ProfilerConfig':
        """Create configuration from environment variables"""
        return cls(
            sample_size=int(os.getenv("PROFILER_SAMPLE_SIZE", "10000")),
            transactional_row_threshold=int(os.getenv("PROFILER_TRANSACTIONAL_ROWS", "100")),
            type_consensus_ratio=float(os.getenv("PROFILER_TYPE_CONSENSUS", "1.0")),
            descriptive_label_max_distinct=int(os.getenv("PROFILER_LABEL_MAX_DISTINCT", "10")),
            categorical_values_limit=int(os.getenv("PROFILER_CATEGORICAL_LIMIT", "20")),
            currency_two_decimal_ratio=float(os.getenv("PROFILER_CURRENCY_TWO_DECIMAL_RATIO", "0.5")),
            currency_min_magnitude=float(os.getenv("PROFILER_CURRENCY_MIN_MAGNITUDE", "100")),
        )
