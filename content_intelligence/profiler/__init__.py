"""
ContentProfiler - Structural sheet and field profiling
"""
from .agent import ContentProfiler, generate_content_profile, is_placeholder_header
from .field_profiler import FieldProfiler
from .models import (
    ContentProfile,
    DataType,
    FieldDistribution,
    FieldProfile,
    HeaderQuality,
    NameSignals,
    PatternProfile,
    RowCountCategory,
    StructureProfile,
)
from .config import ProfilerConfig
from .names import detect_name_signals

__all__ = [
    'ContentProfiler',
    'FieldProfiler',
    'generate_content_profile',
    'is_placeholder_header',
    'detect_name_signals',
    'ContentProfile',
    'DataType',
    'FieldDistribution',
    'FieldProfile',
    'HeaderQuality',
    'NameSignals',
    'PatternProfile',
    'RowCountCategory',
    'StructureProfile',
    'ProfilerConfig',
]
