"""
NegotiationEngine - Phase 2 field-level claim negotiation
"""
from .affinity import compute_field_affinities, score_field_affinity
from .config import NegotiationConfig
from .engine import NegotiationEngine, detect_spatial_mixing, negotiate, negotiation_step
from .models import (
    FieldAffinity,
    FieldRange,
    NegotiationLogEntry,
    NegotiationResult,
    NegotiationState,
)

__all__ = [
    'NegotiationEngine',
    'negotiate',
    'negotiation_step',
    'detect_spatial_mixing',
    'compute_field_affinities',
    'score_field_affinity',
    'NegotiationConfig',
    'FieldAffinity',
    'FieldRange',
    'NegotiationLogEntry',
    'NegotiationResult',
    'NegotiationState',
]
