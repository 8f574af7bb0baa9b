"""
Content Intelligence - Structural classification of spreadsheet content units

Profiles a sheet's structure, scores it against a closed set of agents,
resolves a claim, negotiates field ranges for mixed sheets and captures
decisions for offline, human-approved weight tuning.
"""
from .agents import AgentScore, AgentScorer, AgentSignal, AgentType, DEFAULT_WEIGHTS, WeightTable, score_content_unit
from .classifier import ClassificationOutcome, ContentClassifier
from .claims import ClaimType, ContentClaim, SemanticBinding, SemanticRole, requires_human_review, resolve_claims_phase1
from .negotiation import NegotiationResult, detect_spatial_mixing, negotiate
from .profiler import ContentProfile, FieldProfile, generate_content_profile
from .signals import (
    ClassificationSignal,
    SignalCaptureService,
    SignalWindow,
    WeightProposal,
    analyze_weight_evolution,
    persist_signal,
    persist_signal_batch,
)

__all__ = [
    'generate_content_profile',
    'score_content_unit',
    'resolve_claims_phase1',
    'requires_human_review',
    'negotiate',
    'detect_spatial_mixing',
    'persist_signal',
    'persist_signal_batch',
    'analyze_weight_evolution',
    'ContentClassifier',
    'ClassificationOutcome',
    'AgentScore',
    'AgentScorer',
    'AgentSignal',
    'AgentType',
    'DEFAULT_WEIGHTS',
    'WeightTable',
    'ClaimType',
    'ContentClaim',
    'SemanticBinding',
    'SemanticRole',
    'NegotiationResult',
    'ContentProfile',
    'FieldProfile',
    'ClassificationSignal',
    'SignalCaptureService',
    'SignalWindow',
    'WeightProposal',
]
