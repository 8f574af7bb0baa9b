"""
ClaimResolver - Phase 1 claims and semantic bindings
"""
from .bindings import BINDERS, bind_fields
from .config import ReviewConfig
from .models import ClaimType, ContentClaim, SemanticBinding, SemanticRole
from .resolver import ClaimResolver, requires_human_review, resolve_claims_phase1

__all__ = [
    'ClaimResolver',
    'resolve_claims_phase1',
    'requires_human_review',
    'bind_fields',
    'BINDERS',
    'ReviewConfig',
    'ClaimType',
    'ContentClaim',
    'SemanticBinding',
    'SemanticRole',
]
