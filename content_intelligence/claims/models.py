"""
Data models for ClaimResolver
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from ..agents.models import AgentType
from ..profiler.models import DataType


class ClaimType(str, Enum):
    FULL = "FULL"        # whole content unit
    PARTIAL = "PARTIAL"  # contiguous field range, produced by negotiation only


class SemanticRole(str, Enum):
    """Role-specific canonical slots an agent can bind a column to"""
    ENTITY_IDENTIFIER = "entity_identifier"
    ENTITY_NAME = "entity_name"
    ENTITY_ATTRIBUTE = "entity_attribute"
    PERFORMANCE_TARGET = "performance_target"
    BASELINE_VALUE = "baseline_value"
    TRANSACTION_AMOUNT = "transaction_amount"
    TRANSACTION_COUNT = "transaction_count"
    TRANSACTION_DATE = "transaction_date"
    PERIOD_MARKER = "period_marker"
    CATEGORY_CODE = "category_code"
    RATE_VALUE = "rate_value"
    TIER_BOUNDARY = "tier_boundary"
    RULE_AMOUNT = "rule_amount"
    DESCRIPTIVE_LABEL = "descriptive_label"


@dataclass(frozen=True)
class SemanticBinding:
    """Maps a raw column to a role slot recognised by the claiming agent"""
    field_name: str
    semantic_role: SemanticRole
    platform_type: DataType
    display_label: str
    display_context: str
    claimed_by: AgentType
    confidence: float


@dataclass(frozen=True)
class ContentClaim:
    """
    An agent's ownership claim over a content unit or a field range of it

    Attributes:
        content_unit_id: Profiled unit the claim belongs to
        agent: Claiming agent
        claim_type: FULL for the whole unit, PARTIAL for a field range
        confidence: Agent confidence for the claimed fields
        semantic_bindings: Column to role mappings, recognised fields only
        reasoning: Human-readable explanation
        fields: Field names covered by the claim, in column order
        shared_fields: Identifier fields also present on every other region
        field_range: Inclusive (first, last) column index for PARTIAL claims
    """
    content_unit_id: str
    agent: AgentType
    claim_type: ClaimType
    confidence: float
    semantic_bindings: List[SemanticBinding] = field(default_factory=list)
    reasoning: str = ""
    fields: List[str] = field(default_factory=list)
    shared_fields: List[str] = field(default_factory=list)
    field_range: Optional[Tuple[int, int]] = None
