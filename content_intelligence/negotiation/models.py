"""
Data models for NegotiationEngine
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..agents.models import AgentType
from ..claims.models import ContentClaim


@dataclass(frozen=True)
class FieldAffinity:
    """How strongly one field attracts each agent, independent of the rest of the sheet"""
    field_name: str
    field_index: int
    affinities: Mapping[AgentType, float]
    winner: AgentType
    is_shared: bool = False  # join key needed by every region


@dataclass(frozen=True)
class FieldRange:
    """Contiguous, inclusive column range owned by one agent"""
    start: int
    end: int
    agent: AgentType

    def describe(self) -> str:
        return f"{self.agent.value}[{self.start}-{self.end}]"


@dataclass(frozen=True)
class NegotiationLogEntry:
    """
    Audit record for one negotiation stage

    Attributes:
        round: Round number (1-based)
        stage: absence_boost, field_affinity, clear_winner, split, no_split or fallback
        message: Human-readable summary
        agent: Agent the stage concerns, if any
        prior_ranges: Ownership before the stage
        resulting_ranges: Ownership after the stage
        data: Stage-specific numbers (affinities, gains, boost)
    """
    round: int
    stage: str
    message: str
    agent: Optional[AgentType] = None
    prior_ranges: List[FieldRange] = field(default_factory=list)
    resulting_ranges: List[FieldRange] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NegotiationState:
    """Immutable input and output of one negotiation round"""
    content_unit_id: str
    affinities: Tuple[FieldAffinity, ...]
    ranges: Tuple[FieldRange, ...]
    round: int = 0
    log: Tuple[NegotiationLogEntry, ...] = ()
    # agents allowed to own a region
    candidates: Tuple[AgentType, ...] = tuple(AgentType)


@dataclass(frozen=True)
class NegotiationResult:
    """
    Outcome of Phase 2

    Claims are ordered by column and cover disjoint field ranges when the
    unit was split; otherwise a single FULL claim for the Phase 1 winner.
    """
    content_unit_id: str
    claims: List[ContentClaim]
    split: bool
    requires_review: bool
    rounds: int
    field_affinities: List[FieldAffinity] = field(default_factory=list)
    log: List[NegotiationLogEntry] = field(default_factory=list)
