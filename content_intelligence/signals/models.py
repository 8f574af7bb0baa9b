"""
Data models for signal capture and weight evolution
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..agents.models import AgentScore, AgentType
from ..agents.weights import WeightTable


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC"""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class ClassificationSignal(BaseModel):
    """
    Durable record of one classification decision.
    Created once when the decision is final and never modified.
    """
    signal_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    tenant_id: str
    content_unit_id: str
    system_agent: AgentType
    system_confidence: float = Field(..., ge=0.0, le=1.0)
    human_agent: Optional[AgentType] = None
    overridden: bool = False
    contributing_signals: Dict[AgentType, List[str]] = Field(default_factory=dict)
    weights_version: str = ""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_override_consistency(self) -> 'ClassificationSignal':
        expected = self.human_agent is not None and self.human_agent != self.system_agent
        if self.overridden != expected:
            raise ValueError(
                f"overridden={self.overridden} does not match system_agent={self.system_agent.value}, "
                f"human_agent={self.human_agent.value if self.human_agent else None}"
            )
        return self

    @property
    def final_agent(self) -> AgentType:
        return self.human_agent or self.system_agent

    @classmethod
    def from_decision(cls,
                      tenant_id: str,
                      content_unit_id: str,
                      scores: Sequence[AgentScore],
                      human_agent: Optional[AgentType] = None,
                      timestamp: Optional[datetime] = None) -> 'ClassificationSignal':
        """
        Build a signal from the scores behind a decision

        Args:
            tenant_id: Tenant the content belongs to
            content_unit_id: Classified content unit
            scores: AgentScores as ranked by the scorer
            human_agent: Agent chosen by a person, None for uncontested auto-resolution
            timestamp: Decision time (defaults to now, UTC)

        Returns:
            ClassificationSignal
        """
        ranked = sorted(scores, key=lambda s: -s.confidence)
        winner = ranked[0]
        return cls(
            tenant_id=tenant_id,
            content_unit_id=content_unit_id,
            system_agent=winner.agent,
            system_confidence=winner.confidence,
            human_agent=human_agent,
            overridden=human_agent is not None and human_agent != winner.agent,
            contributing_signals={s.agent: s.signal_names for s in ranked},
            weights_version=winner.weights_version,
            timestamp=timestamp or datetime.now(timezone.utc),
        )


@dataclass(frozen=True)
class SignalWindow:
    """Selects signals by tenant and [start, end) time range"""
    tenant_id: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def contains(self, signal: ClassificationSignal) -> bool:
        if self.tenant_id is not None and signal.tenant_id != self.tenant_id:
            return False
        moment = as_utc(signal.timestamp)
        if self.start is not None and moment < as_utc(self.start):
            return False
        if self.end is not None and moment >= as_utc(self.end):
            return False
        return True


@dataclass(frozen=True)
class AccuracyReport:
    """Share of decisions a person confirmed"""
    total: int
    correct: int
    accuracy: float
    override_rate: float


@dataclass(frozen=True)
class TrendPoint:
    """Per ISO week confidence and accuracy"""
    week: str
    avg_confidence: float
    signal_count: int
    accuracy: float


@dataclass(frozen=True)
class SignalStats:
    """How one agent signal fared across decisions"""
    agent: AgentType
    signal: str
    observations: int
    helpful: int
    harmful: int


@dataclass(frozen=True)
class WeightAdjustment:
    """One proposed weight change with its evidence"""
    agent: AgentType
    signal: str
    current_weight: float
    proposed_weight: float
    delta: float
    observations: int
    helpful_rate: float
    harmful_rate: float
    reason: str


@dataclass(frozen=True)
class WeightProposal:
    """
    Advisory output of the weight evolution job.
    Holds a new weight table for human approval; nothing applies it automatically.
    """
    base_version: str
    window: SignalWindow
    signals_analyzed: int
    has_enough_data: bool
    confidence: float
    adjustments: List[WeightAdjustment] = field(default_factory=list)
    proposed_table: Optional[WeightTable] = None
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_empty(self) -> bool:
        return not self.adjustments
