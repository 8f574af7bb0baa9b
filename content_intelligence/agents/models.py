"""
Data models for AgentScorer
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List


class AgentType(str, Enum):
    """
    Closed set of semantic agents.
    Declaration order is the tie-break order when confidences are equal.
    """
    PLAN = "plan"
    TARGET = "target"
    TRANSACTION = "transaction"
    ENTITY = "entity"


@dataclass(frozen=True)
class AgentSignal:
    """One heuristic rule that fired for an agent"""
    name: str
    weight: float
    rationale: str


@dataclass(frozen=True)
class AgentScore:
    """
    An agent's confidence that it owns a content unit

    Attributes:
        agent: Scoring agent
        confidence: Clamped sum of signal weights, in [0, 1], rounded to 4 places
        signals: Every rule that fired, in rule order
        reasoning: Rationales of the strongest positive signals
        weights_version: Version of the weight table used
    """
    agent: AgentType
    confidence: float
    signals: List[AgentSignal] = field(default_factory=list)
    reasoning: str = ""
    weights_version: str = ""

    @property
    def signal_names(self) -> List[str]:
        return [s.name for s in self.signals]
