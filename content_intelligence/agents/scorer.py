"""
AgentScorer - Scores a content profile against every agent
"""
import logging
from typing import List, Optional

from ..profiler.models import ContentProfile
from .models import AgentScore, AgentSignal, AgentType
from .rules import AGENT_RULES
from .weights import DEFAULT_WEIGHTS, WeightTable

logger = logging.getLogger(__name__)

REASONING_SIGNALS = 3


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def build_reasoning(agent: AgentType, signals: List[AgentSignal]) -> str:
    """Summarise the strongest positive signals"""
    positive = sorted((s for s in signals if s.weight > 0), key=lambda s: -s.weight)
    top = positive[:REASONING_SIGNALS]
    if not top:
        return f"{agent.value} agent: no positive signals"
    return f"{agent.value} agent: " + "; ".join(s.rationale for s in top)


class AgentScorer:
    """
    Scores a ContentProfile with every agent's rule function.
    Stateless apart from the default weight table it was built with.
    """

    def __init__(self, weights: WeightTable = DEFAULT_WEIGHTS):
        """
        Initialize AgentScorer

        Args:
            weights: Default weight table for calls that do not pass one
        """
        self.weights = weights

    def score_agent(self, agent: AgentType, profile: ContentProfile,
                    weights: Optional[WeightTable] = None) -> AgentScore:
        """
        Score one agent

        Args:
            agent: Agent to score
            profile: ContentProfile
            weights: Weight table (defaults to the scorer's table)

        Returns:
            AgentScore with confidence = clamp(sum of fired weights)
        """
        table = weights or self.weights
        signals = AGENT_RULES[agent](profile, table.for_agent(agent))
        confidence = round(clamp(sum(s.weight for s in signals)), 4)
        return AgentScore(
            agent=agent,
            confidence=confidence,
            signals=signals,
            reasoning=build_reasoning(agent, signals),
            weights_version=table.version,
        )

    def score(self, profile: ContentProfile,
              weights: Optional[WeightTable] = None) -> List[AgentScore]:
        """
        Score every agent and rank them

        Args:
            profile: ContentProfile
            weights: Weight table for this call

        Returns:
            One AgentScore per AgentType, highest confidence first
        """
        scores = [self.score_agent(agent, profile, weights) for agent in AgentType]
        # sorted() is stable, so equal confidences keep AgentType order
        ranked = sorted(scores, key=lambda s: -s.confidence)

        logger.debug(f"Scored {profile.content_unit_id}: " +
                     ", ".join(f"{s.agent.value}={s.confidence:.2f}" for s in ranked))
        return ranked


def score_content_unit(profile: ContentProfile,
                       weights: WeightTable = DEFAULT_WEIGHTS) -> List[AgentScore]:
    """Score a profile against every agent, highest confidence first"""
    return AgentScorer(weights).score(profile)
