"""
AgentScorer - Weighted structural scoring per semantic agent
"""
from .models import AgentScore, AgentSignal, AgentType
from .rules import AGENT_RULES
from .scorer import AgentScorer, score_content_unit
from .weights import DEFAULT_WEIGHTS, WeightTable

__all__ = [
    'AgentScorer',
    'score_content_unit',
    'AgentScore',
    'AgentSignal',
    'AgentType',
    'AGENT_RULES',
    'DEFAULT_WEIGHTS',
    'WeightTable',
]
