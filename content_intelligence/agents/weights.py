"""
Versioned, immutable weight tables

A WeightTable is a value: the scorer receives one per call and nothing in
the classification path ever changes it. New weights arrive as a new
table with a new version.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from .models import AgentType


@dataclass(frozen=True)
class WeightTable:
    """Per-agent signal weights under a version label"""
    version: str
    weights: Mapping[AgentType, Mapping[str, float]]

    def __post_init__(self):
        frozen = {
            AgentType(agent): MappingProxyType(dict(signals))
            for agent, signals in self.weights.items()
        }
        object.__setattr__(self, "weights", MappingProxyType(frozen))

    def for_agent(self, agent: AgentType) -> Mapping[str, float]:
        return self.weights.get(agent, MappingProxyType({}))

    def weight(self, agent: AgentType, signal: str) -> Optional[float]:
        return self.for_agent(agent).get(signal)

    def with_adjustments(self, version: str,
                         adjustments: Mapping[AgentType, Mapping[str, float]]) -> 'WeightTable':
        """
        Build a new table with some weights replaced

        Args:
            version: Version label of the new table
            adjustments: agent -> signal -> new weight

        Returns:
            New WeightTable; this table is left untouched
        """
        merged: Dict[AgentType, Dict[str, float]] = {
            agent: dict(signals) for agent, signals in self.weights.items()
        }
        for agent, signals in adjustments.items():
            merged.setdefault(AgentType(agent), {}).update(signals)
        return WeightTable(version=version, weights=merged)

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {agent.value: dict(signals) for agent, signals in self.weights.items()}


DEFAULT_WEIGHTS = WeightTable(
    version="1.0.0",
    weights={
        AgentType.PLAN: {
            'auto_generated_headers': 0.25,
            'high_sparsity': 0.20,
            'percentage_values': 0.15,
            'descriptive_labels': 0.15,
            'reference_rows': 0.10,
            'no_entity_id': 0.05,
            'has_currency': -0.03,
            'has_date': -0.10,
            'transactional_rows': -0.15,
            'has_entity_id': -0.10,
        },
        AgentType.ENTITY: {
            'has_entity_id': 0.25,
            'has_name_field': 0.20,
            'categorical_attributes': 0.10,
            'unique_identifier': 0.10,
            'no_date': 0.05,
            'no_currency': 0.05,
            'high_currency': -0.10,
            'transactional_rows': -0.15,
            'auto_generated_headers': -0.20,
        },
        AgentType.TARGET: {
            'has_target_field': 0.25,
            'has_entity_id': 0.20,
            'reference_rows': 0.15,
            'has_currency': 0.10,
            'no_date': 0.10,
            'clean_headers': 0.05,
            'no_entity_id': -0.25,
            'transactional_rows': -0.15,
            'auto_generated_headers': -0.15,
            'high_sparsity': -0.10,
        },
        AgentType.TRANSACTION: {
            'has_date': 0.25,
            'transactional_rows': 0.20,
            'has_entity_id': 0.15,
            'has_currency': 0.15,
            'clean_headers': 0.05,
            'no_date': -0.25,
            'reference_rows': -0.10,
            'auto_generated_headers': -0.15,
            'high_sparsity': -0.10,
        },
    },
)
