"""
Field-level agent affinity scoring

Every rule that matches a field raises each agent's affinity to at least
the rule's value; a field no rule matches is neutral (0.25 for all).
Header rules read only the name signals; shape rules read the values.
"""
from typing import Callable, Dict, List, Mapping, NamedTuple, Optional, Sequence

from ..agents.models import AgentType
from ..profiler.models import ContentProfile, DataType, FieldProfile
from .models import FieldAffinity

NEUTRAL_AFFINITY = 0.25

_AGENT_ORDER = list(AgentType)


class AffinityRule(NamedTuple):
    test: Callable[[FieldProfile], bool]
    affinities: Dict[AgentType, float]
    from_values: bool = False


def _affinity(plan: float, target: float, transaction: float, entity: float) -> Dict[AgentType, float]:
    return {
        AgentType.PLAN: plan,
        AgentType.TARGET: target,
        AgentType.TRANSACTION: transaction,
        AgentType.ENTITY: entity,
    }


_DATE = _affinity(plan=0.10, target=0.20, transaction=0.90, entity=0.10)
_AMOUNT = _affinity(plan=0.30, target=0.60, transaction=0.80, entity=0.10)
_RATE = _affinity(plan=0.80, target=0.50, transaction=0.20, entity=0.10)

FIELD_AFFINITY_RULES: List[AffinityRule] = [
    # Identifiers: entity owns them, target and transaction join on them
    AffinityRule(lambda f: f.name_signals.contains_id,
                 _affinity(plan=0.10, target=0.70, transaction=0.70, entity=0.90)),
    AffinityRule(lambda f: f.name_signals.contains_name,
                 _affinity(plan=0.10, target=0.20, transaction=0.10, entity=0.90)),
    AffinityRule(lambda f: f.name_signals.contains_date, _DATE),
    AffinityRule(lambda f: f.name_signals.contains_amount, _AMOUNT),
    AffinityRule(lambda f: f.name_signals.contains_target,
                 _affinity(plan=0.10, target=0.90, transaction=0.20, entity=0.20)),
    AffinityRule(lambda f: f.name_signals.contains_rate, _RATE),
    AffinityRule(lambda f: f.data_type == DataType.DATE, _DATE, from_values=True),
    AffinityRule(lambda f: f.data_type == DataType.CURRENCY, _AMOUNT, from_values=True),
    AffinityRule(lambda f: f.is_percentage, _RATE, from_values=True),
    AffinityRule(lambda f: f.is_categorical,
                 _affinity(plan=0.20, target=0.30, transaction=0.40, entity=0.60), from_values=True),
    AffinityRule(lambda f: f.data_type == DataType.INTEGER and f.distribution.is_sequential,
                 _affinity(plan=0.10, target=0.40, transaction=0.40, entity=0.70), from_values=True),
]


def score_field_affinity(field_profile: FieldProfile, names_only: bool = False) -> Dict[AgentType, float]:
    """
    Score one field against every agent

    Args:
        field_profile: FieldProfile to score
        names_only: Apply header rules only

    Returns:
        agent -> affinity in [0, 1]
    """
    matched = [
        rule for rule in FIELD_AFFINITY_RULES
        if not (names_only and rule.from_values) and rule.test(field_profile)
    ]
    if not matched:
        return {agent: NEUTRAL_AFFINITY for agent in AgentType}
    return {agent: max(rule.affinities[agent] for rule in matched) for agent in AgentType}


def strongest_agent(affinities: Mapping[AgentType, float]) -> AgentType:
    """Highest affinity; ties resolve in AgentType order"""
    return max(affinities, key=lambda agent: (affinities[agent], -_AGENT_ORDER.index(agent)))


def compute_field_affinities(profile: ContentProfile, names_only: bool = False) -> List[FieldAffinity]:
    """Affinity of every field in column order"""
    result = []
    for f in profile.fields:
        affinities = score_field_affinity(f, names_only)
        result.append(FieldAffinity(
            field_name=f.field_name,
            field_index=f.field_index,
            affinities=affinities,
            winner=strongest_agent(affinities),
            is_shared=f.name_signals.contains_id,
        ))
    return result


def owned(affinities: Sequence[FieldAffinity]) -> List[FieldAffinity]:
    """Fields that can decide ownership (shared join keys excluded)"""
    return [fa for fa in affinities if not fa.is_shared]


def aggregate_affinity(affinities: Sequence[FieldAffinity], agent: AgentType) -> float:
    return sum(fa.affinities[agent] for fa in owned(affinities))


def best_owner(affinities: Sequence[FieldAffinity],
               candidates: Optional[Sequence[AgentType]] = None) -> AgentType:
    """Agent with the highest aggregate affinity over the owned fields, among candidates"""
    agents = list(AgentType) if candidates is None else list(candidates)
    totals = {agent: aggregate_affinity(affinities, agent) for agent in agents}
    return strongest_agent(totals)
