"""
Per-agent semantic role binders

Each binder looks at one FieldProfile and either names the role slot the
agent recognises it as, or returns None so the field is left out of the
claim's bindings.
"""
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional

from ..agents.models import AgentType
from ..profiler.models import DataType, FieldProfile
from .models import SemanticBinding, SemanticRole


class RoleAssignment(NamedTuple):
    role: SemanticRole
    context: str
    confidence: float


Binder = Callable[[FieldProfile], Optional[RoleAssignment]]


def _is_rate(f: FieldProfile) -> bool:
    return f.is_percentage or f.name_signals.contains_rate


def _is_amount(f: FieldProfile) -> bool:
    return f.data_type == DataType.CURRENCY or (f.is_numeric and f.name_signals.contains_amount)


def _is_date(f: FieldProfile) -> bool:
    return f.data_type == DataType.DATE or f.name_signals.contains_date


def bind_plan_field(f: FieldProfile) -> Optional[RoleAssignment]:
    if _is_rate(f):
        return RoleAssignment(SemanticRole.RATE_VALUE, "Rule definition - rate/threshold value", 0.80)
    if _is_amount(f):
        return RoleAssignment(SemanticRole.RULE_AMOUNT, "Rule definition - amount", 0.75)
    if f.data_type == DataType.TEXT:
        return RoleAssignment(SemanticRole.DESCRIPTIVE_LABEL, "Rule definition - descriptive text", 0.70)
    if f.data_type in (DataType.INTEGER, DataType.DECIMAL):
        return RoleAssignment(SemanticRole.TIER_BOUNDARY, "Rule definition - threshold value", 0.65)
    if f.data_type == DataType.DATE:
        return RoleAssignment(SemanticRole.PERIOD_MARKER, "Rule definition - effective period", 0.60)
    return None


def bind_entity_field(f: FieldProfile) -> Optional[RoleAssignment]:
    if f.name_signals.contains_id:
        return RoleAssignment(SemanticRole.ENTITY_IDENTIFIER, f"{f.field_name} - unique identifier", 0.90)
    if f.name_signals.contains_name:
        return RoleAssignment(SemanticRole.ENTITY_NAME, f"{f.field_name} - display name", 0.85)
    if f.is_categorical:
        return RoleAssignment(SemanticRole.ENTITY_ATTRIBUTE, f"{f.field_name} - categorical property", 0.70)
    if f.data_type == DataType.DATE:
        return RoleAssignment(SemanticRole.PERIOD_MARKER, f"{f.field_name} - effective date", 0.55)
    return RoleAssignment(SemanticRole.ENTITY_ATTRIBUTE, f"{f.field_name} - entity property", 0.50)


def bind_target_field(f: FieldProfile) -> Optional[RoleAssignment]:
    if f.name_signals.contains_id:
        return RoleAssignment(SemanticRole.ENTITY_IDENTIFIER, f"{f.field_name} - links target to entity", 0.90)
    if f.name_signals.contains_target:
        return RoleAssignment(SemanticRole.PERFORMANCE_TARGET, f"{f.field_name} - goal/benchmark value", 0.90)
    if _is_amount(f):
        return RoleAssignment(SemanticRole.BASELINE_VALUE, f"{f.field_name} - baseline for comparison", 0.70)
    if _is_date(f):
        return RoleAssignment(SemanticRole.PERIOD_MARKER, f"{f.field_name} - target period", 0.65)
    if f.name_signals.contains_name:
        return RoleAssignment(SemanticRole.ENTITY_NAME, f"{f.field_name} - display name", 0.60)
    if f.is_categorical:
        return RoleAssignment(SemanticRole.CATEGORY_CODE, f"{f.field_name} - grouping category", 0.65)
    if f.data_type == DataType.TEXT:
        return RoleAssignment(SemanticRole.ENTITY_ATTRIBUTE, f"{f.field_name} - entity property", 0.50)
    return None


def bind_transaction_field(f: FieldProfile) -> Optional[RoleAssignment]:
    if f.name_signals.contains_id:
        return RoleAssignment(SemanticRole.ENTITY_IDENTIFIER, f"{f.field_name} - links event to entity", 0.85)
    if _is_date(f):
        return RoleAssignment(SemanticRole.TRANSACTION_DATE, f"{f.field_name} - event timestamp", 0.90)
    if _is_amount(f):
        return RoleAssignment(SemanticRole.TRANSACTION_AMOUNT, f"{f.field_name} - monetary value", 0.85)
    if _is_rate(f):
        return RoleAssignment(SemanticRole.RATE_VALUE, f"{f.field_name} - applied rate", 0.60)
    if f.data_type == DataType.INTEGER:
        return RoleAssignment(SemanticRole.TRANSACTION_COUNT, f"{f.field_name} - event count", 0.60)
    if f.is_categorical:
        return RoleAssignment(SemanticRole.CATEGORY_CODE, f"{f.field_name} - classification", 0.70)
    if f.data_type == DataType.TEXT:
        return RoleAssignment(SemanticRole.CATEGORY_CODE, f"{f.field_name} - classification", 0.50)
    return None


BINDERS: Dict[AgentType, Binder] = {
    AgentType.PLAN: bind_plan_field,
    AgentType.TARGET: bind_target_field,
    AgentType.TRANSACTION: bind_transaction_field,
    AgentType.ENTITY: bind_entity_field,
}


def bind_fields(fields: Iterable[FieldProfile], agent: AgentType) -> List[SemanticBinding]:
    """
    Ask an agent to bind each field to a role slot

    Args:
        fields: FieldProfiles in column order
        agent: Claiming agent

    Returns:
        SemanticBindings for the fields the agent recognises
    """
    binder = BINDERS[agent]
    bindings = []
    for f in fields:
        assignment = binder(f)
        if assignment is None:
            continue
        bindings.append(SemanticBinding(
            field_name=f.field_name,
            semantic_role=assignment.role,
            platform_type=f.data_type,
            display_label=f.field_name,
            display_context=assignment.context,
            claimed_by=agent,
            confidence=assignment.confidence,
        ))
    return bindings
