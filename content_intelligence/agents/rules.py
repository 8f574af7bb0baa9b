"""
Per-agent structural scoring rules

Each agent is a pure function (profile, weights) -> signals, looked up
through AGENT_RULES. A rule fires when its predicate holds and its
signal name has a weight in the table passed in; a table without the
name switches the rule off.
"""
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Tuple

from ..profiler.models import ContentProfile, DataType, HeaderQuality, RowCountCategory
from .models import AgentSignal, AgentType

HIGH_SPARSITY = 0.30
CATEGORICAL_MAX_DISTINCT = 20
HIGH_CURRENCY_COLUMNS = 2
MAX_TARGET_CURRENCY_COLUMNS = 3


@dataclass(frozen=True)
class SignalRule:
    """A named structural predicate with a human-readable rationale"""
    name: str
    test: Callable[[ContentProfile], bool]
    rationale: Callable[[ContentProfile], str]


AgentRule = Callable[[ContentProfile, Mapping[str, float]], List[AgentSignal]]


def _auto_generated(p: ContentProfile) -> bool:
    return p.structure.header_quality == HeaderQuality.AUTO_GENERATED


def _clean_headers(p: ContentProfile) -> bool:
    return p.structure.header_quality == HeaderQuality.CLEAN


def _high_sparsity(p: ContentProfile) -> bool:
    return p.structure.sparsity > HIGH_SPARSITY


def _reference_rows(p: ContentProfile) -> bool:
    return p.patterns.row_count_category == RowCountCategory.REFERENCE


def _transactional_rows(p: ContentProfile) -> bool:
    return p.patterns.row_count_category == RowCountCategory.TRANSACTIONAL


def _has_name_field(p: ContentProfile) -> bool:
    return any(f.name_signals.contains_name for f in p.fields)


def _has_target_field(p: ContentProfile) -> bool:
    return any(f.name_signals.contains_target for f in p.fields)


def _categorical_attributes(p: ContentProfile) -> bool:
    categorical = [
        f for f in p.fields
        if f.data_type == DataType.TEXT and 0 < f.distinct_count < CATEGORICAL_MAX_DISTINCT
    ]
    return len(categorical) >= 2


def _unique_identifier(p: ContentProfile) -> bool:
    return any(f.name_signals.contains_id and f.is_unique for f in p.fields)


def _sparsity_pct(p: ContentProfile) -> str:
    return f"sparsity {p.structure.sparsity * 100:.0f}% > {HIGH_SPARSITY * 100:.0f}%"


def _rows(label: str) -> Callable[[ContentProfile], str]:
    return lambda p: f"{p.structure.row_count} rows ({label})"


def _currency_columns(suffix: str = "") -> Callable[[ContentProfile], str]:
    return lambda p: f"{p.patterns.has_currency_columns} currency columns{suffix}"


def _text(message: str) -> Callable[[ContentProfile], str]:
    return lambda p: message


AUTO_GENERATED_HEADERS = SignalRule('auto_generated_headers', _auto_generated,
                                    _text("headers match the reader placeholder pattern"))
CLEAN_HEADERS = SignalRule('clean_headers', _clean_headers, _text("clean headers"))
HIGH_SPARSITY_RULE = SignalRule('high_sparsity', _high_sparsity, _sparsity_pct)
REFERENCE_ROWS = SignalRule('reference_rows', _reference_rows, _rows("reference"))
TRANSACTIONAL_ROWS = SignalRule('transactional_rows', _transactional_rows, _rows("transactional"))
HAS_ENTITY_ID = SignalRule('has_entity_id', lambda p: p.patterns.has_entity_identifier,
                           _text("entity identifier column present"))
NO_ENTITY_ID = SignalRule('no_entity_id', lambda p: not p.patterns.has_entity_identifier,
                          _text("no entity identifier column"))
HAS_DATE = SignalRule('has_date', lambda p: p.patterns.has_date_column, _text("date column present"))
NO_DATE = SignalRule('no_date', lambda p: not p.patterns.has_date_column, _text("no date column"))


PLAN_RULES: Tuple[SignalRule, ...] = (
    AUTO_GENERATED_HEADERS,
    HIGH_SPARSITY_RULE,
    SignalRule('percentage_values', lambda p: p.patterns.has_percentage_values,
               _text("percentage values detected")),
    SignalRule('descriptive_labels', lambda p: p.patterns.has_descriptive_labels,
               _text("low-cardinality descriptive text columns")),
    REFERENCE_ROWS,
    NO_ENTITY_ID,
    SignalRule('has_currency', lambda p: p.patterns.has_currency_columns > 0, _currency_columns()),
    HAS_DATE,
    TRANSACTIONAL_ROWS,
    HAS_ENTITY_ID,
)

ENTITY_RULES: Tuple[SignalRule, ...] = (
    HAS_ENTITY_ID,
    SignalRule('has_name_field', _has_name_field, _text("name field detected")),
    SignalRule('categorical_attributes', _categorical_attributes,
               _text("2+ categorical text fields")),
    SignalRule('unique_identifier', _unique_identifier,
               _text("identifier values are all distinct")),
    NO_DATE,
    SignalRule('no_currency', lambda p: p.patterns.has_currency_columns == 0,
               _text("no currency columns")),
    SignalRule('high_currency', lambda p: p.patterns.has_currency_columns > HIGH_CURRENCY_COLUMNS,
               _currency_columns(f" (>{HIGH_CURRENCY_COLUMNS})")),
    TRANSACTIONAL_ROWS,
    AUTO_GENERATED_HEADERS,
)

TARGET_RULES: Tuple[SignalRule, ...] = (
    SignalRule('has_target_field', _has_target_field, _text("target/goal field detected")),
    HAS_ENTITY_ID,
    REFERENCE_ROWS,
    SignalRule('has_currency',
               lambda p: 0 < p.patterns.has_currency_columns <= MAX_TARGET_CURRENCY_COLUMNS,
               _currency_columns(f" (1-{MAX_TARGET_CURRENCY_COLUMNS})")),
    NO_DATE,
    CLEAN_HEADERS,
    NO_ENTITY_ID,
    TRANSACTIONAL_ROWS,
    AUTO_GENERATED_HEADERS,
    HIGH_SPARSITY_RULE,
)

TRANSACTION_RULES: Tuple[SignalRule, ...] = (
    HAS_DATE,
    TRANSACTIONAL_ROWS,
    HAS_ENTITY_ID,
    SignalRule('has_currency', lambda p: p.patterns.has_currency_columns > 0, _currency_columns()),
    CLEAN_HEADERS,
    NO_DATE,
    REFERENCE_ROWS,
    AUTO_GENERATED_HEADERS,
    HIGH_SPARSITY_RULE,
)


def evaluate_rules(rules: Tuple[SignalRule, ...], profile: ContentProfile,
                   weights: Mapping[str, float]) -> List[AgentSignal]:
    """
    Evaluate rules against a profile

    Args:
        rules: Rules for one agent
        profile: ContentProfile to inspect
        weights: signal name -> weight for the same agent

    Returns:
        AgentSignal for every rule that fired and has a weight
    """
    signals = []
    for rule in rules:
        if rule.name not in weights:
            continue
        if rule.test(profile):
            signals.append(AgentSignal(
                name=rule.name,
                weight=float(weights[rule.name]),
                rationale=rule.rationale(profile),
            ))
    return signals


def score_plan(profile: ContentProfile, weights: Mapping[str, float]) -> List[AgentSignal]:
    """Sparse, loosely headed rule sheets with labels and rates"""
    return evaluate_rules(PLAN_RULES, profile, weights)


def score_entity(profile: ContentProfile, weights: Mapping[str, float]) -> List[AgentSignal]:
    """One row per identified thing, with names and categorical attributes"""
    return evaluate_rules(ENTITY_RULES, profile, weights)


def score_target(profile: ContentProfile, weights: Mapping[str, float]) -> List[AgentSignal]:
    """Goal values keyed by identifier, small and undated"""
    return evaluate_rules(TARGET_RULES, profile, weights)


def score_transaction(profile: ContentProfile, weights: Mapping[str, float]) -> List[AgentSignal]:
    """Dated amount events, many rows"""
    return evaluate_rules(TRANSACTION_RULES, profile, weights)


AGENT_RULES: Dict[AgentType, AgentRule] = {
    AgentType.PLAN: score_plan,
    AgentType.TARGET: score_target,
    AgentType.TRANSACTION: score_transaction,
    AgentType.ENTITY: score_entity,
}
