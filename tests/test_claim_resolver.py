"""
Unit tests for ClaimResolver and semantic bindings
"""
import os
from unittest.mock import patch

import pytest

from content_intelligence.agents import AgentScore, AgentScorer, AgentType
from content_intelligence.claims import (
    ClaimResolver,
    ClaimType,
    ReviewConfig,
    SemanticRole,
    bind_fields,
    requires_human_review,
    resolve_claims_phase1,
)
from content_intelligence.profiler import DataType, FieldProfile, NameSignals


def _scores(*pairs):
    return [AgentScore(agent=agent, confidence=confidence, reasoning=f"{agent.value} agent")
            for agent, confidence in pairs]


class TestRequiresHumanReview:
    """Review is needed only when the call is both close and weak"""

    @pytest.mark.parametrize("top,second,expected", [
        (0.45, 0.42, True),    # close and weak
        (0.80, 0.30, False),   # decisive and strong
        (0.45, 0.20, False),   # weak but decisive
        (0.80, 0.75, False),   # close but strong
        (0.50, 0.45, False),   # leader exactly at the confidence threshold
        (0.40, 0.30, False),   # gap exactly at the gap threshold
    ])
    def test_boundaries(self, top, second, expected):
        scores = _scores((AgentType.PLAN, top), (AgentType.TARGET, second))
        assert requires_human_review(scores, ReviewConfig()) is expected

    def test_unsorted_input(self):
        scores = _scores((AgentType.PLAN, 0.42), (AgentType.TARGET, 0.45), (AgentType.ENTITY, 0.1))
        assert requires_human_review(scores, ReviewConfig()) is True

    def test_fewer_than_two_scores(self):
        assert requires_human_review([], ReviewConfig()) is False
        assert requires_human_review(_scores((AgentType.PLAN, 0.1)), ReviewConfig()) is False

    def test_thresholds_from_env(self):
        scores = _scores((AgentType.PLAN, 0.70), (AgentType.TARGET, 0.55))
        with patch.dict(os.environ, {"CLAIMS_REVIEW_GAP": "0.2", "CLAIMS_REVIEW_CONFIDENCE": "0.8"}):
            resolver = ClaimResolver()
        assert resolver.config.gap_threshold == 0.2
        assert resolver.requires_human_review(scores) is True

    def test_fixture_sheets_do_not_need_review(self, goals_profile, events_profile, roster_profile):
        for profile in (goals_profile, events_profile, roster_profile):
            assert requires_human_review(AgentScorer().score(profile), ReviewConfig()) is False


class TestResolvePhase1:

    def test_claim_goes_to_top_scorer(self, roster_profile):
        scores = AgentScorer().score(roster_profile)
        claim = resolve_claims_phase1(roster_profile, scores, ReviewConfig())

        assert claim.agent == scores[0].agent == AgentType.ENTITY
        assert claim.claim_type == ClaimType.FULL
        assert claim.confidence == scores[0].confidence
        assert claim.content_unit_id == roster_profile.content_unit_id
        assert claim.fields == [f.field_name for f in roster_profile.fields]
        assert claim.field_range is None
        assert len(claim.semantic_bindings) > 0

    def test_target_bindings(self, goals_profile):
        claim = resolve_claims_phase1(goals_profile, AgentScorer().score(goals_profile), ReviewConfig())
        roles = {b.field_name: b.semantic_role for b in claim.semantic_bindings}

        assert roles == {
            "Officer ID": SemanticRole.ENTITY_IDENTIFIER,
            "Name": SemanticRole.ENTITY_NAME,
            "Target Amount": SemanticRole.PERFORMANCE_TARGET,
            "Region": SemanticRole.CATEGORY_CODE,
        }
        assert all(b.claimed_by == AgentType.TARGET for b in claim.semantic_bindings)
        assert all(b.display_label == b.field_name for b in claim.semantic_bindings)

    def test_transaction_bindings(self, events_profile):
        claim = resolve_claims_phase1(events_profile, AgentScorer().score(events_profile), ReviewConfig())
        roles = {b.field_name: b.semantic_role for b in claim.semantic_bindings}

        assert roles["Date"] == SemanticRole.TRANSACTION_DATE
        assert roles["Amount"] == SemanticRole.TRANSACTION_AMOUNT
        assert roles["Transaction ID"] == SemanticRole.ENTITY_IDENTIFIER
        assert roles["Category"] == SemanticRole.CATEGORY_CODE

    def test_plan_binds_every_rule_column(self, rules_profile):
        claim = resolve_claims_phase1(rules_profile, AgentScorer().score(rules_profile), ReviewConfig())
        by_field = {b.field_name: b for b in claim.semantic_bindings}

        assert claim.agent == AgentType.PLAN
        assert len(by_field) == len(rules_profile.fields)
        assert by_field["__EMPTY_5"].semantic_role == SemanticRole.RATE_VALUE
        assert by_field["__EMPTY_5"].platform_type == DataType.DECIMAL

    def test_empty_scores_are_rescored(self, goals_profile):
        claim = resolve_claims_phase1(goals_profile, [], ReviewConfig())
        assert claim.agent == AgentType.TARGET
        assert claim.confidence == pytest.approx(0.85)

    def test_close_call_noted_in_reasoning(self, goals_profile):
        scores = _scores((AgentType.TARGET, 0.42), (AgentType.PLAN, 0.45))
        claim = resolve_claims_phase1(goals_profile, scores, ReviewConfig())

        assert claim.agent == AgentType.PLAN
        assert claim.reasoning == "plan agent (close call: gap 0.03 with target)"

    def test_decisive_call_keeps_agent_reasoning(self, goals_profile):
        scores = AgentScorer().score(goals_profile)
        claim = resolve_claims_phase1(goals_profile, scores, ReviewConfig())
        assert claim.reasoning == scores[0].reasoning


class TestBindings:
    """Fields an agent does not recognise are omitted"""

    @staticmethod
    def _field(name, data_type, **kwargs):
        return FieldProfile(field_name=name, field_index=0, data_type=data_type,
                            name_signals=NameSignals(**kwargs))

    def test_transaction_omits_plain_decimals(self):
        fields = [self._field("Score", DataType.DECIMAL), self._field("When", DataType.DATE)]
        bindings = bind_fields(fields, AgentType.TRANSACTION)

        assert [b.field_name for b in bindings] == ["When"]
        assert bindings[0].semantic_role == SemanticRole.TRANSACTION_DATE

    def test_target_omits_unlabelled_numbers(self):
        fields = [self._field("Score", DataType.INTEGER), self._field("Goal", DataType.INTEGER, contains_target=True)]
        bindings = bind_fields(fields, AgentType.TARGET)

        assert [b.semantic_role for b in bindings] == [SemanticRole.PERFORMANCE_TARGET]

    def test_entity_binds_everything(self):
        fields = [self._field("Score", DataType.DECIMAL), self._field("Since", DataType.DATE)]
        roles = [b.semantic_role for b in bind_fields(fields, AgentType.ENTITY)]

        assert roles == [SemanticRole.ENTITY_ATTRIBUTE, SemanticRole.PERIOD_MARKER]

    def test_plan_roles(self):
        fields = [
            self._field("Floor", DataType.INTEGER),
            self._field("Cap", DataType.CURRENCY),
            self._field("Pct", DataType.DECIMAL, contains_rate=True),
            self._field("Label", DataType.TEXT),
        ]
        roles = [b.semantic_role for b in bind_fields(fields, AgentType.PLAN)]
        assert roles == [
            SemanticRole.TIER_BOUNDARY,
            SemanticRole.RULE_AMOUNT,
            SemanticRole.RATE_VALUE,
            SemanticRole.DESCRIPTIVE_LABEL,
        ]
