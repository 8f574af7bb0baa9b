"""
Unit tests for WeightEvolutionAnalyzer
"""
import os
import re
from datetime import timedelta
from unittest.mock import patch

import pytest

from content_intelligence.agents import DEFAULT_WEIGHTS, AgentType
from content_intelligence.signals import (
    EvolutionConfig,
    SignalStats,
    SignalWindow,
    WeightEvolutionAnalyzer,
    analyze_weight_evolution,
)

from .conftest import make_signal


def overridden_plan_calls(count, **kwargs):
    """PLAN won on sparsity and a date penalty, a person picked ENTITY"""
    return [
        make_signal(
            AgentType.PLAN, AgentType.ENTITY,
            contributing={
                AgentType.PLAN: ['high_sparsity', 'has_date'],
                AgentType.ENTITY: ['has_entity_id'],
            },
            **kwargs,
        )
        for _ in range(count)
    ]


@pytest.fixture
def analyzer():
    return WeightEvolutionAnalyzer(EvolutionConfig())


class TestMinimumSample:

    def test_too_few_reviewed_decisions(self, analyzer):
        proposal = analyzer.analyze(overridden_plan_calls(4))

        assert proposal.has_enough_data is False
        assert proposal.is_empty
        assert proposal.proposed_table is None
        assert proposal.signals_analyzed == 4

    def test_unreviewed_signals_do_not_count(self, analyzer):
        unreviewed = [make_signal(AgentType.PLAN, contributing={AgentType.PLAN: ['high_sparsity']})
                      for _ in range(20)]
        proposal = analyzer.analyze(unreviewed + overridden_plan_calls(4))

        assert proposal.has_enough_data is False
        assert proposal.signals_analyzed == 24

    def test_confidence_grows_with_sample(self, analyzer):
        assert analyzer.analyze(overridden_plan_calls(10)).confidence == pytest.approx(0.2)
        assert analyzer.analyze(overridden_plan_calls(60)).confidence == 1.0


class TestAdjustments:

    def test_harmful_signal_shrinks_by_capped_step(self, analyzer):
        proposal = analyzer.analyze(overridden_plan_calls(6))
        by_signal = {(a.agent, a.signal): a for a in proposal.adjustments}
        sparsity = by_signal[(AgentType.PLAN, 'high_sparsity')]

        assert sparsity.current_weight == 0.20
        assert sparsity.delta == -0.05
        assert sparsity.proposed_weight == pytest.approx(0.15)
        assert sparsity.harmful_rate == 1.0
        assert "harmful in 6/6" in sparsity.reason

    def test_helpful_signal_grows(self, analyzer):
        proposal = analyzer.analyze(overridden_plan_calls(6))
        by_signal = {(a.agent, a.signal): a for a in proposal.adjustments}
        entity_id = by_signal[(AgentType.ENTITY, 'has_entity_id')]

        # 0.3 * 0.25 * (1.0 - 0.7)
        assert entity_id.delta == pytest.approx(0.0225, abs=0.001)
        assert entity_id.proposed_weight > 0.25

    def test_helpful_penalty_grows_more_negative(self, analyzer):
        """has_date fired against PLAN and PLAN lost: the penalty was right"""
        proposal = analyzer.analyze(overridden_plan_calls(6))
        by_signal = {(a.agent, a.signal): a for a in proposal.adjustments}
        has_date = by_signal[(AgentType.PLAN, 'has_date')]

        assert has_date.delta == pytest.approx(-0.009)
        assert has_date.proposed_weight == pytest.approx(-0.109)

    def test_adjustments_sorted_by_magnitude(self, analyzer):
        deltas = [abs(a.delta) for a in analyzer.analyze(overridden_plan_calls(6)).adjustments]
        assert deltas == sorted(deltas, reverse=True)

    def test_mixed_evidence_leaves_weight_alone(self, analyzer):
        confirmed = [
            make_signal(AgentType.PLAN, AgentType.PLAN, contributing={AgentType.PLAN: ['high_sparsity']})
            for _ in range(3)
        ]
        overridden = [
            make_signal(AgentType.PLAN, AgentType.TARGET, contributing={AgentType.PLAN: ['high_sparsity']})
            for _ in range(3)
        ]
        proposal = analyzer.analyze(confirmed + overridden)

        assert proposal.has_enough_data is True
        assert proposal.is_empty
        assert proposal.proposed_table is None

    def test_rare_signal_is_not_judged(self, analyzer):
        stats = SignalStats(agent=AgentType.PLAN, signal='high_sparsity', observations=1, helpful=0, harmful=1)
        assert analyzer.propose_adjustment(stats) is None

    def test_unknown_signal_is_ignored(self, analyzer):
        signals = [make_signal(AgentType.PLAN, AgentType.ENTITY, contributing={AgentType.PLAN: ['retired_rule']})
                   for _ in range(6)]
        assert analyzer.collect_stats(signals) == []


class TestProposalTable:
    """Proposals are new tables; the base never changes"""

    def test_base_table_untouched(self, analyzer):
        before = DEFAULT_WEIGHTS.to_dict()
        proposal = analyzer.analyze(overridden_plan_calls(6))

        assert DEFAULT_WEIGHTS.to_dict() == before
        assert proposal.proposed_table is not DEFAULT_WEIGHTS
        assert proposal.proposed_table.weight(AgentType.PLAN, 'high_sparsity') == pytest.approx(0.15)
        assert proposal.proposed_table.weight(AgentType.PLAN, 'auto_generated_headers') == 0.25

    def test_version_label(self, analyzer):
        proposal = analyzer.analyze(overridden_plan_calls(6))

        assert proposal.base_version == "1.0.0"
        assert re.fullmatch(r"1\.0\.0\+proposal\.\d{14}", proposal.proposed_table.version)

    def test_window_filters_tenant_and_time(self, analyzer):
        base = make_signal().timestamp
        in_window = overridden_plan_calls(6, tenant_id="tenant-a", timestamp=base)
        other_tenant = overridden_plan_calls(6, tenant_id="tenant-b", timestamp=base)
        too_late = overridden_plan_calls(6, tenant_id="tenant-a", timestamp=base + timedelta(days=30))

        window = SignalWindow(tenant_id="tenant-a", end=base + timedelta(days=1))
        proposal = analyze_weight_evolution(in_window + other_tenant + too_late, window, config=EvolutionConfig())

        assert proposal.signals_analyzed == 6
        assert proposal.window == window

    def test_analyze_store(self, analyzer, signal_store):
        signal_store.append(overridden_plan_calls(6))
        proposal = analyzer.analyze_store(signal_store)

        assert proposal.has_enough_data is True
        assert proposal.signals_analyzed == 6
        assert not proposal.is_empty


class TestConfig:

    def test_from_env(self):
        with patch.dict(os.environ, {"EVOLUTION_MIN_SAMPLE_SIZE": "10", "EVOLUTION_MAX_ADJUSTMENT": "0.02"}):
            config = EvolutionConfig.from_env()

        assert config.min_sample_size == 10
        assert config.max_adjustment == 0.02
        assert config.learning_rate == 0.3

    def test_sample_threshold_from_config(self):
        analyzer = WeightEvolutionAnalyzer(EvolutionConfig(min_sample_size=10))
        assert analyzer.analyze(overridden_plan_calls(6)).has_enough_data is False
