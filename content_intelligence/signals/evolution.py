"""
WeightEvolutionAnalyzer - Offline weight proposals from reviewed decisions

Read-only: consumes a snapshot of signals and returns a WeightProposal
holding a new, separately versioned WeightTable. The base table is never
modified and nothing here puts a proposal into use.
"""
import logging
import math
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from ..agents.models import AgentType
from ..agents.weights import DEFAULT_WEIGHTS, WeightTable
from .config import EvolutionConfig
from .metrics import is_reviewed
from .models import ClassificationSignal, SignalStats, SignalWindow, WeightAdjustment, WeightProposal
from .store import SignalStore

logger = logging.getLogger(__name__)


class WeightEvolutionAnalyzer:
    """Proposes weight changes from how each signal fared under human review"""

    def __init__(self, config: Optional[EvolutionConfig] = None,
                 base_weights: WeightTable = DEFAULT_WEIGHTS):
        """
        Initialize WeightEvolutionAnalyzer

        Args:
            config: EvolutionConfig instance (defaults to env-based config)
            base_weights: Weight table the proposal starts from
        """
        self.config = config or EvolutionConfig.from_env()
        self.base_weights = base_weights

    def collect_stats(self, outcomes: Sequence[ClassificationSignal]) -> List[SignalStats]:
        """
        Count helpful and harmful firings per agent signal

        A firing is helpful when a positive weight fired for the agent the
        person settled on, or a negative weight fired for any other agent.
        """
        counts: Dict[Tuple[AgentType, str], List[int]] = defaultdict(lambda: [0, 0])
        for signal in outcomes:
            final_agent = signal.final_agent
            for agent, names in signal.contributing_signals.items():
                for name in names:
                    weight = self.base_weights.weight(agent, name)
                    if weight is None or weight == 0:
                        continue
                    helpful = (weight > 0) == (agent == final_agent)
                    counts[(agent, name)][0 if helpful else 1] += 1

        agent_order = list(AgentType)
        return [
            SignalStats(agent=agent, signal=name, observations=helpful + harmful,
                        helpful=helpful, harmful=harmful)
            for (agent, name), (helpful, harmful) in sorted(
                counts.items(), key=lambda item: (agent_order.index(item[0][0]), item[0][1])
            )
        ]

    def propose_adjustment(self, stats: SignalStats) -> Optional[WeightAdjustment]:
        """Weight change for one signal, or None when it should stay"""
        if stats.observations < self.config.min_observations:
            return None
        current = self.base_weights.weight(stats.agent, stats.signal)
        if current is None:
            return None

        helpful_rate = stats.helpful / stats.observations
        harmful_rate = stats.harmful / stats.observations
        direction = math.copysign(1.0, current)

        if harmful_rate > self.config.harmful_threshold:
            raw = -direction * self.config.learning_rate * abs(current) * harmful_rate
            reason = f"harmful in {stats.harmful}/{stats.observations} reviewed decisions"
        elif helpful_rate > self.config.helpful_threshold:
            raw = direction * self.config.learning_rate * abs(current) * (helpful_rate - self.config.helpful_threshold)
            reason = f"helpful in {stats.helpful}/{stats.observations} reviewed decisions"
        else:
            return None

        delta = max(-self.config.max_adjustment, min(self.config.max_adjustment, raw))
        if abs(delta) < self.config.min_delta:
            return None

        return WeightAdjustment(
            agent=stats.agent,
            signal=stats.signal,
            current_weight=current,
            proposed_weight=round(current + delta, 3),
            delta=round(delta, 3),
            observations=stats.observations,
            helpful_rate=helpful_rate,
            harmful_rate=harmful_rate,
            reason=reason,
        )

    def analyze(self, signals: Sequence[ClassificationSignal],
                window: Optional[SignalWindow] = None) -> WeightProposal:
        """
        Build a weight proposal from a window of signals

        Args:
            signals: Signals to consider
            window: Tenant and time filter (defaults to everything)

        Returns:
            WeightProposal; empty when there are too few reviewed decisions
        """
        window = window or SignalWindow()
        selected = [s for s in signals if window.contains(s)]
        outcomes = [s for s in selected if is_reviewed(s)]
        generated_at = datetime.now(timezone.utc)
        confidence = round(min(1.0, len(outcomes) / self.config.full_confidence_sample), 2)

        if len(outcomes) < self.config.min_sample_size:
            logger.info(f"Weight evolution skipped: {len(outcomes)} reviewed decisions "
                        f"(need {self.config.min_sample_size})")
            return WeightProposal(
                base_version=self.base_weights.version,
                window=window,
                signals_analyzed=len(selected),
                has_enough_data=False,
                confidence=confidence,
                generated_at=generated_at,
            )

        adjustments = [
            adjustment for adjustment in map(self.propose_adjustment, self.collect_stats(outcomes))
            if adjustment is not None
        ]
        adjustments.sort(key=lambda a: -abs(a.delta))

        proposed_table = None
        if adjustments:
            changes: Dict[AgentType, Dict[str, float]] = defaultdict(dict)
            for adjustment in adjustments:
                changes[adjustment.agent][adjustment.signal] = adjustment.proposed_weight
            proposed_table = self.base_weights.with_adjustments(
                version=f"{self.base_weights.version}+proposal.{generated_at:%Y%m%d%H%M%S}",
                adjustments=changes,
            )

        logger.info(f"Weight evolution over {len(outcomes)} reviewed decisions: "
                    f"{len(adjustments)} adjustments proposed (confidence {confidence:.2f})")

        return WeightProposal(
            base_version=self.base_weights.version,
            window=window,
            signals_analyzed=len(selected),
            has_enough_data=True,
            confidence=confidence,
            adjustments=adjustments,
            proposed_table=proposed_table,
            generated_at=generated_at,
        )

    def analyze_store(self, store: SignalStore, window: Optional[SignalWindow] = None) -> WeightProposal:
        """Analyze a point-in-time snapshot of a signal store"""
        return self.analyze(store.snapshot(window), window)


def analyze_weight_evolution(signals: Sequence[ClassificationSignal],
                             window: Optional[SignalWindow] = None,
                             base_weights: WeightTable = DEFAULT_WEIGHTS,
                             config: Optional[EvolutionConfig] = None) -> WeightProposal:
    """Propose a new weight table from captured signals; never applies it"""
    return WeightEvolutionAnalyzer(config, base_weights).analyze(signals, window)
