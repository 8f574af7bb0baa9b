"""
ClaimResolver - Phase 1 whole-unit claim resolution
"""
import logging
from typing import List, Optional, Sequence

from ..agents.models import AgentScore
from ..agents.scorer import AgentScorer
from ..profiler.models import ContentProfile
from .bindings import bind_fields
from .config import ReviewConfig
from .models import ClaimType, ContentClaim

logger = logging.getLogger(__name__)


def rank_scores(scores: Sequence[AgentScore]) -> List[AgentScore]:
    return sorted(scores, key=lambda s: -s.confidence)


class ClaimResolver:
    """Picks the winning agent for a whole content unit and flags weak, close calls"""

    def __init__(self, config: Optional[ReviewConfig] = None):
        """
        Initialize ClaimResolver

        Args:
            config: ReviewConfig instance (defaults to env-based config)
        """
        self.config = config or ReviewConfig.from_env()

    def requires_human_review(self, scores: Sequence[AgentScore]) -> bool:
        """
        Check whether a ranking is both ambiguous and weak

        Args:
            scores: AgentScores for one content unit

        Returns:
            True iff the top-two gap is below the gap threshold and the
            leader is below the confidence threshold
        """
        if len(scores) < 2:
            return False
        ranked = rank_scores(scores)
        gap = ranked[0].confidence - ranked[1].confidence
        return gap < self.config.gap_threshold and ranked[0].confidence < self.config.confidence_threshold

    def resolve_phase1(self, profile: ContentProfile, scores: Sequence[AgentScore]) -> ContentClaim:
        """
        Resolve a FULL claim for the highest-confidence agent

        Args:
            profile: ContentProfile that was scored
            scores: Its AgentScores (rescored when empty)

        Returns:
            ContentClaim covering every field
        """
        ranked = rank_scores(scores) if scores else AgentScorer().score(profile)
        winner = ranked[0]
        runner_up = ranked[1] if len(ranked) > 1 else None
        gap = winner.confidence - (runner_up.confidence if runner_up else 0.0)

        reasoning = winner.reasoning
        if runner_up is not None and gap < self.config.gap_threshold:
            reasoning += f" (close call: gap {gap:.2f} with {runner_up.agent.value})"

        bindings = bind_fields(profile.fields, winner.agent)
        logger.info(f"Phase 1 claim for {profile.content_unit_id}: {winner.agent.value} "
                    f"({winner.confidence:.2f}, gap {gap:.2f}, {len(bindings)} bindings)")

        return ContentClaim(
            content_unit_id=profile.content_unit_id,
            agent=winner.agent,
            claim_type=ClaimType.FULL,
            confidence=winner.confidence,
            semantic_bindings=bindings,
            reasoning=reasoning,
            fields=[f.field_name for f in profile.fields],
        )


def resolve_claims_phase1(profile: ContentProfile, scores: Sequence[AgentScore],
                          config: Optional[ReviewConfig] = None) -> ContentClaim:
    """Resolve the Phase 1 claim for a scored profile"""
    return ClaimResolver(config).resolve_phase1(profile, scores)


def requires_human_review(scores: Sequence[AgentScore],
                          config: Optional[ReviewConfig] = None) -> bool:
    """True when the top two scores are close and the leader is weak"""
    return ClaimResolver(config).requires_human_review(scores)
