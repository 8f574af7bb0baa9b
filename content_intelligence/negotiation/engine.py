"""
NegotiationEngine - Phase 2 field-level negotiation

A Phase 1 leader more than clear_winner_gap ahead keeps the whole unit.
Otherwise rounds are a pure transition negotiation_step(state) -> (state,
done) iterated at most max_rounds times; each applies the single best
contiguous cut among agents close to the leader. When no cut ever
qualifies the Phase 1 winner keeps the whole unit, flagged for review.
"""
import logging
from dataclasses import replace
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from ..agents.models import AgentScore, AgentType
from ..agents.scorer import AgentScorer
from ..claims.bindings import bind_fields
from ..claims.models import ClaimType, ContentClaim
from ..claims.resolver import rank_scores
from ..observability import trace_agent
from ..profiler.models import ContentProfile
from .affinity import aggregate_affinity, best_owner, compute_field_affinities, owned
from .config import NegotiationConfig
from .models import (
    FieldAffinity,
    FieldRange,
    NegotiationLogEntry,
    NegotiationResult,
    NegotiationState,
)

logger = logging.getLogger(__name__)

_EPSILON = 1e-9


class Cut(NamedTuple):
    range_index: int
    left: FieldRange
    right: FieldRange
    gain: float


def merge_adjacent(ranges: Sequence[FieldRange]) -> Tuple[FieldRange, ...]:
    """Join neighbouring ranges owned by the same agent"""
    merged: List[FieldRange] = []
    for r in ranges:
        if merged and merged[-1].agent == r.agent and merged[-1].end + 1 == r.start:
            merged[-1] = FieldRange(merged[-1].start, r.end, r.agent)
        else:
            merged.append(r)
    return tuple(merged)


def find_best_cut(affinities: Sequence[FieldAffinity], ranges: Sequence[FieldRange],
                  config: NegotiationConfig,
                  candidates: Optional[Sequence[AgentType]] = None) -> Optional[Cut]:
    """
    Find the admissible cut with the largest gain

    A cut splits one range in two. It is admissible when the two sides go
    to different agents, each side owns enough non-shared fields, and the
    summed owner affinity rises by at least min_split_gain.

    Args:
        affinities: FieldAffinity per column
        ranges: Current ownership
        config: NegotiationConfig
        candidates: Agents a side may go to (every agent when None)

    Returns:
        Best Cut, or None when no cut is admissible
    """
    best: Optional[Cut] = None
    for index, current in enumerate(ranges):
        span = affinities[current.start:current.end + 1]
        baseline = aggregate_affinity(span, current.agent)
        for position in range(current.start + 1, current.end + 1):
            left = affinities[current.start:position]
            right = affinities[position:current.end + 1]
            if len(owned(left)) < config.min_fields_per_side or len(owned(right)) < config.min_fields_per_side:
                continue
            left_agent, right_agent = best_owner(left, candidates), best_owner(right, candidates)
            if left_agent == right_agent:
                continue
            gain = (aggregate_affinity(left, left_agent)
                    + aggregate_affinity(right, right_agent) - baseline)
            if gain + _EPSILON < config.min_split_gain:
                continue
            if best is None or gain > best.gain + _EPSILON:
                best = Cut(
                    range_index=index,
                    left=FieldRange(current.start, position - 1, left_agent),
                    right=FieldRange(position, current.end, right_agent),
                    gain=gain,
                )
    return best


def negotiation_step(state: NegotiationState,
                     config: NegotiationConfig) -> Tuple[NegotiationState, bool]:
    """
    Run one negotiation round

    Args:
        state: Current ownership and log
        config: NegotiationConfig

    Returns:
        Tuple of (next state, done)
    """
    round_number = state.round + 1
    cut = find_best_cut(state.affinities, state.ranges, config, state.candidates)

    if cut is None:
        entry = NegotiationLogEntry(
            round=round_number,
            stage="no_split",
            message="No contiguous cut improves ownership",
            prior_ranges=list(state.ranges),
            resulting_ranges=list(state.ranges),
        )
        return replace(state, round=round_number, log=state.log + (entry,)), True

    ranges = list(state.ranges)
    ranges[cut.range_index:cut.range_index + 1] = [cut.left, cut.right]
    resulting = merge_adjacent(ranges)
    entry = NegotiationLogEntry(
        round=round_number,
        stage="split",
        message=f"Split {state.ranges[cut.range_index].describe()} into "
                f"{cut.left.describe()} + {cut.right.describe()} (gain {cut.gain:.2f})",
        agent=cut.right.agent,
        prior_ranges=list(state.ranges),
        resulting_ranges=list(resulting),
        data={"gain": round(cut.gain, 4), "cut_at": cut.right.start},
    )
    next_state = replace(state, ranges=resulting, round=round_number, log=state.log + (entry,))
    return next_state, round_number >= config.max_rounds


class NegotiationEngine:
    """Splits spatially mixed content units among agents at field granularity"""

    def __init__(self, config: Optional[NegotiationConfig] = None,
                 scorer: Optional[AgentScorer] = None):
        """
        Initialize NegotiationEngine

        Args:
            config: NegotiationConfig instance (defaults to env-based config)
            scorer: AgentScorer used when no Phase 1 scores are supplied
        """
        self.config = config or NegotiationConfig.from_env()
        self.scorer = scorer or AgentScorer()

    def apply_absence_boost(self, scores: Sequence[AgentScore]) -> Tuple[List[AgentScore], Optional[NegotiationLogEntry]]:
        """
        Boost the leader when enough competitors are effectively absent

        Returns:
            Tuple of (scores with the leader boosted, log entry or None)
        """
        ranked = rank_scores(scores)
        if len(ranked) < 2:
            return ranked, None

        leader, others = ranked[0], ranked[1:]
        weak = sum(1 for s in others if s.confidence < self.config.absence_threshold)
        if weak < self.config.absence_min_weak:
            return ranked, None

        boosted = min(1.0, leader.confidence + self.config.absence_boost)
        entry = NegotiationLogEntry(
            round=1,
            stage="absence_boost",
            message=f"{leader.agent.value} boosted {leader.confidence:.0%} -> {boosted:.0%} "
                    f"({weak} weak competitors)",
            agent=leader.agent,
            data={"original": leader.confidence, "boosted": boosted, "weak_count": weak},
        )
        leader = replace(leader, confidence=boosted,
                         reasoning=f"{leader.reasoning} (+boost: {weak} weak competitors)")
        return [leader] + list(others), entry

    def clear_lead(self, scores: Sequence[AgentScore]) -> Optional[float]:
        """Leader's lead over the runner-up when it exceeds clear_winner_gap, else None"""
        ranked = rank_scores(scores)
        if len(ranked) < 2 or ranked[0].confidence <= 0.0:
            return None
        gap = ranked[0].confidence - ranked[1].confidence
        return gap if gap > self.config.clear_winner_gap + _EPSILON else None

    def contenders(self, scores: Sequence[AgentScore]) -> Tuple[AgentType, ...]:
        """Agents with a whole-sheet score within clear_winner_gap of the leader"""
        ranked = rank_scores(scores)
        if not ranked:
            return ()
        floor = ranked[0].confidence - self.config.clear_winner_gap - _EPSILON
        return tuple(s.agent for s in ranked if s.confidence > 0.0 and s.confidence >= floor)

    def detect_spatial_mixing(self, profile: ContentProfile) -> bool:
        """
        Check whether one sheet appears to hold several layouts side by side

        True when the header name signals alone admit a cut against the best
        single owner, or when the mean null rate jumps across some column
        boundary. Columns with no values at all are left out of the null
        rate comparison.
        """
        affinities = compute_field_affinities(profile, names_only=True)
        if not affinities:
            return False

        whole = (FieldRange(0, len(affinities) - 1, best_owner(affinities)),)
        if find_best_cut(affinities, whole, self.config) is not None:
            return True

        null_rates = np.array([f.null_rate for f in profile.fields if f.non_null_count > 0], dtype=float)
        for position in range(2, len(null_rates) - 1):
            gap = abs(null_rates[:position].mean() - null_rates[position:].mean())
            if gap + _EPSILON >= self.config.sparsity_gradient:
                return True
        return False

    @trace_agent("NegotiationEngine")
    def negotiate(self, profile: ContentProfile, prior_claims: Sequence[ContentClaim],
                  scores: Optional[Sequence[AgentScore]] = None) -> NegotiationResult:
        """
        Negotiate field ownership for one content unit

        A clear winner keeps the whole unit without review. Otherwise only
        agents close to the leader on the whole sheet may own a region.

        Args:
            profile: ContentProfile
            prior_claims: Claims going in, usually the Phase 1 FULL claim
            scores: Phase 1 AgentScores (rescored when omitted)

        Returns:
            NegotiationResult with region claims or a single FULL claim
        """
        boosted, boost_entry = self.apply_absence_boost(scores or self.scorer.score(profile))
        affinities = tuple(compute_field_affinities(profile))
        initial = self._initial_ranges(profile, prior_claims, boosted[0].agent)
        contenders = self.contenders(boosted)

        log: List[NegotiationLogEntry] = [boost_entry] if boost_entry else []
        log.append(NegotiationLogEntry(
            round=1,
            stage="field_affinity",
            message=f"Scored {len(affinities)} fields, {sum(fa.is_shared for fa in affinities)} shared",
            prior_ranges=list(initial),
            resulting_ranges=list(initial),
            data={
                "affinities": {fa.field_name: {a.value: v for a, v in fa.affinities.items()}
                               for fa in affinities},
                "contenders": [agent.value for agent in contenders],
            },
        ))

        state = NegotiationState(
            content_unit_id=profile.content_unit_id,
            affinities=affinities,
            ranges=initial,
            log=tuple(log),
            candidates=contenders,
        )

        lead = self.clear_lead(boosted)
        if lead is not None and len(initial) <= 1:
            result = self._clear_winner_result(profile, state, boosted, lead)
        else:
            if affinities and len(contenders) > 1:
                for _ in range(self.config.max_rounds):
                    state, done = negotiation_step(state, self.config)
                    if done:
                        break

            if len(state.ranges) > 1:
                result = self._split_result(profile, state)
            else:
                result = self._fallback_result(profile, state, boosted, initial)

        logger.info(f"Negotiated {profile.content_unit_id}: "
                    f"{'split into ' + str(len(result.claims)) + ' regions' if result.split else 'no split'} "
                    f"after {result.rounds} rounds (review={result.requires_review})")
        return result

    @staticmethod
    def _initial_ranges(profile: ContentProfile, prior_claims: Sequence[ContentClaim],
                        leader: AgentType) -> Tuple[FieldRange, ...]:
        """Ownership going in: prior region claims when they tile the sheet, else one range"""
        last = len(profile.fields) - 1
        if last < 0:
            return ()

        regions = sorted((c for c in prior_claims if c.field_range is not None),
                         key=lambda c: c.field_range[0])
        expected = 0
        for claim in regions:
            if claim.field_range[0] != expected:
                break
            expected = claim.field_range[1] + 1
        else:
            if regions and expected == last + 1:
                return merge_adjacent([FieldRange(c.field_range[0], c.field_range[1], c.agent)
                                       for c in regions])

        agent = prior_claims[0].agent if prior_claims else leader
        return (FieldRange(0, last, agent),)

    def _split_result(self, profile: ContentProfile, state: NegotiationState) -> NegotiationResult:
        shared = [fa for fa in state.affinities if fa.is_shared]
        shared_names = [fa.field_name for fa in shared]
        shared_indexes = {fa.field_index for fa in shared}

        claims = []
        for r in state.ranges:
            region = state.affinities[r.start:r.end + 1]
            region_owned = owned(region)
            confidence = float(np.mean([fa.affinities[r.agent] for fa in region_owned])) if region_owned else 0.0
            bound_indexes = {fa.field_index for fa in region_owned} | shared_indexes
            bound = [f for f in profile.fields if f.field_index in bound_indexes]
            claims.append(ContentClaim(
                content_unit_id=profile.content_unit_id,
                agent=r.agent,
                claim_type=ClaimType.PARTIAL,
                confidence=confidence,
                semantic_bindings=bind_fields(bound, r.agent),
                reasoning=f"{r.agent.value} owns columns {r.start}-{r.end} "
                          f"(mean affinity {confidence:.2f})",
                fields=[fa.field_name for fa in region_owned],
                shared_fields=shared_names,
                field_range=(r.start, r.end),
            ))

        return NegotiationResult(
            content_unit_id=profile.content_unit_id,
            claims=claims,
            split=True,
            requires_review=any(c.confidence < self.config.review_confidence for c in claims),
            rounds=state.round,
            field_affinities=list(state.affinities),
            log=list(state.log),
        )

    def _clear_winner_result(self, profile: ContentProfile, state: NegotiationState,
                             boosted: List[AgentScore], lead: float) -> NegotiationResult:
        leader = boosted[0]
        entry = NegotiationLogEntry(
            round=1,
            stage="clear_winner",
            message=f"No split: clear winner {leader.agent.value} (gap {lead:.0%})",
            agent=leader.agent,
            prior_ranges=list(state.ranges),
            resulting_ranges=list(state.ranges),
            data={"gap": round(lead, 4), "runner_up": boosted[1].agent.value},
        )
        return self._full_result(profile, state, leader, entry,
                                 reasoning=f"{leader.reasoning} (clear winner by {lead:.0%})",
                                 requires_review=False)

    def _fallback_result(self, profile: ContentProfile, state: NegotiationState,
                         boosted: List[AgentScore], initial: Tuple[FieldRange, ...]) -> NegotiationResult:
        agent = initial[0].agent if initial else boosted[0].agent
        leader = next((s for s in boosted if s.agent == agent), boosted[0])

        entry = NegotiationLogEntry(
            round=max(state.round, 1),
            stage="fallback",
            message=f"No improving split; {agent.value} keeps the whole unit pending review",
            agent=agent,
            prior_ranges=list(state.ranges),
            resulting_ranges=list(state.ranges),
        )
        return self._full_result(profile, state, leader, entry,
                                 reasoning=f"{leader.reasoning} (negotiation found no improving split)",
                                 requires_review=True)

    @staticmethod
    def _full_result(profile: ContentProfile, state: NegotiationState, leader: AgentScore,
                     entry: NegotiationLogEntry, reasoning: str, requires_review: bool) -> NegotiationResult:
        """One FULL claim for the leader over the whole unit"""
        claim = ContentClaim(
            content_unit_id=profile.content_unit_id,
            agent=leader.agent,
            claim_type=ClaimType.FULL,
            confidence=leader.confidence,
            semantic_bindings=bind_fields(profile.fields, leader.agent),
            reasoning=reasoning,
            fields=[f.field_name for f in profile.fields],
            shared_fields=[fa.field_name for fa in state.affinities if fa.is_shared],
        )
        return NegotiationResult(
            content_unit_id=profile.content_unit_id,
            claims=[claim],
            split=False,
            requires_review=requires_review,
            rounds=state.round,
            field_affinities=list(state.affinities),
            log=list(state.log) + [entry],
        )


def negotiate(profile: ContentProfile, prior_claims: Sequence[ContentClaim],
              scores: Optional[Sequence[AgentScore]] = None,
              config: Optional[NegotiationConfig] = None) -> NegotiationResult:
    """Run Phase 2 negotiation for one content unit"""
    return NegotiationEngine(config).negotiate(profile, prior_claims, scores)


def detect_spatial_mixing(profile: ContentProfile, config: Optional[NegotiationConfig] = None) -> bool:
    """True when a sheet looks like several layouts placed side by side"""
    return NegotiationEngine(config).detect_spatial_mixing(profile)
