"""
ContentClassifier - profile -> score -> claim -> negotiate
"""
import logging
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from .agents import AgentScore, AgentScorer, AgentType, DEFAULT_WEIGHTS, WeightTable
from .claims import ClaimResolver, ContentClaim, ReviewConfig
from .negotiation import NegotiationConfig, NegotiationEngine, NegotiationResult
from .observability import trace_agent
from .profiler import ContentProfile, ContentProfiler, ProfilerConfig
from .signals import ClassificationSignal, SignalCaptureService

logger = logging.getLogger(__name__)


def to_jsonable(value: Any) -> Any:
    """Convert classification results into JSON-ready structures"""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if hasattr(value, "model_dump"):
        return to_jsonable(value.model_dump())
    if isinstance(value, dict) or hasattr(value, "items"):
        return {to_jsonable(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


@dataclass(frozen=True)
class ClassificationOutcome:
    """Everything one classification call decided about a content unit"""
    profile: ContentProfile
    scores: List[AgentScore]
    claim: ContentClaim
    requires_review: bool
    negotiation: Optional[NegotiationResult] = None
    weights_version: str = ""
    notes: List[str] = field(default_factory=list)

    @property
    def agent(self) -> AgentType:
        return self.claim.agent

    @property
    def claims(self) -> List[ContentClaim]:
        """Region claims when negotiation split the unit, otherwise the Phase 1 claim"""
        if self.negotiation is not None and self.negotiation.split:
            return self.negotiation.claims
        return [self.claim]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content_unit_id": self.profile.content_unit_id,
            "agent": self.agent.value,
            "requires_review": self.requires_review,
            "weights_version": self.weights_version,
            "scores": to_jsonable(self.scores),
            "claims": to_jsonable(self.claims),
            "negotiated": self.negotiation is not None,
            "split": bool(self.negotiation and self.negotiation.split),
            "profile": to_jsonable(self.profile),
            "notes": list(self.notes),
        }


class ContentClassifier:
    """
    Classifies content units end to end.
    Holds configuration only; every call builds fresh results.
    """

    def __init__(self,
                 profiler_config: Optional[ProfilerConfig] = None,
                 review_config: Optional[ReviewConfig] = None,
                 negotiation_config: Optional[NegotiationConfig] = None,
                 weights: WeightTable = DEFAULT_WEIGHTS,
                 signal_service: Optional[SignalCaptureService] = None):
        """
        Initialize ContentClassifier

        Args:
            profiler_config: ProfilerConfig (defaults to env-based config)
            review_config: ReviewConfig (defaults to env-based config)
            negotiation_config: NegotiationConfig (defaults to env-based config)
            weights: Default weight table for scoring
            signal_service: Sink for decision signals (created on first capture when omitted)
        """
        self.profiler = ContentProfiler(profiler_config)
        self.scorer = AgentScorer(weights)
        self.resolver = ClaimResolver(review_config)
        self.negotiator = NegotiationEngine(negotiation_config, self.scorer)
        self._signal_service = signal_service

        logger.info(f"ContentClassifier initialized (weights {weights.version})")

    @trace_agent("ContentClassifier")
    def classify(self,
                 sheet_name: str,
                 sheet_index: int,
                 source_file_name: str,
                 headers: Sequence[Any],
                 rows: Sequence[Any],
                 weights: Optional[WeightTable] = None) -> ClassificationOutcome:
        """
        Classify one sheet

        Args:
            sheet_name: Sheet or tab name
            sheet_index: Zero-based sheet position
            source_file_name: Uploaded file name
            headers: Ordered column headers
            rows: Row records mapping header -> raw value
            weights: Weight table for this call (defaults to the classifier's)

        Returns:
            ClassificationOutcome
        """
        profile = self.profiler.generate_content_profile(
            sheet_name, sheet_index, source_file_name, headers, rows
        )
        return self.classify_profile(profile, weights)

    def classify_profile(self, profile: ContentProfile,
                         weights: Optional[WeightTable] = None) -> ClassificationOutcome:
        """Score, resolve and, when ambiguous or mixed, negotiate an existing profile"""
        table = weights or self.scorer.weights
        scores = self.scorer.score(profile, table)
        claim = self.resolver.resolve_phase1(profile, scores)
        ambiguous = self.resolver.requires_human_review(scores)

        notes = []
        negotiation = None
        if ambiguous:
            notes.append("phase 1 ambiguous: top scores close and weak")
        mixed = self.negotiator.detect_spatial_mixing(profile)
        if mixed:
            notes.append("columns suggest more than one layout")
        if ambiguous or mixed:
            negotiation = self.negotiator.negotiate(profile, [claim], scores)

        # an unsplit unit keeps the Phase 1 claim and its review verdict
        if negotiation is not None and negotiation.split:
            requires_review = negotiation.requires_review
        else:
            requires_review = ambiguous
        logger.info(f"Classified {profile.content_unit_id} as {claim.agent.value} "
                    f"({claim.confidence:.2f}), review={requires_review}")

        return ClassificationOutcome(
            profile=profile,
            scores=scores,
            claim=claim,
            requires_review=requires_review,
            negotiation=negotiation,
            weights_version=table.version,
            notes=notes,
        )

    @property
    def signal_service(self) -> SignalCaptureService:
        if self._signal_service is None:
            self._signal_service = SignalCaptureService()
        return self._signal_service

    def record_decision(self, outcome: ClassificationOutcome, tenant_id: str,
                        human_agent: Optional[AgentType] = None) -> ClassificationSignal:
        """
        Capture the final decision for a classified unit (fire-and-forget)

        Args:
            outcome: ClassificationOutcome that was acted on
            tenant_id: Tenant the content belongs to
            human_agent: Agent a person confirmed or chose; None for auto-resolution

        Returns:
            The ClassificationSignal handed to the sink
        """
        signal = ClassificationSignal.from_decision(
            tenant_id=tenant_id,
            content_unit_id=outcome.profile.content_unit_id,
            scores=outcome.scores,
            human_agent=human_agent,
        )
        self.signal_service.capture(signal)
        return signal
