"""
Read-outs over captured classification signals
"""
import logging
from typing import List, Optional, Sequence

import pandas as pd

from .models import AccuracyReport, ClassificationSignal, TrendPoint, as_utc

logger = logging.getLogger(__name__)

MIN_TREND_WEEKS = 2


def iso_week(signal: ClassificationSignal) -> str:
    year, week, _ = as_utc(signal.timestamp).isocalendar()
    return f"{year}-W{week:02d}"


def is_reviewed(signal: ClassificationSignal) -> bool:
    """A person confirmed or overrode the decision"""
    return signal.human_agent is not None


def compute_accuracy(signals: Sequence[ClassificationSignal]) -> Optional[AccuracyReport]:
    """
    Share of reviewed decisions a person confirmed

    Args:
        signals: Captured signals

    Returns:
        AccuracyReport, or None when nothing was reviewed
    """
    reviewed = [s for s in signals if is_reviewed(s)]
    if not reviewed:
        return None
    correct = sum(1 for s in reviewed if not s.overridden)
    return AccuracyReport(
        total=len(reviewed),
        correct=correct,
        accuracy=correct / len(reviewed),
        override_rate=(len(reviewed) - correct) / len(reviewed),
    )


def compute_confidence_trend(signals: Sequence[ClassificationSignal]) -> Optional[List[TrendPoint]]:
    """
    Average system confidence and accuracy per ISO week

    Args:
        signals: Captured signals

    Returns:
        TrendPoints in week order, or None with fewer than two weeks of data
    """
    if not signals:
        return None

    frame = pd.DataFrame({
        "week": [iso_week(s) for s in signals],
        "confidence": [s.system_confidence for s in signals],
        "reviewed": [is_reviewed(s) for s in signals],
        "correct": [is_reviewed(s) and not s.overridden for s in signals],
    })
    grouped = frame.groupby("week", sort=True).agg(
        avg_confidence=("confidence", "mean"),
        signal_count=("confidence", "size"),
        reviewed=("reviewed", "sum"),
        correct=("correct", "sum"),
    )
    if len(grouped) < MIN_TREND_WEEKS:
        logger.debug(f"Confidence trend needs {MIN_TREND_WEEKS} weeks, have {len(grouped)}")
        return None

    return [
        TrendPoint(
            week=str(week),
            avg_confidence=float(row.avg_confidence),
            signal_count=int(row.signal_count),
            accuracy=float(row.correct / row.reviewed) if row.reviewed > 0 else 0.0,
        )
        for week, row in grouped.iterrows()
    ]
