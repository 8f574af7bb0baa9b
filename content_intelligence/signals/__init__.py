"""
Signal capture, read-outs and offline weight evolution
"""
from .capture import (
    SignalCaptureService,
    SignalSink,
    get_signal_capture_service,
    persist_signal,
    persist_signal_batch,
)
from .config import EvolutionConfig
from .evolution import WeightEvolutionAnalyzer, analyze_weight_evolution
from .metrics import compute_accuracy, compute_confidence_trend
from .models import (
    AccuracyReport,
    ClassificationSignal,
    SignalStats,
    SignalWindow,
    TrendPoint,
    WeightAdjustment,
    WeightProposal,
)
from .store import ClassificationSignalRecord, SignalStore

__all__ = [
    'SignalCaptureService',
    'SignalSink',
    'get_signal_capture_service',
    'persist_signal',
    'persist_signal_batch',
    'SignalStore',
    'ClassificationSignalRecord',
    'WeightEvolutionAnalyzer',
    'analyze_weight_evolution',
    'EvolutionConfig',
    'compute_accuracy',
    'compute_confidence_trend',
    'AccuracyReport',
    'ClassificationSignal',
    'SignalStats',
    'SignalWindow',
    'TrendPoint',
    'WeightAdjustment',
    'WeightProposal',
]
