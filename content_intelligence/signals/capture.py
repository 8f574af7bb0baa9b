"""
SignalCaptureService - Best-effort persistence of classification decisions

The sink has no error channel: every public method returns None and
every persistence failure ends in the log. Classification never waits
on, or depends on, a signal being stored.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence, Set

from .models import ClassificationSignal
from .store import SignalStore

logger = logging.getLogger(__name__)


class SignalSink(ABC):
    """Anything that accepts classification signals on a best-effort basis"""

    @abstractmethod
    async def persist(self, signals: Sequence[ClassificationSignal]) -> None:
        """Store signals; must never raise"""


class SignalCaptureService(SignalSink):
    """Signal sink backed by the SQLAlchemy signal store"""

    def __init__(self, store: Optional[SignalStore] = None):
        """
        Initialize signal capture

        Args:
            store: SignalStore (created from settings on first use when omitted)
        """
        self._store = store
        self._pending: Set[asyncio.Task] = set()

    def _get_store(self) -> SignalStore:
        if self._store is None:
            self._store = SignalStore()
        return self._store

    async def persist(self, signals: Sequence[ClassificationSignal]) -> None:
        try:
            batch = list(signals)
            if not batch:
                return
            store = self._get_store()
            written = await asyncio.to_thread(store.append, batch)
            logger.debug(f"Persisted {written} classification signals")
        except Exception as e:
            logger.error(f"Failed to persist classification signals: {e}")
            # Don't raise - signal capture is non-critical

    async def persist_signal(self, signal: ClassificationSignal) -> None:
        """
        Persist one signal

        Args:
            signal: ClassificationSignal to store
        """
        await self.persist([signal])

    async def persist_signal_batch(self, signals: Iterable[ClassificationSignal]) -> None:
        """
        Persist a batch of signals in one write

        Args:
            signals: ClassificationSignals to store
        """
        await self.persist(signals)

    def capture(self, *signals: ClassificationSignal) -> None:
        """
        Fire-and-forget: schedule persistence and return immediately.
        Outside a running event loop the write happens inline.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self.persist(signals))
            return

        task = loop.create_task(self.persist(signals))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for scheduled captures to finish"""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending(self) -> int:
        return len(self._pending)


_default_service: Optional[SignalCaptureService] = None


def get_signal_capture_service() -> SignalCaptureService:
    """Process-wide capture service using the configured store"""
    global _default_service
    if _default_service is None:
        _default_service = SignalCaptureService()
    return _default_service


async def persist_signal(signal: ClassificationSignal) -> None:
    """Persist one signal through the default service; never raises"""
    await get_signal_capture_service().persist_signal(signal)


async def persist_signal_batch(signals: Iterable[ClassificationSignal]) -> None:
    """Persist a batch through the default service; never raises"""
    await get_signal_capture_service().persist_signal_batch(signals)
