"""
Append-only SQLAlchemy store for classification signals

Rows are inserted and read; there is no update or delete path.
"""
import logging
import threading
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, JSON, String, Text, create_engine, func, select
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..agents.models import AgentType
from ..config import settings
from .models import ClassificationSignal, SignalWindow, as_utc

logger = logging.getLogger(__name__)

Base = declarative_base()


class ClassificationSignalRecord(Base):
    """Classification signal row"""
    __tablename__ = "classification_signals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    signal_id = Column(String(36), nullable=False, unique=True, index=True)
    tenant_id = Column(String(255), nullable=False, index=True)
    content_unit_id = Column(Text, nullable=False)
    system_agent = Column(String(20), nullable=False)
    system_confidence = Column(Float, nullable=False)
    human_agent = Column(String(20))
    overridden = Column(Boolean, nullable=False, default=False)
    contributing_signals = Column(JSON, nullable=False, default=dict)
    weights_version = Column(String(64), nullable=False, default="")
    captured_at = Column(DateTime(timezone=True), nullable=False, index=True)
    stored_at = Column(DateTime(timezone=True), nullable=False,
                       default=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_signal(cls, signal: ClassificationSignal) -> 'ClassificationSignalRecord':
        return cls(
            signal_id=signal.signal_id,
            tenant_id=signal.tenant_id,
            content_unit_id=signal.content_unit_id,
            system_agent=signal.system_agent.value,
            system_confidence=signal.system_confidence,
            human_agent=signal.human_agent.value if signal.human_agent else None,
            overridden=signal.overridden,
            contributing_signals={agent.value: list(names)
                                  for agent, names in signal.contributing_signals.items()},
            weights_version=signal.weights_version,
            captured_at=as_utc(signal.timestamp),
        )

    def to_signal(self) -> ClassificationSignal:
        return ClassificationSignal(
            signal_id=self.signal_id,
            tenant_id=self.tenant_id,
            content_unit_id=self.content_unit_id,
            system_agent=AgentType(self.system_agent),
            system_confidence=self.system_confidence,
            human_agent=AgentType(self.human_agent) if self.human_agent else None,
            overridden=self.overridden,
            contributing_signals={AgentType(agent): list(names)
                                  for agent, names in (self.contributing_signals or {}).items()},
            weights_version=self.weights_version or "",
            timestamp=as_utc(self.captured_at),
        )


class SignalStore:
    """Database access for classification signals"""

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        """
        Initialize the store and create its table if missing

        Args:
            url: SQLAlchemy database URL (defaults to settings.SIGNAL_STORE_URL)
            echo: Log emitted SQL (defaults to settings.SIGNAL_STORE_ECHO)
        """
        self.url = url or settings.SIGNAL_STORE_URL
        engine_kwargs = {"echo": settings.SIGNAL_STORE_ECHO if echo is None else echo}
        if self.url.startswith("sqlite"):
            # Writes arrive from worker threads
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in self.url or self.url.rstrip("/") == "sqlite:":
                engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(self.url, **engine_kwargs)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        self._lock = threading.Lock()
        Base.metadata.create_all(self.engine)
        logger.info(f"Signal store ready at {self.engine.url.render_as_string(hide_password=True)}")

    def append(self, signals: Sequence[ClassificationSignal]) -> int:
        """
        Insert signals

        Args:
            signals: Signals to store

        Returns:
            Number of rows written
        """
        records = [ClassificationSignalRecord.from_signal(s) for s in signals]
        if not records:
            return 0
        with self._lock, self._session_factory() as session:
            session.add_all(records)
            session.commit()
        logger.debug(f"Appended {len(records)} classification signals")
        return len(records)

    def snapshot(self, window: Optional[SignalWindow] = None) -> List[ClassificationSignal]:
        """
        Read a point-in-time copy of the stored signals

        Args:
            window: Optional tenant and time filter

        Returns:
            Signals ordered by capture time
        """
        statement = select(ClassificationSignalRecord).order_by(
            ClassificationSignalRecord.captured_at, ClassificationSignalRecord.id
        )
        if window is not None:
            if window.tenant_id is not None:
                statement = statement.where(ClassificationSignalRecord.tenant_id == window.tenant_id)
            if window.start is not None:
                statement = statement.where(ClassificationSignalRecord.captured_at >= as_utc(window.start))
            if window.end is not None:
                statement = statement.where(ClassificationSignalRecord.captured_at < as_utc(window.end))

        with self._lock, self._session_factory() as session:
            records = session.execute(statement).scalars().all()
            return [record.to_signal() for record in records]

    def count(self, tenant_id: Optional[str] = None) -> int:
        statement = select(func.count(ClassificationSignalRecord.id))
        if tenant_id is not None:
            statement = statement.where(ClassificationSignalRecord.tenant_id == tenant_id)
        with self._lock, self._session_factory() as session:
            return int(session.execute(statement).scalar_one())

    def close(self):
        self.engine.dispose()
