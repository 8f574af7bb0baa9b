import logging
import os
from datetime import datetime
from functools import wraps
from typing import Any, Dict, Optional

from langsmith import Client, traceable

from .config import settings

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for command-line use

    Args:
        level: Log level name (defaults to settings.LOG_LEVEL)
    """
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
        format=settings.LOG_FORMAT
    )


class ObservabilityManager:
    """
    Manages LangSmith tracing for classification runs.

    Tracing is opt-in: without an API key every decorator hands back the
    undecorated function, so the classification path stays a plain call.
    """

    def __init__(self, api_key: Optional[str] = None):
        self.client: Optional[Client] = None
        self.enabled = self._setup_langsmith(api_key or settings.LANGCHAIN_API_KEY)
        self.session_name = f"content-intelligence-{datetime.now().strftime('%Y%m%d-%H%M%S')}"

    def _setup_langsmith(self, api_key: Optional[str]) -> bool:
        """Setup LangSmith client and configuration"""
        if not api_key:
            logger.debug("LANGCHAIN_API_KEY not set - LangSmith tracing disabled")
            return False

        try:
            os.environ["LANGCHAIN_TRACING_V2"] = "true"
            os.environ["LANGCHAIN_PROJECT"] = settings.LANGCHAIN_PROJECT
            os.environ["LANGCHAIN_ENDPOINT"] = settings.LANGCHAIN_ENDPOINT

            self.client = Client(api_url=settings.LANGCHAIN_ENDPOINT, api_key=api_key)
            logger.info(f"LangSmith tracing enabled - Project: {settings.LANGCHAIN_PROJECT}")
            return True
        except Exception as e:
            logger.error(f"Failed to setup LangSmith: {e}")
            return False

    def trace_agent(self, agent_name: str, metadata: Dict[str, Any] = None):
        """Decorator to trace a classification stage"""
        def decorator(func):
            if not self.enabled:
                return func

            @wraps(func)
            @traceable(
                name=agent_name,
                client=self.client,
                metadata={"agent_type": agent_name, "session": self.session_name, **(metadata or {})}
            )
            def wrapper(*args, **kwargs):
                logger.debug(f"Starting {agent_name}")
                result = func(*args, **kwargs)
                logger.debug(f"Completed {agent_name}")
                return result

            return wrapper
        return decorator


# Global observability manager instance
observability = ObservabilityManager()


def trace_agent(agent_name: str, metadata: Dict[str, Any] = None):
    """Convenience decorator for stage tracing"""
    return observability.trace_agent(agent_name, metadata)
