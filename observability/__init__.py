"""Event logging and phase timing for interview sessions."""
from .logger import configure_event_logging, log_event
from .tracing import span

__all__ = ["configure_event_logging", "log_event", "span"]
