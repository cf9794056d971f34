"""Log sinks for workflow runs."""

from flowagent.callbacks.logging import CollectingCallback, LoggingCallback

__all__ = ["CollectingCallback", "LoggingCallback"]
