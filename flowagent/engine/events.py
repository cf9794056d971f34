"""Run log emission.

A run's log sink (``on_log``) may be a plain function or a coroutine
function; both receive one LogEntry per call, in emission order.  Sink
errors are logged and swallowed so a broken observer cannot change the
outcome of a run.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from flowagent.types import LogEntry, LogSeverity

logger = logging.getLogger(__name__)

LogSink = Callable[[LogEntry], Union[None, Awaitable[None]]]


class LogEmitter:
    """Builds LogEntry objects and delivers them to the run's sink."""

    def __init__(self, sink: Optional[LogSink] = None) -> None:
        self._sink = sink
        self.count = 0

    async def emit(
        self,
        severity: LogSeverity,
        text: str,
        branch_index: Optional[int] = None,
        step_id: Optional[str] = None,
    ) -> LogEntry:
        entry = LogEntry(severity=severity, text=text, branch_index=branch_index, step_id=step_id)
        self.count += 1
        if self._sink is None:
            return entry
        try:
            result: Any = self._sink(entry)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            logger.warning(f"[LogEmitter] on_log sink raised: {exc}")
        return entry

    # Convenience wrappers

    async def info(self, text: str, **kwargs: Any) -> LogEntry:
        return await self.emit(LogSeverity.INFO, text, **kwargs)

    async def success(self, text: str, **kwargs: Any) -> LogEntry:
        return await self.emit(LogSeverity.SUCCESS, text, **kwargs)

    async def failure(self, text: str, **kwargs: Any) -> LogEntry:
        return await self.emit(LogSeverity.FAILURE, text, **kwargs)

    async def warning(self, text: str, **kwargs: Any) -> LogEntry:
        return await self.emit(LogSeverity.WARNING, text, **kwargs)

    async def generated(self, text: str, **kwargs: Any) -> LogEntry:
        return await self.emit(LogSeverity.GENERATED_CONTENT, text, **kwargs)
