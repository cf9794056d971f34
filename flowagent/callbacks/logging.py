"""Structured JSON logging sinks for workflow run logs."""

import json
import logging
from datetime import datetime, timezone

from flowagent.types import LogEntry, LogSeverity

logger = logging.getLogger("flowagent.runs")

_LEVELS = {
    LogSeverity.INFO: logging.INFO,
    LogSeverity.SUCCESS: logging.INFO,
    LogSeverity.GENERATED_CONTENT: logging.INFO,
    LogSeverity.WARNING: logging.WARNING,
    LogSeverity.FAILURE: logging.ERROR,
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class LoggingCallback:
    """Emits one structured JSON log line per run LogEntry.

    Each log line is a self-contained JSON object with:
      - event: always "run_log"
      - ts: ISO-8601 UTC time the line was written
      - severity, text, branch, step_id from the entry

    Log level follows severity: ERROR for failures, WARNING for warnings,
    INFO otherwise.  Logger name: flowagent.runs (configure in your logging
    setup).  Pass an instance as ``on_log``:

        await run_agent_workflow(trigger, actions, on_log=LoggingCallback())
    """

    def __init__(self, run_id: str = "", max_text: int = 2000):
        self.run_id = run_id
        self.max_text = max_text

    def __call__(self, entry: LogEntry) -> None:
        logger.log(_LEVELS.get(entry.severity, logging.INFO), json.dumps({
            "event": "run_log",
            "ts": _now(),
            "run_id": self.run_id,
            "severity": entry.severity.value,
            "branch": entry.branch_index,
            "step_id": entry.step_id,
            "text": entry.text[:self.max_text],
        }))


class CollectingCallback:
    """Keeps every LogEntry in memory, in the order received."""

    def __init__(self) -> None:
        self.entries: list[LogEntry] = []

    def __call__(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def by_severity(self, severity: LogSeverity) -> list[LogEntry]:
        return [e for e in self.entries if e.severity == severity]

    def for_branch(self, branch_index: int) -> list[LogEntry]:
        return [e for e in self.entries if e.branch_index == branch_index]

    @property
    def texts(self) -> list[str]:
        return [e.text for e in self.entries]
