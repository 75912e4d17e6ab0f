"""
Run logs - one JSON Lines file per navigation request.

A request is logged at three levels:

- Level 1 (PHASE): resolution of the root, then caller and/or callee expansion
- Level 2 (STEP): one corpus scan per caller lookup, one body isolation per
  callee lookup
- Level 3 (DETAIL): cycle guard hits, timeout truncation and standard
  logging warnings forwarded by the bridge

Files live at {logs_dir}/run_{run_id}/log_{YYYYmmdd_HHMMSS}.jsonl.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

__all__ = [
    "LogLevel",
    "LogStatus",
    "LogEntry",
    "RunLogger",
    "StepContext",
    "RunLoggerHandler",
    "read_run_logs",
    "setup_logging_bridge",
    "teardown_logging_bridge",
]


class LogLevel(int, Enum):
    """Granularity of a run log entry."""

    PHASE = 1
    STEP = 2
    DETAIL = 3


class LogStatus(str, Enum):
    """Outcome recorded by a run log entry."""

    STARTED = "started"
    COMPLETED = "completed"
    ERROR = "error"
    SKIPPED = "skipped"
    TRUNCATED = "truncated"


@dataclass
class LogEntry:
    """One line of a run log."""

    level: int
    phase: str
    status: str
    timestamp: str
    message: str
    step: str | None = None
    sequence: int | None = None
    duration_ms: int | None = None
    items_processed: int | None = None
    items_created: int | None = None
    stats: dict[str, Any] | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def _now() -> str:
    return datetime.now().isoformat()


def _ms_since(start: datetime) -> int:
    return int((datetime.now() - start).total_seconds() * 1000)


class RunLogger:
    """
    Appends the entries of one request to its JSONL file.

    The logger tracks the open phase so that steps and details are filed
    under it; entries written outside a phase use a fallback phase name.
    """

    def __init__(self, run_id: str, logs_dir: str | Path = "workspace/logs"):
        """
        Create the run directory and choose the log file.

        Args:
            run_id: Request identifier, e.g. ``trace_1a2b3c4d``
            logs_dir: Base directory; relative paths resolve against cwd
        """
        self.run_id = run_id
        self.logs_dir = Path(logs_dir)
        self.run_dir = self.logs_dir / f"run_{run_id}"
        self.run_dir.mkdir(parents=True, exist_ok=True)

        self.start_time = datetime.now()
        self.log_file = self.run_dir / f"log_{self.start_time.strftime('%Y%m%d_%H%M%S')}.jsonl"

        self._current_phase: str | None = None
        self._phase_start: datetime | None = None
        self._step_sequence = 0

    def _write_entry(self, entry: LogEntry) -> None:
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(entry.to_json() + "\n")

    def _phase_or(self, fallback: str) -> str:
        return self._current_phase or fallback

    # ==================== Level 1: Phases ====================

    def phase_start(self, phase: str, message: str = "") -> None:
        """Open a phase (resolution, callers, callees) and reset step numbering."""
        self._current_phase = phase
        self._phase_start = datetime.now()
        self._step_sequence = 0
        self._write_entry(
            LogEntry(
                level=LogLevel.PHASE,
                phase=phase,
                status=LogStatus.STARTED,
                timestamp=_now(),
                message=message or f"Starting {phase}",
            )
        )

    def phase_complete(
        self, phase: str, message: str = "", stats: dict[str, Any] | None = None
    ) -> None:
        """Close a phase successfully, with optional summary stats."""
        self._end_phase(phase, LogStatus.COMPLETED, message or f"Completed {phase}", stats=stats)

    def phase_error(self, phase: str, error: str, message: str = "") -> None:
        """Close a phase that raised."""
        self._end_phase(phase, LogStatus.ERROR, message or f"Error in {phase}", error=error)

    def _end_phase(
        self,
        phase: str,
        status: LogStatus,
        message: str,
        stats: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        duration = None
        if self._phase_start and self._current_phase == phase:
            duration = _ms_since(self._phase_start)
        self._write_entry(
            LogEntry(
                level=LogLevel.PHASE,
                phase=phase,
                status=status,
                timestamp=_now(),
                message=message,
                duration_ms=duration,
                stats=stats,
                error=error,
            )
        )
        self._current_phase = None
        self._phase_start = None

    # ==================== Level 2: Steps ====================

    def step_start(self, step: str, message: str = "") -> StepContext:
        """
        Open a numbered step inside the current phase.

        Returns:
            StepContext that writes the closing entry on exit
        """
        self._step_sequence += 1
        self._write_entry(
            LogEntry(
                level=LogLevel.STEP,
                phase=self._phase_or("unknown"),
                step=step,
                sequence=self._step_sequence,
                status=LogStatus.STARTED,
                timestamp=_now(),
                message=message or f"Starting {step}",
            )
        )
        return StepContext(self, step, self._step_sequence)

    def step_end(self, step: StepContext, error: str | None = None, message: str = "") -> None:
        """Write the closing entry of a step, completed or errored."""
        if error is None:
            status, default = LogStatus.COMPLETED, f"Completed {step.step}"
        else:
            status, default = LogStatus.ERROR, f"Error in {step.step}"
        self._write_entry(
            LogEntry(
                level=LogLevel.STEP,
                phase=self._phase_or("unknown"),
                step=step.step,
                sequence=step.sequence,
                status=status,
                timestamp=_now(),
                message=message or default,
                duration_ms=_ms_since(step.start_time),
                items_processed=step.items_processed if error is None else None,
                items_created=step.items_created if error is None else None,
                stats=step.stats,
                error=error,
            )
        )

    # ==================== Level 3: Details ====================

    def detail_cycle(self, file_path: str, function_name: str, depth: int) -> None:
        """Record a function that reappeared on its own ancestor chain."""
        self._write_entry(
            LogEntry(
                level=LogLevel.DETAIL,
                phase=self._phase_or("trace"),
                status=LogStatus.SKIPPED,
                timestamp=_now(),
                message=f"Cycle detected: {file_path}:{function_name}:{depth}",
                stats={
                    "file_path": file_path,
                    "function_name": function_name,
                    "depth": depth,
                    "reason": "cycle",
                },
            )
        )

    def detail_timeout(self, function_name: str, elapsed_ms: int) -> None:
        """Record the node at which the time budget ran out."""
        self._write_entry(
            LogEntry(
                level=LogLevel.DETAIL,
                phase=self._phase_or("trace"),
                status=LogStatus.TRUNCATED,
                timestamp=_now(),
                message=f"Timeout reached while expanding {function_name}",
                duration_ms=elapsed_ms,
                stats={"function_name": function_name, "reason": "timeout"},
            )
        )

    def get_log_path(self) -> Path:
        return self.log_file

    def read_logs(self, level: int | None = None) -> list[dict[str, Any]]:
        """Read this run's entries, optionally only those of one level."""
        return _read_jsonl(self.log_file, level)


class StepContext:
    """
    Open step of a RunLogger; closes itself when the ``with`` block exits.

    Usage:
        with run_logger.step_start("scan_callers") as step:
            step.items_processed = files_scanned
            step.items_created = len(callers)
    """

    def __init__(self, logger: RunLogger, step: str, sequence: int):
        self.logger = logger
        self.step = step
        self.sequence = sequence
        self.start_time = datetime.now()
        self.items_processed = 0
        self.items_created = 0
        self.stats: dict[str, Any] | None = None
        self._closed = False

    def __enter__(self) -> StepContext:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is not None:
            self.error(str(exc_val))
        elif not self._closed:
            self.complete()

    def complete(self, message: str = "") -> None:
        self._closed = True
        self.logger.step_end(self, message=message)

    def error(self, error: str, message: str = "") -> None:
        self._closed = True
        self.logger.step_end(self, error=error, message=message)


def _read_jsonl(path: Path, level: int | None = None) -> list[dict[str, Any]]:
    if not path.exists():
        return []

    entries = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                continue
            if level is None or entry.get("level") == level:
                entries.append(entry)
    return entries


def read_run_logs(
    run_id: str, logs_dir: str | Path = "workspace/logs", level: int | None = None
) -> list[dict[str, Any]]:
    """
    Read the newest log file of a run.

    Returns:
        Entries (optionally of one level), or an empty list for unknown runs
    """
    log_files = sorted((Path(logs_dir) / f"run_{run_id}").glob("log_*.jsonl"), reverse=True)
    if not log_files:
        return []
    return _read_jsonl(log_files[0], level)


# =============================================================================
# Standard Logging Bridge
# =============================================================================


class RunLoggerHandler(logging.Handler):
    """Writes standard logging records into a RunLogger as detail entries."""

    def __init__(self, run_logger: RunLogger, min_level: int = logging.WARNING):
        super().__init__(level=min_level)
        self.run_logger = run_logger

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            is_error = record.levelno >= logging.WARNING
            self.run_logger._write_entry(
                LogEntry(
                    level=LogLevel.DETAIL,
                    phase=self.run_logger._phase_or("system"),
                    status=LogStatus.ERROR if is_error else LogStatus.COMPLETED,
                    timestamp=_now(),
                    message=message,
                    error=message if is_error else None,
                    stats={
                        "logger": record.name,
                        "level": record.levelname,
                        "module": record.module,
                        "funcName": record.funcName,
                        "lineno": record.lineno,
                    },
                )
            )
        except Exception:
            self.handleError(record)


def setup_logging_bridge(
    run_logger: RunLogger,
    min_level: int = logging.WARNING,
    logger_names: list[str] | None = None,
) -> RunLoggerHandler:
    """
    Attach a RunLoggerHandler to the named loggers (or the root logger).

    Returns:
        The handler, for teardown_logging_bridge
    """
    handler = RunLoggerHandler(run_logger, min_level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    for target in _bridge_targets(logger_names):
        target.addHandler(handler)
    return handler


def teardown_logging_bridge(
    handler: RunLoggerHandler, logger_names: list[str] | None = None
) -> None:
    """Detach a handler installed by setup_logging_bridge."""
    for target in _bridge_targets(logger_names):
        target.removeHandler(handler)


def _bridge_targets(logger_names: list[str] | None) -> list[logging.Logger]:
    if not logger_names:
        return [logging.getLogger()]
    return [logging.getLogger(name) for name in logger_names]
