"""Run logger for recording intermediate pipeline results to JSON files."""

import dataclasses
import uuid
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel


class StageRecord(BaseModel):
    """Record of a single pipeline stage execution."""

    stage: str
    component: str
    input: Any = None
    output: Any = None
    usage: dict[str, Any] | None = None
    timestamp: str = ""
    duration_seconds: float = 0.0


class RunRecord(BaseModel):
    """Record of one service operation (e.g. ``fetch_trends``)."""

    run_id: str
    operation: str
    input: Any = None
    started_at: str
    completed_at: str | None = None
    stages: list[StageRecord] = []
    final_record_count: int = 0
    error: str | None = None


def _serialize(obj: Any) -> Any:
    """Serialize an object to JSON-compatible format.

    Handles dataclasses, Pydantic models, enums, tuples, lists, dicts and
    primitives.
    """
    if obj is None:
        return None
    if isinstance(obj, Enum):
        return obj.value
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return _serialize(dataclasses.asdict(obj))
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, (list, tuple)):
        return [_serialize(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _serialize(v) for k, v in obj.items()}
    if isinstance(obj, Path):
        return str(obj)
    return obj


class RunLogger:
    """Writes one JSON log file per service operation.

    Each call to ``start_run`` returns its own ``RunRecord``, so operations
    running concurrently never share state. When ``enabled=False``, all
    methods are no-ops.

    Args:
        log_dir: Directory to write JSON log files.
        enabled: If False, all methods become no-ops.
    """

    def __init__(self, log_dir: Path, *, enabled: bool = True) -> None:
        self._log_dir = log_dir
        self._enabled = enabled
        self._last_log_path: Path | None = None

    @property
    def enabled(self) -> bool:
        """Whether logging is active."""
        return self._enabled

    @property
    def last_log_path(self) -> Path | None:
        """Path to the last written log file, or None."""
        return self._last_log_path

    def start_run(self, operation: str, input_data: Any) -> RunRecord | None:
        """Create a record for a new operation.

        Args:
            operation: Service operation name.
            input_data: The operation's input (will be serialized).

        Returns:
            The new record, or None if logging is disabled.
        """
        if not self._enabled:
            return None

        return RunRecord(
            run_id=str(uuid.uuid4()),
            operation=operation,
            input=_serialize(input_data),
            started_at=datetime.now(tz=UTC).isoformat(),
        )

    def log_stage(
        self,
        record: RunRecord | None,
        stage: str,
        component: str,
        input_data: Any,
        output_data: Any,
        usage: Any,
        duration_seconds: float,
    ) -> None:
        """Append a stage record to ``record``.

        Args:
            record: Record returned by ``start_run``.
            stage: Stage name ("dispatch" or "extraction").
            component: Component class name.
            input_data: Stage input (will be serialized).
            output_data: Stage output (will be serialized).
            usage: API usage for this stage (None for non-API stages).
            duration_seconds: Wall-clock time for this stage.
        """
        if not self._enabled or record is None:
            return

        record.stages.append(
            StageRecord(
                stage=stage,
                component=component,
                input=_serialize(input_data),
                output=_serialize(output_data),
                usage=_serialize(usage) if usage is not None else None,
                timestamp=datetime.now(tz=UTC).isoformat(),
                duration_seconds=round(duration_seconds, 4),
            )
        )

    def finish_run(
        self,
        record: RunRecord | None,
        records: list[Any],
        *,
        error: BaseException | None = None,
    ) -> Path | None:
        """Write ``record`` to a JSON file.

        Args:
            record: Record returned by ``start_run``.
            records: Final records produced by the operation.
            error: The failure that ended the operation, if any.

        Returns:
            Path to the written JSON file, or None if logging is disabled.
        """
        if not self._enabled or record is None:
            return None

        record.completed_at = datetime.now(tz=UTC).isoformat()
        record.final_record_count = len(records)
        if error is not None:
            record.error = f"{type(error).__name__}: {error}"

        self._log_dir.mkdir(parents=True, exist_ok=True)

        # run_2026-02-12T14-30-00_fetch_trends_1a2b3c4d.json (colons → dashes)
        ts = record.started_at.replace(":", "-")
        ts = ts.split(".")[0].split("+")[0]
        filename = f"run_{ts}_{record.operation}_{record.run_id[:8]}.json"
        filepath = self._log_dir / filename

        filepath.write_text(record.model_dump_json(indent=2))
        self._last_log_path = filepath
        return filepath
