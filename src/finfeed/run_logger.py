"""Run logger for recording ownership pipeline stages to JSON files."""

import dataclasses
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from finfeed.data import OwnershipResult


class StageRecord(BaseModel):
    """Record of a single pipeline stage execution."""

    stage: str
    component: str
    input: Any = None
    output: Any = None
    upstream_requests: int = 0
    timestamp: str = ""
    duration_seconds: float = 0.0


class RunRecord(BaseModel):
    """Record of a complete pipeline run."""

    run_id: str
    pipeline_type: str
    request: dict[str, Any]
    started_at: str
    completed_at: str | None = None
    stages: list[StageRecord] = []
    result_count: int = 0
    total_upstream_requests: int = 0
    outcome: str | None = None


def _serialize(obj: Any) -> Any:
    """Serialize an object to JSON-compatible format.

    Handles dataclasses, Pydantic models, lists, tuples, dicts, and primitives.
    Ownership results use their wire payload.
    """
    if obj is None:
        return None
    if isinstance(obj, OwnershipResult):
        return obj.to_payload()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return _serialize(dataclasses.asdict(obj))
    if isinstance(obj, BaseModel):
        return obj.model_dump()
    if isinstance(obj, (list, tuple)):
        return [_serialize(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _serialize(v) for k, v in obj.items()}
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Path):
        return str(obj)
    return obj


class RunLogger:
    """Writes a JSON log file per pipeline run.

    ``start_run`` returns the record of a new run. Stages are appended to that
    record and ``finish_run`` writes it, so concurrent runs sharing one logger
    keep separate logs. When ``enabled=False``, all methods are no-ops.

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

    def start_run(self, pipeline_type: str, request: dict[str, Any]) -> RunRecord | None:
        """Initialize a new run record.

        Args:
            pipeline_type: Type of pipeline (e.g. "ownership").
            request: The run input, such as ``{"symbol": "AAPL"}``.

        Returns:
            The record to pass to ``log_stage`` and ``finish_run``, or None if
            logging is disabled.
        """
        if not self._enabled:
            return None

        return RunRecord(
            run_id=str(uuid.uuid4()),
            pipeline_type=pipeline_type,
            request=_serialize(request),
            started_at=datetime.now(tz=UTC).isoformat(),
        )

    def log_stage(
        self,
        run: RunRecord | None,
        stage: str,
        component: str,
        input_data: Any,
        output_data: Any,
        upstream_requests: int,
        duration_seconds: float,
    ) -> None:
        """Append a stage record to ``run``.

        Args:
            run: Record returned by ``start_run``.
            stage: Stage name (e.g. "latest_period", "scan_period").
            component: Component class name.
            input_data: Stage input (will be serialized).
            output_data: Stage output (will be serialized).
            upstream_requests: Number of upstream API calls made by the stage.
            duration_seconds: Wall-clock time for this stage.
        """
        if not self._enabled or run is None or run.completed_at is not None:
            return

        run.stages.append(
            StageRecord(
                stage=stage,
                component=component,
                input=_serialize(input_data),
                output=_serialize(output_data),
                upstream_requests=upstream_requests,
                timestamp=datetime.now(tz=UTC).isoformat(),
                duration_seconds=round(duration_seconds, 4),
            )
        )

    def finish_run(
        self, run: RunRecord | None, result: OwnershipResult | None, *, outcome: str = "ok"
    ) -> Path | None:
        """Write the run record to a JSON file.

        Args:
            run: Record returned by ``start_run``.
            result: Final pipeline result, or None when the run failed.
            outcome: Short status such as "ok", "stale" or "error".

        Returns:
            Path to the written JSON file, or None if logging is disabled or
            the run was already finished.
        """
        if not self._enabled or run is None or run.completed_at is not None:
            return None

        run.completed_at = datetime.now(tz=UTC).isoformat()
        run.result_count = len(result.owners) if result is not None else 0
        run.total_upstream_requests = sum(s.upstream_requests for s in run.stages)
        run.outcome = outcome

        self._log_dir.mkdir(parents=True, exist_ok=True)

        # run_2026-02-12T14-30-00_1a2b3c4d.json
        ts = run.started_at.replace(":", "-")
        ts = ts.split(".")[0].split("+")[0]
        filepath = self._log_dir / f"run_{ts}_{run.run_id[:8]}.json"

        filepath.write_text(run.model_dump_json(indent=2))
        self._last_log_path = filepath
        return filepath
