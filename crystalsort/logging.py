from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import numpy as np
import rerun as rr

LOG_PATH = "crystal/log"


@dataclass(frozen=True)
class LogVisual:
    path: str
    payload: object


class LogIntervalPolicy:
    def __init__(self, intervals: Mapping[str, int], *, default_interval: int = 1) -> None:
        self._intervals: dict[str, int] = {}
        for event, value in intervals.items():
            interval = int(value)
            if interval <= 0:
                raise ValueError("interval must be positive")
            self._intervals[str(event)] = interval
        self._default_interval = int(default_interval)
        if self._default_interval <= 0:
            raise ValueError("default_interval must be positive")
        self._counters: dict[str, int] = {}

    def should_log(self, event: str) -> bool:
        interval = self._intervals.get(event, self._default_interval)
        if interval <= 1:
            return True
        count = self._counters.get(event, 0)
        self._counters[event] = count + 1
        return count % interval == 0

    def reset(self) -> None:
        self._counters.clear()


class CrystalLogger:
    """Console + rerun event logger.

    Console output is always produced (unless ``console`` is off). Rerun
    recording only starts once :meth:`enable_rerun` has been called, so the
    library never opens a viewer on its own.
    """

    def __init__(
        self,
        app_id: str = "crystalsort",
        base_path: str = LOG_PATH,
        *,
        console: bool = True,
        record: bool = False,
        spawn: bool = True,
    ) -> None:
        self._app_id = app_id
        self._base_path = base_path
        self._console = console
        self._record = record
        self._spawn = spawn
        self._spawned = False
        self._interval_policy: LogIntervalPolicy | None = None

    @property
    def recording(self) -> bool:
        return self._record

    def enable_rerun(self, *, app_id: str | None = None, spawn: bool | None = None) -> None:
        if app_id is not None:
            self._app_id = app_id
        if spawn is not None:
            self._spawn = spawn
        self._record = True
        self._ensure_rerun()

    def set_console(self, enabled: bool) -> None:
        self._console = enabled

    def _ensure_rerun(self) -> None:
        if not rr.is_enabled():
            rr.init(self._app_id)
        if self._spawn and not self._spawned:
            rr.spawn()
            self._spawned = True

    def _console_log(self, message: str) -> None:
        print(message)

    @staticmethod
    def _format_value(value: Any, *, max_items: int = 8, max_chars: int = 200) -> str:
        if value is None:
            return "None"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, np.integer)):
            return str(int(value))
        if isinstance(value, (float, np.floating)):
            return f"{float(value):.6g}"
        if isinstance(value, str):
            return value if len(value) <= max_chars else f"{value[:max_chars]}..."
        if isinstance(value, dict):
            items = list(value.items())
            parts = [f"{k}={CrystalLogger._format_value(v)}" for k, v in items[:max_items]]
            if len(items) > max_items:
                parts.append("...")
            return "{" + ", ".join(parts) + "}"
        if isinstance(value, (list, tuple)):
            seq = list(value)
            parts = [CrystalLogger._format_value(v) for v in seq[:max_items]]
            if len(seq) > max_items:
                parts.append("...")
            if isinstance(value, list):
                return "[" + ", ".join(parts) + "]"
            return "(" + ", ".join(parts) + ")"
        if isinstance(value, np.ndarray):
            return f"ndarray(shape={value.shape}, dtype={value.dtype})"
        text = repr(value)
        return text if len(text) <= max_chars else f"{text[:max_chars]}..."

    @staticmethod
    def _coerce_rr_value(value: Any) -> Any:
        if value is None:
            return "None"
        if isinstance(value, (bool, int, float, str)):
            return value
        if isinstance(value, (list, tuple)):
            if all(isinstance(item, (bool, int, float, str)) for item in value):
                return list(value)
            return CrystalLogger._format_value(value)
        return CrystalLogger._format_value(value)

    def _coerce_anyvalues(self, data: Mapping[str, Any]) -> Mapping[str, Any]:
        return {key: self._coerce_rr_value(value) for key, value in data.items()}

    def configure_intervals(self, intervals: Mapping[str, int], *, default_interval: int = 1) -> None:
        self._interval_policy = LogIntervalPolicy(intervals, default_interval=default_interval)

    def should_log(self, event: str) -> bool:
        if self._interval_policy is None:
            return True
        return self._interval_policy.should_log(event)

    def set_step(self, step: int, *, timeline: str = "step") -> None:
        if not self._record:
            return
        self._ensure_rerun()
        # older SDKs expose set_time_sequence, newer ones set_time(sequence=...)
        if hasattr(rr, "set_time_sequence"):
            rr.set_time_sequence(timeline, step)
        else:
            rr.set_time(timeline, sequence=step)

    def event(
        self,
        event: str,
        *,
        section: str,
        data: Mapping[str, Any] | None = None,
        path: str | None = None,
        visuals: Sequence[LogVisual] | None = None,
    ) -> None:
        if not section:
            raise ValueError("section must be provided")
        if not self.should_log(event):
            return
        if data:
            details = " ".join(f"{k}={self._format_value(v)}" for k, v in data.items())
            message = f"{event} {details}"
        else:
            message = event
        message = f"{message} [{section}]"
        if self._console:
            self._console_log(message)
        if not self._record:
            return
        self._ensure_rerun()
        base_path = path or self._base_path
        rr.log(base_path, rr.TextLog(message))
        if data:
            anyvalues_path = f"{base_path}/{event}"
            rr.log(anyvalues_path, rr.AnyValues(**self._coerce_anyvalues(data)))
        if visuals:
            for visual in visuals:
                rr.log(visual.path, visual.payload)

    def visual_image(self, path: str, image) -> LogVisual:
        return LogVisual(path=path, payload=rr.Image(np.asarray(image)))


LOGGER = CrystalLogger()


def init_rerun(*, app_id: str = "crystalsort", spawn: bool = True) -> None:
    LOGGER.enable_rerun(app_id=app_id, spawn=spawn)

