"""Structured diagnostics for the seating engine.

Every resolver decision, strategy choice and clamp is reported as an Event.
Library code never prints; callers pick a sink (drop, collect, JSONL file).
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, is_dataclass, replace
from datetime import datetime, timezone
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any, Protocol


class Severity(IntEnum):
    INFO = 0
    WARN = 1
    ERROR = 2
    FATAL = 3


VALID_SEVERITIES = frozenset(int(level) for level in Severity)

VALID_STAGES = frozenset({"resolve", "capacity", "layout", "clamp", "edit"})
VALID_SOURCES = frozenset({"request", "preset", "global", "fallback", "computed"})
VALID_COMPONENTS = frozenset(
    {"resolver", "capacity", "sides", "corners", "circle", "clamp", "edits", "engine"}
)

# field -> (allowed values, fallback)
_VOCABULARY: dict[str, tuple[frozenset, str]] = {
    "stage": (VALID_STAGES, "layout"),
    "component": (VALID_COMPONENTS, "engine"),
    "source": (VALID_SOURCES, "computed"),
}


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _plain(value: Any) -> Any:
    # Enums, seat refs and value dataclasses end up in events; keep them JSON friendly.
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {str(_plain(key)): _plain(item) for key, item in value.items()}
    if hasattr(value, "label") and callable(value.label):
        return value.label()
    if is_dataclass(value) and not isinstance(value, type):
        return _plain(asdict(value))
    return value


def _vocab(name: str, raw: Any) -> str:
    allowed, fallback = _VOCABULARY[name]
    candidate = raw.strip().lower() if isinstance(raw, str) else ""
    return candidate if candidate in allowed else fallback


def _severity(raw: Any) -> int:
    try:
        level = int(raw)
    except (TypeError, ValueError):
        return int(Severity.INFO)
    return max(int(Severity.INFO), min(int(Severity.FATAL), level))


@dataclass(frozen=True)
class Event:
    ts: str
    run_id: str
    stage: str
    component: str
    code: str
    severity: int
    path: str
    source: str
    input_value: Any
    resolved_value: Any
    reason: str
    meta: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def make_event(
    *,
    run_id: str = "",
    stage: str,
    component: str,
    code: str,
    severity: int = Severity.INFO,
    path: str = "",
    source: str = "",
    input_value: Any = None,
    resolved_value: Any = None,
    reason: str = "",
    meta: dict[str, Any] | None = None,
    ts: str = "",
) -> Event:
    """Build an Event, folding unknown vocabulary onto the fallbacks.

    Replaced raw values are kept under ``meta["normalized_from"]``.
    """
    raw = {"stage": stage, "component": component, "source": source}
    vocab = {name: _vocab(name, value) for name, value in raw.items()}
    replaced = {
        name: value
        for name, value in raw.items()
        if not isinstance(value, str) or value.strip().lower() != vocab[name]
    }

    meta_value = dict(meta) if isinstance(meta, dict) else {}
    if replaced:
        previous = meta_value.get("normalized_from")
        if isinstance(previous, dict):
            replaced.update(previous)
        meta_value["normalized_from"] = replaced
        reason = reason or "normalized diagnostics vocabulary"

    return Event(
        ts=ts or utc_now_iso(),
        run_id=run_id,
        stage=vocab["stage"],
        component=vocab["component"],
        code=code,
        severity=_severity(severity),
        path=path,
        source=vocab["source"],
        input_value=_plain(input_value),
        resolved_value=_plain(resolved_value),
        reason=reason,
        meta=_plain(meta_value),
    )


def emit_simple(
    sink: DiagnosticsSink,
    *,
    code: str,
    path: str = "",
    payload: Any = None,
    severity: int = Severity.INFO,
    component: str = "engine",
    stage: str = "layout",
    source: str = "computed",
    reason: str = "",
    run_id: str = "",
    input_value: Any = None,
    resolved_value: Any = None,
    meta: dict[str, Any] | None = None,
    **extra_meta: Any,
) -> Event:
    """Build an event and hand it to ``sink``; ``payload`` lands in ``meta``."""
    merged = {**(meta or {}), **extra_meta}
    if payload is not None:
        merged.setdefault("payload", payload)
    event = make_event(
        run_id=run_id,
        stage=stage,
        component=component,
        code=code,
        severity=severity,
        path=path,
        source=source,
        input_value=input_value,
        resolved_value=resolved_value,
        reason=reason,
        meta=merged,
    )
    sink.emit(event)
    return event


def rebind_event(event: Event, run_id: str) -> Event:
    """Move an event collected outside a run (resolver output) onto ``run_id``."""
    return replace(event, run_id=run_id)


class DiagnosticsSink(Protocol):
    def emit(self, event: Event) -> None:
        """Publish one diagnostics event."""


class NoopDiagnosticsSink:
    """Default sink; drops everything."""

    def emit(self, event: Event) -> None:
        del event


class JsonlDiagnosticsSink:
    """Append events to a JSONL file, one object per line."""

    def __init__(self, path: str) -> None:
        self._path = Path(path)

    def emit(self, event: Event) -> None:
        if not event.ts:
            event = replace(event, ts=utc_now_iso())
        self._path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(event.to_dict(), ensure_ascii=False, sort_keys=True)
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(f"{line}\n")


def build_diagnostics_summary(events: list[Event]) -> dict[str, Any]:
    """Count events by code and report the worst severity seen."""
    by_code: dict[str, int] = {}
    worst = Severity.INFO
    for event in events:
        by_code[event.code] = by_code.get(event.code, 0) + 1
        worst = max(worst, Severity(_severity(event.severity)))
    return {
        "count": len(events),
        "by_code": dict(sorted(by_code.items())),
        "max_severity": worst.name.lower(),
    }
