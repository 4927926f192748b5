"""
Best-effort product telemetry.

Workflows report events through `BestEffortTelemetry`, which swallows
and logs any sink failure so a broken telemetry backend can never fail
the request that emitted the event.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Tuple

import structlog

from local_yield.core.logging import get_logger

logger = get_logger(__name__)


class TelemetrySink(Protocol):
    def emit(self, event: str, properties: Dict[str, Any]) -> None:
        ...


class StructlogTelemetrySink:
    """Writes telemetry events as structured log records."""

    def __init__(self, logger_name: str = "local_yield.telemetry") -> None:
        self._log = structlog.get_logger(logger_name)

    def emit(self, event: str, properties: Dict[str, Any]) -> None:
        self._log.info(event, **properties)


class InMemoryTelemetrySink:
    """Collects events in a list; used by tests and local tooling."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def emit(self, event: str, properties: Dict[str, Any]) -> None:
        self.events.append((event, dict(properties)))


class BestEffortTelemetry:
    """Wraps a sink so that emitting never raises."""

    def __init__(self, sink: Optional[TelemetrySink] = None) -> None:
        self._sink = sink or StructlogTelemetrySink()

    def track(self, event: str, **properties: Any) -> None:
        try:
            self._sink.emit(event, properties)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                f"Telemetry sink failed for '{event}': {exc}",
                extra={"telemetry_event": event, "error_type": type(exc).__name__},
            )


__all__ = [
    "TelemetrySink",
    "StructlogTelemetrySink",
    "InMemoryTelemetrySink",
    "BestEffortTelemetry",
]
