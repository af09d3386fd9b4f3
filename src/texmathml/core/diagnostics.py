"""Diagnostic abstractions shared across the render pipeline."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface receiving structured render events."""

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Emitter that ignores every event."""

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Emitter that forwards events to the standard logging module."""

    def __init__(self, *, logger_obj: logging.Logger | None = None) -> None:
        self._logger = logger_obj or logger

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


class RecordingEmitter(NullEmitter):
    """Emitter keeping every event in memory, handy for assertions."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)
    key = str(data.get("key") or "<unknown>")[:12]

    if name == "mathml_cache_hit":
        return f"Valid MathML entry found in cache ({key})"

    if name == "mathml_cache_invalid":
        return f"Malformed MathML entry found in cache, re-rendering ({key})"

    if name == "mathml_render":
        host = data.get("host") or "<unknown>"
        suffix = " (changed)" if data.get("changed") else ""
        return f"Rendered MathML via {host} ({key}){suffix}"

    if name == "mathml_render_failed":
        host = data.get("host") or "<unknown>"
        kind = data.get("kind") or "error"
        return f"MathML rendering failed via {host}: {kind} ({key})"

    return None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "RecordingEmitter",
    "format_event_message",
]
