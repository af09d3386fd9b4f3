"""Diagnostic emitter bridging the render engine with CLI rendering utilities."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from texmathml.core.diagnostics import DiagnosticEmitter, format_event_message

from .state import CLIState, get_cli_state, render_message


class CliEmitter(DiagnosticEmitter):
    """Print render events on the error console once ``-v`` is given."""

    def __init__(self, state: CLIState | None = None) -> None:
        self._state = state or get_cli_state()

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        if self._state.verbosity < 1:
            return
        message = format_event_message(name, payload)
        if message:
            render_message("info", message)


__all__ = ["CliEmitter"]
