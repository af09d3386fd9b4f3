"""Daemon host selection."""

from __future__ import annotations

from collections.abc import Sequence
import logging
import random

from texmathml.core.exceptions import ConfigurationError


_log = logging.getLogger(__name__)


def pick_host(hosts: str | Sequence[str], *, rng: random.Random | None = None) -> str:
    """Return one daemon address, chosen uniformly when several are configured."""
    if isinstance(hosts, str):
        host = hosts
    else:
        candidates = list(hosts)
        if not candidates:
            raise ConfigurationError("No LaTeXML daemon URL is configured.")
        host = (rng or random).choice(candidates)
    _log.debug("picking host %s", host)
    return host


__all__ = ["pick_host"]
