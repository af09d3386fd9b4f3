"""Render engine turning TeX into MathML through a LaTeXML daemon.

Each call walks a small state machine::

    NEEDS_CHECK -> CACHE_HIT                     (valid cached entry)
    NEEDS_CHECK -> CACHE_MISS -> RENDERED        (daemon answered with MathML)
    NEEDS_CHECK -> CACHE_MISS -> FAILED          (timeout, transport, bad payload)

A cached entry whose MathML no longer validates is treated as a miss. Fresh
MathML is written back only when it differs from what the cache holds.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
import logging
import random
from threading import Lock

from texmathml.core.cache import CacheEntry, MathCache, MemoryMathCache, fingerprint
from texmathml.core.client import ConversionClient, RequestsConversionClient
from texmathml.core.config import RenderConfig
from texmathml.core.diagnostics import DiagnosticEmitter, NullEmitter
from texmathml.core.embed import PageExists, embed_mathml, format_error
from texmathml.core.exceptions import (
    ConversionError,
    ConversionTransportError,
    ErrorKind,
    InvalidResponseError,
    failure_message,
)
from texmathml.core.hosts import pick_host
from texmathml.core.settings import SettingsValue, encode_post_data, resolve_settings
from texmathml.core.validation import is_valid_mathml, parse_envelope


_log = logging.getLogger(__name__)


class RenderState(str, Enum):
    NEEDS_CHECK = "needs_check"
    CACHE_HIT = "cache_hit"
    CACHE_MISS = "cache_miss"
    RENDERED = "rendered"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class RenderRequest:
    """A TeX expression to convert, with optional settings and embedding hints."""

    tex: str
    settings: SettingsValue | None = None
    force_refresh: bool = False
    label: str | None = None
    tag_id: str | None = None


@dataclass(frozen=True, slots=True)
class RenderSuccess:
    mathml: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class RenderFailure:
    kind: ErrorKind
    message: str
    host: str | None = None

    @property
    def ok(self) -> bool:
        return False


RenderResult = RenderSuccess | RenderFailure


@dataclass(slots=True)
class RenderSession:
    """Scratch state for a single render call."""

    request: RenderRequest
    settings: SettingsValue
    key: str
    state: RenderState = RenderState.NEEDS_CHECK
    stored: CacheEntry | None = None
    mathml: str | None = None
    host: str | None = None
    changed: bool = False
    result: RenderResult | None = None


class RenderEngine:
    """Coordinate cache lookups, daemon requests and response validation."""

    def __init__(
        self,
        config: RenderConfig | None = None,
        *,
        cache: MathCache | None = None,
        client: ConversionClient | None = None,
        emitter: DiagnosticEmitter | None = None,
        page_exists: PageExists | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or RenderConfig()
        self.cache: MathCache = cache if cache is not None else MemoryMathCache()
        self.client: ConversionClient = client or RequestsConversionClient(
            user_agent=self.config.user_agent
        )
        self.emitter: DiagnosticEmitter = emitter or NullEmitter()
        self.page_exists = page_exists
        self._rng = rng
        self._locks_guard = Lock()
        self._locks: dict[str, list] = {}

    # ------------------------------------------------------------------ public

    def post_data(self, request: RenderRequest) -> str:
        """Return the form-encoded body sent to the daemon for ``request``."""
        settings = resolve_settings(request.settings, self.config.default_settings)
        return encode_post_data(request.tex, settings)

    def render(self, request: RenderRequest, force_refresh: bool | None = None) -> RenderResult:
        """Return the MathML for ``request``, converting it when required."""
        session = self.run(request, force_refresh)
        assert session.result is not None
        return session.result

    def run(self, request: RenderRequest, force_refresh: bool | None = None) -> RenderSession:
        """Execute a render cycle and return its session for inspection."""
        settings = resolve_settings(request.settings, self.config.default_settings)
        session = RenderSession(
            request=request,
            settings=settings,
            key=fingerprint(request.tex, settings),
        )
        force = request.force_refresh if force_refresh is None else force_refresh
        with self._single_flight(session.key):
            if not self._rendering_required(session, force=force):
                session.result = RenderSuccess(mathml=session.mathml or "")
                return session
            session.result = self._do_render(session)
            if session.result.ok:
                self.write_cache(session)
            return session

    def render_html(self, request: RenderRequest, force_refresh: bool | None = None) -> str:
        """Return the embeddable fragment, or error markup when rendering failed."""
        result = self.render(request, force_refresh)
        if isinstance(result, RenderFailure):
            return format_error(result.message)
        return embed_mathml(
            result.mathml,
            request.label,
            request.tag_id,
            page_exists=self.page_exists,
            script_path=self.config.script_path,
        )

    def write_cache(self, session: RenderSession) -> bool:
        """Persist the session MathML when it changed. Return whether it was written."""
        if not session.changed or session.mathml is None:
            return False
        entry = CacheEntry(
            tex=session.request.tex,
            mathml=session.mathml,
            label=session.request.label,
        )
        self.cache.write(session.key, entry)
        return True

    # ---------------------------------------------------------------- pipeline

    def _rendering_required(self, session: RenderSession, *, force: bool) -> bool:
        if force:
            _log.debug("Rerendering was requested.")
            session.state = RenderState.CACHE_MISS
            return True
        stored = self.cache.read(session.key)
        session.stored = stored
        if stored is None:
            _log.debug("No entry found in cache.")
            session.state = RenderState.CACHE_MISS
            return True
        if not is_valid_mathml(stored.mathml):
            _log.debug("Malformed entry found in cache.")
            self.emitter.event("mathml_cache_invalid", {"key": session.key})
            session.state = RenderState.CACHE_MISS
            return True
        _log.debug("Valid entry found in cache.")
        self.emitter.event("mathml_cache_hit", {"key": session.key})
        session.mathml = stored.mathml
        session.state = RenderState.CACHE_HIT
        return False

    def _do_render(self, session: RenderSession) -> RenderResult:
        host = pick_host(self.config.daemon_urls, rng=self._rng)
        session.host = host
        post = encode_post_data(session.request.tex, session.settings)

        try:
            raw = self.client.request(host, post, self.config.timeout)
        except ConversionError as exc:
            detail = exc.detail if isinstance(exc, ConversionTransportError) else ""
            return self._fail(session, exc.kind or ErrorKind.TRANSPORT, host, detail=detail)

        try:
            markup = parse_envelope(raw)
        except InvalidResponseError as exc:
            _log.warning(
                "LaTeXML invalid JSON (%s): %r",
                exc.reason,
                {"post": post, "host": host, "res": raw},
            )
            return self._fail(session, ErrorKind.INVALID_JSON, host)

        if not is_valid_mathml(markup):
            _log.warning(
                "LaTeXML invalid MathML: %r",
                {"post": post, "host": host, "result": markup},
            )
            return self._fail(session, ErrorKind.INVALID_MATHML, host)

        session.mathml = markup
        session.changed = session.stored is None or session.stored.mathml != markup
        session.state = RenderState.RENDERED
        self.emitter.event(
            "mathml_render",
            {"key": session.key, "host": host, "changed": session.changed},
        )
        return RenderSuccess(mathml=markup)

    def _fail(
        self,
        session: RenderSession,
        kind: ErrorKind,
        host: str,
        *,
        detail: str = "",
    ) -> RenderFailure:
        session.state = RenderState.FAILED
        session.changed = False
        self.emitter.event(
            "mathml_render_failed",
            {"key": session.key, "host": host, "kind": kind.value},
        )
        return RenderFailure(
            kind=kind,
            message=failure_message(kind, host=host, detail=detail),
            host=host,
        )

    @contextmanager
    def _single_flight(self, key: str) -> Iterator[None]:
        """Serialise renders sharing a fingerprint."""
        with self._locks_guard:
            slot = self._locks.setdefault(key, [Lock(), 0])
            slot[1] += 1
        try:
            with slot[0]:
                yield
        finally:
            with self._locks_guard:
                slot[1] -= 1
                if slot[1] == 0:
                    self._locks.pop(key, None)


__all__ = [
    "RenderEngine",
    "RenderFailure",
    "RenderRequest",
    "RenderResult",
    "RenderSession",
    "RenderState",
    "RenderSuccess",
]
