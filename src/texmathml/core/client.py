"""HTTP client posting TeX expressions to a LaTeXML daemon."""

from __future__ import annotations

import logging
from threading import Event, Lock, Thread
import time
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import requests

from texmathml.core.exceptions import ConversionTimeoutError, ConversionTransportError


if TYPE_CHECKING:  # pragma: no cover - typing only
    from requests import Session as RequestsSession
else:
    RequestsSession = Any


_log = logging.getLogger(__name__)
_CHUNK_SIZE = 1024


@runtime_checkable
class ConversionClient(Protocol):
    """Capability posting a form-encoded body to a daemon and returning its reply."""

    def request(self, host: str, body: str, timeout: float) -> str: ...


def _tls_help(host: str) -> str:
    return (
        f"TLS certificate verification failed while contacting '{host}'. "
        "Check the daemon certificate, the system CA bundle and any proxy "
        "performing SSL inspection."
    )


class _Exchange:
    """One POST and its streamed body, run off the calling thread."""

    def __init__(
        self,
        session: RequestsSession,
        host: str,
        data: bytes,
        headers: dict[str, str],
        timeout: float,
    ) -> None:
        self.session = session
        self.host = host
        self.data = data
        self.headers = headers
        self.timeout = timeout
        self.deadline = time.monotonic() + timeout
        self.status: tuple[int, str] | None = None
        self.text: str | None = None
        self.error: Exception | None = None
        self.expired = Event()

    def run(self) -> None:
        try:
            self._exchange()
        except Exception as exc:  # re-raised on the calling thread
            self.error = exc

    def _exchange(self) -> None:
        response = self.session.post(
            self.host,
            data=self.data,
            headers=self.headers,
            timeout=self.timeout,
            stream=True,
        )
        try:
            if response.status_code >= 400:
                self.status = (response.status_code, getattr(response, "reason", None) or "")
                return
            chunks: list[bytes] = []
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                if self.expired.is_set() or time.monotonic() > self.deadline:
                    self.expired.set()
                    return
                chunks.append(chunk)
            self.text = b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")
        finally:
            response.close()


class RequestsConversionClient:
    """Conversion client backed by a shared :mod:`requests` session."""

    _DEFAULT_USER_AGENT = "texmathml-latexml-client"
    _CONTENT_TYPE = "application/x-www-form-urlencoded"

    def __init__(
        self,
        *,
        session: RequestsSession | None = None,
        user_agent: str | None = None,
    ) -> None:
        self._session_lock = Lock()
        self._session: RequestsSession | None = session
        self._user_agent = user_agent or self._DEFAULT_USER_AGENT

    def request(self, host: str, body: str, timeout: float) -> str:
        """POST ``body`` to ``host`` and return the raw response text.

        ``timeout`` bounds the whole exchange, from connecting to reading the
        last byte of the body.
        """
        headers = {"User-Agent": self._user_agent, "Content-Type": self._CONTENT_TYPE}
        exchange = _Exchange(self._ensure_session(), host, body.encode("utf-8"), headers, timeout)
        worker = Thread(target=exchange.run, name="texmathml-latexml", daemon=True)
        worker.start()
        worker.join(timeout)
        if worker.is_alive():
            exchange.expired.set()
            raise self._timeout_error(host, body, timeout)

        error = exchange.error
        if isinstance(error, requests.Timeout):
            raise self._timeout_error(host, body, timeout) from error
        if isinstance(error, requests.exceptions.SSLError):
            raise self._transport_error(host, body, _tls_help(host)) from error
        if isinstance(error, requests.RequestException):
            raise self._transport_error(host, body, str(error) or type(error).__name__) from error
        if error is not None:
            raise error

        if exchange.status is not None:
            code, reason = exchange.status
            raise self._transport_error(host, body, f"HTTP {code} {reason}".strip())
        if exchange.text is None:
            raise self._timeout_error(host, body, timeout)
        return exchange.text

    def close(self) -> None:
        """Release the pooled connections held by the session."""
        with self._session_lock:
            if self._session is not None:
                self._session.close()
                self._session = None

    def _timeout_error(self, host: str, body: str, timeout: float) -> ConversionTimeoutError:
        _log.warning(
            "LaTeXML timeout: %r",
            {"post": body, "host": host, "timeout": timeout},
        )
        return ConversionTimeoutError(host)

    def _transport_error(self, host: str, body: str, detail: str) -> ConversionTransportError:
        _log.warning(
            "LaTeXML no response: %r",
            {"post": body, "host": host, "errormsg": detail},
        )
        return ConversionTransportError(host, detail)

    def _ensure_session(self) -> RequestsSession:
        if self._session is not None:
            return self._session
        with self._session_lock:
            if self._session is None:
                self._session = requests.Session()
            return self._session


__all__ = ["ConversionClient", "RequestsConversionClient"]
