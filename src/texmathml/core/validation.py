"""Validation of LaTeXML daemon responses."""

from __future__ import annotations

import json
import logging
from xml.etree import ElementTree

from texmathml.core.exceptions import InvalidResponseError


MATHML_NAMESPACE = "http://www.w3.org/1998/Math/MathML"
ALLOWED_ROOTS = frozenset({"math", "table", "div"})

_log = logging.getLogger(__name__)


def parse_envelope(raw: str) -> str:
    """Return the ``result`` markup carried by a daemon JSON response."""
    try:
        payload = json.loads(raw)
    except RecursionError as exc:
        raise InvalidResponseError(raw, "JSON nested too deeply") from exc
    except (TypeError, ValueError) as exc:
        raise InvalidResponseError(raw) from exc
    if not isinstance(payload, dict):
        raise InvalidResponseError(raw, "expected a JSON object")
    result = payload.get("result")
    if not isinstance(result, str):
        raise InvalidResponseError(raw, "missing 'result' field")
    return result


def root_element_name(xml: str) -> str | None:
    """Return the root element name of ``xml`` or ``None`` when malformed.

    Namespaced roots are reported as ``namespace:local`` with the MathML
    namespace stripped, so ``<m:math xmlns:m="...MathML">`` yields ``math``.
    """
    try:
        root = ElementTree.fromstring(xml)
    except (ElementTree.ParseError, ValueError) as exc:
        _log.debug("XML validation error: %s\n%r", exc, xml)
        return None
    tag = root.tag
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        tag = local if namespace == MATHML_NAMESPACE else f"{namespace}:{local}"
    return tag


def is_valid_mathml(xml: str | None) -> bool:
    """Return whether ``xml`` is well-formed with a math, table or div root."""
    if not isinstance(xml, str) or not xml.strip():
        return False
    name = root_element_name(xml)
    if name is None:
        return False
    if name in ALLOWED_ROOTS:
        return True
    _log.debug("got wrong root element %s", name)
    return False


__all__ = [
    "ALLOWED_ROOTS",
    "MATHML_NAMESPACE",
    "is_valid_mathml",
    "parse_envelope",
    "root_element_name",
]
