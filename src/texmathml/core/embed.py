"""Embedding of validated MathML into inline HTML fragments."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from html import escape
import re
from urllib.parse import quote


FORMULA_NAMESPACE = "Formula:"
_ID_WHITESPACE = re.compile(r"\s+")

PageExists = Callable[[str], bool]


class PageIndex:
    """Set-backed page existence lookup."""

    def __init__(self, titles: Iterable[str] = ()) -> None:
        self._titles = set(titles)

    def add(self, title: str) -> None:
        self._titles.add(title)

    def exists(self, title: str) -> bool:
        return title in self._titles

    __call__ = exists


def _no_pages(_title: str) -> bool:
    return False


def sanitize_attributes(attributes: Mapping[str, str | None]) -> dict[str, str]:
    """Drop empty attribute values and turn ``id`` into a valid HTML id.

    Whitespace runs inside an id become ``_``; an id left blank is dropped.
    """
    cleaned: dict[str, str] = {}
    for name, value in attributes.items():
        if value is None or value == "":
            continue
        if name == "id":
            value = _ID_WHITESPACE.sub("_", value.strip())
            if not value:
                continue
        cleaned[name] = value
    return cleaned


def build_tag(name: str, attributes: Mapping[str, str], contents: str) -> str:
    """Return ``<name attr="...">contents</name>`` with escaped attribute values."""
    rendered = "".join(f' {key}="{escape(value, quote=True)}"' for key, value in attributes.items())
    return f"<{name}{rendered}>{contents}</{name}>"


def formula_page_url(label: str, *, script_path: str = "", redlink: bool = False) -> str:
    """Return the wiki URL of the formula page associated with ``label``."""
    title = quote(f"{FORMULA_NAMESPACE}{label}", safe=":/")
    url = f"{script_path}/index.php?title={title}"
    if redlink:
        url += "&action=edit&redlink=1"
    return url


def embed_mathml(
    mathml: str,
    label: str | None = None,
    tag_id: str | None = None,
    *,
    page_exists: PageExists | None = None,
    script_path: str = "",
) -> str:
    """Wrap MathML in a formula link when labelled, otherwise in a ``span.tex``."""
    mathml = mathml.replace("\n", " ")
    if label:
        lookup = page_exists or _no_pages
        title = f"{FORMULA_NAMESPACE}{label}"
        link: dict[str, str | None]
        if lookup(title):
            link = {
                "title": title,
                "href": formula_page_url(label, script_path=script_path),
            }
        else:
            link = {
                "class": "new",
                "title": title,
                "href": formula_page_url(label, script_path=script_path, redlink=True),
            }
        link["id"] = tag_id
        return build_tag("a", sanitize_attributes(link), mathml)

    attributes = sanitize_attributes({"class": "tex", "dir": "ltr", "id": tag_id})
    return build_tag("span", attributes, mathml)


def format_error(message: str) -> str:
    """Return the inline markup used to report a failed rendering."""
    return build_tag("strong", {"class": "error texerror"}, escape(message, quote=False))


__all__ = [
    "FORMULA_NAMESPACE",
    "PageExists",
    "PageIndex",
    "build_tag",
    "embed_mathml",
    "format_error",
    "formula_page_url",
    "sanitize_attributes",
]
