"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


DAEMON_PANEL = "Daemon"
OUTPUT_PANEL = "Output"
CACHE_PANEL = "Cache"
DIAGNOSTICS_PANEL = "Diagnostics"

TexArgument = Annotated[
    str,
    typer.Argument(metavar="TEX", help="TeX math expression to convert."),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        help="YAML file providing daemon URLs, default settings and timeout.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        rich_help_panel=DAEMON_PANEL,
    ),
]

UrlOption = Annotated[
    list[str] | None,
    typer.Option(
        "--url",
        help="LaTeXML daemon URL. Repeat to pick randomly among several daemons.",
        rich_help_panel=DAEMON_PANEL,
    ),
]

TimeoutOption = Annotated[
    float | None,
    typer.Option(
        "--timeout",
        help="Request timeout in seconds.",
        rich_help_panel=DAEMON_PANEL,
    ),
]

SettingOption = Annotated[
    list[str] | None,
    typer.Option(
        "--setting",
        "-s",
        metavar="KEY[=VALUE]",
        help="LaTeXML option sent with the request. Repeat keys for multiple values.",
        rich_help_panel=DAEMON_PANEL,
    ),
]

LabelOption = Annotated[
    str | None,
    typer.Option(
        "--label",
        help="Formula label linking to its wiki page.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

TagIdOption = Annotated[
    str | None,
    typer.Option(
        "--tag-id",
        help="Element id for equation references.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

ExistingPageOption = Annotated[
    list[str] | None,
    typer.Option(
        "--existing-page",
        help="Formula page title known to exist (rendered as a regular link).",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

RawOption = Annotated[
    bool,
    typer.Option(
        "--raw",
        help="Print the bare MathML instead of the HTML fragment.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

ForceOption = Annotated[
    bool,
    typer.Option(
        "--force",
        help="Ignore cached MathML and re-render.",
        rich_help_panel=CACHE_PANEL,
    ),
]

CacheDirOption = Annotated[
    Path | None,
    typer.Option(
        "--cache-dir",
        help="Directory holding the MathML cache.",
        rich_help_panel=CACHE_PANEL,
    ),
]

NoCacheOption = Annotated[
    bool,
    typer.Option(
        "--no-cache",
        help="Keep rendered MathML in memory only.",
        rich_help_panel=CACHE_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
