"""Describe requests that would be sent, without sending them."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any, Mapping, TextIO

from .output import _plain


@dataclass
class SearchOptions:
    """Common search parameters."""

    limit: int = 0
    offset: int = 0
    sort: str = ""
    fields: str = ""
    filters: str = ""
    facets: str = ""


def format_dry_run_params(params: Mapping[str, str] | None) -> str:
    """Join non-empty parameters as key=value pairs in key order."""
    if not params:
        return ""
    return "&".join(f"{key}={params[key]}" for key in sorted(k for k, v in params.items() if v != ""))


def _write_params(params: Mapping[str, str] | None, stream: TextIO) -> None:
    query = format_dry_run_params(params)
    if query:
        print(f"  ?{query}", file=stream)


def print_dry_run_get(path: str, params: Mapping[str, str] | None = None, stream: TextIO | None = None) -> None:
    """Print a GET request line and its query parameters."""
    stream = sys.stderr if stream is None else stream
    print(f"GET {path}", file=stream)
    _write_params(params, stream)


def print_dry_run_post(
    path: str,
    params: Mapping[str, str] | None = None,
    body: Any = None,
    stream: TextIO | None = None,
) -> None:
    """Print a POST request line, its query parameters and an indented JSON body."""
    stream = sys.stderr if stream is None else stream
    print(f"POST {path}", file=stream)
    _write_params(params, stream)
    if body is None:
        return
    try:
        text = json.dumps(_plain(body), ensure_ascii=False, indent=2)
    except (TypeError, ValueError) as exc:
        print(f"  body: (marshal error: {exc})", file=stream)
        return
    indented = text.replace("\n", "\n  ")
    print(f"  body:\n  {indented}", file=stream)


def search_options_to_params(query: str, options: SearchOptions) -> dict[str, str]:
    """Turn a query and search options into request parameters."""
    params: dict[str, str] = {}
    if query:
        params["q"] = query
    if options.limit > 0:
        params["limit"] = str(options.limit)
    if options.offset > 0:
        params["offset"] = str(options.offset)
    for name in ("sort", "fields", "filters", "facets"):
        value = getattr(options, name)
        if value:
            params[name] = value
    return params