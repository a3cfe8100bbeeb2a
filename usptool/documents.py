"""Application lookups: validation, document selection and attorney helpers."""

from __future__ import annotations

import os
import re
from typing import Any, Mapping, Sequence

_APP_NUMBER_RE = re.compile(r"[0-9]{6,12}")
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

DOCUMENT_CODE_ALIASES: dict[str, tuple[str, ...]] = {
    "rejection": ("CTNF", "CTFR"),
    "office-action": ("CTNF", "CTFR"),
    "non-final-rejection": ("CTNF",),
    "final-rejection": ("CTFR",),
    "allowance": ("NOA",),
    "notice-of-allowance": ("NOA",),
    "claims": ("CLM",),
    "specification": ("SPEC",),
    "spec": ("SPEC",),
    "abstract": ("ABST",),
    "drawings": ("DRWR",),
    "ids": ("IDS",),
}


class CommandError(Exception):
    """A user-facing error raised by a command."""


def _text(mapping: Mapping[str, Any] | None, key: str) -> str:
    if not mapping:
        return ""
    value = mapping.get(key)
    return "" if value is None else str(value)


def validate_app_number(app_number: str) -> str:
    """Return the application number if it is 6 to 12 digits, else raise."""
    if not _APP_NUMBER_RE.fullmatch(app_number or ""):
        raise CommandError(f"invalid application number {app_number!r}: must be 6-12 digits")
    return app_number


def extract_pfw(response: Mapping[str, Any] | None, app_number: str) -> dict[str, Any]:
    """Return the first patent file wrapper of a response."""
    bag = (response or {}).get("patentFileWrapperDataBag") or []
    if not bag:
        raise CommandError(f"no data found for application {app_number}")
    return bag[0]


def safe_str(value: Any, fallback: str = "") -> str:
    """Return value as text, or fallback when it is empty."""
    if value is None or value == "":
        return fallback
    return str(value)


def fmt_opt_float(value: float | None) -> str:
    """Format an optional number: '-' when missing, no decimals when whole."""
    if value is None:
        return "-"
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return f"{number:.1f}"


def filter_empty(*args: str) -> list[str]:
    """Return only the non-empty strings."""
    return [part for part in args if part]


def find_pdf_option(document: Mapping[str, Any]) -> str:
    """Return the download URL of the first PDF option, or an empty string."""
    for option in document.get("downloadOptionBag") or []:
        mime = _text(option, "mimeTypeIdentifier")
        if mime.casefold() == "application/pdf" or "pdf" in mime.lower():
            return _text(option, "downloadUrl")
    return ""


def default_output_path(document: Mapping[str, Any], app_number: str) -> str:
    """Build a filesystem-safe default file name for a document PDF."""
    name = f"{app_number}_{_text(document, 'officialDate')}_{_text(document, 'documentCode')}.pdf"
    for old, new in ((":", "-"), ("/", "_"), ("\\", "_"), (" ", "_")):
        name = name.replace(old, new)
    return name


def normalize_document_codes(raw: str) -> str:
    """Expand aliases, upper-case codes and drop duplicates, keeping order."""
    raw = (raw or "").strip()
    if not raw:
        return ""
    out: list[str] = []

    def add(code: str) -> None:
        if code and code not in out:
            out.append(code)

    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        key = token.replace("_", "-").replace(" ", "-").lower()
        expanded = DOCUMENT_CODE_ALIASES.get(key)
        if expanded is not None:
            for code in expanded:
                add(code.strip().upper())
        else:
            add(token.upper())
    return ",".join(out)


def document_query_params(codes: str = "", date_from: str = "", date_to: str = "") -> dict[str, str]:
    """Query parameters for a document listing, leaving out empty ones."""
    params: dict[str, str] = {}
    if codes:
        params["documentCodes"] = codes
    if date_from:
        params["officialDateFrom"] = date_from
    if date_to:
        params["officialDateTo"] = date_to
    return params


def sort_documents_by_date_expr(docs: Sequence[Mapping[str, Any]], expr: str) -> list[Any]:
    """Sort documents by official date given 'date[:asc|desc]'; stable."""
    expr = (expr or "").strip()
    if not expr:
        return list(docs)
    field, sep, order = expr.partition(":")
    if field.strip().lower() not in ("date", "officialdate"):
        raise CommandError(f"invalid --sort {expr!r}: supported fields are date or officialDate")
    descending = False
    if sep:
        order = order.strip().lower()
        if order == "desc":
            descending = True
        elif order != "asc":
            raise CommandError(f"invalid --sort {expr!r}: order must be asc or desc")
    return sorted(docs, key=lambda doc: _text(doc, "officialDate"), reverse=descending)


def resolve_document_selection(docs: Sequence[Mapping[str, Any]], selector: str) -> tuple[int, Any]:
    """Pick a document by 1-based index or by identifier; returns (index, document)."""
    if not docs:
        raise CommandError("no documents available")
    if _INTEGER_RE.fullmatch(selector):
        index = int(selector)
        if not 1 <= index <= len(docs):
            raise CommandError(f"document index {index} out of range (1-{len(docs)})")
        return index, docs[index - 1]
    wanted = selector.strip().casefold()
    for position, doc in enumerate(docs, start=1):
        if _text(doc, "documentIdentifier").strip().casefold() == wanted:
            return position, doc
    raise CommandError(f"document identifier {selector!r} not found")


def _extension(path: str) -> str:
    separators = {"/", os.sep}
    for i in range(len(path) - 1, -1, -1):
        char = path[i]
        if char == ".":
            return path[i:]
        if char in separators:
            break
    return ""


def unique_output_path(path: str, seen: dict[str, int]) -> tuple[str, bool]:
    """Return a path not handed out before, and whether it had to be renamed."""
    count = seen.get(path, 0)
    if count == 0:
        seen[path] = 1
        return path, False
    ext = _extension(path)
    base = path[: len(path) - len(ext)] if ext else path
    seen[path] = count + 1
    return f"{base}_{count}{ext}", True


def _full_name(entry: Mapping[str, Any]) -> str:
    parts = filter_empty(_text(entry, "firstName"), _text(entry, "middleName"), _text(entry, "lastName"))
    return " ".join(parts).strip()


def select_primary_attorney(pfw: Mapping[str, Any] | None) -> dict[str, str] | None:
    """The first named attorney, else the first named power-of-attorney entry."""
    if not pfw or not pfw.get("recordAttorney"):
        return None
    attorney = pfw["recordAttorney"]
    for entry in attorney.get("attorneyBag") or []:
        name = _full_name(entry)
        if name:
            return {
                "name": name,
                "registrationNumber": _text(entry, "registrationNumber"),
                "type": "Attorney",
                "active": _text(entry, "activeIndicator"),
            }
    for entry in attorney.get("powerOfAttorneyBag") or []:
        name = _full_name(entry) or _text(entry, "preferredName")
        if name:
            return {
                "name": name,
                "registrationNumber": _text(entry, "registrationNumber"),
                "type": "POA",
                "active": _text(entry, "activeIndicator"),
            }
    return None