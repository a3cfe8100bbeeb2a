"""Recursive patent family trees built from continuity data.

The client object is expected to provide:
  get_metadata(app_number) -> {"patentFileWrapperDataBag": [{"applicationMetaData": {...}}]}
  get_continuity(app_number) -> {"patentFileWrapperDataBag": [{"parentContinuityBag": [...],
                                                               "childContinuityBag": [...]}]}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, TextIO

from .output import Console

MAX_DEPTH = 5
_KNOWN_CODES = frozenset({"CON", "DIV", "CIP", "PRO"})
_TITLE_LIMIT = 70


@dataclass
class FamilyNode:
    """One application in the family tree."""

    application_number: str
    patent_number: str = ""
    title: str = ""
    status: str = ""
    filing_date: str = ""
    relationship: str = ""
    children: list[FamilyNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"applicationNumber": self.application_number}
        optional = (
            ("patentNumber", self.patent_number),
            ("title", self.title),
            ("status", self.status),
            ("filingDate", self.filing_date),
            ("relationship", self.relationship),
        )
        out.update((key, value) for key, value in optional if value)
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


@dataclass
class FamilyApplicationRef:
    """A deduplicated family member with the relationship it was found by."""

    application_number: str
    relationship: str


@dataclass
class FamilyResult:
    """The complete family: the tree and a flat list of members."""

    root: str
    tree: FamilyNode
    all_application_numbers: list[FamilyApplicationRef] = field(default_factory=list)
    total_members: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root,
            "tree": self.tree.to_dict(),
            "allApplicationNumbers": [
                {"applicationNumber": ref.application_number, "relationship": ref.relationship}
                for ref in self.all_application_numbers
            ],
            "totalMembers": self.total_members,
        }


def _relationship(code: str, fallback: str) -> str:
    code = (code or "").strip().upper()
    if code in _KNOWN_CODES:
        return code
    return code or fallback


def parent_relationship(code: str) -> str:
    """Normalise a claim parentage code seen from the child side."""
    return _relationship(code, "PARENT")


def child_relationship(code: str) -> str:
    """Normalise a claim parentage code seen from the parent side."""
    return _relationship(code, "CHILD")


def clamp_depth(depth: int, console: Console) -> int:
    """Keep the recursion depth between 1 and the maximum, warning when capped."""
    if depth < 1:
        return 1
    if depth > MAX_DEPTH:
        console.info(f"Warning: depth clamped to maximum of {MAX_DEPTH}.")
        return MAX_DEPTH
    return depth


def _first_wrapper(response: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
    bag = (response or {}).get("patentFileWrapperDataBag") or []
    return bag[0] if bag else None


def _text(mapping: Mapping[str, Any] | None, key: str) -> str:
    value = (mapping or {}).get(key)
    return "" if value is None else str(value)


def build_family_node(
    client: Any,
    app_number: str,
    relationship: str,
    depth: int,
    visited: dict[str, str],
    console: Console,
) -> FamilyNode:
    """Fetch one application and, while depth allows, its unvisited relatives."""
    node = FamilyNode(application_number=app_number, relationship=relationship)

    if app_number not in visited:
        visited[app_number] = relationship.strip().upper() or "ROOT"

    console.info(f"  Fetching metadata for {app_number}...")
    try:
        meta_response = client.get_metadata(app_number)
    except Exception as exc:  # noqa: BLE001 - any lookup failure only warns
        console.info(f"  Warning: metadata for {app_number}: {exc}")
    else:
        wrapper = _first_wrapper(meta_response)
        if wrapper is not None:
            meta = wrapper.get("applicationMetaData") or {}
            node.title = _text(meta, "inventionTitle")
            node.patent_number = _text(meta, "patentNumber")
            node.status = _text(meta, "applicationStatusDescriptionText")
            node.filing_date = _text(meta, "filingDate")

    if depth <= 0:
        return node

    console.info(f"  Fetching continuity for {app_number}...")
    try:
        continuity = client.get_continuity(app_number)
    except Exception as exc:  # noqa: BLE001 - any lookup failure only warns
        console.info(f"  Warning: continuity for {app_number}: {exc}")
        return node

    wrapper = _first_wrapper(continuity)
    if wrapper is None:
        return node

    related: list[tuple[str, str]] = []
    for parent in wrapper.get("parentContinuityBag") or []:
        number = _text(parent, "parentApplicationNumberText")
        if number and number not in visited:
            related.append((number, parent_relationship(_text(parent, "claimParentageTypeCode"))))
    for child in wrapper.get("childContinuityBag") or []:
        number = _text(child, "childApplicationNumberText")
        if number and number not in visited:
            related.append((number, child_relationship(_text(child, "claimParentageTypeCode"))))

    if related:
        console.info(f"  Found {len(related)} related application(s) for {app_number}.")

    for number, rel in related:
        # An earlier sibling's subtree may already have reached this one.
        if number in visited:
            continue
        node.children.append(build_family_node(client, number, rel, depth - 1, visited, console))
    return node


def build_family(client: Any, app_number: str, depth: int, console: Console) -> FamilyResult:
    """Build the whole family of an application up to the given depth."""
    depth = clamp_depth(depth, console)
    visited: dict[str, str] = {}
    console.info(f"Building family tree for {app_number} (depth {depth})...")
    tree = build_family_node(client, app_number, "", depth, visited, console)
    members = [FamilyApplicationRef(number, visited[number]) for number in sorted(visited)]
    result = FamilyResult(
        root=app_number,
        tree=tree,
        all_application_numbers=members,
        total_members=len(members),
    )
    console.info(f"Found {result.total_members} family members.")
    return result


def _write_node(node: FamilyNode, prefix: str, is_last: bool, out: TextIO, with_dates: bool) -> None:
    connector = "└── " if is_last else "├── "
    line = node.application_number
    if node.relationship:
        line = f"[{node.relationship}] {line}"
    if node.patent_number:
        line += f" (Pat. {node.patent_number})"
    if with_dates and node.filing_date:
        line += f" [filed {node.filing_date}]"

    is_root = prefix == ""
    print(line if is_root else prefix + connector + line, file=out)

    if is_root:
        child_prefix = ""
    else:
        child_prefix = prefix + ("    " if is_last else "│   ")

    if node.status:
        print(f"{child_prefix}  Status: {node.status}", file=out)
    if node.title:
        title = node.title
        if len(title) > _TITLE_LIMIT:
            title = title[:67] + "..."
        print(f"{child_prefix}  Title:  {title}", file=out)

    last = len(node.children) - 1
    for index, child in enumerate(node.children):
        _write_node(child, child_prefix, index == last, out, with_dates)


def write_family_tree(result: FamilyResult, out: TextIO, with_dates: bool = False) -> None:
    """Render the family as an indented text tree followed by the member list."""
    print(f"Patent Family Tree (root: {result.root}, {result.total_members} members)", file=out)
    print("=" * 60, file=out)
    _write_node(result.tree, "", True, out, with_dates)
    print(file=out)
    print("All application numbers:", file=out)
    for ref in result.all_application_numbers:
        print(f"  {ref.application_number} ({ref.relationship})", file=out)


def write_key_value_family(result: FamilyResult, out: TextIO) -> None:
    """Render the family as a flat key/value listing."""
    print(f"Root:           {result.root}", file=out)
    print(f"Total Members:  {result.total_members}", file=out)
    print(file=out)
    print("Applications:", file=out)
    for ref in result.all_application_numbers:
        print(f"  {ref.application_number} ({ref.relationship})", file=out)