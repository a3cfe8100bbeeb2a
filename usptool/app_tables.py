"""Human-readable tables for application lookups."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from .documents import filter_empty, fmt_opt_float, safe_str
from .output import Console, render_table


def _field(mapping: Mapping[str, Any] | None, key: str, fallback: str = "-") -> str:
    if not mapping:
        return fallback
    return safe_str(mapping.get(key), fallback)


def _number(mapping: Mapping[str, Any] | None, key: str) -> Any:
    value = (mapping or {}).get(key)
    return 0 if value is None else value


def _int_text(value: Any) -> str:
    if value is None or value == "":
        return "0"
    try:
        return str(int(float(value)))
    except (TypeError, ValueError):
        return str(value)


def _emit(console: Console, header: Sequence[str], rows: Sequence[Sequence[Any]], separator_before=()) -> None:
    console.stdout.write(render_table(header, rows, light=True, separator_before=separator_before))


def _person_name(entry: Mapping[str, Any]) -> str:
    parts = filter_empty(
        _field(entry, "firstName", ""),
        _field(entry, "middleName", ""),
        _field(entry, "lastName", ""),
    )
    return " ".join(parts).strip()


def write_app_meta_table(meta: Mapping[str, Any] | None, app_number: str, console: Console) -> None:
    """Render the application metadata as a field/value table."""
    meta = meta or {}
    entity = meta.get("entityStatusData") or {}
    rows: list[list[Any]] = [
        ["Application #", app_number],
        ["Title", _field(meta, "inventionTitle")],
        ["Status", _field(meta, "applicationStatusDescriptionText")],
        ["Status Date", _field(meta, "applicationStatusDate")],
        ["Filing Date", _field(meta, "filingDate")],
        ["Effective Filing Date", _field(meta, "effectiveFilingDate")],
        ["Grant Date", _field(meta, "grantDate")],
        ["Patent #", _field(meta, "patentNumber")],
        ["App Type", _field(meta, "applicationTypeLabelName")],
        ["Entity Status", _field(entity, "businessEntityStatusCategory")],
        ["Examiner", _field(meta, "examinerNameText")],
        ["Group Art Unit", _field(meta, "groupArtUnitNumber")],
        ["Docket #", _field(meta, "docketNumber")],
        ["First Inventor", _field(meta, "firstInventorName")],
        ["First Applicant", _field(meta, "firstApplicantName")],
        ["Earliest Pub #", _field(meta, "earliestPublicationNumber")],
        ["Earliest Pub Date", _field(meta, "earliestPublicationDate")],
    ]
    cpc = meta.get("cpcClassificationBag") or []
    if cpc:
        rows.append(["CPC Classifications", ", ".join(str(c) for c in cpc)])
    _emit(console, ["Field", "Value"], rows)


def write_documents_table(docs: Sequence[Mapping[str, Any]], console: Console) -> None:
    """Render a numbered list of file wrapper documents."""
    rows = []
    for number, doc in enumerate(docs, start=1):
        formats = [_field(opt, "mimeTypeIdentifier", "") for opt in doc.get("downloadOptionBag") or []]
        rows.append([
            number,
            _field(doc, "officialDate"),
            _field(doc, "documentCode"),
            _field(doc, "documentDirectionCategory"),
            _field(doc, "documentCodeDescriptionText"),
            ", ".join(formats),
        ])
    _emit(console, ["#", "Date", "Code", "Direction", "Description", "Formats"], rows)


def write_transactions_table(events: Sequence[Mapping[str, Any]], console: Console) -> None:
    """Render the prosecution history."""
    rows = [
        [_field(ev, "eventDate"), _field(ev, "eventCode"), _field(ev, "eventDescriptionText")]
        for ev in events
    ]
    _emit(console, ["Date", "Code", "Description"], rows)


def _relationship(entry: Mapping[str, Any]) -> str:
    return _field(entry, "claimParentageTypeCodeDescriptionText", _field(entry, "claimParentageTypeCode"))


def write_continuity_table(
    parents: Sequence[Mapping[str, Any]] | None,
    children: Sequence[Mapping[str, Any]] | None,
    console: Console,
) -> None:
    """Render parent and child continuity tables."""
    parents = list(parents or [])
    children = list(children or [])
    if parents:
        console.info(f"Parent Applications ({len(parents)}):")
        rows = [
            [
                _field(p, "parentApplicationNumberText"),
                _field(p, "parentPatentNumber"),
                _relationship(p),
                _field(p, "parentApplicationFilingDate"),
                _field(p, "parentApplicationStatusDescriptionText"),
                _field(p, "childApplicationNumberText"),
            ]
            for p in parents
        ]
        _emit(console, ["Parent App #", "Patent #", "Relationship", "Filing Date", "Status", "Child App #"], rows)

    if children:
        if parents:
            print(file=console.stdout)
        console.info(f"Child Applications ({len(children)}):")
        rows = [
            [
                _field(c, "childApplicationNumberText"),
                _field(c, "childPatentNumber"),
                _relationship(c),
                _field(c, "childApplicationFilingDate"),
                _field(c, "childApplicationStatusDescriptionText"),
                _field(c, "parentApplicationNumberText"),
            ]
            for c in children
        ]
        _emit(console, ["Child App #", "Patent #", "Relationship", "Filing Date", "Status", "Parent App #"], rows)

    if not parents and not children:
        console.warn("No continuity data found.")


def write_assignments_table(assignments: Sequence[Mapping[str, Any]], console: Console) -> None:
    """Render assignment records with their assignors and assignees."""
    rows = []
    for a in assignments:
        assignors = []
        for s in a.get("assignorBag") or []:
            name = _field(s, "assignorName", "")
            execution = _field(s, "executionDate", "")
            if execution:
                name += f" ({execution})"
            if name:
                assignors.append(name)
        assignees = [
            name for name in (_field(e, "assigneeNameText", "") for e in a.get("assigneeBag") or []) if name
        ]
        fallback = f"{_int_text(a.get('reelNumber'))}/{_int_text(a.get('frameNumber'))}"
        rows.append([
            _field(a, "reelAndFrameNumber", fallback),
            _field(a, "assignmentRecordedDate"),
            _field(a, "conveyanceText"),
            "; ".join(assignors),
            "; ".join(assignees),
        ])
    _emit(console, ["Reel/Frame", "Recorded", "Conveyance", "Assignors", "Assignees"], rows)


def write_attorney_table(pfw: Mapping[str, Any], console: Console) -> None:
    """Render correspondence info, attorneys/agents and correspondence addresses."""
    attorney = pfw.get("recordAttorney")
    if not attorney:
        console.warn("No attorney/agent data found.")
        return

    correspondence = attorney.get("customerNumberCorrespondenceData")
    if correspondence:
        console.info("Correspondence Info:")
        patron = correspondence.get("patronIdentifier")
        rows: list[list[Any]] = [
            ["Customer #", 0 if patron is None else patron],
            ["Organization", _field(correspondence, "organizationStandardName")],
        ]
        addresses = correspondence.get("powerOfAttorneyAddressBag") or []
        if addresses:
            addr = addresses[0]
            rows.append(["Firm", _field(addr, "nameLineOneText")])
            line = f"{_field(addr, 'addressLineOneText', '')} {_field(addr, 'addressLineTwoText', '')}".strip()
            rows.append(["Address", safe_str(line, "-")])
            region = _field(addr, "geographicRegionCode", _field(addr, "geographicRegionName", ""))
            city_state = f"{_field(addr, 'cityName', '')}, {region} {_field(addr, 'postalCode', '')}".strip()
            rows.append(["City/State/Zip", safe_str(city_state, "-")])
        _emit(console, ["Field", "Value"], rows)
        print(file=console.stdout)

    rows = []
    for p in attorney.get("powerOfAttorneyBag") or []:
        rows.append([
            safe_str(_person_name(p), _field(p, "preferredName")),
            _field(p, "registrationNumber"),
            "POA",
            _field(p, "registeredPractitionerCategory"),
            _field(p, "activeIndicator"),
        ])
    for a in attorney.get("attorneyBag") or []:
        rows.append([
            safe_str(_person_name(a), "-"),
            _field(a, "registrationNumber"),
            "Attorney",
            _field(a, "registeredPractitionerCategory"),
            _field(a, "activeIndicator"),
        ])

    if rows:
        console.info(f"Attorneys/Agents ({len(rows)}):")
        _emit(console, ["Name", "Reg #", "Type", "Category", "Active"], rows)
    else:
        console.warn("No individual attorneys/agents listed.")

    addresses = pfw.get("correspondenceAddressBag") or []
    if addresses:
        print(file=console.stdout)
        console.info("Correspondence Address:")
        address_rows = [
            [
                _field(addr, "nameLineOneText"),
                _field(addr, "addressLineOneText"),
                _field(addr, "cityName"),
                _field(addr, "geographicRegionName"),
                _field(addr, "postalCode"),
                _field(addr, "countryCode"),
            ]
            for addr in addresses
        ]
        _emit(console, ["Name", "Address", "City", "State", "Postal Code", "Country"], address_rows)


def write_primary_attorney_table(primary: Mapping[str, str], console: Console) -> None:
    """Render the single primary attorney/agent."""
    row = [
        primary.get("name", ""),
        _field(primary, "registrationNumber"),
        _field(primary, "type"),
        _field(primary, "active"),
    ]
    _emit(console, ["Name", "Reg #", "Type", "Active"], [row])


def write_adjustment_table(data: Mapping[str, Any] | None, console: Console) -> None:
    """Render patent term adjustment totals and history."""
    if data is None:
        console.warn("No patent term adjustment data found.")
        return
    rows = [
        ["A Delay (14-month rule)", _number(data, "aDelayQuantity")],
        ["B Delay (3-year rule)", _number(data, "bDelayQuantity")],
        ["C Delay (interference/secrecy/appeal)", _number(data, "cDelayQuantity")],
        ["Overlapping", _number(data, "overlappingDayQuantity")],
        ["Non-Overlapping", _number(data, "nonOverlappingDayQuantity")],
        ["IP Office Delay", _number(data, "ipOfficeAdjustmentDelayQuantity")],
        ["Applicant Delay", _number(data, "applicantDayDelayQuantity")],
        ["TOTAL ADJUSTMENT", _number(data, "adjustmentTotalQuantity")],
    ]
    _emit(console, ["Component", "Days"], rows, separator_before=[len(rows) - 1])

    history = data.get("patentTermAdjustmentHistoryDataBag") or []
    if history:
        print(file=console.stdout)
        console.info(f"Adjustment History ({len(history)} events):")
        history_rows = [
            [
                fmt_opt_float(h.get("eventSequenceNumber")),
                _field(h, "eventDate"),
                _field(h, "ptaPTECode"),
                _field(h, "eventDescriptionText"),
            ]
            for h in history
        ]
        _emit(console, ["Seq", "Date", "Code", "Description"], history_rows)


def write_foreign_priority_table(entries: Sequence[Mapping[str, Any]] | None, console: Console) -> None:
    """Render foreign priority claims."""
    entries = list(entries or [])
    if not entries:
        console.warn("No foreign priority data found.")
        return
    rows = [
        [_field(e, "ipOfficeName"), _field(e, "applicationNumberText"), _field(e, "filingDate")]
        for e in entries
    ]
    _emit(console, ["IP Office", "Application #", "Filing Date"], rows)


def write_associated_docs_table(pfw: Mapping[str, Any], console: Console) -> None:
    """Render grant and pre-grant publication XML metadata."""
    grant = pfw.get("grantDocumentMetaData")
    pgpub = pfw.get("pgpubDocumentMetaData")
    if grant is None and pgpub is None:
        console.warn("No associated documents found.")
        return

    def row(label: str, meta: Mapping[str, Any]) -> list[Any]:
        return [
            label,
            _field(meta, "productIdentifier"),
            _field(meta, "zipFileName"),
            _field(meta, "xmlFileName"),
            _field(meta, "fileCreateDateTime"),
            _field(meta, "fileLocationURI"),
        ]

    rows = []
    if grant is not None:
        rows.append(row("Grant", grant))
    if pgpub is not None:
        rows.append(row("Pre-Grant Pub", pgpub))
    _emit(console, ["Type", "Product", "Zip File", "XML File", "Created", "URI"], rows)