import pytest

from usptool.documents import (
    CommandError,
    default_output_path,
    document_query_params,
    extract_pfw,
    filter_empty,
    find_pdf_option,
    fmt_opt_float,
    normalize_document_codes,
    resolve_document_selection,
    safe_str,
    select_primary_attorney,
    sort_documents_by_date_expr,
    unique_output_path,
    validate_app_number,
)


def test_sort_documents_by_date_expr():
    docs = [
        {"officialDate": "2024-02-01", "documentCode": "B"},
        {"officialDate": "2024-01-01", "documentCode": "A"},
    ]
    assert sort_documents_by_date_expr(docs, "date:asc")[0]["documentCode"] == "A"
    assert sort_documents_by_date_expr(docs, "date:desc")[0]["documentCode"] == "B"


def test_sort_empty_expr_keeps_order_and_default_is_asc():
    docs = [{"officialDate": "2024-02-01"}, {"officialDate": "2024-01-01"}]
    assert sort_documents_by_date_expr(docs, "") == docs
    assert [d["officialDate"] for d in sort_documents_by_date_expr(docs, "officialDate")] == [
        "2024-01-01",
        "2024-02-01",
    ]


def test_sort_is_stable_for_equal_dates():
    docs = [
        {"officialDate": "2024-01-01", "documentCode": "X"},
        {"officialDate": "2024-01-01", "documentCode": "Y"},
    ]
    codes = [d["documentCode"] for d in sort_documents_by_date_expr(docs, "date:desc")]
    assert codes == ["X", "Y"]


@pytest.mark.parametrize("expr", ["title:asc", "date:up"])
def test_sort_invalid_expr(expr):
    with pytest.raises(CommandError):
        sort_documents_by_date_expr([], expr)


def test_resolve_document_selection_by_index_and_identifier():
    docs = [{"documentIdentifier": "doc-a"}, {"documentIdentifier": "doc-b"}]
    idx, doc = resolve_document_selection(docs, "2")
    assert idx == 2 and doc["documentIdentifier"] == "doc-b"
    idx, doc = resolve_document_selection(docs, "doc-a")
    assert idx == 1 and doc["documentIdentifier"] == "doc-a"


def test_resolve_document_selection_errors():
    docs = [{"documentIdentifier": "doc-a"}]
    with pytest.raises(CommandError, match="out of range"):
        resolve_document_selection(docs, "3")
    with pytest.raises(CommandError, match="not found"):
        resolve_document_selection(docs, "doc-z")
    with pytest.raises(CommandError, match="no documents"):
        resolve_document_selection([], "1")


def test_resolve_identifier_case_insensitive():
    docs = [{"documentIdentifier": " Doc-A "}]
    assert resolve_document_selection(docs, "doc-a")[0] == 1


def test_unique_output_path_appends_suffix_on_collision():
    seen: dict[str, int] = {}
    assert unique_output_path("x.pdf", seen) == ("x.pdf", False)
    assert unique_output_path("x.pdf", seen) == ("x_1.pdf", True)
    assert unique_output_path("x.pdf", seen) == ("x_2.pdf", True)


def test_unique_output_path_without_extension():
    seen: dict[str, int] = {}
    unique_output_path("dir.v2/file", seen)
    assert unique_output_path("dir.v2/file", seen) == ("dir.v2/file_1", True)


def test_select_primary_attorney():
    pfw = {
        "recordAttorney": {
            "attorneyBag": [{"firstName": "Jane", "lastName": "Doe", "registrationNumber": "12345"}]
        }
    }
    got = select_primary_attorney(pfw)
    assert got["name"] == "Jane Doe"
    assert got["type"] == "Attorney"
    assert got["registrationNumber"] == "12345"


def test_select_primary_attorney_falls_back_to_poa():
    pfw = {
        "recordAttorney": {
            "attorneyBag": [{"firstName": ""}],
            "powerOfAttorneyBag": [{"preferredName": "Acme IP", "activeIndicator": "Y"}],
        }
    }
    got = select_primary_attorney(pfw)
    assert got == {"name": "Acme IP", "registrationNumber": "", "type": "POA", "active": "Y"}
    assert select_primary_attorney({}) is None
    assert select_primary_attorney({"recordAttorney": {"attorneyBag": []}}) is None


def test_normalize_document_codes():
    got = normalize_document_codes("rejection,allowance,clm,Spec,office-action,CTFR")
    for part in ["CTNF", "CTFR", "NOA", "CLM", "SPEC"]:
        assert part in got
    assert got == "CTNF,CTFR,NOA,CLM,SPEC"


def test_normalize_document_codes_variants():
    assert normalize_document_codes("  ") == ""
    assert normalize_document_codes("final_rejection, notice of allowance,,") == "CTFR,NOA"


def test_validate_app_number():
    assert validate_app_number("16123456") == "16123456"
    for bad in ["12345", "1234567890123", "16/123,456", ""]:
        with pytest.raises(CommandError):
            validate_app_number(bad)


def test_extract_pfw():
    first = {"applicationNumberText": "16123456"}
    assert extract_pfw({"patentFileWrapperDataBag": [first, {}]}, "16123456") is first
    with pytest.raises(CommandError, match="no data found for application 16123456"):
        extract_pfw({"patentFileWrapperDataBag": []}, "16123456")
    with pytest.raises(CommandError):
        extract_pfw(None, "16123456")


def test_safe_str_and_filter_empty():
    assert safe_str("", "-") == "-"
    assert safe_str(None, "-") == "-"
    assert safe_str("x", "-") == "x"
    assert filter_empty("a", "", "b") == ["a", "b"]


def test_fmt_opt_float():
    assert fmt_opt_float(None) == "-"
    assert fmt_opt_float(3.0) == "3"
    assert fmt_opt_float(2.25) == "2.2"
    assert fmt_opt_float(1.5) == "1.5"


def test_find_pdf_option():
    doc = {
        "downloadOptionBag": [
            {"mimeTypeIdentifier": "XML", "downloadUrl": "https://example.com/a.xml"},
            {"mimeTypeIdentifier": "PDF", "downloadUrl": "https://example.com/a.pdf"},
        ]
    }
    assert find_pdf_option(doc) == "https://example.com/a.pdf"
    assert find_pdf_option({"downloadOptionBag": []}) == ""


def test_default_output_path():
    doc = {"officialDate": "2024-01-02T00:00:00", "documentCode": "CT/NF"}
    assert default_output_path(doc, "16123456") == "16123456_2024-01-02T00-00-00_CT_NF.pdf"


def test_document_query_params():
    assert document_query_params("CTNF", "", "2024-01-01") == {
        "documentCodes": "CTNF",
        "officialDateTo": "2024-01-01",
    }
    assert document_query_params() == {}