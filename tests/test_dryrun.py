import io
import json

from usptool.dryrun import (
    SearchOptions,
    format_dry_run_params,
    print_dry_run_get,
    print_dry_run_post,
    search_options_to_params,
)

PATH = "/api/v1/patent/applications/12345678/documents"


def test_get_without_params_is_one_line():
    buf = io.StringIO()
    print_dry_run_get(PATH, None, buf)
    assert buf.getvalue() == "GET " + PATH + "\n"


def test_get_params_sorted_and_empty_dropped():
    params = {"officialDateTo": "2024-12-31", "documentCodes": "CTNF", "officialDateFrom": ""}
    buf = io.StringIO()
    print_dry_run_get(PATH, params, buf)
    lines = buf.getvalue().splitlines()
    assert lines[0] == "GET " + PATH
    assert lines[1].startswith("  ?")
    parts = lines[1][3:].split("&")
    assert parts == sorted(parts)
    assert set(parts) == {f"{k}={v}" for k, v in params.items() if v}
    assert len(lines) == 2


def test_get_all_empty_params_prints_only_request_line():
    buf = io.StringIO()
    print_dry_run_get(PATH, {"a": "", "b": ""}, buf)
    assert len(buf.getvalue().splitlines()) == 1


def test_format_params_round_trip():
    params = {"z": "1", "m": "two words", "a": "x=y", "skip": ""}
    text = format_dry_run_params(params)
    decoded = dict(part.split("=", 1) for part in text.split("&"))
    assert decoded == {k: v for k, v in params.items() if v}


def test_format_params_empty():
    assert format_dry_run_params({}) == ""
    assert format_dry_run_params(None) == ""


def test_post_body_is_indented_json():
    body = {"q": "widget", "pagination": {"offset": 0, "limit": 25}, "fields": ["a", "b"]}
    buf = io.StringIO()
    print_dry_run_post("/api/v1/patent/applications/search", {"limit": "5"}, body, buf)
    lines = buf.getvalue().splitlines()
    assert lines[0] == "POST /api/v1/patent/applications/search"
    assert lines[1] == "  ?limit=5"
    assert lines[2] == "  body:"
    json_lines = lines[3:]
    assert all(line.startswith("  ") for line in json_lines)
    assert json.loads("\n".join(line[2:] for line in json_lines)) == body


def test_post_without_body_has_no_body_line():
    buf = io.StringIO()
    print_dry_run_post("/api/v1/patent/applications/search", None, None, buf)
    assert "body" not in buf.getvalue()
    assert buf.getvalue().startswith("POST ")


def test_post_unserializable_body_reports_error():
    buf = io.StringIO()
    print_dry_run_post("/x", None, {"bad": object()}, buf)
    assert "marshal error" in buf.getvalue()


def test_search_options_to_params_includes_set_fields():
    opts = SearchOptions(limit=25, offset=0, sort="filingDate desc", facets="status")
    params = search_options_to_params("widget", opts)
    assert params == {"q": "widget", "limit": "25", "sort": "filingDate desc", "facets": "status"}


def test_search_options_to_params_empty():
    assert search_options_to_params("", SearchOptions()) == {}


def test_search_options_offset_included_when_positive():
    params = search_options_to_params("", SearchOptions(offset=50))
    assert params == {"offset": "50"}