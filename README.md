# usptool

`usptool` is a library of helpers for working with USPTO patent application
data. It is built from the standard library alone and requires Python 3.10 or
later.

It covers these areas:

- **Application documents.** Validating application numbers, expanding
  document-code aliases, sorting and selecting file-wrapper documents, naming
  downloaded PDFs and picking the primary attorney of record.
- **Application tables.** Plain-text tables for metadata, documents,
  transactions, continuity, assignments, attorneys, term adjustment, foreign
  priority and associated documents.
- **Patent families.** Walking parent and child continuity links up to a
  bounded depth and drawing the result as a tree.
- **Bulk data products.** Building search queries, filtering and limiting file
  lists, and running search, lookup, listing and download through a client
  you supply.
- **Output.** A JSON envelope, NDJSON, CSV or boxed text tables, plus dry-run
  previews of requests.

## Modules

| Module | Purpose |
| --- | --- |
| `usptool.output` | `Console`, `OutputOptions`, the envelope types `CLIResponse`, `CLIError`, `PaginationMeta` and `FacetValue`, the helpers `to_slice`, `flatten_map` and `flatten_to_map`, and `render_table` |
| `usptool.dryrun` | `SearchOptions`, `search_options_to_params`, `format_dry_run_params`, `print_dry_run_get` and `print_dry_run_post` |
| `usptool.bulk` | `build_bulk_query`, `bulk_search_pagination`, `filter_product_files`, `limit_files` and the runners `run_bulk_search`, `run_bulk_get`, `run_bulk_files` and `run_bulk_download` |
| `usptool.documents` | `CommandError`, `validate_app_number`, `extract_pfw`, `normalize_document_codes`, `document_query_params`, `sort_documents_by_date_expr`, `resolve_document_selection`, `find_pdf_option`, `default_output_path`, `unique_output_path` and `select_primary_attorney` |
| `usptool.app_tables` | `write_app_meta_table`, `write_documents_table`, `write_transactions_table`, `write_continuity_table`, `write_assignments_table`, `write_attorney_table`, `write_primary_attorney_table`, `write_adjustment_table`, `write_foreign_priority_table` and `write_associated_docs_table` |
| `usptool.family` | `FamilyNode`, `FamilyResult`, `FamilyApplicationRef`, `parent_relationship`, `child_relationship`, `clamp_depth`, `build_family_node`, `build_family`, `write_family_tree` and `write_key_value_family` |

## Examples

### Document codes, selection and file names

```python
from usptool.documents import (
    CommandError,
    normalize_document_codes,
    sort_documents_by_date_expr,
    unique_output_path,
    validate_app_number,
)

normalize_document_codes("rejection,allowance,clm")
# 'CTNF,CTFR,NOA,CLM'

docs = [{"officialDate": "2024-02-01"}, {"officialDate": "2024-01-01"}]
sort_documents_by_date_expr(docs, "date:desc")[0]["officialDate"]
# '2024-02-01'

seen = {}
unique_output_path("x.pdf", seen)   # ('x.pdf', False)
unique_output_path("x.pdf", seen)   # ('x_1.pdf', True)

try:
    validate_app_number("12-34")
except CommandError as exc:
    print(exc)  # invalid application number '12-34': must be 6-12 digits
```

Application numbers must be 6 to 12 digits. Document-code aliases such as
`office-action` (`CTNF,CTFR`) or `spec` (`SPEC`) are matched case-insensitively,
with underscores and spaces read as hyphens; other codes are upper-cased.
Duplicates are dropped and first-seen order is kept. A sort expression is
`date` or `officialDate`, optionally followed by `:asc` or `:desc`; anything
else raises `CommandError`.

`resolve_document_selection` takes a 1-based index or a document identifier
(compared case-insensitively) and returns the index and the document.

### Continuity relationships

```python
from usptool.family import child_relationship, parent_relationship

parent_relationship(" div ")  # 'DIV'
parent_relationship("")       # 'PARENT'
child_relationship("")        # 'CHILD'
```

### Family trees

`build_family(client, app_number, depth, console)` follows continuity links
from a root application. The client must provide `get_metadata(app_number)`
and `get_continuity(app_number)`, each returning a response with a
`patentFileWrapperDataBag` list. Calls are made one after another and no
application is visited twice; a failed lookup only writes a warning. Depth is
kept between 1 and 5 by `clamp_depth`.

`write_family_tree(result, out, with_dates=False)` draws the tree with
box-drawing characters and lists every member with its relationship;
`FamilyResult.to_dict()` gives the JSON form.

### Output

```python
from usptool.output import Console, OutputOptions

console = Console(OutputOptions(format="json", minify=True), version="0.1.0")
console.result("files", [{"fileName": "a.zip"}])
# {"ok":true,"command":"files","results":[{"fileName":"a.zip"}],"version":"0.1.0"}
```

A `Console` writes results to its `stdout` and progress to its `stderr`:

- **`json`** writes the envelope with `ok`, `command`, `pagination`,
  `results`, `facets`, `version` and `error`; empty optional parts are left
  out. `minify` writes it compactly.
- **`ndjson`** writes one JSON object per line, one per result item.
- **`csv`** flattens each item into dot-separated keys and uses the sorted
  keys as columns.
- **`table`** (the default) renders the same flattened columns with
  `render_table`.

`Console.info` is silenced when `quiet` is set; `Console.warn` always writes.

### Dry runs

```python
import sys
from usptool.dryrun import print_dry_run_get

print_dry_run_get("/api/v1/patent/applications/16123456/documents",
                  {"documentCodes": "CTNF", "officialDateTo": ""}, sys.stdout)
# GET /api/v1/patent/applications/16123456/documents
#   ?documentCodes=CTNF
```

Empty parameters are dropped and the rest are printed in key order.

## What this package does not do

- It has no HTTP client. The bulk and family functions call a client object
  you pass in, and the application helpers work on response dictionaries you
  have already fetched.
- It has no command-line program; there is no command to run.
- It does not fetch or parse grant or pre-grant publication XML, so it cannot
  extract claims, citations, abstracts or descriptions.