"""Bulk data product search, lookup, file listing and download.

The client object is expected to provide:
  search_bulk_data(query, options) -> {"count": int, "bulkDataProductBag": [...]}
  get_bulk_data_product(product_id, include_files=..., latest=...) -> product dict
  download_bulk_file(product_id, file_name, output_path) -> saved path
"""

from __future__ import annotations

import sys
from typing import Any, TextIO

from .dryrun import SearchOptions
from .output import Console, PaginationMeta

SEARCH_PATH = "/api/v1/datasets/products/search"
PRODUCT_PATH = "/api/v1/datasets/products/"


def build_bulk_query(query: str = "", title: str = "", category: str = "", frequency: str = "") -> str:
    """Combine free text and filters into one AND-joined query."""
    parts = []
    if query:
        parts.append(query)
    if title:
        parts.append(f'productTitleText:"{title}"')
    if category:
        parts.append(f'productDataSetCategoryArrayText:"{category}"')
    if frequency:
        parts.append(f"productFrequencyText:{frequency}")
    return " AND ".join(parts).strip()


def bulk_search_pagination(offset: int, limit: int, total: int, returned: int) -> PaginationMeta | None:
    """Paging data for a search result, or None when nothing matched."""
    if total <= 0:
        return None
    return PaginationMeta(offset=offset, limit=limit, total=total, has_more=offset + returned < total)


def print_bulk_search_dry_run(query: str, options: SearchOptions, stream: TextIO | None = None) -> None:
    """Print the search request that would be sent."""
    stream = sys.stderr if stream is None else stream
    print(f"GET {SEARCH_PATH}", file=stream)
    params = []
    if query:
        params.append("q=" + query)
    if options.limit > 0:
        params.append(f"limit={options.limit}")
    if options.offset > 0:
        params.append(f"offset={options.offset}")
    if params:
        print("  ?" + "&".join(params), file=stream)


def filter_product_files(product: dict[str, Any], file_type: str) -> dict[str, Any]:
    """Keep only files whose fileTypeText matches file_type, ignoring case."""
    wanted = (file_type or "").strip().casefold()
    if not wanted:
        return product
    bag = dict(product.get("productFileBag") or {})
    kept = [
        f for f in bag.get("fileDataBag") or []
        if str(f.get("fileTypeText") or "").strip().casefold() == wanted
    ]
    bag["fileDataBag"] = kept
    bag["count"] = len(kept)
    return {**product, "productFileBag": bag}


def limit_files(files: list[Any], limit: int) -> list[Any]:
    """Return at most limit files; zero or negative means all."""
    files = list(files)
    if 0 < limit < len(files):
        return files[:limit]
    return files


def run_bulk_search(
    client: Any,
    console: Console,
    query: str = "",
    title: str = "",
    category: str = "",
    frequency: str = "",
    limit: int = 25,
    offset: int = 0,
    dry_run: bool = False,
) -> list[Any] | None:
    """Search bulk data products and write the results."""
    full_query = build_bulk_query(query, title, category, frequency)
    options = SearchOptions(limit=limit, offset=offset)
    if dry_run:
        print_bulk_search_dry_run(full_query, options, console.stderr)
        return None

    response = client.search_bulk_data(full_query, options)
    total = int(response.get("count") or 0)
    products = list(response.get("bulkDataProductBag") or [])
    console.info(f"{total} bulk data products found")
    console.result("search", products, bulk_search_pagination(offset, limit, total, len(products)))
    return products


def run_bulk_get(
    client: Any,
    console: Console,
    product_id: str,
    include_files: bool = False,
    latest: bool = False,
    file_type: str = "",
    dry_run: bool = False,
) -> dict[str, Any] | None:
    """Fetch one product, optionally with files filtered by type."""
    want_files = include_files or bool((file_type or "").strip())
    if dry_run:
        print(f"GET {PRODUCT_PATH}{product_id}", file=console.stderr)
        params = []
        if want_files:
            params.append("includeFiles=true")
        if latest:
            params.append("latest=true")
        if params:
            print("  ?" + "&".join(params), file=console.stderr)
        return None

    product = client.get_bulk_data_product(product_id, include_files=want_files, latest=latest)
    product = filter_product_files(product, file_type)
    console.result("get", product)
    return product


def run_bulk_files(
    client: Any,
    console: Console,
    product_id: str,
    limit: int = 0,
    dry_run: bool = False,
) -> list[Any] | None:
    """List the downloadable files of a product."""
    if dry_run:
        print(f"GET {PRODUCT_PATH}{product_id}", file=console.stderr)
        print("  ?includeFiles=true", file=console.stderr)
        return None

    product = client.get_bulk_data_product(product_id, include_files=True, latest=False)
    files = limit_files((product.get("productFileBag") or {}).get("fileDataBag") or [], limit)
    console.info(f"{len(files)} files available for {product_id}")
    pagination = None
    if files:
        pagination = PaginationMeta(offset=0, limit=len(files), total=len(files), has_more=False)
    console.result("files", files, pagination)
    return files


def run_bulk_download(
    client: Any,
    console: Console,
    product_id: str,
    file_name: str,
    output: str = "",
    dry_run: bool = False,
) -> dict[str, str] | None:
    """Download one bulk file and report where it was saved."""
    output_path = output or file_name
    if dry_run:
        print(
            f"GET {PRODUCT_PATH}{product_id}?includeFiles=true (lookup fileDownloadURI)",
            file=console.stderr,
        )
        print(f"Then: GET <fileDownloadURI for {file_name}> -> {output_path}", file=console.stderr)
        return None

    console.info(f"Downloading {product_id}/{file_name} ...")
    console.info("Rate limit: 20 downloads per file per year per API key.")
    saved = client.download_bulk_file(product_id, file_name, output_path)
    console.info(f"Saved to: {saved}")

    result = {"productId": product_id, "fileName": file_name, "savedTo": saved}
    if console.options.quiet and console.options.format == "table":
        return result
    console.result("download", result)
    return result