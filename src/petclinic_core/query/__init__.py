"""
Query layer: single round trip pagination and nested collection fetching.
"""

from .execution import fetch_rows, fetch_scalar
from .nested import (
    AggregateFetcher,
    HydratedRow,
    NestedFetchSpec,
    fetch_nested,
    hydrate,
    validate_specs,
    with_nested,
)
from .pagination import (
    ACTUAL_PAGE_SIZE,
    CURRENT_PAGE,
    LAST_PAGE,
    PAGINATION_COLUMNS,
    ROW_NUMBER,
    TOTAL_ROWS,
    Pageable,
    PaginatedRows,
    RowMapper,
    fetch_page,
    fetch_paginated,
    paginate,
)

__all__ = [
    # Pagination
    "Pageable",
    "PaginatedRows",
    "RowMapper",
    "paginate",
    "fetch_paginated",
    "fetch_page",
    "TOTAL_ROWS",
    "ROW_NUMBER",
    "ACTUAL_PAGE_SIZE",
    "LAST_PAGE",
    "CURRENT_PAGE",
    "PAGINATION_COLUMNS",
    # Nested fetching
    "NestedFetchSpec",
    "AggregateFetcher",
    "HydratedRow",
    "with_nested",
    "validate_specs",
    "hydrate",
    "fetch_nested",
    # Execution
    "fetch_rows",
    "fetch_scalar",
]
