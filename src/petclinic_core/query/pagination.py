"""
Single round trip pagination.

``paginate`` wraps an arbitrary SELECT so that one execution returns the
requested page together with its metadata. The total row count and each
row's position are computed with window functions over the unpaged result,
so count and content always come from the same snapshot.

The generated statement has this shape::

    SELECT t.<original columns>,
           count(*) OVER () AS actual_page_size,
           max(t.row_number) OVER () = t.total_rows AS last_page,
           t.total_rows, t.row_number,
           (t.row_number - 1) / :page_size + 1 AS current_page
    FROM (
        SELECT u.*, count(*) OVER () AS total_rows,
               row_number() OVER (ORDER BY <sort keys>) AS row_number
        FROM (<base>) AS u
        ORDER BY <sort keys> LIMIT :page_size OFFSET :offset
    ) AS t
    ORDER BY <sort keys>

Example:
    >>> stmt = select(owners.c.id, owners.c.last_name)
    >>> page = await fetch_page(
    ...     session, stmt, [owners.c.last_name, owners.c.id],
    ...     Pageable.of(1, 10), OwnerSchema.model_validate,
    ... )
"""

import logging
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import operators
from sqlalchemy.sql.elements import UnaryExpression

from ..exceptions import QueryError
from ..schemas.page import Page
from .execution import fetch_rows, fetch_scalar

if TYPE_CHECKING:
    from .nested import AggregateFetcher

logger = logging.getLogger(__name__)

T = TypeVar("T")

SortKey = Union[str, ColumnElement[Any], Any]
RowMapper = Callable[[Mapping[str, Any]], T]

TOTAL_ROWS = "total_rows"
ROW_NUMBER = "row_number"
ACTUAL_PAGE_SIZE = "actual_page_size"
LAST_PAGE = "last_page"
CURRENT_PAGE = "current_page"

PAGINATION_COLUMNS = (ACTUAL_PAGE_SIZE, LAST_PAGE, TOTAL_ROWS, ROW_NUMBER, CURRENT_PAGE)


@dataclass(frozen=True)
class Pageable:
    """Request for one page: zero-based page number and page size."""

    page_number: int
    page_size: int

    def __post_init__(self) -> None:
        if self.page_number < 0:
            raise QueryError(
                f"Page number must not be negative, got {self.page_number}",
                reason="invalid_page_number",
            )
        if self.page_size <= 0:
            raise QueryError(
                f"Page size must be positive, got {self.page_size}",
                reason="invalid_page_size",
            )

    @property
    def offset(self) -> int:
        return self.page_number * self.page_size

    @classmethod
    def of(cls, page_number: int, page_size: int) -> "Pageable":
        return cls(page_number, page_size)

    @classmethod
    def of_size(cls, page_size: int) -> "Pageable":
        return cls(0, page_size)

    def next(self) -> "Pageable":
        return Pageable(self.page_number + 1, self.page_size)


@dataclass
class PaginatedRows:
    """Rows of one page together with the total count of the unpaged query."""

    rows: List[Mapping[str, Any]] = field(default_factory=list)
    total_rows: int = 0


def _split_direction(key: SortKey) -> Tuple[Any, Optional[Any]]:
    """Separate ``col.desc()`` / ``col.asc()`` into the column and its modifier."""
    if isinstance(key, UnaryExpression) and key.modifier in (
        operators.asc_op,
        operators.desc_op,
    ):
        return key.element, key.modifier
    return key, None


def _with_direction(column: ColumnElement[Any], modifier: Optional[Any]) -> Any:
    if modifier is operators.desc_op:
        return column.desc()
    if modifier is operators.asc_op:
        return column.asc()
    return column


def _as_column(element: Any) -> Any:
    # ORM attributes such as Owner.last_name
    if hasattr(element, "__clause_element__"):
        return element.__clause_element__()
    return element


def _describe(element: Any) -> str:
    return str(getattr(element, "name", element))


def _is_projected(base: Select, element: Any) -> bool:
    return any(column.shares_lineage(element) for column in base.selected_columns)


def _is_addable(base: Select, element: Any) -> bool:
    table = getattr(element, "table", None)
    if table is None:
        return False
    return any(from_.is_derived_from(table) for from_ in base.get_final_froms())


def _check_projection(base: Select) -> int:
    # Element keys, not collection keys; the collection renames duplicates.
    names = [column.key for column in base.selected_columns]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise QueryError(
            f"Base query projects ambiguous column names: {', '.join(duplicates)}",
            reason="ambiguous_projection",
            column=duplicates[0],
        )
    reserved = [name for name in names if name in PAGINATION_COLUMNS]
    if reserved:
        raise QueryError(
            f"Base query projects reserved pagination column '{reserved[0]}'",
            reason="reserved_column",
            column=reserved[0],
        )
    return len(names)


def paginate(
    base: Select,
    sort_keys: Sequence[SortKey],
    page_size: int,
    offset: int,
) -> Select:
    """
    Wrap ``base`` so one execution returns a page plus its metadata.

    Args:
        base: Filtered query to paginate; it is not modified
        sort_keys: Columns (or column names) of ``base`` defining a total
            order; ``col.desc()`` is accepted. End them with the primary key,
            e.g. ``[owners.c.last_name, owners.c.id]``, or rows sharing the
            other keys may move between pages. A column that is not projected
            but belongs to a table already in ``base``'s FROM clause is
            added to the inner query only.
        page_size: Maximum rows per page, must be positive
        offset: Rows to skip, must not be negative

    Returns:
        Statement projecting the original columns followed by
        ``actual_page_size``, ``last_page``, ``total_rows``, ``row_number``
        and ``current_page``

    Raises:
        QueryError: If the sort keys are empty or unknown, the paging bounds
            are invalid, or the base projection has ambiguous column names
    """
    if not sort_keys:
        raise QueryError(
            "Pagination requires at least one sort key", reason="empty_sort_keys"
        )
    if page_size <= 0:
        raise QueryError(
            f"Page size must be positive, got {page_size}", reason="invalid_page_size"
        )
    if offset < 0:
        raise QueryError(
            f"Offset must not be negative, got {offset}", reason="invalid_offset"
        )

    projected_count = _check_projection(base)

    resolved: List[Tuple[Any, Optional[Any]]] = []
    hidden: List[Any] = []
    for key in sort_keys:
        element, modifier = _split_direction(key)
        if isinstance(element, str):
            if element not in base.selected_columns:
                raise QueryError(
                    f"Sort key '{element}' is not projected by the base query",
                    reason="unknown_sort_key",
                    column=element,
                )
            element = base.selected_columns[element]
        else:
            element = _as_column(element)
            if not _is_projected(base, element):
                if not _is_addable(base, element):
                    raise QueryError(
                        f"Sort key '{_describe(element)}' does not belong to the base query",
                        reason="unknown_sort_key",
                        column=_describe(element),
                    )
                hidden.append(element)
        resolved.append((element, modifier))

    inner = base.add_columns(*hidden) if hidden else base
    u = inner.subquery("u")

    u_order = []
    for element, modifier in resolved:
        column = u.corresponding_column(element)
        if column is None:
            raise QueryError(
                f"Sort key '{_describe(element)}' could not be matched to the base projection",
                reason="unknown_sort_key",
                column=_describe(element),
            )
        u_order.append((column, modifier))

    order_by = [_with_direction(column, modifier) for column, modifier in u_order]
    t = (
        select(
            *u.c,
            func.count().over().label(TOTAL_ROWS),
            func.row_number().over(order_by=order_by).label(ROW_NUMBER),
        )
        .order_by(*order_by)
        .limit(page_size)
        .offset(offset)
        .subquery("t")
    )

    total_rows = t.c[TOTAL_ROWS]
    row_number = t.c[ROW_NUMBER]
    t_order = [
        _with_direction(t.corresponding_column(column), modifier)
        for column, modifier in u_order
    ]

    statement = select(
        *list(t.c)[:projected_count],
        func.count().over().label(ACTUAL_PAGE_SIZE),
        (func.max(row_number).over() == total_rows).label(LAST_PAGE),
        total_rows,
        row_number,
        ((row_number - 1) // page_size + 1).label(CURRENT_PAGE),
    ).order_by(*t_order)

    logger.debug(
        f"Built paginated query: page_size={page_size}, offset={offset}, "
        f"sort_keys={len(order_by)}, hidden_sort_columns={len(hidden)}"
    )
    return statement


async def fetch_paginated(
    session: AsyncSession,
    base: Select,
    sort_keys: Sequence[SortKey],
    page_size: int,
    offset: int,
    fetcher: Optional["AggregateFetcher"] = None,
) -> PaginatedRows:
    """
    Execute ``paginate`` and return the page rows with the unpaged total.

    Args:
        session: Session to execute on
        base: Filtered query to paginate
        sort_keys: Sort keys, see ``paginate``
        page_size: Maximum rows per page
        offset: Rows to skip
        fetcher: Optional nested fetcher attaching child collections to
            every row of the page

    Returns:
        The page rows (hydrated when a fetcher is given) and ``total_rows``

    Raises:
        QueryError: If the request is malformed
        StoreError: If the store fails to execute the statement
    """
    parent = fetcher.prepare(base) if fetcher is not None else base
    statement = paginate(parent, sort_keys, page_size, offset)
    rows = await fetch_rows(session, statement, "paginate")

    if rows:
        total = rows[0][TOTAL_ROWS]
    elif offset > 0:
        # The window columns ride on the page rows, so an empty page past
        # the end needs its own count.
        total = await fetch_scalar(
            session,
            select(func.count()).select_from(base.subquery()),
            "paginate_count",
        )
    else:
        total = 0

    if fetcher is not None:
        rows = await fetcher.complete(session, parent, rows)

    return PaginatedRows(rows=rows, total_rows=total or 0)


async def fetch_page(
    session: AsyncSession,
    base: Select,
    sort_keys: Sequence[SortKey],
    pageable: Pageable,
    mapper: RowMapper[T],
    fetcher: Optional["AggregateFetcher"] = None,
) -> Page[T]:
    """
    Fetch one page and map every row into a domain object.

    Args:
        session: Session to execute on
        base: Filtered query to paginate
        sort_keys: Sort keys, see ``paginate``
        pageable: Requested page
        mapper: Pure function turning one row into a domain object
        fetcher: Optional nested fetcher, see ``fetch_paginated``

    Returns:
        Page of mapped objects
    """
    paged = await fetch_paginated(
        session, base, sort_keys, pageable.page_size, pageable.offset, fetcher
    )
    content = [mapper(row) for row in paged.rows]
    logger.info(
        f"Fetched page {pageable.page_number} ({len(content)} of {paged.total_rows} rows)"
    )
    return Page(
        content=content,
        page_number=pageable.page_number,
        page_size=pageable.page_size,
        total_elements=paged.total_rows,
    )
