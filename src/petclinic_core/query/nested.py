"""
Nested collection fetching without N+1 queries.

A ``NestedFetchSpec`` describes one one-to-many (or many-to-many) level:
the child query, the child column holding the parent key and the parent
column it must equal. Specs nest, so owners -> pets -> visits is one spec
with one child spec.

Two strategies produce the same hydrated rows:

- ``correlated``: every spec becomes one extra column of the parent query,
  a correlated sub-select that aggregates the ordered child rows into a
  JSON array. The whole tree is fetched by a single statement.
- ``batched``: the parent query runs first, then one ``IN (...)`` query per
  spec level loads the children of all collected parent keys, which are
  grouped in memory. Cost is one query per level, never one per row.

Either way a hydrated row is a plain dict whose spec slots hold lists of
hydrated child dicts, in the order the child query returned them.
"""

import json
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import JSON, ColumnElement, Select, literal, select, type_coerce
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import QueryError
from ..utils.config import NESTED_FETCH_STRATEGIES
from .execution import fetch_rows
from .sql import json_array_agg, json_nested, json_row

logger = logging.getLogger(__name__)

HydratedRow = Dict[str, Any]

PARENT_KEY_LABEL = "nested_parent_key"


@dataclass(frozen=True, eq=False)
class NestedFetchSpec:
    """
    One level of nested collection expansion.

    Attributes:
        name: Result slot the child rows are stored under
        query: Child SELECT with its projection and ORDER BY; it must not
            be filtered on the parent itself
        child_key: Child column holding the parent key
        parent_key: Parent column the child key must equal; the parent
            query has to project it, under a label or its own name
        children: Specs nested one level deeper, relative to ``query``
    """

    name: str
    query: Select
    child_key: ColumnElement[Any]
    parent_key: ColumnElement[Any]
    children: Tuple["NestedFetchSpec", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))

    @property
    def depth(self) -> int:
        """Number of nesting levels this spec spans, itself included."""
        return 1 + max((child.depth for child in self.children), default=0)


def _column_name(column: Any) -> str:
    return str(getattr(column, "name", column))


def _projected_key(query: Select, column: Any) -> Optional[str]:
    """Result key under which ``query`` projects ``column``, if it does."""
    for projected in query.selected_columns:
        if projected.shares_lineage(column):
            return projected.key
    return None


def _selects_from(query: Select, column: Any) -> bool:
    table = getattr(column, "table", None)
    if table is None:
        return False
    return any(from_.is_derived_from(table) for from_ in query.get_final_froms())


def validate_specs(parent: Select, specs: Sequence[NestedFetchSpec]) -> None:
    """
    Check that ``specs`` can be attached to ``parent``, recursively.

    Raises:
        QueryError: If a parent key is not projected by its parent query, a
            child key does not belong to a table its child query selects
            from, or a slot name collides with a projected column or with
            another spec
    """
    projected = {column.key for column in parent.selected_columns}
    seen = set()
    for spec in specs:
        if spec.name in projected or spec.name in seen:
            raise QueryError(
                f"Nested collection name '{spec.name}' is already used by the parent query",
                reason="name_collision",
                column=spec.name,
            )
        seen.add(spec.name)

        if _projected_key(parent, spec.parent_key) is None:
            raise QueryError(
                f"Nested collection '{spec.name}' correlates on "
                f"'{_column_name(spec.parent_key)}', which the parent query does not project",
                reason="dangling_correlation",
                column=_column_name(spec.parent_key),
            )
        # A foreign child key would turn the child query into a cross join.
        if not _selects_from(spec.query, spec.child_key):
            raise QueryError(
                f"Nested collection '{spec.name}' correlates on "
                f"'{_column_name(spec.child_key)}', which its child query does not select from",
                reason="dangling_correlation",
                column=_column_name(spec.child_key),
            )

        validate_specs(spec.query, spec.children)


def _aggregate_column(spec: NestedFetchSpec) -> Any:
    """Correlated sub-select returning the spec's child rows as a JSON array."""
    child = spec.query
    if spec.children:
        child = child.add_columns(*[_aggregate_column(c) for c in spec.children])

    parent_table = getattr(spec.parent_key, "table", None)
    child = child.where(spec.child_key == spec.parent_key)
    if parent_table is not None:
        child = child.correlate(parent_table)

    # Keeping the child ORDER BY inside a derived table preserves the
    # order the JSON array is built in.
    rows = child.subquery()
    nested = {c.name for c in spec.children}
    pairs: List[Any] = []
    for column in rows.c:
        pairs.append(literal(column.key))
        pairs.append(json_nested(column) if column.key in nested else column)

    aggregate = (
        select(json_array_agg(json_row(*pairs))).select_from(rows).scalar_subquery()
    )
    return type_coerce(aggregate, JSON).label(spec.name)


def with_nested(parent: Select, specs: Sequence[NestedFetchSpec]) -> Select:
    """
    Attach one JSON array column per spec to ``parent``.

    Args:
        parent: Parent query; it is not modified
        specs: Nested fetch specs, each possibly with children

    Returns:
        Parent query with an extra column per spec, ready to execute or to
        wrap with ``paginate``

    Raises:
        QueryError: If the specs do not fit the parent projection
    """
    validate_specs(parent, specs)
    statement = parent.add_columns(*[_aggregate_column(spec) for spec in specs])
    logger.debug(
        f"Built nested query with {len(specs)} collection(s): "
        f"{', '.join(spec.name for spec in specs)}"
    )
    return statement


def hydrate(row: Mapping[str, Any], specs: Sequence[NestedFetchSpec]) -> HydratedRow:
    """
    Turn one result row into a hydrated dict.

    Empty collections come back as SQL NULL on PostgreSQL; they are
    normalized to empty lists here.
    """
    hydrated = dict(row)
    for spec in specs:
        children = hydrated.get(spec.name)
        if isinstance(children, str):
            children = json.loads(children)
        hydrated[spec.name] = [hydrate(child, spec.children) for child in children or []]
    return hydrated


async def _attach_batched(
    session: AsyncSession,
    parent: Select,
    rows: List[HydratedRow],
    specs: Sequence[NestedFetchSpec],
) -> None:
    for spec in specs:
        key_name = _projected_key(parent, spec.parent_key)
        keys = list(
            dict.fromkeys(row[key_name] for row in rows if row[key_name] is not None)
        )

        groups: Dict[Any, List[HydratedRow]] = defaultdict(list)
        if keys:
            query = spec.query.add_columns(
                spec.child_key.label(PARENT_KEY_LABEL)
            ).where(spec.child_key.in_(keys))
            children = [
                dict(child)
                for child in await fetch_rows(session, query, f"nested:{spec.name}")
            ]
            await _attach_batched(session, spec.query, children, spec.children)
            for child in children:
                groups[child.pop(PARENT_KEY_LABEL)].append(child)

        for row in rows:
            row[spec.name] = groups.get(row[key_name], [])


class AggregateFetcher:
    """
    Fetch parent rows with their nested collections in a bounded number of
    statements.

    Args:
        specs: Nested fetch specs to attach to every parent row
        strategy: ``"correlated"`` (one statement) or ``"batched"`` (one
            statement per nesting level)
    """

    def __init__(
        self, specs: Sequence[NestedFetchSpec], strategy: str = "correlated"
    ) -> None:
        if strategy not in NESTED_FETCH_STRATEGIES:
            raise QueryError(
                f"Unknown nested fetch strategy '{strategy}'",
                reason="unknown_strategy",
            )
        self.specs: Tuple[NestedFetchSpec, ...] = tuple(specs)
        self.strategy = strategy

    def prepare(self, parent: Select) -> Select:
        """
        Return the statement that loads the parent rows.

        The correlated strategy embeds the collections in it; the batched
        strategy only validates the specs and loads them in ``complete``.
        """
        if self.strategy == "correlated":
            return with_nested(parent, self.specs)
        validate_specs(parent, self.specs)
        return parent

    async def complete(
        self,
        session: AsyncSession,
        parent: Select,
        rows: Sequence[Mapping[str, Any]],
    ) -> List[HydratedRow]:
        """Hydrate ``rows`` loaded with the statement ``prepare(parent)`` returned."""
        if self.strategy == "correlated":
            return [hydrate(row, self.specs) for row in rows]
        hydrated = [dict(row) for row in rows]
        await _attach_batched(session, parent, hydrated, self.specs)
        return hydrated

    async def fetch(self, session: AsyncSession, parent: Select) -> List[HydratedRow]:
        """
        Load every parent row with its nested collections.

        Raises:
            QueryError: If the specs do not fit the parent projection
            StoreError: If the store fails to execute a statement
        """
        rows = await fetch_rows(session, self.prepare(parent), "nested_fetch")
        return await self.complete(session, parent, rows)


async def fetch_nested(
    session: AsyncSession,
    parent: Select,
    specs: Sequence[NestedFetchSpec],
    strategy: str = "correlated",
) -> List[HydratedRow]:
    """Shortcut for ``AggregateFetcher(specs, strategy).fetch(session, parent)``."""
    return await AggregateFetcher(specs, strategy).fetch(session, parent)
