"""
Dialect-aware SQL constructs used to return child rows as JSON arrays.

PostgreSQL and SQLite both aggregate rows into JSON, under different
function names. The constructs below render the right spelling for the
dialect the statement is compiled against, the same way a TypeDecorator
picks JSONB on PostgreSQL and JSON elsewhere.
"""

from sqlalchemy import JSON
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import FunctionElement


class json_row(FunctionElement):
    """Build one JSON object from alternating key and value arguments."""

    type = JSON()
    name = "json_row"
    inherit_cache = True


class json_array_agg(FunctionElement):
    """Aggregate one JSON value per input row into a JSON array."""

    type = JSON()
    name = "json_array_agg"
    inherit_cache = True


class json_nested(FunctionElement):
    """
    Embed an already aggregated JSON column inside another JSON object.

    SQLite hands sub-query results back as text, so the value has to be
    re-parsed with ``json()`` or it would be nested as a string.
    """

    type = JSON()
    name = "json_nested"
    inherit_cache = True


@compiles(json_row)
def _json_row_default(element, compiler, **kw):
    return "json_object(%s)" % compiler.process(element.clauses, **kw)


@compiles(json_row, "postgresql")
def _json_row_postgresql(element, compiler, **kw):
    return "json_build_object(%s)" % compiler.process(element.clauses, **kw)


@compiles(json_array_agg)
def _json_array_agg_default(element, compiler, **kw):
    return "json_group_array(%s)" % compiler.process(element.clauses, **kw)


@compiles(json_array_agg, "postgresql")
def _json_array_agg_postgresql(element, compiler, **kw):
    return "json_agg(%s)" % compiler.process(element.clauses, **kw)


@compiles(json_nested)
def _json_nested_default(element, compiler, **kw):
    return "json(%s)" % compiler.process(element.clauses, **kw)


@compiles(json_nested, "postgresql")
def _json_nested_postgresql(element, compiler, **kw):
    return compiler.process(element.clauses, **kw)
