"""
Builders for dynamic, parameterized SQL fragments.

The model layer uses these to turn partial-update payloads and optional
query filters into SQL text with numbered placeholders ($1, $2, ...) plus
the list of values bound to them. The n-th placeholder always binds the
n-th value.

Column names and operators come from developer-authored mappings, never
from request data; only the values are user-supplied, and they are always
bound, never interpolated.
"""

import enum
import re
from typing import Any, Dict, List, Mapping, NamedTuple, Sequence, Tuple, Union

from sqlalchemy import text
from sqlalchemy.sql.elements import TextClause

from jobly.core.exceptions import EmptyPayloadError, FilterKeyMismatchError, InvalidOperatorError


class SqlOperator(str, enum.Enum):
    """Comparison operators allowed in a filter fragment."""
    EQ = "="
    NE = "<>"
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    ILIKE = "ILIKE"


class SqlFragment(NamedTuple):
    """A partial SQL clause and the values for its placeholders, in order."""
    clause: str
    values: List[Any]


OperatorLike = Union[SqlOperator, str]

PLACEHOLDER_RE = re.compile(r"\$(\d+)")


def resolve_column(key: str, js_to_sql: Mapping[str, str]) -> str:
    """
    Map a logical field name to its column.

    Keys without a mapping are used verbatim, so callers whose field names
    already match the table can pass an empty mapping.
    """
    return js_to_sql.get(key, key)


def resolve_operator(key: str, operators: Mapping[str, OperatorLike]) -> SqlOperator:
    """Look up the operator for a filter field, failing closed."""
    token = operators.get(key)
    if token is None:
        raise InvalidOperatorError(key)
    try:
        return SqlOperator(token)
    except ValueError:
        raise InvalidOperatorError(key)


def sql_for_partial_update(data_to_update: Mapping[str, Any], js_to_sql: Mapping[str, str]) -> SqlFragment:
    """
    Build the SET list for a partial UPDATE.

    Args:
        data_to_update: Fields to change, e.g. {"firstName": "Aliya", "age": 32}
        js_to_sql: Logical field name to column, e.g. {"firstName": "first_name"}

    Returns:
        SqlFragment('"first_name"=$1, "age"=$2', ["Aliya", 32])

    Raises:
        EmptyPayloadError: If data_to_update has no fields
    """
    keys = list(data_to_update)
    if not keys:
        raise EmptyPayloadError("No data")

    cols = [
        f'"{resolve_column(key, js_to_sql)}"=${idx}'
        for idx, key in enumerate(keys, start=1)
    ]

    return SqlFragment(", ".join(cols), [data_to_update[key] for key in keys])


def sql_for_filtering(
    col_names: Mapping[str, str],
    data_to_filter: Mapping[str, Any],
    operators: Mapping[str, OperatorLike],
    strict: bool = False
) -> SqlFragment:
    """
    Build an AND-joined WHERE predicate list.

    Fields are taken from col_names, in its order; keys of data_to_filter
    that col_names does not list are ignored. ILIKE values are wrapped in
    '%' for substring matching.

    Args:
        col_names: Logical field name to column, e.g. {"emin": "num_employees"}
        data_to_filter: Logical field name to value, e.g. {"emin": 10}
        operators: Logical field name to SqlOperator, e.g. {"emin": ">="}
        strict: Raise instead of binding None when a listed field has no value

    Returns:
        SqlFragment('"num_employees" >= $1', [10]), or SqlFragment("", [])
        when col_names is empty

    Raises:
        InvalidOperatorError: If a field's operator is missing or not whitelisted
        FilterKeyMismatchError: If strict and a field has no value
    """
    predicates = []
    values = []

    for idx, key in enumerate(col_names, start=1):
        op = resolve_operator(key, operators)

        if key not in data_to_filter and strict:
            raise FilterKeyMismatchError(key)
        value = data_to_filter.get(key)
        if op is SqlOperator.ILIKE:
            value = f"%{value}%"

        predicates.append(f'"{col_names[key]}" {op.value} ${idx}')
        values.append(value)

    return SqlFragment(" AND ".join(predicates), values)


def bind_positional(sql: str, values: Sequence[Any], dialect_name: str = "postgresql") -> Tuple[TextClause, Dict[str, Any]]:
    """
    Turn a statement with $n placeholders into a SQLAlchemy text clause.

    Each $n becomes the named bind :pn. Dialects other than PostgreSQL have
    no ILIKE, so it is rendered as LIKE (case-insensitive for ASCII on SQLite).

    Returns:
        (TextClause, {"p1": values[0], "p2": values[1], ...})
    """
    rendered = PLACEHOLDER_RE.sub(lambda m: f":p{m.group(1)}", sql)
    if dialect_name != "postgresql":
        rendered = rendered.replace(f" {SqlOperator.ILIKE.value} ", " LIKE ")

    params = {f"p{idx}": value for idx, value in enumerate(values, start=1)}
    return text(rendered), params
