"""AST-based filter transformation into PostgreSQL predicates."""

from datetime import date, datetime
from typing import Any, Dict, Optional

from psycopg import sql
from pygeofilter import ast

from .like import like_to_sql

FieldMapping = Dict[str, sql.Composable]

_COMPARISON_OPS = {
    ast.Equal: "=",
    ast.NotEqual: "<>",
    ast.LessThan: "<",
    ast.LessEqual: "<=",
    ast.GreaterThan: ">",
    ast.GreaterEqual: ">=",
}


def property_field(name: str) -> sql.Composable:
    """Reference a feature property stored in the `feature` JSON column."""
    return sql.SQL("{}->'properties'->>{}").format(
        sql.Identifier("feature"), sql.Literal(name)
    )


def to_sql_field(field_mapping: Optional[FieldMapping], name: str) -> sql.Composable:
    """Map an attribute name to its column expression.

    Attributes missing from the mapping are read from the feature properties.
    """
    if field_mapping and name in field_mapping:
        return field_mapping[name]
    return property_field(name)


def _cast_for(value: Any) -> Optional[str]:
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "float"
    if isinstance(value, datetime):
        return "timestamptz"
    if isinstance(value, date):
        return "date"
    return None


def _to_sql_value(value: Any) -> sql.Composable:
    if isinstance(value, (str, bool, int, float, date, datetime)):
        return sql.Literal(value)
    raise ValueError(f"Unsupported filter value: {value!r}")


def _typed_field(field: sql.Composable, value: Any) -> sql.Composable:
    cast = _cast_for(value)
    if cast is None:
        return field
    return sql.SQL("({})::{}").format(field, sql.SQL(cast))


def to_sql(node: Any, field_mapping: Optional[FieldMapping] = None) -> sql.Composable:
    """Transform a pygeofilter AST node into a SQL predicate.

    Text extracted from the feature JSON is cast to match the type of the
    compared literal, so `pop > 5` compares numerically.

    Args:
        node: The AST node to transform.
        field_mapping: Optional overrides mapping attribute names to columns.

    Returns:
        sql.Composable: The predicate.

    Raises:
        ValueError: If the node or one of its values is not supported.
    """
    if isinstance(node, ast.And):
        return sql.SQL("({} AND {})").format(
            to_sql(node.lhs, field_mapping), to_sql(node.rhs, field_mapping)
        )

    elif isinstance(node, ast.Or):
        return sql.SQL("({} OR {})").format(
            to_sql(node.lhs, field_mapping), to_sql(node.rhs, field_mapping)
        )

    elif isinstance(node, ast.Not):
        return sql.SQL("NOT {}").format(to_sql(node.sub_node, field_mapping))

    elif type(node) in _COMPARISON_OPS:
        field = _to_sql_attribute(node.lhs, field_mapping)
        return sql.SQL("{} {} {}").format(
            _typed_field(field, node.rhs),
            sql.SQL(_COMPARISON_OPS[type(node)]),
            _to_sql_value(node.rhs),
        )

    elif isinstance(node, ast.Like):
        field = _to_sql_attribute(node.lhs, field_mapping)
        op = "ILIKE" if node.nocase else "LIKE"
        if node.not_:
            op = f"NOT {op}"
        return sql.SQL("{} {} {}").format(
            field,
            sql.SQL(op),
            sql.Literal(
                like_to_sql(
                    node.pattern, node.wildcard, node.singlechar, node.escapechar
                )
            ),
        )

    elif isinstance(node, ast.In):
        if not node.sub_nodes:
            raise ValueError("IN operator expects at least one value")
        field = _to_sql_attribute(node.lhs, field_mapping)
        op = "NOT IN" if node.not_ else "IN"
        return sql.SQL("{} {} ({})").format(
            _typed_field(field, node.sub_nodes[0]),
            sql.SQL(op),
            sql.SQL(", ").join(_to_sql_value(v) for v in node.sub_nodes),
        )

    elif isinstance(node, ast.Between):
        field = _to_sql_attribute(node.lhs, field_mapping)
        op = "NOT BETWEEN" if node.not_ else "BETWEEN"
        return sql.SQL("{} {} {} AND {}").format(
            _typed_field(field, node.low),
            sql.SQL(op),
            _to_sql_value(node.low),
            _to_sql_value(node.high),
        )

    elif isinstance(node, ast.IsNull):
        field = _to_sql_attribute(node.lhs, field_mapping)
        op = "IS NOT NULL" if node.not_ else "IS NULL"
        return sql.SQL("{} {}").format(field, sql.SQL(op))

    raise ValueError(f"Unsupported filter node: {type(node).__name__}")


def _to_sql_attribute(node: Any, field_mapping: Optional[FieldMapping]) -> sql.Composable:
    if not isinstance(node, ast.Attribute):
        raise ValueError(
            f"Left hand side of a comparison must be an attribute, got {node!r}"
        )
    return to_sql_field(field_mapping, node.name)
