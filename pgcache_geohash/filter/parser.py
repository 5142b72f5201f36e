"""Parsing of attribute filter expressions into SQL predicates."""

import logging
from typing import Any, Dict, Optional, Union

import orjson
from psycopg import sql
from pygeofilter.parsers.cql2_json import parse as parse_cql2_json
from pygeofilter.parsers.cql2_text import parse as parse_cql2_text
from pygeofilter.parsers.ecql import parse as parse_ecql

from .like import normalize_like
from .transform import FieldMapping, to_sql

logger = logging.getLogger(__name__)

ALWAYS_TRUE = "1=1"
"""Filter expression that matches every row and is used verbatim."""


def parse_filter(where: Union[str, Dict[str, Any]], filter_lang: str = "ecql") -> Any:
    """Parse a filter expression into a pygeofilter AST.

    Args:
        where: The filter expression; cql2-json accepts a mapping or a JSON string
        filter_lang: One of ecql, cql2-text or cql2-json

    Returns:
        The root AST node. Parser errors propagate unchanged.

    Raises:
        ValueError: If the filter language is not supported
    """
    if filter_lang == "ecql":
        return parse_ecql(where)
    elif filter_lang == "cql2-text":
        return parse_cql2_text(where)
    elif filter_lang == "cql2-json":
        if isinstance(where, str):
            where = orjson.loads(where)
        return parse_cql2_json(where)
    else:
        raise ValueError(
            f"Unknown filter-lang: {filter_lang}. Only ecql, cql2-text or cql2-json are supported."
        )


def parse_where(
    where: Union[str, Dict[str, Any]],
    filter_lang: str = "ecql",
    field_mapping: Optional[FieldMapping] = None,
) -> sql.Composable:
    """Turn a where expression into a SQL predicate for aggregation queries.

    The always true sentinel, `1=1` with any surrounding or inner whitespace,
    is passed through without parsing. Every other
    expression is parsed, its LIKE predicates are narrowed to exact matches
    and the result is composed as SQL.
    """
    if isinstance(where, str) and "".join(where.split()) == ALWAYS_TRUE:
        return sql.SQL(ALWAYS_TRUE)

    node = parse_filter(where, filter_lang)
    predicate = to_sql(normalize_like(node), field_mapping)
    logger.debug(f"Parsed {filter_lang} filter into {predicate!r}")
    return predicate
