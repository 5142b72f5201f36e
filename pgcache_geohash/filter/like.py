"""LIKE pattern conversion for attribute filters.

Aggregation queries trade matching semantics for speed: a case-insensitive
LIKE becomes an exact equality and the multi character wildcard is dropped
from every LIKE pattern. `name ILIKE '%foo%'` therefore only matches rows whose
name is exactly `foo`.

Patterns arrive in the dialect of the parsed filter (ECQL uses `%`, `.` and
`\\`) and are rewritten with substitution tables into either a plain value or
a PostgreSQL LIKE pattern.
"""

import re
from dataclasses import replace
from typing import Any, Dict, Optional

from pygeofilter import ast

PG_WILDCARD = "%"
PG_SINGLECHAR = "_"
PG_ESCAPE = "\\"
PG_LIKE_SPECIALS = (PG_WILDCARD, PG_SINGLECHAR, PG_ESCAPE)


def _like_tokens(
    wildcard: Optional[str], singlechar: Optional[str], escapechar: Optional[str]
) -> "re.Pattern[str]":
    chars = {c for c in (wildcard, singlechar, escapechar) if c}
    chars.update(PG_LIKE_SPECIALS)
    alternatives = []
    if escapechar:
        alternatives.append(re.escape(escapechar) + ".")
    alternatives.append("[" + "".join(re.escape(c) for c in sorted(chars)) + "]")
    return re.compile("|".join(alternatives), re.DOTALL)


def _escape_sequences(
    wildcard: Optional[str], singlechar: Optional[str], escapechar: Optional[str]
) -> Dict[str, str]:
    if not escapechar:
        return {}
    chars = {c for c in (wildcard, singlechar, escapechar) if c}
    chars.update(PG_LIKE_SPECIALS)
    return {escapechar + c: c for c in chars}


def _convert(
    pattern: str,
    substitutions: Dict[str, str],
    wildcard: Optional[str],
    singlechar: Optional[str],
    escapechar: Optional[str],
) -> str:
    def _replace(match: re.Match) -> str:
        token = match.group()
        try:
            return substitutions[token]
        except KeyError:
            raise ValueError(f"'{token}' is not a valid escape sequence")

    return _like_tokens(wildcard, singlechar, escapechar).sub(_replace, pattern)


def strip_like_wildcards(
    pattern: str,
    wildcard: str = "%",
    singlechar: Optional[str] = ".",
    escapechar: Optional[str] = "\\",
) -> str:
    """Remove unescaped multi character wildcards from a LIKE pattern.

    The pattern stays in its own dialect: escape sequences and single
    character wildcards are kept.

    Args:
        pattern (str): The LIKE pattern.
        wildcard (str): The multi character wildcard of the pattern dialect.
        singlechar (str): The single character wildcard of the pattern dialect.
        escapechar (str): The escape character of the pattern dialect.

    Returns:
        str: The pattern without multi character wildcards.

    Raises:
        ValueError: If an invalid escape sequence is encountered.
    """
    substitutions = {c: c for c in PG_LIKE_SPECIALS}
    if singlechar:
        substitutions[singlechar] = singlechar
    if escapechar:
        substitutions[escapechar] = escapechar
    substitutions[wildcard] = ""
    substitutions.update(
        {seq: seq for seq in _escape_sequences(wildcard, singlechar, escapechar)}
    )
    return _convert(pattern, substitutions, wildcard, singlechar, escapechar)


def like_to_value(
    pattern: str,
    wildcard: str = "%",
    singlechar: Optional[str] = ".",
    escapechar: Optional[str] = "\\",
) -> str:
    """Turn a LIKE pattern into the plain value an exact match compares with.

    Multi character wildcards are dropped, escape sequences are resolved to
    the character they protect and single character wildcards are kept as
    that character.

    Raises:
        ValueError: If an invalid escape sequence is encountered.
    """
    substitutions = {c: c for c in PG_LIKE_SPECIALS}
    if singlechar:
        substitutions[singlechar] = singlechar
    if escapechar:
        substitutions[escapechar] = escapechar
    substitutions[wildcard] = ""
    substitutions.update(_escape_sequences(wildcard, singlechar, escapechar))
    return _convert(pattern, substitutions, wildcard, singlechar, escapechar)


def like_to_sql(
    pattern: str,
    wildcard: str = "%",
    singlechar: Optional[str] = ".",
    escapechar: Optional[str] = "\\",
) -> str:
    """Translate a LIKE pattern into PostgreSQL LIKE syntax.

    The dialect wildcards become `%` and `_`. Characters that are special to
    PostgreSQL but literal in the dialect, and escaped dialect characters, are
    escaped with a backslash.

    Raises:
        ValueError: If an invalid escape sequence is encountered.
    """
    substitutions = {c: PG_ESCAPE + c for c in PG_LIKE_SPECIALS}
    if escapechar:
        substitutions[escapechar] = _pg_literal(escapechar)
    if singlechar:
        substitutions[singlechar] = PG_SINGLECHAR
    substitutions[wildcard] = PG_WILDCARD
    substitutions.update(
        {
            seq: _pg_literal(c)
            for seq, c in _escape_sequences(wildcard, singlechar, escapechar).items()
        }
    )
    return _convert(pattern, substitutions, wildcard, singlechar, escapechar)


def _pg_literal(char: str) -> str:
    if char in PG_LIKE_SPECIALS:
        return PG_ESCAPE + char
    return char


def normalize_like(node: Any) -> Any:
    """Rewrite LIKE predicates of a filter AST into exact matches.

    Case-insensitive LIKE nodes become `Equal` (or `NotEqual` when negated)
    against the unescaped pattern without wildcards. Case-sensitive LIKE
    nodes keep their operator with the multi character wildcards removed.
    Other nodes are returned as is, with their logical children rewritten.
    """
    if isinstance(node, (ast.And, ast.Or)):
        return type(node)(normalize_like(node.lhs), normalize_like(node.rhs))
    if isinstance(node, ast.Not):
        return ast.Not(normalize_like(node.sub_node))
    if isinstance(node, ast.Like):
        if node.nocase:
            value = like_to_value(
                node.pattern, node.wildcard, node.singlechar, node.escapechar
            )
            if node.not_:
                return ast.NotEqual(node.lhs, value)
            return ast.Equal(node.lhs, value)
        pattern = strip_like_wildcards(
            node.pattern, node.wildcard, node.singlechar, node.escapechar
        )
        return replace(node, pattern=pattern)
    return node
