"""Syntax Shapes.

Closed set of syntax shapes the analyzer consults. Every ast node maps to
exactly one ShapeKind; anything outside the set is UNRECOGNIZED and ignored
by all consumers.
"""

import ast
from enum import Enum
from typing import Dict, Optional


class ShapeKind(Enum):
    """Syntax shapes recognized by the analyzer."""
    NAME = "NAME"                                # foo
    QUALIFIED_NAME = "QUALIFIED_NAME"            # a.b.foo
    LITERAL_MAPPING = "LITERAL_MAPPING"          # {"k": v}
    LITERAL_SEQUENCE = "LITERAL_SEQUENCE"        # [a, b] / (a, b)
    STRING_LITERAL = "STRING_LITERAL"            # "text"
    EXPRESSION_FUNCTION = "EXPRESSION_FUNCTION"  # lambda: expr
    BLOCK_FUNCTION = "BLOCK_FUNCTION"            # def f(): ...
    RETURN = "RETURN"                            # return expr
    CONDITIONAL = "CONDITIONAL"                  # if / a if c else b
    MULTI_WAY_BRANCH = "MULTI_WAY_BRANCH"        # match
    BRANCH_CASE = "BRANCH_CASE"                  # case ...:
    STATEMENT_BLOCK = "STATEMENT_BLOCK"          # for / while / with / try / except
    UNRECOGNIZED = "UNRECOGNIZED"


_BLOCK_STATEMENTS = (
    ast.For,
    ast.AsyncFor,
    ast.While,
    ast.With,
    ast.AsyncWith,
    ast.Try,
    ast.ExceptHandler,
) + ((ast.TryStar,) if hasattr(ast, "TryStar") else ())


def shape_of(node) -> ShapeKind:
    """Classify an ast node into its ShapeKind."""
    if isinstance(node, ast.Name):
        return ShapeKind.NAME
    if isinstance(node, ast.Attribute):
        return ShapeKind.QUALIFIED_NAME
    if isinstance(node, ast.Dict):
        return ShapeKind.LITERAL_MAPPING
    if isinstance(node, (ast.List, ast.Tuple)):
        return ShapeKind.LITERAL_SEQUENCE
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return ShapeKind.STRING_LITERAL
    if isinstance(node, ast.Lambda):
        return ShapeKind.EXPRESSION_FUNCTION
    if isinstance(node, ast.FunctionDef):
        return ShapeKind.BLOCK_FUNCTION
    if isinstance(node, ast.Return):
        return ShapeKind.RETURN
    if isinstance(node, (ast.If, ast.IfExp)):
        return ShapeKind.CONDITIONAL
    if isinstance(node, ast.Match):
        return ShapeKind.MULTI_WAY_BRANCH
    if isinstance(node, ast.match_case):
        return ShapeKind.BRANCH_CASE
    if isinstance(node, _BLOCK_STATEMENTS):
        return ShapeKind.STATEMENT_BLOCK
    return ShapeKind.UNRECOGNIZED


def string_value(node) -> Optional[str]:
    """Return the text of a string literal, or None for any other shape."""
    if shape_of(node) is ShapeKind.STRING_LITERAL:
        return node.value
    return None


def literal_mapping(node) -> Optional[Dict[str, ast.expr]]:
    """Return the string-keyed entries of a dict display.

    Entries with non-string keys and ``**spread`` entries are dropped.
    Duplicate keys follow Python semantics: last value wins, first
    position is kept. Returns None when node is not a dict display.
    """
    if shape_of(node) is not ShapeKind.LITERAL_MAPPING:
        return None

    entries = {}
    for key, value in zip(node.keys, node.values):
        if key is None:
            continue
        name = string_value(key)
        if name is not None:
            entries[name] = value
    return entries


def terminal_name(node) -> Optional[str]:
    """Last segment of a bare or qualified name (``a.b.c`` -> ``c``)."""
    kind = shape_of(node)
    if kind is ShapeKind.NAME:
        return node.id
    if kind is ShapeKind.QUALIFIED_NAME:
        return node.attr
    return None
