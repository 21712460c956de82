"""Implementation Scanner.

For one (state, message) command factory, locates the ``execute`` thunk and
collects the state ids it can visibly return.

Recognized factory shapes:
- lambda ctx: {"execute": ..., "undo": ...}
- def factory(ctx): ... return {"execute": ..., "undo": ...}
- a bare name bound once to such a def in this file

Returned ids are taken only from dict displays whose "id" entry is a string
literal. Names, calls and assignments are never followed, and nested defs
are not entered: unknown shapes contribute nothing. The scanner never raises
for any input shape.
"""

import ast
import logging
from typing import Dict, List, Optional

from .scopes import FunctionScope, inner_scopes, locate_function, resolve_function
from .shapes import ShapeKind, literal_mapping, shape_of, string_value

logger = logging.getLogger(__name__)


def _factory_structure(factory) -> Optional[ast.Dict]:
    """The dict display returned by a factory (implicit or first explicit return)."""
    kind = shape_of(factory)

    if kind is ShapeKind.EXPRESSION_FUNCTION:
        if shape_of(factory.body) is ShapeKind.LITERAL_MAPPING:
            return factory.body
        return None

    if kind is ShapeKind.BLOCK_FUNCTION:
        for stmt in factory.body:
            if shape_of(stmt) is ShapeKind.RETURN and stmt.value is not None:
                if shape_of(stmt.value) is ShapeKind.LITERAL_MAPPING:
                    return stmt.value
    return None


def find_execute_thunk(factory, scopes: Optional[List[FunctionScope]] = None):
    """Return the lambda/def bound to "execute" in the factory's result, or None."""
    factory, defined_in = locate_function(factory, scopes or [])
    if factory is None:
        return None

    structure = _factory_structure(factory)
    if structure is None:
        return None

    execute = literal_mapping(structure).get("execute")
    if execute is None:
        return None

    # names in the factory resolve where the factory is defined, not at the site
    return resolve_function(execute, inner_scopes(factory, defined_in))


def _returned_state_ids(value, found: Dict[str, None]):
    """Record the literal "id" of a return value; both branches of a ternary count."""
    kind = shape_of(value)
    if kind is ShapeKind.CONDITIONAL:
        _returned_state_ids(value.body, found)
        _returned_state_ids(value.orelse, found)
    elif kind is ShapeKind.LITERAL_MAPPING:
        state_id = string_value(literal_mapping(value).get("id"))
        if state_id is not None:
            found.setdefault(state_id, None)


def collect_returned_states(thunk) -> List[str]:
    """Distinct state ids the execute thunk can return, in first-seen order.

    Depth-first walk with an explicit stack. The visited set is keyed by
    node identity and lives only for this call.
    """
    found: Dict[str, None] = {}
    visited = set()

    kind = shape_of(thunk)
    if kind is ShapeKind.EXPRESSION_FUNCTION:
        stack = [thunk]
    elif kind is ShapeKind.BLOCK_FUNCTION:
        stack = list(reversed(thunk.body))
    else:
        return []

    while stack:
        node = stack.pop()
        if id(node) in visited:
            continue
        visited.add(id(node))

        kind = shape_of(node)
        children = []

        if kind is ShapeKind.EXPRESSION_FUNCTION:
            _returned_state_ids(node.body, found)
            children = [node.body]
        elif kind is ShapeKind.RETURN:
            if node.value is not None:
                _returned_state_ids(node.value, found)
                children = [node.value]
        elif kind is ShapeKind.CONDITIONAL:
            if isinstance(node, ast.If):
                children = node.body + node.orelse
            else:
                children = [node.body, node.orelse]
        elif kind is ShapeKind.MULTI_WAY_BRANCH:
            children = node.cases
        elif kind is ShapeKind.BRANCH_CASE:
            children = node.body
        elif kind is ShapeKind.STATEMENT_BLOCK:
            for field_name in ("body", "handlers", "orelse", "finalbody"):
                children.extend(getattr(node, field_name, []))
        # BLOCK_FUNCTION: nested closures are invoked elsewhere, not entered.
        # Everything else is unrecognized and contributes nothing.

        stack.extend(reversed(children))

    return list(found)
