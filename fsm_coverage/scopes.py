"""Function Scopes.

Resolves a bare name to a ``def`` in the same file so that statement-bodied
factories and execute thunks can be located. Only used to find code, never
to resolve returned values.

A name resolves iff the nearest scope that binds it binds it exactly once
and that binding is a ``def`` statement. Parameters are bindings, so a
parameter shadowing a ``def`` is unresolved. Anything else is unresolved.
"""

import ast
from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

from .shapes import ShapeKind, shape_of


_NESTED_SCOPES = (
    ast.FunctionDef,
    ast.AsyncFunctionDef,
    ast.ClassDef,
    ast.Lambda,
    ast.ListComp,
    ast.SetComp,
    ast.DictComp,
    ast.GeneratorExp,
)


def parameter_names(args: ast.arguments) -> List[str]:
    """Every name bound by a parameter list."""
    params = args.posonlyargs + args.args + args.kwonlyargs
    for extra in (args.vararg, args.kwarg):
        if extra is not None:
            params.append(extra)
    return [p.arg for p in params]


class FunctionScope:
    """Bindings made by one function's parameters and body (or a class body).

    Class bodies are visible only to code directly inside them.
    """

    def __init__(
        self,
        body: Sequence[ast.stmt],
        args: Optional[ast.arguments] = None,
        is_class: bool = False,
    ):
        self.is_class = is_class
        self._counts: Counter = Counter()
        self._defs: Dict[str, ast.FunctionDef] = {}
        if args is not None:
            for name in parameter_names(args):
                self._counts[name] += 1
        for stmt in body:
            self._collect(stmt)

    def _collect(self, node):
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            self._counts[node.name] += 1
            if shape_of(node) is ShapeKind.BLOCK_FUNCTION:
                self._defs[node.name] = node
            # evaluated in this scope, not the new one
            outer = list(node.decorator_list)
            if isinstance(node, ast.ClassDef):
                outer += node.bases + [kw.value for kw in node.keywords]
            else:
                outer += node.args.defaults + [d for d in node.args.kw_defaults if d is not None]
            for child in outer:
                self._collect(child)
            return
        if isinstance(node, _NESTED_SCOPES):
            return
        if isinstance(node, ast.Name) and isinstance(node.ctx, (ast.Store, ast.Del)):
            self._counts[node.id] += 1
        elif isinstance(node, (ast.Import, ast.ImportFrom)):
            for alias in node.names:
                bound = alias.asname or alias.name.split(".")[0]
                self._counts[bound] += 1
        elif isinstance(node, ast.ExceptHandler) and node.name:
            self._counts[node.name] += 1
        elif isinstance(node, (ast.MatchAs, ast.MatchStar)) and node.name:
            self._counts[node.name] += 1
        elif isinstance(node, ast.MatchMapping) and node.rest:
            self._counts[node.rest] += 1
        elif isinstance(node, (ast.Global, ast.Nonlocal)):
            # declared elsewhere; never resolvable here
            for name in node.names:
                self._counts[name] += 2
        for child in ast.iter_child_nodes(node):
            self._collect(child)

    def binds(self, name: str) -> bool:
        return self._counts[name] > 0

    def function(self, name: str) -> Optional[ast.FunctionDef]:
        """The def bound to name, or None if bound otherwise or more than once."""
        if self._counts[name] != 1:
            return None
        return self._defs.get(name)


def locate_function(node, scopes: List[FunctionScope]) -> Tuple[Optional[ast.AST], List[FunctionScope]]:
    """Resolve node to a function and the scope chain it was defined in.

    A lambda or def is defined in ``scopes`` itself; a name resolves to a
    def defined in the binding scope and everything outside it. scopes is
    ordered innermost first.
    """
    kind = shape_of(node)
    if kind in (ShapeKind.EXPRESSION_FUNCTION, ShapeKind.BLOCK_FUNCTION):
        return node, scopes
    if kind is not ShapeKind.NAME:
        return None, []
    for depth, scope in enumerate(scopes):
        if scope.binds(node.id):
            function = scope.function(node.id)
            if function is None:
                return None, []
            return function, scopes[depth:]
    return None, []


def resolve_function(node, scopes: List[FunctionScope]):
    """Return node itself if function-like, else the def a bare name refers to."""
    return locate_function(node, scopes)[0]


def inner_scopes(function, defined_in: List[FunctionScope]) -> List[FunctionScope]:
    """Scopes visible from inside function's body, innermost first."""
    own = FunctionScope(
        function.body if shape_of(function) is ShapeKind.BLOCK_FUNCTION else [],
        args=function.args,
    )
    return [own] + [scope for scope in defined_in if not scope.is_class]
