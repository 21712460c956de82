"""Syntax Locator.

Finds ``StateMachine(...)`` construction sites and extracts their literal
``config`` and ``commands`` structures.

Matches:
- StateMachine({...})
- fsm.StateMachine({...}) / a.b.StateMachine({...})
- StateMachine(config={...}, commands={...})

Sites whose argument, config or commands are not dict displays are skipped
silently (inapplicable, not an error).
"""

import ast
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from .scopes import FunctionScope
from .shapes import ShapeKind, literal_mapping, shape_of, terminal_name

logger = logging.getLogger(__name__)

RECOGNIZED_CONSTRUCTOR = "StateMachine"


@dataclass
class MachineSite:
    """One recognized construction site.

    scopes is ordered innermost first and is used to resolve factory names.
    """
    call: ast.Call
    config: ast.Dict
    commands: ast.Dict
    scopes: List[FunctionScope]


def is_state_machine_call(node) -> bool:
    """True for a call whose callee is StateMachine or *.StateMachine."""
    if not isinstance(node, ast.Call):
        return False
    if shape_of(node.func) not in (ShapeKind.NAME, ShapeKind.QUALIFIED_NAME):
        return False
    return terminal_name(node.func) == RECOGNIZED_CONSTRUCTOR


def _constructor_entries(call: ast.Call) -> Optional[Dict[str, ast.expr]]:
    """Entries of the sole literal argument, or of the keyword form."""
    if call.args:
        if len(call.args) != 1 or call.keywords:
            return None
        return literal_mapping(call.args[0])

    if not call.keywords or any(kw.arg is None for kw in call.keywords):
        return None
    return {kw.arg: kw.value for kw in call.keywords}


def extract_site_structures(call: ast.Call) -> Optional[Tuple[ast.Dict, ast.Dict]]:
    """Return (config, commands) dict displays, or None if inapplicable."""
    entries = _constructor_entries(call)
    if entries is None:
        return None

    config = entries.get("config")
    commands = entries.get("commands")
    if config is None or shape_of(config) is not ShapeKind.LITERAL_MAPPING:
        return None
    if commands is None or shape_of(commands) is not ShapeKind.LITERAL_MAPPING:
        return None
    return config, commands


class _SiteCollector(ast.NodeVisitor):
    """Single pass over a module, tracking enclosing scopes."""

    def __init__(self):
        # outermost first
        self._stack: List[FunctionScope] = []
        self.sites: List[MachineSite] = []

    def _visit_scope(self, node, scope: FunctionScope):
        self._stack.append(scope)
        self.generic_visit(node)
        self._stack.pop()

    def visit_Module(self, node):
        self._visit_scope(node, FunctionScope(node.body))

    def visit_FunctionDef(self, node):
        self._visit_scope(node, FunctionScope(node.body, args=node.args))

    def visit_AsyncFunctionDef(self, node):
        self._visit_scope(node, FunctionScope(node.body, args=node.args))

    def visit_Lambda(self, node):
        self._visit_scope(node, FunctionScope([], args=node.args))

    def visit_ClassDef(self, node):
        self._visit_scope(node, FunctionScope(node.body, is_class=True))

    def _current_scopes(self) -> List[FunctionScope]:
        scopes = []
        for depth, scope in enumerate(reversed(self._stack)):
            # class bodies are visible only to code directly inside them
            if scope.is_class and depth > 0:
                continue
            scopes.append(scope)
        return scopes

    def visit_Call(self, node):
        if is_state_machine_call(node):
            structures = extract_site_structures(node)
            if structures is None:
                logger.debug(
                    f"Skipping {RECOGNIZED_CONSTRUCTOR} at line {node.lineno}: "
                    f"config/commands are not literal structures"
                )
            else:
                config, commands = structures
                self.sites.append(MachineSite(
                    call=node,
                    config=config,
                    commands=commands,
                    scopes=self._current_scopes(),
                ))
        self.generic_visit(node)


def iter_machine_sites(tree: ast.AST) -> Iterator[MachineSite]:
    """Yield every applicable construction site in source order."""
    collector = _SiteCollector()
    collector.visit(tree)
    yield from collector.sites
