"""State Machine Coverage Analyzer.

Runs Locator -> Config Extractor -> Implementation Scanner -> Coverage
Classifier over one file's syntax tree and returns its diagnostics.

Properties:
- Pure function of the tree (plus settings); nothing is cached between calls
- Deterministic: diagnostics follow source order
- Silent on anything it cannot determine statically
"""

import ast
import logging
from typing import List, Optional

from .classifier import classify_coverage, location_of
from .config_extractor import extract_transition_table
from .locator import MachineSite, iter_machine_sites
from .scanner import collect_returned_states, find_execute_thunk
from .settings import AnalyzerSettings
from .shapes import literal_mapping
from .types import Diagnostic

logger = logging.getLogger(__name__)

MIN_DECLARED_TARGETS = 2


def analyze_site(
    site: MachineSite,
    path: Optional[str] = None,
    settings: Optional[AnalyzerSettings] = None,
) -> List[Diagnostic]:
    """Check every multi-target transition of one construction site."""
    settings = settings or AnalyzerSettings()
    table = extract_transition_table(site.config)
    diagnostics = []

    for state_name, state_commands in literal_mapping(site.commands).items():
        message_map = table.get(state_name)
        factories = literal_mapping(state_commands)
        if message_map is None or factories is None:
            continue

        for message_name, factory in factories.items():
            declared = message_map.get(message_name)
            if not declared or len(declared) < MIN_DECLARED_TARGETS:
                continue

            thunk = find_execute_thunk(factory, site.scopes)
            if thunk is None:
                logger.debug(
                    f"{path}:{factory.lineno}: no execute thunk for "
                    f"{state_name}.{message_name}, skipping"
                )
                continue

            observed = collect_returned_states(thunk)
            diagnostic = classify_coverage(
                message_name,
                declared,
                observed,
                location_of(thunk),
                state_name=state_name,
                path=path,
                severity=settings.severity,
            )
            if diagnostic is not None:
                diagnostics.append(diagnostic)

    return diagnostics


def analyze_tree(
    tree: ast.AST,
    path: Optional[str] = None,
    settings: Optional[AnalyzerSettings] = None,
) -> List[Diagnostic]:
    """Analyze a parsed module."""
    settings = settings or AnalyzerSettings()
    if not settings.enabled:
        return []

    diagnostics = []
    for site in iter_machine_sites(tree):
        diagnostics.extend(analyze_site(site, path=path, settings=settings))

    logger.debug(f"{path}: {len(diagnostics)} coverage gap(s)")
    return diagnostics


def analyze_source(
    source: str,
    filename: str = "<unknown>",
    settings: Optional[AnalyzerSettings] = None,
) -> List[Diagnostic]:
    """Parse and analyze source text. SyntaxError propagates."""
    tree = ast.parse(source, filename=filename)
    return analyze_tree(tree, path=filename, settings=settings)


def analyze_file(path, settings: Optional[AnalyzerSettings] = None) -> List[Diagnostic]:
    """Read, parse and analyze one file. OSError/SyntaxError propagate."""
    with open(path, 'r', encoding='utf-8') as f:
        content = f.read()
    return analyze_source(content, filename=str(path), settings=settings)
