"""State machine coverage analyzer package.

Provides:
- Locator for StateMachine({...}) construction sites
- Transition table extraction from the literal config
- Execute-thunk scanner for statically returned state ids
- Coverage classifier (ALWAYS_SAME_STATE, PARTIAL_UNION)
"""

from .types import (
    RULE_NAME,
    ConfigError,
    Diagnostic,
    DiagnosticKind,
    FsmCoverageError,
    Location,
    Severity,
    TransitionTable,
)
from .analyzer import analyze_file, analyze_source, analyze_tree
from .settings import AnalyzerSettings, load_settings

__all__ = [
    "RULE_NAME",
    "ConfigError",
    "Diagnostic",
    "DiagnosticKind",
    "FsmCoverageError",
    "Location",
    "Severity",
    "TransitionTable",
    "analyze_file",
    "analyze_source",
    "analyze_tree",
    "AnalyzerSettings",
    "load_settings",
]
