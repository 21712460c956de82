"""Coverage Classifier.

Compares declared targets with observed returned states for one transition:

  observed == 0              -> None (no static determination)
  observed == 1              -> ALWAYS_SAME_STATE
  1 < observed < declared    -> PARTIAL_UNION
  observed >= declared       -> None (cardinality treated as sufficient)

No subset check is made in the last case: observed ids outside the
declaration still pass.
"""

import ast
from typing import Optional, Sequence

from .types import Diagnostic, DiagnosticKind, Location, Severity


def location_of(node: ast.AST) -> Location:
    return Location(
        line=node.lineno,
        column=node.col_offset,
        end_line=getattr(node, "end_lineno", None),
        end_column=getattr(node, "end_col_offset", None),
    )


def classify_coverage(
    message_name: str,
    declared: Sequence[str],
    observed: Sequence[str],
    location: Location,
    state_name: str = "",
    path: Optional[str] = None,
    severity: Severity = Severity.ERROR,
) -> Optional[Diagnostic]:
    """Return a diagnostic for a coverage gap, or None.

    Args:
        message_name: Message triggering the transition
        declared: Declared target states (len >= 2)
        observed: Distinct state ids execute() can return
        location: Position of the execute thunk
        state_name: Source state owning the transition
        path: File the transition was found in
        severity: Severity attached to the diagnostic
    """
    if len(observed) == 0 or len(observed) >= len(declared):
        return None

    kind = (
        DiagnosticKind.ALWAYS_SAME_STATE
        if len(observed) == 1
        else DiagnosticKind.PARTIAL_UNION
    )

    return Diagnostic(
        kind=kind,
        message_name=message_name,
        state_name=state_name,
        declared_count=len(declared),
        declared_states=tuple(declared),
        observed_states=tuple(observed),
        location=location,
        path=path,
        severity=severity,
    )
