"""State Machine Coverage Types.

Data structures shared by the locator, extractor, scanner and classifier.

Diagnostic kinds:
  ALWAYS_SAME_STATE - execute() provably returns a single state
  PARTIAL_UNION     - execute() returns more than one, but fewer than declared
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


RULE_NAME = "state-machine-union-return"
RULE_DESCRIPTION = (
    "Ensure command factories can return all possible target states "
    "when multiple states are declared"
)

# state -> message -> ordered declared target states
TransitionTable = Dict[str, Dict[str, List[str]]]


class FsmCoverageError(Exception):
    """Base class for analyzer errors."""
    pass


class ConfigError(FsmCoverageError):
    """Raised when a settings file is missing, malformed or has invalid values."""
    pass


class DiagnosticKind(Enum):
    """Stable diagnostic tags exposed to the host."""
    ALWAYS_SAME_STATE = "ALWAYS_SAME_STATE"
    PARTIAL_UNION = "PARTIAL_UNION"


class Severity(Enum):
    """Reporting severity (host-level setting)."""
    ERROR = "error"
    WARNING = "warning"


MESSAGE_TEMPLATES = {
    DiagnosticKind.ALWAYS_SAME_STATE: (
        'The "{message}" message declares {count} possible target states [{states}], '
        'but your implementation always returns "{actual}". '
        'If only one state is possible, update the config to reflect this.'
    ),
    DiagnosticKind.PARTIAL_UNION: (
        'The "{message}" message can transition to {count} states [{states}], '
        'but execute() only ever returns "{actual}". '
        'Consider adding conditional logic to return different states based on the situation.'
    ),
}


@dataclass(frozen=True)
class Location:
    """Source position of the execute thunk (1-based line, 0-based column)."""
    line: int
    column: int
    end_line: Optional[int] = None
    end_column: Optional[int] = None


@dataclass(frozen=True)
class Diagnostic:
    """One coverage gap for a (state, message) transition.

    Invariants:
    - declared_count == len(declared_states) >= 2
    - 1 <= len(observed_states) < declared_count
    """
    kind: DiagnosticKind
    message_name: str
    state_name: str
    declared_count: int
    declared_states: Tuple[str, ...]
    observed_states: Tuple[str, ...]
    location: Location
    path: Optional[str] = None
    severity: Severity = field(default=Severity.ERROR)

    def __post_init__(self):
        """Validate diagnostic."""
        if self.declared_count != len(self.declared_states):
            raise ValueError(
                f"declared_count {self.declared_count} does not match "
                f"{len(self.declared_states)} declared states"
            )
        if not self.observed_states:
            raise ValueError("observed_states cannot be empty")
        if len(self.observed_states) >= self.declared_count:
            raise ValueError(
                f"{len(self.observed_states)} observed states cover all "
                f"{self.declared_count} declared states"
            )

    @property
    def message(self) -> str:
        """Human-readable message rendered from the kind's template."""
        return MESSAGE_TEMPLATES[self.kind].format(
            message=self.message_name,
            count=self.declared_count,
            states=", ".join(self.declared_states),
            actual=", ".join(self.observed_states),
        )

    def to_dict(self) -> dict:
        """JSON-serializable form used by the CLI."""
        return {
            "rule": RULE_NAME,
            "kind": self.kind.value,
            "severity": self.severity.value,
            "path": self.path,
            "line": self.location.line,
            "column": self.location.column,
            "state": self.state_name,
            "message_name": self.message_name,
            "declared_count": self.declared_count,
            "declared_states": list(self.declared_states),
            "observed_states": list(self.observed_states),
            "message": self.message,
        }
