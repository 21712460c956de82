"""Tests for the Coverage Classifier and Diagnostic rendering."""

import pytest

from fsm_coverage.classifier import classify_coverage
from fsm_coverage.types import Diagnostic, DiagnosticKind, Location, Severity


LOC = Location(line=12, column=27)


class TestClassifyCoverage:
    """Cardinality table: 0 / 1 / partial / sufficient."""

    def test_no_observed_states_suppressed(self):
        """Empty set means no determination, not no behavior."""
        assert classify_coverage("start", ["active", "idle"], [], LOC) is None

    def test_single_observed_state(self):
        d = classify_coverage("start", ["active", "idle"], ["active"], LOC, state_name="idle")

        assert d.kind is DiagnosticKind.ALWAYS_SAME_STATE
        assert d.message_name == "start"
        assert d.state_name == "idle"
        assert d.declared_count == 2
        assert d.declared_states == ("active", "idle")
        assert d.observed_states == ("active",)
        assert d.location == LOC

    def test_partial_union(self):
        d = classify_coverage("go", ["a", "b", "c"], ["a", "b"], LOC)

        assert d.kind is DiagnosticKind.PARTIAL_UNION
        assert d.declared_states == ("a", "b", "c")
        assert d.observed_states == ("a", "b")

    @pytest.mark.parametrize("observed", [
        ["a", "b"],
        ["b", "a", "c"],
        ["x", "y"],
    ])
    def test_sufficient_cardinality_suppressed(self, observed):
        """No subset check once observed count reaches declared count."""
        assert classify_coverage("go", ["a", "b"], observed, LOC) is None

    def test_duplicate_declared_targets_count(self):
        """Declared count includes duplicates."""
        d = classify_coverage("go", ["a", "a", "b"], ["a", "b"], LOC)
        assert d.kind is DiagnosticKind.PARTIAL_UNION
        assert d.declared_count == 3

    def test_severity_and_path_attached(self):
        d = classify_coverage(
            "go", ["a", "b"], ["a"], LOC, path="m.py", severity=Severity.WARNING
        )
        assert d.path == "m.py"
        assert d.severity is Severity.WARNING


class TestDiagnosticMessage:
    """Templated human-readable messages."""

    def test_always_same_state_message(self):
        d = classify_coverage("start", ["active", "idle"], ["active"], LOC)
        assert d.message == (
            'The "start" message declares 2 possible target states [active, idle], '
            'but your implementation always returns "active". '
            'If only one state is possible, update the config to reflect this.'
        )

    def test_partial_union_message(self):
        d = classify_coverage("go", ["a", "b", "c"], ["a", "b"], LOC)
        assert d.message.startswith(
            'The "go" message can transition to 3 states [a, b, c], '
            'but execute() only ever returns "a, b".'
        )

    def test_to_dict(self):
        d = classify_coverage("go", ["a", "b"], ["a"], LOC, state_name="idle", path="m.py")
        data = d.to_dict()

        assert data["rule"] == "state-machine-union-return"
        assert data["kind"] == "ALWAYS_SAME_STATE"
        assert data["severity"] == "error"
        assert data["line"] == 12
        assert data["column"] == 27
        assert data["declared_states"] == ["a", "b"]
        assert data["observed_states"] == ["a"]

    def test_invariants_enforced(self):
        with pytest.raises(ValueError):
            Diagnostic(
                kind=DiagnosticKind.PARTIAL_UNION,
                message_name="go",
                state_name="idle",
                declared_count=3,
                declared_states=("a", "b"),
                observed_states=("a",),
                location=LOC,
            )
        with pytest.raises(ValueError):
            Diagnostic(
                kind=DiagnosticKind.ALWAYS_SAME_STATE,
                message_name="go",
                state_name="idle",
                declared_count=2,
                declared_states=("a", "b"),
                observed_states=(),
                location=LOC,
            )

    def test_full_coverage_is_not_a_diagnostic(self):
        """Observed states may not reach the declared count."""
        with pytest.raises(ValueError):
            Diagnostic(
                kind=DiagnosticKind.PARTIAL_UNION,
                message_name="go",
                state_name="idle",
                declared_count=2,
                declared_states=("a", "b"),
                observed_states=("a", "b"),
                location=LOC,
            )
