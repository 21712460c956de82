"""Tests for transition table extraction from literal config structures."""

import ast

import pytest

from fsm_coverage.config_extractor import declared_targets, extract_transition_table


def parse_expr(source: str):
    return ast.parse(source, mode="eval").body


class TestDeclaredTargets:
    """Only string literals survive, in order."""

    def test_keeps_order_and_duplicates(self):
        """Duplicates and order are preserved."""
        assert declared_targets(parse_expr('["b", "a", "b"]')) == ["b", "a", "b"]

    def test_tuple_display_accepted(self):
        assert declared_targets(parse_expr('("a", "b")')) == ["a", "b"]

    def test_non_literal_elements_dropped(self):
        """Names, calls, spreads and non-string constants are skipped."""
        node = parse_expr('[NEXT, "idle", pick(), *others, 3, None, f"x{y}"]')
        assert declared_targets(node) == ["idle"]

    def test_non_sequence_yields_nothing(self):
        assert declared_targets(parse_expr('TARGETS')) == []
        assert declared_targets(parse_expr('"idle"')) == []


class TestExtractTransitionTable:
    """Config literal -> state -> message -> targets."""

    def test_basic_table(self):
        config = parse_expr('''{
            "idle": {"on": {"start": ["active", "idle"], "reset": ["idle"]}},
            "active": {"on": {"stop": ["idle"]}, "entry": log_entry},
        }''')

        assert extract_transition_table(config) == {
            "idle": {"start": ["active", "idle"], "reset": ["idle"]},
            "active": {"stop": ["idle"]},
        }

    def test_message_with_no_literal_targets_omitted(self):
        """Messages ending with zero literal targets are left out."""
        config = parse_expr('{"idle": {"on": {"go": [NEXT], "stop": ["idle"]}}}')
        assert extract_transition_table(config) == {"idle": {"stop": ["idle"]}}

    def test_single_literal_beside_computed_element(self):
        """One literal plus one computed element leaves a single target."""
        config = parse_expr('{"idle": {"on": {"go": [compute(), "active"]}}}')
        assert extract_transition_table(config) == {"idle": {"go": ["active"]}}

    @pytest.mark.parametrize("state_value", [
        '{"entry": handler}',
        '{"on": MESSAGES}',
        'IDLE_CONFIG',
    ])
    def test_states_without_literal_on_skipped(self, state_value):
        config = parse_expr('{"idle": %s}' % state_value)
        assert extract_transition_table(config) == {}

    def test_non_string_keys_and_spreads_ignored(self):
        config = parse_expr('''{
            **BASE,
            State.IDLE: {"on": {"go": ["a", "b"]}},
            "ready": {"on": {**EXTRA, "go": ["a", "b"]}},
        }''')
        assert extract_transition_table(config) == {"ready": {"go": ["a", "b"]}}

    def test_duplicate_keys_last_wins(self):
        """Duplicate keys follow Python dict semantics."""
        config = parse_expr('{"idle": {"on": {"go": ["a"], "go": ["a", "b"]}}}')
        assert extract_transition_table(config) == {"idle": {"go": ["a", "b"]}}
