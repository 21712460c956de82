"""Config Extractor.

Builds a TransitionTable from the literal ``config`` structure:

    {"idle": {"on": {"start": ["active", "idle"]}}}
        -> {"idle": {"start": ["active", "idle"]}}

Only string-literal targets are kept; computed or referenced elements are
dropped silently. Pure: matches syntax shapes, never evaluates.
"""

import ast

from .shapes import ShapeKind, literal_mapping, shape_of, string_value
from .types import TransitionTable


def declared_targets(sequence) -> list:
    """String-literal elements of a list/tuple display, in order."""
    if shape_of(sequence) is not ShapeKind.LITERAL_SEQUENCE:
        return []
    targets = []
    for element in sequence.elts:
        value = string_value(element)
        if value is not None:
            targets.append(value)
    return targets


def extract_transition_table(config: ast.Dict) -> TransitionTable:
    """Parse a config dict display into state -> message -> targets."""
    table: TransitionTable = {}

    for state_name, state_config in (literal_mapping(config) or {}).items():
        state_entries = literal_mapping(state_config)
        if state_entries is None:
            continue

        on_entry = state_entries.get("on")
        messages = literal_mapping(on_entry) if on_entry is not None else None
        if messages is None:
            continue

        message_map = {}
        for message_name, sequence in messages.items():
            targets = declared_targets(sequence)
            if targets:
                message_map[message_name] = targets

        table[state_name] = message_map

    return table
