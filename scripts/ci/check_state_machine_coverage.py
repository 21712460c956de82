#!/usr/bin/env python3
"""
Verify StateMachine command factories can return every declared target state

Usage:
    python3 scripts/ci/check_state_machine_coverage.py src/ --fail-on-violation
"""

import sys

from fsm_coverage.cli import main

if __name__ == "__main__":
    sys.exit(main())
