"""
Check StateMachine command factories for state coverage gaps

Usage:
    fsm-coverage src/ --fail-on-violation
    fsm-coverage app/machines.py --format json
    fsm-coverage src/ --config fsm_coverage.yaml --severity warning
"""

import argparse
import fnmatch
import json
import logging
import os
import sys
from typing import Iterator, List

from .analyzer import analyze_file
from .settings import AnalyzerSettings, load_settings, parse_severity
from .types import RULE_DESCRIPTION, RULE_NAME, ConfigError, Severity

logger = logging.getLogger(__name__)


def _matches(file_path: str, patterns: List[str]) -> bool:
    # Normalize path separators
    normalized = file_path.replace('\\', '/')
    name = os.path.basename(normalized)
    return any(
        fnmatch.fnmatch(normalized, p) or fnmatch.fnmatch(name, p)
        for p in patterns
    )


def iter_source_files(paths: List[str], settings: AnalyzerSettings) -> Iterator[str]:
    """Expand files and directories into the Python files to analyze.

    Files named explicitly are always analyzed; directory contents are
    filtered by include/exclude patterns.
    """
    for path in paths:
        if os.path.isfile(path):
            yield path
            continue
        if not os.path.isdir(path):
            logger.warning(f"Path does not exist: {path}")
            continue

        for root, dirs, files in os.walk(path):
            dirs.sort()
            for file in sorted(files):
                file_path = os.path.join(root, file)
                if not _matches(file_path, settings.include):
                    continue
                if _matches(file_path, settings.exclude):
                    continue
                yield file_path


def print_text_report(diagnostics, files_checked: int):
    if diagnostics:
        print("=" * 60)
        print("STATE MACHINE COVERAGE GAPS")
        print("=" * 60)
        for d in diagnostics:
            print(f"✗ {d.path}:{d.location.line}:{d.location.column + 1} "
                  f"[{d.kind.value}] {d.severity.value}")
            print(f"  {d.message}")
            print()
        print(f"Total coverage gaps: {len(diagnostics)} ({files_checked} files checked)")
    else:
        print(f"✓ No state machine coverage gaps detected ({files_checked} files checked)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fsm-coverage',
        description=f'{RULE_NAME}: {RULE_DESCRIPTION}'
    )
    parser.add_argument('paths', nargs='+', help='Files or directories to scan')
    parser.add_argument('--config', help='Path to settings file (default: ./fsm_coverage.yaml)')
    parser.add_argument('--severity', help='Override severity (error or warning)')
    parser.add_argument('--disable', action='store_true', help='Disable the check')
    parser.add_argument('--format', choices=['text', 'json'], default='text')
    parser.add_argument('--fail-on-violation', action='store_true',
                        help='Exit 1 on error-severity coverage gaps')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        settings = load_settings(args.config)
        if args.severity:
            settings.severity = parse_severity(args.severity)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    if args.disable:
        settings.enabled = False

    diagnostics = []
    files_checked = 0
    parse_failed = False

    for file_path in iter_source_files(args.paths, settings):
        try:
            diagnostics.extend(analyze_file(file_path, settings))
            files_checked += 1
        except (SyntaxError, UnicodeDecodeError, OSError) as e:
            print(f"ERROR: Could not parse {file_path}: {e}", file=sys.stderr)
            parse_failed = True

    if args.format == 'json':
        print(json.dumps([d.to_dict() for d in diagnostics], indent=2))
    else:
        print_text_report(diagnostics, files_checked)

    if parse_failed:
        return 2
    if args.fail_on_violation and any(d.severity is Severity.ERROR for d in diagnostics):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
