#!/usr/bin/env python3
"""
Test runner for Braindrop.

Runs the pytest suite, or a subset of it by area.

Usage:
    python run_tests.py                      # Whole suite
    python run_tests.py store,query          # Selected areas
    python run_tests.py --list               # Show areas
"""

import argparse
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).parent

# area -> (test module, what it covers)
AREAS = {
    "models": ("tests/test_models.py", "idea records, tags, timestamps, decoding"),
    "storage": ("tests/test_storage.py", "JSON codec, file and memory backends"),
    "store": ("tests/test_idea_store.py", "mutations, rollback, concurrency"),
    "query": ("tests/test_query.py", "filter, search, sort, tags, stats"),
    "web": ("tests/test_web_app.py", "JSON API routes and error statuses"),
    "cli": ("tests/test_system_cli_behavior.py", "commands, output, exit codes"),
    "config": ("tests/test_system_config_validation.py", "env settings, factories, logging"),
    "scenarios": ("tests/test_system_scenarios.py", "capture, restart, failure recovery"),
}


def print_areas() -> None:
    print("Test areas:")
    for name, (path, covers) in AREAS.items():
        print(f"  {name:10} {covers}  ({path})")


def build_command(areas, verbose: bool) -> list:
    cmd = [sys.executable, "-m", "pytest"]
    if areas:
        cmd.extend(AREAS[name][0] for name in areas)
    else:
        cmd.append("tests/")
    cmd.append("-v" if verbose else "--tb=short")
    return cmd


def main() -> int:
    parser = argparse.ArgumentParser(description="Run Braindrop tests")
    parser.add_argument("areas", nargs="?", default="", help="Comma-separated areas (default: all)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose pytest output")
    parser.add_argument("--list", "-l", action="store_true", help="List test areas")
    args = parser.parse_args()

    if args.list:
        print_areas()
        return 0

    areas = [a.strip() for a in args.areas.split(",") if a.strip()]
    unknown = [a for a in areas if a not in AREAS]
    if unknown:
        print(f"Unknown area(s): {', '.join(unknown)}")
        print_areas()
        return 2

    print("=" * 60)
    print(f"BRAINDROP TESTS: {', '.join(areas) if areas else 'all'}")
    print("=" * 60)
    return subprocess.run(build_command(areas, args.verbose), cwd=ROOT).returncode


if __name__ == "__main__":
    sys.exit(main())
