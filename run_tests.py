#!/usr/bin/env python3
"""
Run all tests for the pycqlsh package.

This script discovers and runs all tests in the project using pytest.
"""
import sys
import os
import argparse


def run_tests(verbose=False, coverage=False, specific_test=None):
    """Run all tests using pytest."""
    current_dir = os.path.dirname(os.path.abspath(__file__))
    if current_dir not in sys.path:
        sys.path.insert(0, current_dir)

    print("Verifying imports...")
    try:
        import pycqlsh.cli.main  # noqa: F401
        import pycqlsh.engines.duckdb_engine  # noqa: F401
    except ImportError as e:
        print(f"Import verification failed: {e}")
        print("Install the package first: pip install -e '.[test]'")
        return 1

    import pytest
    args = [os.path.join(current_dir, 'tests')] if not specific_test else [specific_test]
    if verbose:
        args.append('-v')
    if coverage:
        args.extend(['--cov=pycqlsh', '--cov-report=term', '--cov-report=html'])
    print("Running tests with pytest args:", ' '.join(args))
    return pytest.main(args)


def main():
    """Parse arguments and run tests."""
    parser = argparse.ArgumentParser(description="Run pycqlsh package tests")
    parser.add_argument("-v", "--verbose", action="store_true", help="Increase verbosity")
    parser.add_argument("--coverage", action="store_true", help="Generate test coverage report")
    parser.add_argument("test", nargs="?", help="Specific test file or directory to run")
    args = parser.parse_args()
    return run_tests(verbose=args.verbose, coverage=args.coverage, specific_test=args.test)


if __name__ == "__main__":
    sys.exit(main())
