#!/usr/bin/env python3
"""Measure test coverage of the sightline package.

Runs pytest under coverage.py, prints a per-module summary with missed
lines, and writes an HTML report to coverage_py/html.

Usage (from anywhere):
    python scripts/coverage_py.py
    python scripts/coverage_py.py --open    # open the HTML report afterwards
    python scripts/coverage_py.py -- -k visibility   # extra pytest args
"""

import argparse
import subprocess
import sys
import webbrowser
from pathlib import Path

REPO_DIR = Path(__file__).resolve().parent.parent
REPORT_DIR = REPO_DIR / "coverage_py"


def coverage(*args: str) -> None:
    """Invoke ``python -m coverage`` in the repo root; exit if it fails."""
    data = f"--data-file={REPORT_DIR / '.coverage'}"
    cmd = [sys.executable, "-m", "coverage", args[0], data, *args[1:]]
    code = subprocess.call(cmd, cwd=REPO_DIR)
    if code != 0:
        sys.exit(code)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--open", action="store_true", help="Open the HTML report"
    )
    parser.add_argument(
        "pytest_args", nargs="*", help="Arguments passed through to pytest"
    )
    args = parser.parse_args()

    REPORT_DIR.mkdir(exist_ok=True)
    html_dir = REPORT_DIR / "html"

    coverage("run", "--source=sightline", "-m", "pytest", *args.pytest_args)
    coverage("report", "--show-missing")
    coverage("html", f"--directory={html_dir}")
    print(f"HTML report written to {html_dir}")

    if args.open:
        webbrowser.open((html_dir / "index.html").as_uri())


if __name__ == "__main__":
    main()
