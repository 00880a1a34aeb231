#!/usr/bin/env python3
# =============================================================================
# scripts/run_guarded.py - Run a Script Under the Failure Interceptor
# =============================================================================
# Runs a Python script as __main__ with all failure hooks installed. Any
# uncaught exception, handled warning or fatal exit is logged, answered
# with a single response on stdout, and ends the process with status 1.
#
# Usage:
#   python scripts/run_guarded.py path/to/script.py [args...]
#
#   # Log to a file and show failure detail
#   FAILURE_LOG_FILE=/tmp/app.log EXPOSE_FAILURES=true \
#       python scripts/run_guarded.py path/to/script.py
# =============================================================================

import os
import runpy
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.bootstrap import create_interceptor

USAGE = "usage: run_guarded.py <script.py> [args...]"


def main(argv: list[str] | None = None) -> int:
    """Install the interceptor and run the target script."""
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        print(USAGE, file=sys.stderr)
        return 2

    script = os.path.abspath(argv[0])

    interceptor = create_interceptor()
    interceptor.catch_all()

    # The script sees itself as argv[0] and can import its siblings
    sys.argv = [script, *argv[1:]]
    sys.path.insert(0, os.path.dirname(script))

    runpy.run_path(script, run_name="__main__")
    return 0


if __name__ == "__main__":
    sys.exit(main())
