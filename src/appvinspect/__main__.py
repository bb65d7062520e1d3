#!/usr/bin/env python3
"""Entry point for running appvinspect as a module.

This allows the package to be executed as:
    python -m appvinspect [arguments]
"""

import sys

from appvinspect.cli import main

if __name__ == "__main__":
    sys.exit(main())
