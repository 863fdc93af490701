#!/usr/bin/env python3
"""
SurrealDB Export entry point.

Usage:
    python -m surreal_export --auth root:root backup.db
"""

import sys

from surreal_export.libs.main_app import main

if __name__ == "__main__":
    sys.exit(main())
