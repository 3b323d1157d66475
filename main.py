#!/usr/bin/env python3
"""
RDFormat Validator - Validate and fix Reviewdog Diagnostic Format JSON.

Usage:
    python main.py [file.json] [--fix] [--fix-level basic|aggressive] [--format text|json]

Examples:
    python main.py diagnostics.json
    cat diagnostics.json | python main.py --format json
    python main.py diagnostics.json --fix -o fixed.json
"""

import sys

from rdformat_validator.cli import main


if __name__ == "__main__":
    sys.exit(main())
