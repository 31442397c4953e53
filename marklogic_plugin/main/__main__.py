"""
Main module entry point.

Allows running the CLI as: python -m marklogic_plugin.main
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
