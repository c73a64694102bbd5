"""
utfx package entry point.

Allows running: python -m utfx [command] [args]
"""
import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())
