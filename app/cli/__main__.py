"""
Entry point for CLI module execution.
Allows running: python -m app.cli "task one" "task two"
"""
import sys

from app.cli.prioritize import main

if __name__ == '__main__':
    sys.exit(main())
