"""
Package entry point.

Allows running the application via:

    python -m classbook

This simply forwards execution to classbook.cli.main().
"""

from classbook.cli import main

if __name__ == "__main__":
    main()
