"""Main entry point when executing resilient as a package.

This allows running the package using python -m resilient.
"""

from resilient.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
