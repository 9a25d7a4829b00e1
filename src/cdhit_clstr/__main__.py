"""
Main entry point for cdhit-clstr.

This allows the package to be run as a module:
python -m cdhit_clstr
"""

from .cli.main import cli

if __name__ == '__main__':
    cli()
