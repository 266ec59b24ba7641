"""
Convenience entry point for running daytimeline as a module.

Usage: python -m daytimeline [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
