"""
Entry point for running lambdabased as a module: python -m lambdabased
"""

from .cli import app

if __name__ == "__main__":
    app()
