"""
Entry point for running the time limit CLI as a module.

Usage:
    python -m post_limit [args]
"""
from post_limit.cli import main

if __name__ == "__main__":
    main()
