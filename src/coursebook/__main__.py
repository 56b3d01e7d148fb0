"""Module entry point for running with python -m coursebook."""

from coursebook.cli import run

if __name__ == "__main__":
    run()
