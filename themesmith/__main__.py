# themesmith/__main__.py
"""
Allows the CLI to be started with `python -m themesmith`.
"""
from themesmith.cli import app

if __name__ == "__main__":
    app()
