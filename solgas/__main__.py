"""
solgas/__main__.py
==================

``python -m solgas <command> [options]`` — see :mod:`solgas.cli`.
"""

from solgas.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
