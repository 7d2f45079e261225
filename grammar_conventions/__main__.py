"""Allows ``python -m grammar_conventions``."""

from grammar_conventions.main import main

if __name__ == "__main__":
    raise SystemExit(main())
