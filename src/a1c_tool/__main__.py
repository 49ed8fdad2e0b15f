"""Punto de entrada: python -m a1c_tool."""

from __future__ import annotations

from a1c_tool.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
