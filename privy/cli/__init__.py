"""
cli — command-line interface for privy.

Entry points
────────────
  python -m privy   (via privy/__main__.py)
  privy             (via pyproject.toml [project.scripts])

Subcommands: members | resolve
"""

from privy.cli.main import build_parser, cmd_members, cmd_resolve, main

__all__ = ["build_parser", "cmd_members", "cmd_resolve", "main"]
