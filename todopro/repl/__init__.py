"""
FILE: todopro/repl/__init__.py
PURPOSE: REPL package for interactive task management
EXPORTS:
  - main() (from repl.main)
DEPENDENCIES:
  - prompt_toolkit (REPL interface)
  - rich (formatted output)
  - todopro.core.store (session task store)
NOTES:
  - Entry point for interactive mode
  - One task store lives for the whole session, so edits made offline
    stay visible until exit
"""

from .main import main

__all__ = ["main"]
