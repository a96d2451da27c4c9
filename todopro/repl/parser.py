"""
FILE: todopro/repl/parser.py
PURPOSE: Parse user input into commands and arguments for REPL
EXPORTS:
  - ParseResult (dataclass for parsed commands)
  - parse_command(input_str) -> ParseResult
  - FLAG_ALIASES, BOOLEAN_FLAGS
DEPENDENCIES:
  - shlex (for shell-like parsing with quotes)
  - dataclasses (for ParseResult)
  - typing (type hints)
NOTES:
  - Handles quoted strings: add "task with spaces"
  - Supports long flags (--status pending), --flag=value and the same short
    aliases as the CLI (-p high, -s pending, -c Work, -q text)
  - Boolean flags (--json, --yes, ...) never consume the next token
  - Case-insensitive command names
"""

import shlex
from dataclasses import dataclass, field
from typing import Dict, List, Union


# Short flag -> long flag name
FLAG_ALIASES = {
    "a": "all",
    "c": "category",
    "d": "description",
    "e": "expand",
    "f": "filter",
    "l": "labels",
    "m": "content",
    "o": "output",
    "p": "priority",
    "q": "search",
    "s": "status",
    "t": "title",
    "y": "yes",
}

# Flags that are switches, not key/value pairs
BOOLEAN_FLAGS = {"all", "json", "pin", "raw", "yes"}


@dataclass
class ParseResult:
    """
    Result of parsing a REPL command.

    Attributes:
        command: The command name (e.g., "add", "ls", "done")
        args: Positional arguments (e.g., ["task title", "123"])
        flags: Flag arguments as dict (e.g., {"status": "pending", "json": True})
        raw_input: Original input string
    """
    command: str
    args: List[str] = field(default_factory=list)
    flags: Dict[str, Union[str, bool]] = field(default_factory=dict)
    raw_input: str = ""

    def flag(self, name: str, default=None):
        """String value of a flag, or default when absent or given as a bare switch."""
        value = self.flags.get(name)
        if value is None or value is True:
            return default
        return value


def _flag_name(token: str):
    """Long flag name for a flag token, or None when the token is positional."""
    if token.startswith("--") and len(token) > 2:
        return token[2:]
    # "-p" style aliases; "-1" or "-" stay positional
    if len(token) == 2 and token[0] == "-" and token[1].isalpha():
        return FLAG_ALIASES.get(token[1], token[1])
    return None


def parse_command(input_str: str) -> ParseResult:
    """
    Parse REPL input into command, args, and flags.

    Examples:
        >>> parse_command('add "Write docs" -p high')
        ParseResult(command="add", args=["Write docs"], flags={"priority": "high"})

        >>> parse_command("ls --json pending")
        ParseResult(command="ls", args=["pending"], flags={"json": True})

        >>> parse_command("edit 3 --due=2024-03-01")
        ParseResult(command="edit", args=["3"], flags={"due": "2024-03-01"})

    Args:
        input_str: Raw user input from REPL prompt

    Returns:
        ParseResult with command, args, and flags extracted

    Notes:
        - Command is always the first token (case-insensitive)
        - A value flag at the end of the line (or followed by another flag)
          is recorded as True
        - Quoted strings are treated as single args
        - Empty input returns command="" with no args/flags
    """
    input_str = input_str.strip()
    if not input_str:
        return ParseResult(command="", raw_input=input_str)

    try:
        tokens = shlex.split(input_str)
    except ValueError:
        # Unclosed quote: fall back to whitespace split
        tokens = input_str.split()

    if not tokens:
        return ParseResult(command="", raw_input=input_str)

    command = tokens[0].lower()
    args: List[str] = []
    flags: Dict[str, Union[str, bool]] = {}
    i = 1

    while i < len(tokens):
        token = tokens[i]

        if token.startswith("--") and "=" in token:
            name, _, value = token[2:].partition("=")
            flags[name] = value
            i += 1
            continue

        name = _flag_name(token)
        if name is None:
            args.append(token)
            i += 1
            continue

        if name in BOOLEAN_FLAGS:
            flags[name] = True
            i += 1
        elif i + 1 < len(tokens) and _flag_name(tokens[i + 1]) is None:
            flags[name] = tokens[i + 1]
            i += 2
        else:
            flags[name] = True
            i += 1

    return ParseResult(command=command, args=args, flags=flags, raw_input=input_str)
