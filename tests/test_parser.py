"""Tests for REPL input parsing."""

from todopro.repl.parser import parse_command


def test_empty_input():
    result = parse_command("   ")
    assert result.command == ""
    assert result.args == []
    assert result.flags == {}


def test_command_is_lowercased_and_quotes_group():
    result = parse_command('ADD "Write the docs" -p high -c Work')
    assert result.command == "add"
    assert result.args == ["Write the docs"]
    assert result.flags == {"priority": "high", "category": "Work"}


def test_boolean_flags_never_consume_values():
    result = parse_command("ls --json pending")
    assert result.args == ["pending"]
    assert result.flags == {"json": True}

    result = parse_command("rm 1,2 -y")
    assert result.args == ["1,2"]
    assert result.flags == {"yes": True}


def test_equals_form():
    result = parse_command("edit 3 --due=2024-03-01 --title=Renamed")
    assert result.args == ["3"]
    assert result.flags == {"due": "2024-03-01", "title": "Renamed"}


def test_value_flag_without_value_is_switch():
    result = parse_command("ls -s --json")
    assert result.flags == {"status": True, "json": True}
    assert result.flag("status", "all") == "all"

    result = parse_command("filter -p")
    assert result.flags == {"priority": True}


def test_negative_numbers_and_dash_are_positional():
    result = parse_command("week -1 -")
    assert result.args == ["-1", "-"]
    assert result.flags == {}


def test_unclosed_quote_falls_back_to_split():
    result = parse_command('add "unfinished title')
    assert result.command == "add"
    assert result.args == ['"unfinished', "title"]


def test_flag_helper_returns_value():
    result = parse_command("day --date 2024-03-05")
    assert result.flag("date") == "2024-03-05"
    assert result.flag("missing", "x") == "x"
    assert result.raw_input == "day --date 2024-03-05"
