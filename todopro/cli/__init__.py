"""
FILE: todopro/cli/__init__.py
PURPOSE: One-shot Typer CLI
"""
