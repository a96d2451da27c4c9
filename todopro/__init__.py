"""
FILE: todopro/__init__.py
PURPOSE: Personal task manager with calendar, kanban and dashboard views
"""

__version__ = "0.1.0"
