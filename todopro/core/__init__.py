"""
FILE: todopro/core/__init__.py
PURPOSE: Domain layer - models, task store, persistence gateway and view derivations
"""
