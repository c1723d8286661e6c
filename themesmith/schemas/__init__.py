# themesmith/schemas/__init__.py
"""Pydantic models for settings, themes and render requests."""
