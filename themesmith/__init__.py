# themesmith/__init__.py
"""
themesmith: a live theme editor for Tailwind CSS.

A small FastAPI service regenerates Tailwind CSS for a page's markup and a
theme fragment; the editor package keeps an observable theme, one field per
value, and a preview page whose stylesheet follows every edit.
"""

__version__ = "1.0.0"
