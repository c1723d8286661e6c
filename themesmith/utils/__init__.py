# themesmith/utils/__init__.py
"""
Helper modules shared by the rendering service and the editor: logging,
the HTTP client, and theme loading.
"""
