# themesmith/editor/__init__.py
"""The theme editor: observable theme, fields, preview page, client and session."""
from themesmith.editor.client import RenderClient
from themesmith.editor.observable import ObservableTheme, ThemeChange
from themesmith.editor.page import PreviewPage
from themesmith.editor.session import EditorState, ThemeEditor

__all__ = [
    "EditorState",
    "ObservableTheme",
    "PreviewPage",
    "RenderClient",
    "ThemeChange",
    "ThemeEditor",
]
