# themesmith/exceptions.py
"""
Defines custom exception classes for themesmith.

Using custom exceptions allows for precise error handling and a clear
distinction between the failure modes of a render cycle: a malformed theme,
a failing CSS pipeline, an unreachable rendering service, or a rejected field
value in the editor.
"""
from typing import Optional


class ThemesmithError(Exception):
    """Base exception class for all custom errors in themesmith."""

    pass


class ConfigurationError(ThemesmithError):
    """Raised when settings or a theme file cannot be loaded or validated."""

    pass


class ThemeValidationError(ThemesmithError, ValueError):
    """Raised when a theme fragment has a shape the pipeline cannot accept.

    This is detected before the CSS pipeline runs, so the caller gets a
    client error instead of a pipeline crash. Inherits from `ValueError` so
    that plain validation code can catch it.
    """

    pass


class PipelineError(ThemesmithError):
    """Raised when the CSS generation pipeline fails.

    This covers a missing Tailwind binary, a non-zero exit of the CLI (for
    example on an invalid theme value), or output that cannot be decoded.
    """

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ):
        """Initializes the PipelineError with the CLI exit status and stderr."""
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class RenderRequestError(ThemesmithError):
    """Raised by the editor's render client when a render round-trip fails.

    Either the service could not be reached (``status_code`` is None) or it
    answered with a non-success status.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class FieldValueError(ThemesmithError, ValueError):
    """Raised when an editor field rejects a user-supplied value."""

    pass


class EditorStateError(ThemesmithError):
    """Raised when the editor is used outside the state it requires, e.g. without a running event loop."""

    pass
