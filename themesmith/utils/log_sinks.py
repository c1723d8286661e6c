# themesmith/utils/log_sinks.py
"""
Custom logging components for themesmith.

A render request can fan out across the route, the pipeline and the
subprocess runner. The render id context variable lets every logger in that
call stack tag its records with the request they belong to, without the id
being passed down as an argument.
"""
import contextvars
import logging
from typing import Optional

render_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "render_id", default=None
)


class RenderIdFilter(logging.Filter):
    """
    A logging filter that injects the current render_id from the contextvar
    into the log record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Adds the render_id to the log record if it exists in the context.

        :param record: The log record being processed.
        :type record: logging.LogRecord
        :return: Always returns True to allow the record to be processed.
        :rtype: bool
        """
        record.render_id = render_id_context.get()
        return True
