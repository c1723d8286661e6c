# themesmith/utils/logger.py
"""
Structured logging for the rendering service and the editor.

All records go through one JSON handler on the root logger. Records are
written to stderr, so the CSS that `themesmith render` prints on stdout
stays clean. Each record carries the id of the render request it belongs
to (see `themesmith.utils.log_sinks`).
"""
import logging
import os
import sys
from typing import IO, Any, MutableMapping, Optional

from pydantic import ValidationError
from pythonjsonlogger import jsonlogger

from themesmith.utils.log_sinks import RenderIdFilter

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(render_id)s %(message)s"

_handler: Optional[logging.Handler] = None


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that keeps caller-supplied fields apart from LogRecord attributes.

    `logger.info("Rendered.", extra={"bytes": 42})` ends up as
    `record.extra_data == {"bytes": 42}`, which the JSON formatter emits as
    a nested object.
    """

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        fields = kwargs.pop("extra", None)
        if fields is not None:
            kwargs["extra"] = {"extra_data": fields}
        return msg, kwargs


def _level_from_settings() -> str:
    # Settings are imported here, not at module level, because they log nothing
    # themselves but are imported by modules that do.
    from themesmith.schemas.settings import get_settings

    try:
        return get_settings().log_level.upper()
    except ValidationError:
        return os.getenv("THEMESMITH_LOG_LEVEL", "info").upper()


def configure_logging(level: Optional[str] = None, stream: Optional[IO[str]] = None) -> logging.Handler:
    """Installs the JSON handler on the root logger, replacing any previous handlers.

    :param level: Level name; defaults to `THEMESMITH_LOG_LEVEL`.
    :param stream: Output stream; defaults to stderr.
    :return: The installed handler.
    """
    global _handler

    level_name = (level or _level_from_settings()).upper()
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(jsonlogger.JsonFormatter(LOG_FORMAT))
    handler.addFilter(RenderIdFilter())
    root_logger.addHandler(handler)
    _handler = handler

    root_logger.debug(f"Logging configured at level {level_name}.")
    return handler


def setup_logger(name: str) -> StructuredLoggerAdapter:
    """Returns a structured logger for `name`, configuring the root logger on first use.

    :param name: The name of the logger, typically `__name__`.
    :type name: str
    :rtype: StructuredLoggerAdapter
    """
    if _handler is None:
        configure_logging()
    return StructuredLoggerAdapter(logging.getLogger(name), {})
