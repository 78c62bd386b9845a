# visionboard_imaging/utils/logging.py
import logging
import sys

import structlog

from visionboard_imaging.data.settings import settings
from visionboard_imaging.utils.serialization import orjson_dumps

# Third-party loggers that are only interesting at WARNING and above.
QUIET_LOGGERS = ("aiohttp.access", "httpx", "google_genai")

_SHARED_PROCESSORS: list[structlog.typing.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.dict_tracebacks,
]


def _renderer() -> structlog.typing.Processor:
    if sys.stderr.isatty():
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer(serializer=orjson_dumps)


def setup_logger() -> structlog.typing.FilteringBoundLogger:
    """
    Routes structlog and stdlib records (aiohttp, google-genai) through one
    handler on stdout, at `LOGGING_LEVEL`. Request ids bound with
    `structlog.contextvars` appear on every record emitted while handling a call.
    """
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(foreign_pre_chain=_SHARED_PROCESSORS, processor=_renderer())
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.logging_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return structlog.get_logger("visionboard_imaging.app")
