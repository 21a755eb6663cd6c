"""
Structured logging for layerweave.

Events are structlog key/value records routed through the stdlib root
logger, so the scheduler, the region synthesizer and third-party libraries
share one set of handlers. ``layer_context`` tags every event emitted while
a region is being computed with its global layer, part and region name.

Usage::

    from layerweave.core.logging import configure_logging, get_logger

    configure_logging(level="DEBUG")
    logger = get_logger(__name__)
    logger.info("global_layers_scheduled", layers=42, policy="by_height")
"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

import structlog

# Applied to every event before it reaches the renderer.
_EVENT_PROCESSORS: List[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _renderer(json_output: bool) -> structlog.types.Processor:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def _handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    return handlers


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """
    Route structlog events through the root logger.

    Replaces any handlers already on the root logger. The CLI calls this
    once per invocation.

    Args:
        level: Level name; unknown names fall back to INFO.
        json_output: One JSON object per line instead of console lines.
        log_file: Also write every event to this file.
    """
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=_handlers(log_file),
        force=True,
    )

    structlog.configure(
        processors=[
            *_EVENT_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(json_output),
        ],
    )
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Module logger; pass ``__name__``."""
    return structlog.get_logger(name)


@contextmanager
def layer_context(**context: Any) -> Iterator[None]:
    """
    Bind ``context`` to every event logged inside the block.

    Keys bound by an enclosing block are restored on exit.

    Example::

        with layer_context(global_layer=3, part_id="A", region="infill"):
            sector.compute(3)
    """
    with structlog.contextvars.bound_contextvars(**context):
        yield
