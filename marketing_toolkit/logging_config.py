"""Structured logging for the generation pipeline.

The embedding application calls :func:`configure_logging` once at startup;
importing the package configures nothing. The pipeline renders JSON lines by
default, a console format when ``LOG_PRETTY`` is set, and takes its level from
``LOG_LEVEL``. When it installs the root handler, records emitted through the
stdlib ``logging`` module (aiohttp, tenacity) share the same renderer.

Every line logged while a generation call is in flight carries the call's
``request_id`` and ``flow`` (``ad_copy`` or ``trend_analysis``), bound through
:func:`bind_generation_context`. Modules call ``structlog.get_logger(__name__)``
and never reconfigure the library themselves.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

import structlog

__all__ = [
    "configure_logging",
    "bind_generation_context",
    "clear_generation_context",
    "get_logger",
]

_CONFIGURED_FLAG = "_marketing_toolkit_configured"
_TRUTHY = {"1", "true", "yes", "on"}


def _pretty_output() -> bool:
    return os.getenv("LOG_PRETTY", "0").strip().lower() in _TRUTHY


def _level_from_env() -> int:
    name = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _event_enrichers() -> List[Any]:
    """Processors run for both structlog and foreign stdlib events."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(force: bool = False) -> None:
    """Install the structlog pipeline, and a root stdlib handler when none exists.

    Handlers and the level the embedding application already put on the root
    logger are left alone; structlog events are then rendered to a string and
    handed to those handlers. ``force`` replaces the root handlers and is meant
    for scripts and tests that own the process.

    A no-op after the first call unless ``force`` is given.
    """
    if getattr(structlog, _CONFIGURED_FLAG, False) and not force:
        return

    renderer = (
        structlog.dev.ConsoleRenderer()
        if _pretty_output()
        else structlog.processors.JSONRenderer()
    )

    root = logging.getLogger()
    owns_root = force or not root.handlers
    if owns_root:
        handler = logging.StreamHandler()
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=_event_enrichers(),
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer,
                ],
            )
        )
        for existing in list(root.handlers):
            root.removeHandler(existing)
        root.addHandler(handler)
        root.setLevel(_level_from_env())
        final = structlog.stdlib.ProcessorFormatter.wrap_for_formatter
    else:
        final = renderer

    structlog.configure(
        processors=[structlog.stdlib.filter_by_level] + _event_enrichers() + [final],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    setattr(structlog, _CONFIGURED_FLAG, True)


def bind_generation_context(
    request_id: Optional[str] = None,
    flow: Optional[str] = None,
) -> None:
    """Bind the generation request id and flow name for subsequent logs.

    Only the keys given are updated; calling it again is safe.
    """
    fields: Dict[str, str] = {}
    if request_id:
        fields["request_id"] = request_id
    if flow:
        fields["flow"] = flow
    if fields:
        structlog.contextvars.bind_contextvars(**fields)


def clear_generation_context() -> None:
    """Drop the identifiers bound by :func:`bind_generation_context`."""
    structlog.contextvars.unbind_contextvars("request_id", "flow")


def get_logger(name: Optional[str] = None):
    """Return a structlog logger, configuring logging first if needed."""
    configure_logging()
    return structlog.get_logger(name) if name else structlog.get_logger()
