"""Structured logging via structlog.

Configures structlog once at CLI startup. Modules keep logging through
``logging.getLogger(__name__)``; the stdlib bridge routes those records to
the same output stream.

Renderer selection:
  debug=True  — `ConsoleRenderer` with colours for local runs.
  debug=False — `JSONRenderer` so CI log collectors can parse each line.

ContextVar injection:
  `bundle_name` is bound while a bundle is being published, so every log
  line written during that publish carries the bundle it belongs to even
  when several bundles upload concurrently.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

import structlog

_bundle_name_var: ContextVar[str] = ContextVar("bundle_name", default="")


def get_bundle_name() -> str:
    """Return the bundle currently being published, or empty string."""
    return _bundle_name_var.get()


def bind_bundle_name(name: str) -> None:
    """Bind a bundle name to the current task's logging context.

    Each asyncio task runs in a copy of the parent context, so binding
    inside a task never leaks into sibling tasks.
    """
    _bundle_name_var.set(name)


def _inject_context_vars(
    logger: logging.Logger,
    method: str,
    event_dict: dict,
) -> dict:
    """Structlog processor: inject bundle_name from its ContextVar."""
    bundle_name = get_bundle_name()
    if bundle_name:
        event_dict["bundle_name"] = bundle_name
    return event_dict


def configure_structlog(debug: bool = False) -> None:
    """Configure structlog for the process lifetime.

    Calling multiple times is safe — structlog is idempotent.
    """
    shared_processors: list = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _inject_context_vars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if debug:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Bridge stdlib logging through the same processors so module loggers
    # (and httpx) also carry bundle_name and render identically.
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[structlog.stdlib.add_logger_name] + shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(logging.DEBUG if debug else logging.INFO)
