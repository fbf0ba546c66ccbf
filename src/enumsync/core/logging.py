"""structlog setup for enumsync.

Every CLI invocation gets a run id that is stamped on each event, so a log
file shared by several runs can be split per run. Events are routed through
stdlib logging: one handler per configured output, each with its own level
and renderer.

    configure_logging(level="DEBUG")            # console on stderr
    configure_logging(config=config.logging)    # outputs from config.yaml
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from enumsync.config.models import LoggingConfig, LogOutputConfig

_run_id: ContextVar[str | None] = ContextVar("enumsync_run_id", default=None)

_CONSOLE_DESTINATIONS = ("stderr", "stdout")


def set_run_id(run_id: str | None = None) -> str:
    """Bind ``run_id`` (or a fresh 12-char hex id) to the current context."""
    rid = run_id or uuid4().hex[:12]
    _run_id.set(rid)
    return rid


def get_run_id() -> str | None:
    return _run_id.get()


def clear_run_id() -> None:
    _run_id.set(None)


def _stamp_run_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    rid = _run_id.get()
    if rid is not None:
        event_dict["run_id"] = rid
    return event_dict


def _level(name: str | None, fallback: int = logging.INFO) -> int:
    if not name:
        return fallback
    return logging.getLevelNamesMapping().get(name.upper(), fallback)


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _stamp_run_id,  # type: ignore[list-item]
    ]


def _handler_for(
    output: LogOutputConfig,
    pre_chain: list[structlog.types.Processor],
) -> logging.Handler:
    # Console handlers go quiet while a rich progress bar owns the terminal
    from enumsync.core.progress import ConsoleSuppressingFilter

    handler: logging.Handler
    if output.destination in _CONSOLE_DESTINATIONS:
        stream = sys.stdout if output.destination == "stdout" else sys.stderr
        handler = logging.StreamHandler(stream)
        handler.addFilter(ConsoleSuppressingFilter())
        colors = stream.isatty()
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        colors = False

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors, pad_event_to=0, pad_level=False)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Install structlog and the root handlers.

    Args:
        config: Outputs and levels from the project config. When given,
                ``json_format`` and ``level`` are ignored.
        json_format: Render the single stderr output as JSON.
        level: Level of the single stderr output.
    """
    from enumsync.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level(config.level)
    pre_chain = _pre_chain()
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    root.setLevel(root_level)

    for output in config.outputs:
        handler = _handler_for(output, pre_chain)
        handler.setLevel(_level(output.level, root_level))
        root.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """A bound logger; ``name`` is recorded as the ``logger`` key."""
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
