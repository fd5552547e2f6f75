"""
Logging com loguru e correlation ID por chamada de tool.
"""

import contextvars
import sys
import uuid
from typing import Optional

from loguru import logger

_correlation_id: contextvars.ContextVar[str] = contextvars.ContextVar(
    'correlation_id',
    default='no-cid'
)


def get_correlation_id() -> str:
    """Retorna o correlation ID atual."""
    return _correlation_id.get()


def set_new_correlation_id() -> str:
    """Gera e define um novo correlation ID."""
    new_id = str(uuid.uuid4())[:8]  # 8 chars é suficiente
    _correlation_id.set(new_id)
    return new_id


def _inject_correlation_id(record) -> None:
    record["extra"].setdefault("correlation_id", get_correlation_id())


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configura os sinks do loguru.

    Args:
        level: Nível mínimo de log
        log_file: Caminho de arquivo de log com rotação (opcional)
    """
    # Remove default logger
    logger.remove()
    logger.configure(patcher=_inject_correlation_id)

    # stderr: stdout é reservado ao transporte stdio do MCP
    logger.add(
        sys.stderr,
        level=level,
        format="<level>{level: <8}</level> | [{extra[correlation_id]}] <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - {message}",
        colorize=True
    )

    if log_file:
        logger.add(
            log_file,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | [{extra[correlation_id]}] {name}:{function}:{line} - {message}",
            rotation="10 MB",
            retention="7 days",
            compression="gz",
            enqueue=True
        )
