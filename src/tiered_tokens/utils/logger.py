"""
Logger — Настройка loguru для движка эмиссии

Один глобальный logger: stderr по умолчанию или файл с ротацией
(LogConfig.sink). Модули пишут через `from loguru import logger`.
"""

import sys
from typing import Optional

from loguru import logger

from tiered_tokens.config import LogConfig

_LOGGER_CONFIGURED = False


def configure_logging(config: Optional[LogConfig] = None, force: bool = False) -> None:
    """
    Настройка глобального loguru logger, выполняется один раз.

    force=True переустанавливает sinks (например, после смены уровня).
    """
    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED and not force:
        return

    config = config or LogConfig()
    logger.remove()

    if config.sink is None:
        logger.add(
            sys.stderr,
            level=config.level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message}",
            serialize=config.serialize,
            backtrace=True,
            diagnose=False,
        )
    else:
        logger.add(
            sink=config.sink,
            rotation=config.rotation,
            retention=config.retention,
            level=config.level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message}",
            serialize=config.serialize,
            enqueue=True,  # многопоточная запись
            backtrace=True,
            diagnose=False,
        )

    _LOGGER_CONFIGURED = True
    logger.debug("tiered_tokens logger configured: level={}", config.level)
