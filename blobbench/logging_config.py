"""
Настройка логирования для blobbench.

Результаты бенчмарка печатаются в stdout; диагностика идет через logging
в stderr, чтобы не смешиваться с отчетом.
"""
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER = "blobbench"


def get_log_level(default: str = "WARNING") -> str:
    """Уровень из переменной окружения BLOBBENCH_LOG_LEVEL"""
    return os.getenv("BLOBBENCH_LOG_LEVEL", default).upper()


def setup_logging(
    level: Union[int, str, None] = None,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Настройка корневого логгера blobbench.

    Args:
        level: уровень логирования (по умолчанию из окружения, иначе WARNING).
        log_file: необязательный файл для логов.
        format_string: необязательный формат сообщений.

    Returns:
        Настроенный логгер.
    """
    if level is None:
        level = get_log_level()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    if format_string is None:
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    formatter = logging.Formatter(format_string)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Логгер модуля внутри иерархии blobbench"""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
