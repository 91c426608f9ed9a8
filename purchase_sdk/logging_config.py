# purchase_sdk/logging_config.py
import logging
import sys
from typing import Optional, Union

# Имя базового логгера для всего SDK; модули пишут в дочерние purchase_sdk.<module>
SDK_LOGGER_NAME = "purchase_sdk"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_sdk_logging(
    level: Optional[Union[int, str]] = None,
    log_format: str = DEFAULT_LOG_FORMAT,
) -> logging.Logger:
    """
    Вешает на логгер purchase_sdk один обработчик в stdout.
    Уровень по умолчанию берется из настроек (LOGGING_LEVEL).
    Повторный вызов ничего не меняет.
    """
    logger = logging.getLogger(SDK_LOGGER_NAME)

    # Смотрим только на собственные обработчики: у root они почти всегда есть
    if logger.handlers:
        logger.debug(f"Logger '{SDK_LOGGER_NAME}' already has handlers. Skipping setup.")
        return logger

    if level is None:
        from purchase_sdk.config import settings
        level = settings.LOGGING_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(log_format))
    logger.addHandler(handler)

    logger.info(f"SDK logging configured for '{SDK_LOGGER_NAME}' at level {logging.getLevelName(level)}")
    return logger
