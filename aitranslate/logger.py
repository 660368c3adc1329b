import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Current log mode ('off', 'info' or 'debug') and optional log file
_log_mode = 'info'
_log_file: Optional[Path] = None


def _level_for_mode(log_mode: str) -> int:
    if log_mode == 'debug':
        return logging.DEBUG
    if log_mode == 'off':
        # Higher than CRITICAL disables everything
        return logging.CRITICAL + 1
    return logging.INFO


def _configure(logger: logging.Logger) -> None:
    """Bring a logger created by get_logger in line with the current log mode."""
    target_level = _level_for_mode(_log_mode)
    logger.setLevel(target_level)
    log_format = logging.Formatter(LOG_FORMAT)

    has_console_handler = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in logger.handlers
    )
    if not has_console_handler:
        c_handler = logging.StreamHandler()
        c_handler.setFormatter(log_format)
        logger.addHandler(c_handler)

    file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
    wanted_file = str(_log_file.resolve()) if _log_file and _log_mode != 'off' else None
    for handler in file_handlers:
        if handler.baseFilename != wanted_file:
            handler.close()
            logger.removeHandler(handler)
    if wanted_file and not any(h.baseFilename == wanted_file for h in logger.handlers
                               if isinstance(h, logging.FileHandler)):
        _log_file.parent.mkdir(parents=True, exist_ok=True)
        f_handler = logging.FileHandler(_log_file, encoding='utf-8')
        f_handler.setLevel(logging.DEBUG)
        f_handler.setFormatter(log_format)
        logger.addHandler(f_handler)

    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(target_level)


def set_log_mode(log_mode: str, log_file: Optional[str] = None) -> None:
    """Switch the log mode and update every logger created by get_logger."""
    global _log_mode, _log_file
    _log_mode = log_mode if log_mode in ('off', 'info', 'debug') else 'info'
    _log_file = Path(log_file) if log_file else None

    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        if not logger_name.startswith('aitranslate'):
            continue
        logger = logging.getLogger(logger_name)
        if logger.handlers:
            _configure(logger)


def get_log_mode() -> str:
    return _log_mode


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    _configure(logger)
    return logger
