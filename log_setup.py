import logging

LOGGER_NAME = "levite"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_file: str, level: str = "WARNING") -> logging.Logger:
    """Send log records to ``log_file``; curses owns the terminal, so no console handler."""
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    for handler in list(logger.handlers):
        if getattr(handler, "_levite", False):
            logger.removeHandler(handler)
            handler.close()

    try:
        f_handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        f_handler = logging.NullHandler()
    f_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    f_handler._levite = True
    logger.addHandler(f_handler)

    return logging.getLogger(LOGGER_NAME)
