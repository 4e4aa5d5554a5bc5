import logging
import sys

LOGGER_NAME = "timetable_planner"


def init_logger(name: str = LOGGER_NAME, debug: bool = False) -> logging.Logger:
    """
    Initialize a logger with configurable verbosity.

    Parameters
    ----------
    name : str
        Logger name
    debug : bool
        If True, set log level to DEBUG. Otherwise, set to INFO.

    Returns
    -------
    logging.Logger
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("[%(levelname)s] %(asctime)s | %(message)s", "%H:%M:%S")
    )
    logger.addHandler(handler)
    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get an existing logger instance, or a child of the planner logger."""
    return logging.getLogger(name)
