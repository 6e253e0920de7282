import logging

from fogscale.constants import DEFAULT_FMT, FOGS_CSV, FOGS_FILE, FOGS_STDOUT
from fogscale.logger.formatter import DelimitedFormatter
from fogscale.logger.rotator import LogFileRotator
from pathlib import Path

def get_base_logger(name=None, level=FOGS_STDOUT, handlers=None, formatter=None):
    """Create and configure a logger that outputs messages to the console or specified handlers."""

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # A logger fetched twice by name keeps the handlers it already has.
    if logger.handlers and not handlers:
        return logger

    # If no handlers are provided, create a default StreamHandler (console output).
    if not handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(formatter or logging.Formatter(fmt=DEFAULT_FMT))
        handlers = [handler]

    # Ensure handlers is always a list, even if a single handler is passed.
    elif not isinstance(handlers, (list, tuple)):
        handlers = [handlers]

    # Explicit handlers replace the ones a previous call attached.
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    for handler in handlers:
        logger.addHandler(handler)

    return logger

def get_file_logger(name, dirname="logs", mode="a", level=FOGS_FILE, **kwargs):
    """Create a logger that writes plain text lines to `<dirname>/<name>.log`."""

    filename = Path(dirname) / f"{name}.log"
    filename.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(filename, mode=mode)
    handler.setFormatter(logging.Formatter(fmt=DEFAULT_FMT))

    return get_base_logger(name, level=level, handlers=handler, **kwargs)

def get_csv_logger(name, dirname="logs", header=None, mode="a", delimiter=",", datefmt="%Y/%m/%d %H:%M:%S", max_size=0, level=FOGS_CSV, **kwargs):
    """Create a CSV-based logger that writes rows to `<dirname>/<name>.csv`."""

    # Only the row itself is written, the timestamp is part of the row.
    message_format = "%(message)s"

    filename = Path(dirname) / f"{name}.csv"
    filename.parent.mkdir(parents=True, exist_ok=True)

    handler = LogFileRotator(
        filename, message_format=message_format, datefmt=datefmt, max_size=max_size,
        header=header, delimiter=delimiter, mode=mode
    )

    return get_base_logger(name, level=level, handlers=handler, **kwargs)
