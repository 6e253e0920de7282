import logging

from fogscale.constants import FOGS_CSV, FOGS_FILE, FOGS_STDOUT
from fogscale.utils.logger import get_base_logger, get_csv_logger, get_file_logger

# Register custom log levels with logging.
logging.addLevelName(FOGS_STDOUT, "FOGS_STDOUT")
logging.addLevelName(FOGS_FILE, "FOGS_FILE")
logging.addLevelName(FOGS_CSV, "FOGS_CSV")

class ScaleLogger:
    """
    Centralized logging for fogscale, supporting console, file, and CSV logs.
    The file and CSV sinks are only created when a log directory is given.
    """

    def __init__(self, name=None, dirname=None, csv_header=None, level=FOGS_STDOUT):
        super().__init__()

        self._std_log = get_base_logger(f"std_{name}", level)
        self._file_log = None
        self._csv_log = None

        if dirname:
            self._file_log = get_file_logger(f"file_{name}", dirname, level=level)
            if csv_header:
                self._csv_log = get_csv_logger(f"csv_{name}", dirname, header=csv_header, level=level)

    @property
    def loggers(self):
        return [logger for logger in (self._std_log, self._file_log, self._csv_log) if logger is not None]

    def setLevel(self, level):
        for logger in self.loggers:
            logger.setLevel(level)

    def _log(self, logger, level, message, *args, **kwargs):
        if logger is not None and logger.isEnabledFor(level):
            logger._log(level, message, args, **kwargs)

    def std_log(self, message, *args, **kwargs):
        self._log(self._std_log, FOGS_STDOUT, message, *args, **kwargs)
        self._log(self._file_log, FOGS_FILE, message, *args, **kwargs)

    def file_log(self, message, *args, **kwargs):
        self._log(self._file_log, FOGS_FILE, message, *args, **kwargs)

    def csv_log(self, row, **kwargs):
        self._log(self._csv_log, FOGS_CSV, row, **kwargs)

    def warning(self, message, *args, **kwargs):
        """Warnings reach every text sink regardless of the configured custom level."""

        self._log(self._std_log, logging.WARNING, message, *args, **kwargs)
        self._log(self._file_log, logging.WARNING, message, *args, **kwargs)
