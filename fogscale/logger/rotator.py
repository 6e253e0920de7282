from fogscale.logger.formatter import DelimitedFormatter
from logging.handlers import RotatingFileHandler
from os import path

class LogFileRotator(RotatingFileHandler):
    """Rotating CSV file handler that keeps the header on every file it rolls over to."""

    def __init__(self, filename, message_format=None, datefmt=None, max_size=0, header=None, delimiter=",", mode="a", **kwargs):
        # Must be checked before the parent opens (and creates) the file.
        is_new = not path.exists(filename)
        super().__init__(filename, maxBytes=max_size, mode=mode, **kwargs)

        self.formatter = DelimitedFormatter(message_format, datefmt, delimiter)
        self._header = self.formatter.delimit_message(header) if header else None

        if self.stream and (mode == "w" or is_new) and self._header:
            self._write_header()

    def _write_header(self):
        self.stream.write(self._header + self.terminator)
        self.flush()

    def doRollover(self):
        """Perform rollover and prepend the CSV header to the new log file."""

        super().doRollover()

        if self._header and self.stream:
            self._write_header()
