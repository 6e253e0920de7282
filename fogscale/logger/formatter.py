from logging import Formatter

class DelimitedFormatter(Formatter):
    """Formats list-like log messages as delimited rows, for the decision CSV log."""

    def __init__(self, message_format=None, datefmt=None, delimiter=","):
        super().__init__(message_format, datefmt)
        self.delimiter = delimiter

    def quote(self, field):
        """Quotes a field holding the delimiter, a quote or a line break, CSV style."""

        text = "" if field is None else str(field)
        if any(char in text for char in (self.delimiter, '"', "\n", "\r")):
            return '"' + text.replace('"', '""') + '"'
        return text

    def delimit_message(self, msg):
        if isinstance(msg, (list, tuple)):
            return self.delimiter.join(self.quote(field) for field in msg)
        return str(msg)

    def format(self, record):
        record.msg = self.delimit_message(record.msg)
        return super().format(record)
