import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Log:
    """Logging facade for the ledger.

    Output goes to stderr unless another stream is given, which keeps stdout
    free for the CLI's JSON.
    """

    _logger: logging.Logger = logging.getLogger("payslip_ledger")

    @classmethod
    def configure(cls, log_level: str, stream: TextIO | None = None) -> None:
        """Set the level; the first call also attaches the stream handler."""
        cls._logger.setLevel(log_level.upper())
        if cls._logger.handlers:
            return
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        cls._logger.addHandler(handler)

    @classmethod
    def debug(cls, message: str, **fields: object) -> None:
        cls._emit(logging.DEBUG, message, fields)

    @classmethod
    def info(cls, message: str, **fields: object) -> None:
        cls._emit(logging.INFO, message, fields)

    @classmethod
    def warning(cls, message: str, **fields: object) -> None:
        cls._emit(logging.WARNING, message, fields)

    @classmethod
    def error(cls, message: str, **fields: object) -> None:
        cls._emit(logging.ERROR, message, fields)

    @classmethod
    def _emit(cls, level: int, message: str, fields: dict[str, object]) -> None:
        # extra= keys become LogRecord attributes for structured handlers
        cls._logger.log(level, message, extra=fields)
