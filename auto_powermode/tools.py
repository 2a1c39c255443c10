import logging
from logging.handlers import SysLogHandler
import os
import sys

from auto_powermode.globals import SYSLOG_SOCKET


class ConditionalFormatter(logging.Formatter):
    """
    A formatter that applies different format strings based on record level.
    Shows file name and line number only for ERROR and CRITICAL levels.
    """

    def __init__(self) -> None:
        self.default_fmt = "%(asctime)s [%(levelname)s] [%(module)s] %(message)s"
        self.error_fmt = "%(asctime)s [%(levelname)s] [%(filename)s:%(lineno)d] %(message)s"

        super().__init__(fmt=self.default_fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record) -> str:
        original_fmt: str = self._style._fmt

        if record.levelno >= logging.ERROR:
            self._style._fmt = self.error_fmt
        else:
            self._style._fmt = self.default_fmt

        result: str = super().format(record)

        self._style._fmt = original_fmt

        return result


class SingleLineFormatter(logging.Formatter):
    """Folds tracebacks and multi-line messages into one syslog line."""

    def format(self, record) -> str:
        return " | ".join(line for line in super().format(record).splitlines() if line.strip())


def syslog_handler(tag: str) -> logging.Handler | None:
    """Single-line syslog records tagged with `tag`, or None without a syslog socket."""
    if not os.path.exists(SYSLOG_SOCKET):
        return None
    try:
        handler = SysLogHandler(address=SYSLOG_SOCKET, facility=SysLogHandler.LOG_USER)
    except OSError:
        return None
    handler.ident = f"{tag}: "
    handler.setFormatter(SingleLineFormatter("[%(levelname)s] %(message)s"))
    return handler


def setup_logger(tag: str, debug: bool = False) -> None:
    """Set up logging for one process.

    Console output goes to stderr; the same records are mirrored to syslog
    under `tag` when the local syslog socket is available.
    """
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(ConditionalFormatter())
    handlers: list[logging.Handler] = [stream_handler]

    syslog = syslog_handler(tag)
    if syslog is not None:
        handlers.append(syslog)

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        handlers=handlers,
        force=True,
    )
