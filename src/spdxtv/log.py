"""Logging for spdxtv: console, file and JSON output.

Every logger returned by :func:`getLogger` accepts an optional ``meta``
keyword holding the :class:`spdxtv.model.Meta` of the document element a
message is about. It is rendered as the ``spdx_line`` record attribute,
which JSON logs always carry.
"""

from __future__ import annotations
from dataclasses import dataclass

import json
import logging
import os
import re
import sys
import time
from typing import TYPE_CHECKING, ClassVar

from colorama import Fore, Style
from tqdm import tqdm

from spdxtv.config import ConfigSection

if TYPE_CHECKING:
    from typing import Any, Iterator, Mapping, Optional, Sequence, TypeVar
    from argparse import ArgumentParser, _ArgumentGroup, Namespace
    from spdxtv.model import Meta

    T = TypeVar("T")


@dataclass
class LogConfig(ConfigSection):
    title: ClassVar[str] = "log"

    pretty: bool = True
    stream_fmt: str = "%(levelname)-8s %(message)s"
    file_fmt: str = "%(asctime)s: %(name)-24s: %(levelname)-8s %(message)s"


log_config = LogConfig.load()

# Colors and progress bars are only shown on a terminal
pretty_cli = log_config.pretty if sys.stdout.isatty() else False

# Prefix of console lines, set by --console-logs
console_logs: Optional[str] = None


class JSONFormatter(logging.Formatter):
    """Format records as one JSON object per line.

    Empty attributes are left out of the object.
    """

    FIELDS = ("asctime", "levelname", "name", "message", "module", "exc_text")
    SPDX_FIELDS = ("spdx_line",)

    def __init__(
        self,
        date_fmt: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ):
        """Initialize the formatter.

        :param date_fmt: strftime format of asctime
        :param context: constant entries merged into every object
        """
        super().__init__(fmt="%(asctime)s", datefmt=date_fmt)
        self.context = dict(context or {})

    def format(self, record: logging.LogRecord) -> str:
        # Computes record.message, record.asctime and record.exc_text
        super().format(record)

        entries = {
            name: getattr(record, name, None)
            for name in self.FIELDS + self.SPDX_FIELDS
        }
        entries.update(self.context)
        return json.dumps({name: value for name, value in entries.items() if value})


class SPDXLoggerAdapter(logging.LoggerAdapter):
    """Logger accepting the location of a document element."""

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        # Keep the caller's extra mapping untouched
        return msg, kwargs

    def log(
        self,
        level: int,
        msg: Any,
        *args: Any,
        meta: Optional[Meta] = None,
        **kwargs: Any,
    ) -> None:
        """Log msg, recording the document lines it relates to.

        :param level: logging level
        :param msg: message, %-formatted with args
        :param meta: lines of the document the message is about
        :param kwargs: passed to logging.Logger.log
        """
        kwargs.setdefault("extra", {})["spdx_line"] = "" if meta is None else str(meta)
        super().log(level, msg, *args, **kwargs)

    def debug(
        self, msg: Any, *args: Any, meta: Optional[Meta] = None, **kwargs: Any
    ) -> None:
        self.log(logging.DEBUG, msg, *args, meta=meta, **kwargs)

    def info(
        self, msg: Any, *args: Any, meta: Optional[Meta] = None, **kwargs: Any
    ) -> None:
        self.log(logging.INFO, msg, *args, meta=meta, **kwargs)

    def warning(
        self, msg: Any, *args: Any, meta: Optional[Meta] = None, **kwargs: Any
    ) -> None:
        self.log(logging.WARNING, msg, *args, meta=meta, **kwargs)

    def error(
        self, msg: Any, *args: Any, meta: Optional[Meta] = None, **kwargs: Any
    ) -> None:
        self.log(logging.ERROR, msg, *args, meta=meta, **kwargs)


def progress_bar(items: Iterator[T] | Sequence[T], **kwargs: Any) -> Iterator[T]:
    """Iterate over items, showing a progress bar on pretty terminals.

    :param items: the items to iterate over
    :param kwargs: passed to tqdm
    """
    return tqdm(items, disable=not pretty_cli, file=sys.stderr, **kwargs)


class TqdmHandler(logging.StreamHandler):  # all: no cover
    """Colored console handler that does not break progress bars."""

    LEVEL_COLORS = (
        (re.compile(r"^(DEBUG)"), Fore.CYAN),
        (re.compile(r"^(INFO)"), Style.DIM),
        (re.compile(r"^(WARNING)"), Fore.YELLOW),
        (re.compile(r"^(ERROR)"), Fore.RED),
        (re.compile(r"^(CRITICAL)"), Fore.RED + Style.BRIGHT),
    )

    def emit(self, record: logging.LogRecord) -> None:
        text = self.format(record)

        # Align continuation lines of multiline messages
        header = len(text.split("\n")[0]) - len(record.message)
        text = text.replace("\n", "\n_" + " " * (header - 1))

        for level_re, color in self.LEVEL_COLORS:
            text = level_re.sub(color + r"\1" + Fore.RESET + Style.RESET_ALL, text)
        tqdm.write(text, file=sys.stderr)


_silenced: set[str] = set()


def getLogger(name: Optional[str] = None, prefix: str = "spdxtv") -> SPDXLoggerAdapter:
    """Return the spdxtv logger called name.

    The prefix logger gets a NullHandler so that libraries using spdxtv
    without activating logging stay quiet.

    :param name: logger name below prefix, None for the prefix logger itself
    :param prefix: top-level logger name
    """
    if prefix not in _silenced:
        logging.getLogger(prefix).addHandler(logging.NullHandler())
        _silenced.add(prefix)
    return SPDXLoggerAdapter(
        logging.getLogger(prefix if name is None else f"{prefix}.{name}"), {}
    )


def add_log_handlers(
    level: int,
    log_format: str,
    datefmt: Optional[str] = None,
    filename: Optional[str] = None,
    json_format: bool = False,
) -> None:
    """Attach a console or file handler to the root logger, timestamps in UTC.

    :param level: level of the new handler
    :param log_format: format string, ignored for JSON output
    :param datefmt: date/time format
    :param filename: log to this file instead of the console
    :param json_format: use the JSONFormatter
    """
    handler: logging.Handler
    if filename is not None:
        handler = logging.FileHandler(filename)
    elif pretty_cli:  # all: no cover
        handler = TqdmHandler()
    else:
        handler = logging.StreamHandler()

    fmt: logging.Formatter
    if json_format:
        fmt = JSONFormatter(datefmt, {"context": console_logs})
    else:
        fmt = logging.Formatter(log_format, datefmt)
    fmt.converter = time.gmtime  # type: ignore

    handler.setFormatter(fmt)
    handler.setLevel(level)
    logging.getLogger("").addHandler(handler)


def add_logging_argument_group(
    argument_parser: ArgumentParser, default_level: int = logging.WARNING,
) -> _ArgumentGroup:
    """Add the logging options to argument_parser.

    The parsed options are consumed by :func:`activate_with_args`.

    :param argument_parser: the parser to extend
    :param default_level: console level when neither -v nor --loglevel is given
    """
    group = argument_parser.add_argument_group(title="logging arguments")
    group.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="make the log output to the console more verbose",
    )
    group.add_argument(
        "--log-file",
        metavar="FILE",
        default=None,
        help="store all the logs into the specified file",
    )
    group.add_argument(
        "--loglevel",
        default=default_level,
        help="set the console log level",
        choices={
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL,
        },
    )
    group.add_argument(
        "--nocolor",
        default=False,
        action="store_true",
        help="disable color and progress bars",
    )
    group.add_argument(
        "--json-logs",
        default="json-logs" in os.environ.get("SPDXTV_ENABLE_FEATURE", "").split(","),
        action="store_true",
        help="enable JSON formatted logs. They can be activated as well by"
        " setting the env var SPDXTV_ENABLE_FEATURE=json-logs.",
    )
    group.add_argument(
        "--console-logs",
        metavar="LINE_PREFIX",
        help="disable color, progress bars, and prefix console lines"
        " with the given string.",
    )
    return group


def activate_with_args(args: Namespace, default_level: int = logging.WARNING) -> None:
    """Activate logging from the options of :func:`add_logging_argument_group`.

    :param args: the parsed command line
    :param default_level: level lowered by 10 for each -v
    """
    global console_logs
    global pretty_cli

    if args.verbose > 0:
        level = default_level - 10 * args.verbose
    else:
        level = args.loglevel

    if args.console_logs:
        console_logs = args.console_logs
        pretty_cli = False
    if args.nocolor:
        pretty_cli = False

    activate(level=level, filename=args.log_file, json_format=args.json_logs)


def activate(
    stream_format: str = log_config.stream_fmt,
    file_format: str = log_config.file_fmt,
    datefmt: Optional[str] = None,
    level: int = logging.INFO,
    filename: Optional[str] = None,
    json_format: bool = False,
) -> None:
    """Send spdxtv logs to the console and optionally to a file.

    The file always receives debug messages.

    :param stream_format: format of console lines
    :param file_format: format of file lines
    :param datefmt: date/time format
    :param level: console level
    :param filename: also log to this file
    :param json_format: write JSON objects instead of formatted lines
    """
    # Filtering is done by the handlers
    logging.getLogger("").setLevel(logging.DEBUG)
    if console_logs:
        stream_format = f"{console_logs}: {file_format}"

    add_log_handlers(
        level=level, log_format=stream_format, datefmt=datefmt, json_format=json_format
    )
    if filename is not None:
        add_log_handlers(
            level=logging.DEBUG,
            log_format=file_format,
            datefmt=datefmt,
            filename=filename,
            json_format=json_format,
        )
