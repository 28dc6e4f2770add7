"""
Logging setup for the command line, on top of mozlog.

Library modules only ever use ``get_proxy_logger``; :func:`init_logger`
decides where the messages end up and which ones are dropped.
"""

import sys
import time

import mozinfo
from colorama import Back, Fore, Style
from mozlog.handlers import LogLevelFilter, StreamHandler
from mozlog.structuredlog import StructuredLogger, set_default_logger

ALLOW_COLOR = sys.stderr.isatty()

LEVEL_COLORS = {
    "CRITICAL": Fore.RED + Style.BRIGHT,
    "ERROR": Fore.RED + Style.BRIGHT,
    "WARNING": Fore.YELLOW + Style.BRIGHT,
    "INFO": Style.BRIGHT,
    "DEBUG": Fore.CYAN,
}


def verbosity_to_level(verbosity):
    """
    Map the number of -v minus the number of -q to a mozlog level name.
    """
    if verbosity >= 1:
        return "debug"
    if verbosity == 0:
        return "info"
    if verbosity == -1:
        return "warning"
    return "error"


def _elapsed(start_ms, now_ms):
    # mozlog truncates the time to the millisecond
    minutes, seconds = divmod(max(now_ms - start_ms, 0) / 1000.0, 60)
    return "%2d:%05.2f" % (minutes, seconds)


def make_formatter(allow_color, start_ms=None):
    """
    Returns a mozlog formatter printing "MM:SS.DD LEVEL: message" lines.
    """
    if start_ms is None:
        start_ms = time.time() * 1000
    time_color = Fore.BLUE
    if mozinfo.os == "win":
        time_color += Style.BRIGHT  # dark blue is unreadable in cmd.exe

    def format_log(data):
        level = data["level"]
        elapsed = _elapsed(start_ms, data["time"])
        if allow_color:
            elapsed = time_color + elapsed + Style.RESET_ALL
            if level in LEVEL_COLORS:
                level = LEVEL_COLORS[level] + level + Style.RESET_ALL
        return "%s %s: %s\n" % (elapsed, level, data["message"])

    return format_log


def init_logger(level="info", allow_color=ALLOW_COLOR, output=None):
    """
    Install the default noderegression logger and return it.

    :param level: lowest mozlog level name that gets written.
    :param output: stream for the messages, stderr when None. Progress and
                   diagnostics go there so that stdout stays usable for the
                   bisect log.
    """
    output = output or sys.stderr
    logger = StructuredLogger("noderegression")
    # handlers are shared by all the loggers of the same name
    for handler in list(logger.handlers):
        logger.remove_handler(handler)
    logger.add_handler(LogLevelFilter(StreamHandler(output, make_formatter(allow_color)), level))
    set_default_logger(logger)
    return logger


def _color_table(enabled):
    table = {}
    for prefix, namespace in (("b", Back), ("s", Style), ("f", Fore)):
        for name, value in vars(namespace).items():
            if not name.startswith("_"):
                table[prefix + name] = value if enabled else ""
    return table


COLORS = _color_table(True)
NO_COLORS = _color_table(False)


def colorize(text, allow_color=ALLOW_COLOR):
    """
    Replace colorama placeholders in *text*.

    Placeholders are colorama attribute names prefixed by "b" (Back),
    "s" (Style) or "f" (Fore), e.g. ``colorize("{fRED}bad{sRESET_ALL}")``.
    When *allow_color* is False the placeholders are simply removed.
    """
    return text.format(**(COLORS if allow_color else NO_COLORS))
