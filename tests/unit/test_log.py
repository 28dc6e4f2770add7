import re
from io import StringIO

import pytest
from colorama import Fore, Style

from noderegression import log


def init_logger(mocker, **kwargs):
    stream = StringIO()
    kwargs["output"] = stream
    mocker.patch("noderegression.log.set_default_logger")
    return log.init_logger(**kwargs), stream


def test_logger_without_color(mocker):
    logger, stream = init_logger(mocker, allow_color=False)
    logger.error("argh")
    assert re.match(r"^ *\d+:\d\d\.\d\d ERROR: argh\n$", stream.getvalue())


def test_logger_with_color(mocker):
    logger, stream = init_logger(mocker, allow_color=True)
    logger.error("argh")
    assert re.search(".+ERROR.+: argh", stream.getvalue())


@pytest.mark.parametrize(
    "level,shown,hidden",
    [
        ("debug", ["debug", "info", "warning"], []),
        ("info", ["info", "warning"], ["debug"]),
        ("warning", ["warning"], ["debug", "info"]),
        ("error", [], ["debug", "info", "warning"]),
    ],
)
def test_logger_level(mocker, level, shown, hidden):
    logger, stream = init_logger(mocker, level=level, allow_color=False)
    logger.debug("debug message")
    logger.info("info message")
    logger.warning("warning message")
    data = stream.getvalue()
    for name in shown:
        assert "%s message" % name in data
    for name in hidden:
        assert "%s message" % name not in data


def test_init_logger_twice(mocker):
    init_logger(mocker, allow_color=False)
    logger, stream = init_logger(mocker, allow_color=False)
    logger.info("once")
    assert stream.getvalue().count("once") == 1


@pytest.mark.parametrize(
    "verbosity,level",
    [(3, "debug"), (1, "debug"), (0, "info"), (-1, "warning"), (-2, "error")],
)
def test_verbosity_to_level(verbosity, level):
    assert log.verbosity_to_level(verbosity) == level


def test_elapsed():
    assert log._elapsed(1000, 1000 + 65 * 1000 + 250) == " 1:05.25"


def test_colorize():
    assert log.colorize("stuff", allow_color=True) == "stuff"
    assert log.colorize("{fRED}stuff{sRESET_ALL}", allow_color=True) == (
        Fore.RED + "stuff" + Style.RESET_ALL
    )
    assert log.colorize("{fRED}stuf{sRESET_ALL}", allow_color=False) == "stuf"
