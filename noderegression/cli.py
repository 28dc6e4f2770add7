"""
This module parses and checks the command line with :func:`cli` and return a
:class:`Configuration` object that hold information for running the
application.

:func:`cli` is intended to be the only public interface of this module.
"""

from argparse import REMAINDER, SUPPRESS, ArgumentParser

from noderegression import __version__
from noderegression.config import DEFAULT_CONF_FNAME, get_config
from noderegression.dates import check_date_range, parse_date
from noderegression.log import init_logger, verbosity_to_level


def parse_args(argv=None, defaults=None):
    """
    Parse command line options.
    """
    parser = create_parser(defaults=defaults or get_config(None))
    return parser.parse_args(argv)


def create_parser(defaults):
    """
    Create the noderegression command line parser (ArgumentParser instance).
    """
    usage = "\n %(prog)s [OPTIONS] [--good DATE] [--bad DATE] [--] COMMAND [ARGS...]"

    parser = ArgumentParser(
        usage=usage,
        description="Reduce a regression range using Node.js nightly builds.",
        epilog=(
            "COMMAND is run once per tested build. An exit code of 0 means the"
            " build is good, 1-124 and 126-127 that it is bad. In COMMAND and"
            " ARGS, {node} is replaced by the path of the tested node"
            " executable, and a COMMAND of `node` runs the tested build."
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=__version__,
        help="print the noderegression version number and exits.",
    )

    parser.add_argument(
        "-b",
        "--bad",
        "--new",
        action="append",
        metavar="DATE",
        help=(
            "first date when the issue was present (YYYY-MM-DD). If given"
            " several times, the earliest date is used."
        ),
    )

    parser.add_argument(
        "-g",
        "--good",
        "--old",
        action="append",
        metavar="DATE",
        help=(
            "last date when the issue was not present (YYYY-MM-DD). If given"
            " several times, the latest date is used."
        ),
    )

    parser.add_argument(
        "-t",
        "--target",
        dest="targets",
        action="append",
        default=[],
        metavar="TARGET",
        help=(
            "build file to test, e.g. linux-x64 or win-x64-zip; repeat to"
            " give several targets, preferred first. Defaults to the"
            " targets of this system."
        ),
    )

    parser.add_argument(
        "-l",
        "--log",
        dest="logs",
        action="append",
        default=[],
        metavar="LOGFILE",
        help="save a git bisect log to LOGFILE (- for stdout); can be repeated.",
    )

    parser.add_argument(
        "-q", "--quiet", action="count", default=0, help="print less output."
    )

    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="print more output."
    )

    parser.add_argument(
        "--persist",
        default=defaults["persist"],
        help=(
            "the directory in which downloaded files are to persist."
            " Defaults to %(default)r."
        ),
    )

    parser.add_argument(
        "--exe-dir",
        help=(
            "directory where the tested node executable is extracted."
            " Defaults to a temporary directory, removed at exit."
        ),
    )

    parser.add_argument(
        "--build-base-url",
        default=defaults["build-base-url"],
        help="Base url of the nightly builds. Defaults to %(default)s",
    )

    parser.add_argument(
        "--index-url",
        default=defaults["index-url"],
        help="Url of the nightly build index. Defaults to %(default)s",
    )

    parser.add_argument(
        "--http-timeout",
        type=float,
        default=float(defaults["http-timeout"]),
        help=(
            "Timeout in seconds to abort requests when there"
            " is no activity from the server. Default to"
            " %(default)s seconds - increase this if you"
            " are under a really slow network."
        ),
    )

    parser.add_argument(
        "--allow-unknown-order",
        action="store_false",
        dest="strict_order",
        help=(
            "keep going when builds made on the same day have no known"
            " commit order (they are then tested in build index order)."
        ),
    )

    parser.add_argument("command", metavar="COMMAND", help="the test command.")
    parser.add_argument("args", nargs=REMAINDER, metavar="ARGS", help=SUPPRESS)

    return parser


class Configuration(object):
    """
    Holds the configuration extracted from the command line + configuration file.

    This is usually instantiated by calling :func:`cli`.

    The constructor only initializes the `logger`.

    The configuration should not be used (except for the logger attribute)
    until :meth:`validate` is called.

    :attr logger: the mozlog logger, created using the command line options
    :attr options: the raw command line options
    :attr good: the good date (a datetime.date or None)
    :attr bad: the bad date (a datetime.date or None)
    :attr test_command: the list [command, args...]
    """

    def __init__(self, options):
        self.options = options
        self.verbosity = options.verbose - options.quiet
        self.logger = init_logger(level=verbosity_to_level(self.verbosity))
        self.good = None
        self.bad = None
        self.test_command = None

    def validate(self):
        """
        Validate the options, converting the dates.
        """
        options = self.options
        goods = [parse_date(d) for d in options.good or ()]
        bads = [parse_date(d) for d in options.bad or ()]
        # the narrowest range given: latest good, earliest bad
        good = max(goods) if goods else None
        bad = min(bads) if bads else None
        # raises DateRangeError if good is not before bad
        self.good, self.bad = check_date_range(good, bad)

        if self.good is None:
            self.logger.info("No 'good' option specified, using the oldest build")
        if self.bad is None:
            self.logger.info("No 'bad' option specified, using the newest build")

        args = list(options.args)
        if args and args[0] == "--":
            args = args[1:]
        self.test_command = [options.command] + args


def cli(argv=None, conf_file=DEFAULT_CONF_FNAME):
    """
    parse cli args basically and returns a :class:`Configuration`.
    """
    config = get_config(conf_file)
    options = parse_args(argv=argv, defaults=config)
    if not options.targets:
        options.targets = config["target"]
    return Configuration(options)
