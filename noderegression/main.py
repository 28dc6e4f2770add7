"""
Entry point for the noderegression command line.
"""

import asyncio
import os
import sys

import colorama
from mozlog import get_proxy_logger
from requests.exceptions import RequestException

from noderegression.bisector import BisectLogHandler, Bisector
from noderegression.cli import cli
from noderegression.errors import NodeRegressionError
from noderegression.log import colorize
from noderegression.run_build import BuildRunner

LOG = get_proxy_logger("main")


def open_bisect_logs(paths):
    """
    Open the git bisect log files. "-" stands for stdout, which is never
    closed. Returns a couple (streams, streams_to_close).
    """
    streams, to_close = [], []
    try:
        for path in paths:
            if path == "-":
                streams.append(sys.stdout)
                continue
            stream = open(path, "w")
            streams.append(stream)
            to_close.append(stream)
    except OSError as exc:
        for stream in to_close:
            stream.close()
        raise NodeRegressionError("Unable to open bisect log: %s" % exc)
    return streams, to_close


def format_build(build):
    if build is None:
        return "None found"
    return "%s on %s" % (build.commit, build.date)


class Application(object):
    def __init__(self, config):
        self.config = config
        self.options = config.options
        self._log_files = []

    def create_bisector(self):
        options = self.options
        streams, self._log_files = open_bisect_logs(options.logs)
        return Bisector(
            BuildRunner(options.persist, options.build_base_url),
            handler=BisectLogHandler(streams),
            targets=options.targets or None,
            index_url=options.index_url,
            strict_order=options.strict_order,
            exe_dir=options.exe_dir,
            http_get_defaults={"timeout": options.http_timeout},
        )

    def bisect(self):
        bisector = self.create_bisector()
        good, bad = asyncio.run(
            bisector.bisect_range(self.config.good, self.config.bad, self.config.test_command)
        )
        if self.config.verbosity >= 0:
            allow_color = sys.stdout.isatty()
            for label, build in (("Last good build", good), ("First bad build", bad)):
                line = "{sBRIGHT}%s:{sRESET_ALL} %s" % (label, format_build(build))
                print(colorize(line, allow_color))
        return 0

    def clear(self):
        for stream in self._log_files:
            stream.close()
        self._log_files = []


def main(argv=None):
    """
    main entry point of noderegression command line.
    """
    # terminal color support on windows
    if os.name == "nt":
        colorama.init()

    config, app = None, None
    try:
        config = cli(argv=argv)
        config.validate()
        app = Application(config)
        sys.exit(app.bisect())

    except KeyboardInterrupt:
        sys.exit("\nInterrupted.")
    except (NodeRegressionError, RequestException) as exc:
        if config is None:
            sys.exit(str(exc))
        LOG.error(str(exc))
        sys.exit(1)
    finally:
        if app:
            app.clear()


if __name__ == "__main__":
    main()
