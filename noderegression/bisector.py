"""
Bisection of the Node.js nightly builds.

:class:`Bisector` binds the user bounds and target preferences to the build
list, runs the asynchronous binary search over it and reports events to a
:class:`BisectorHandler`.
"""

import math
from collections.abc import Sequence

import mozfile
from mozlog import get_proxy_logger

from noderegression.binary_search import binary_search_async
from noderegression.build_info import BisectionCandidate
from noderegression.build_list import BUILD_INDEX_URL, get_build_list
from noderegression.dates import MIN_BUILD_DATE, check_date_range
from noderegression.errors import (
    BuildExitError,
    NodeRegressionError,
    NoBuildsError,
    SkipNotSupportedError,
)
from noderegression.network import http_session
from noderegression.targets import get_targets_for_os
from noderegression.tempdir import safe_mkdtemp

LOG = get_proxy_logger("Bisector")

# exit code used by `git bisect run` scripts to ask for a skip
SKIP_EXIT_CODE = 125


def compute_steps_left(count):
    if count <= 0:
        return 0
    return int(math.ceil(math.log2(count))) + 1


def verdict_for(exit_code, signal):
    """
    Returns "good" or "bad" for a test result, or None if the result is
    not a usable verdict (killed by a signal, skip, unexpected exit code).
    """
    if signal or exit_code is None:
        return None
    if exit_code < 0 or exit_code >= 128 or exit_code == SKIP_EXIT_CODE:
        return None
    return "good" if exit_code == 0 else "bad"


class BisectorHandler(object):
    """
    React to events of a :class:`Bisector`. This is intended to be
    subclassed; the default implementation only logs.
    """

    def on_range(self, low, high):
        """
        Called with the inclusive index bounds before each tested build.
        """
        count = high - low + 1
        LOG.info("%d builds left to test (~%d steps)" % (count, compute_steps_left(count)))

    def on_result(self, build, exit_code, signal):
        """
        Called after each tested build.
        """
        if signal:
            LOG.debug("Build %s killed by %s" % (build.version, signal))
        else:
            LOG.debug(
                "Build %s exit code %s (%s)"
                % (build.version, exit_code, verdict_for(exit_code, signal) or "unusable")
            )


class BisectLogHandler(BisectorHandler):
    """
    A handler which also writes the results in the `git bisect log` format,
    so that the bisection can be replayed or continued with git.

    :param streams: writable text streams.
    """

    def __init__(self, streams=()):
        self.streams = list(streams)

    def on_result(self, build, exit_code, signal):
        BisectorHandler.on_result(self, build, exit_code, signal)
        verdict = verdict_for(exit_code, signal)
        if verdict is None:
            return
        for stream in self.streams:
            stream.write(
                "# %s: %s\ngit bisect %s %s\n" % (verdict, build.version, verdict, build.commit)
            )
            stream.flush()


def filter_by_date(builds, good=None, bad=None):
    """
    Returns the builds strictly after *good* and strictly before *bad*.
    """
    after = good.isoformat() if good else "0000-00-00"
    before = bad.isoformat() if bad else "9999-99-99"
    return [build for build in builds if after < build.date < before]


def get_bisection_candidates(builds, targets):
    """
    Pair each build with the first of *targets* it has a file for.

    Builds without a file for any of the targets are dropped.
    """
    candidates = []
    for build in builds:
        for target in targets:
            if target in build.files:
                candidates.append(BisectionCandidate(build, target))
                break
    return candidates


def _check_test_command(test_command):
    if isinstance(test_command, (str, bytes)) or not isinstance(test_command, Sequence):
        raise TypeError("test_command must be a sequence of strings")
    if not test_command or not isinstance(test_command[0], str) or not test_command[0]:
        raise TypeError("test_command must start with a non-empty string")
    return test_command[0], list(test_command[1:])


class Bisector(object):
    """
    Handle the logic of the bisection process, and report events to a given
    :class:`BisectorHandler`.

    :param build_runner: object with a ``run`` coroutine method, see
                         :class:`noderegression.run_build.BuildRunner`.
    :param targets: build targets, in preference order. Defaults to the
                    targets of the running system.
    :param strict_order: if False, builds on the same date with no known
                         commit order are kept in index order.
    :param exe_dir: directory in which builds are extracted. A temporary
                    one is created (and removed) when not given.
    :param http_get_defaults: default arguments for the session get calls,
                              e.g. {"timeout": 30}.
    """

    def __init__(
        self,
        build_runner,
        handler=None,
        targets=None,
        index_url=BUILD_INDEX_URL,
        strict_order=True,
        exe_dir=None,
        http_get_defaults=None,
    ):
        self.build_runner = build_runner
        self.handler = handler or BisectorHandler()
        self.targets = targets
        self.index_url = index_url
        self.strict_order = strict_order
        self.exe_dir = exe_dir
        self.http_get_defaults = http_get_defaults

    async def bisect_range(self, good, bad, test_command, session=None):
        """
        Find the first bad build between the *good* and *bad* dates.

        Both bounds are exclusive and optional. Returns a couple
        (last_good_build, first_bad_build), either of them being None when
        the regression boundary is at the edge of the tested builds.
        """
        good, bad = check_date_range(good, bad)
        _check_test_command(test_command)
        if good is not None and good <= MIN_BUILD_DATE:
            LOG.warning(
                "Node.js 0.12 and 0.10 builds are not considered due to"
                " dates out of sequence and differing exe URLs."
            )

        with http_session(session, get_defaults=self.http_get_defaults) as session:
            builds = await get_build_list(
                self.index_url, session=session, strict=self.strict_order
            )
            date_builds = filter_by_date(builds, good, bad)
            if not date_builds:
                raise NoBuildsError(
                    "No builds after %s before %s" % (good or "the first build", bad or "today")
                )
            return await self.bisect_builds(date_builds, test_command, session=session)

    async def bisect_builds(self, builds, test_command, session=None):
        """
        Find the first bad build in *builds* (a list of BuildInfo, oldest
        first). Returns the same couple as :meth:`bisect_range`.
        """
        command, args = _check_test_command(test_command)
        targets = self.targets or get_targets_for_os()
        candidates = get_bisection_candidates(builds, targets)
        if not candidates:
            raise NoBuildsError("No builds in given range for %s" % ",".join(targets))

        exe_dir = self.exe_dir
        if not exe_dir:
            # note: the default temp dir might be mounted noexec
            exe_dir = safe_mkdtemp()

        async def compare(candidate):
            build, target = candidate
            result = await self.build_runner.run(
                build.version, target, command, args, exe_dir, session=http
            )
            self.handler.on_result(build, result.exit_code, result.signal)
            if result.signal:
                raise BuildExitError("node killed with %s" % result.signal)
            if result.exit_code < 0 or result.exit_code >= 128:
                raise BuildExitError("exit code %d is < 0 or >= 128" % result.exit_code)
            if result.exit_code == SKIP_EXIT_CODE:
                raise SkipNotSupportedError(build.version)
            LOG.info(
                "Build %s tested %s" % (build.version, "good" if result.exit_code == 0 else "bad")
            )
            return 1 if result.exit_code == 0 else -1

        try:
            with http_session(session, get_defaults=self.http_get_defaults) as http:
                found = await binary_search_async(
                    candidates, compare, progress=self.handler.on_range
                )
        finally:
            if not self.exe_dir:
                try:
                    mozfile.remove(exe_dir)
                except OSError as exc:
                    LOG.warning("Unable to remove temp dir %s: %s" % (exe_dir, exc))

        if math.isnan(found) or found >= 0:
            raise NodeRegressionError("Unexpected bisection result: %s" % found)
        first_bad = -found - 1
        good_build = candidates[first_bad - 1].build if first_bad > 0 else None
        bad_build = candidates[first_bad].build if first_bad < len(candidates) else None
        return good_build, bad_build
