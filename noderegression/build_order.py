"""
Ordering of the normalized build list by commit ancestry.

The build index is sorted by date, newest first. Builds made on the same day
carry no usable ordering information, so their order comes from the
:data:`noderegression.commit_data.COMMIT_ORDER_BY_DATE` table.
"""

from mozlog import get_proxy_logger

from noderegression.commit_data import COMMIT_ORDER_BY_DATE
from noderegression.errors import BuildOrderError, UnknownBuildOrderError

LOG = get_proxy_logger("BuildOrder")


def _reorder_cluster(cluster, commit_order):
    ordered = [None] * len(commit_order)
    for build in cluster:
        try:
            pos = commit_order.index(build.commit)
        except ValueError:
            raise BuildOrderError(
                "commit %s not found in ordering for %s" % (build.commit, build.date)
            )
        ordered[pos] = build
    return ordered


def reorder_builds(builds, commit_order=COMMIT_ORDER_BY_DATE, strict=True, logger=LOG):
    """
    Returns *builds* (newest first) ordered by commit, oldest first.

    :param builds: list of :class:`noderegression.build_info.BuildInfo` as
                   returned by
                   :func:`noderegression.build_list.filter_and_normalize_builds`.
    :param commit_order: dict mapping a date to the commits built on that
                         date, newest first.
    :param strict: if False, builds on a date missing from *commit_order*
                   are kept in index order (with a warning) instead of
                   raising :class:`UnknownBuildOrderError`.
    """
    result = []
    i = 0
    while i < len(builds):
        build = builds[i]
        if result and build.date > result[-1].date:
            raise BuildOrderError(
                "Expected builds in decreasing order by date: %s after %s"
                % (build.version, result[-1].version)
            )

        end = i + 1
        while end < len(builds) and builds[end].date == build.date:
            end += 1
        cluster = builds[i:end]
        i = end

        if len(cluster) == 1:
            result.append(build)
            continue

        order = commit_order.get(build.date)
        if order is None:
            msg = "Builds %s have the same date with no known ordering." % ", ".join(
                b.version for b in cluster
            )
            if strict:
                raise UnknownBuildOrderError(msg)
            logger.warning(msg + " Keeping the build index order.")
            result.extend(cluster)
            continue

        if len(order) != len(cluster):
            raise BuildOrderError(
                "expected %d builds on %s, got %d" % (len(order), build.date, len(cluster))
            )
        result.extend(_reorder_cluster(cluster, list(order)))

    result.reverse()
    return result
