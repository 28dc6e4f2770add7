"""
This module fetches the Node.js nightly build index and turns it into the
list of builds which can be bisected.

The public API is :func:`get_build_list`, returning
:class:`noderegression.build_info.BuildInfo` instances oldest first.
"""

from mozlog import get_proxy_logger

from noderegression.build_info import BuildInfo, parse_build_version
from noderegression.build_order import reorder_builds
from noderegression.commit_data import (
    COMMIT_ORDER_BY_DATE,
    MISSING_COMMITS,
    NON_MASTER_COMMITS,
)
from noderegression.errors import BuildVersionFormatError, NodeRegressionError
from noderegression.network import async_get

LOG = get_proxy_logger("BuildList")

BUILD_INDEX_URL = "https://nodejs.org/download/nightly/index.json"


def filter_and_normalize_builds(raw_builds, logger=LOG):
    """
    Keep the build index entries useful for bisecting master.

    Returns a list of :class:`BuildInfo` for unique commits which are
    ancestors of master, in the order of *raw_builds* (newest first).
    Raises :class:`noderegression.errors.BuildVersionFormatError` if an
    entry has an unexpected version.
    """
    commit_to_version = {}
    builds = []
    for raw in raw_builds:
        version = raw.get("version") if isinstance(raw, dict) else None
        if not isinstance(version, str):
            raise BuildVersionFormatError(version)
        if version.startswith("v0."):
            # 0.10/0.12 nightlies have dates after v5.5.1 and exe files
            # at different paths than the others.
            logger.debug("Ignoring build %s for pre-4.0 commit." % version)
            continue

        parsed = parse_build_version(version)

        if (parsed.minor, parsed.patch) != (0, 0):
            logger.debug("Ignoring build %s from a release branch." % version)
            continue

        commit = parsed.commit
        if commit in MISSING_COMMITS:
            logger.debug("Ignoring build %s with commit %s not in git." % (version, commit))
            continue

        if commit in NON_MASTER_COMMITS:
            logger.debug("Ignoring build %s for non-master commit." % version)
            continue

        # some commits are built on multiple days (c8df5cf74a on 20191017
        # and 20191018)
        if commit in commit_to_version:
            logger.debug(
                "Ignoring build %s with same commit as %s." % (version, commit_to_version[commit])
            )
            continue
        commit_to_version[commit] = version

        builds.append(BuildInfo.from_dict(raw, parsed=parsed))
    return builds


def build_list_from_json(
    raw_builds, strict=True, commit_order=COMMIT_ORDER_BY_DATE, logger=LOG
):
    """
    Returns the bisectable builds, oldest first, from a parsed build index.
    """
    builds = filter_and_normalize_builds(raw_builds, logger=logger)
    return reorder_builds(builds, commit_order=commit_order, strict=strict, logger=logger)


async def fetch_build_index(url=BUILD_INDEX_URL, session=None):
    """
    Download and decode the JSON build index.
    """
    LOG.debug("Fetching build index from %s" % url)
    response = await async_get(url, session=session)
    try:
        return response.json()
    finally:
        response.close()


async def get_build_list(
    url=BUILD_INDEX_URL,
    session=None,
    strict=True,
    commit_order=COMMIT_ORDER_BY_DATE,
    logger=LOG,
):
    """
    Returns the list of builds to bisect, oldest first.

    :param session: a requests session (or None to use the requests module).
    :param strict: see :func:`noderegression.build_order.reorder_builds`.
    """
    raw_builds = await fetch_build_index(url, session=session)
    try:
        return build_list_from_json(
            raw_builds, strict=strict, commit_order=commit_order, logger=logger
        )
    except NodeRegressionError as exc:
        exc.args = ("Error processing %s: %s" % (url, exc),) + exc.args[1:]
        raise
