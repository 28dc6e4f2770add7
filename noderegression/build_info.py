"""
The BuildInfo class, that is used to store information about a nightly build.
"""

import re
from collections import namedtuple

from noderegression.errors import BuildVersionFormatError

VERSION_RE = re.compile(
    r"^v([0-9]+)\.([0-9]+)\.([0-9]+)-nightly(20[0-9][0-9])([01][0-9])([0-3][0-9])([0-9a-f]+)$"
)

BuildVersion = namedtuple("BuildVersion", "major, minor, patch, year, month, day, commit")

# a build, with the target (file name in the build index) chosen to test it
BisectionCandidate = namedtuple("BisectionCandidate", "build, target")


def parse_build_version(version):
    """
    Parse a nightly version such as "v16.0.0-nightly20210217bd4b9d5e9d".

    Returns a :class:`BuildVersion`. Raises :class:`BuildVersionFormatError`
    if *version* does not have that format.
    """
    matched = VERSION_RE.match(version)
    if not matched:
        raise BuildVersionFormatError(version)
    major, minor, patch, year, month, day, commit = matched.groups()
    return BuildVersion(
        int(major), int(minor), int(patch), int(year), int(month), int(day), commit
    )


def split_build_version(version):
    """
    Returns the ("vX.Y.Z", "YYYYMMDD", commit) string parts of a version.
    """
    matched = VERSION_RE.match(version)
    if not matched:
        raise BuildVersionFormatError(version)
    groups = matched.groups()
    return "v%s.%s.%s" % groups[:3], "".join(groups[3:6]), groups[6]


class BuildInfo(object):
    """
    Read-only description of one nightly build from the build index.

    Instances are created with :meth:`from_dict` from an index entry.
    """

    __slots__ = ("_version", "_files", "_commit", "_date")

    def __init__(self, version, files, commit, date):
        self._version = version
        self._files = frozenset(files)
        self._commit = commit
        self._date = date

    @classmethod
    def from_dict(cls, data, parsed=None):
        """
        Create a BuildInfo from a build index entry (a dict with at least
        "version" and "files").
        """
        if parsed is None:
            parsed = parse_build_version(data["version"])
        date = "%04d-%02d-%02d" % (parsed.year, parsed.month, parsed.day)
        return cls(data["version"], data.get("files") or (), parsed.commit, date)

    @property
    def version(self):
        """
        The full version string, e.g. "v16.0.0-nightly20210217bd4b9d5e9d"
        """
        return self._version

    @property
    def files(self):
        """
        frozenset of the targets available for this build, e.g. "linux-x64"
        """
        return self._files

    @property
    def commit(self):
        """
        The short (lower case hex) commit the build was made from.
        """
        return self._commit

    @property
    def date(self):
        """
        The nightly date, as a "YYYY-MM-DD" string.
        """
        return self._date

    def __eq__(self, other):
        if not isinstance(other, BuildInfo):
            return NotImplemented
        return self._version == other._version and self._files == other._files

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __hash__(self):
        return hash((self._version, self._files))

    def __repr__(self):
        return "<BuildInfo %s>" % self._version
