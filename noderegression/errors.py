"""
Definition of noderegression related exceptions.
"""


class NodeRegressionError(Exception):
    """Base class for noderegression errors."""


class DateFormatError(NodeRegressionError):
    """
    Raised when a date can not be parsed from a string.
    """

    def __init__(self, date_string, format="Incorrect date format: `%s`"):
        NodeRegressionError.__init__(self, format % date_string)


class DateRangeError(NodeRegressionError, ValueError):
    """
    Raised when the good/bad dates do not describe a usable range.
    """


class BuildVersionFormatError(NodeRegressionError, ValueError):
    """
    Raised when a build version string does not have the nightly format.
    """

    def __init__(self, version):
        NodeRegressionError.__init__(
            self, 'Build version "%s" does not have expected format' % version
        )


class BuildOrderError(NodeRegressionError):
    """
    Raised when the build index is not in the expected order.
    """


class UnknownBuildOrderError(BuildOrderError):
    """
    Raised when builds share a date and no commit order is known for it.
    """


class HttpResponseError(NodeRegressionError):
    """
    Raised when a server answers with a non-2xx HTTP status.
    """

    def __init__(self, url, status_code, reason):
        NodeRegressionError.__init__(self, "%s: %s %s" % (url, status_code, reason))
        self.url = url
        self.status_code = status_code
        self.reason = reason

    @classmethod
    def from_response(cls, response):
        return cls(response.url, response.status_code, response.reason)


class NoBuildsError(NodeRegressionError):
    """
    Raised when there is nothing left to bisect.
    """


class BuildExitError(NodeRegressionError):
    """
    Raised when a tested build exits in a way that is neither good nor bad.
    """


class SkipNotSupportedError(BuildExitError):
    """
    Raised when the test command asks to skip a build (exit code 125).
    """

    def __init__(self, version):
        BuildExitError.__init__(
            self,
            "Build %s: skip (exit code 125) is not supported" % version,
        )


class UnsupportedFormatError(NodeRegressionError):
    """
    Raised when a build archive format can not be extracted.
    """


class TestCommandError(NodeRegressionError):
    """
    Raised on a user test command error.
    """
