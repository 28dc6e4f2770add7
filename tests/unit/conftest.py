import pytest
from mozlog.structuredlog import StructuredLogger, set_default_logger

from noderegression.build_info import BuildInfo


@pytest.fixture(autouse=True)
def default_logger():
    # proxy loggers need a default logger; this one has no handler
    logger = StructuredLogger("noderegression-tests")
    set_default_logger(logger)
    return logger


def make_build(commit, date, major=16, files=("linux-x64",)):
    """
    Create a BuildInfo for a nightly of the given commit and date
    ("YYYY-MM-DD").
    """
    version = "v%d.0.0-nightly%s%s" % (major, date.replace("-", ""), commit)
    return BuildInfo(version, files, commit, date)


@pytest.fixture
def build_factory():
    return make_build
