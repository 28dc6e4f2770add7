import pytest
from mock import Mock

from noderegression import errors
from noderegression.build_order import reorder_builds
from noderegression.commit_data import COMMIT_ORDER_BY_DATE


def commits(builds):
    return [b.commit for b in builds]


def test_reorder_single_builds(build_factory):
    builds = [
        build_factory("cccccccccc", "2021-02-18"),
        build_factory("bbbbbbbbbb", "2021-02-17"),
        build_factory("aaaaaaaaaa", "2021-02-16"),
    ]
    result = reorder_builds(builds)
    assert commits(result) == ["aaaaaaaaaa", "bbbbbbbbbb", "cccccccccc"]
    # the input is not modified
    assert commits(builds) == ["cccccccccc", "bbbbbbbbbb", "aaaaaaaaaa"]


def test_reorder_same_date(build_factory):
    order = {"2021-02-17": ("2222222222", "1111111111", "3333333333")}
    builds = [
        build_factory("4444444444", "2021-02-18"),
        build_factory("1111111111", "2021-02-17"),
        build_factory("3333333333", "2021-02-17"),
        build_factory("2222222222", "2021-02-17"),
        build_factory("0000000000", "2021-02-16"),
    ]
    result = reorder_builds(builds, commit_order=order)
    assert commits(result) == [
        "0000000000",
        "3333333333",
        "1111111111",
        "2222222222",
        "4444444444",
    ]


def test_reorder_known_dates(build_factory):
    builds = [
        build_factory("4a498335f5", "2018-01-29", major=10),
        build_factory("5c8ce90c2f", "2018-01-29", major=10),
    ]
    assert commits(reorder_builds(builds)) == ["4a498335f5", "5c8ce90c2f"]
    assert COMMIT_ORDER_BY_DATE["2018-01-29"] == ("5c8ce90c2f", "4a498335f5")


def test_reorder_dates_not_decreasing(build_factory):
    builds = [
        build_factory("aaaaaaaaaa", "2021-02-16"),
        build_factory("bbbbbbbbbb", "2021-02-17"),
    ]
    with pytest.raises(errors.BuildOrderError) as excinfo:
        reorder_builds(builds)
    assert "decreasing order" in str(excinfo.value)


def test_reorder_unknown_date(build_factory):
    builds = [
        build_factory("bbbbbbbbbb", "2021-02-17"),
        build_factory("aaaaaaaaaa", "2021-02-17"),
    ]
    with pytest.raises(errors.UnknownBuildOrderError):
        reorder_builds(builds, commit_order={})


def test_reorder_unknown_date_not_strict(build_factory):
    logger = Mock()
    builds = [
        build_factory("cccccccccc", "2021-02-18"),
        build_factory("bbbbbbbbbb", "2021-02-17"),
        build_factory("aaaaaaaaaa", "2021-02-17"),
    ]
    result = reorder_builds(builds, commit_order={}, strict=False, logger=logger)
    assert commits(result) == ["aaaaaaaaaa", "bbbbbbbbbb", "cccccccccc"]
    assert logger.warning.call_count == 1
    assert "Keeping the build index order" in logger.warning.call_args[0][0]


def test_reorder_wrong_build_count(build_factory):
    order = {"2021-02-17": ("cccccccccc", "bbbbbbbbbb", "aaaaaaaaaa")}
    builds = [
        build_factory("bbbbbbbbbb", "2021-02-17"),
        build_factory("aaaaaaaaaa", "2021-02-17"),
    ]
    with pytest.raises(errors.BuildOrderError) as excinfo:
        reorder_builds(builds, commit_order=order)
    assert str(excinfo.value) == "expected 3 builds on 2021-02-17, got 2"


def test_reorder_unknown_commit(build_factory):
    order = {"2021-02-17": ("cccccccccc", "aaaaaaaaaa")}
    builds = [
        build_factory("bbbbbbbbbb", "2021-02-17"),
        build_factory("aaaaaaaaaa", "2021-02-17"),
    ]
    with pytest.raises(errors.BuildOrderError) as excinfo:
        reorder_builds(builds, commit_order=order)
    assert "bbbbbbbbbb not found" in str(excinfo.value)


def test_reorder_empty():
    assert reorder_builds([]) == []
