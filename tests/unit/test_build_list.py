import asyncio

import pytest
from mock import Mock

from noderegression import errors
from noderegression.build_list import (
    BUILD_INDEX_URL,
    build_list_from_json,
    filter_and_normalize_builds,
    get_build_list,
)


def raw_build(version, files=("linux-x64", "win-x64-zip")):
    return {"version": version, "date": "2021-02-17", "files": list(files)}


def versions(builds):
    return [b.version for b in builds]


def mock_session(json_data, status_code=200):
    response = Mock(status_code=status_code, url=BUILD_INDEX_URL, reason="OK")
    response.json.return_value = json_data
    session = Mock()
    session.get.return_value = response
    return session


class TestFilterAndNormalizeBuilds(object):
    def test_keep_master_builds(self):
        raw = [
            raw_build("v16.0.0-nightly202102189a2ac2c615"),
            raw_build("v16.0.0-nightly202102178353854ed7"),
        ]
        builds = filter_and_normalize_builds(raw)
        assert versions(builds) == [
            "v16.0.0-nightly202102189a2ac2c615",
            "v16.0.0-nightly202102178353854ed7",
        ]
        assert builds[0].commit == "9a2ac2c615"
        assert builds[0].date == "2021-02-18"
        assert builds[0].files == frozenset(["linux-x64", "win-x64-zip"])

    @pytest.mark.parametrize(
        "version,reason",
        [
            # pre-4.0 nightlies
            ("v0.12.10-nightly20160205a6ac2ba0e6", "pre-4.0"),
            # release branches
            ("v15.8.1-nightly20210217aaaaaaaaaa", "release branch"),
            ("v15.1.0-nightly20210217aaaaaaaaaa", "release branch"),
            # commits missing from git
            ("v9.0.0-nightly2017080360f2fa9a8b", "not in git"),
            # commits not on master
            ("v8.0.0-nightly201705302296a4fc0f", "non-master"),
        ],
    )
    def test_ignored_builds(self, version, reason):
        logger = Mock()
        assert filter_and_normalize_builds([raw_build(version)], logger=logger) == []
        assert reason in logger.debug.call_args[0][0]

    def test_duplicate_commits(self):
        logger = Mock()
        raw = [
            raw_build("v13.0.0-nightly20191018c8df5cf74a"),
            raw_build("v13.0.0-nightly20191017c8df5cf74a"),
        ]
        builds = filter_and_normalize_builds(raw, logger=logger)
        assert versions(builds) == ["v13.0.0-nightly20191018c8df5cf74a"]
        assert "same commit as v13.0.0-nightly20191018c8df5cf74a" in logger.debug.call_args[0][0]

    def test_invalid_version(self):
        with pytest.raises(errors.BuildVersionFormatError):
            filter_and_normalize_builds([raw_build("v16.0.0-rc.1")])

    @pytest.mark.parametrize(
        "raw",
        [
            {"date": "2021-02-17", "files": ["linux-x64"]},
            {"version": 16, "date": "2021-02-17", "files": ["linux-x64"]},
            "v16.0.0-nightly202102178353854ed7",
        ],
    )
    def test_missing_version(self, raw):
        with pytest.raises(errors.BuildVersionFormatError):
            filter_and_normalize_builds([raw])


def test_build_list_from_json():
    raw = [
        raw_build("v16.0.0-nightly202102189a2ac2c615"),
        raw_build("v15.8.1-nightly20210217aaaaaaaaaa"),
        raw_build("v16.0.0-nightly202102178353854ed7"),
        raw_build("v16.0.0-nightly20210216eec20ed5c1"),
    ]
    assert versions(build_list_from_json(raw)) == [
        "v16.0.0-nightly20210216eec20ed5c1",
        "v16.0.0-nightly202102178353854ed7",
        "v16.0.0-nightly202102189a2ac2c615",
    ]


def test_get_build_list():
    session = mock_session(
        [
            raw_build("v16.0.0-nightly202102189a2ac2c615"),
            raw_build("v16.0.0-nightly202102178353854ed7"),
        ]
    )
    builds = asyncio.run(get_build_list(session=session))
    assert versions(builds) == [
        "v16.0.0-nightly202102178353854ed7",
        "v16.0.0-nightly202102189a2ac2c615",
    ]
    session.get.assert_called_once_with(BUILD_INDEX_URL)
    session.get.return_value.close.assert_called_once_with()


def test_get_build_list_http_error():
    session = mock_session([], status_code=404)
    with pytest.raises(errors.HttpResponseError) as excinfo:
        asyncio.run(get_build_list(session=session))
    assert excinfo.value.status_code == 404


def test_get_build_list_processing_error():
    session = mock_session(
        [
            raw_build("v16.0.0-nightly20210216bbbbbbbbbb"),
            raw_build("v16.0.0-nightly20210216aaaaaaaaaa"),
        ]
    )
    url = "http://example.com/index.json"
    with pytest.raises(errors.UnknownBuildOrderError) as excinfo:
        asyncio.run(get_build_list(url, session=session))
    assert str(excinfo.value).startswith("Error processing http://example.com/index.json: ")



def test_get_build_list_missing_version():
    session = mock_session([{"date": "2021-02-17", "files": ["linux-x64"]}])
    url = "http://example.com/index.json"
    with pytest.raises(errors.BuildVersionFormatError) as excinfo:
        asyncio.run(get_build_list(url, session=session))
    assert str(excinfo.value) == (
        "Error processing http://example.com/index.json: "
        'Build version "None" does not have expected format'
    )

def test_get_build_list_not_strict():
    session = mock_session(
        [
            raw_build("v16.0.0-nightly20210216bbbbbbbbbb"),
            raw_build("v16.0.0-nightly20210216aaaaaaaaaa"),
        ]
    )
    builds = asyncio.run(get_build_list(session=session, strict=False, logger=Mock()))
    assert versions(builds) == [
        "v16.0.0-nightly20210216aaaaaaaaaa",
        "v16.0.0-nightly20210216bbbbbbbbbb",
    ]
