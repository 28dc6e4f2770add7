"""
Download, extract and run a single Node.js nightly build.

This is the only place which knows about the layout of
https://nodejs.org/download/nightly/ and of the build archives.
"""

import asyncio
import functools
import os
import shutil
import signal
import stat
import tarfile
import zipfile
from collections import namedtuple
from contextlib import closing

import mozfile
import requests
from mozlog import get_proxy_logger

from noderegression.build_info import split_build_version
from noderegression.errors import (
    HttpResponseError,
    NodeRegressionError,
    TestCommandError,
    UnsupportedFormatError,
)

LOG = get_proxy_logger("Run Build")

BUILD_BASE_URL = "https://nodejs.org/download/nightly/"

RunResult = namedtuple("RunResult", "exit_code, signal")


def split_target(target):
    """
    Returns (platform, arch, format) for a target; format may be None.
    """
    parts = target.split("-")
    if len(parts) < 2:
        raise ValueError("Invalid build target: %r" % target)
    return parts[0], parts[1], parts[2] if len(parts) > 2 else None


def get_build_archive_basename(version, target):
    platform_name, arch, _ = split_target(target)
    uname = "darwin" if platform_name == "osx" else platform_name
    return "node-%s-%s-%s" % (version, uname, arch)


def get_build_url_path(version, target):
    """
    Returns the path of the file to download for a build, relative to the
    nightly base url.
    """
    platform_name, arch, fmt = split_target(target)
    if fmt == "exe":
        return "%s/%s-%s/node.exe" % (version, platform_name, arch)
    ext = "tar.gz" if fmt in (None, "tar") else fmt
    return "%s/%s.%s" % (version, get_build_archive_basename(version, target), ext)


def get_member_for_build(version, target):
    """
    Returns the path of the node executable inside the build archive.
    """
    basename = get_build_archive_basename(version, target)
    if target.startswith("win"):
        return "%s/node.exe" % basename
    return "%s/bin/node" % basename


def _copy_member(fileobj, dest, mode=None):
    with open(dest, "wb") as out:
        shutil.copyfileobj(fileobj, out)
    if mode:
        os.chmod(dest, mode)


def extract_tar(archive_path, members):
    """
    Extract the archive entries named in *members* (a dict mapping entry
    names to destination paths). Returns the number of extracted entries.
    """
    count = 0
    with tarfile.open(archive_path, "r:*") as tar:
        for entry in tar:
            dest = members.get(entry.name)
            if dest is None:
                continue
            if not entry.isfile():
                raise NodeRegressionError(
                    "Unsupported entry type for %s in %s" % (entry.name, archive_path)
                )
            LOG.debug("Extracting %s to %s" % (entry.name, dest))
            with closing(tar.extractfile(entry)) as fileobj:
                _copy_member(fileobj, dest, entry.mode)
            count += 1
    return count


def extract_zip(archive_path, members):
    """
    Same as :func:`extract_tar`, for zip files.
    """
    count = 0
    with zipfile.ZipFile(archive_path) as archive:
        for info in archive.infolist():
            dest = members.get(info.filename)
            if dest is None:
                continue
            LOG.debug("Extracting %s to %s" % (info.filename, dest))
            with archive.open(info) as fileobj:
                _copy_member(fileobj, dest)
            count += 1
    return count


def get_extractor(target):
    """
    Returns the extraction function for the target archive format, or None
    if the download is the executable itself.
    """
    fmt = split_target(target)[2]
    if fmt == "exe":
        return None
    if fmt in (None, "tar"):
        return extract_tar
    if fmt == "zip":
        return extract_zip
    raise UnsupportedFormatError("Unsupported format: %s" % fmt)


def _makedirs(path):
    """
    os.makedirs, returning the directories that were created, deepest first.
    """
    created = []
    current = path
    while current and not os.path.isdir(current):
        created.append(current)
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    os.makedirs(path, exist_ok=True)
    return created


def download_file(file_path, url, session=None, chunk_size=16 * 1024):
    """
    Download *url* to *file_path*.

    The content is written to "<file_path>.part" which is renamed once
    complete. On error the part file and the directories created for it are
    removed, so that the cache is never left with an incomplete build.
    """
    LOG.info("Downloading build from: %s" % url)
    with closing((session or requests).get(url, stream=True)) as response:
        if not 200 <= response.status_code < 300:
            raise HttpResponseError.from_response(response)

        created_dirs = _makedirs(os.path.dirname(file_path))
        part_path = file_path + ".part"
        try:
            with open(part_path, "wb") as part:
                for chunk in response.iter_content(chunk_size):
                    if chunk:
                        part.write(chunk)
            os.replace(part_path, file_path)
        except BaseException:
            try:
                os.remove(part_path)
            except FileNotFoundError:
                pass
            except OSError as exc:
                LOG.warning("Error removing %s: %s" % (part_path, exc))
            for directory in created_dirs:
                try:
                    os.rmdir(directory)
                except OSError:
                    break
            raise


def ensure_file(file_path, url, session=None):
    """
    Download *url* to *file_path* unless the file is already there.
    """
    if os.path.isfile(file_path):
        LOG.info("Using local file: %s" % file_path)
        return
    download_file(file_path, url, session=session)


def _signal_name(returncode):
    try:
        return signal.Signals(-returncode).name
    except ValueError:
        return "signal %d" % -returncode


def _replace_node(value, node_exe):
    return value.replace("{node}", node_exe)


class BuildRunner(object):
    """
    Run a command against one nightly build.

    :param cache_dir: directory where downloaded files persist, keyed by
                      their url path.
    :param base_url: the nightly builds base url.
    """

    def __init__(self, cache_dir, base_url=BUILD_BASE_URL):
        self.cache_dir = cache_dir
        if not base_url.endswith("/"):
            base_url += "/"
        self.base_url = base_url

    def get_cache_path(self, url_path):
        return os.path.join(self.cache_dir, *url_path.split("/"))

    def install(self, version, target, exe_dir, session=None):
        """
        Make the node executable of a build available in *exe_dir*, and
        return its path. Blocking.
        """
        url_path = get_build_url_path(version, target)
        cache_path = self.get_cache_path(url_path)
        # get the extractor first, to not download a file we can not use
        extract = get_extractor(target)
        ensure_file(cache_path, self.base_url + url_path, session=session)

        node_exe = os.path.join(exe_dir, "node.exe" if target.startswith("win") else "node")
        member = get_member_for_build(version, target)
        try:
            if extract is None:
                shutil.copyfile(cache_path, node_exe)
            elif extract(cache_path, {member: node_exe}) != 1:
                raise NodeRegressionError("%s not found in %s" % (member, cache_path))
            mode = os.stat(node_exe).st_mode
            os.chmod(node_exe, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        except (tarfile.TarError, zipfile.BadZipFile, EOFError) as exc:
            # a corrupt cached archive would break every later run
            LOG.warning("Removing corrupt file from the cache: %s" % cache_path)
            mozfile.remove(cache_path)
            raise NodeRegressionError(
                "Unable to extract %s (the file was removed from the cache): %s"
                % (cache_path, exc)
            )
        except OSError as exc:
            raise NodeRegressionError(
                "Unable to install the node executable from %s to %s: %s"
                % (cache_path, exe_dir, exc)
            )
        return node_exe

    def _command_env(self, version, node_exe):
        env = dict(os.environ)
        _, _, commit = split_build_version(version)
        env["NODEREGRESSION_NODE"] = node_exe
        env["NODEREGRESSION_VERSION"] = version
        env["NODEREGRESSION_COMMIT"] = commit
        env["PATH"] = os.pathsep.join(
            p for p in (os.path.dirname(node_exe), env.get("PATH")) if p
        )
        return env

    async def run(self, version, target, command, args, exe_dir, session=None):
        """
        Download, extract and run a build with the given command.

        In *command* and *args*, "{node}" is replaced by the path of the
        build node executable; a *command* of "node" is the build itself.

        Returns a :class:`RunResult`.
        """
        loop = asyncio.get_running_loop()
        node_exe = await loop.run_in_executor(
            None, functools.partial(self.install, version, target, exe_dir, session=session)
        )

        cmdlist = [node_exe if command == "node" else _replace_node(command, node_exe)]
        cmdlist.extend(_replace_node(arg, node_exe) for arg in args)
        LOG.info("Running test command for %s: `%s`" % (version, " ".join(cmdlist)))
        try:
            process = await asyncio.create_subprocess_exec(
                *cmdlist, env=self._command_env(version, node_exe)
            )
        except OSError as exc:
            raise TestCommandError(
                "Unable to run the test command (%s not found or not executable): `%s`"
                % (cmdlist[0], exc)
            )
        returncode = await process.wait()
        if returncode < 0:
            return RunResult(None, _signal_name(returncode))
        return RunResult(returncode, None)
