"""
Node.js build target names for the running system.

A target is the name used in the "files" list of the build index (and in
the archive names on https://nodejs.org/download/), e.g. "linux-x64" or
"osx-arm64-tar". It is not a GNU triplet.
"""

import platform
import re

import mozinfo
from mozlog import get_proxy_logger

LOG = get_proxy_logger("Targets")

PLATFORM_NAMES = {
    "mac": "osx",
    "win": "win",
}

PLATFORM_FORMATS = {
    "osx": ("tar", "pkg"),
    "win": ("exe", "zip", "7z", "msi"),
}

# the oldest ARM version nodejs.org has builds for
MIN_ARM_VERSION = 6


def _arm_versions(machine):
    """
    Returns the ARM architecture names usable on *machine* (e.g. "armv7l"),
    from highest to lowest preference.
    """
    matched = re.match(r"^arm(v([0-9]+)([a-z]*?)([bl]))$", machine)
    if not matched:
        LOG.warning("ARM version not found in machine name %r." % machine)
        return ["arm"]

    name, version, suffix, endianness = matched.groups()
    versions = ["arm" + name]
    if suffix:
        # try without the suffix (e.g. v7m, v5t)
        versions.append("armv%s%s" % (version, endianness))
    for previous in range(int(version) - 1, MIN_ARM_VERSION - 1, -1):
        versions.append("armv%d%s" % (previous, endianness))
    return versions


def _arch_names(machine, bits):
    machine = machine.lower()
    if machine in ("x86_64", "amd64", "x64"):
        return ["x86" if bits == 32 else "x64"]
    if re.match(r"^(i[3-6]86|x86|ia32|x32)$", machine):
        return ["x86"]
    if machine in ("aarch64", "arm64"):
        return ["arm64"]
    if machine.startswith("arm"):
        return _arm_versions(machine)
    return [machine]


def get_targets_for_os(os_name=None, machine=None, bits=None):
    """
    Returns the Node.js build targets compatible with a system, from highest
    to lowest preference.

    Defaults describe the running system, using mozinfo.
    """
    os_name = os_name or mozinfo.os
    machine = machine or platform.machine()
    bits = bits or mozinfo.bits

    platform_name = PLATFORM_NAMES.get(os_name, os_name)
    targets = ["%s-%s" % (platform_name, arch) for arch in _arch_names(machine, bits)]

    formats = PLATFORM_FORMATS.get(platform_name)
    if not formats:
        return targets
    return ["%s-%s" % (target, fmt) for target in targets for fmt in formats]
