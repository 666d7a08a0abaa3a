# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: BSD-2-Clause

"""
Check of the MinGW linker on 64-bit Windows.

binutils ``ld`` older than 2.25.1 cannot correctly link against import
libraries produced by the Microsoft toolchain, such as the CUDA ones.  The
resulting programs build fine and crash on their first call into CUDA, so
configuration is stopped when such a linker is found.

A MinGW distribution ships two copies of ``ld.exe``:

1. ``<root>/bin/ld.exe``, next to the compiler driver, and
2. ``<root>/x86_64-w64-mingw32/bin/ld.exe``, which is the one the compiler
   driver runs to do the actual linking.

Only the second one is checked.
"""

import enum
import os
import subprocess
import warnings

from cuda_buildinfo import config
from cuda_buildinfo.errors import (
    LinkerCheckWarning,
    OutdatedLinkerError,
    VersionParseError,
)
from cuda_buildinfo.platforms import Arch, CompilerFlavor, OS
from cuda_buildinfo.utils import make_logger
from cuda_buildinfo.version import MIN_LINKER_VERSION, parse_version, version_lt

_logger = make_logger(__name__)

REAL_LD_LAYOUT = ("x86_64-w64-mingw32", "bin", "ld.exe")

WINDOWS_HELP_PAGE = (
    "https://github.com/tmcdonell/cuda/blob/master/WINDOWS.markdown"
)

FIXED_BINUTILS_URL = (
    "http://repo.msys2.org/mingw/x86_64/"
    "mingw-w64-x86_64-binutils-2.25.1-1-any.pkg.tar.xz"
)


class LinkerCheck(enum.Enum):
    NOT_APPLICABLE = "not-applicable"
    SKIPPED = "skipped"
    OK = "ok"


def linker_bug_message(ld_path):
    min_version = ".".join(map(str, MIN_LINKER_VERSION))
    return "\n".join(
        [
            "*" * 80,
            "",
            f"The installed version of `ld.exe` is older than {min_version}. "
            "Older versions have a known bug on Windows x64 which prevents "
            "them from correctly linking programs that use CUDA: linking "
            "succeeds, but the program crashes as soon as it makes its first "
            f"call into CUDA. MSYS2 ships a fixed `ld.exe` in binutils "
            f"{min_version}.",
            "",
            "To fix this issue, replace the `ld.exe` of your toolchain with a "
            "fixed binary. See the following page for details:",
            "",
            f"  {WINDOWS_HELP_PAGE}",
            "",
            "The full path to the outdated `ld.exe` detected in your "
            "installation:",
            "",
            f"> {ld_path}",
            "",
            "Please download a recent version of binutils `ld.exe`, from, "
            "e.g.:",
            "",
            f"  {FIXED_BINUTILS_URL}",
            "",
            "*" * 80,
        ]
    )


def _is_applicable(platform, flavor):
    # MSVC builds never run the MinGW linker
    return (
        platform.arch is Arch.X86_64
        and platform.os is OS.WINDOWS
        and flavor is not CompilerFlavor.MSVC
    )


def get_real_ld_path(compiler_path):
    """Return the linker used by the compiler at *compiler_path*, or None if
    it is not where a MinGW layout puts it."""
    toolchain_root = os.path.dirname(os.path.dirname(compiler_path))
    presumed_ld_path = os.path.join(toolchain_root, *REAL_LD_LAYOUT)
    _logger.info("Presuming ld location %s", presumed_ld_path)
    if os.path.isfile(presumed_ld_path):
        return presumed_ld_path
    return None


def get_ld_version(ld_path):
    """
    Query ``ld -v`` for its version.  The output looks like
    ``GNU ld (GNU Binutils) 2.25.1`` or
    ``GNU ld (GNU Binutils) 2.20.51.20100613``.

    Returns None, with a warning, if the linker cannot be run or its output
    cannot be parsed.
    """
    try:
        ld_version_string = subprocess.run(
            [ld_path, "-v"],
            capture_output=True,
            text=True,
            check=True,
            timeout=config.LINKER_CHECK_TIMEOUT,
        ).stdout
    except (OSError, subprocess.SubprocessError) as e:
        warnings.warn(
            f"cannot run `{ld_path} -v`: {e}", LinkerCheckWarning
        )
        return None

    try:
        return parse_version(ld_version_string)
    except VersionParseError as e:
        warnings.warn(
            f"cannot parse ld version string: `{ld_version_string}`. "
            f"Parsing exception: `{e}`",
            LinkerCheckWarning,
        )
        return None


def validate_linker(platform, compiler_path, flavor=None):
    """
    Fail with :class:`OutdatedLinkerError` if the linker used on 64-bit
    Windows is known to produce broken CUDA programs.  Builds with MSVC,
    which does not use the MinGW linker, are not checked.

    The check is best effort: if the linker or its version cannot be
    determined, a warning is issued and ``LinkerCheck.SKIPPED`` returned.
    """
    if not _is_applicable(platform, flavor):
        return LinkerCheck.NOT_APPLICABLE

    ld_path = get_real_ld_path(compiler_path) if compiler_path else None
    if ld_path is None:
        warnings.warn(
            "Cannot find ld.exe to check if it is new enough. If generated "
            "executables crash when making calls to CUDA, please see "
            f"{WINDOWS_HELP_PAGE}",
            LinkerCheckWarning,
        )
        return LinkerCheck.SKIPPED

    _logger.debug("Checking if ld.exe at %s is new enough", ld_path)
    ld_version = get_ld_version(ld_path)
    if ld_version is None:
        warnings.warn(
            "Unknown ld.exe version. If generated executables crash when "
            f"making calls to CUDA, please see {WINDOWS_HELP_PAGE}",
            LinkerCheckWarning,
        )
        return LinkerCheck.SKIPPED

    _logger.debug("Found ld.exe version: %s", ld_version)
    if version_lt(ld_version, MIN_LINKER_VERSION):
        raise OutdatedLinkerError(
            linker_bug_message(ld_path), ld_path=ld_path, version=ld_version
        )
    return LinkerCheck.OK
