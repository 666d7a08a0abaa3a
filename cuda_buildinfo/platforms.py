# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: BSD-2-Clause

"""
Descriptions of the build target and of the host C compiler.

Both are supplied once per configuration run and never change afterwards.
"""

from __future__ import annotations

import enum
import os
import re
import shutil
import subprocess
import sys
import platform as _platform
from collections import namedtuple

from cuda_buildinfo.errors import VersionParseError
from cuda_buildinfo.version import parse_version


class Arch(enum.Enum):
    I386 = "i386"
    X86_64 = "x86_64"
    OTHER = "other"


class OS(enum.Enum):
    WINDOWS = "windows"
    OSX = "osx"
    OTHER = "other"


_MACHINE_TO_ARCH = {
    "i386": Arch.I386,
    "i486": Arch.I386,
    "i586": Arch.I386,
    "i686": Arch.I386,
    "x86": Arch.I386,
    "x86_64": Arch.X86_64,
    "amd64": Arch.X86_64,
}


class Platform(namedtuple("Platform", ["arch", "os"])):
    __slots__ = ()

    @classmethod
    def host(cls, machine=None, system=None, is_64bit=None):
        """
        The platform extensions are built for by the running interpreter.

        A 32-bit interpreter on a 64-bit x86 machine targets ``I386``.
        """
        if machine is None:
            machine = _platform.machine()
        if system is None:
            system = sys.platform
        if is_64bit is None:
            is_64bit = sys.maxsize > 2**32

        arch = _MACHINE_TO_ARCH.get(machine.lower(), Arch.OTHER)
        if arch is Arch.X86_64 and not is_64bit:
            arch = Arch.I386

        if system == "win32":
            os_ = OS.WINDOWS
        elif system == "darwin":
            os_ = OS.OSX
        else:
            os_ = OS.OTHER
        return cls(arch, os_)


class CompilerFlavor(enum.Enum):
    GCC = "gcc"
    CLANG = "clang"
    MSVC = "msvc"
    OTHER = "other"


_MSC_VERSION_RE = re.compile(r"MSC v\.(\d+)")


def _run_compiler(executable, flag):
    try:
        return subprocess.run(
            [executable, flag],
            capture_output=True,
            text=True,
            check=True,
            timeout=60,
        ).stdout
    except (OSError, subprocess.SubprocessError):
        return ""


def compiler_executable(ccompiler):
    """Absolute path of the C compiler driven by a setuptools compiler
    object, or None if it cannot be located on PATH."""
    command = getattr(ccompiler, "compiler_so", None)
    if not command:
        return None
    return shutil.which(command[0])


class CompilerIdentity(namedtuple("CompilerIdentity", ["flavor", "version"])):
    __slots__ = ()

    @classmethod
    def unknown(cls):
        return cls(CompilerFlavor.OTHER, ())

    @classmethod
    def from_ccompiler(cls, ccompiler):
        """Identify the compiler behind a setuptools ``CCompiler`` instance."""
        if ccompiler.compiler_type == "msvc":
            # The interpreter and its extensions are built with the same MSVC
            match = _MSC_VERSION_RE.search(sys.version)
            if match is None:
                return cls(CompilerFlavor.MSVC, ())
            msc_ver = int(match.group(1))
            return cls(CompilerFlavor.MSVC, (msc_ver // 100, msc_ver % 100))

        command = getattr(ccompiler, "compiler_so", None)
        if not command:
            return cls.unknown()
        executable = command[0]

        banner = _run_compiler(executable, "--version").lower()
        name = os.path.basename(executable).lower()
        if "clang" in banner or "clang" in name:
            flavor = CompilerFlavor.CLANG
        elif "gcc" in name or "free software foundation" in banner:
            flavor = CompilerFlavor.GCC
        else:
            flavor = CompilerFlavor.OTHER

        try:
            version = parse_version(_run_compiler(executable, "-dumpversion"))
        except VersionParseError:
            version = ()
        return cls(flavor, version)
