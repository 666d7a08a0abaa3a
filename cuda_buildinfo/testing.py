# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: BSD-2-Clause

import os
import stat
import sys
import tempfile
import unittest
from unittest import mock

from cuda_buildinfo import config
from cuda_buildinfo.cuda_paths import cuda_include_path, cuda_library_path
from cuda_buildinfo.platforms import Arch, OS, Platform

LINUX_64 = Platform(Arch.X86_64, OS.OTHER)
LINUX_32 = Platform(Arch.I386, OS.OTHER)
WINDOWS_64 = Platform(Arch.X86_64, OS.WINDOWS)
WINDOWS_32 = Platform(Arch.I386, OS.WINDOWS)
MACOS_64 = Platform(Arch.X86_64, OS.OSX)


def make_fake_toolkit(root, platform=LINUX_64, marker=True):
    """Create the directory layout of a toolkit installation at *root*.
    Without *marker* the installation lacks ``cuda.h`` and is invalid."""
    include_dir = cuda_include_path(platform, root)
    os.makedirs(include_dir, exist_ok=True)
    os.makedirs(cuda_library_path(platform, root), exist_ok=True)
    if marker:
        with open(os.path.join(include_dir, "cuda.h"), "w") as f:
            f.write("/* cuda.h */\n")
    return root


def make_fake_executable(directory, name):
    os.makedirs(directory, exist_ok=True)
    if sys.platform == "win32" and not name.endswith(".exe"):
        name += ".exe"
    path = os.path.join(directory, name)
    with open(path, "w") as f:
        f.write("#!/bin/sh\n")
    os.chmod(path, os.stat(path).st_mode | stat.S_IEXEC)
    return path


class CudaBuildInfoTestCase(unittest.TestCase):
    """
    For tests that probe the filesystem and the environment.

    Each test runs with a scratch directory in ``self.tmpdir``, without any
    CUDA_PATH variables, with an empty PATH and with the default install
    location pointing inside the scratch directory, so that a toolkit
    installed on the machine running the tests is never found.
    """

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmpdir = self._tmp.name

        self._default_install_path = config.CUDA_DEFAULT_INSTALL_PATH
        self._legacy_versions = config.CUDA_LEGACY_VERSIONS
        config.CUDA_DEFAULT_INSTALL_PATH = os.path.join(
            self.tmpdir, "usr", "local", "cuda"
        )
        config.CUDA_LEGACY_VERSIONS = ("8.0", "7.5", "7.0", "6.5", "6.0")

        empty_path = os.path.join(self.tmpdir, "empty-path")
        os.makedirs(empty_path)
        env = {
            k: v for k, v in os.environ.items() if not k.startswith("CUDA_PATH")
        }
        env["PATH"] = empty_path
        self._env_patch = mock.patch.dict(os.environ, env, clear=True)
        self._env_patch.start()

    def tearDown(self):
        self._env_patch.stop()
        config.CUDA_DEFAULT_INSTALL_PATH = self._default_install_path
        config.CUDA_LEGACY_VERSIONS = self._legacy_versions
        self._tmp.cleanup()

    def path(self, *parts):
        return os.path.join(self.tmpdir, *parts)

    def set_path(self, *directories):
        os.environ["PATH"] = os.pathsep.join(directories)


def skip_on_windows(reason):
    return unittest.skipIf(sys.platform == "win32", reason)
