# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: BSD-2-Clause

import types
import unittest
from unittest import mock

from cuda_buildinfo.platforms import (
    Arch,
    CompilerFlavor,
    CompilerIdentity,
    OS,
    Platform,
    compiler_executable,
)

GCC_BANNER = """gcc (Ubuntu 11.4.0-1ubuntu1~22.04) 11.4.0
Copyright (C) 2021 Free Software Foundation, Inc.
This is free software; see the source for copying conditions.
"""

CLANG_BANNER = """Apple clang version 15.0.0 (clang-1500.3.9.4)
Target: arm64-apple-darwin23.4.0
"""


def fake_compiler(compiler_type="unix", executable="gcc"):
    compiler_so = [executable, "-O2"] if executable else []
    return types.SimpleNamespace(
        compiler_type=compiler_type, compiler_so=compiler_so
    )


def fake_run(banner, version):
    def run(executable, flag):
        return banner if flag == "--version" else version

    return run


class TestHostPlatform(unittest.TestCase):
    def test_mapping(self):
        cases = [
            (("x86_64", "linux", True), Platform(Arch.X86_64, OS.OTHER)),
            (("AMD64", "win32", True), Platform(Arch.X86_64, OS.WINDOWS)),
            (("x86", "win32", False), Platform(Arch.I386, OS.WINDOWS)),
            (("i686", "linux", False), Platform(Arch.I386, OS.OTHER)),
            (("x86_64", "darwin", True), Platform(Arch.X86_64, OS.OSX)),
            (("arm64", "darwin", True), Platform(Arch.OTHER, OS.OSX)),
            (("aarch64", "linux", True), Platform(Arch.OTHER, OS.OTHER)),
            (("ppc64le", "linux", True), Platform(Arch.OTHER, OS.OTHER)),
            (("x86_64", "freebsd13", True), Platform(Arch.X86_64, OS.OTHER)),
        ]
        for args, expected in cases:
            with self.subTest(args=args):
                self.assertEqual(Platform.host(*args), expected)

    def test_32bit_interpreter_on_64bit_machine(self):
        self.assertEqual(
            Platform.host("AMD64", "win32", is_64bit=False),
            Platform(Arch.I386, OS.WINDOWS),
        )

    def test_defaults(self):
        platform = Platform.host()
        self.assertIsInstance(platform.arch, Arch)
        self.assertIsInstance(platform.os, OS)


class TestCompilerIdentity(unittest.TestCase):
    def identify(self, ccompiler, banner="", version=""):
        with mock.patch(
            "cuda_buildinfo.platforms._run_compiler",
            side_effect=fake_run(banner, version),
        ):
            return CompilerIdentity.from_ccompiler(ccompiler)

    def test_gcc(self):
        identity = self.identify(fake_compiler(), GCC_BANNER, "11\n")
        self.assertEqual(identity, CompilerIdentity(CompilerFlavor.GCC, (11,)))

    def test_gcc_by_banner(self):
        identity = self.identify(
            fake_compiler(executable="/usr/bin/cc"), GCC_BANNER, "7.5.0\n"
        )
        self.assertEqual(
            identity, CompilerIdentity(CompilerFlavor.GCC, (7, 5, 0))
        )

    def test_mingw_gcc(self):
        identity = self.identify(
            fake_compiler("mingw32", "x86_64-w64-mingw32-gcc"), "", "13.2.0"
        )
        self.assertEqual(identity.flavor, CompilerFlavor.GCC)

    def test_clang(self):
        identity = self.identify(
            fake_compiler(executable="cc"), CLANG_BANNER, "15.0.0"
        )
        self.assertEqual(
            identity, CompilerIdentity(CompilerFlavor.CLANG, (15, 0, 0))
        )

    def test_unknown_compiler(self):
        identity = self.identify(fake_compiler(executable="icx"), "", "")
        self.assertEqual(identity, CompilerIdentity.unknown())

    def test_unparseable_version(self):
        identity = self.identify(fake_compiler(), GCC_BANNER, "gcc-11-posix")
        self.assertEqual(identity, CompilerIdentity(CompilerFlavor.GCC, ()))

    def test_no_command(self):
        identity = self.identify(fake_compiler(executable=None))
        self.assertEqual(identity, CompilerIdentity.unknown())

    def test_msvc(self):
        ccompiler = types.SimpleNamespace(compiler_type="msvc")
        version = "3.12.3 (tags/v3.12.3:f6650f9, Apr  9 2024) [MSC v.1938 64 bit]"
        with mock.patch("cuda_buildinfo.platforms.sys.version", version):
            identity = CompilerIdentity.from_ccompiler(ccompiler)
        self.assertEqual(
            identity, CompilerIdentity(CompilerFlavor.MSVC, (19, 38))
        )

    def test_msvc_unknown_version(self):
        ccompiler = types.SimpleNamespace(compiler_type="msvc")
        with mock.patch("cuda_buildinfo.platforms.sys.version", "3.12.3"):
            identity = CompilerIdentity.from_ccompiler(ccompiler)
        self.assertEqual(identity, CompilerIdentity(CompilerFlavor.MSVC, ()))


class TestCompilerExecutable(unittest.TestCase):
    def test_which(self):
        with mock.patch(
            "cuda_buildinfo.platforms.shutil.which", return_value="/usr/bin/gcc"
        ) as which:
            self.assertEqual(compiler_executable(fake_compiler()), "/usr/bin/gcc")
        which.assert_called_once_with("gcc")

    def test_no_command(self):
        self.assertIsNone(compiler_executable(types.SimpleNamespace()))


if __name__ == "__main__":
    unittest.main()
