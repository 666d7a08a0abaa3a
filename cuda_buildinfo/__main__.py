# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: BSD-2-Clause

import argparse
import dataclasses
import sys
from collections.abc import Mapping

from cuda_buildinfo import config
from cuda_buildinfo._version import __version__
from cuda_buildinfo.buildinfo import find_build_info_file, get_build_info
from cuda_buildinfo.configure import configure
from cuda_buildinfo.errors import CudaBuildInfoError
from cuda_buildinfo.platforms import CompilerIdentity, compiler_executable


def _default_ccompiler():
    # setuptools provides distutils on interpreters without it
    import setuptools  # noqa: F401
    from distutils.ccompiler import new_compiler
    from distutils.sysconfig import customize_compiler

    compiler = new_compiler()
    customize_compiler(compiler)
    return compiler


def _cmd_configure(args):
    ccompiler = _default_ccompiler()
    configure(
        profile=args.profile,
        compiler=CompilerIdentity.from_ccompiler(ccompiler),
        compiler_path=compiler_executable(ccompiler),
        directory=args.directory,
    )
    _kind, path = find_build_info_file(args.directory)
    print(f"Using build information from {path}")


def _cmd_show(args):
    info = get_build_info(args.directory)
    for field in dataclasses.fields(info):
        value = getattr(info, field.name)
        if isinstance(value, Mapping):
            print(f"{field.name}:")
            for key, item in value.items():
                key = getattr(key, "value", key)
                print(f"\t{key}: {item}")
        else:
            print(f"{field.name}: {' '.join(value)}")


def make_parser():
    parser = argparse.ArgumentParser(
        prog="cuda-buildinfo",
        description="Locate the CUDA toolkit and generate build options.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_configure = subparsers.add_parser(
        "configure",
        help=f"locate the toolkit and write {config.GENERATED_BUILDINFO_FILE}",
    )
    p_configure.add_argument(
        "--profile",
        action="store_true",
        help="configure for a profiling build (no rpath)",
    )
    p_configure.set_defaults(func=_cmd_configure)

    p_show = subparsers.add_parser(
        "show", help="print the build information in effect"
    )
    p_show.set_defaults(func=_cmd_show)

    for p in (p_configure, p_show):
        p.add_argument(
            "--directory",
            default=".",
            help="directory holding the buildinfo files (default: .)",
        )
    return parser


def main(argv=None):
    args = make_parser().parse_args(argv)
    try:
        args.func(args)
    except CudaBuildInfoError as e:
        print(e, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
