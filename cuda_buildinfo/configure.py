# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: BSD-2-Clause

"""
Configuration step and its setuptools integration.

Use :class:`CUDABuildExt` as the ``build_ext`` command of a package with
extensions that link against CUDA::

    from cuda_buildinfo.configure import CUDABuildExt

    setup(..., cmdclass={"build_ext": CUDABuildExt})
"""

import os

from setuptools.command.build_ext import build_ext
from setuptools.errors import SetupError

from cuda_buildinfo import config
from cuda_buildinfo.buildinfo import (
    get_build_info,
    library_build_info,
    store_build_info,
)
from cuda_buildinfo.cuda_paths import find_cuda_install_path
from cuda_buildinfo.errors import CudaBuildInfoError, CudaToolkitNotFoundError
from cuda_buildinfo.linker import validate_linker
from cuda_buildinfo.platforms import (
    CompilerIdentity,
    Platform,
    compiler_executable,
)


def generate_and_store_build_info(profile, platform, compiler, path):
    """Locate the toolkit and store the options for it at *path*."""
    install_path = find_cuda_install_path(platform)
    info = library_build_info(profile, install_path, platform, compiler)
    store_build_info(path, info)
    return info


def configure(
    profile=False,
    platform=None,
    compiler=None,
    compiler_path=None,
    directory=".",
):
    """
    Run the configuration step and return the build information to use.

    The linker check runs even if the toolkit was not found, so that both
    problems are reported by a single run; a missing toolkit is raised after
    the check.
    """
    if platform is None:
        platform = Platform.host()
    if compiler is None:
        compiler = CompilerIdentity.unknown()

    generated = os.path.join(directory, config.GENERATED_BUILDINFO_FILE)
    toolkit_error = None
    try:
        generate_and_store_build_info(profile, platform, compiler, generated)
    except CudaToolkitNotFoundError as e:
        toolkit_error = e

    validate_linker(platform, compiler_path, compiler.flavor)
    if toolkit_error is not None:
        raise toolkit_error

    return get_build_info(directory)


def _extend_unique(target, values):
    for value in values:
        if value not in target:
            target.append(value)


def apply_build_info(extension, info, flavor):
    """Add the options of *info* for compiler *flavor* to a setuptools
    ``Extension``."""
    _extend_unique(extension.include_dirs, info.include_dirs)
    _extend_unique(extension.library_dirs, info.extra_lib_dirs)
    _extend_unique(extension.libraries, info.extra_libraries)

    flags = info.compiler_options.get(flavor, ())
    link_flags = [f for f in flags if f.startswith(("-L", "-Wl,"))]
    compile_flags = [f for f in flags if f not in link_flags]
    _extend_unique(extension.extra_compile_args, compile_flags)
    _extend_unique(extension.extra_link_args, link_flags)

    # "-framework" repeats, so these are compared as pairs
    args = extension.extra_link_args
    present = set(zip(args, args[1:]))
    for framework in info.frameworks:
        if ("-framework", framework) not in present:
            args.extend(["-framework", framework])


class CUDABuildExt(build_ext):
    user_options = build_ext.user_options + [
        ("cuda-profile", None, "Configure CUDA for a profiling build"),
        ("cuda-buildinfo-dir=", None, "Directory of the cuda.buildinfo files"),
    ]
    boolean_options = build_ext.boolean_options + ["cuda-profile"]

    def initialize_options(self):
        super().initialize_options()
        self.cuda_profile = 0
        self.cuda_buildinfo_dir = None

    def finalize_options(self):
        super().finalize_options()
        if self.cuda_buildinfo_dir is None:
            self.cuda_buildinfo_dir = "."

    def build_extensions(self):
        compiler = CompilerIdentity.from_ccompiler(self.compiler)
        try:
            info = configure(
                profile=bool(self.cuda_profile),
                compiler=compiler,
                compiler_path=compiler_executable(self.compiler),
                directory=self.cuda_buildinfo_dir,
            )
        except CudaBuildInfoError as e:
            raise SetupError(str(e)) from e

        for ext in self.extensions:
            apply_build_info(ext, info, compiler.flavor)
        super().build_extensions()
