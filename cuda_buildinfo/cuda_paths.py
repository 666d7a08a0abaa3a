# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: BSD-2-Clause

import os
import stat
import shutil
import functools
from collections import namedtuple

from cuda_buildinfo import config
from cuda_buildinfo.errors import CandidateUnavailable, CudaToolkitNotFoundError
from cuda_buildinfo.platforms import Arch, OS
from cuda_buildinfo.utils import make_logger, _find_first_valid_lazy

_logger = make_logger(__name__)

Candidate = namedtuple("Candidate", ["by", "locate"])
CandidateResult = namedtuple("CandidateResult", ["path", "valid", "reason"])

# A header whose presence marks the root of a toolkit installation
CUDA_MARKER_FILE = "cuda.h"

_LIBRARY_SUBDIRS = {
    (OS.WINDOWS, Arch.I386): ("lib", "Win32"),
    (OS.WINDOWS, Arch.X86_64): ("lib", "x64"),
    (OS.WINDOWS, Arch.OTHER): ("lib",),
    # macOS does not distinguish 32- and 64-bit library paths
    (OS.OSX, Arch.I386): ("lib",),
    (OS.OSX, Arch.X86_64): ("lib",),
    (OS.OSX, Arch.OTHER): ("lib",),
    (OS.OTHER, Arch.I386): ("lib",),
    (OS.OTHER, Arch.X86_64): ("lib64",),
    (OS.OTHER, Arch.OTHER): ("lib",),
}

CUDA_NOT_FOUND_MSG = "\n".join(
    [
        "*" * 80,
        "",
        "The configuration process failed to locate your CUDA installation. "
        "Ensure that you have installed both the developer driver and "
        "toolkit, available from:",
        "",
        "> http://developer.nvidia.com/cuda-downloads",
        "",
        "and make sure that `nvcc` is available in your PATH, or set the "
        "CUDA_PATH environment variable appropriately. Check the above output "
        "log and run the command directly to ensure it can be located.",
        "",
        "If you have a non-standard installation, you can add additional "
        "search paths using `build_ext --include-dirs` and `--library-dirs`. Note "
        "that 64-bit Linux flavours often require both `lib64` and `lib` "
        "library paths, in that order.",
        "",
        "*" * 80,
    ]
)


def cuda_include_path(platform, install_path):
    """Location of the headers relative to the toolkit root."""
    return os.path.join(install_path, "include")


def cuda_library_path(platform, install_path):
    """Location of the libraries relative to the toolkit root."""
    subdirs = _LIBRARY_SUBDIRS[(platform.os, platform.arch)]
    return os.path.join(install_path, *subdirs)


def legacy_envvar(version):
    """``"7.5"`` -> ``"CUDA_PATH_V7_5"``"""
    return f"{config.CUDA_PATH_ENVVAR}_V{version.replace('.', '_')}"


def get_env_path(name):
    value = os.environ.get(name)
    if not value:
        raise CandidateUnavailable(f"environment variable {name} is not set")
    return value


def get_compiler_install_path():
    """Return the toolkit root containing the ``nvcc`` found in PATH."""
    nvcc_path = shutil.which(config.CUDA_COMPILER)
    if nvcc_path is None:
        raise CandidateUnavailable(f"not found: {config.CUDA_COMPILER}")
    # nvcc lives in TOOLKIT/bin; we want the TOOLKIT part
    return os.path.dirname(os.path.dirname(nvcc_path))


def default_install_path(platform):
    return config.CUDA_DEFAULT_INSTALL_PATH


def candidate_install_paths(platform):
    """
    Return the list of places a toolkit may be installed, in the order they
    are searched:

    1. the CUDA_PATH environment variable,
    2. the installation containing ``nvcc`` in PATH,
    3. the default install location,
    4. CUDA_PATH_Vx_y environment variables of older toolkit releases.

    Nothing is evaluated here; each entry's ``locate`` runs only when the
    search reaches it.
    """
    default_path = default_install_path(platform)
    candidates = [
        Candidate(
            f"environment variable {config.CUDA_PATH_ENVVAR}",
            functools.partial(get_env_path, config.CUDA_PATH_ENVVAR),
        ),
        Candidate(
            f"{config.CUDA_COMPILER} compiler executable in PATH",
            get_compiler_install_path,
        ),
        Candidate(
            f"default install location ({default_path})",
            lambda: default_path,
        ),
    ]
    for version in config.CUDA_LEGACY_VERSIONS:
        name = legacy_envvar(version)
        candidates.append(
            Candidate(
                f"environment variable {name}",
                functools.partial(get_env_path, name),
            )
        )
    return candidates


def _is_file(path):
    try:
        st = os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    return stat.S_ISREG(st.st_mode)


def validate_location(platform, path):
    """
    Check whether *path* looks like the root of a toolkit installation.

    Errors other than a missing file (permissions, malformed paths) are raised
    to the caller.
    """
    if not path:
        _logger.info("Path rejected: empty path")
        return False
    marker = os.path.join(cuda_include_path(platform, path), CUDA_MARKER_FILE)
    exists = _is_file(marker)
    if exists:
        _logger.info("Path accepted: %s", path)
    else:
        _logger.info("Path rejected: %s\nDoes not exist: %s", path, marker)
    return exists


def check_candidate(platform, candidate):
    """
    Locate and validate a single candidate.

    Failures while producing the path or inspecting the filesystem make the
    candidate invalid; they are never raised.
    """
    try:
        path = candidate.locate()
    except (OSError, ValueError) as e:
        _logger.info("%s", e)
        return CandidateResult(None, False, str(e))

    try:
        valid = validate_location(platform, path)
    except (OSError, ValueError) as e:
        _logger.info("Path rejected: %s\n%s", path, e)
        return CandidateResult(path, False, str(e))

    if valid:
        return CandidateResult(path, True, None)
    return CandidateResult(path, False, f"{CUDA_MARKER_FILE} not found")


def find_first_valid_location(platform, candidates):
    """Return the path of the first valid candidate, or None."""

    def check(by, locate):
        _logger.info("checking for %s", by)
        result = check_candidate(platform, Candidate(by, locate))
        return result.path if result.valid else None

    _by, path = _find_first_valid_lazy(candidates, check)
    return path


def find_cuda_install_path(platform):
    """
    Search for the toolkit; raise :class:`CudaToolkitNotFoundError` with
    instructions for the user if it cannot be found.
    """
    candidates = candidate_install_paths(platform)
    path = find_first_valid_location(platform, candidates)
    if path is None:
        raise CudaToolkitNotFoundError(CUDA_NOT_FOUND_MSG)
    _logger.info("Found CUDA toolkit at: %s", path)
    return path
