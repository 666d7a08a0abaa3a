# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: BSD-2-Clause

"""
Configuration read from the environment when the package is imported.

Values are module attributes so that callers (and the test suite) can adjust
them at runtime; every consumer reads ``config.<NAME>`` at call time.
"""

from cuda_buildinfo.utils import _readenv


def _parse_versions(value):
    return tuple(v.strip() for v in value.split(",") if v.strip())


# Log level for the stderr handler; empty disables logging output
CUDA_BUILDINFO_LOG_LEVEL = _readenv("CUDA_BUILDINFO_LOG_LEVEL", str, "")

# Primary override for the toolkit location
CUDA_PATH_ENVVAR = "CUDA_PATH"

# The CUDA compiler driver, expected in <toolkit>/bin
CUDA_COMPILER = "nvcc"

CUDA_DEFAULT_INSTALL_PATH = _readenv(
    "CUDA_BUILDINFO_DEFAULT_PATH", str, "/usr/local/cuda"
)

# Toolkit releases whose installers set CUDA_PATH_Vx_y, newest first
CUDA_LEGACY_VERSIONS = _readenv(
    "CUDA_BUILDINFO_LEGACY_VERSIONS",
    _parse_versions,
    ("8.0", "7.5", "7.0", "6.5", "6.0"),
)

# Seconds to wait for ``ld -v``
LINKER_CHECK_TIMEOUT = _readenv("CUDA_BUILDINFO_LINKER_TIMEOUT", float, 60.0)

CUSTOM_BUILDINFO_FILE = "cuda.buildinfo"
GENERATED_BUILDINFO_FILE = CUSTOM_BUILDINFO_FILE + ".generated"
