# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: BSD-2-Clause

from cuda_buildinfo._version import __version__
from cuda_buildinfo.buildinfo import (
    BuildOptionSet,
    get_build_info,
    library_build_info,
)
from cuda_buildinfo.configure import configure
from cuda_buildinfo.cuda_paths import find_cuda_install_path
from cuda_buildinfo.errors import (
    CudaBuildInfoError,
    CudaToolkitNotFoundError,
    OutdatedLinkerError,
)
from cuda_buildinfo.linker import validate_linker
from cuda_buildinfo.platforms import (
    Arch,
    CompilerFlavor,
    CompilerIdentity,
    OS,
    Platform,
)

__all__ = [
    "__version__",
    "Arch",
    "BuildOptionSet",
    "CompilerFlavor",
    "CompilerIdentity",
    "CudaBuildInfoError",
    "CudaToolkitNotFoundError",
    "OS",
    "OutdatedLinkerError",
    "Platform",
    "configure",
    "find_cuda_install_path",
    "get_build_info",
    "library_build_info",
    "validate_linker",
]
