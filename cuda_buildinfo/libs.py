# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: BSD-2-Clause

"""CUDA Toolkit libraries needed when extensions are loaded at runtime.

On Windows the toolkit ships import libraries whose names differ from the
DLLs they refer to.  For example, on 32-bit Windows with toolkit 7.0,
``cudart.lib`` imports its functions from ``cudart32_70.dll``.  Loaders that
resolve libraries by name need the DLL names, which are read from the
import libraries with ``nm``:

    nvcuda.dll:
    00000000 i .idata$2
    00000000 i .idata$4
    00000000 I __IMPORT_DESCRIPTOR_nvcuda
             U __NULL_IMPORT_DESCRIPTOR
             U nvcuda_NULL_THUNK_DATA
"""

import os
import subprocess

from cuda_buildinfo.cuda_paths import cuda_library_path
from cuda_buildinfo.errors import ImportLibraryError
from cuda_buildinfo.platforms import OS
from cuda_buildinfo.utils import make_logger

_logger = make_logger(__name__)

_DYNAMIC_LIBRARIES = {
    OS.OSX: ("cudart",),
    OS.OTHER: (),
}


def import_library_to_dll_name(import_lib_path):
    """
    Return the name of the DLL an import library refers to, e.g.
    ``"C:/CUDA/lib/Win32/cudart.lib"`` -> ``"cudart32_70.dll"``, or None if
    ``nm`` reports no DLL.

    ``nm`` is expected in PATH; MinGW toolchains provide it.
    """
    try:
        out = subprocess.run(
            ["nm", import_lib_path],
            capture_output=True,
            text=True,
            check=True,
        ).stdout
    except (OSError, subprocess.CalledProcessError) as e:
        raise ImportLibraryError(
            f"Unable to read import library {import_lib_path} with nm: {e}"
        ) from e

    for line in out.splitlines():
        if ".dll" in line:
            return line.strip().rstrip(":")
    return None


def cuda_dynamic_libraries(platform, install_path, libraries):
    """
    Names (without extension) of the libraries that have to be loaded
    explicitly at runtime for *libraries* to work.
    """
    if platform.os is not OS.WINDOWS:
        return _DYNAMIC_LIBRARIES[platform.os]

    libdir = cuda_library_path(platform, install_path)
    names = []
    for lib in libraries:
        dll = import_library_to_dll_name(os.path.join(libdir, lib + ".lib"))
        if dll is None:
            _logger.info("No DLL found for import library %s", lib)
            continue
        names.append(os.path.splitext(dll)[0])
    return tuple(names)
