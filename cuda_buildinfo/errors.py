# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: BSD-2-Clause

"""
Errors and warnings raised while probing for the CUDA toolkit.

Subclasses of :class:`CudaBuildInfoError` are fatal: the configuration step
cannot continue and the message attached to the exception is the text shown
to the user. Everything recoverable is reported with :func:`warnings.warn`
using one of the warning categories below.
"""


class CudaBuildInfoError(RuntimeError):
    pass


class CudaToolkitNotFoundError(CudaBuildInfoError):
    pass


class OutdatedLinkerError(CudaBuildInfoError):
    def __init__(self, msg, ld_path, version):
        super().__init__(msg)
        self.ld_path = ld_path
        self.version = version


class BuildInfoMissingError(CudaBuildInfoError):
    pass


class BuildInfoFormatError(CudaBuildInfoError):
    pass


class ImportLibraryError(CudaBuildInfoError):
    pass


class CandidateUnavailable(OSError):
    """A candidate location could not be produced (unset variable, missing
    executable, ...)."""


class VersionParseError(ValueError):
    pass


class CudaBuildInfoWarning(UserWarning):
    pass


class LinkerCheckWarning(CudaBuildInfoWarning):
    pass
