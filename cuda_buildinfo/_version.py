# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: BSD-2-Clause

import importlib.resources

__version__ = (
    importlib.resources.files("cuda_buildinfo")
    .joinpath("VERSION")
    .read_text()
    .strip()
)
