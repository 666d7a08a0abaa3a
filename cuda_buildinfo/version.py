# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: BSD-2-Clause

"""Parsing and comparison of dotted version strings reported by tools."""

from __future__ import annotations

from typing import Sequence, Tuple

from cuda_buildinfo.errors import VersionParseError

# binutils releases before this one mis-link MSVC import libraries on x64
MIN_LINKER_VERSION = (2, 25, 1)


def parse_version(text: str) -> Tuple[int, ...]:
    """
    Parse the version from the output of a ``--version``-style query.

    Only the last whitespace-delimited token is considered, so both
    ``"GNU ld (GNU Binutils) 2.25.1"`` and ``"2.25.1"`` give ``(2, 25, 1)``.

    :raises VersionParseError: if there is no token, or a dotted component is
        empty or not a non-negative decimal integer.
    """
    tokens = text.split()
    if not tokens:
        raise VersionParseError(f"no version found in {text!r}")
    version_text = tokens[-1]
    parts = version_text.split(".")
    for part in parts:
        if not (part.isascii() and part.isdigit()):
            raise VersionParseError(
                f"invalid component {part!r} in version {version_text!r}"
            )
    return tuple(int(part) for part in parts)


def _padded(a: Sequence[int], b: Sequence[int]):
    width = max(len(a), len(b))
    return (
        tuple(a) + (0,) * (width - len(a)),
        tuple(b) + (0,) * (width - len(b)),
    )


def version_lt(a: Sequence[int], b: Sequence[int]) -> bool:
    """Return True if version *a* is older than *b*.  The shorter version is
    padded with zeros, so ``(2, 25)`` and ``(2, 25, 0)`` are equal."""
    a, b = _padded(a, b)
    return a < b


def version_ge(a: Sequence[int], b: Sequence[int]) -> bool:
    return not version_lt(a, b)


def version_int(version: Sequence[int]) -> str:
    """Render a version as ``<major><minor:02d>``, e.g. ``(19, 29)`` as
    ``"1929"``."""
    if not version:
        return "1"
    if len(version) == 1:
        return str(version[0])
    return "%d%02d" % (version[0], version[1])
