# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: BSD-2-Clause

"""
Compiler, linker and preprocessor options needed to build against a CUDA
toolkit installation, and their on-disk form.

The options are derived from the toolkit root alone: every include and library
directory is the root plus a platform-dependent suffix.  They are stored in
``cuda.buildinfo.generated``; a ``cuda.buildinfo`` written by the user takes
precedence over the generated file.
"""

from __future__ import annotations

import configparser
import functools
import os
import re
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Dict, Optional, Sequence, Tuple

from cuda_buildinfo import config
from cuda_buildinfo.cuda_paths import cuda_include_path, cuda_library_path
from cuda_buildinfo.errors import BuildInfoFormatError, BuildInfoMissingError
from cuda_buildinfo.libs import cuda_dynamic_libraries
from cuda_buildinfo.platforms import (
    Arch,
    CompilerFlavor,
    CompilerIdentity,
    OS,
    Platform,
)
from cuda_buildinfo.utils import make_logger, _find_first_valid_lazy
from cuda_buildinfo.version import version_ge, version_int

_logger = make_logger(__name__)

CPP_OPTIONS_FIELD = "x-extra-cpp-options"

# Compilers from this version on get exhaustive-match checks in the bindings
EMPTY_CASE_MIN_COMPILER_VERSION = (7, 8)

# Static libraries on macOS; the runtime and the driver API elsewhere
_LIBRARIES = {
    OS.WINDOWS: ("cudart", "cuda"),
    OS.OSX: ("cudadevrt", "cudart_static"),
    OS.OTHER: ("cudart", "cuda"),
}

_FRAMEWORKS = {
    OS.WINDOWS: (),
    OS.OSX: ("CUDA",),
    OS.OTHER: (),
}

_ARCH_FLAGS = {
    Arch.I386: "-m32",
    Arch.X86_64: "-m64",
    Arch.OTHER: None,
}

# The macOS blocks extension uses a keyword that clashes with the CUDA API
_OS_CPP_OPTIONS = {
    OS.WINDOWS: (),
    OS.OSX: ("-U__BLOCKS__",),
    OS.OTHER: (),
}


def _major(version):
    return str(version[0]) if version else "1"


# Version macros the host compiler predefines; an external preprocessor run
# has to be told about them explicitly
COMPILER_DEFINES = {
    CompilerFlavor.GCC: ("__GNUC__", _major),
    CompilerFlavor.CLANG: ("__clang_major__", _major),
    CompilerFlavor.MSVC: ("_MSC_VER", version_int),
    CompilerFlavor.OTHER: None,
}

_SECTION = "buildinfo"
_CUSTOM_SECTION = "custom"
_OPTIONS_PREFIX = "options."

_LIST_FIELDS = (
    ("include-dirs", "include_dirs"),
    ("extra-lib-dirs", "extra_lib_dirs"),
    ("extra-libraries", "extra_libraries"),
    ("extra-dynamic-libraries", "extra_dynamic_libraries"),
    ("frameworks", "frameworks"),
    ("cc-options", "cc_options"),
    ("ld-options", "ld_options"),
)


_MAPPING_FIELDS = ("compiler_options", "custom_fields")


@dataclass(frozen=True)
class BuildOptionSet:
    """
    Options for building and linking against the toolkit.

    ``compiler_options`` holds the flags passed to a particular compiler
    driver, keyed by :class:`CompilerFlavor`; ``custom_fields`` holds free-form
    entries for other tools, such as :data:`CPP_OPTIONS_FIELD`.  Both are
    read-only mappings, so instances are immutable and hashable.
    """

    include_dirs: Tuple[str, ...] = ()
    extra_lib_dirs: Tuple[str, ...] = ()
    extra_libraries: Tuple[str, ...] = ()
    extra_dynamic_libraries: Tuple[str, ...] = ()
    frameworks: Tuple[str, ...] = ()
    cc_options: Tuple[str, ...] = ()
    ld_options: Tuple[str, ...] = ()
    compiler_options: Dict[CompilerFlavor, Tuple[str, ...]] = field(
        default_factory=dict
    )
    custom_fields: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # the mappings are exposed read-only
        for name in _MAPPING_FIELDS:
            value = MappingProxyType(dict(getattr(self, name)))
            object.__setattr__(self, name, value)

    def __hash__(self):
        values = []
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in _MAPPING_FIELDS:
                value = frozenset(value.items())
            values.append(value)
        return hash(tuple(values))


def _preprocessor_options(platform: Platform, compiler: CompilerIdentity):
    opts = ["-E"]
    arch_flag = _ARCH_FLAGS[platform.arch]
    if arch_flag is not None:
        opts.append(arch_flag)
    if version_ge(compiler.version, EMPTY_CASE_MIN_COMPILER_VERSION):
        opts.append("-DUSE_EMPTY_CASE")
    opts.extend(_OS_CPP_OPTIONS[platform.os])
    return opts


def library_build_info(
    profile: bool,
    install_path: str,
    platform: Platform,
    compiler: CompilerIdentity,
    dynamic_libraries: Optional[Sequence[str]] = None,
) -> BuildOptionSet:
    """
    Synthesize the options for building against the toolkit at
    *install_path*.

    :param profile: True for profiling builds, which must not embed an rpath
    :param dynamic_libraries: names for ``extra_dynamic_libraries``; looked up
        with :func:`cuda_dynamic_libraries` when not given, which runs ``nm``
        on Windows
    """
    include_dir = cuda_include_path(platform, install_path)
    lib_dir = cuda_library_path(platform, install_path)

    cc_options = (f"-I{include_dir}",)
    ld_options = (f"-L{lib_dir}",)
    libraries = _LIBRARIES[platform.os]

    compiler_options = {}
    if platform.os is not OS.WINDOWS:
        flags = cc_options + ld_options
        if not profile:
            flags += (f"-Wl,-rpath,{lib_dir}",)
        compiler_options[compiler.flavor] = flags

    cpp_opts = " ".join(
        f"--cppopts={opt}" for opt in _preprocessor_options(platform, compiler)
    )

    if dynamic_libraries is None:
        dynamic_libraries = cuda_dynamic_libraries(
            platform, install_path, libraries
        )

    return BuildOptionSet(
        include_dirs=(include_dir,),
        extra_lib_dirs=(lib_dir,),
        extra_libraries=libraries,
        extra_dynamic_libraries=tuple(dynamic_libraries),
        frameworks=_FRAMEWORKS[platform.os],
        cc_options=cc_options,
        ld_options=ld_options,
        compiler_options=compiler_options,
        custom_fields={CPP_OPTIONS_FIELD: cpp_opts},
    )


def compiler_defines(compiler: CompilerIdentity):
    entry = COMPILER_DEFINES[compiler.flavor]
    if entry is None:
        return []
    macro, fmt = entry
    return [f"-D{macro}={fmt(compiler.version)}"]


def cpp_options(info: BuildOptionSet, compiler: CompilerIdentity):
    """
    Preprocessor options for generating bindings from the toolkit headers:
    the compiler's version macro, the include directories and the ``-D``,
    ``-I`` and ``-U`` entries of ``cc_options``, without duplicates.
    """
    opts = compiler_defines(compiler)
    opts += [f"-I{d}" for d in info.include_dirs]
    opts += [o for o in info.cc_options if o[:2] in ("-D", "-I", "-U")]
    return list(dict.fromkeys(opts))


def preprocessor_arguments(info: BuildOptionSet, compiler: CompilerIdentity):
    """Full ``--cppopts=`` argument list for the bindings generator."""
    args = info.custom_fields.get(CPP_OPTIONS_FIELD, "").split()
    args += [f"--cppopts={opt}" for opt in cpp_options(info, compiler)]
    return args


# Value lines starting with a comment prefix get one extra leading backslash
_ESCAPED_LINE_RE = re.compile(r"\\*[#;]")


def _escape(line):
    return "\\" + line if _ESCAPED_LINE_RE.match(line) else line


def _unescape(line):
    if line.startswith("\\") and _ESCAPED_LINE_RE.match(line):
        return line[1:]
    return line


def _join(values):
    return "\n".join(_escape(value) for value in values)


def _split(value):
    return tuple(
        _unescape(line.strip()) for line in value.splitlines() if line.strip()
    )


def _new_parser():
    parser = configparser.ConfigParser(interpolation=None)
    # Keys of custom fields are case sensitive
    parser.optionxform = str
    return parser


def write_build_info(path, info: BuildOptionSet):
    parser = _new_parser()
    parser[_SECTION] = {
        key: _join(getattr(info, attr)) for key, attr in _LIST_FIELDS
    }
    for flavor, flags in info.compiler_options.items():
        parser[_OPTIONS_PREFIX + flavor.value] = {"flags": _join(flags)}
    parser[_CUSTOM_SECTION] = {
        key: _join(value.split("\n")) for key, value in info.custom_fields.items()
    }
    with open(path, "w") as f:
        parser.write(f)


def _from_parser(parser):
    lists = {}
    if parser.has_section(_SECTION):
        section = parser[_SECTION]
        lists = {
            attr: _split(section.get(key, "")) for key, attr in _LIST_FIELDS
        }

    compiler_options = {}
    for name in parser.sections():
        if name.startswith(_OPTIONS_PREFIX):
            flavor = CompilerFlavor(name[len(_OPTIONS_PREFIX):])
            compiler_options[flavor] = _split(parser[name].get("flags", ""))

    custom_fields = {}
    if parser.has_section(_CUSTOM_SECTION):
        for key, value in parser[_CUSTOM_SECTION].items():
            custom_fields[key] = "\n".join(
                _unescape(line) for line in value.split("\n")
            )

    return BuildOptionSet(
        compiler_options=compiler_options,
        custom_fields=custom_fields,
        **lists,
    )


def read_build_info(path) -> BuildOptionSet:
    """
    Load a buildinfo file written by :func:`write_build_info` or by hand.

    :raises BuildInfoFormatError: if the file is not valid INI or names an
        unknown compiler flavor
    """
    parser = _new_parser()
    try:
        with open(path) as f:
            parser.read_file(f)
        return _from_parser(parser)
    except (configparser.Error, ValueError) as e:
        raise BuildInfoFormatError(
            f"Cannot read build information from {path}: {e}"
        ) from e


def store_build_info(path, info: BuildOptionSet):
    _logger.info("Storing parameters to %s", path)
    write_build_info(path, info)


def _existing_file(label, producer):
    path = producer()
    return path if os.path.isfile(path) else None


def find_build_info_file(directory="."):
    """
    Return ``(kind, path)`` of the buildinfo file to use: the user-provided
    file if present, otherwise the generated one, otherwise
    ``('<unknown>', None)``.
    """
    options = [
        (
            "user-provided",
            functools.partial(
                os.path.join, directory, config.CUSTOM_BUILDINFO_FILE
            ),
        ),
        (
            "generated",
            functools.partial(
                os.path.join, directory, config.GENERATED_BUILDINFO_FILE
            ),
        ),
    ]
    return _find_first_valid_lazy(options, _existing_file)


def get_build_info(directory=".") -> BuildOptionSet:
    """
    Load the build information, preferring ``cuda.buildinfo`` over
    ``cuda.buildinfo.generated``.
    """
    kind, path = find_build_info_file(directory)
    if kind == "user-provided":
        _logger.info(
            "The user-provided buildinfo from file %s will be used. To use "
            "default settings, delete this file.",
            path,
        )
    elif kind == "generated":
        _logger.info("Using build information from '%s'.", path)
        _logger.info(
            "Provide a '%s' file to override this behaviour.",
            config.CUSTOM_BUILDINFO_FILE,
        )
    else:
        raise BuildInfoMissingError(
            f"Unexpected failure. Neither the default "
            f"{config.GENERATED_BUILDINFO_FILE} nor custom "
            f"{config.CUSTOM_BUILDINFO_FILE} exist."
        )
    return read_build_info(path)
