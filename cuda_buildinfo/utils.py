# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: BSD-2-Clause

import os
import sys
import logging
import warnings
import traceback


def _readenv(name, ctor, default):
    value = os.environ.get(name)
    if value is None:
        return default() if callable(default) else default
    try:
        if ctor is bool:
            return value.lower() in {'1', "true"}
        return ctor(value)
    except Exception:
        warnings.warn(
            f"Environment variable '{name}' is defined but its associated "
            f"value '{value}' could not be parsed.\n"
            "The parse failed with exception:\n"
            f"{traceback.format_exc()}",
            RuntimeWarning
        )
        return default


def make_logger(name):
    from cuda_buildinfo import config

    logger = logging.getLogger(name)
    # is logging configured?
    if not logger.hasHandlers():
        # read user config
        lvl = str(config.CUDA_BUILDINFO_LOG_LEVEL).upper()
        lvl = getattr(logging, lvl, None)
        if not isinstance(lvl, int):
            # default to critical level
            lvl = logging.CRITICAL
        logger.setLevel(lvl)
        # did user specify a level?
        if config.CUDA_BUILDINFO_LOG_LEVEL:
            # create a simple handler that prints to stderr
            handler = logging.StreamHandler(sys.stderr)
            fmt = "== CUDA BUILDINFO [%(relativeCreated)d] %(levelname)5s -- %(message)s"
            handler.setFormatter(logging.Formatter(fmt=fmt))
            logger.addHandler(handler)
        else:
            # otherwise, put a null handler
            logger.addHandler(logging.NullHandler())
    return logger


def _find_first_valid_lazy(options, check):
    """Evaluate *options*, a sequence of ``(label, producer)`` pairs, in
    order.  ``check(label, producer)`` returns a value for an acceptable
    option and None otherwise.  The first accepted ``(label, value)`` is
    returned and the remaining producers are never called.  If nothing is
    accepted, return ``('<unknown>', None)``.
    """
    for label, producer in options:
        value = check(label, producer)
        if value is not None:
            return label, value
    return "<unknown>", None
