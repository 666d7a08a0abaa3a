# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: BSD-2-Clause

import logging
import os
import unittest
from unittest import mock

from cuda_buildinfo import config
from cuda_buildinfo.config import _parse_versions
from cuda_buildinfo.utils import _find_first_valid_lazy, _readenv, make_logger


class TestReadEnv(unittest.TestCase):
    @mock.patch.dict(os.environ, {}, clear=True)
    def test_unset(self):
        self.assertEqual(_readenv("CUDA_BUILDINFO_TEST", float, 60.0), 60.0)
        self.assertEqual(_readenv("CUDA_BUILDINFO_TEST", str, lambda: "x"), "x")

    @mock.patch.dict(os.environ, {"CUDA_BUILDINFO_TEST": "2.5"})
    def test_parsed(self):
        self.assertEqual(_readenv("CUDA_BUILDINFO_TEST", float, 60.0), 2.5)

    @mock.patch.dict(os.environ, {"CUDA_BUILDINFO_TEST": "True"})
    def test_bool(self):
        self.assertIs(_readenv("CUDA_BUILDINFO_TEST", bool, False), True)

    @mock.patch.dict(os.environ, {"CUDA_BUILDINFO_TEST": "soon"})
    def test_unparseable(self):
        with self.assertWarns(RuntimeWarning) as w:
            value = _readenv("CUDA_BUILDINFO_TEST", float, 60.0)
        self.assertEqual(value, 60.0)
        self.assertIn("CUDA_BUILDINFO_TEST", str(w.warning))

    def test_parse_versions(self):
        self.assertEqual(_parse_versions("12.4, 11.8,,"), ("12.4", "11.8"))
        self.assertEqual(_parse_versions(""), ())


class TestFindFirstValidLazy(unittest.TestCase):
    def test_stops_at_first_accepted(self):
        called = []

        def producer(value):
            def produce():
                called.append(value)
                return value

            return produce

        options = [("a", producer(None)), ("b", producer(2)), ("c", producer(3))]
        result = _find_first_valid_lazy(options, lambda label, p: p())
        self.assertEqual(result, ("b", 2))
        self.assertEqual(called, [None, 2])

    def test_nothing_accepted(self):
        options = [("a", lambda: 1)]
        self.assertEqual(
            _find_first_valid_lazy(options, lambda label, p: None),
            ("<unknown>", None),
        )


class TestMakeLogger(unittest.TestCase):
    def make(self, level):
        # a logger outside the hierarchy, so no handlers are inherited
        logger = logging.Logger("cuda_buildinfo.test")
        with mock.patch.object(config, "CUDA_BUILDINFO_LOG_LEVEL", level), \
                mock.patch("cuda_buildinfo.utils.logging.getLogger",
                           return_value=logger):
            return make_logger("cuda_buildinfo.test")

    def test_disabled(self):
        logger = self.make("")
        self.assertEqual(logger.level, logging.CRITICAL)
        self.assertIsInstance(logger.handlers[0], logging.NullHandler)

    def test_enabled(self):
        logger = self.make("debug")
        self.assertEqual(logger.level, logging.DEBUG)
        handler = logger.handlers[0]
        self.assertIsInstance(handler, logging.StreamHandler)
        self.assertIn("== CUDA BUILDINFO", handler.formatter._fmt)

    def test_bad_level(self):
        logger = self.make("chatty")
        self.assertEqual(logger.level, logging.CRITICAL)
        self.assertEqual(len(logger.handlers), 1)


if __name__ == "__main__":
    unittest.main()
