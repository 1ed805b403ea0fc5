"""
Config module behavioral tests (process-wide execution defaults).

Scope
- Validate Config defaults, validation, immutability and replace().
- Validate configure()/current() and their effect on ExecutionContext.

Conventions
- Test method names follow CamelCase per project convention.
- Every test restores the process-wide defaults it changes.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from gitnaut import Config, GLOBAL_OPTIONS, ExecutionContext, configure, current


class TestConfig(TestCase):
    """Behavioral tests for Config records."""

    def testDefaults(self):
        config = Config()
        self.assertEqual(config.binary, "git")
        self.assertIsNone(config.timeout)
        self.assertIsNone(config.git_ssh)
        self.assertEqual(config.global_options, list(GLOBAL_OPTIONS))
        self.assertEqual(config.env, {"LC_ALL": "en_US.UTF-8"})
        self.assertIn("core.quotePath=true", config.global_options)

    def testValidation(self):
        with self.assertRaises(ValueError):
            Config(binary=" ")
        with self.assertRaises(TypeError):
            Config(binary=None)
        with self.assertRaises(ValueError):
            Config(timeout=0)
        with self.assertRaises(TypeError):
            Config(timeout=True)
        with self.assertRaises(TypeError):
            Config(global_options="-c x=y")
        with self.assertRaises(TypeError):
            Config(env={"A": 1})

    def testImmutability(self):
        config = Config()
        with self.assertRaises(AttributeError):
            config.binary = "other"
        config.env["LC_ALL"] = "C"
        self.assertEqual(config.env["LC_ALL"], "en_US.UTF-8")

    def testReplaceKeepsOtherFields(self):
        config = Config(timeout=10)
        replaced = config.replace(binary="/usr/bin/git")
        self.assertEqual(replaced.binary, "/usr/bin/git")
        self.assertEqual(replaced.timeout, 10)
        self.assertEqual(config.binary, "git")
        self.assertEqual(copy.replace(config, timeout=5).timeout, 5)

    def testRepr(self):
        self.assertTrue(repr(Config()).startswith("config(binary='git', timeout=None, "))


class TestConfigure(TestCase):
    """Behavioral tests for the process-wide defaults."""

    def setUp(self):
        self.previous = current()

    def tearDown(self):
        previous = self.previous
        configure(
            binary=previous.binary,
            timeout=previous.timeout,
            git_ssh=previous.git_ssh,
            global_options=previous.global_options,
            env=previous.env,
        )

    def testConfigureReplacesOnlyGivenFields(self):
        config = configure(timeout=30)
        self.assertIs(current(), config)
        self.assertEqual(config.timeout, 30)
        self.assertEqual(config.binary, self.previous.binary)

    def testConfigureRejectsInvalidValues(self):
        with self.assertRaises(ValueError):
            configure(timeout=-1)
        self.assertIs(current(), self.previous)

    def testExecutionContextReadsDefaultsAtCallTime(self):
        context = ExecutionContext()
        configure(binary="mygit", global_options=("-c", "x.y=z"), git_ssh="ssh -i key")
        self.assertEqual(context.argv("status"), ["mygit", "-c", "x.y=z", "status"])
        self.assertEqual(context.environ()["GIT_SSH"], "ssh -i key")

    def testContextOverridesWin(self):
        configure(binary="mygit")
        context = ExecutionContext("othergit", global_options=())
        self.assertEqual(context.argv("status"), ["othergit", "status"])


if __name__ == "__main__":
    unittest.main()
