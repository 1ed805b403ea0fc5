"""
Commands module behavioral tests (command classes and concrete git commands).

Scope
- Validate the Command base: context contract, single schema declaration,
  allow_exit_status class keyword, delegation to the context.
- Validate the token arrays of the concrete commands.
- Validate stdin feeding through with_stdin and CatFileBatchCheck.

Conventions
- Test method names follow CamelCase per project convention.
- A recording context stands in for ExecutionContext; no git process is started.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from gitnaut import (
    Arguments,
    Command,
    CommandLineResult,
    Add,
    Mv,
    Rm,
    Init,
    Commit,
    Clone,
    CheckoutFiles,
    BranchDelete,
    Fsck,
    CatFileBatchCheck,
    with_stdin,
    FailedError,
    ConflictingOptionsError,
    MissingOptionsError,
    MissingOperandError,
    InvalidValueError,
)


class Recorder:
    """Context double recording every command() call."""

    def __init__(self, status=0):
        self.status = status
        self.calls = []

    def command(self, *args, **options):
        if "stdin" in options:
            options["stdin"] = options["stdin"].read()
        self.calls.append((args, options))
        return CommandLineResult(["git", *args], self.status, "", "")


class TestCommandBase(TestCase):
    """Behavioral tests for the Command base class."""

    def testContextMustProvideCommand(self):
        with self.assertRaises(TypeError):
            Add(object())

    def testCallRunsBoundTokens(self):
        context = Recorder()
        result = Add(context)("README.md", force=True)
        self.assertEqual(context.calls, [(("add", "--force", "--", "README.md"), {"raise_on_failure": False})])
        self.assertEqual(result.status, 0)

    def testExecutionOptionsAreForwarded(self):
        context = Recorder()
        Clone(context)("https://example.com/r.git", timeout=5)
        self.assertEqual(context.calls[0][1], {"timeout": 5, "raise_on_failure": False})

    def testDefaultAcceptsOnlySuccess(self):
        with self.assertRaises(FailedError) as context:
            Add(Recorder(status=1))("README.md")
        self.assertEqual(context.exception.result.status, 1)

    def testAllowExitStatusRanges(self):
        self.assertEqual(BranchDelete(Recorder(status=1))("topic").status, 1)
        self.assertEqual(Fsck(Recorder(status=7))().status, 7)
        with self.assertRaises(FailedError):
            Fsck(Recorder(status=8))()

    def testAllowExitStatusValidation(self):
        with self.assertRaises(TypeError):
            class Listed(Command, allow_exit_status=[0, 1]):  # NOQA: F-841
                pass
        with self.assertRaises(ValueError):
            class Stepped(Command, allow_exit_status=range(0, 4, 2)):  # NOQA: F-841
                pass
        with self.assertRaises(ValueError):
            class Empty(Command, allow_exit_status=range(0, 0)):  # NOQA: F-841
                pass

    def testArgumentsDeclaredOnce(self):
        with self.assertRaises(TypeError):
            class Twice(Command):  # NOQA: F-841
                @Arguments.define
                def arguments(builder):
                    builder.literal("status")

                @Arguments.define
                def arguments(builder):  # NOQA: F-811
                    builder.literal("log")

    def testMissingArguments(self):
        class Bare(Command):
            pass

        with self.assertRaises(TypeError):
            Bare(Recorder())()

    def testTypenameAndRepr(self):
        self.assertEqual(CheckoutFiles.__typename__, "checkout-files")
        self.assertTrue(repr(Add(Recorder())).startswith("add(context="))


class TestConcreteCommands(TestCase):
    """Behavioral tests for the token arrays of the concrete commands."""

    def setUp(self):
        self.context = Recorder()

    def tokens(self, command, /, *positionals, **options):
        return command(self.context).bind(*positionals, **options).to_token_array()

    def testAdd(self):
        self.assertEqual(self.tokens(Add, all=True), ["add", "--all"])

    def testMv(self):
        self.assertEqual(
            self.tokens(Mv, "a", "b", "dir", f=True, k=True),
            ["mv", "--verbose", "--force", "-k", "--", "a", "b", "dir"],
        )

    def testRm(self):
        self.assertEqual(self.tokens(Rm, "a", force=True, recursive=True), ["rm", "-f", "-r", "--", "a"])
        with self.assertRaises(MissingOperandError):
            self.tokens(Rm, cached=True)

    def testInit(self):
        self.assertEqual(
            self.tokens(Init, "repo", bare=True, initial_branch="main"),
            ["init", "--bare", "--initial-branch=main", "repo"],
        )

    def testCommit(self):
        self.assertEqual(
            self.tokens(Commit, message="fix", amend=True, gpg_sign=False),
            ["commit", "--message=fix", "--amend", "--no-edit", "--no-gpg-sign"],
        )
        self.assertEqual(self.tokens(Commit, add_all=True, message=""), ["commit", "--all", "--message="])

    def testClone(self):
        self.assertEqual(
            self.tokens(Clone, "https://example.com/r.git", "dir", remote="up", single_branch=False, depth=1),
            ["clone", "--origin", "up", "--no-single-branch", "--depth", "1", "--", "https://example.com/r.git", "dir"],
        )
        with self.assertRaises(InvalidValueError):
            self.tokens(Clone, "https://example.com/r.git", single_branch="yes")

    def testCheckoutFiles(self):
        self.assertEqual(self.tokens(CheckoutFiles, None, "a.py", ours=True), ["checkout", "--ours", "--", "a.py"])
        self.assertEqual(
            self.tokens(CheckoutFiles, "HEAD", "a.py", f=True, overlay=False),
            ["checkout", "--force", "--no-overlay", "HEAD", "--", "a.py"],
        )

    def testBranchDelete(self):
        self.assertEqual(self.tokens(BranchDelete, "a", "b", r=True), ["branch", "--delete", "--remotes", "a", "b"])

    def testFsck(self):
        self.assertEqual(
            self.tokens(Fsck, dangling=False, strict=True),
            ["fsck", "--no-progress", "--strict", "--no-dangling"],
        )


class TestStdin(TestCase):
    """Behavioral tests for stdin feeding."""

    def testWithStdinYieldsContent(self):
        with with_stdin("hello\n") as reader:
            self.assertEqual(reader.read(), b"hello\n")
        self.assertTrue(reader.closed)

    def testWithStdinLargerThanPipeBuffer(self):
        content = b"x" * (1 << 20)
        with with_stdin(content) as reader:
            self.assertEqual(len(reader.read()), len(content))

    def testWithStdinReaderClosedEarly(self):
        with with_stdin(b"y" * (1 << 20)) as reader:
            reader.read(1)

    def testWithStdinRejectsOtherTypes(self):
        with self.assertRaises(TypeError):
            with with_stdin(1):
                pass

    def testCatFileBatchCheckFeedsObjects(self):
        context = Recorder()
        CatFileBatchCheck(context)("HEAD", "abc123", unordered=True)
        args, options = context.calls[0]
        self.assertEqual(args, ("cat-file", "--batch-check", "--unordered"))
        self.assertEqual(options["stdin"], b"HEAD\nabc123\n")

    def testCatFileBatchCheckAllObjects(self):
        context = Recorder()
        CatFileBatchCheck(context)(batch_all_objects=True)
        self.assertEqual(context.calls[0][0], ("cat-file", "--batch-check", "--batch-all-objects"))
        self.assertEqual(context.calls[0][1]["stdin"], b"")

    def testCatFileBatchCheckArgumentRules(self):
        with self.assertRaises(ConflictingOptionsError):
            CatFileBatchCheck(Recorder())("HEAD", batch_all_objects=True)
        with self.assertRaises(MissingOptionsError):
            CatFileBatchCheck(Recorder())()


if __name__ == "__main__":
    unittest.main()
