"""
Gitnaut commands: git subcommands declared with the arguments DSL.

Overview
- Command
  • Base class of every git command. A subclass declares its schema once, as
    the class attribute 'arguments' (usually @Arguments.define on a function
    named 'arguments'); declaring it twice in one class body raises TypeError.
  • Accepted exit statuses are a class keyword:
        class Fsck(Command, allow_exit_status=range(0, 8)): ...
    (default range(0, 1), i.e. only success).
  • Command(context)(*positionals, **options) binds the call, runs
    context.command(*bound, **bound.execution_options, raise_on_failure=False)
    and raises FailedError when the exit status is not accepted.

- with_stdin(content)
  • Context manager yielding the read end of a pipe fed by a writer thread, so
    inputs larger than the pipe buffer cannot deadlock the child.

- Concrete commands
  • Add, Mv, Rm, Init, Commit, Clone, CheckoutFiles, BranchDelete, Fsck,
    CatFileBatchCheck.

Quick example:
    >>> from gitnaut import ExecutionContext, Add
    >>> Add(ExecutionContext(cwd="/path/to/repo"))("README.md", force=True)
"""
import contextlib
import functools
import logging
import operator
import os
import re
import threading

from .faults import *
from .schema import *
from .utils import *

logger = logging.getLogger(__name__)


class _Namespace(dict):
    """
    Internal: class-body namespace refusing a second 'arguments' declaration.
    """

    def __init__(self, name, /):
        super().__init__()
        self._name = name

    def __setitem__(self, key, value, /):
        if key == "arguments" and key in self:
            raise TypeError(f"arguments already defined for {self._name}")
        super().__setitem__(key, value)


class CommandType(type):
    """
    Metaclass of git commands.

    Responsibilities
    - Refuse a second 'arguments' assignment in one class body.
    - Validate the allow_exit_status class keyword (a non-empty range with step 1).
    - Provide stable, readable __repr__/__rich_repr__ for diagnostics.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens),
      e.g. CheckoutFiles -> "checkout-files".
    """
    __introspectable__ = ()
    __displayable__ = Unset

    @classmethod
    def __prepare__(cls, name, bases, /, **options):
        return _Namespace(name)

    def __new__(cls, name, bases, namespace, /, allow_exit_status=Unset, **options):
        if allow_exit_status is not Unset:
            if not isinstance(allow_exit_status, range):
                raise TypeError(f"{name} allow_exit_status expects a range")
            if allow_exit_status.step != 1:
                raise ValueError(f"{name} allow_exit_status range must have a step of 1")
            if not allow_exit_status:
                raise ValueError(f"{name} allow_exit_status range must not be empty")
            namespace["allow_exit_status"] = allow_exit_status

        self = super().__new__(
            cls,
            name,
            bases,
            dict(namespace) | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation.

            Example
            - add(context=execution-context(...))
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


@contextlib.contextmanager
def with_stdin(content, /):
    """
    Yield a readable pipe end carrying content (str or bytes).

    The content is written by a background thread; the reader is closed and
    the writer joined when the block exits. A child that exits without
    reading everything does not make the writer fail.
    """
    if isinstance(content, str):
        content = content.encode()
    elif not isinstance(content, bytes):
        raise TypeError("with_stdin() argument must be a str or bytes")

    descriptor, sink = os.pipe()
    reader, writer = os.fdopen(descriptor, "rb"), os.fdopen(sink, "wb")

    def feed():
        try:
            with writer:
                if content:
                    writer.write(content)
        except BrokenPipeError:
            # The child closed its stdin early.
            pass

    thread = threading.Thread(target=feed, name="gitnaut-stdin", daemon=True)
    thread.start()
    try:
        yield reader
    finally:
        reader.close()
        thread.join()


class Command(metaclass=CommandType):
    """
    Base class for git commands built on an Arguments schema.

    Class attributes
    - arguments: Arguments | None, the command's schema.
    - allow_exit_status: range of accepted exit statuses (class keyword).

    Properties
    - context: the ExecutionContext the command runs in.
    """
    __introspectable__ = ("context",)

    arguments = None
    allow_exit_status = range(0, 1)

    def __new__(cls, context, /):
        if not callable(getattr(context, "command", None)):
            raise TypeError(f"{cls.__typename__} context must provide a command() method")
        self = super().__new__(cls)
        self._context = context
        return self

    def bind(self, /, *positionals, **options):
        """
        Bind a call against the command's schema without running it.
        """
        if (arguments := type(self).arguments) is None:
            raise TypeError(f"arguments not defined for {type(self).__name__}")
        return arguments.bind(*positionals, **options)

    def __call__(self, /, *positionals, **options):
        return self.run(self.bind(*positionals, **options))

    def run(self, bound, /, **options):
        """
        Execute bound arguments and check the exit status.

        options are extra execution keywords (stdin=..., chdir=...) merged over
        the bound execution options.
        """
        logger.debug("running %s %s", type(self).__typename__, bound.to_token_array())
        result = self._context.command(*bound, **bound.execution_options | options, raise_on_failure=False)
        if result.status not in type(self).allow_exit_status:
            raise FailedError(result)
        return result


class Add(Command):
    """
    git add [--all] [--force] [--] [<paths>...]
    """

    @Arguments.define
    def arguments(builder):
        builder.literal("add")
        builder.flag("all")
        builder.flag("force")
        builder.operand("paths", repeatable=True, default=[], separator="--")


class Mv(Command):
    """
    git mv --verbose [--force] [--dry-run] [-k] [--] <source>... <destination>
    """

    @Arguments.define
    def arguments(builder):
        builder.literal("mv")
        builder.literal("--verbose")
        builder.flag(["force", "f"])
        builder.flag(["dry_run", "n"])
        builder.flag("k")
        builder.operand("source", repeatable=True, required=True, separator="--")
        builder.operand("destination", required=True)


class Rm(Command):
    @Arguments.define
    def arguments(builder):
        builder.literal("rm")
        builder.flag("force", args_override="-f")
        builder.flag("recursive", args_override="-r")
        builder.flag("cached")
        builder.operand("paths", repeatable=True, required=True, separator="--")


class Init(Command):
    @Arguments.define
    def arguments(builder):
        builder.literal("init")
        builder.flag("bare")
        builder.value("initial_branch", inline=True)
        builder.operand("directory")


class Commit(Command):
    """
    git commit, with the message, author and date passed inline.

    amend also passes --no-edit so git never opens an editor.
    """

    @Arguments.define
    def arguments(builder):
        builder.literal("commit")
        builder.flag(["all", "add_all"])
        builder.flag("allow_empty")
        builder.flag("no_verify")
        builder.flag("allow_empty_message")
        builder.value("author", inline=True)
        builder.value("message", inline=True, allow_empty=True)
        builder.value("date", inline=True, type=str)
        builder.flag("amend", args_override=["--amend", "--no-edit"])
        builder.flag_or_value("gpg_sign", negatable=True, inline=True)


class Clone(Command):
    """
    git clone [options] -- <repository> [<directory>]

    timeout is handed to the execution context instead of git.
    """

    @Arguments.define
    def arguments(builder):
        builder.literal("clone")
        builder.flag("bare")
        builder.flag("recursive")
        builder.flag("mirror")
        builder.value("branch")
        builder.value("filter")
        builder.value(["origin", "remote"])
        builder.value("config", repeatable=True)

        @builder.custom("single_branch", validator=lambda value: isinstance(value, bool))
        def single_branch(value):
            return "--single-branch" if value else "--no-single-branch"

        builder.custom("depth", lambda value: ["--depth", str(int(value))], type=int)
        builder.execution_option("timeout", type=(int, float))
        builder.literal("--")
        builder.operand("repository", required=True)
        builder.operand("directory")


class CheckoutFiles(Command):
    """
    git checkout [<tree-ish>] [--] <paths>...

    tree_ish may be None to restore paths from the index.
    """

    @Arguments.define
    def arguments(builder):
        builder.literal("checkout")
        builder.flag(["force", "f"], args_override="--force")
        builder.flag("ours")
        builder.flag("theirs")
        builder.flag(["merge", "m"], args_override="--merge")
        builder.value("conflict", inline=True)
        builder.flag("overlay", negatable=True)
        builder.value("pathspec_from_file", inline=True)
        builder.flag("pathspec_file_nul")
        builder.operand("tree_ish", required=True, allow_nil=True)
        builder.operand("paths", repeatable=True, separator="--")


class BranchDelete(Command, allow_exit_status=range(0, 2)):
    """
    git branch --delete [--force] [--remotes] <branch_names>...

    Exit status 1 (some branches could not be deleted) is reported through the
    result instead of an error.
    """

    @Arguments.define
    def arguments(builder):
        builder.literal("branch")
        builder.literal("--delete")
        builder.flag(["force", "f"])
        builder.flag(["remotes", "r"])
        builder.operand("branch_names", repeatable=True, required=True)


class Fsck(Command, allow_exit_status=range(0, 8)):
    """
    git fsck --no-progress [options] [<object>...]

    Exit statuses 1 to 7 are bit flags describing the problems found.
    """

    @Arguments.define
    def arguments(builder):
        builder.literal("fsck")
        builder.literal("--no-progress")
        builder.flag("tags")
        builder.flag("root")
        builder.flag("unreachable")
        builder.flag("cache")
        builder.flag("no_reflogs")
        builder.flag("full", negatable=True)
        builder.flag("strict")
        builder.flag("lost_found")
        builder.flag("dangling", negatable=True)
        builder.flag("connectivity_only")
        builder.flag("name_objects", negatable=True)
        builder.flag("references", negatable=True)
        builder.operand("object", repeatable=True)


class CatFileBatchCheck(Command):
    """
    git cat-file --batch-check, fed with object names through stdin.

    Call with object names as positionals, or with batch_all_objects=True
    (the two are mutually exclusive).
    """

    @Arguments.define
    def arguments(builder):
        builder.literal("cat-file")
        builder.literal("--batch-check")
        builder.flag("batch_all_objects")
        builder.flag("unordered")
        builder.flag("follow_symlinks")
        builder.flag("allow_unknown_type")

    def __call__(self, /, *objects, **options):
        bound = self.bind(**options)
        if objects and bound.batch_all_objects:
            raise ConflictingOptionsError("cannot specify :objects and :batch_all_objects")
        if not objects and not bound.batch_all_objects:
            raise MissingOptionsError("Required options not provided: :objects or :batch_all_objects")
        with with_stdin("".join(f"{object}\n" for object in objects)) as reader:
            return self.run(bound, stdin=reader)


__all__ = (
    # Public API surface for consumers of gitnaut.commands.
    "Command",
    "with_stdin",

    # Concrete commands
    "Add",
    "Mv",
    "Rm",
    "Init",
    "Commit",
    "Clone",
    "CheckoutFiles",
    "BranchDelete",
    "Fsck",
    "CatFileBatchCheck",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del CommandType
