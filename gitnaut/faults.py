"""
Gitnaut faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every failure the
  package can surface. Codes are grouped by domain to keep copy consistent
  and make logs/searches predictable.
- CommandException: base type that carries a message + options and knows how
  to render itself in a friendly, lowercased, and actionable way.
- DefinitionError / BindingError: the two argument-construction categories.
  Definition errors are raised while a schema is declared, binding errors
  while actual values are validated and rendered. Both are ValueErrors.
- CommandLineError: failures reported by the git process itself (non-zero
  exit, signal, timeout), carrying the CommandLineResult.
- trigger(): central entry point to surface any fault (raise, or print when
  running in shell mode).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Name-first messages: every message names the offending option, operand or
  value so the caller can fix the call site directly.
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the package (stable identifiers).

    grouping (by high-level domain)
    - definition (211xx): malformed schema declarations
      • DUPLICATED_NAME, REPEATABLE_OPERAND, EXCLUSIVE_CHECK, OVERRIDE_SHAPE,
        SEPARATOR_BOUNDARY, MODIFIER_CONFLICT
    - binding (221xx): malformed invocations of a schema
      • UNSUPPORTED_OPTIONS, CONFLICTING_ALIASES, MISSING_OPERAND,
        UNEXPECTED_OPERANDS, NONE_VALUE, MISSING_OPTIONS, NONE_OPTIONS,
        OPTION_TYPE, INVALID_VALUE, CONFLICTING_OPTIONS, OPTION_LIKE_OPERAND
    - execution (231xx): failures of the git process
      • COMMAND_FAILED, COMMAND_SIGNALED, COMMAND_TIMED_OUT, PROCESS_IO

    spacing leaves room for future additions without reshuffling existing codes.
    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- definition errors (211xx) ---
    DUPLICATED_NAME             = 21101
    REPEATABLE_OPERAND          = 21102
    EXCLUSIVE_CHECK             = 21103
    OVERRIDE_SHAPE              = 21104
    SEPARATOR_BOUNDARY          = 21105
    MODIFIER_CONFLICT           = 21106

    # --- binding errors (221xx) ---
    UNSUPPORTED_OPTIONS         = 22101
    CONFLICTING_ALIASES         = 22102
    MISSING_OPERAND             = 22111
    UNEXPECTED_OPERANDS         = 22112
    NONE_VALUE                  = 22113
    OPTION_LIKE_OPERAND         = 22114
    MISSING_OPTIONS             = 22121
    NONE_OPTIONS                = 22122
    OPTION_TYPE                 = 22123
    INVALID_VALUE               = 22124
    CONFLICTING_OPTIONS         = 22131

    # --- execution errors (231xx) ---
    COMMAND_FAILED              = 23101
    COMMAND_SIGNALED            = 23102
    COMMAND_TIMED_OUT           = 23103
    PROCESS_IO                  = 23111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base of every gitnaut fault.

    subclasses declare their defaults as class keywords:

        class MissingOptionsError(BindingError, code=FaultCode.MISSING_OPTIONS,
                                  title="missing options", hint="..."): ...

    options given at construction (or merged later through copy.replace)
    override those defaults. rendering-only options:
    - shell: print instead of raising when triggered.
    - fancy: render inside a rich panel.
    - colorful: apply styles.
    """
    __defaults__ = MappingProxyType({
        "code": Unset,
        "title": "command error",
        "hint": Unset,
        "shell": False,
        "fancy": False,
        "colorful": False,
    })

    def __init_subclass__(cls, /, code=Unset, title=Unset, hint=Unset, **options):
        super().__init_subclass__(**options)
        cls.__defaults__ = MappingProxyType(cls.__defaults__ | {
            name: object for name, object in (("code", code), ("title", title), ("hint", hint))
            if object is not Unset
        })

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(type(self).__defaults__ | options)

    @property
    def code(self):
        return self.options["code"]

    def __str__(self):
        return coalesce(self.message, "")

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs": "underline #00E5FF dim",  # optional documentation line
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if self.options["colorful"] else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not self.options["colorful"]:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        code = self.options["code"]
        prog = text(getattr(main, "__prog__", "gitnaut"), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "-", styler("code")),
            " | ",
            text(self.options["title"].title(), styler("error-title")),
            " ]"
        )
        renders = [text(self.message, styler("error-message"))]
        if self.options["hint"]:
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.options["hint"], styler("hint"))))
        if isinstance(code, FaultCode) and (docs := getdoc(code)):
            renders.append(text(docs, styler("docs")))

        if self.options["fancy"]:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options["shell"]:
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DefinitionError(CommandException, ValueError, title="invalid definition"): ...
class DuplicateNameError(
    DefinitionError,
    code=FaultCode.DUPLICATED_NAME,
    title="duplicated name",
    hint="every canonical name and alias must be unique within one definition"
): ...
class RepeatableOperandError(
    DefinitionError,
    code=FaultCode.REPEATABLE_OPERAND,
    title="repeatable operand",
    hint="collect the values of one of the operands through a value entry with as_operand=True"
): ...
class ExclusiveCheckError(
    DefinitionError,
    code=FaultCode.EXCLUSIVE_CHECK,
    title="exclusive checks",
    hint="express the type check inside the validator"
): ...
class OverrideShapeError(
    DefinitionError,
    code=FaultCode.OVERRIDE_SHAPE,
    title="override shape",
    hint="use a single token override, or a custom entry"
): ...
class SeparatorBoundaryError(
    DefinitionError,
    code=FaultCode.SEPARATOR_BOUNDARY,
    title="separator boundary",
    hint="declare every option before the first '--' boundary"
): ...
class ModifierConflictError(
    DefinitionError,
    code=FaultCode.MODIFIER_CONFLICT,
    title="modifier conflict",
): ...


class BindingError(CommandException, ValueError, title="invalid arguments"): ...
class UnsupportedOptionsError(
    BindingError,
    code=FaultCode.UNSUPPORTED_OPTIONS,
    title="unsupported options",
    hint="check the spelling against the declared option names"
): ...
class ConflictingAliasesError(
    BindingError,
    code=FaultCode.CONFLICTING_ALIASES,
    title="conflicting aliases",
    hint="pass the option once, either by its name or by one alias"
): ...
class MissingOperandError(
    BindingError,
    code=FaultCode.MISSING_OPERAND,
    title="missing operand",
): ...
class UnexpectedOperandsError(
    BindingError,
    code=FaultCode.UNEXPECTED_OPERANDS,
    title="unexpected operands",
): ...
class NoneValueError(
    BindingError,
    code=FaultCode.NONE_VALUE,
    title="none value",
    hint="drop the None items before binding"
): ...
class OptionLikeOperandError(
    BindingError,
    code=FaultCode.OPTION_LIKE_OPERAND,
    title="option-like operand",
    hint="git would read the value as an option; pass it after a '--' boundary"
): ...
class MissingOptionsError(
    BindingError,
    code=FaultCode.MISSING_OPTIONS,
    title="missing options",
): ...
class NoneOptionsError(
    BindingError,
    code=FaultCode.NONE_OPTIONS,
    title="none options",
): ...
class OptionTypeError(
    BindingError,
    code=FaultCode.OPTION_TYPE,
    title="option type",
): ...
class InvalidValueError(
    BindingError,
    code=FaultCode.INVALID_VALUE,
    title="invalid value",
): ...
class ConflictingOptionsError(
    BindingError,
    code=FaultCode.CONFLICTING_OPTIONS,
    title="conflicting options",
    hint="these options are mutually exclusive"
): ...


class CommandLineError(CommandException, title="command error"):
    """
    failure of a git process, described by its CommandLineResult.

    the message follows the shape
        ['git', 'status'], status: exit 1, stderr: 'fatal: not a git repository'
    and subclasses may extend it (see TimedOutError).
    """

    def __init__(self, result, /, **options):
        self.result = result
        super().__init__(self.describe(result, **options), **options)

    @staticmethod
    def describe(result, /, **options):
        return f"{list(result.command)!r}, status: {result.describe()}, stderr: {result.stderr!r}"

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.result, **{**self.options, **overrides})


class FailedError(CommandLineError, code=FaultCode.COMMAND_FAILED, title="command failed"): ...
class SignaledError(CommandLineError, code=FaultCode.COMMAND_SIGNALED, title="command signaled"): ...


class TimedOutError(SignaledError, code=FaultCode.COMMAND_TIMED_OUT, title="command timed out"):
    def __init__(self, result, /, **options):
        assert "timeout" in options, "the timeout duration is required"
        super().__init__(result, **options)

    @property
    def timeout(self):
        return self.options["timeout"]

    @staticmethod
    def describe(result, /, **options):
        return f"{CommandLineError.describe(result)}, timed out after {options['timeout']}s"


class ProcessIOError(
    CommandException,
    code=FaultCode.PROCESS_IO,
    title="process i/o",
    hint="check the configured git binary and working directory"
): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via the rich console and the process exits;
      otherwise, the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "CommandException",
    "DefinitionError",
    "DuplicateNameError",
    "RepeatableOperandError",
    "ExclusiveCheckError",
    "OverrideShapeError",
    "SeparatorBoundaryError",
    "ModifierConflictError",
    "BindingError",
    "UnsupportedOptionsError",
    "ConflictingAliasesError",
    "MissingOperandError",
    "UnexpectedOperandsError",
    "NoneValueError",
    "OptionLikeOperandError",
    "MissingOptionsError",
    "NoneOptionsError",
    "OptionTypeError",
    "InvalidValueError",
    "ConflictingOptionsError",
    "CommandLineError",
    "FailedError",
    "SignaledError",
    "TimedOutError",
    "ProcessIOError",
    "FaultCode",
    "trigger",
    "getdoc",
)
