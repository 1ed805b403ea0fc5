"""
Gitnaut schemas: declaration builder and immutable argument definitions.

Overview
- Builder
  • Small declaration vocabulary (flag, value, flag_or_value, key_value, operand,
    literal, custom, execution_option, conflicts). Each declaration appends one
    entry, in call order, and returns it.
  • Definition-time rules are enforced as declarations arrive:
    - names (canonical and aliases) are unique across the whole schema;
    - at most one operand is repeatable;
    - no option-shaped entry follows a '--' boundary (a literal '--', or an
      operand/value declared with separator='--').
  • Conflict groups are resolved to canonical names when the builder closes.

- Arguments
  • Immutable result of Arguments.define(...). Built once per command type and
    shared by any number of bind() calls.
  • bind(*positionals, **options) validates a call and renders it into a Bound.

Quick example:
    >>> @Arguments.define
    ... def arguments(builder):
    ...     builder.flag("force")
    ...     builder.operand("paths", repeatable=True, separator="--")
    ...
    >>> list(arguments.bind("file.py", force=True))
    ['--force', '--', 'file.py']
"""
from types import MappingProxyType

from . import binder
from .arguments import *
from .faults import *
from .utils import *


class Builder:
    """
    Collects entry declarations for one schema.

    A builder is handed to the function given to Arguments.define and is
    closed once that function returns; declaring on a closed builder raises
    TypeError.
    """

    def __init__(self):
        self._entries = []
        self._conflicts = []
        self._names = {}
        self._repeatable = None
        self._boundary = False
        self._closed = False

    def _declare(self, entry):
        if self._closed:
            raise TypeError("builder is closed; declare entries inside the defining function")

        if self._boundary and entry.__option__() is not None:
            raise SeparatorBoundaryError(
                f"option :{entry.name} cannot be defined after a '--' separator boundary; "
                f"its flags would be treated as operands by git"
            )

        for name in entry.names:
            if name in self._names:
                raise DuplicateNameError(f"name :{name} is already declared by :{self._names[name].name}")

        if isinstance(entry, Operand) and entry.repeatable:
            if self._repeatable is not None:
                raise RepeatableOperandError(
                    f"only one repeatable operand is allowed; :{self._repeatable.name} is already repeatable, "
                    f"cannot add :{entry.name}"
                )
            self._repeatable = entry

        self._names |= dict.fromkeys(entry.names, entry)
        self._boundary |= entry.__boundary__()
        self._entries.append(entry)
        return entry

    def flag(self, names, /, **options):
        """
        Declare a presence switch (see Flag).
        """
        return self._declare(Flag(names, **options))

    def value(self, names, /, **options):
        """
        Declare a valued option (see Value).
        """
        return self._declare(Value(names, **options))

    def flag_or_value(self, names, /, **options):
        return self._declare(FlagOrValue(names, **options))

    def key_value(self, names, flag_token=Unset, /, **options):
        return self._declare(KeyValue(names, flag_token, **options))

    def operand(self, name, /, **options):
        """
        Declare a positional slot (see Operand).
        """
        return self._declare(Operand(name, **options))

    def literal(self, token, /):
        return self._declare(Literal(token))

    def custom(self, names, encoder=Unset, /, **options):
        """
        Declare an entry rendered by an encoder, directly or as a decorator.

        Forms
        - builder.custom("depth", lambda depth: ["--depth", str(depth)])
        - @builder.custom("depth")
          def depth(value): ...
        """
        @rename("custom")
        def wrapper(encoder, /):
            if not callable(encoder):
                raise TypeError("@custom() must be applied to a callable")
            return self._declare(Custom(names, encoder, **options))

        return wrapper(encoder) if encoder is not Unset else wrapper

    def execution_option(self, names, /, **options):
        return self._declare(ExecutionOption(names, **options))

    def conflicts(self, *names):
        """
        Register a mutual-exclusion group, checked at bind time.

        Names (canonical or aliases) are resolved when the builder closes, so
        the group may be declared before its members.
        """
        if self._closed:
            raise TypeError("builder is closed; declare conflicts inside the defining function")
        if not all(isinstance(name, str) for name in names):
            raise TypeError("conflicts() arguments must be strings")
        self._conflicts.append(names)

    def _close(self):
        """
        Internal: resolve conflict groups and freeze the declarations.

        Raises
        - ValueError: when a group names an unknown entry, an operand, a literal,
          or has fewer than two distinct members.
        """
        conflicts = []
        for names in self._conflicts:
            group = []
            for name in names:
                if (entry := self._names.get(name)) is None or isinstance(entry, Operand):
                    raise ValueError(f"conflicts() name :{name} is not a declared option")
                if entry.name not in group:
                    group.append(entry.name)
            if len(group) < 2:
                raise ValueError(f"conflicts() group {list(names)!r} must name at least two distinct options")
            conflicts.append(tuple(group))

        self._closed = True
        return tuple(self._entries), tuple(conflicts)


class Arguments:
    """
    Immutable, declaratively built argument schema.

    Properties
    - entries: declared entries, in declaration (and rendering) order.
    - conflicts: mutual-exclusion groups of canonical names.

    Lookup
    - arguments["f"] returns the entry declaring the name or alias "f".
    - "f" in arguments tells whether a name or alias is declared.
    """
    __introspectable__ = ("entries", "conflicts")

    entries = mirror("entries")
    conflicts = mirror("conflicts")

    def __new__(cls, entries=(), conflicts=(), /):
        if not all(isinstance(entry, Entry) for entry in entries):
            raise TypeError(f"{cls.__name__} entries must be argument entries")

        self = super().__new__(cls)
        object.__setattr__(self, "_entries", tuple(entries))
        object.__setattr__(self, "_conflicts", tuple(map(tuple, conflicts)))
        object.__setattr__(self, "_lookup", MappingProxyType({
            name: entry for entry in self._entries for name in entry.names
        }))
        return self

    @classmethod
    def define(cls, function=Unset, /):
        """
        Build a schema from a defining function, directly or as a decorator.

        Forms
        - Arguments.define(function) -> Arguments
        - @Arguments.define / @Arguments.define() on a function receiving a Builder.

        The function's return value is ignored; the decorated name is bound to
        the resulting Arguments.
        """
        @rename("define")
        def wrapper(function, /):
            if not callable(function):
                raise TypeError("@define() must be applied to a callable")
            function(builder := Builder())
            return cls(*builder._close())

        return wrapper(function) if function is not Unset else wrapper

    def bind(self, /, *positionals, **options):
        """
        Validate a call against this schema and render it.

        Returns
        - Bound: tokens plus read-only resolved values.

        Raises
        - BindingError (subclasses): on any malformed invocation; nothing is
          rendered or returned in that case.
        """
        return binder.bind(self, positionals, options)

    def __getitem__(self, name, /):
        return self._lookup[name]

    def __contains__(self, name, /):
        return name in self._lookup

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__!r} object is immutable")

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__name__!r} object is immutable")

    def __repr__(self):
        return f"arguments({", ".join(map(repr, self._entries))})"

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)


__all__ = (
    # Public API surface for consumers of gitnaut.schema.
    "Arguments",
    "Builder",
)
