r"""
Gitnaut argument entries.

Overview
- Entries
  • Flag: presence switch (--force), optionally negatable (--no-verify).
  • Value: valued option, rendered separately (--branch main), inline (--branch=main)
    or as bare operand tokens (as_operand=True), optionally repeatable.
  • FlagOrValue: True renders the switch, a string renders as an inline/separate value.
  • KeyValue: mapping (or list of pairs) rendered as repeated "--trailer key=value".
  • Operand: positional slot, allocated by the binder with function-call semantics.
  • Literal: fixed token, always emitted at its position ("commit", "--").
  • Custom: user encoder turning the resolved value into tokens.
  • ExecutionOption: validated and passed through to the executor, never rendered.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes selected
    fields via read-only properties declared in __introspectable__/__displayable__.
  • Concrete entry classes are sealed against subclassing.

Metadata (sanitized on construction)
- names: canonical name first, aliases after. Each must be an identifier that does
  not start with an underscore; duplicates are rejected.
- type: Unset | type | tuple of types, normalized to a tuple (empty when unchecked).
- validator: Unset | callable, normalized to None when Unset.
- args_override: Unset | str | list of str (lists only on plain, non-negatable flags).
- separator: Unset | non-empty str (operands, and values rendered as operands).

Rendering
- render(value) returns a fresh list of tokens for a resolved, non-None value.
  The binder never calls it for absent or None option values; operands and literals
  are always rendered.

Quick example:
    >>> Flag("force").render(True)
    ['--force']
    >>> Value(("message", "m"), inline=True).render("fix")
    ['--message=fix']
"""
import builtins
import functools
import operator
import re
from collections.abc import Mapping

from .faults import *
from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns entries into sealed, introspectable descriptors.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Seal concrete entry classes (class keyword sealed=True) against subclassing.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - flag(names=('force', 'f'), negatable=False, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield a sequence of (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if options.get("sealed", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                """
                Disallow subclassing of concrete entry classes.
                """
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _sanitize_names_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the 'names' of a named entry.

    'names' may be a single canonical name or an ordered list/tuple where the
    first element is canonical and the rest are aliases. The result is always a
    tuple. Names must be identifiers without a leading underscore (they become
    keyword arguments and attribute accessors) and cannot repeat.
    """
    if isinstance(names := metadata["names"], str):
        names = (names,)
    if not isinstance(names, list | tuple):
        raise TypeError(f"{cls.__typename__} names must be a string or a list of strings")
    if not names:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    sanitized = []
    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not name.isidentifier():
            raise ValueError(f"{cls.__typename__} names must be valid identifiers, got {name!r}")
        elif name.startswith("_"):
            raise ValueError(f"{cls.__typename__} names cannot start with an underscore, got {name!r}")
        elif name in sanitized:
            raise DuplicateNameError(f"{cls.__typename__} :{names[0]} declares {name!r} more than once")
        sanitized.append(name)

    metadata["names"] = tuple(sanitized)


def _sanitize_check_metadata(cls, metadata, /):
    """
    Internal: validate the bind-time checks of a named entry.

    - required/allow_nil: coerced to bool.
    - type: Unset | type | list/tuple of types, normalized to a tuple.
    - validator: Unset | callable, normalized to None.

    Raises
    - TypeError: on a non-type constraint or a non-callable validator.
    - ExclusiveCheckError: when both a type and a validator are given.
    """
    metadata["required"] = bool(metadata["required"])
    metadata["allow_nil"] = bool(metadata["allow_nil"])

    if isinstance(types := metadata["type"], builtins.type):
        types = (types,)
    elif types is Unset:
        types = ()
    elif not isinstance(types, list | tuple) or not all(isinstance(type, builtins.type) for type in types):
        raise TypeError(f"{cls.__typename__} 'type' must be a type or a list of types")
    metadata["type"] = tuple(types)

    if (validator := metadata["validator"]) is not Unset and not callable(validator):
        raise TypeError(f"{cls.__typename__} 'validator' must be callable")
    if metadata["type"] and validator is not Unset:
        raise ExclusiveCheckError(f"cannot specify both type and validator for :{metadata['names'][0]}")
    metadata["validator"] = coalesce(validator)


def _sanitize_override_metadata(cls, metadata, /):
    """
    Internal: validate 'args_override', the explicit switch token(s) of an entry.

    A string replaces the derived switch. A list of strings is only valid on
    plain flags (each token is emitted when the flag is set) and never together
    with negatable=True.
    """
    override = metadata["args_override"]
    name = metadata["names"][0]
    if isinstance(override, list | tuple):
        if cls is not Flag:
            raise OverrideShapeError(
                f"arrays for args_override are only supported for flag entries, not {cls.__typename__} (option :{name})"
            )
        if metadata.get("negatable"):
            raise OverrideShapeError(f"arrays for args_override cannot be combined with negatable=True (option :{name})")
        if not override or not all(isinstance(token, str) and token for token in override):
            raise TypeError(f"{cls.__typename__} 'args_override' must contain non-empty strings")
        metadata["args_override"] = tuple(override)
    elif isinstance(override, str):
        if not override:
            raise ValueError(f"{cls.__typename__} 'args_override' cannot be empty")
    elif override is not Unset:
        raise TypeError(f"{cls.__typename__} 'args_override' must be a string or a list of strings")


def _sanitize_separator_metadata(cls, metadata, /):
    """
    Internal: validate the optional separator token emitted before operand values.
    """
    if not isinstance(separator := metadata["separator"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'separator' must be a string")
    elif isinstance(separator, str) and not separator:
        raise ValueError(f"{cls.__typename__} 'separator' cannot be empty")
    metadata["separator"] = coalesce(separator)


class Entry(metaclass=ArgumentType):
    """
    Common behavior of every schema entry.

    Hooks consulted by the schema builder and the binder
    - __option__(): the entry when it renders as a switch (subject to the '--'
      boundary rule), otherwise None.
    - __boundary__(): whether declaring the entry establishes a '--' boundary.
    - __active__(value): whether the entry emits a '--' boundary for a value.
    """
    names = ()
    separator = None
    required = False
    allow_nil = True
    type = ()
    validator = None

    @property
    def name(self):
        """
        Canonical name (None for literals).
        """
        return self.names[0] if self.names else None

    @property
    def aliases(self):
        return self.names[1:]

    def __option__(self):
        return None

    def __boundary__(self):
        return self.separator == "--"

    def __active__(self, value, /):
        return False

    def render(self, value, /):
        return []

    @classmethod
    def _construct(cls, metadata, /):
        # Mirror sanitized metadata into private fields; read-only properties expose them.
        self = builtins.object.__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))
        return self


class Flag(Entry, sealed=True):
    """
    Presence switch.

    Truthy values render the switch, falsy values render nothing. When
    negatable, the value must be a bool: True renders the switch and False its
    "--no-" form. A single-character canonical name renders with one dash,
    longer names with two; args_override always wins.
    """
    __introspectable__ = (
        "names",
        "negatable",
        "args_override",
        "required",
        "allow_nil",
        "type",
        "validator",
    )

    def __new__(
            cls,
            names,
            /,
            negatable=False,
            inline=False,
            as_operand=False,
            args_override=Unset,
            required=False,
            allow_nil=True,
            type=Unset,
            validator=Unset
    ):
        metadata = {
            "names": names,
            "negatable": bool(negatable),
            "args_override": args_override,
            "required": required,
            "allow_nil": allow_nil,
            "type": type,
            "validator": validator,
        }
        _sanitize_names_metadata(cls, metadata)
        _sanitize_check_metadata(cls, metadata)
        _sanitize_override_metadata(cls, metadata)

        if inline:
            raise ModifierConflictError(f"flag :{metadata['names'][0]} carries no value and cannot be inline")
        if as_operand:
            raise ModifierConflictError(f"flag :{metadata['names'][0]} carries no value and cannot render as an operand")

        return cls._construct(metadata)

    @property
    def switch(self):
        if isinstance(self.args_override, str):
            return self.args_override
        return switch(self.name)

    def __option__(self):
        return self

    def render(self, value, /):
        if self.negatable:
            if not isinstance(value, bool):
                raise OptionTypeError(f"negatable flag :{self.name} expects a boolean value, got {value!r}")
            return [self.switch if value else negation(self.switch)]
        if not value:
            return []
        if isinstance(self.args_override, list):
            return self.args_override
        return [self.switch]


class Value(Entry, sealed=True):
    """
    Valued option.

    Rendering forms
    - separate (default): ["--name", "value"]
    - inline: ["--name=value"], or ["-nvalue"] when the switch is a short one.
    - as_operand: bare ["value"] tokens, preceded by the separator when one is
      declared and at least one token is emitted.

    An empty string renders nothing unless allow_empty is set. Repeatable
    values render once per element (empty strings included); a scalar given to
    a repeatable value renders once; a list given to a non-repeatable value is
    rejected.
    """
    __introspectable__ = (
        "names",
        "inline",
        "repeatable",
        "allow_empty",
        "as_operand",
        "separator",
        "args_override",
        "required",
        "allow_nil",
        "type",
        "validator",
    )

    def __new__(
            cls,
            names,
            /,
            inline=False,
            repeatable=False,
            allow_empty=False,
            type=Unset,
            as_operand=False,
            separator=Unset,
            required=False,
            allow_nil=True,
            args_override=Unset,
            validator=Unset
    ):
        metadata = {
            "names": names,
            "inline": bool(inline),
            "repeatable": bool(repeatable),
            "allow_empty": bool(allow_empty),
            "as_operand": bool(as_operand),
            "separator": separator,
            "args_override": args_override,
            "required": required,
            "allow_nil": allow_nil,
            "type": type,
            "validator": validator,
        }
        _sanitize_names_metadata(cls, metadata)
        _sanitize_check_metadata(cls, metadata)
        _sanitize_override_metadata(cls, metadata)
        _sanitize_separator_metadata(cls, metadata)

        name = metadata["names"][0]
        if metadata["inline"] and metadata["as_operand"]:
            raise ModifierConflictError(f"inline and as_operand cannot both be true for :{name}")
        if metadata["separator"] is not None and not metadata["as_operand"]:
            raise ModifierConflictError(f"separator is only valid with as_operand=True for :{name}")

        return cls._construct(metadata)

    @property
    def switch(self):
        return self.args_override or switch(self.name)

    def __option__(self):
        return None if self.as_operand else self

    def __active__(self, value, /):
        return self.separator == "--" and bool(self._operands(value))

    def _values(self, value):
        if isinstance(value, list | tuple):
            if not self.repeatable:
                if self.as_operand:
                    raise OptionTypeError(f"value :{self.name} requires repeatable=True to accept a list")
                raise OptionTypeError(f"option :{self.name} requires repeatable=True to accept a list, got {value!r}")
            if any(element is None for element in value):
                raise NoneValueError(f"None values are not allowed in option :{self.name}")
            return list(value)
        if value == "" and not self.allow_empty:
            return []
        return [value]

    def _operands(self, value):
        if value is None:
            return []
        return list(map(str, self._values(value)))

    def render(self, value, /):
        if self.as_operand:
            if not (tokens := self._operands(value)):
                return []
            return [self.separator, *tokens] if self.separator is not None else tokens
        return _valued(self.switch, self._values(value), self.inline)


def _valued(token, values, inline, /):
    """
    Internal: render values attached to a switch, inline or as separate tokens.
    """
    tokens = []
    for value in values:
        if not inline:
            tokens.extend((token, str(value)))
        elif short(token):
            tokens.append(f"{token}{value}")
        else:
            tokens.append(f"{token}={value}")
    return tokens


class FlagOrValue(Entry, sealed=True):
    """
    Switch that optionally carries a value.

    True renders the switch; False renders nothing (or the "--no-" form when
    negatable); a string renders like a Value (an empty string renders nothing).
    Any other type is rejected.
    """
    __introspectable__ = (
        "names",
        "negatable",
        "inline",
        "args_override",
        "required",
        "allow_nil",
        "type",
        "validator",
    )

    def __new__(
            cls,
            names,
            /,
            negatable=False,
            inline=False,
            required=False,
            allow_nil=True,
            args_override=Unset,
            type=Unset,
            validator=Unset
    ):
        metadata = {
            "names": names,
            "negatable": bool(negatable),
            "inline": bool(inline),
            "args_override": args_override,
            "required": required,
            "allow_nil": allow_nil,
            "type": type,
            "validator": validator,
        }
        _sanitize_names_metadata(cls, metadata)
        _sanitize_check_metadata(cls, metadata)
        _sanitize_override_metadata(cls, metadata)
        return cls._construct(metadata)

    @property
    def switch(self):
        return self.args_override or switch(self.name)

    def __option__(self):
        return self

    def render(self, value, /):
        match value:
            case True:
                return [self.switch]
            case False:
                return [negation(self.switch)] if self.negatable else []
            case str():
                return _valued(self.switch, [value] if value else [], self.inline)
            case _:
                raise OptionTypeError(
                    f"invalid value for flag-or-value :{self.name}: {value!r} ({builtins.type(value).__name__}); "
                    f"expected True, False, or a str"
                )


class KeyValue(Entry, sealed=True):
    """
    Mapping rendered as repeated key/value switches.

    Accepted inputs
    - dict: one pair per item; a list value expands into one pair per element.
    - list of pairs: order is kept and duplicate keys are allowed; a one-element
      pair renders the key only.
    - a flat [key, value] list: a single pair.

    A None value renders the key alone, without the separator. Keys must be
    non-empty and cannot contain the separator; values must be scalars.
    """
    __introspectable__ = (
        "names",
        "flag_token",
        "key_separator",
        "inline",
        "as_operand",
        "required",
        "allow_nil",
    )

    def __new__(
            cls,
            names,
            flag_token=Unset,
            /,
            key_separator="=",
            inline=False,
            as_operand=False,
            required=False,
            allow_nil=True
    ):
        metadata = {
            "names": names,
            "flag_token": flag_token,
            "key_separator": key_separator,
            "inline": bool(inline),
            "as_operand": bool(as_operand),
            "required": required,
            "allow_nil": allow_nil,
            "type": Unset,
            "validator": Unset,
        }
        _sanitize_names_metadata(cls, metadata)
        _sanitize_check_metadata(cls, metadata)

        if not isinstance(token := metadata["flag_token"], str | Unset):
            raise TypeError(f"{cls.__typename__} 'flag_token' must be a string")
        elif isinstance(token, str) and not token:
            raise ValueError(f"{cls.__typename__} 'flag_token' cannot be empty")
        metadata["flag_token"] = coalesce(token, switch(metadata["names"][0]))

        if not isinstance(separator := metadata["key_separator"], str):
            raise TypeError(f"{cls.__typename__} 'key_separator' must be a string")
        elif not separator:
            raise ValueError(f"{cls.__typename__} 'key_separator' cannot be empty")

        if metadata["inline"] and metadata["as_operand"]:
            raise ModifierConflictError(f"inline and as_operand cannot both be true for :{metadata['names'][0]}")

        del metadata["type"], metadata["validator"]
        return cls._construct(metadata)

    def __option__(self):
        return None if self.as_operand else self

    def _scalar(self, value):
        if isinstance(value, list | tuple | Mapping):
            raise InvalidValueError(
                f"key_value :{self.name} value must be a scalar (str, int, None), got {builtins.type(value).__name__}"
            )
        return value

    def _pairs(self, value):
        if isinstance(value, Mapping):
            for key, object in value.items():
                if isinstance(object, list | tuple):
                    for element in object:
                        yield key, self._scalar(element)
                else:
                    yield key, self._scalar(object)
        elif isinstance(value, list | tuple):
            if all(isinstance(element, list | tuple) for element in value):
                for pair in value:
                    if len(pair) > 2:
                        raise InvalidValueError(f"key_value :{self.name} pair {list(pair)!r} has too many elements")
                    if not pair:
                        raise InvalidValueError(f"key_value :{self.name} requires a non-empty key")
                    key, object = (*pair, None)[:2]
                    yield key, self._scalar(object)
            elif len(value) <= 2:
                key, object = (*value, None)[:2]
                yield key, self._scalar(object)
            else:
                raise InvalidValueError("key_value array input must be a [key, value] pair or list of pairs")
        else:
            raise OptionTypeError(f"key_value option must be a dict or list, got {builtins.type(value).__name__}")

    def render(self, value, /):
        tokens = []
        for key, object in self._pairs(value):
            if key is None or key == "":
                raise InvalidValueError(f"key_value :{self.name} requires a non-empty key")
            if self.key_separator in (key := str(key)):
                raise InvalidValueError(
                    f"key_value :{self.name} key \"{key}\" cannot contain the separator \"{self.key_separator}\""
                )
            pair = key if object is None else f"{key}{self.key_separator}{object}"
            if self.as_operand:
                tokens.append(pair)
            elif self.inline:
                tokens.append(f"{self.flag_token}={pair}")
            else:
                tokens.extend((self.flag_token, pair))
        return tokens


class Operand(Entry, sealed=True):
    """
    Positional slot.

    Values are allocated by the binder: required slots first, then optional
    slots left to right, and whatever remains goes to the single repeatable
    slot. A separator (for example "--") is emitted before the operand's tokens
    when it renders at least one.
    """
    __introspectable__ = (
        "names",
        "required",
        "repeatable",
        "allow_nil",
        "default",
        "separator",
    )
    __displayable__ = (
        "name",
        "required",
        "repeatable",
        "allow_nil",
        "default",
        "separator",
    )

    def __new__(cls, name, /, required=False, repeatable=False, allow_nil=False, default=None, separator=Unset):
        metadata = {
            "names": name,
            "required": required,
            "repeatable": bool(repeatable),
            "allow_nil": allow_nil,
            "default": default,
            "separator": separator,
            "type": Unset,
            "validator": Unset,
        }
        _sanitize_names_metadata(cls, metadata)
        if len(metadata["names"]) != 1:
            raise TypeError(f"{cls.__typename__} cannot have aliases")
        _sanitize_check_metadata(cls, metadata)
        _sanitize_separator_metadata(cls, metadata)
        del metadata["type"], metadata["validator"]
        return cls._construct(metadata)

    @property
    def flexible(self):
        """
        Whether the slot may take zero values (optional or repeatable).
        """
        return self.repeatable or not self.required

    def __operand__(self):
        return self

    def __active__(self, value, /):
        return self.separator == "--" and bool(self._operands(value))

    def _operands(self, value):
        if self.repeatable:
            return list(map(str, coalesce(value, [])))
        return [] if value is None else [str(value)]

    def render(self, value, /):
        if not (tokens := self._operands(value)):
            return []
        return [self.separator, *tokens] if self.separator is not None else tokens


class Literal(Entry, sealed=True):
    """
    Fixed token, always emitted at its declaration position.
    """
    __introspectable__ = ("token",)

    def __new__(cls, token, /):
        if not isinstance(token, str):
            raise TypeError(f"{cls.__typename__} token must be a string")
        elif not token:
            raise ValueError(f"{cls.__typename__} token cannot be empty")
        return cls._construct({"token": token})

    def __boundary__(self):
        return self.token == "--"

    def __active__(self, value, /):
        return self.token == "--"

    def render(self, value=None, /):
        return [self.token]


class Custom(Entry, sealed=True):
    """
    Entry rendered by a user encoder.

    The encoder receives the resolved (non-None) value and returns None, a
    string, or a list/tuple of tokens; tokens are converted with str(). Calling
    the entry forwards to the encoder.
    """
    __introspectable__ = (
        "names",
        "encoder",
        "required",
        "allow_nil",
        "type",
        "validator",
    )

    def __new__(cls, names, encoder, /, required=False, allow_nil=True, type=Unset, validator=Unset):
        metadata = {
            "names": names,
            "encoder": encoder,
            "required": required,
            "allow_nil": allow_nil,
            "type": type,
            "validator": validator,
        }
        _sanitize_names_metadata(cls, metadata)
        _sanitize_check_metadata(cls, metadata)
        if not callable(metadata["encoder"]):
            raise TypeError(f"{cls.__typename__} encoder must be callable")
        return cls._construct(metadata)

    def __call__(self, value, /):
        return self._encoder(value)

    def __option__(self):
        return self

    def render(self, value, /):
        match result := self(value):
            case None:
                return []
            case str():
                return [result]
            case list() | tuple():
                return list(map(str, result))
            case _:
                raise OptionTypeError(
                    f"custom :{self.name} encoder must return a str, a list, or None, got {builtins.type(result).__name__}"
                )


class ExecutionOption(Entry, sealed=True):
    """
    Named value handed to the executor (timeout, stdin, ...), never rendered.
    """
    __introspectable__ = (
        "names",
        "required",
        "allow_nil",
        "type",
        "validator",
    )

    def __new__(cls, names, /, required=False, allow_nil=True, type=Unset, validator=Unset):
        metadata = {
            "names": names,
            "required": required,
            "allow_nil": allow_nil,
            "type": type,
            "validator": validator,
        }
        _sanitize_names_metadata(cls, metadata)
        _sanitize_check_metadata(cls, metadata)
        return cls._construct(metadata)


__all__ = (
    # Public API surface for consumers of gitnaut.arguments.
    # These names are re-exported from the package __init__.

    # Classes (entries)
    "Entry",
    "Flag",
    "Value",
    "FlagOrValue",
    "KeyValue",
    "Operand",
    "Literal",
    "Custom",
    "ExecutionOption",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
