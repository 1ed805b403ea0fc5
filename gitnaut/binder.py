"""
Gitnaut binder: validate a call against a schema and render its tokens.

Pipeline (each step raises a BindingError subclass and stops the bind)
 1. unsupported option names (all of them listed);
 2. a canonical name and its aliases supplied together;
 3. positional allocation (see _allocate);
 4. option-like operand values before an active '--' boundary;
 5. required options absent, then required options bound to None;
 6. type constraints;
 7. validators;
 8. conflict groups;
 9. rendering, in declaration order.

None always bypasses steps 6 and 7: allow_nil only governs step 5.

Positional allocation
- Operands split into a leading run of required slots, a flexible middle (from
  the first optional-or-repeatable slot to the last one) and a trailing run of
  required slots, like parameters of a function signature.
- Trailing required slots are filled first (right-aligned), then the leading
  ones; the middle receives what is left: required slots in it take one value
  each, optional slots take one value while there are more values than required
  slots, and the repeatable slot absorbs the rest.
- None in a single slot means "not provided": the default applies, or the
  required slot is reported missing unless it allows None.
"""
import itertools

from .arguments import *
from .bound import *
from .faults import *
from .utils import *


def _label(names, /, joiner=", "):
    return joiner.join(f":{name}" for name in names)


def _expand(values, /):
    """
    Internal: flatten list/tuple items handed to a repeatable operand.
    """
    return list(itertools.chain.from_iterable(
        value if isinstance(value, list | tuple) else (value,) for value in values
    ))


def _allocate(operands, positionals, /):
    """
    Internal: assign positional values to operand slots.

    Returns
    - dict: canonical operand name -> resolved value (lists for the repeatable slot).

    Raises
    - UnexpectedOperandsError: when non-None values are left over.
    - MissingOperandError: for the first required slot left without a value.
    - NoneValueError: for None mixed into the repeatable slot's values.
    """
    flexible = [index for index, operand in enumerate(operands) if operand.flexible]
    if flexible:
        leading, middle, trailing = (
            operands[:flexible[0]],
            operands[flexible[0]:flexible[-1] + 1],
            operands[flexible[-1] + 1:],
        )
    else:
        leading, middle, trailing = operands, [], []

    count = len(positionals)
    trailing_take = min(count, len(trailing))
    leading_take = min(count - trailing_take, len(leading))

    taken = {}
    for operand, value in zip(leading, positionals[:leading_take]):
        taken[operand.name] = (value,)
    for operand, value in zip(trailing[len(trailing) - trailing_take:], positionals[count - trailing_take:]):
        taken[operand.name] = (value,)

    remaining = list(positionals[leading_take:count - trailing_take])
    required = sum(1 for operand in middle if not operand.flexible)
    optional = sum(1 for operand in middle if not operand.required and not operand.repeatable)
    extra = max(len(remaining) - required, 0)
    optional_take = min(extra, optional)
    repeatable_take = extra - optional_take

    for operand in middle:
        if operand.repeatable:
            taken[operand.name], remaining = tuple(remaining[:repeatable_take]), remaining[repeatable_take:]
        elif operand.required:
            if remaining:
                taken[operand.name], remaining = (remaining[0],), remaining[1:]
        elif optional_take:
            taken[operand.name], remaining = (remaining[0],), remaining[1:]
            optional_take -= 1

    # Leftovers are named from the end of the call.
    if excess := sum(1 for value in remaining if value is not None):
        unexpected = [value for value in positionals if value is not None][-excess:]
        raise UnexpectedOperandsError(f"Unexpected positional arguments: {", ".join(map(str, unexpected))}")

    resolved = {}
    for operand in operands:
        values = taken.get(operand.name, ())
        if operand.repeatable:
            values = _expand(values)
            if all(value is None for value in values):
                if operand.required:
                    raise MissingOperandError(f"at least one value is required for {operand.name}")
                resolved[operand.name] = [] if operand.default is None else _expand([operand.default])
                continue
            if any(value is None for value in values):
                raise NoneValueError(f"None values are not allowed in repeatable positional argument: {operand.name}")
            resolved[operand.name] = values
        elif values and (values[0] is not None or operand.required and operand.allow_nil):
            resolved[operand.name] = values[0]
        elif operand.required:
            raise MissingOperandError(f"{operand.name} is required")
        else:
            resolved[operand.name] = operand.default
    return resolved


def _check(entries, options, /):
    """
    Internal: steps 5 to 7 of the pipeline over the named, non-operand entries.
    """
    if missing := [entry.name for entry in entries if entry.required and entry.name not in options]:
        raise MissingOptionsError(f"Required options not provided: {_label(missing)}")
    if nones := [
        entry.name for entry in entries
        if entry.required and not entry.allow_nil and entry.name in options and options[entry.name] is None
    ]:
        raise NoneOptionsError(f"Required options cannot be nil: {_label(nones)}")

    for entry in entries:
        if (value := options.get(entry.name)) is None or not entry.type:
            continue
        if not isinstance(value, tuple(entry.type)):
            raise OptionTypeError(
                f"The :{entry.name} option must be a {" or ".join(kind.__name__ for kind in entry.type)}, "
                f"but was a {type(value).__name__}"
            )

    for entry in entries:
        if (value := options.get(entry.name)) is None or entry.validator is None:
            continue
        if isinstance(result := entry.validator(value), str):
            raise InvalidValueError(result)
        if not result:
            raise InvalidValueError(f"Invalid value for option: {entry.name}")


def _scan(entries, operands, options, /):
    """
    Internal: reject option-like operand values that git would parse as options.

    Values are checked until the first '--' boundary that actually renders: a
    literal '--', or an operand/value with separator '--' and at least one value
    (its own values are already protected).
    """
    for entry in entries:
        value = operands.get(entry.name) if isinstance(entry, Operand) else options.get(entry.name)
        if entry.__active__(value):
            return
        if not isinstance(entry, Operand):
            continue
        if entry.repeatable:
            if offending := [item for item in value if isinstance(item, str) and item.startswith("-")]:
                raise OptionLikeOperandError(
                    f"operand :{entry.name} contains option-like values: {", ".join(f"'{item}'" for item in offending)}"
                )
        elif isinstance(value, str) and value.startswith("-"):
            raise OptionLikeOperandError(f"operand :{entry.name} value '{value}' looks like a command-line option")


def bind(arguments, positionals, options, /):
    """
    Validate (positionals, options) against arguments and build a Bound.
    """
    entries = list(arguments)
    named = [entry for entry in entries if entry.names and not isinstance(entry, Operand)]

    if unsupported := [
        name for name in options
        if name not in arguments or isinstance(arguments[name], Operand)
    ]:
        raise UnsupportedOptionsError(f"Unsupported options: {_label(unsupported)}")

    for entry in named:
        if len(provided := [name for name in entry.names if name in options]) > 1:
            raise ConflictingAliasesError(f"Conflicting options: {_label(provided, " and ")}")

    options = {arguments[name].name: value for name, value in options.items()}
    operands = _allocate([entry for entry in entries if isinstance(entry, Operand)], list(positionals))
    _scan(entries, operands, options)

    _check(named, options)

    for group in arguments.conflicts:
        if len(provided := [name for name in group if options.get(name) is not None and options[name] is not False]) > 1:
            raise ConflictingOptionsError(f"cannot specify {_label(provided[:2], " and ")}")

    tokens = []
    for entry in entries:
        if isinstance(entry, Operand):
            tokens.extend(entry.render(operands[entry.name]))
        elif isinstance(entry, Literal):
            tokens.extend(entry.render())
        elif (value := options.get(entry.name)) is not None:
            tokens.extend(entry.render(value))

    values = {}
    for entry in entries:
        if isinstance(entry, Operand):
            values[entry.name] = operands[entry.name]
        elif entry.names:
            values[entry.name] = options.get(entry.name, False if isinstance(entry, Flag) else None)

    return Bound(arguments, tokens, values, {
        entry.name: options[entry.name] for entry in entries
        if isinstance(entry, ExecutionOption) and options.get(entry.name) is not None
    })


__all__ = (
    "bind",
)
