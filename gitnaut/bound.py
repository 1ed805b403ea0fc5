"""
Gitnaut bound arguments: the immutable outcome of one Arguments.bind() call.

Access patterns
- Tokens: bound.tokens (tuple), bound.to_token_array() (fresh list), or
  iteration/splatting: ["git", "commit", *bound].
- Canonical accessors: bound.force, bound.paths (aliases are not accessors).
- Item access: bound["force"] or bound["f"] (aliases resolve to the canonical
  entry); names the schema does not declare give None.
- bound.values: read-only mapping canonical name -> resolved value (defaults
  applied, absent flags False, other absent options None).
- bound.execution_options: read-only mapping of execution options bound to a
  non-None value.

Names shadowed by Bound's own members (values, tokens, ...) are reachable
through item access only.
"""
from types import MappingProxyType

from .utils import _immortalize


class Bound:
    """
    Read-only view over a validated and rendered call.
    """

    def __new__(cls, arguments, tokens, values, execution_options, /):
        self = super().__new__(cls)
        object.__setattr__(self, "_arguments", arguments)
        object.__setattr__(self, "_tokens", tuple(tokens))
        object.__setattr__(self, "_values", dict(values))
        object.__setattr__(self, "_execution_options", MappingProxyType(dict(execution_options)))
        return self

    @property
    def tokens(self):
        return self._tokens

    @property
    def values(self):
        return MappingProxyType({name: _immortalize(value) for name, value in self._values.items()})

    @property
    def execution_options(self):
        return self._execution_options

    def to_token_array(self):
        """
        Return the rendered tokens as a new list, safe to mutate.
        """
        return list(self._tokens)

    def __iter__(self):
        return iter(self._tokens)

    def __len__(self):
        return len(self._tokens)

    def __getitem__(self, name, /):
        if name not in self._arguments:
            return None
        return _immortalize(self._values.get(self._arguments[name].name))

    def __getattr__(self, name, /):
        if not name.startswith("_") and name in self._values:
            return _immortalize(self._values[name])
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__!r} object is read-only")

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__name__!r} object is read-only")

    def __eq__(self, other, /):
        if not isinstance(other, Bound):
            return NotImplemented
        return self._tokens == other._tokens and self._values == other._values

    __hash__ = None

    def __repr__(self):
        return f"bound(tokens={list(self._tokens)!r}, values={self._values!r})"

    def __rich_repr__(self):
        yield "tokens", list(self._tokens)
        yield "values", dict(self._values)
        if self._execution_options:
            yield "execution_options", dict(self._execution_options)


__all__ = (
    "Bound",
)
