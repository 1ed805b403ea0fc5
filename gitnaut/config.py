"""
Gitnaut process-wide configuration.

Scope
- Config: immutable record of execution defaults (git binary, timeout, GIT_SSH,
  global options and environment overrides).
- config: the current defaults, read by ExecutionContext at call time.
- configure(**overrides): validate overrides and replace the current defaults;
  parameters left Unset keep their current value.

Defaults
- binary: "git"
- timeout: None (no limit)
- git_ssh: None (inherit the environment)
- global_options: "-c core.quotePath=true" and every "-c color.*=false" switch,
  so git output stays machine-readable.
- env: {"LC_ALL": "en_US.UTF-8"}
"""
from types import MappingProxyType

from .utils import *

GLOBAL_OPTIONS = (
    "-c", "core.quotePath=true",
    "-c", "color.ui=false",
    "-c", "color.advice=false",
    "-c", "color.diff=false",
    "-c", "color.grep=false",
    "-c", "color.push=false",
    "-c", "color.remote=false",
    "-c", "color.showBranch=false",
    "-c", "color.status=false",
    "-c", "color.transport=false",
)

ENVIRONMENT = MappingProxyType({
    "LC_ALL": "en_US.UTF-8",
})


def _sanitize_config_metadata(cls, metadata, /):
    """
    Internal: validate and normalize configuration values in place.

    Raises
    - TypeError: on values of the wrong type.
    - ValueError: on an empty binary or a non-positive timeout.
    """
    if not isinstance(binary := metadata["binary"], str):
        raise TypeError(f"{cls.__name__.lower()} 'binary' must be a string")
    elif not binary.strip():
        raise ValueError(f"{cls.__name__.lower()} 'binary' cannot be empty")

    if not isinstance(timeout := metadata["timeout"], int | float | None) or isinstance(timeout, bool):
        raise TypeError(f"{cls.__name__.lower()} 'timeout' must be a number or None")
    elif timeout is not None and timeout <= 0:
        raise ValueError(f"{cls.__name__.lower()} 'timeout' must be positive")

    if not isinstance(metadata["git_ssh"], str | None):
        raise TypeError(f"{cls.__name__.lower()} 'git_ssh' must be a string or None")

    if isinstance(options := metadata["global_options"], str) or not all(isinstance(option, str) for option in options):
        raise TypeError(f"{cls.__name__.lower()} 'global_options' must be an iterable of strings")
    metadata["global_options"] = tuple(options)

    if not all(isinstance(key, str) and isinstance(value, str | None) for key, value in metadata["env"].items()):
        raise TypeError(f"{cls.__name__.lower()} 'env' must map strings to strings (or None to unset)")
    metadata["env"] = dict(metadata["env"])


class Config:
    """
    Immutable execution defaults.

    Properties (read-only, containers are returned as copies)
    - binary, timeout, git_ssh, global_options, env.

    env values of None remove the variable from the child environment.
    """
    __introspectable__ = ("binary", "timeout", "git_ssh", "global_options", "env")

    binary = mirror("binary")
    timeout = mirror("timeout")
    git_ssh = mirror("git_ssh")
    global_options = mirror("global_options")
    env = mirror("env")

    def __new__(cls, binary="git", timeout=None, git_ssh=None, global_options=GLOBAL_OPTIONS, env=ENVIRONMENT):
        metadata = {
            "binary": binary,
            "timeout": timeout,
            "git_ssh": git_ssh,
            "global_options": global_options,
            "env": env,
        }
        _sanitize_config_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, value in metadata.items():
            object.__setattr__(self, "_" + name, value)
        return self

    def replace(self, **overrides):
        """
        Return a new Config with the given fields replaced (Unset keeps the current value).
        """
        return type(self)(**{
            name: coalesce(overrides.pop(name, Unset), getattr(self, "_" + name))
            for name in type(self).__introspectable__
        } | overrides)

    __replace__ = replace

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__!r} object is immutable")

    def __repr__(self):
        return f"config({", ".join(f"{name}={getattr(self, name)!r}" for name in type(self).__introspectable__)})"

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)


config = Config()


def configure(*, binary=Unset, timeout=Unset, git_ssh=Unset, global_options=Unset, env=Unset):
    """
    Replace the process-wide defaults and return the new Config.

    Example
        >>> configure(binary="/usr/local/bin/git", timeout=30)
    """
    global config
    config = config.replace(binary=binary, timeout=timeout, git_ssh=git_ssh, global_options=global_options, env=env)
    return config


def current():
    """
    Return the current process-wide defaults.
    """
    return config


__all__ = (
    "Config",
    "GLOBAL_OPTIONS",
    "ENVIRONMENT",
    "configure",
    "current",
)
