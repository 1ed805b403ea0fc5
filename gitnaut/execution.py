"""
Gitnaut execution: run git as a subprocess and describe the outcome.

Scope
- CommandLineResult: read-only record of one finished process (argv, exit
  status, captured output, whether it was killed by the timeout).
- ExecutionContext: repository-bound runner. Every call builds
      [binary, --git-dir=..., --work-tree=..., *global_options, *args]
  runs it with the process environment plus the configured overrides, and
  raises a CommandLineError subclass on failure.

Failure mapping
- spawn failure (missing binary, bad cwd): ProcessIOError
- killed by the timeout: TimedOutError
- killed by a signal: SignaledError
- non-zero exit: FailedError (only when raise_on_failure is true)

Logging
- INFO "%s finished: %s" once per command, DEBUG with the captured
  output. Handlers are left to the host application.
"""
import logging
import os
import subprocess

from . import config as configuration
from .faults import *
from .utils import *

logger = logging.getLogger(__name__)


def _chomp(output, /):
    """
    Internal: remove one trailing line terminator ("\\r\\n", "\\n" or "\\r").
    """
    newline, carriage = ("\n", "\r") if isinstance(output, str) else (b"\n", b"\r")
    if output.endswith(carriage + newline):
        return output[:-2]
    if output.endswith(newline) or output.endswith(carriage):
        return output[:-1]
    return output


class CommandLineResult:
    """
    Outcome of one git process.

    Properties
    - command: argv as a tuple of strings.
    - status: exit status; negative values are the signal that killed the process.
    - stdout/stderr: captured output (str when normalized, bytes otherwise;
      stderr is empty when merged into stdout).
    - timed_out: whether the process was killed because it exceeded its timeout.
    """
    __introspectable__ = ("command", "status", "stdout", "stderr", "timed_out")

    def __new__(cls, command, status, stdout, stderr, timed_out=False):
        self = super().__new__(cls)
        self._command = tuple(command)
        self._status = status
        self._stdout = stdout
        self._stderr = stderr
        self._timed_out = bool(timed_out)
        return self

    command = property(lambda self: self._command)
    status = property(lambda self: self._status)
    stdout = property(lambda self: self._stdout)
    stderr = property(lambda self: self._stderr)
    timed_out = property(lambda self: self._timed_out)

    @property
    def signaled(self):
        return self._timed_out or self._status < 0

    @property
    def success(self):
        return self._status == 0 and not self._timed_out

    def describe(self):
        """
        Human-readable status ("exit 1", "signal 9").
        """
        if self._status < 0:
            return f"signal {-self._status}"
        return f"exit {self._status}"

    def __repr__(self):
        return f"command-line-result({", ".join(f"{name}={getattr(self, name)!r}" for name in type(self).__introspectable__)})"

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)


class ExecutionContext:
    """
    Runs git commands for one repository.

    Parameters left Unset fall back to the process-wide configuration at call
    time (see gitnaut.config): binary, global_options, timeout and env.
    git_dir, work_tree and index_file are exported as GIT_DIR, GIT_WORK_TREE and
    GIT_INDEX_FILE; git_dir and work_tree are also passed as global switches.
    """
    __introspectable__ = ("binary", "cwd", "git_dir", "work_tree", "index_file", "env", "global_options", "timeout")

    binary = mirror("binary")
    cwd = mirror("cwd")
    git_dir = mirror("git_dir")
    work_tree = mirror("work_tree")
    index_file = mirror("index_file")
    env = mirror("env")
    global_options = mirror("global_options")
    timeout = mirror("timeout")

    def __new__(
            cls,
            binary=Unset,
            /,
            cwd=Unset,
            git_dir=Unset,
            work_tree=Unset,
            index_file=Unset,
            env=Unset,
            global_options=Unset,
            timeout=Unset
    ):
        if not isinstance(binary, str | Unset):
            raise TypeError(f"{cls.__name__} 'binary' must be a string")
        for name, value in (("cwd", cwd), ("git_dir", git_dir), ("work_tree", work_tree), ("index_file", index_file)):
            if not isinstance(value, str | os.PathLike | Unset):
                raise TypeError(f"{cls.__name__} {name!r} must be a path")
        if isinstance(global_options, str):
            raise TypeError(f"{cls.__name__} 'global_options' must be an iterable of strings")

        self = super().__new__(cls)
        self._binary = binary
        self._cwd = coalesce(cwd)
        self._git_dir = coalesce(git_dir)
        self._work_tree = coalesce(work_tree)
        self._index_file = coalesce(index_file)
        self._env = dict(coalesce(env, {}))
        self._global_options = global_options if global_options is Unset else tuple(global_options)
        self._timeout = timeout
        return self

    def argv(self, *args):
        """
        Build the full argv for args (without running anything).

        Raises
        - TypeError: when an argument is a list or tuple (splat bound tokens instead).
        """
        if any(isinstance(arg, list | tuple) for arg in args):
            raise TypeError("command arguments cannot contain a list; unpack them instead")

        defaults = configuration.current()
        switches = []
        if self._git_dir is not None:
            switches.append(f"--git-dir={os.fspath(self._git_dir)}")
        if self._work_tree is not None:
            switches.append(f"--work-tree={os.fspath(self._work_tree)}")
        return [
            coalesce(self._binary, defaults.binary),
            *switches,
            *coalesce(self._global_options, defaults.global_options),
            *map(str, args),
        ]

    def environ(self):
        """
        Build the child environment: os.environ, then configured and context
        overrides (None removes a variable), then the repository variables.
        """
        defaults = configuration.current()
        environ = dict(os.environ)
        for overrides in (defaults.env, self._env):
            for name, value in overrides.items():
                if value is None:
                    environ.pop(name, None)
                else:
                    environ[name] = value
        for name, value in (
            ("GIT_DIR", self._git_dir),
            ("GIT_WORK_TREE", self._work_tree),
            ("GIT_INDEX_FILE", self._index_file),
            ("GIT_SSH", defaults.git_ssh),
        ):
            if value is not None:
                environ[name] = os.fspath(value)
        return environ

    def command(
            self,
            *args,
            stdin=None,
            chdir=Unset,
            timeout=Unset,
            normalize=True,
            chomp=True,
            merge=False,
            raise_on_failure=True
    ):
        """
        Run git with args and return its CommandLineResult.

        Parameters
        - stdin: None, str/bytes written to the process, or a readable file
          object (or descriptor) used as its standard input.
        - chdir: working directory for this call (defaults to the context cwd).
        - timeout: seconds before the process is killed (defaults to the context,
          then the configuration; None disables it).
        - normalize: decode output as UTF-8, replacing invalid bytes.
        - chomp: remove one trailing line terminator from the output.
        - merge: send stderr into stdout.
        - raise_on_failure: raise FailedError on a non-zero exit status.

        Raises
        - ProcessIOError, TimedOutError, SignaledError, FailedError.
        """
        argv = self.argv(*args)
        timeout = coalesce(timeout, coalesce(self._timeout, configuration.current().timeout))

        data = None
        if isinstance(stdin, str):
            stdin, data = subprocess.PIPE, stdin.encode()
        elif isinstance(stdin, bytes):
            stdin, data = subprocess.PIPE, stdin
        elif stdin is None:
            stdin = subprocess.DEVNULL

        try:
            process = subprocess.Popen(  # NOQA: S-603
                argv,
                stdin=stdin,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if merge else subprocess.PIPE,
                cwd=coalesce(chdir, self._cwd),
                env=self.environ(),
            )
        except OSError as error:
            raise ProcessIOError(f"failed to run {argv!r}: {error}") from error

        timed_out = False
        with process:
            try:
                stdout, stderr = process.communicate(data, timeout=timeout)
            except subprocess.TimeoutExpired:
                process.kill()
                stdout, stderr = process.communicate()
                timed_out = True

        stdout, stderr = stdout or b"", stderr or b""
        if normalize:
            stdout, stderr = stdout.decode("utf-8", errors="replace"), stderr.decode("utf-8", errors="replace")
        if chomp:
            stdout, stderr = _chomp(stdout), _chomp(stderr)

        result = CommandLineResult(argv, process.returncode, stdout, stderr, timed_out)
        logger.info("%s finished: %s", argv, result.describe())
        logger.debug("stdout:\n%r\nstderr:\n%r", stdout, stderr, extra={"argv": argv, "status": result.status})

        if timed_out:
            raise TimedOutError(result, timeout=timeout)
        if result.signaled:
            raise SignaledError(result)
        if raise_on_failure and not result.success:
            raise FailedError(result)
        return result

    def __repr__(self):
        return f"execution-context({", ".join(f"{name}={getattr(self, name)!r}" for name in type(self).__introspectable__)})"

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)


__all__ = (
    "CommandLineResult",
    "ExecutionContext",
)
