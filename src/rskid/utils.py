"""
General utility functions for rskid.

This module provides common functionality used across the wrapper including:
- Logging configuration with stdout/stderr separation
- Exception-suppressing calls for best-effort operations
- Nested mapping assignment used by the configuration loader
- Shell execution of assembled command lines

The logger function configures logging with INFO to stdout and WARNING+ to stderr,
respecting the LOG_LEVEL environment variable.
"""

import functools
import logging
import os
import pathlib
import signal
import subprocess
import sys
from typing import Any, Callable, MutableMapping, TextIO, TypeVar

T = TypeVar("T")


def logger(name: str | None = None, validate_name: bool = True) -> logging.Logger:
    """
    Get a configured logger instance.

    Configures a logger with stdout for INFO and stderr for WARNING and above.
    The log level can be controlled via the LOG_LEVEL environment variable.

    Args:
        name: Name of the logger. Defaults to the current directory name.
              If a file path is given, the stem of the file is used.
        validate_name: Whether to validate and potentially shorten the logger name.

    Returns:
        A configured logging.Logger instance.
    """
    _configure_root_logger()
    if not name:
        name = pathlib.Path.cwd().name
    elif validate_name:
        name_file = run_catching(pathlib.Path, name)
        if name_file and name_file.is_file():
            name = name_file.stem
    return logging.getLogger(name)


@functools.cache
def _configure_root_logger():
    """
    Configure the root logger with stdout and stderr handlers.

    Logs up to INFO level are directed to stdout as plain messages, while
    WARNING and above are directed to stderr with timestamps.
    """

    def _create_handler(
        stream: TextIO,
        level: int,
        format: str,
        filter_fn: Callable[[logging.LogRecord], bool] | None = None,
    ) -> logging.Handler:
        """Create a stream handler with an optional filter."""
        handler = logging.StreamHandler(stream)  # type: ignore[arg-type]
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(format, datefmt="%Y-%m-%d %H:%M:%S"))
        if filter_fn is not None:
            handler.addFilter(filter_fn)
        return handler

    handlers = [
        _create_handler(
            sys.stdout,
            logging.DEBUG,
            "%(message)s",
            lambda record: record.levelno <= logging.INFO,
        ),
        _create_handler(
            sys.stderr,
            logging.WARNING,
            "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
            lambda record: record.levelno > logging.INFO,
        ),
    ]

    logging.basicConfig(level=_env_log_level(), handlers=handlers)


def _env_log_level() -> int:
    log_level_env = os.getenv("LOG_LEVEL", "").upper()
    return logging.getLevelNamesMapping().get(log_level_env, logging.INFO)


def set_log_level(level: int | None = None):
    """
    Adjust the root log level after startup.

    Passing None restores the level derived from LOG_LEVEL.
    """
    _configure_root_logger()
    logging.getLogger().setLevel(_env_log_level() if level is None else level)


def _logger():
    """Get the internal utils logger for debug output."""
    return logger("utils", validate_name=False)


def _run_catching_handler(e: Exception, message: str = None) -> T:
    """Default handler for run_catching that logs errors at DEBUG level."""
    _logger().debug("%s: %s", message or "Exception suppressed", e)
    return None


def run_catching(
    fn: Callable[..., T],
    *args: Any,
    exception_handler: Callable[[Exception], T] | None = _run_catching_handler,
    **kwargs: Any,
) -> T:
    """
    Execute a function and catch exceptions with a handler.

    Simplifies error handling for operations where a failure should not stop
    execution, such as creating the binary output directory or reading an
    optional manifest.

    Args:
        fn: Function to call.
        *args: Positional arguments for the function.
        exception_handler: Callback to handle exceptions. Defaults to logging and returning None.
        **kwargs: Keyword arguments for the function.

    Returns:
        The function result, or the result of the exception handler on failure.
    """
    try:
        return fn(*args, **kwargs)
    except Exception as e:
        if exception_handler is not None:
            return exception_handler(e)


def mapping_set(data: MutableMapping, *path: str, value: Any) -> bool:
    """
    Set a value in a nested dictionary using a path of keys.

    Creates intermediate dictionaries as needed.

    Args:
        data: Dictionary or mutable mapping to modify.
        *path: Sequence of keys to traverse, where the last key is the target.
        value: Value to set at the path.

    Returns:
        True if the mapping was modified, False if the value was already the same.

    Example:
        d = {}
        mapping_set(d, "compiler", "flags", value="-O")
        # d is now {"compiler": {"flags": "-O"}}
    """
    if path:
        current_data: MutableMapping = data
        for key in path[:-1]:
            next_value = current_data.get(key, None)
            if not isinstance(next_value, MutableMapping):
                next_value = {}
                current_data[key] = next_value
            current_data = next_value
        key = path[-1]
        if key in current_data and current_data[key] == value:
            return False
        current_data[key] = value
        return True
    return False


def exit_status(returncode: int) -> int:
    """
    Normalize a subprocess return code into a process exit status.

    Children killed by a signal report a negative return code; these map to
    the shell convention of 128 + signal number.
    """
    if returncode < 0:
        return 128 + abs(returncode)
    return returncode


class ShellRunner:
    """
    Runs assembled command lines through the host shell.

    Each call blocks until the child exits. Output streams are inherited so
    the delegated tool writes straight to the terminal.
    """

    def __init__(self, cwd: os.PathLike | str | None = None):
        self.cwd = cwd

    def run(self, command: str, verbose: bool = False) -> int:
        log = logger("shell", validate_name=False)
        log.log(logging.INFO if verbose else logging.DEBUG, "Executing: %s", command)
        try:
            proc = subprocess.run(command, shell=True, cwd=self.cwd)
        except KeyboardInterrupt:
            return 128 + signal.SIGINT
        return exit_status(proc.returncode)
