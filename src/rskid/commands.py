"""
Command line assembly for the delegated Rust tools.

Every builder in this module is a pure function that returns the shell
command text for one external tool invocation. Commands are assembled with
CommandLine, which checks the remaining capacity before each append and
raises CommandTooLongError rather than truncating.

Configured flag strings are appended verbatim since they usually hold
several arguments. File paths and project names are shell quoted.
"""

import pathlib
import shlex

from rskid.config import Config
from rskid.errors import CommandTooLongError
from rskid.options import EnvMode, Options

MAX_COMMAND_LENGTH = 2048
MAX_PATH_LENGTH = 1024

CARGO = "cargo"
RUSTC = "rustc"
EXPERIMENTAL_RUSTC = "rustcc"
DEFAULT_FORMAT_TARGET = "src/"


class CommandLine:
    """
    A bounded, space-separated command line.

    Empty parts are skipped so unset flag strings leave no stray spaces.
    """

    def __init__(self, name: str, max_length: int = MAX_COMMAND_LENGTH):
        self.name = name
        self.max_length = max_length
        self._parts: list[str] = []
        self._length = 0

    def append(self, *parts: str) -> "CommandLine":
        """
        Append parts, failing before anything is written if they do not fit.

        Raises:
            CommandTooLongError: If the result would exceed max_length.
        """
        parts = [p for p in parts if p]
        if not parts:
            return self
        added = sum(len(p) for p in parts) + len(parts)
        if not self._parts:
            # no leading separator
            added -= 1
        projected = self._length + added
        if projected > self.max_length:
            raise CommandTooLongError(self.name, projected, self.max_length)
        self._parts.extend(parts)
        self._length = projected
        return self

    def __len__(self) -> int:
        return self._length

    def __str__(self) -> str:
        return " ".join(self._parts)


def env_flags(
    options: Options, config: Config, env_mode: str, include_test: bool = False
) -> str:
    """
    Select the configured flag set for the environment mode.

    Release mode or the prod environment use the prod flags. The test flags only
    apply to cargo invocations. Unrecognized modes select nothing.
    """
    if options.release or env_mode == EnvMode.PROD:
        return config.env.prod_flags
    if env_mode == EnvMode.DEV:
        return config.env.dev_flags
    if include_test and env_mode == EnvMode.TEST:
        return config.env.test_flags
    return ""


def compiler(config: Config) -> str:
    if config.compiler.experimental:
        return EXPERIMENTAL_RUSTC
    return config.compiler.custom_path or RUSTC


def output_path(file: str, output_dir: str) -> str:
    """
    Derive the binary path for a source file.

    The directory and the last extension are stripped from the file name and the
    result is placed under output_dir, or the working directory when it is empty.

    Raises:
        CommandTooLongError: If the path exceeds MAX_PATH_LENGTH.
    """
    name = pathlib.PurePath(file).name
    stem, dot, _ = name.rpartition(".")
    if dot:
        name = stem
    path = f"{output_dir or '.'}/{name}"
    if len(path) > MAX_PATH_LENGTH:
        raise CommandTooLongError("Output path", len(path), MAX_PATH_LENGTH)
    return path


def compile_command(options: Options, config: Config, env_mode: str) -> str:
    """
    Build the direct compiler invocation for a loose source file.

    Order: compiler and its flags, environment flags, target triple, then
    `-o <output> <file>`.
    """
    cmd = CommandLine("Compile command")
    cmd.append(compiler(config), config.compiler.flags)
    cmd.append(env_flags(options, config, env_mode))
    if config.compiler.target:
        cmd.append("--target", config.compiler.target)
    binary = output_path(options.file, config.binary.output_dir)
    cmd.append("-o", shlex.quote(binary), shlex.quote(options.file))
    return str(cmd)


def cargo_command(
    subcommand: str, options: Options, config: Config, env_mode: str
) -> str:
    """Build a `cargo <subcommand>` invocation with environment and verbosity flags."""
    cmd = CommandLine("Cargo command")
    cmd.append(CARGO, subcommand)
    cmd.append(env_flags(options, config, env_mode, include_test=True))
    if options.verbose:
        cmd.append("--verbose")
    return str(cmd)


def format_command(options: Options, config: Config) -> str:
    cmd = CommandLine("Format command")
    cmd.append(config.fmt.formatter, config.fmt.formatter_flags)
    cmd.append(shlex.quote(options.file) if options.file else DEFAULT_FORMAT_TARGET)
    return str(cmd)


def lint_command(config: Config) -> str:
    return str(CommandLine("Clippy command").append(CARGO, "clippy", config.lint.clippy_flags))


def new_project_command(name: str) -> str:
    return str(CommandLine("Project name").append(CARGO, "new", shlex.quote(name)))


def init_project_command() -> str:
    return f"{CARGO} init"


def run_binary_command(binary: str) -> str:
    """Return the command that executes a compiled binary."""
    if not pathlib.PurePath(binary).is_absolute() and not binary.startswith(
        ("./", "../")
    ):
        binary = f"./{binary}"
    return str(CommandLine("Run command").append(shlex.quote(binary)))
