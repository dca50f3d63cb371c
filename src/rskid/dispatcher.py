"""
Subcommand dispatch for rskid.

Each invocation runs exactly one subcommand to completion. Hooks, formatting
and linting around the primary step are observed and logged but never change
the reported status; the primary delegated command (or the loose-file compile)
decides the exit status.

Within a Cargo project build/run/test/doc/clean/list go through cargo. Outside
of one, build and run fall back to compiling a single source file with rustc.
"""

import pathlib
import shutil
from typing import Callable

import typer

from rskid import commands, project, usage
from rskid.config import Config
from rskid.errors import CommandTooLongError
from rskid.options import Options
from rskid.utils import ShellRunner, logger, run_catching

LOG = logger(__file__)

SUCCESS = 0
FAILURE = 1
BACKUP_SUFFIX = ".bak"


class Dispatcher:
    """
    Maps a subcommand name to its sequence of external tool invocations.

    Args:
        options: Parsed command line options.
        config: Loaded configuration, never modified.
        runner: Executes command lines and returns their exit status.
    """

    def __init__(
        self, options: Options, config: Config, runner: ShellRunner | None = None
    ):
        self.options = options
        self.config = config
        self.runner = runner or ShellRunner()
        self.env_mode = options.effective_env(config.env.default_env)
        self._handlers: dict[str, Callable[[], int]] = {
            "version": self.version,
            "init": self.init,
            "create": self.init,
            "clean": self.clean,
            "test": self.test,
            "fmt": self.fmt,
            "doc": self.doc,
            "list": self.list_binaries,
            "build": self.build,
            "run": self.build,
        }

    def dispatch(self) -> int:
        command = self.options.command
        handler = self._handlers.get(command)
        if handler is None:
            LOG.error(f"Unknown command: {command}")
            return FAILURE
        self._warn_ignored_arguments()
        return handler()

    def _warn_ignored_arguments(self):
        ignored = list(self.options.arguments)
        if (
            self.options.command in ("init", "create")
            and ignored
            and ignored[0] == self._project_name()
        ):
            ignored = ignored[1:]
        if ignored:
            LOG.warning(f"Ignoring arguments: {' '.join(ignored)}")

    def _execute(self, build: Callable[[], str], verbose: bool | None = None) -> int:
        """
        Build a command and run it.

        A command that cannot be built is reported and nothing is spawned.
        """
        try:
            command = build()
        except CommandTooLongError as e:
            LOG.error(f"Error: {e}")
            return FAILURE
        if verbose is None:
            verbose = self.options.echo_commands
        return self.runner.run(command, verbose=verbose)

    def _cargo(self, subcommand: str) -> int:
        return self._execute(
            lambda: commands.cargo_command(
                subcommand, self.options, self.config, self.env_mode
            )
        )

    def _hook(self, script: str, phase: str):
        if not script:
            return
        LOG.info(f"Running {phase} script...")
        result = self.runner.run(script, verbose=True)
        if result != 0:
            LOG.warning(f"{phase} script exited with status {result}")

    def version(self) -> int:
        typer.echo(usage.version_banner())
        self.runner.run("rustc --version")
        self.runner.run("cargo --version")
        if package := project.cargo_package():
            name, version = package
            typer.echo(f"project: {name} {version}".rstrip())
        return SUCCESS

    def _project_name(self) -> str:
        token = self.options.command_argument
        if token and not token.startswith("-"):
            return token
        return project.CURRENT_DIR

    def init(self) -> int:
        return project.create_project(self._project_name(), self.runner)

    def clean(self) -> int:
        return self._cargo("clean")

    def test(self) -> int:
        self._hook(self.config.custom.pre_test, "pre-test")
        result = self._cargo("test")
        self._hook(self.config.custom.post_test, "post-test")
        return result

    def fmt(self) -> int:
        return self._execute(
            lambda: commands.format_command(self.options, self.config),
            verbose=self.options.verbose,
        )

    def doc(self) -> int:
        return self._cargo("doc")

    def list_binaries(self) -> int:
        return self._cargo("run --bin")

    def build(self) -> int:
        """
        Run the build/run sequence: format, pre-build hook, the primary build,
        lint on success and the post-build hook.
        """
        if self.options.format or self.config.fmt.auto_format:
            self.fmt()

        self._hook(self.config.custom.pre_build, "pre-build")

        if project.is_cargo_project():
            result = self._cargo(self.options.command)
        else:
            result = self.compile()

        if (self.options.lint or self.config.lint.run_clippy) and result == 0:
            lint_result = self._execute(
                lambda: commands.lint_command(self.config),
                verbose=self.options.verbose,
            )
            if lint_result != 0:
                LOG.warning(f"clippy exited with status {lint_result}")

        self._hook(self.config.custom.post_build, "post-build")
        return result

    def compile(self) -> int:
        """
        Compile a single source file with rustc and optionally run the binary.
        """
        options = self.options
        if not options.file:
            LOG.error(
                f"No source file given and no {project.CARGO_MANIFEST_NAME} found "
                "(use -f <file>)"
            )
            return FAILURE
        try:
            command = commands.compile_command(options, self.config, self.env_mode)
            binary = commands.output_path(options.file, self.config.binary.output_dir)
        except CommandTooLongError as e:
            LOG.error(f"Error: {e}")
            return FAILURE

        output_dir = self.config.binary.output_dir
        if output_dir:
            run_catching(pathlib.Path(output_dir).mkdir, parents=True, exist_ok=True)

        binary_path = pathlib.Path(binary)
        if binary_path.exists() and self._skip_existing():
            LOG.info(f"Skipping compilation, binary exists: {binary}")
            result = SUCCESS
        else:
            if binary_path.exists():
                self._backup(binary_path)
            result = self.runner.run(command, verbose=options.echo_commands)

        if result == 0 and (options.run_after or self.config.features.run_on_save):
            self._execute(
                lambda: commands.run_binary_command(binary), verbose=options.verbose
            )
        return result

    def _skip_existing(self) -> bool:
        if self.options.save:
            return False
        return self.options.skip or self.config.binary.skip_existing

    def _backup(self, binary_path: pathlib.Path):
        binary = self.config.binary
        if binary.overwrite or not binary.save_backup:
            return
        backup_path = binary_path.with_name(binary_path.name + BACKUP_SUFFIX)
        if run_catching(shutil.copy2, binary_path, backup_path) is not None:
            LOG.debug(f"Saved backup binary: {backup_path}")
        else:
            LOG.warning(f"Could not back up binary: {binary_path}")
