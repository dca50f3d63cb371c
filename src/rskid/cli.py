"""
Main entry point for the rskid CLI.

The command line is declared as a single Typer command: the first positional
token selects the subcommand (run, build, test, fmt, doc, create/init, clean,
list or version; run when omitted) and the flags below tune how the delegated
Rust tools are invoked. Flags may appear before or after the subcommand.

-h/--help is handled after parsing so that `rskid build --help` can print the
help for build rather than the general help.
"""

import logging
import sys
from typing import Annotated, Optional, Sequence

import typer

from rskid import usage
from rskid.config import Config, resolve_config
from rskid.dispatcher import FAILURE, Dispatcher
from rskid.options import DEFAULT_COMMAND, EnvMode, Options
from rskid.utils import ShellRunner, logger, set_log_level

LOG = logger(__file__)

_ENV_MODE_KEY = "env_mode"
_VALUE_OPTIONS = frozenset(("-f", "--file", "--cfg"))

app = typer.Typer(add_completion=False)


def _env_mode_option(mode: EnvMode):
    """
    Return an option that selects an environment mode.

    Click processes the options in command line order, so when several modes are
    given the last one wins.
    """

    def _callback(ctx: typer.Context, value: bool):
        if value:
            ctx.meta[_ENV_MODE_KEY] = mode.value
        return value

    return typer.Option(
        f"--{mode.value}",
        callback=_callback,
        help=f"Use the {mode.value} environment flags",
    )


@app.command(
    context_settings={"help_option_names": [], "ignore_unknown_options": True}
)
def rskid(
    ctx: typer.Context,
    command: Annotated[
        Optional[str], typer.Argument(help="Subcommand to run (default: run)")
    ] = None,
    arguments: Annotated[
        list[str], typer.Argument(help="Subcommand arguments (init/create project name)")
    ] = None,
    help_: Annotated[
        bool, typer.Option("-h", "--help", help="Show help and exit")
    ] = False,
    file: Annotated[
        str, typer.Option("-f", "--file", help="Rust source file (optional for Cargo)")
    ] = "",
    run_after: Annotated[
        bool, typer.Option("-R", "--run", help="Run binary after build")
    ] = False,
    release: Annotated[
        bool, typer.Option("-r", "--release", help="Build in release mode")
    ] = False,
    skip: Annotated[
        bool, typer.Option("-s", "--skip", help="Skip compilation if binary exists")
    ] = False,
    save: Annotated[
        bool, typer.Option("-S", "--save", help="Save binary even if it exists")
    ] = False,
    auto_yes: Annotated[
        bool, typer.Option("-y", "--yes", help="Auto yes to all prompts")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("-v", "--verbose", help="Enable verbose logging")
    ] = False,
    very_verbose: Annotated[
        bool, typer.Option("-V", "--very-verbose", help="Enable debug logging")
    ] = False,
    use_config: Annotated[
        bool, typer.Option("-G", help="Use default .rskid.toml configuration")
    ] = False,
    config_path: Annotated[
        str, typer.Option("--cfg", help="Specify custom config path")
    ] = "",
    lint: Annotated[
        bool, typer.Option("--lint", help="Run cargo clippy after build")
    ] = False,
    format: Annotated[
        bool, typer.Option("--fmt", help="Format Rust code before build/run")
    ] = False,
    dev: Annotated[bool, _env_mode_option(EnvMode.DEV)] = False,
    prod: Annotated[bool, _env_mode_option(EnvMode.PROD)] = False,
    test: Annotated[bool, _env_mode_option(EnvMode.TEST)] = False,
):
    """
    rskid - a unified command-line interface for Rust development.
    """
    options = _options(ctx)
    raise typer.Exit(run(options, ShellRunner()))


def _token_after(argv: Sequence[str], command: str) -> str | None:
    """
    Return the raw command line token that directly follows the subcommand.

    Values of -f/--file and --cfg are skipped while searching, so `-f init`
    is not mistaken for the init subcommand.
    """
    expects_value = False
    for index, token in enumerate(argv):
        if expects_value:
            expects_value = False
        elif token in _VALUE_OPTIONS:
            expects_value = True
        elif token == command:
            return argv[index + 1] if index + 1 < len(argv) else None
    return None


def _options(ctx: typer.Context) -> Options:
    """
    Build the Options record from a parsed context.

    The raw command line, when passed as the context object, locates the token
    that follows the subcommand. Without it the first remaining positional is
    used instead.

    Prints help and exits with status 0 when -h/--help was given.
    """
    params = ctx.params
    tokens = list(params.get("arguments") or ())
    if params.get("command") is not None:
        tokens.insert(0, params["command"])
    # unknown flags are passed through as positionals
    while tokens and tokens[0].startswith("-"):
        LOG.warning(f"Ignoring unknown option: {tokens.pop(0)}")
    command = tokens.pop(0) if tokens else None

    if params.get("help_"):
        usage.print_command_help(command)
        raise typer.Exit(0)

    if command is None:
        command_argument = None
    elif ctx.obj is not None:
        command_argument = _token_after(ctx.obj, command)
    else:
        command_argument = tokens[0] if tokens else None

    config_path = params.get("config_path") or ""
    return Options(
        file=params.get("file") or "",
        run_after=params.get("run_after", False),
        release=params.get("release", False),
        skip=params.get("skip", False),
        save=params.get("save", False),
        auto_yes=params.get("auto_yes", False),
        verbose=params.get("verbose", False),
        very_verbose=params.get("very_verbose", False),
        use_config=params.get("use_config", False) or bool(config_path),
        config_path=config_path,
        lint=params.get("lint", False),
        format=params.get("format", False),
        env_mode=ctx.meta.get(_ENV_MODE_KEY),
        command=command or DEFAULT_COMMAND,
        arguments=tuple(tokens),
        command_argument=command_argument or "",
    )


def parse(args: Sequence[str]) -> Options:
    """
    Parse command line arguments into Options without dispatching.

    Raises:
        typer.TyperException: If a flag is missing its value.
        typer.Exit: After printing help for -h/--help.
    """
    args = list(args)
    command = typer.main.get_command(app)
    with command.make_context(usage.PROG, args, obj=tuple(args)) as ctx:
        return _options(ctx)


def _configure_logging(options: Options, config: Config | None = None):
    if options.very_verbose:
        set_log_level(logging.DEBUG)
    elif (
        config is not None
        and not config.features.enable_logging
        and not options.verbose
    ):
        set_log_level(logging.WARNING)


def run(
    options: Options, runner: ShellRunner | None = None, interactive: bool | None = None
) -> int:
    """
    Load the configuration for the options and dispatch the subcommand.

    Returns:
        The process exit status.
    """
    _configure_logging(options)
    config = resolve_config(options, interactive=interactive)
    _configure_logging(options, config)
    LOG.debug(f"Options: {options}")
    return Dispatcher(options, config, runner).dispatch()


def main(argv: Sequence[str] | None = None) -> int:
    """
    Execute the CLI and return the exit status.

    With no arguments at all the general help is printed and the status is 1.
    Usage errors such as a flag missing its value also return 1.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        usage.print_help()
        return FAILURE
    try:
        return (
            app(args, prog_name=usage.PROG, standalone_mode=False, obj=tuple(args))
            or 0
        )
    except typer.TyperException as e:
        typer.echo(f"Error: {e.format_message()}", err=True)
        return FAILURE
    except typer.Abort:
        typer.echo("Aborted!", err=True)
        return FAILURE


if __name__ == "__main__":
    sys.exit(main())
