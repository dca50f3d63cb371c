"""
Cargo project detection and scaffolding.

A directory is a Cargo project when it holds a Cargo.toml manifest. The
`init`/`create` subcommands delegate project creation to cargo and then
scaffold a default rskid configuration next to the manifest.
"""

import pathlib
from os import PathLike

import tomlkit

from rskid import commands, utils
from rskid.config import DEFAULT_CONFIG_NAME, Config, ProjectSection, create_default_config
from rskid.errors import CommandTooLongError, ConfigWriteError
from rskid.utils import ShellRunner, logger

LOG = logger(__file__)

CARGO_MANIFEST_NAME = "Cargo.toml"
CURRENT_DIR = "."
FAILURE = 1


def is_cargo_project(cwd: PathLike | str | None = None) -> bool:
    """Return True if the directory holds a Cargo.toml manifest."""
    return (pathlib.Path(cwd or CURRENT_DIR) / CARGO_MANIFEST_NAME).exists()


def cargo_package(cwd: PathLike | str | None = None) -> tuple[str, str] | None:
    """
    Read the package name and version from the Cargo manifest.

    Returns:
        A (name, version) tuple, or None if there is no readable manifest or it
        declares no package.
    """
    manifest = pathlib.Path(cwd or CURRENT_DIR) / CARGO_MANIFEST_NAME
    if not manifest.is_file():
        return None
    doc = utils.run_catching(lambda: tomlkit.parse(manifest.read_text()))
    package = doc.get("package") if doc else None
    if not package or "name" not in package:
        return None
    version = package.get("version", "")
    # workspace inherited versions are tables
    return str(package["name"]), (version if isinstance(version, str) else "")


def _scaffold_config(path: pathlib.Path, config: Config | None = None) -> int:
    try:
        create_default_config(path, config)
    except ConfigWriteError:
        return FAILURE
    return 0


def init_project(runner: ShellRunner, cwd: PathLike | str | None = None) -> int:
    """
    Initialize the current directory as a Cargo project with a default config.

    `cargo init` is skipped when a manifest already exists and an existing
    config file is left untouched.
    """
    directory = pathlib.Path(cwd or CURRENT_DIR)
    LOG.info("Initializing rskid project in current directory...")
    if not is_cargo_project(directory):
        result = runner.run(commands.init_project_command(), verbose=True)
        if result != 0:
            LOG.error("Failed to initialize Cargo project")
            return result

    config_file = directory / DEFAULT_CONFIG_NAME
    if config_file.exists():
        LOG.info(f"Configuration file {DEFAULT_CONFIG_NAME} already exists")
        return 0
    return _scaffold_config(config_file)


def create_project(
    name: str, runner: ShellRunner, cwd: PathLike | str | None = None
) -> int:
    """
    Create a project for the `init`/`create` subcommands.

    A name of "." initializes the current directory. Any other name is handed to
    `cargo new` and, only when that succeeds, a config file naming the project
    is written inside the new directory.

    Returns:
        The exit status of the delegated cargo call, or 1 if the command could
        not be built or the config could not be written.
    """
    if name == CURRENT_DIR:
        return init_project(runner, cwd)

    try:
        command = commands.new_project_command(name)
    except CommandTooLongError as e:
        LOG.error(e)
        return FAILURE
    result = runner.run(command, verbose=True)
    if result != 0:
        return result

    project_dir = pathlib.Path(cwd or CURRENT_DIR) / name
    config = Config(project=ProjectSection(name=pathlib.PurePath(name).name))
    return _scaffold_config(project_dir / DEFAULT_CONFIG_NAME, config)
